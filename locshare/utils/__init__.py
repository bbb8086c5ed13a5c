"""
Utility modules for Locshare
"""
from .database import ConnectionHandle, DatabaseService
from .geolocation import GeolocationService
from .log_config import configure_logging

__all__ = [
    "ConnectionHandle",
    "DatabaseService",
    "GeolocationService",
    "configure_logging",
]
