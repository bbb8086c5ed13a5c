"""
Data models for Locshare
"""
from .capture import CapturePayload, Enrichment, Position
from .location import ApiResponse, LocationCreate, LocationRecord

__all__ = [
    "ApiResponse",
    "CapturePayload",
    "Enrichment",
    "LocationCreate",
    "LocationRecord",
    "Position",
]
