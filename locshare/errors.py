"""
Error taxonomy for the location sharing pipeline
"""
from typing import Optional


class LocshareError(Exception):
    """Base class for every pipeline and store error"""


class PermissionDenied(LocshareError):
    """The user declined to share a position"""


class AcquisitionTimeout(LocshareError):
    """No position fix arrived within the allowed interval"""


class EnrichmentFailure(LocshareError):
    """A best-effort lookup failed; callers substitute a fallback value"""


class SubmissionFailure(LocshareError):
    """The single POST of a capture payload failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationFailure(LocshareError):
    """A record is missing required numeric coordinates"""


class NotFound(LocshareError):
    """No record matches the requested identifier"""


class StoreUnavailable(LocshareError):
    """The document store could not be reached or an operation failed"""
