"""
Location record models
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # the driver hands back naive datetimes unless tz_aware is set
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LocationCreate(BaseModel):
    """Request body for creating a capture record"""
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)
    address: Optional[str] = None
    ip: Optional[str] = None
    userAgent: Optional[str] = None
    sessionId: Optional[str] = None
    deviceInfo: Optional[Dict[str, Any]] = None


class LocationRecord(BaseModel):
    """Capture record as stored and returned by the API"""
    id: str
    latitude: float
    longitude: float
    address: str = ""
    ip: str = "Unknown"
    userAgent: str = ""
    timestamp: datetime
    sessionId: str = ""
    deviceInfo: Dict[str, Any] = Field(default_factory=dict)
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "LocationRecord":
        """Build a record from a raw store document"""
        return cls(
            id=str(doc["_id"]),
            latitude=doc["latitude"],
            longitude=doc["longitude"],
            address=doc.get("address", ""),
            ip=doc.get("ip", "Unknown"),
            userAgent=doc.get("userAgent", ""),
            timestamp=_as_utc(doc["timestamp"]),
            sessionId=doc.get("sessionId", ""),
            deviceInfo=doc.get("deviceInfo") or {},
            createdAt=_as_utc(doc["createdAt"]),
            updatedAt=_as_utc(doc["updatedAt"]),
        )


class ApiResponse(BaseModel):
    """Envelope shared by every endpoint"""
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    count: Optional[int] = None
    error: Optional[str] = None
    collection: Optional[str] = None
    timestamp: Optional[datetime] = None
