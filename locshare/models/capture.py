"""
Client-side capture models
"""
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Position(BaseModel):
    """A single coordinate fix"""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None  # meters
    captured_at: datetime = Field(default_factory=_utcnow)


class Enrichment(BaseModel):
    """Best-effort lookups attached to a position"""
    address: str
    ip: str


class CapturePayload(BaseModel):
    """Payload posted to the location endpoint"""
    latitude: float
    longitude: float
    address: str
    ip: str
    userAgent: str
    timestamp: datetime
    sessionId: str
    deviceInfo: Dict[str, Any] = Field(default_factory=dict)
