"""
Capture payload assembly
"""
import locale
import platform
import random
import shutil
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from locshare import __version__
from locshare.models import CapturePayload, Enrichment, Position

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_session_id(now: Optional[float] = None) -> str:
    """Millisecond timestamp followed by a short random suffix

    A loose correlation tag only; two calls can collide.
    """
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=9))
    return f"{millis}{suffix}"


def default_user_agent() -> str:
    return f"locshare/{__version__} ({platform.system()} {platform.release()}) python-requests/{requests.__version__}"


def collect_device_info(cookie_enabled: bool = True) -> Dict[str, Any]:
    """Describe the device running the client"""
    size = shutil.get_terminal_size()
    language = locale.getlocale()[0] or ""
    return {
        "viewport": {"width": size.columns, "height": size.lines},
        "language": language.replace("_", "-"),
        "platform": platform.platform(),
        "cookieEnabled": cookie_enabled,
    }


def build_capture_payload(
    position: Position,
    enrichment: Enrichment,
    device_info: Optional[Dict[str, Any]] = None,
    user_agent: Optional[str] = None,
    session_id: Optional[str] = None,
) -> CapturePayload:
    return CapturePayload(
        latitude=position.latitude,
        longitude=position.longitude,
        address=enrichment.address,
        ip=enrichment.ip,
        userAgent=user_agent if user_agent is not None else default_user_agent(),
        timestamp=datetime.now(timezone.utc),
        sessionId=session_id or generate_session_id(),
        deviceInfo=device_info if device_info is not None else collect_device_info(),
    )
