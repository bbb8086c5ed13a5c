"""
Single-shot submission of capture payloads
"""
import logging
from typing import Any, Dict

import requests

from locshare.errors import SubmissionFailure
from locshare.models import CapturePayload

logger = logging.getLogger(__name__)


class SubmissionClient:
    """POSTs a payload exactly once; failures are raised, never retried"""

    def __init__(self, endpoint_url: str, session: requests.Session = None):
        self.endpoint_url = endpoint_url
        self.session = session or requests.Session()

    def submit(self, payload: CapturePayload) -> Dict[str, Any]:
        body = payload.model_dump(mode="json")
        logger.info("Sending location data to %s", self.endpoint_url)
        try:
            resp = self.session.post(self.endpoint_url, json=body)
        except requests.RequestException as e:
            raise SubmissionFailure(f"Network error: {e}") from e

        try:
            result = resp.json()
        except ValueError:
            result = None
        if not isinstance(result, dict):
            result = {}

        if not 200 <= resp.status_code < 300:
            message = result.get("message") or resp.reason or f"HTTP {resp.status_code}"
            raise SubmissionFailure(f"Database error: {message}", status_code=resp.status_code)

        logger.info("Location data saved (status %s)", resp.status_code)
        return result
