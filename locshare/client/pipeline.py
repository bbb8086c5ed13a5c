"""
Acquire, enrich, build and submit one capture
"""
import logging
from typing import Any, Dict, Optional

from config import Settings
from locshare.client.acquirer import GeolocationAcquirer, PositionProvider
from locshare.client.builder import build_capture_payload
from locshare.client.enrichment import EnrichmentResolver
from locshare.client.submission import SubmissionClient
from locshare.utils.geolocation import GeolocationService

logger = logging.getLogger(__name__)


class LocationSharePipeline:
    """Runs the capture steps in order, once per call

    PermissionDenied and AcquisitionTimeout abort before anything is sent.
    Enrichment never aborts. SubmissionFailure propagates to the caller.
    """

    def __init__(
        self,
        acquirer: GeolocationAcquirer,
        resolver: EnrichmentResolver,
        submitter: SubmissionClient,
        device_info: Optional[Dict[str, Any]] = None,
        user_agent: Optional[str] = None,
    ):
        self.acquirer = acquirer
        self.resolver = resolver
        self.submitter = submitter
        self.device_info = device_info
        self.user_agent = user_agent

    @classmethod
    def from_settings(
        cls, settings: Settings, provider: PositionProvider, endpoint_url: Optional[str] = None
    ) -> "LocationSharePipeline":
        acquirer = GeolocationAcquirer(provider, timeout=settings.position_timeout)
        resolver = EnrichmentResolver(GeolocationService(settings))
        submitter = SubmissionClient(endpoint_url or settings.api_url)
        return cls(acquirer, resolver, submitter)

    def run(self) -> Dict[str, Any]:
        position = self.acquirer.acquire()
        logger.debug("Position acquired: %s, %s", position.latitude, position.longitude)

        enrichment = self.resolver.resolve(position)
        payload = build_capture_payload(
            position,
            enrichment,
            device_info=self.device_info,
            user_agent=self.user_agent,
        )
        return self.submitter.submit(payload)
