"""
Best-effort enrichment of a position with address and public IP
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from locshare.models import Enrichment, Position
from locshare.utils.geolocation import ADDRESS_NOT_AVAILABLE, UNKNOWN_IP, GeolocationService

logger = logging.getLogger(__name__)


class EnrichmentResolver:
    """Runs both lookups side by side and always returns an Enrichment"""

    def __init__(self, geolocation: GeolocationService):
        self.geolocation = geolocation

    def resolve(self, position: Position) -> Enrichment:
        with ThreadPoolExecutor(max_workers=2) as executor:
            address_future = executor.submit(
                self.geolocation.reverse_geocode, position.latitude, position.longitude
            )
            ip_future = executor.submit(self.geolocation.public_ip)
            address = self._settle(address_future, ADDRESS_NOT_AVAILABLE, "address")
            ip = self._settle(ip_future, UNKNOWN_IP, "ip")
        return Enrichment(address=address, ip=ip)

    @staticmethod
    def _settle(future, fallback: str, field: str) -> str:
        try:
            return future.result()
        except Exception:
            logger.exception("Enrichment of %s failed, using %r", field, fallback)
            return fallback
