"""
Geolocation lookups: reverse geocoding and public IP
"""
import logging

import requests
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from config import Settings
from locshare.errors import EnrichmentFailure

logger = logging.getLogger(__name__)

ADDRESS_NOT_AVAILABLE = "Address not available"
ADDRESS_NOT_FOUND = "Address not found"
UNKNOWN_IP = "Unknown"


class GeolocationService:
    """Service for geolocation lookups

    ``lookup_address`` and ``lookup_ip`` raise EnrichmentFailure. The
    ``reverse_geocode`` and ``public_ip`` wrappers never raise: a failure is
    logged and replaced by a fallback string.
    """
    
    def __init__(self, settings: Settings, session: requests.Session = None):
        self.timeout = settings.lookup_timeout
        self.ip_echo_url = settings.ip_echo_url
        self.session = session or requests.Session()
        self.geolocator = Nominatim(
            user_agent=settings.geocoder_user_agent,
            domain=settings.geocoder_domain,
            timeout=self.timeout,
        )
    
    def lookup_address(self, lat: float, lng: float) -> str:
        """Display name for coordinates; empty string when the service has none"""
        try:
            location = self.geolocator.reverse((lat, lng), exactly_one=True, addressdetails=True)
        except (GeopyError, ValueError) as e:
            raise EnrichmentFailure(f"reverse geocoding failed: {e}") from e
        
        if location is None:
            return ""
        return location.address or ""
    
    def lookup_ip(self) -> str:
        """Public IP as reported by the echo service"""
        try:
            resp = self.session.get(self.ip_echo_url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise EnrichmentFailure(f"IP lookup failed: {e}") from e
        
        if not isinstance(data, dict) or not data.get("ip"):
            raise EnrichmentFailure("IP lookup returned no address")
        return str(data["ip"])
    
    def reverse_geocode(self, lat: float, lng: float) -> str:
        try:
            address = self.lookup_address(lat, lng)
        except EnrichmentFailure as e:
            logger.warning("[reverse_geocode] %s", e)
            return ADDRESS_NOT_AVAILABLE
        return address or ADDRESS_NOT_FOUND
    
    def public_ip(self) -> str:
        try:
            return self.lookup_ip()
        except EnrichmentFailure as e:
            logger.warning("[public_ip] %s", e)
            return UNKNOWN_IP
