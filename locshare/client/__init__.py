"""
Location sharing client
"""
from .acquirer import ConsentPromptProvider, FixedPositionProvider, GeolocationAcquirer, PositionProvider
from .builder import build_capture_payload, collect_device_info, generate_session_id
from .enrichment import EnrichmentResolver
from .pipeline import LocationSharePipeline
from .submission import SubmissionClient

__all__ = [
    "ConsentPromptProvider",
    "EnrichmentResolver",
    "FixedPositionProvider",
    "GeolocationAcquirer",
    "LocationSharePipeline",
    "PositionProvider",
    "SubmissionClient",
    "build_capture_payload",
    "collect_device_info",
    "generate_session_id",
]
