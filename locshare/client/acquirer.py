"""
Position acquisition behind a permission check
"""
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from locshare.errors import AcquisitionTimeout, PermissionDenied
from locshare.models import Position

logger = logging.getLogger(__name__)

GRANTED = "granted"
PROMPT = "prompt"
DENIED = "denied"


class PositionProvider:
    """A platform location source"""

    def permission_state(self) -> str:
        """One of "granted", "prompt" or "denied" without asking the user"""
        raise NotImplementedError

    def request_permission(self) -> bool:
        raise NotImplementedError

    def current_position(self, high_accuracy: bool, maximum_age: float) -> Position:
        raise NotImplementedError


class FixedPositionProvider(PositionProvider):
    """Coordinates supplied directly by the user"""

    def __init__(self, latitude: float, longitude: float, accuracy: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy = accuracy

    def permission_state(self) -> str:
        return GRANTED

    def request_permission(self) -> bool:
        return True

    def current_position(self, high_accuracy: bool, maximum_age: float) -> Position:
        return Position(latitude=self.latitude, longitude=self.longitude, accuracy=self.accuracy)


class ConsentPromptProvider(PositionProvider):
    """Asks the user before releasing the wrapped provider's position

    A "yes" is remembered for the life of the provider, so later
    acquisitions go through without asking again.
    """

    question = "Share your current location? [y/N] "

    def __init__(self, inner: PositionProvider, ask: Callable[[str], str] = input):
        self.inner = inner
        self.ask = ask
        self._state = PROMPT

    def permission_state(self) -> str:
        return self._state

    def request_permission(self) -> bool:
        answer = self.ask(self.question).strip().lower()
        self._state = GRANTED if answer in ("y", "yes") else DENIED
        return self._state == GRANTED

    def current_position(self, high_accuracy: bool, maximum_age: float) -> Position:
        if self._state != GRANTED:
            raise PermissionDenied("User denied Geolocation")
        return self.inner.current_position(high_accuracy, maximum_age)


class GeolocationAcquirer:
    """One-shot position fix with a bounded wait"""

    def __init__(
        self,
        provider: PositionProvider,
        timeout: float = 10.0,
        maximum_age: float = 0.0,
        high_accuracy: bool = True,
    ):
        self.provider = provider
        self.timeout = timeout
        self.maximum_age = maximum_age
        self.high_accuracy = high_accuracy

    def previously_granted(self) -> bool:
        """True when permission was granted earlier and no prompt is needed"""
        try:
            return self.provider.permission_state() == GRANTED
        except NotImplementedError:
            logger.debug("Permission state not supported by %s", type(self.provider).__name__)
            return False

    def acquire(self) -> Position:
        if not self.previously_granted() and not self.provider.request_permission():
            raise PermissionDenied("User denied Geolocation")

        started = datetime.now(timezone.utc)
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.provider.current_position, self.high_accuracy, self.maximum_age)
            position = future.result(timeout=self.timeout)
        except FutureTimeout:
            raise AcquisitionTimeout(f"Timeout expired after {self.timeout:g} seconds") from None
        finally:
            executor.shutdown(wait=False)

        oldest = started - timedelta(seconds=self.maximum_age)
        if position.captured_at < oldest:
            raise AcquisitionTimeout("Only a stale cached position was available")
        return position
