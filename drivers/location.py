"""
Purpose: Device geolocation contract and the scoped watch subscription.
What it does:
- Maps device errors to a closed set of user-facing messages.
- Defines the provider interface a device (or a fake in tests) implements.
- LocationSubscription holds at most one live watch and always releases it,
  whichever way the owning block exits.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Callable, Optional, Tuple

from .policy import DriverPolicy, default_driver_policy

LatLng = Tuple[float, float]

logger = logging.getLogger(__name__)


class LocationErrorCode(Enum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3
    UNKNOWN = 0


LOCATION_ERROR_MESSAGES = {
    LocationErrorCode.PERMISSION_DENIED: "Location access denied. Please enable location permissions.",
    LocationErrorCode.POSITION_UNAVAILABLE: "Location information is unavailable.",
    LocationErrorCode.TIMEOUT: "The request to get user location timed out.",
    LocationErrorCode.UNKNOWN: "An unknown error occurred while fetching location.",
}

UNSUPPORTED_MESSAGE = "Geolocation is not supported by your device."


class LocationError(Exception):
    """Raised (or passed to watch callbacks) when a fix cannot be obtained."""

    def __init__(self, code: LocationErrorCode, detail: str = ""):
        super().__init__(detail or code.name)
        self.code = code

    @property
    def message(self) -> str:
        return LOCATION_ERROR_MESSAGES.get(self.code, LOCATION_ERROR_MESSAGES[LocationErrorCode.UNKNOWN])


@dataclass(frozen=True)
class WatchOptions:
    high_accuracy: bool = True
    timeout_ms: int = 10000
    maximum_age_ms: int = 0

    @classmethod
    def from_policy(cls, policy: Optional[DriverPolicy] = None) -> WatchOptions:
        policy = policy or default_driver_policy()
        return cls(
            high_accuracy=policy.high_accuracy,
            timeout_ms=policy.location_timeout_ms,
            maximum_age_ms=policy.location_maximum_age_ms,
        )


FixCallback = Callable[[LatLng], None]
ErrorCallback = Callable[[LocationError], None]


class LocationProvider:
    """
    Interface for a device location source.

    watch() starts a continuous subscription and returns an opaque handle;
    clear_watch() releases it. current_position() is a one-shot request and
    raises LocationError on failure.
    """

    def watch(self, on_fix: FixCallback, on_error: ErrorCallback, options: WatchOptions) -> Any:
        raise NotImplementedError

    def clear_watch(self, handle: Any) -> None:
        raise NotImplementedError

    def current_position(self, options: WatchOptions) -> LatLng:
        raise NotImplementedError


class LocationSubscription:
    """
    Exactly one active watch per subscription object.

    Usable as a context manager; release() is idempotent so it is safe to call
    from every exit path (session end, role switch, driver blocked).
    """

    def __init__(
        self,
        provider: LocationProvider,
        on_fix: FixCallback,
        on_error: ErrorCallback,
        options: Optional[WatchOptions] = None,
    ):
        self.provider = provider
        self.on_fix = on_fix
        self.on_error = on_error
        self.options = options or WatchOptions.from_policy()
        self._handle: Any = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def acquire(self) -> LocationSubscription:
        if self._handle is None:
            self._handle = self.provider.watch(self.on_fix, self.on_error, self.options)
            logger.debug(f"Location watch acquired: {self._handle!r}")
        return self

    def release(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self.provider.clear_watch(handle)
        logger.debug(f"Location watch released: {handle!r}")

    def __enter__(self) -> LocationSubscription:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
