"""
Purpose: Central configuration for driver ETA and device location tracking.
What it does:

Stores all tunable thresholds for drivers:

AVERAGE_CITY_SPEED_KMH = 30
ETA_BUFFER_MINUTES = 2
LOCATION_TIMEOUT_MS = 10000

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class DriverPolicy:
    """
    Central configuration for driver ETA estimates and location watching.
    """

    # --- ETA ---
    # Average city speed used to turn road distance into minutes.
    average_speed_kmh: float = 30.0

    # Added on top of the travel time for parking / traffic.
    eta_buffer_minutes: int = 2

    # --- Device location ---
    # Acquisition timeout for a single fix.
    location_timeout_ms: int = 10000

    # Cached fixes older than this are rejected (0 = always fresh).
    location_maximum_age_ms: int = 0

    high_accuracy: bool = True

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be > 0")

        if self.eta_buffer_minutes < 0:
            raise ValueError("eta_buffer_minutes must be >= 0")

        if self.location_timeout_ms <= 0:
            raise ValueError("location_timeout_ms must be > 0")

        if self.location_maximum_age_ms < 0:
            raise ValueError("location_maximum_age_ms must be >= 0")


def default_driver_policy() -> DriverPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DriverPolicy()
    p.validate()
    return p
