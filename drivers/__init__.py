"""
Drivers domain package.

Public API:
- Domain models: Driver, DriverStatus
- Policy: DriverPolicy, default_driver_policy
- Ranking: rank_drivers, filter_eligible_drivers, RankedDriver
- Device location: LocationProvider, LocationSubscription, LocationError
"""
from .models import Driver, DriverStatus
from .policy import DriverPolicy, default_driver_policy
from .selection import RankedDriver, filter_eligible_drivers, rank_drivers
from .location import (
    LocationError,
    LocationErrorCode,
    LocationProvider,
    LocationSubscription,
    WatchOptions,
    LOCATION_ERROR_MESSAGES,
)

__all__ = [
    "Driver",
    "DriverStatus",
    "DriverPolicy",
    "default_driver_policy",
    "RankedDriver",
    "filter_eligible_drivers",
    "rank_drivers",
    "LocationError",
    "LocationErrorCode",
    "LocationProvider",
    "LocationSubscription",
    "WatchOptions",
    "LOCATION_ERROR_MESSAGES",
]
