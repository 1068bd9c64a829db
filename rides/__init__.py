"""
Rides domain package.

Public API:
- Domain models: Ride, RideStatus, ChatMessage
- Shared state: RideStore, Snapshot, Draft, StaleSnapshotError
"""
from .models import Ride, RideStatus, ChatMessage, DRIVER_ACTIVE_STATUSES
from .store import RideStore, Snapshot, Draft, StaleSnapshotError, UnknownEntityError

__all__ = [
    "Ride",
    "RideStatus",
    "ChatMessage",
    "DRIVER_ACTIVE_STATUSES",
    "RideStore",
    "Snapshot",
    "Draft",
    "StaleSnapshotError",
    "UnknownEntityError",
]
