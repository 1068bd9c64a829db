from .ride_state import (
    ALLOWED_TRANSITIONS,
    RideStateException,
    can_transition,
    assign_ride,
    accept_ride,
    reject_ride,
    mark_driver_arrived,
    start_ride,
    complete_ride,
    cancel_ride,
)
from .driver_state import (
    DriverStateException,
    mark_busy,
    mark_online,
    credit_earnings,
    toggle_availability,
    set_blocked,
    update_location,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "RideStateException",
    "can_transition",
    "assign_ride",
    "accept_ride",
    "reject_ride",
    "mark_driver_arrived",
    "start_ride",
    "complete_ride",
    "cancel_ride",
    "DriverStateException",
    "mark_busy",
    "mark_online",
    "credit_earnings",
    "toggle_availability",
    "set_blocked",
    "update_location",
]
