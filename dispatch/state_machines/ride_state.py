"""
Ride lifecycle:

PENDING -> ASSIGNED -> EN_ROUTE_TO_PICKUP -> DRIVER_ARRIVED -> IN_PROGRESS -> COMPLETED
PENDING -> CANCELLED
ASSIGNED -> PENDING (driver rejects)

COMPLETED and CANCELLED are terminal.

Every transition is a pure function returning new Ride/Driver instances;
the caller commits them together.
"""

from dataclasses import replace
from typing import Dict, Tuple

from drivers.models import Driver, DriverStatus
from pricing.tariff import Tariff
from rides.models import Ride, RideStatus
from users.models import Role
from .driver_state import credit_earnings, mark_busy, mark_online


class RideStateException(Exception):
    """Raised when an invalid ride transition is attempted."""
    pass


ALLOWED_TRANSITIONS: Dict[Tuple[RideStatus, RideStatus], Role] = {
    (RideStatus.PENDING, RideStatus.ASSIGNED): Role.ADMIN,
    (RideStatus.ASSIGNED, RideStatus.EN_ROUTE_TO_PICKUP): Role.DRIVER,
    (RideStatus.ASSIGNED, RideStatus.PENDING): Role.DRIVER,
    (RideStatus.EN_ROUTE_TO_PICKUP, RideStatus.DRIVER_ARRIVED): Role.DRIVER,
    (RideStatus.DRIVER_ARRIVED, RideStatus.IN_PROGRESS): Role.DRIVER,
    (RideStatus.IN_PROGRESS, RideStatus.COMPLETED): Role.DRIVER,
    (RideStatus.PENDING, RideStatus.CANCELLED): Role.PASSENGER,
}


def can_transition(current: RideStatus, target: RideStatus, actor: Role) -> bool:
    return ALLOWED_TRANSITIONS.get((current, target)) == actor


def _check(ride: Ride, target: RideStatus, actor: Role) -> None:
    if ride.status.is_terminal:
        raise RideStateException(f"Ride {ride.id} is {ride.status.value} and cannot change")

    if not can_transition(ride.status, target, actor):
        raise RideStateException(
            f"{actor.value} cannot move ride {ride.id} from {ride.status.value} to {target.value}"
        )


def _check_assigned_driver(ride: Ride, driver: Driver) -> None:
    if ride.driver_id != driver.id:
        raise RideStateException(f"Ride {ride.id} is not assigned to driver {driver.id}")


def assign_ride(ride: Ride, driver: Driver) -> Tuple[Ride, Driver]:
    """
    Admin assignment. Requires the ride to be priced and the driver to be
    online and not blocked. The driver becomes BUSY.
    """
    _check(ride, RideStatus.ASSIGNED, Role.ADMIN)

    if not ride.is_priced:
        raise RideStateException(f"Ride {ride.id} has no distance/fare yet")

    if driver.is_blocked or driver.status != DriverStatus.ONLINE:
        raise RideStateException(f"Driver {driver.id} is not online and available")

    new_ride = replace(ride, status=RideStatus.ASSIGNED, driver_id=driver.id)
    return new_ride, mark_busy(driver)


def accept_ride(ride: Ride, driver: Driver) -> Ride:
    """
    Driver accepts; they are already BUSY from assignment.
    """
    _check(ride, RideStatus.EN_ROUTE_TO_PICKUP, Role.DRIVER)
    _check_assigned_driver(ride, driver)

    new_ride = replace(ride, status=RideStatus.EN_ROUTE_TO_PICKUP)
    return new_ride


def reject_ride(ride: Ride, driver: Driver) -> Tuple[Ride, Driver]:
    """
    Driver rejects: the ride goes back to the unassigned pool and the driver
    is online again.
    """
    _check(ride, RideStatus.PENDING, Role.DRIVER)
    _check_assigned_driver(ride, driver)

    new_ride = replace(ride, status=RideStatus.PENDING, driver_id=None, eta_minutes=None)
    return new_ride, mark_online(driver)


def mark_driver_arrived(ride: Ride, driver: Driver) -> Ride:
    _check(ride, RideStatus.DRIVER_ARRIVED, Role.DRIVER)
    _check_assigned_driver(ride, driver)

    new_ride = replace(ride, status=RideStatus.DRIVER_ARRIVED)
    return new_ride


def start_ride(ride: Ride, driver: Driver) -> Tuple[Ride, Driver]:
    _check(ride, RideStatus.IN_PROGRESS, Role.DRIVER)
    _check_assigned_driver(ride, driver)

    new_ride = replace(ride, status=RideStatus.IN_PROGRESS)
    return new_ride, mark_busy(driver)


def complete_ride(ride: Ride, driver: Driver, tariff: Tariff) -> Tuple[Ride, Driver]:
    """
    Trip finished: the driver is credited fare * (1 - commission) at the
    current tariff and goes back online.
    """
    _check(ride, RideStatus.COMPLETED, Role.DRIVER)
    _check_assigned_driver(ride, driver)

    new_ride = replace(ride, status=RideStatus.COMPLETED)
    paid_driver = credit_earnings(driver, ride.fare or 0.0, tariff)
    return new_ride, mark_online(paid_driver)


def cancel_ride(ride: Ride) -> Ride:
    """
    Passenger cancellation, only while nobody has been assigned.
    """
    _check(ride, RideStatus.CANCELLED, Role.PASSENGER)

    new_ride = replace(ride, status=RideStatus.CANCELLED)
    return new_ride
