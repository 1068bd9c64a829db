from dataclasses import replace

from drivers.models import Driver, DriverStatus
from pricing.fare import driver_payout
from pricing.tariff import Tariff
from routing.distance import LatLng, validate_coordinates



class DriverStateException(Exception):
    """Raised when an invalid driver transition is attempted."""
    pass


def mark_busy(driver: Driver) -> Driver:
    """
    Called when a ride is assigned to the driver or the trip starts.
    Idempotent for drivers already BUSY.
    """
    if driver.is_blocked:
        raise DriverStateException(f"Driver {driver.id} is blocked and cannot take rides")

    if driver.status == DriverStatus.BUSY:
        return driver

    # Because Driver is a frozen dataclass, we must return a new instance via replace
    return replace(driver, status=DriverStatus.BUSY)


def mark_online(driver: Driver) -> Driver:
    """
    Called when a ride is rejected or finished and the driver is free again.
    A blocked driver goes OFFLINE instead.
    """
    if driver.is_blocked:
        return replace(driver, status=DriverStatus.OFFLINE)
    return replace(driver, status=DriverStatus.ONLINE)


def credit_earnings(driver: Driver, fare: float, tariff: Tariff) -> Driver:
    """
    Adds the driver's share of a completed fare: fare * (1 - commission).
    """
    payout = driver_payout(fare, tariff)
    return replace(driver, earnings=driver.earnings + payout)


def toggle_availability(driver: Driver) -> Driver:
    """
    Driver-initiated OFFLINE <-> ONLINE switch.
    Not allowed while on a ride or while blocked.
    """
    if driver.is_blocked:
        raise DriverStateException(f"Driver {driver.id} is blocked")

    if driver.status == DriverStatus.BUSY:
        raise DriverStateException(f"Driver {driver.id} is busy with a ride")

    new_status = DriverStatus.ONLINE if driver.status == DriverStatus.OFFLINE else DriverStatus.OFFLINE
    return replace(driver, status=new_status)


def set_blocked(driver: Driver, blocked: bool) -> Driver:
    """
    Admin block / unblock. Blocking always takes the driver OFFLINE;
    unblocking leaves them OFFLINE until they go online themselves.
    """
    if not blocked:
        return replace(driver, is_blocked=False)

    if driver.status == DriverStatus.BUSY:
        raise DriverStateException(f"Driver {driver.id} cannot be blocked during an active ride")

    return replace(driver, is_blocked=True, status=DriverStatus.OFFLINE)


def update_location(driver: Driver, location: LatLng) -> Driver:
    validate_coordinates(location)
    return replace(driver, location=location)
