from dataclasses import replace

import pytest

from dispatch.state_machines.driver_state import (
    DriverStateException,
    set_blocked,
    toggle_availability,
)
from dispatch.state_machines.ride_state import (
    ALLOWED_TRANSITIONS,
    RideStateException,
    accept_ride,
    assign_ride,
    can_transition,
    cancel_ride,
    complete_ride,
    mark_driver_arrived,
    reject_ride,
    start_ride,
)
from drivers.models import Driver, DriverStatus
from rides.models import Ride, RideStatus
from users.models import Role


@pytest.fixture
def driver():
    return Driver.new("d1", "John Doe", 30.0626, 31.2263, vehicle="Toyota Prius",
                      status=DriverStatus.ONLINE, earnings=8.30)


@pytest.fixture
def priced_ride():
    return Ride(
        id="r1",
        passenger_name="Hossam",
        pickup_label="AUC Tahrir Square",
        dropoff_label="Khan el-Khalili",
        pickup=(30.0449, 31.2360),
        dropoff=(30.0478, 31.2623),
        distance_km=3.3,
        fare=6.95,
    )


def test_assign_requires_distance_and_fare(priced_ride, driver):
    unpriced = replace(priced_ride, distance_km=None, fare=None)

    with pytest.raises(RideStateException):
        assign_ride(unpriced, driver)


def test_assign_marks_driver_busy(priced_ride, driver):
    ride, busy = assign_ride(priced_ride, driver)

    assert ride.status == RideStatus.ASSIGNED
    assert ride.driver_id == "d1"
    assert busy.status == DriverStatus.BUSY
    # inputs are untouched
    assert priced_ride.status == RideStatus.PENDING
    assert driver.status == DriverStatus.ONLINE


@pytest.mark.parametrize("status", [DriverStatus.OFFLINE, DriverStatus.BUSY])
def test_assign_requires_online_driver(priced_ride, driver, status):
    with pytest.raises(RideStateException):
        assign_ride(priced_ride, replace(driver, status=status))


def test_reject_returns_ride_to_pool(priced_ride, driver):
    ride, busy = assign_ride(priced_ride, driver)

    ride, freed = reject_ride(ride, busy)

    assert ride.status == RideStatus.PENDING
    assert ride.driver_id is None
    assert freed.status == DriverStatus.ONLINE


def test_full_lifecycle_credits_earnings(priced_ride, driver, tariff):
    ride, busy = assign_ride(priced_ride, driver)
    ride = accept_ride(ride, busy)
    assert ride.status == RideStatus.EN_ROUTE_TO_PICKUP

    ride = mark_driver_arrived(ride, busy)
    assert ride.status == RideStatus.DRIVER_ARRIVED

    ride, busy = start_ride(ride, busy)
    assert ride.status == RideStatus.IN_PROGRESS
    assert busy.status == DriverStatus.BUSY

    ride, paid = complete_ride(ride, busy, tariff)

    assert ride.status == RideStatus.COMPLETED
    assert paid.status == DriverStatus.ONLINE
    assert paid.earnings == pytest.approx(8.30 + 6.95 * (1 - 0.20))


def test_driver_actions_require_assigned_driver(priced_ride, driver):
    ride, _ = assign_ride(priced_ride, driver)
    stranger = Driver.new("d2", "Jane Smith", 30.0444, 31.2357, status=DriverStatus.ONLINE)

    with pytest.raises(RideStateException):
        accept_ride(ride, stranger)

    with pytest.raises(RideStateException):
        reject_ride(ride, stranger)


def test_cancel_only_from_pending(priced_ride, driver):
    assert cancel_ride(priced_ride).status == RideStatus.CANCELLED

    assigned, _ = assign_ride(priced_ride, driver)
    with pytest.raises(RideStateException):
        cancel_ride(assigned)


def test_steps_cannot_be_skipped(priced_ride, driver, tariff):
    ride, busy = assign_ride(priced_ride, driver)

    with pytest.raises(RideStateException):
        mark_driver_arrived(ride, busy)

    with pytest.raises(RideStateException):
        complete_ride(ride, busy, tariff)


@pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
def test_no_transition_leaves_terminal_states(terminal):
    for target in RideStatus:
        for actor in Role:
            assert not can_transition(terminal, target, actor)


@pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
def test_terminal_ride_rejects_every_action(priced_ride, driver, tariff, terminal):
    ride = replace(priced_ride, status=terminal, driver_id=driver.id)
    busy = replace(driver, status=DriverStatus.BUSY)

    with pytest.raises(RideStateException):
        assign_ride(ride, driver)
    with pytest.raises(RideStateException):
        accept_ride(ride, busy)
    with pytest.raises(RideStateException):
        reject_ride(ride, busy)
    with pytest.raises(RideStateException):
        mark_driver_arrived(ride, busy)
    with pytest.raises(RideStateException):
        start_ride(ride, busy)
    with pytest.raises(RideStateException):
        complete_ride(ride, busy, tariff)
    with pytest.raises(RideStateException):
        cancel_ride(ride)


def test_transition_table_actors():
    assert ALLOWED_TRANSITIONS[(RideStatus.PENDING, RideStatus.ASSIGNED)] == Role.ADMIN
    assert ALLOWED_TRANSITIONS[(RideStatus.PENDING, RideStatus.CANCELLED)] == Role.PASSENGER
    assert not can_transition(RideStatus.PENDING, RideStatus.ASSIGNED, Role.DRIVER)
    assert not can_transition(RideStatus.ASSIGNED, RideStatus.CANCELLED, Role.PASSENGER)


def test_blocking_forces_offline_and_toggle_is_refused(driver):
    blocked = set_blocked(driver, True)

    assert blocked.is_blocked
    assert blocked.status == DriverStatus.OFFLINE

    with pytest.raises(DriverStateException):
        toggle_availability(blocked)


def test_busy_driver_cannot_be_blocked_or_go_offline(driver):
    busy = replace(driver, status=DriverStatus.BUSY)

    with pytest.raises(DriverStateException):
        set_blocked(busy, True)

    with pytest.raises(DriverStateException):
        toggle_availability(busy)
