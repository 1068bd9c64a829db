import random

import pytest

from drivers.models import Driver, DriverStatus
from drivers.selection import filter_eligible_drivers, rank_drivers
from routing.distance import distance_km


@pytest.fixture
def mock_pickup_location():
    # Example: Tahrir Square
    return (30.0444, 31.2357)


def test_rank_drivers_only_online(mock_pickup_location):
    """
    Randomly scattered drivers: only ONLINE, unblocked drivers come back, and
    they come back closest first.
    """
    base_lat, base_lng = mock_pickup_location

    drivers = []
    for i in range(50):
        offset_lat = (random.random() - 0.5) * 0.2
        offset_lng = (random.random() - 0.5) * 0.2

        if i % 5 == 0:
            status = DriverStatus.OFFLINE
        elif i % 7 == 0:
            status = DriverStatus.BUSY
        else:
            status = DriverStatus.ONLINE

        drivers.append(
            Driver.new(f"driver_{i}", f"Driver {i}", base_lat + offset_lat, base_lng + offset_lng, status=status)
        )

    ranked = rank_drivers(mock_pickup_location, drivers)
    online_ids = {driver.id for driver in drivers if driver.status == DriverStatus.ONLINE}

    # 1. Exactly the online drivers are ranked
    assert {candidate.driver_id for candidate in ranked} == online_ids

    # 2. Ascending distance
    distances = [candidate.distance_to_pickup_km for candidate in ranked]
    assert distances == sorted(distances)


def test_rank_drivers_sorting(mock_pickup_location):
    """
    Drivers ~5, ~1 and ~3 km away are returned as 1, 3, 5.
    """
    base_lat, base_lng = mock_pickup_location

    drivers = [
        Driver.new("driver_5km", "Five", base_lat + 0.0346, base_lng, status=DriverStatus.ONLINE),
        Driver.new("driver_1km", "One", base_lat + 0.0069, base_lng, status=DriverStatus.ONLINE),
        Driver.new("driver_3km", "Three", base_lat + 0.0208, base_lng, status=DriverStatus.ONLINE),
    ]

    ranked = rank_drivers(mock_pickup_location, drivers)

    assert [candidate.driver_id for candidate in ranked] == ["driver_1km", "driver_3km", "driver_5km"]
    assert [candidate.distance_to_pickup_km for candidate in ranked] == [1.0, 3.0, 5.0]
    assert ranked[0].distance_to_pickup_km == distance_km(drivers[1].location, mock_pickup_location)
    assert ranked[0].name == "One"


def test_rank_drivers_ties_keep_roster_order(mock_pickup_location):
    base_lat, base_lng = mock_pickup_location

    drivers = [
        Driver.new("east", "East", base_lat, base_lng + 0.01, status=DriverStatus.ONLINE),
        Driver.new("west", "West", base_lat, base_lng - 0.01, status=DriverStatus.ONLINE),
    ]

    ranked = rank_drivers(mock_pickup_location, drivers)

    assert ranked[0].distance_to_pickup_km == ranked[1].distance_to_pickup_km
    assert [candidate.driver_id for candidate in ranked] == ["east", "west"]


def test_rank_drivers_empty_cases(mock_pickup_location):
    base_lat, base_lng = mock_pickup_location

    assert rank_drivers(mock_pickup_location, []) == []

    offline = [
        Driver.new("a", "A", base_lat, base_lng, status=DriverStatus.OFFLINE),
        Driver.new("b", "B", base_lat, base_lng, status=DriverStatus.BUSY),
    ]
    assert rank_drivers(mock_pickup_location, offline) == []


def test_blocked_driver_is_never_eligible(mock_pickup_location):
    base_lat, base_lng = mock_pickup_location

    blocked = Driver.new("x", "X", base_lat, base_lng, status=DriverStatus.ONLINE, is_blocked=True)

    # Driver.new forces blocked drivers offline
    assert blocked.status == DriverStatus.OFFLINE
    assert filter_eligible_drivers([blocked]) == []
