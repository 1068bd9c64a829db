import pytest

from dispatch import AdminDashboard, DashboardNotice, DriverDashboard, PassengerDashboard, PICKUP
from drivers.location import (
    LOCATION_ERROR_MESSAGES,
    LocationError,
    LocationErrorCode,
    LocationSubscription,
    WatchOptions,
)
from drivers.models import DriverStatus
from drivers.policy import DriverPolicy
from users.roster import initial_passengers

from conftest import FakeLocationProvider


class LabelPlaces:
    def search_places(self, query):
        return []

    def reverse_geocode(self, coords):
        return "Talaat Harb Street, Cairo"


@pytest.fixture
def provider():
    return FakeLocationProvider()


def test_subscription_releases_on_every_exit(provider):
    with pytest.raises(RuntimeError):
        with LocationSubscription(provider, lambda coords: None, lambda error: None) as subscription:
            assert subscription.active
            assert len(provider.watches) == 1
            raise RuntimeError("session ended abruptly")

    assert provider.watches == {}
    assert len(provider.cleared) == 1


def test_subscription_acquire_and_release_are_idempotent(provider):
    subscription = LocationSubscription(provider, lambda coords: None, lambda error: None)

    subscription.acquire()
    subscription.acquire()
    assert len(provider.watches) == 1

    subscription.release()
    subscription.release()
    assert provider.cleared == [1]


def test_watch_options_follow_policy():
    options = WatchOptions.from_policy(DriverPolicy(location_timeout_ms=5000))

    assert options.timeout_ms == 5000
    assert options.maximum_age_ms == 0
    assert options.high_accuracy


def test_going_online_starts_one_watch_and_fixes_move_driver(store, provider, open_driver_view):
    driver_view = open_driver_view(store, "d2", location_provider=provider)

    driver_view.toggle_status()
    assert driver_view.is_tracking
    assert driver_view.start_tracking()
    assert len(provider.watches) == 1

    provider.emit_fix((30.05, 31.24))
    assert store.snapshot.driver("d2").location == (30.05, 31.24)


def test_going_offline_releases_watch(store, provider, open_driver_view):
    driver_view = open_driver_view(store, "d2", location_provider=provider)
    driver_view.toggle_status()

    driver_view.toggle_status()

    assert store.snapshot.driver("d2").status == DriverStatus.OFFLINE
    assert not driver_view.is_tracking
    assert provider.watches == {}


def test_blocking_releases_watch(store, provider, open_driver_view):
    driver_view = open_driver_view(store, "d2", location_provider=provider)
    driver_view.toggle_status()

    AdminDashboard(store).toggle_block("d2")

    assert not driver_view.is_tracking
    assert provider.watches == {}
    assert not driver_view.start_tracking()


def test_blocked_driver_never_tracks(store, provider, open_driver_view):
    driver_view = open_driver_view(store, "d3", location_provider=provider)

    assert not driver_view.start_tracking()
    assert provider.watches == {}


def test_close_releases_watch_and_store_subscription(store, provider):
    with DriverDashboard(store, "d2", location_provider=provider) as driver_view:
        driver_view.toggle_status()
        assert driver_view.is_tracking

    assert provider.watches == {}
    assert store.subscriber_count == 0

    # no longer listening: later commits don't touch the closed view
    AdminDashboard(store).toggle_block("d1")
    assert not driver_view.is_tracking


@pytest.mark.parametrize("code", list(LocationErrorCode))
def test_watch_errors_become_messages(store, provider, code, open_driver_view):
    driver_view = open_driver_view(store, "d2", location_provider=provider)
    driver_view.toggle_status()

    provider.emit_error(LocationError(code))

    assert driver_view.location_error == LOCATION_ERROR_MESSAGES[code]
    # location unchanged, watch still alive
    assert store.snapshot.driver("d2").location == (30.0444, 31.2357)
    assert driver_view.is_tracking

    provider.emit_fix((30.06, 31.25))
    assert driver_view.location_error is None


def test_no_provider_means_unsupported(store, open_driver_view):
    driver_view = open_driver_view(store, "d2")

    assert not driver_view.start_tracking()
    assert driver_view.location_error is not None


def test_passenger_current_location_sets_pickup(store):
    provider = FakeLocationProvider(position=(30.0500, 31.2400))
    passenger = PassengerDashboard(store, initial_passengers()[0], LabelPlaces(), location_provider=provider)

    assert passenger.use_current_location() == (30.0500, 31.2400)
    assert passenger.fields[PICKUP].coords == (30.0500, 31.2400)
    assert passenger.fields[PICKUP].label == "Talaat Harb Street, Cairo"
    assert passenger.location_error is None


def test_passenger_location_denied(store):
    provider = FakeLocationProvider(error=LocationError(LocationErrorCode.PERMISSION_DENIED))
    passenger = PassengerDashboard(store, initial_passengers()[0], LabelPlaces(), location_provider=provider)

    assert passenger.use_current_location() is None
    assert passenger.location_error == LOCATION_ERROR_MESSAGES[LocationErrorCode.PERMISSION_DENIED]
    assert passenger.fields[PICKUP].coords is None


def test_passenger_out_of_range_fix_is_a_notice(store):
    provider = FakeLocationProvider(position=(95.0, 31.2400))
    passenger = PassengerDashboard(store, initial_passengers()[0], LabelPlaces(), location_provider=provider)

    with pytest.raises(DashboardNotice):
        passenger.use_current_location()

    assert passenger.fields[PICKUP].coords is None
