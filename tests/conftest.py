import requests
import pytest

from dispatch import DriverDashboard
from drivers.location import LocationProvider
from drivers.models import Driver, DriverStatus
from pricing.tariff import Tariff
from rides.models import Ride
from rides.store import RideStore
from users.roster import demo_store


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FakeLocationProvider(LocationProvider):
    """Device location source driven by the test."""

    def __init__(self, position=None, error=None):
        self.position = position
        self.error = error
        self.watches = {}
        self.cleared = []
        self.last_options = None
        self._next_handle = 0

    def watch(self, on_fix, on_error, options):
        self._next_handle += 1
        self.watches[self._next_handle] = (on_fix, on_error)
        self.last_options = options
        return self._next_handle

    def clear_watch(self, handle):
        self.watches.pop(handle)
        self.cleared.append(handle)

    def current_position(self, options):
        self.last_options = options
        if self.error is not None:
            raise self.error
        return self.position

    def emit_fix(self, coords):
        for on_fix, _ in list(self.watches.values()):
            on_fix(coords)

    def emit_error(self, error):
        for _, on_error in list(self.watches.values()):
            on_error(error)


@pytest.fixture
def tariff():
    return Tariff(base_fare=2.00, per_km_rate=1.50, commission_rate=0.20)


@pytest.fixture
def store():
    return demo_store()


@pytest.fixture
def pickup():
    return (30.0, 31.2)


@pytest.fixture
def e2e_store(pickup, tariff):
    """
    One pending ride 18.5 km long and two online drivers, 1 km and 4 km
    (road distance) south of the pickup.
    """
    ride = Ride(
        id="trip",
        passenger_name="Karim",
        pickup_label="Downtown",
        dropoff_label="Heliopolis",
        pickup=pickup,
        dropoff=(30.12798, 31.2),
    )
    drivers = [
        Driver.new("far", "Far Driver", 29.9723, 31.2, vehicle="Kia", status=DriverStatus.ONLINE),
        Driver.new("near", "Near Driver", 29.9931, 31.2, vehicle="Fiat", status=DriverStatus.ONLINE),
    ]
    return RideStore(rides=[ride], drivers=drivers, tariff=tariff)


@pytest.fixture
def open_driver_view():
    """Opens driver dashboards and closes every one of them after the test."""
    views = []

    def _open(store, driver_id, **kwargs):
        view = DriverDashboard(store, driver_id, **kwargs)
        views.append(view)
        return view

    yield _open

    for view in views:
        view.close()
