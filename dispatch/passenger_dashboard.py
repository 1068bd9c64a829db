"""
Purpose: Passenger coordinator.
What it does:
- Resolves pickup/dropoff from free-text search, map pins or the device's
  current position (reverse geocoded to a label).
- Quotes a fare, requests rides, cancels pending rides.
- Fills the driver ETA once a driver is on the way.

Lookups are tagged per field so a slow, older response never overwrites a
newer one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import time
from typing import Dict, List, Optional

from drivers.location import LocationError, LocationProvider, UNSUPPORTED_MESSAGE, WatchOptions
from pricing.fare import RideDetails, calculate_ride_details
from rides.models import Ride, RideStatus
from rides.store import RideStore, UnknownEntityError
from routing.distance import LatLng, validate_coordinates
from routing.eta_service import estimate_eta_minutes
from routing.nominatim_client import NominatimClient, PlaceResult
from routing.request_tokens import RequestTokens
from users.models import User
from .notices import DashboardNotice
from .state_machines.ride_state import RideStateException, cancel_ride

logger = logging.getLogger(__name__)

PICKUP = "pickup"
DROPOFF = "dropoff"

INVALID_LOCATION_MESSAGE = "That location is not a valid point on the map."


def _check_location(coords: LatLng) -> None:
    try:
        validate_coordinates(coords)
    except (TypeError, ValueError) as e:
        logger.warning(f"Rejected location {coords}: {e}")
        raise DashboardNotice(INVALID_LOCATION_MESSAGE) from e


@dataclass
class LocationField:
    """What the passenger has entered for one end of the trip."""
    label: str = ""
    coords: Optional[LatLng] = None
    results: List[PlaceResult] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return bool(self.label) and self.coords is not None


class PassengerDashboard:
    def __init__(
        self,
        store: RideStore,
        passenger: User,
        places: NominatimClient,
        location_provider: Optional[LocationProvider] = None,
        request_delay_seconds: float = 0.0,
    ):
        self.store = store
        self.passenger = passenger
        self.places = places
        self.location_provider = location_provider
        # simulated network latency on ride creation
        self.request_delay_seconds = request_delay_seconds

        self.fields: Dict[str, LocationField] = {PICKUP: LocationField(), DROPOFF: LocationField()}
        self.quote: Optional[RideDetails] = None
        self.location_error: Optional[str] = None
        self._tokens = RequestTokens()

    def _field(self, name: str) -> LocationField:
        if name not in self.fields:
            raise ValueError(f"Unknown location field {name!r}")
        return self.fields[name]

    # --- location entry ---

    def type_query(self, field_name: str, text: str) -> Optional[List[PlaceResult]]:
        """
        Free text typed into a field: coordinates and quote are reset, then a
        search runs for the new text.
        """
        entry = self._field(field_name)
        entry.label = text
        entry.coords = None
        self.quote = None
        return self.search(field_name, text)

    def search(self, field_name: str, query: str) -> Optional[List[PlaceResult]]:
        """
        Returns the results applied to the field, or None when a newer lookup
        for the same field superseded this one.
        """
        entry = self._field(field_name)
        token = self._tokens.issue(field_name)

        results = self.places.search_places(query)

        if not self._tokens.is_current(field_name, token):
            logger.debug(f"Discarding stale {field_name} search for {query!r}")
            return None

        entry.results = results
        return results

    def select_place(self, field_name: str, place: PlaceResult) -> None:
        entry = self._field(field_name)
        _check_location(place.location)
        self._tokens.invalidate(field_name)
        entry.label = place.name
        entry.coords = place.location
        entry.results = []
        self.quote = None

    def pin_location(self, field_name: str, coords: LatLng) -> Optional[str]:
        """
        A point picked on the map (or from the device). The label comes from
        reverse geocoding and is dropped if the field changed meanwhile.
        """
        entry = self._field(field_name)
        _check_location(coords)
        token = self._tokens.issue(field_name)
        entry.coords = coords
        entry.label = ""
        entry.results = []
        self.quote = None

        label = self.places.reverse_geocode(coords)

        if not self._tokens.is_current(field_name, token):
            logger.debug(f"Discarding stale {field_name} address for {coords}")
            return None

        entry.label = label
        return label

    def use_current_location(self) -> Optional[LatLng]:
        """
        One-shot device fix used as the pickup. Provider failures are shown
        inline via location_error; an out-of-range fix raises DashboardNotice.
        Either way the pickup is left untouched.
        """
        if self.location_provider is None:
            self.location_error = UNSUPPORTED_MESSAGE
            return None

        self.location_error = None
        try:
            coords = self.location_provider.current_position(WatchOptions.from_policy())
        except LocationError as e:
            logger.warning(f"Current position unavailable: {e.code.name}")
            self.location_error = e.message
            return None

        self.pin_location(PICKUP, coords)
        return coords

    # --- fare and rides ---

    def quote_fare(self) -> RideDetails:
        pickup, dropoff = self.fields[PICKUP], self.fields[DROPOFF]
        if not (pickup.is_resolved and dropoff.is_resolved):
            raise DashboardNotice("Please select valid pickup and dropoff locations first.")

        try:
            self.quote = calculate_ride_details(pickup.coords, dropoff.coords, self.store.snapshot.tariff)
        except ValueError as e:
            logger.warning(f"Fare quote failed: {e}")
            raise DashboardNotice(INVALID_LOCATION_MESSAGE) from e
        return self.quote

    def request_ride(self) -> Ride:
        pickup, dropoff = self.fields[PICKUP], self.fields[DROPOFF]
        if not (pickup.is_resolved and dropoff.is_resolved) or self.quote is None:
            raise DashboardNotice("Please calculate the fare before requesting a ride.")

        if self.has_active_ride():
            raise DashboardNotice("You already have an active ride.")

        ride = Ride.new(
            passenger_name=self.passenger.name,
            pickup_label=pickup.label,
            dropoff_label=dropoff.label,
            pickup=pickup.coords,
            dropoff=dropoff.coords,
            distance_km=self.quote.distance_km,
            fare=self.quote.fare,
        )

        if self.request_delay_seconds > 0:
            time.sleep(self.request_delay_seconds)

        with self.store.transaction() as draft:
            draft.add_ride(ride)

        logger.info(f"{self.passenger.name} requested ride {ride.id} ({ride.fare:.2f})")
        self.fields = {PICKUP: LocationField(), DROPOFF: LocationField()}
        self.quote = None
        self.location_error = None
        return ride

    def cancel_ride(self, ride_id: str) -> Ride:
        with self.store.transaction() as draft:
            ride = self._own_ride(draft.ride, ride_id)
            try:
                cancelled = cancel_ride(ride)
            except RideStateException as e:
                raise DashboardNotice(str(e)) from e
            draft.put_ride(cancelled)

        logger.info(f"{self.passenger.name} cancelled ride {ride_id}")
        return cancelled

    def my_rides(self) -> List[Ride]:
        """Newest first."""
        rides = [ride for ride in self.store.snapshot.rides if ride.passenger_name == self.passenger.name]
        return sorted(rides, key=lambda ride: ride.requested_at, reverse=True)

    def has_active_ride(self) -> bool:
        return any(ride.status.is_active for ride in self.my_rides())

    def refresh_etas(self) -> Dict[str, int]:
        """
        Estimate the ETA once for each ride whose driver is on the way.
        """
        estimates: Dict[str, int] = {}
        with self.store.transaction() as draft:
            for ride in draft.rides():
                if ride.passenger_name != self.passenger.name:
                    continue
                if ride.status != RideStatus.EN_ROUTE_TO_PICKUP or ride.driver_id is None:
                    continue
                if ride.eta_minutes is not None:
                    continue
                driver = draft.driver(ride.driver_id)
                eta = estimate_eta_minutes(driver.location, ride.pickup)
                draft.put_ride(replace(ride, eta_minutes=eta))
                estimates[ride.id] = eta
        return estimates

    def send_message(self, ride_id: str, text: str) -> None:
        with self.store.transaction() as draft:
            self._own_ride(draft.ride, ride_id)
            draft.append_message(ride_id, self.passenger.id, text)

    def _own_ride(self, lookup, ride_id: str) -> Ride:
        try:
            ride = lookup(ride_id)
        except UnknownEntityError as e:
            raise DashboardNotice(f"Ride {ride_id} does not exist.") from e
        if ride.passenger_name != self.passenger.name:
            raise DashboardNotice("This ride belongs to another passenger.")
        return ride
