"""
Purpose: Driver coordinator.
What it does:
- Online/offline toggle.
- Works the assigned ride through its lifecycle (accept/reject, arrive,
  start, complete) and credits earnings on completion.
- Keeps one device location watch alive while the driver is online and not
  blocked, and releases it on every exit path.
"""

import logging
from typing import Callable, Optional, Tuple, Union

from drivers.location import (
    LocationError,
    LocationProvider,
    LocationSubscription,
    UNSUPPORTED_MESSAGE,
    WatchOptions,
)
from drivers.models import Driver, DriverStatus
from drivers.policy import DriverPolicy
from rides.models import DRIVER_ACTIVE_STATUSES, Ride, RideStatus
from rides.store import RideStore, Snapshot
from routing.distance import LatLng
from .notices import DashboardNotice
from .state_machines.driver_state import DriverStateException, toggle_availability, update_location
from .state_machines.ride_state import (
    RideStateException,
    accept_ride,
    complete_ride,
    mark_driver_arrived,
    reject_ride,
    start_ride,
)

logger = logging.getLogger(__name__)

TransitionResult = Union[Ride, Tuple[Ride, Driver]]


class DriverDashboard:
    """
    Listens to the store for as long as it is open. Use it as a context
    manager (or call close()) so the store subscription and any location
    watch are released.
    """

    def __init__(
        self,
        store: RideStore,
        driver_id: str,
        location_provider: Optional[LocationProvider] = None,
        policy: Optional[DriverPolicy] = None,
    ):
        if store.snapshot.driver(driver_id) is None:
            raise ValueError(f"Unknown driver {driver_id}")

        self.store = store
        self.driver_id = driver_id
        self.location_provider = location_provider
        self.policy = policy
        self.location_error: Optional[str] = None

        self._subscription: Optional[LocationSubscription] = None
        self._unsubscribe = store.subscribe(self._on_snapshot)

    @property
    def driver(self) -> Driver:
        return self.store.snapshot.driver(self.driver_id)

    @property
    def is_tracking(self) -> bool:
        return self._subscription is not None and self._subscription.active

    # --- status ---

    def toggle_status(self) -> DriverStatus:
        with self.store.transaction() as draft:
            try:
                updated = toggle_availability(draft.driver(self.driver_id))
            except DriverStateException as e:
                raise DashboardNotice(str(e)) from e
            draft.put_driver(updated)

        logger.info(f"Driver {self.driver_id} is now {updated.status.value}")
        if updated.status == DriverStatus.ONLINE and self.location_provider is not None:
            self.start_tracking()
        return updated.status

    # --- rides ---

    def ride_request(self) -> Optional[Ride]:
        """The ride an admin assigned to this driver, awaiting accept/reject."""
        return next(
            (ride for ride in self.store.snapshot.rides
             if ride.driver_id == self.driver_id and ride.status == RideStatus.ASSIGNED),
            None,
        )

    def active_ride(self) -> Optional[Ride]:
        return next(
            (ride for ride in self.store.snapshot.rides
             if ride.driver_id == self.driver_id and ride.status in DRIVER_ACTIVE_STATUSES),
            None,
        )

    def accept(self) -> Ride:
        return self._transition((RideStatus.ASSIGNED,), lambda ride, driver, tariff: accept_ride(ride, driver))

    def reject(self) -> Ride:
        return self._transition((RideStatus.ASSIGNED,), lambda ride, driver, tariff: reject_ride(ride, driver))

    def arrive(self) -> Ride:
        return self._transition(
            (RideStatus.EN_ROUTE_TO_PICKUP,), lambda ride, driver, tariff: mark_driver_arrived(ride, driver)
        )

    def start(self) -> Ride:
        return self._transition((RideStatus.DRIVER_ARRIVED,), lambda ride, driver, tariff: start_ride(ride, driver))

    def complete(self) -> Ride:
        return self._transition((RideStatus.IN_PROGRESS,), complete_ride)

    def send_message(self, ride_id: str, text: str) -> None:
        with self.store.transaction() as draft:
            ride = next((ride for ride in draft.rides() if ride.id == ride_id), None)
            if ride is None or ride.driver_id != self.driver_id:
                raise DashboardNotice("This ride is not assigned to you.")
            draft.append_message(ride_id, self.driver_id, text)

    def _transition(
        self,
        statuses: Tuple[RideStatus, ...],
        apply: Callable[..., TransitionResult],
    ) -> Ride:
        with self.store.transaction() as draft:
            ride = next(
                (ride for ride in draft.rides()
                 if ride.driver_id == self.driver_id and ride.status in statuses),
                None,
            )
            if ride is None:
                raise DashboardNotice("You have no ride waiting for this action.")

            try:
                result = apply(ride, draft.driver(self.driver_id), draft.tariff)
            except (RideStateException, DriverStateException) as e:
                logger.warning(f"Driver {self.driver_id} action rejected: {e}")
                raise DashboardNotice(str(e)) from e

            if isinstance(result, tuple):
                new_ride, new_driver = result
                draft.put_driver(new_driver)
            else:
                new_ride = result
            draft.put_ride(new_ride)

        logger.info(f"Ride {new_ride.id} is now {new_ride.status.value} (driver {self.driver_id})")
        return new_ride

    # --- device location ---

    def start_tracking(self) -> bool:
        """
        Start the location watch if the driver is eligible. Returns whether a
        watch is active afterwards.
        """
        if self.location_provider is None:
            self.location_error = UNSUPPORTED_MESSAGE
            return False

        driver = self.driver
        if driver.is_blocked or driver.status == DriverStatus.OFFLINE:
            return False

        if self.is_tracking:
            return True

        self._subscription = LocationSubscription(
            self.location_provider,
            self._on_fix,
            self._on_error,
            WatchOptions.from_policy(self.policy),
        ).acquire()
        return True

    def stop_tracking(self) -> None:
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None

    def close(self) -> None:
        """End of session (logout or role switch)."""
        self.stop_tracking()
        self._unsubscribe()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_fix(self, coords: LatLng) -> None:
        self.location_error = None
        with self.store.transaction() as draft:
            draft.put_driver(update_location(draft.driver(self.driver_id), coords))

    def _on_error(self, error: LocationError) -> None:
        logger.warning(f"Location watch error for driver {self.driver_id}: {error.code.name}")
        self.location_error = error.message

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        driver = snapshot.driver(self.driver_id)
        if not self.is_tracking or driver is None:
            return
        if driver.is_blocked or driver.status == DriverStatus.OFFLINE:
            logger.info(f"Releasing location watch for driver {self.driver_id}")
            self.stop_tracking()
