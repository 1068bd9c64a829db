"""
Purpose: Orchestrator for ride assignment (the "glue").
What it does:
Ranks online drivers for a pending ride and commits the assignment.
The ride's status is re-read under the store lock, so two admins racing to
assign the same ride cannot both succeed.
"""

import logging
from typing import List, Optional

from drivers.selection import RankedDriver, rank_drivers
from rides.models import Ride, RideStatus
from rides.store import RideStore, UnknownEntityError
from .notices import DashboardNotice
from .state_machines.ride_state import RideStateException, assign_ride

logger = logging.getLogger(__name__)

NO_DRIVERS_MESSAGE = "No drivers are currently online and available."


class Dispatcher:
    """
    Coordinates the transaction of a Ride to a Driver.
    """
    def __init__(self, store: RideStore):
        self.store = store

    def rank_for_ride(self, ride_id: str) -> List[RankedDriver]:
        snapshot = self.store.snapshot
        ride = snapshot.ride(ride_id)
        if ride is None:
            raise DashboardNotice(f"Ride {ride_id} does not exist.")
        return rank_drivers(ride.pickup, snapshot.drivers)

    def assign(self, ride_id: str, driver_id: Optional[str] = None, expected_version: Optional[int] = None) -> Ride:
        """
        Assign a pending, priced ride. Defaults to the closest ranked driver.

        Race condition resolver: the ride is re-checked inside the
        transaction, so a ride already taken by a concurrent assignment is
        rejected instead of being assigned twice. Passing the snapshot version the
        caller ranked against turns any intervening write into StaleSnapshotError.
        """
        with self.store.transaction(expected_version) as draft:
            try:
                ride = draft.ride(ride_id)
            except UnknownEntityError as e:
                raise DashboardNotice(f"Ride {ride_id} does not exist.") from e

            if ride.status != RideStatus.PENDING:
                logger.warning(f"Ride {ride_id} is already {ride.status.value}; assignment skipped")
                raise DashboardNotice(f"Ride {ride_id} is no longer pending.")

            if not ride.is_priced:
                raise DashboardNotice("Ride details are still being calculated. Please try again.")

            if driver_id is None:
                ranked = rank_drivers(ride.pickup, draft.drivers())
                if not ranked:
                    raise DashboardNotice(NO_DRIVERS_MESSAGE)
                driver_id = ranked[0].driver_id

            try:
                driver = draft.driver(driver_id)
            except UnknownEntityError as e:
                raise DashboardNotice(f"Driver {driver_id} does not exist.") from e

            try:
                new_ride, busy_driver = assign_ride(ride, driver)
            except RideStateException as e:
                logger.warning(f"Assignment rejected: {e}")
                raise DashboardNotice(str(e)) from e

            draft.put_ride(new_ride)
            draft.put_driver(busy_driver)

        logger.info(f"Ride {ride_id} assigned to driver {driver_id}")
        return new_ride
