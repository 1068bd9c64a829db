"""
Purpose: Admin coordinator.
What it does:
Prices pending rides, ranks and assigns drivers, manages the tariff
(recommendation + validated updates) and blocks/unblocks drivers.
"""

from dataclasses import replace
import logging
from typing import List, Optional

from drivers.selection import RankedDriver
from pricing.fare import calculate_ride_details, fare
from pricing.recommendation import recommend_tariff
from pricing.tariff import Tariff
from rides.models import Ride, RideStatus
from rides.store import RideStore
from .dispatcher import Dispatcher, NO_DRIVERS_MESSAGE
from .notices import DashboardNotice
from .state_machines.driver_state import DriverStateException, set_blocked

logger = logging.getLogger(__name__)

# rides whose fare follows tariff changes
REPRICED_STATUSES = (RideStatus.PENDING, RideStatus.ASSIGNED)

INVALID_TARIFF_MESSAGE = (
    "Please enter valid positive numbers for fares and a commission rate between 0 and 100%."
)


class AdminDashboard:
    def __init__(self, store: RideStore, dispatcher: Optional[Dispatcher] = None):
        self.store = store
        self.dispatcher = dispatcher or Dispatcher(store)

    @property
    def tariff(self) -> Tariff:
        return self.store.snapshot.tariff

    def calculate_missing_details(self) -> List[Ride]:
        """
        Compute distance and fare for every pending ride that lacks them.
        Returns the rides that were priced. A ride with unusable coordinates is
        logged and left unpriced; the others are still priced.
        """
        priced = []
        with self.store.transaction() as draft:
            for ride in draft.rides():
                if ride.status != RideStatus.PENDING or ride.is_priced:
                    continue
                try:
                    details = calculate_ride_details(ride.pickup, ride.dropoff, draft.tariff)
                except ValueError as e:
                    logger.error(f"Cannot price ride {ride.id}: {e}")
                    continue
                updated = replace(ride, distance_km=details.distance_km, fare=details.fare)
                draft.put_ride(updated)
                priced.append(updated)

        for ride in priced:
            logger.info(f"Priced ride {ride.id}: {ride.distance_km} km, {ride.fare:.2f}")
        return priced

    def rank_drivers(self, ride_id: str) -> List[RankedDriver]:
        ranked = self.dispatcher.rank_for_ride(ride_id)
        if not ranked:
            raise DashboardNotice(NO_DRIVERS_MESSAGE)
        return ranked

    def assign_ride(self, ride_id: str, driver_id: Optional[str] = None, expected_version: Optional[int] = None) -> Ride:
        return self.dispatcher.assign(ride_id, driver_id, expected_version)

    def recommend_tariff(self, hour: Optional[int] = None) -> Tariff:
        """
        A suggestion only; nothing changes until update_tariff() is called.
        """
        return recommend_tariff(self.tariff, hour)

    def update_tariff(self, tariff: Tariff) -> Tariff:
        """
        Replace the current tariff and re-price rides that are still pending
        or assigned. Completed and cancelled rides keep their fare.
        """
        try:
            tariff.validate()
        except ValueError as e:
            logger.warning(f"Tariff update rejected: {e}")
            raise DashboardNotice(INVALID_TARIFF_MESSAGE) from e

        with self.store.transaction() as draft:
            draft.set_tariff(tariff)
            for ride in draft.rides():
                if ride.status in REPRICED_STATUSES and ride.distance_km is not None:
                    draft.put_ride(replace(ride, fare=fare(ride.distance_km, tariff)))

        logger.info(
            f"Tariff updated: base {tariff.base_fare}, per km {tariff.per_km_rate}, "
            f"commission {tariff.commission_rate}"
        )
        return tariff

    def toggle_block(self, driver_id: str) -> bool:
        """
        Flip a driver's blocked flag. Returns the new flag.
        """
        with self.store.transaction() as draft:
            driver = draft.driver(driver_id)
            try:
                updated = set_blocked(driver, not driver.is_blocked)
            except DriverStateException as e:
                raise DashboardNotice(str(e)) from e
            draft.put_driver(updated)

        logger.info(f"Driver {driver_id} {'blocked' if updated.is_blocked else 'unblocked'}")
        return updated.is_blocked

    def commission_owed(self, driver_id: str) -> float:
        """
        What the driver owes the platform: earnings times the current
        commission rate, rounded to two decimals.
        """
        driver = self.store.snapshot.driver(driver_id)
        if driver is None:
            raise DashboardNotice(f"Driver {driver_id} does not exist.")
        return round(driver.earnings * self.tariff.commission_rate, 2)
