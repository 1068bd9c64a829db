"""
Purpose: Business rules and distance math for choosing the best driver.
What it does:
Accepts a pickup point and a pool of drivers, filters out ineligible drivers,
and ranks the remaining ones by road distance to the pickup.
"""

from dataclasses import dataclass
from typing import List, Sequence

from routing.distance import LatLng, distance_km
from .models import Driver


@dataclass(frozen=True)
class RankedDriver:
    driver_id: str
    name: str
    distance_to_pickup_km: float


def filter_eligible_drivers(drivers: Sequence[Driver]) -> List[Driver]:
    """
    Returns only drivers who are online and not blocked, in roster order.
    """
    eligible = []

    for driver in drivers:
        if not driver.is_available:
            continue

        eligible.append(driver)

    return eligible


def rank_drivers(pickup: LatLng, drivers: Sequence[Driver]) -> List[RankedDriver]:
    """
    Rank eligible drivers from closest to farthest.

    Python's sort is stable, so drivers at equal distance keep their roster
    order. An empty result means no assignment is possible.
    """
    ranked = [
        RankedDriver(
            driver_id=driver.id,
            name=driver.name,
            distance_to_pickup_km=distance_km(driver.location, pickup),
        )
        for driver in filter_eligible_drivers(drivers)
    ]

    ranked.sort(key=lambda candidate: candidate.distance_to_pickup_km)
    return ranked
