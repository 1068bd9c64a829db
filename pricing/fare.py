"""
Purpose: Fare computation from a road distance and the current tariff.
"""

from __future__ import annotations

from dataclasses import dataclass

from routing.distance import LatLng, distance_km
from .tariff import Tariff


@dataclass(frozen=True)
class RideDetails:
    distance_km: float
    fare: float


def fare(distance: float, tariff: Tariff) -> float:
    """base fare + distance * per-km rate, rounded to two decimals."""
    return round(tariff.base_fare + distance * tariff.per_km_rate, 2)


def driver_payout(ride_fare: float, tariff: Tariff) -> float:
    """The part of a fare the driver keeps after platform commission."""
    return ride_fare * (1 - tariff.commission_rate)


def calculate_ride_details(pickup: LatLng, dropoff: LatLng, tariff: Tariff) -> RideDetails:
    distance = distance_km(pickup, dropoff)
    return RideDetails(distance_km=distance, fare=fare(distance, tariff))
