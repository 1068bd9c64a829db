"""
Pricing domain package.

Public API:
- Tariff model and presets: Tariff, default_tariff, standard_tariff, rush_tariff
- Fare math: fare, driver_payout, calculate_ride_details, RideDetails
- Recommendation: recommend_tariff, is_rush_hour
"""
from .tariff import Tariff, default_tariff, standard_tariff, rush_tariff
from .fare import RideDetails, fare, driver_payout, calculate_ride_details
from .recommendation import recommend_tariff, is_rush_hour

__all__ = [
    "Tariff",
    "default_tariff",
    "standard_tariff",
    "rush_tariff",
    "RideDetails",
    "fare",
    "driver_payout",
    "calculate_ride_details",
    "recommend_tariff",
    "is_rush_hour",
]
