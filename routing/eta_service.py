#Purpose: ETA estimation policy.
#Converts distance outputs into the customer-facing "arrives in X" minutes
#for a driver on the way to the pickup point.

import math
from typing import Optional

from drivers.policy import DriverPolicy, default_driver_policy
from routing.distance import LatLng, distance_km


def estimate_eta_minutes(
        driver_location: LatLng,
        pickup: LatLng,
        policy: Optional[DriverPolicy] = None,
) -> int:
    """
    Minutes for a driver to reach the pickup point.

    travel time at the policy's average city speed, rounded up, plus a fixed
    buffer for parking/traffic.
    """
    policy = policy or default_driver_policy()

    road_km = distance_km(driver_location, pickup)
    travel_minutes = math.ceil(road_km * 60 / policy.average_speed_kmh)
    return travel_minutes + policy.eta_buffer_minutes
