"""
Purpose: The fixed login roster and the demo dataset (centered on Cairo).
What it does:
Provides the drivers, passengers and admin users that can be picked at login,
plus seed rides and the launch tariff for a fresh RideStore.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from drivers.models import Driver, DriverStatus
from pricing.tariff import Tariff, default_tariff
from rides.models import Ride, RideStatus
from rides.store import RideStore
from .models import Role, User

ADMIN_USER = User(id="admin", name="Admin", role=Role.ADMIN)


def initial_drivers() -> List[Driver]:
    return [
        Driver.new("d1", "John Doe", 30.0626, 31.2263, vehicle="Toyota Prius",
                   status=DriverStatus.OFFLINE, earnings=8.30, phone_number="+201000000001"),  # Zamalek
        Driver.new("d2", "Jane Smith", 30.0444, 31.2357, vehicle="Honda Civic",
                   status=DriverStatus.OFFLINE, phone_number="+201000000002"),  # Tahrir Square
        Driver.new("d3", "Sam Wilson", 29.9753, 31.2403, vehicle="Ford Fusion",
                   is_blocked=True, phone_number="+201000000003"),  # Maadi
    ]


def initial_passengers() -> List[User]:
    return [
        User(id="p1", name="Karim", role=Role.PASSENGER, phone_number="+201200000001"),
        User(id="p2", name="Layla", role=Role.PASSENGER, phone_number="+201200000002"),
    ]


def initial_rides(now: Optional[datetime] = None) -> List[Ride]:
    now = now or datetime.now()
    return [
        Ride(id="r1", passenger_name="Hossam",
             pickup_label="AUC Tahrir Square", dropoff_label="Khan el-Khalili",
             pickup=(30.0449, 31.2360), dropoff=(30.0478, 31.2623),
             requested_at=now),
        Ride(id="r2", passenger_name="Fatima",
             pickup_label="Cairo Tower", dropoff_label="City Stars Mall",
             pickup=(30.0459, 31.2243), dropoff=(30.0732, 31.3413),
             requested_at=now - timedelta(minutes=5)),
        Ride(id="r3", passenger_name="Ali",
             pickup_label="Maadi Grand Mall", dropoff_label="Cairo Festival City Mall",
             pickup=(29.9622, 31.2497), dropoff=(30.0271, 31.4085),
             status=RideStatus.COMPLETED, driver_id="d1",
             requested_at=now - timedelta(hours=2),
             distance_km=18.5, fare=30.75),
    ]


def login_roster() -> List[User]:
    """Everyone who can be selected on the login screen."""
    return [driver.as_user() for driver in initial_drivers()] + initial_passengers() + [ADMIN_USER]


def find_user(user_id: str) -> Optional[User]:
    return next((user for user in login_roster() if user.id == user_id), None)


def demo_store(tariff: Optional[Tariff] = None) -> RideStore:
    """A fresh store loaded with the demo dataset."""
    return RideStore(rides=initial_rides(), drivers=initial_drivers(), tariff=tariff or default_tariff())
