"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver and their status. Drivers are frozen;
every change produces a new instance via dataclasses.replace.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from users.models import Role, User

LatLng = Tuple[float, float]


class DriverStatus(str, Enum):
    """
    Standardizes the state a driver can be in.
    A blocked driver is always OFFLINE.
    """
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    BUSY = "BUSY"


@dataclass(frozen=True)
class Driver:
    """
    A driver at a specific point in time.
    """
    id: str
    name: str
    location: LatLng
    vehicle: str
    status: DriverStatus = DriverStatus.OFFLINE
    earnings: float = 0.0
    is_blocked: bool = False
    phone_number: Optional[str] = None

    @property
    def role(self) -> Role:
        return Role.DRIVER

    @property
    def is_available(self) -> bool:
        return self.status == DriverStatus.ONLINE and not self.is_blocked

    def as_user(self) -> User:
        return User(id=self.id, name=self.name, role=Role.DRIVER, phone_number=self.phone_number)

    @classmethod
    def new(
        cls,
        driver_id: str,
        name: str,
        lat: float,
        lng: float,
        vehicle: str = "",
        status: str | DriverStatus = DriverStatus.OFFLINE,
        earnings: float = 0.0,
        is_blocked: bool = False,
        phone_number: Optional[str] = None,
    ) -> Driver:
        if isinstance(status, str):
            status = DriverStatus(status.upper())

        # blocked drivers never come up online
        if is_blocked:
            status = DriverStatus.OFFLINE

        return cls(
            id=driver_id,
            name=name,
            location=(lat, lng),
            vehicle=vehicle,
            status=status,
            earnings=earnings,
            is_blocked=is_blocked,
            phone_number=phone_number,
        )
