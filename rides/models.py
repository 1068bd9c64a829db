"""
Purpose: Domain models for the Rides capability.
What it does:
- Defines core data structures:
- Ride (id, passenger, pickup/dropoff labels and coords, status, driver, timestamps, pricing, eta, chat)
- ChatMessage (id, sender, text, timestamp)

Defines enums/constants:
- RideStatus = PENDING | ASSIGNED | EN_ROUTE_TO_PICKUP | DRIVER_ARRIVED | IN_PROGRESS | COMPLETED | CANCELLED

Rule: No geocoding calls, no lifecycle rules. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import uuid

LatLng = Tuple[float, float]


class RideStatus(str, Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    EN_ROUTE_TO_PICKUP = "EN_ROUTE_TO_PICKUP"
    DRIVER_ARRIVED = "DRIVER_ARRIVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (RideStatus.COMPLETED, RideStatus.CANCELLED)

    @property
    def is_active(self) -> bool:
        return not self.is_terminal


# statuses in which a driver is working the ride (after accepting it)
DRIVER_ACTIVE_STATUSES = (
    RideStatus.EN_ROUTE_TO_PICKUP,
    RideStatus.DRIVER_ARRIVED,
    RideStatus.IN_PROGRESS,
)


@dataclass(frozen=True)
class ChatMessage:
    id: str
    sender_id: str
    text: str
    sent_at: datetime = field(default_factory=datetime.now)

    @staticmethod
    def new(sender_id: str, text: str) -> ChatMessage:
        return ChatMessage(id=uuid.uuid4().hex, sender_id=sender_id, text=text)


@dataclass(frozen=True)
class Ride:
    """
    A single ride request and everything that happened to it.
    Rides are never deleted; cancelled/completed rides stay in history.
    """

    id: str
    passenger_name: str
    pickup_label: str
    dropoff_label: str
    pickup: LatLng
    dropoff: LatLng

    status: RideStatus = RideStatus.PENDING
    driver_id: Optional[str] = None
    requested_at: datetime = field(default_factory=datetime.now)

    # filled by the fare calculator; required before assignment
    distance_km: Optional[float] = None
    fare: Optional[float] = None

    # minutes for the assigned driver to reach pickup
    eta_minutes: Optional[int] = None

    chat_messages: Tuple[ChatMessage, ...] = ()

    @property
    def is_priced(self) -> bool:
        return self.distance_km is not None and self.fare is not None

    def with_message(self, message: ChatMessage) -> Ride:
        return replace(self, chat_messages=self.chat_messages + (message,))

    @staticmethod # Factory method to create a Ride with a generated id
    def new(
        passenger_name: str,
        pickup_label: str,
        dropoff_label: str,
        pickup: LatLng,
        dropoff: LatLng,
        distance_km: Optional[float] = None,
        fare: Optional[float] = None,
    ) -> Ride:
        return Ride(
            id=f"r{uuid.uuid4().hex[:12]}",
            passenger_name=passenger_name,
            pickup_label=pickup_label,
            dropoff_label=dropoff_label,
            pickup=pickup,
            dropoff=dropoff,
            distance_km=distance_km,
            fare=fare,
        )
