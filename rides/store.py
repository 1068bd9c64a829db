"""
Purpose: Owns the shared rides/drivers/tariff state every role reads.
What it does:
- Holds one immutable, versioned Snapshot (rides, drivers, tariff).
- All writes go through transaction(): a Draft collects changes and is
  committed wholesale on clean exit, bumping the version.
- Anything raised inside a transaction discards the Draft, so the prior
  snapshot stays intact.
- Subscribers are notified with the new snapshot after each commit. A
  subscriber that raises is logged; the commit stands.

Rule: Store owns state and versioning, state machines own transition rules.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
import threading
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from drivers.models import Driver
from pricing.tariff import Tariff
from .models import ChatMessage, Ride

logger = logging.getLogger(__name__)


class StaleSnapshotError(Exception):
    """Raised when a write is based on a snapshot version that is no longer current."""
    pass


class UnknownEntityError(KeyError):
    """Raised when a ride or driver id is not in the store."""
    pass


@dataclass(frozen=True)
class Snapshot:
    version: int
    rides: Tuple[Ride, ...]
    drivers: Tuple[Driver, ...]
    tariff: Tariff

    def ride(self, ride_id: str) -> Optional[Ride]:
        return next((ride for ride in self.rides if ride.id == ride_id), None)

    def driver(self, driver_id: str) -> Optional[Driver]:
        return next((driver for driver in self.drivers if driver.id == driver_id), None)


Subscriber = Callable[[Snapshot], None]


@dataclass
class Draft:
    """
    Mutable working copy used inside RideStore.transaction().
    Keeps roster order for drivers and newest-first order for rides.
    """
    base: Snapshot
    _rides: Dict[str, Ride] = field(default_factory=dict, init=False)
    _ride_order: List[str] = field(default_factory=list, init=False)
    _drivers: Dict[str, Driver] = field(default_factory=dict, init=False)
    _driver_order: List[str] = field(default_factory=list, init=False)
    _tariff: Optional[Tariff] = field(default=None, init=False)
    changed: bool = field(default=False, init=False)

    def __post_init__(self):
        for ride in self.base.rides:
            self._rides[ride.id] = ride
            self._ride_order.append(ride.id)
        for driver in self.base.drivers:
            self._drivers[driver.id] = driver
            self._driver_order.append(driver.id)
        self._tariff = self.base.tariff

    # --- reads ---

    @property
    def tariff(self) -> Tariff:
        return self._tariff

    def ride(self, ride_id: str) -> Ride:
        try:
            return self._rides[ride_id]
        except KeyError:
            raise UnknownEntityError(f"Unknown ride {ride_id}") from None

    def driver(self, driver_id: str) -> Driver:
        try:
            return self._drivers[driver_id]
        except KeyError:
            raise UnknownEntityError(f"Unknown driver {driver_id}") from None

    def rides(self) -> List[Ride]:
        return [self._rides[ride_id] for ride_id in self._ride_order]

    def drivers(self) -> List[Driver]:
        return [self._drivers[driver_id] for driver_id in self._driver_order]

    # --- writes ---

    def add_ride(self, ride: Ride) -> None:
        if ride.id in self._rides:
            #idempotency : dont double insert
            return
        self._rides[ride.id] = ride
        self._ride_order.insert(0, ride.id)
        self.changed = True

    def put_ride(self, ride: Ride) -> None:
        self.ride(ride.id)
        if self._rides[ride.id] is not ride:
            self._rides[ride.id] = ride
            self.changed = True

    def put_driver(self, driver: Driver) -> None:
        self.driver(driver.id)
        if self._drivers[driver.id] is not driver:
            self._drivers[driver.id] = driver
            self.changed = True

    def set_tariff(self, tariff: Tariff) -> None:
        if tariff != self._tariff:
            self._tariff = tariff
            self.changed = True

    def append_message(self, ride_id: str, sender_id: str, text: str) -> Optional[ChatMessage]:
        """
        Append a chat message to a ride. Blank text is ignored.
        """
        if not text or not text.strip():
            return None
        message = ChatMessage.new(sender_id, text)
        self.put_ride(self.ride(ride_id).with_message(message))
        return message

    def commit(self) -> Snapshot:
        return Snapshot(
            version=self.base.version + 1,
            rides=tuple(self.rides()),
            drivers=tuple(self.drivers()),
            tariff=self._tariff,
        )


class RideStore:
    """
    In-process repository standing in for a backend.

    Reads return the current immutable snapshot; writes are serialized
    through transaction().
    """

    def __init__(self, rides: Sequence[Ride] = (), drivers: Sequence[Driver] = (), tariff: Optional[Tariff] = None):
        tariff = tariff or Tariff()
        tariff.validate()
        self._snapshot = Snapshot(version=0, rides=tuple(rides), drivers=tuple(drivers), tariff=tariff)
        self._subscribers: List[Subscriber] = []
        self._lock = threading.RLock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for committed snapshots. Returns an unsubscribe function.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @contextmanager
    def transaction(self, expected_version: Optional[int] = None) -> Iterator[Draft]:
        """
        Open a write transaction.

        If expected_version is given and the store has moved on since, raises
        StaleSnapshotError before any change is made.
        """
        with self._lock:
            current = self._snapshot
            if expected_version is not None and expected_version != current.version:
                raise StaleSnapshotError(
                    f"Snapshot version {expected_version} is stale (current {current.version})"
                )

            draft = Draft(base=current)
            yield draft

            if not draft.changed:
                return
            self._snapshot = draft.commit()
            committed = self._snapshot

        logger.debug(f"Committed snapshot v{committed.version}")
        # iterate over a copy so callbacks may unsubscribe themselves
        for callback in list(self._subscribers):
            try:
                callback(committed)
            except Exception:
                # the commit stands even if a subscriber fails
                logger.exception(f"Subscriber failed on snapshot v{committed.version}")

    def replace_tariff(self, tariff: Tariff) -> Snapshot:
        tariff.validate()
        with self.transaction() as draft:
            draft.set_tariff(tariff)
        return self._snapshot
