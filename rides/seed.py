"""
Purpose: Load mock drivers and ride requests from CSV files.
What it does:
Reads the files produced by scripts/generate_mock_drivers.py and
scripts/generate_mock_data.py into Driver / Ride models.
"""

import csv
from datetime import datetime
import logging
import os
from typing import List, Optional

from drivers.models import Driver
from routing.distance import validate_coordinates
from .models import Ride, RideStatus

logger = logging.getLogger(__name__)


def load_drivers(filepath: str) -> List[Driver]:
    drivers = []

    with open(filepath, 'r', newline='') as file:
        reader = csv.DictReader(file)
        for row in reader:
            drivers.append(
                Driver.new(
                    row['driver_id'],
                    row.get('name') or row['driver_id'],
                    float(row['lat']),
                    float(row['lng']),
                    vehicle=row.get('vehicle', ''),
                    status=row.get('status') or 'OFFLINE',
                    earnings=float(row.get('earnings') or 0.0),
                    is_blocked=(row.get('is_blocked', '').strip().lower() in ('1', 'true', 'yes')),
                    phone_number=row.get('phone_number') or None,
                )
            )
    return drivers


def load_rides(filepath: str, limit: Optional[int] = None) -> List[Ride]:
    rides = []

    with open(filepath, 'r', newline='') as file:
        reader = csv.DictReader(file)
        for row in reader:
            if limit is not None and len(rides) >= limit:
                break

            pickup = (float(row['pickup_lat']), float(row['pickup_lng']))
            dropoff = (float(row['dropoff_lat']), float(row['dropoff_lng']))
            try:
                validate_coordinates(pickup)
                validate_coordinates(dropoff)
            except ValueError as e:
                logger.warning(f"Skipping ride {row['ride_id']}: {e}")
                continue

            requested_at = row.get('requested_at')
            rides.append(
                Ride(
                    id=row['ride_id'],
                    passenger_name=row['passenger_name'],
                    pickup_label=row['pickup_label'],
                    dropoff_label=row['dropoff_label'],
                    pickup=pickup,
                    dropoff=dropoff,
                    status=RideStatus(row.get('status') or 'PENDING'),
                    requested_at=datetime.fromisoformat(requested_at) if requested_at else datetime.now(),
                )
            )
    return rides


def resolve_data_path(filename: str) -> str:
    """
    Resolve a data file relative to the repository root when it is not found
    relative to the working directory.
    """
    if os.path.exists(filename):
        return filename
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_dir, filename)
