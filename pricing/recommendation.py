"""
Purpose: Time-of-day tariff recommendation.
What it does:
Picks the rush preset during morning and evening peaks and the standard
preset otherwise. The commission rate of the current tariff is carried over
untouched; only base fare and per-km rate are suggested.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from .tariff import Tariff, rush_tariff, standard_tariff

# inclusive hour windows
RUSH_HOURS = ((8, 10), (16, 19))


def is_rush_hour(hour: int) -> bool:
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0..23, got {hour}")
    return any(start <= hour <= end for start, end in RUSH_HOURS)


def recommend_tariff(current: Tariff, hour: Optional[int] = None) -> Tariff:
    """
    Suggest a tariff for the given hour (local time now when omitted).
    """
    if hour is None:
        hour = datetime.now().hour

    preset = rush_tariff() if is_rush_hour(hour) else standard_tariff()
    return replace(preset, commission_rate=current.commission_rate)
