"""
Purpose: Tariff configuration (single source of truth for pricing).
What it does:

Stores the pricing knobs:

BASE_FARE = 2.00
PER_KM_RATE = 1.50
COMMISSION_RATE = 0.20

and the two presets the recommender chooses between (standard / rush).

Rule: No logic here, just parameters and their validation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tariff:
    """
    Process-wide pricing configuration.

    Notes:
    - fare = base_fare + distance_km * per_km_rate
    - the driver keeps fare * (1 - commission_rate), the platform the rest.
    """

    base_fare: float = 2.00
    per_km_rate: float = 1.50

    # fraction, e.g. 0.20 for 20%
    commission_rate: float = 0.20

    def validate(self) -> None:
        """
        Basic sanity checks. Callers validate before pricing anything.
        """
        if not self.base_fare > 0:
            raise ValueError("base_fare must be > 0")

        if not self.per_km_rate > 0:
            raise ValueError("per_km_rate must be > 0")

        if not 0.0 <= self.commission_rate <= 1.0:
            raise ValueError("commission_rate must be between 0 and 1")


def default_tariff() -> Tariff:
    """
    Convenience factory for the launch tariff.
    """
    t = Tariff()
    t.validate()
    return t


def standard_tariff(commission_rate: float = 0.20) -> Tariff:
    """
    Off-peak preset.
    """
    t = Tariff(base_fare=4.00, per_km_rate=2.00, commission_rate=commission_rate)
    t.validate()
    return t


def rush_tariff(commission_rate: float = 0.20) -> Tariff:
    """
    Peak preset: higher base and per-km rate during rush hours.
    """
    t = Tariff(base_fare=6.00, per_km_rate=3.00, commission_rate=commission_rate)
    t.validate()
    return t
