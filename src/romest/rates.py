"""
Per-unit rate tables for the conveyance and storage modules.

Only a handful of categories carry a special rate; every other category is
billed at the table's default rate, so a lookup can never miss.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

CONVEYANCE_RATES_PER_FT: Dict[str, float] = {
    "MDR": 350.0,
    "Gravity": 100.0,
}
CONVEYANCE_DEFAULT_PER_FT = 500.0

STORAGE_RATES_PER_POSITION: Dict[str, float] = {
    "Selective Racking": 60.0,
    "Push Back": 120.0,
}
STORAGE_DEFAULT_PER_POSITION = 40.0

HYBRID_IN_HOUSE_SHARE = 0.5


@dataclass(frozen=True)
class RateTable:
    """Business constants used by the cost functions; override for tuning or tests."""

    conveyance_per_ft: Mapping[str, float] = field(default_factory=lambda: dict(CONVEYANCE_RATES_PER_FT))
    conveyance_default_per_ft: float = CONVEYANCE_DEFAULT_PER_FT
    storage_per_position: Mapping[str, float] = field(default_factory=lambda: dict(STORAGE_RATES_PER_POSITION))
    storage_default_per_position: float = STORAGE_DEFAULT_PER_POSITION
    hybrid_in_house_share: float = HYBRID_IN_HOUSE_SHARE


DEFAULT_RATES = RateTable()


def _lookup(table: Mapping[str, float], key: object, default: float) -> float:
    # Exact, case-sensitive match on the category name.
    if isinstance(key, str) and key in table:
        return float(table[key])
    return float(default)


def conveyance_cost_per_foot(segment_type: object, rates: Optional[RateTable] = None) -> float:
    """Return the $/ft rate for a conveyance segment type (default: highest rate)."""

    rates = rates or DEFAULT_RATES
    return _lookup(rates.conveyance_per_ft, segment_type, rates.conveyance_default_per_ft)


def storage_cost_per_position(zone_type: object, rates: Optional[RateTable] = None) -> float:
    """Return the $/position rate for a storage zone type."""

    rates = rates or DEFAULT_RATES
    return _lookup(rates.storage_per_position, zone_type, rates.storage_default_per_position)


__all__ = [
    "CONVEYANCE_DEFAULT_PER_FT",
    "CONVEYANCE_RATES_PER_FT",
    "DEFAULT_RATES",
    "HYBRID_IN_HOUSE_SHARE",
    "RateTable",
    "STORAGE_DEFAULT_PER_POSITION",
    "STORAGE_RATES_PER_POSITION",
    "conveyance_cost_per_foot",
    "storage_cost_per_position",
]
