# File: utils/math_utils.py
"""Math and unit utilities for FitStreak.

Pure Python math functions with ZERO Home Assistant dependencies.

Functions:
    - round_value: Consistent rounding to configured precision
    - lbs_to_kg / kg_to_lbs: Weight unit conversion
    - to_storage_weight: Convert a display-unit weight to stored lbs
"""

from __future__ import annotations

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

DATA_FLOAT_PRECISION = 2
LBS_TO_KG = 0.453592
UNIT_KG = "kg"


def round_value(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a float to the configured precision.

    Examples:
        round_value(10.456) -> 10.46
        round_value(10.0) -> 10.0
    """
    return round(value, precision)


def lbs_to_kg(value: float) -> float:
    """Convert pounds to kilograms."""
    return value * LBS_TO_KG


def kg_to_lbs(value: float) -> float:
    """Convert kilograms to pounds."""
    return value / LBS_TO_KG


def to_storage_weight(value: float, unit: str) -> float:
    """Convert a weight entered in `unit` to the stored unit (lbs).

    Any unit other than "kg" is treated as lbs.
    """
    if unit == UNIT_KG:
        return kg_to_lbs(value)
    return value
