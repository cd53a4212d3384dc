# File: utils/__init__.py
"""Pure Python utilities for FitStreak.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date/time parsing, week and day arithmetic
    - math_utils: Rounding and weight unit conversion
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
