"""Test helpers for FitStreak."""

from .remote import InMemoryRemoteStore
from .setup import (
    PROFILE_DEFAULTS,
    get_coordinator,
    make_log_entry,
    make_profile,
    make_streaks,
    setup_profile,
)

__all__ = [
    "PROFILE_DEFAULTS",
    "InMemoryRemoteStore",
    "get_coordinator",
    "make_log_entry",
    "make_profile",
    "make_streaks",
    "setup_profile",
]
