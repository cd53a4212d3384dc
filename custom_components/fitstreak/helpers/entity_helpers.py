# File: helpers/entity_helpers.py
"""Instance-scoped naming helpers for FitStreak."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Each config entry gets its own signal namespace so managers of two
    entries never hear each other.

    Format: 'fitstreak_{entry_id}_{suffix}'

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_LOCAL_CHANGE)

    Returns:
        Fully qualified signal name scoped to this integration instance
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def build_unique_id(entry_id: str, key: str) -> str:
    """Return the entity unique_id for a sensor key of one config entry."""
    return f"{entry_id}_{key}"


def get_first_fitstreak_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first loaded FitStreak config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)
