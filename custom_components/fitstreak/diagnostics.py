"""Diagnostics support for FitStreak integration.

Returns the raw tracker document next to the config entry, with backend
credentials redacted.
"""

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import FitStreakDataCoordinator

TO_REDACT = {const.CONF_API_KEY, const.CONF_DATABASE_URL, const.CONF_BIN_ID}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: FitStreakDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "entry": {
            "data": async_redact_data(dict(entry.data), TO_REDACT),
            "options": dict(entry.options),
        },
        "pending_syncs": coordinator.sync_manager.pending_count(),
        "storage": coordinator.store.data,
    }
