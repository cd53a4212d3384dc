# File: __init__.py
"""Initialization file for the FitStreak integration.

Handles setting up the integration, including loading the stored tracker
state, building the remote store for the configured backend and preparing
the coordinator.

Key Features:
- Config entry setup, unload and removal.
- Coordinator initialization with tracker, reward and sync managers.
- Reload on options change (auto-sync, sync notifications).
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import FitStreakDataCoordinator
from .remote import create_remote_store
from .services import async_setup_services, async_unload_services
from .store import FitStreakStore
from .utils import dt_utils


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for FitStreak entry: %s", entry.entry_id)

    # Date helpers must use the Home Assistant timezone before anything logs a day.
    dt_utils.set_default_timezone(dt_util.get_default_time_zone())

    store = FitStreakStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    remote_store = create_remote_store(async_get_clientsession(hass), entry.data)

    coordinator = FitStreakDataCoordinator(hass, entry, store, remote_store)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    const.LOGGER.info("INFO: FitStreak setup complete for entry: %s", entry.entry_id)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry so new sync options take effect."""
    const.LOGGER.debug("DEBUG: Options changed, reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading FitStreak entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        # Flush anything scheduled by the last change before the entry goes away.
        await entry_data[const.STORAGE_MANAGER].async_save()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing FitStreak entry: %s", entry.entry_id)

    store = FitStreakStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: FitStreak entry data cleared: %s", entry.entry_id)
