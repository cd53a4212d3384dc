"""Base entity class for FitStreak integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import FitStreakDataCoordinator
from .helpers.entity_helpers import build_unique_id


class FitStreakCoordinatorEntity(CoordinatorEntity[FitStreakDataCoordinator]):
    """Base entity class for FitStreak sensors.

    All entities of one config entry hang off a single tracker device.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: FitStreakDataCoordinator, entry: ConfigEntry, key: str
    ) -> None:
        """Initialize the entity with its unique key."""
        super().__init__(coordinator)
        self._attr_unique_id = build_unique_id(entry.entry_id, key)
        self._attr_translation_key = key
        self._attr_device_info = DeviceInfo(
            identifiers={(const.DOMAIN, entry.entry_id)},
            name=entry.title,
            manufacturer=const.DEVICE_MANUFACTURER,
            model=const.DEVICE_MODEL,
        )
