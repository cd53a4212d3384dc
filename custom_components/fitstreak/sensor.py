# File: sensor.py
"""Sensors for the FitStreak integration.

Sensors Defined in This File:

01. StreakSensor (one per counter: overall, steps, exercise, water, wellness)
02. CurrentWeightSensor
03. PendingSyncsSensor
04. SyncStatusSensor
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfMass
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import FitStreakDataCoordinator
from .engines import StreakTracker
from .entity import FitStreakCoordinatorEntity

STREAK_COUNTERS = (const.DATA_STREAK_OVERALL, *const.GOAL_CATEGORIES)


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities
):
    """Set up sensors for FitStreak integration."""
    coordinator: FitStreakDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    entities: list[SensorEntity] = [
        StreakSensor(coordinator, entry, counter) for counter in STREAK_COUNTERS
    ]
    entities.extend(
        [
            CurrentWeightSensor(coordinator, entry),
            PendingSyncsSensor(coordinator, entry),
            SyncStatusSensor(coordinator, entry),
        ]
    )
    async_add_entities(entities)


# ------------------------------------------------------------------------------------------
class StreakSensor(FitStreakCoordinatorEntity, SensorEntity):
    """Consecutive-day counter for one goal category (or overall)."""

    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = const.UNIT_DAYS
    _attr_icon = const.ICON_STREAK

    def __init__(
        self, coordinator: FitStreakDataCoordinator, entry: ConfigEntry, counter: str
    ) -> None:
        """Initialize the sensor for a streak counter key."""
        super().__init__(
            coordinator, entry, f"{const.SENSOR_KEY_STREAK_PREFIX}{counter}"
        )
        self._counter = counter

    @property
    def native_value(self) -> int:
        """Return the current counter value."""
        return self.coordinator.streaks.get(self._counter, 0)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the last logged day and the weekly weight flag."""
        streaks = self.coordinator.streaks
        attributes: dict[str, Any] = {
            const.ATTR_LAST_LOG_DATE: streaks.get(const.DATA_STREAK_LAST_LOG_DATE),
        }
        if self._counter == const.DATA_STREAK_OVERALL:
            attributes[const.ATTR_WEEKLY_WEIGHT] = streaks.get(
                const.DATA_STREAK_WEEKLY_WEIGHT, False
            )
            attributes[const.ATTR_LONGEST_STREAK] = StreakTracker.longest(streaks)
        return attributes


# ------------------------------------------------------------------------------------------
class CurrentWeightSensor(FitStreakCoordinatorEntity, SensorEntity):
    """Current weight with progress toward the goal.

    Reports unknown until a profile is set up.
    """

    _attr_device_class = SensorDeviceClass.WEIGHT
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfMass.POUNDS
    _attr_icon = const.ICON_CURRENT_WEIGHT

    def __init__(
        self, coordinator: FitStreakDataCoordinator, entry: ConfigEntry
    ) -> None:
        super().__init__(coordinator, entry, const.SENSOR_KEY_CURRENT_WEIGHT)

    @property
    def native_value(self) -> float | None:
        """Return the current weight in lbs."""
        progress = self.coordinator.tracker_manager.weight_progress()
        return progress["current"] if progress else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        progress = self.coordinator.tracker_manager.weight_progress()
        if not progress:
            return {}
        return {
            const.ATTR_STARTING_WEIGHT: progress["starting"],
            const.ATTR_GOAL_WEIGHT: progress["goal"],
            const.ATTR_WEIGHT_LOST: progress["lost"],
            const.ATTR_WEIGHT_REMAINING: progress["remaining"],
        }


# ------------------------------------------------------------------------------------------
class PendingSyncsSensor(FitStreakCoordinatorEntity, SensorEntity):
    """Number of queued changes not yet written to the remote store."""

    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = const.UNIT_ITEMS
    _attr_icon = const.ICON_PENDING_SYNCS

    def __init__(
        self, coordinator: FitStreakDataCoordinator, entry: ConfigEntry
    ) -> None:
        super().__init__(coordinator, entry, const.SENSOR_KEY_PENDING_SYNCS)

    @property
    def native_value(self) -> int:
        return self.coordinator.sync_manager.pending_count()


# ------------------------------------------------------------------------------------------
class SyncStatusSensor(FitStreakCoordinatorEntity, SensorEntity):
    """Sync status: local, synced, syncing, error or offline."""

    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = const.SYNC_STATUS_OPTIONS
    _attr_icon = const.ICON_SYNC_STATUS

    def __init__(
        self, coordinator: FitStreakDataCoordinator, entry: ConfigEntry
    ) -> None:
        super().__init__(coordinator, entry, const.SENSOR_KEY_SYNC_STATUS)

    @property
    def native_value(self) -> str:
        """Return the current sync status."""
        return self.coordinator.sync_state.get(
            const.DATA_SYNC_STATUS, const.SYNC_STATUS_LOCAL
        )

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose connectivity, last sync and retry counter."""
        state = self.coordinator.sync_state
        return {
            const.ATTR_CONNECTED: state.get(const.DATA_SYNC_CONNECTED, False),
            const.ATTR_LAST_SYNC: state.get(const.DATA_SYNC_LAST_SYNC),
            const.ATTR_RETRY_COUNT: state.get(const.DATA_SYNC_RETRY_COUNT, 0),
        }
