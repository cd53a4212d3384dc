# File: coordinator.py
"""Coordinator for the FitStreak integration.

Holds the single application-state dict for one config entry and hands it
to the managers. The coordinator itself performs no domain logic:
- TrackerManager: profile, daily logs, goals, settings, resets, statistics
- RewardManager: custom rewards, milestones, claims, unlock notices
- SyncManager: queue, retry policy and reconciliation with the remote store
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .managers import RewardManager, SyncManager, TrackerManager
from .notification_helper import async_send_notification

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .remote import RemoteStore
    from .store import FitStreakStore
    from .type_defs import (
        AchievementData,
        CustomRewardData,
        DailyLogEntry,
        ProfileData,
        SettingsData,
        StreakState,
        SyncQueueItem,
        SyncStateData,
    )


class FitStreakDataCoordinator(DataUpdateCoordinator):
    """Coordinator for FitStreak integration.

    No polling: entities refresh when a manager calls
    _persist_and_update().
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: FitStreakStore,
        remote_store: RemoteStore | None = None,
    ) -> None:
        """Initialize the FitStreakDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store
        self._data: dict[str, Any] = store.data

        self.sync_manager = SyncManager(
            hass,
            self,
            remote_store,
            config_entry.data.get(const.CONF_USER_ID, const.DEFAULT_USER_ID),
        )
        self.tracker_manager = TrackerManager(hass, self)
        self.reward_manager = RewardManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Data Access Properties
    # -------------------------------------------------------------------------------------

    @property
    def profile(self) -> ProfileData | None:
        """Return the user profile (None until set up)."""
        return self._data.get(const.DATA_USER)

    @property
    def daily_logs(self) -> dict[str, DailyLogEntry]:
        """Return the daily logs keyed by ISO date."""
        return self._data[const.DATA_DAILY_LOGS]

    @property
    def streaks(self) -> StreakState:
        """Return the streak state."""
        return self._data[const.DATA_STREAKS]

    @property
    def custom_rewards(self) -> list[CustomRewardData]:
        """Return the custom rewards in creation order."""
        return self._data[const.DATA_CUSTOM_REWARDS]

    @property
    def achievements(self) -> list[AchievementData]:
        """Return the append-only achievements list."""
        return self._data[const.DATA_ACHIEVEMENTS]

    @property
    def settings(self) -> SettingsData:
        """Return the user settings."""
        return self._data[const.DATA_SETTINGS]

    @property
    def sync_queue(self) -> list[SyncQueueItem]:
        """Return the sync queue."""
        return self._data[const.DATA_SYNC_QUEUE]

    @property
    def sync_state(self) -> SyncStateData:
        """Return the sync state."""
        return self._data[const.DATA_SYNC_STATE]

    # -------------------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------------------

    async def async_config_entry_first_refresh(self) -> None:
        """Start managers once the stored data is loaded."""
        self._data = self.store.data

        if self.store.fresh_start:
            self.hass.async_create_task(
                async_send_notification(
                    self.hass,
                    const.TITLE_FRESH_START,
                    const.MSG_FRESH_START,
                    notification_id=const.NOTIFICATION_ID_FRESH_START,
                )
            )

        await self.sync_manager.async_setup()
        await self.tracker_manager.async_setup()
        await self.reward_manager.async_setup()

        await super().async_config_entry_first_refresh()

    async def _async_update_data(self) -> dict[str, Any]:
        """Return the in-memory state; there is nothing to poll."""
        return self._data

    def replace_data(self, new_data: dict[str, Any]) -> None:
        """Swap in a whole new state document (full reset)."""
        self._data = new_data
        self.store.set_data(new_data)

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.store.set_data(self._data)
        self.hass.add_job(self.store.async_save)

    def _persist_and_update(self) -> None:
        """Save and push the new state to entities."""
        self._persist()
        self.async_set_updated_data(self._data)
