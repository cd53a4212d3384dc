# File: store.py
"""Handles persistent data storage for the FitStreak integration.

Uses Home Assistant's Storage helper to save and load the tracker state
(profile, daily logs, streaks, rewards, achievements, settings and the
sync queue) so it is preserved across restarts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const
from .engines import RetryPolicy, StreakTracker

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

# Expected container type per top-level key. `user` may also be None.
_CONTAINER_TYPES: dict[str, type] = {
    const.DATA_USER: dict,
    const.DATA_DAILY_LOGS: dict,
    const.DATA_STREAKS: dict,
    const.DATA_CUSTOM_REWARDS: list,
    const.DATA_ACHIEVEMENTS: list,
    const.DATA_SETTINGS: dict,
    const.DATA_SYNC_QUEUE: list,
    const.DATA_SYNC_STATE: dict,
    const.DATA_META: dict,
}


class FitStreakStore:
    """Handles persistent storage operations for FitStreak data.

    Thin wrapper around Home Assistant's Store API for loading, saving, and
    accessing the tracker document.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}
        # Set when a corrupt document was discarded during async_initialize
        self.fresh_start = False

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations.

        Used by async_initialize(), the corrupt-state fallback and the
        full data reset.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
            },
            const.DATA_USER: None,
            const.DATA_DAILY_LOGS: {},
            const.DATA_STREAKS: StreakTracker.initial_state(),
            const.DATA_CUSTOM_REWARDS: [],
            const.DATA_ACHIEVEMENTS: [],
            const.DATA_SETTINGS: dict(const.DEFAULT_SETTINGS),
            const.DATA_SYNC_QUEUE: [],
            const.DATA_SYNC_STATE: RetryPolicy.initial_state(),
        }

    @staticmethod
    def is_corrupt(document: Any) -> bool:
        """Return True if a loaded document cannot be used as-is.

        A document is corrupt when it is not a dict or any known key holds
        a value of the wrong container type. Missing keys are not corruption.
        """
        if not isinstance(document, dict):
            return True
        for key, expected in _CONTAINER_TYPES.items():
            if key not in document:
                continue
            value = document[key]
            if key == const.DATA_USER and value is None:
                continue
            if not isinstance(value, expected):
                return True
        return False

    @staticmethod
    def backfill(document: dict[str, Any]) -> dict[str, Any]:
        """Fill missing top-level keys and settings fields with defaults."""
        defaults = FitStreakStore.get_default_structure()
        for key, value in defaults.items():
            document.setdefault(key, value)
        document[const.DATA_SETTINGS] = {
            **const.DEFAULT_SETTINGS,
            **document[const.DATA_SETTINGS],
        }
        for key, value in RetryPolicy.initial_state().items():
            document[const.DATA_SYNC_STATE].setdefault(key, value)
        for key, value in StreakTracker.initial_state().items():
            document[const.DATA_STREAKS].setdefault(key, value)
        return document

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. A corrupt
        document is replaced by the default structure and `fresh_start`
        is set so the caller can tell the user.
        """
        const.LOGGER.debug("DEBUG: FitStreakStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = FitStreakStore.get_default_structure()
        elif self.is_corrupt(existing_data):
            const.LOGGER.warning(
                "WARNING: Stored data in %s is malformed. Starting fresh",
                self._store.path,
            )
            self._data = FitStreakStore.get_default_structure()
            self.fresh_start = True
            await self.async_save()
        else:
            self._data = self.backfill(existing_data)
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s",
                {
                    "profile": self._data.get(const.DATA_USER) is not None,
                    "daily_logs": len(self._data[const.DATA_DAILY_LOGS]),
                    "custom_rewards": len(self._data[const.DATA_CUSTOM_REWARDS]),
                    "achievements": len(self._data[const.DATA_ACHIEVEMENTS]),
                    "sync_queue": len(self._data[const.DATA_SYNC_QUEUE]),
                },
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Errors are logged but do not stop execution.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s",
                err,
            )

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = FitStreakStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s", self._store.path
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
