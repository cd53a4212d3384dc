"""Base manager class for FitStreak managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import FitStreakDataCoordinator


class BaseManager(ABC):
    """Shared plumbing for the tracker, reward and sync managers.

    Signals are scoped to one config entry, so two entries never see each
    other's events. Listeners are dropped when the entry unloads.

    Tracker and reward changes go through `_local_change`, which persists,
    refreshes sensors and hands the change to the SyncManager. Sync queue and
    sync state bookkeeping calls `coordinator._persist()` directly.
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: FitStreakDataCoordinator
    ) -> None:
        """Bind the manager to its coordinator and config entry."""
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    @property
    def _data(self) -> dict[str, Any]:
        """Access coordinator's data dict dynamically.

        coordinator._data may be reassigned by a reset or a remote merge.
        """
        return self.coordinator._data

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send `payload` to every listener of `suffix` on this entry."""
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "DEBUG: Signal %s on entry %s (keys: %s)",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Dispatcher only supports *args, so the payload travels as one dict
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Call `callback` with the payload dict whenever `suffix` fires."""
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "DEBUG: %s subscribed to %s on entry %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    def _local_change(
        self,
        action: str | None = None,
        data: dict[str, Any] | None = None,
        *,
        push: bool = False,
    ) -> None:
        """Persist, refresh entities and announce the change for syncing.

        `action` names the sync queue item to record (None records nothing).
        `push` asks for an immediate push when auto-sync is on and connected.
        """
        self.coordinator._persist_and_update()
        self.emit(
            const.SIGNAL_SUFFIX_LOCAL_CHANGE,
            action=action,
            data=data,
            push=push,
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Subscribe to signals and start timers. Runs once at entry setup."""
