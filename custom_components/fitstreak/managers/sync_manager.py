"""Sync Manager - Offline-first reconciliation with the remote store.

This manager owns every remote interaction:
- Recording local changes on the sync queue (LOCAL_CHANGE listener)
- Initial sync: pull the remote record when it is newer, else push
- Wholesale push of the user record, one at a time
- Retry with exponential backoff, then offline mode with a notice
- Five-minute timer: auto-sync while connected, connection check while not
- Force sync, remote reset and full reset

Conflict resolution is last-writer-wins on the whole record: the copy with
the newer lastSync replaces the other one entirely.

Pushes are serialized by one asyncio.Lock. A push requested while another
is in flight is rejected and returns False; the queued items go out with
the next push.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

from .. import const
from ..engines import RemoteRecord, RetryPolicy, SyncQueue
from ..notification_helper import async_send_notification
from ..remote import RemoteStoreError
from ..store import FitStreakStore
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import FitStreakDataCoordinator
    from ..remote import RemoteStore
    from ..type_defs import RemoteUserRecord, SyncStateData

_RECOVERABLE_STATUSES = (
    const.SYNC_STATUS_OFFLINE,
    const.SYNC_STATUS_ERROR,
    const.SYNC_STATUS_LOCAL,
)


class SyncManager(BaseManager):
    """Manager for the sync queue and the remote user record.

    With the local-only backend there is no remote store: nothing is queued
    and every remote operation reports failure.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: FitStreakDataCoordinator,
        remote_store: RemoteStore | None,
        user_id: str = const.DEFAULT_USER_ID,
    ) -> None:
        """Initialize the SyncManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main FitStreak coordinator
            remote_store: Backend adapter, or None for local-only operation
            user_id: Key of the user record on the remote store
        """
        super().__init__(hass, coordinator)
        self._remote = remote_store
        self._user_id = user_id
        self._push_lock = asyncio.Lock()
        self._retry_timer: asyncio.TimerHandle | None = None

    async def async_setup(self) -> None:
        """Set up the SyncManager.

        Subscribes to LOCAL_CHANGE, registers the auto-sync timer and starts
        the initial sync in the background.
        """
        self.listen(const.SIGNAL_SUFFIX_LOCAL_CHANGE, self._on_local_change)

        if self._remote is None:
            self._state[const.DATA_SYNC_CONNECTED] = False
            self._state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_LOCAL
            const.LOGGER.debug(
                "DEBUG: SyncManager running local-only for entry %s", self.entry_id
            )
            return

        entry = self.coordinator.config_entry
        entry.async_on_unload(
            async_track_time_interval(
                self.hass, self._async_on_interval, const.AUTO_SYNC_INTERVAL
            )
        )
        entry.async_on_unload(self._cancel_retry)
        entry.async_create_task(
            self.hass, self.async_initial_sync(), f"{const.DOMAIN}_initial_sync"
        )
        const.LOGGER.debug(
            "DEBUG: SyncManager initialized for entry %s (user %s)",
            self.entry_id,
            self._user_id,
        )

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def _state(self) -> SyncStateData:
        return self._data[const.DATA_SYNC_STATE]

    @property
    def has_remote(self) -> bool:
        """Return True when a remote backend is configured."""
        return self._remote is not None

    @property
    def is_connected(self) -> bool:
        """Return True while the remote store is reachable."""
        return bool(self._state.get(const.DATA_SYNC_CONNECTED))

    @property
    def auto_sync(self) -> bool:
        """Return the auto-sync option."""
        return self.coordinator.config_entry.options.get(
            const.CONF_AUTO_SYNC, const.DEFAULT_AUTO_SYNC
        )

    @property
    def sync_notifications(self) -> bool:
        """Return the sync-notification option."""
        return self.coordinator.config_entry.options.get(
            const.CONF_SYNC_NOTIFICATIONS, const.DEFAULT_SYNC_NOTIFICATIONS
        )

    @property
    def push_in_progress(self) -> bool:
        """Return True while a push holds the lock."""
        return self._push_lock.locked()

    def pending_count(self) -> int:
        """Return the number of queue items not yet synced."""
        return len(SyncQueue.pending(self._data[const.DATA_SYNC_QUEUE]))

    def _set_status(self, status: str) -> None:
        self._state[const.DATA_SYNC_STATUS] = status
        self.coordinator.async_update_listeners()

    def _user_filter(self, key: str, _fields: dict[str, Any]) -> bool:
        return key == self._user_id

    # =========================================================================
    # Queue
    # =========================================================================

    def enqueue(self, action: str, data: dict[str, Any]) -> bool:
        """Append a pending item; ignored when no remote backend exists.

        Returns:
            True if an item was queued
        """
        if self._remote is None:
            return False
        SyncQueue.enqueue(self._data[const.DATA_SYNC_QUEUE], action, data)
        self.coordinator._persist()
        const.LOGGER.debug(
            "DEBUG: Queued '%s' (%s pending)", action, self.pending_count()
        )
        return True

    @callback
    def _on_local_change(self, payload: dict[str, Any]) -> None:
        """Queue a local change and push right away when allowed."""
        action = payload.get(const.SIGNAL_PAYLOAD_ACTION)
        if action:
            self.enqueue(action, payload.get(const.SIGNAL_PAYLOAD_DATA) or {})
        if (
            payload.get(const.SIGNAL_PAYLOAD_PUSH)
            and self._remote is not None
            and self.auto_sync
            and self.is_connected
        ):
            self.hass.async_create_task(self.async_push())

    # =========================================================================
    # Reconciliation
    # =========================================================================

    async def async_fetch_remote_record(self) -> RemoteUserRecord | None:
        """Fetch this user's remote record (None if it does not exist).

        Raises:
            RemoteStoreError: transport or backend failure, or no backend
        """
        if self._remote is None:
            raise RemoteStoreError("fetch", const.MSG_NO_REMOTE)
        records = await self._remote.fetch_by_filter(
            const.REMOTE_ENTITY_USERS, self._user_filter
        )
        return records.get(self._user_id)

    async def async_initial_sync(self) -> bool:
        """Reconcile local and remote state once.

        No remote record: push local state. Remote strictly newer than the
        local lastSync: replace local entities with the remote copy.
        Otherwise: push local state.

        Returns:
            True if local and remote agree afterwards
        """
        if self._remote is None:
            return False

        self._set_status(const.SYNC_STATUS_SYNCING)
        try:
            remote_record = await self.async_fetch_remote_record()
        except RemoteStoreError as err:
            const.LOGGER.warning("WARNING: Initial sync failed: %s", err)
            self._state[const.DATA_SYNC_CONNECTED] = False
            self._set_status(const.SYNC_STATUS_ERROR)
            self.coordinator._persist()
            return False

        self._state[const.DATA_SYNC_CONNECTED] = True

        if remote_record and RemoteRecord.is_newer(
            remote_record.get(const.REMOTE_LAST_SYNC),
            self._state.get(const.DATA_SYNC_LAST_SYNC),
        ):
            self._apply_remote(remote_record)
            return True

        const.LOGGER.debug(
            "DEBUG: Local state is authoritative (remote record %s)",
            "older" if remote_record else "missing",
        )
        return await self.async_push()

    def _apply_remote(self, remote_record: RemoteUserRecord) -> None:
        """Replace local entities with the remote copy and persist."""
        replaced = RemoteRecord.apply(self._data, remote_record)
        self._state[const.DATA_SYNC_LAST_SYNC] = remote_record.get(
            const.REMOTE_LAST_SYNC
        )
        self._state[const.DATA_SYNC_RETRY_COUNT] = 0
        self._state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_SYNCED
        const.LOGGER.info(
            "INFO: Loaded newer remote data (%s)", ", ".join(replaced) or "nothing"
        )
        self.coordinator._persist_and_update()

    async def async_push(self) -> bool:
        """Write the whole local state as the remote user record.

        Returns:
            True on success. False when no backend exists, another push is in
            flight (rejected), or the write failed (retry scheduled or offline).
        """
        if self._remote is None:
            return False
        if self._push_lock.locked():
            const.LOGGER.debug("DEBUG: Push rejected, another push is in progress")
            return False

        async with self._push_lock:
            self._cancel_retry()
            self._set_status(const.SYNC_STATUS_SYNCING)
            synced_at = dt_util.utcnow().isoformat()
            record = RemoteRecord.build(self._data, synced_at)
            try:
                await self._remote.upsert(
                    const.REMOTE_ENTITY_USERS, self._user_id, record
                )
            except RemoteStoreError as err:
                const.LOGGER.warning("WARNING: Push failed: %s", err)
                self._handle_failure()
                return False

            RetryPolicy.on_success(self._state, synced_at)
            marked = SyncQueue.mark_synced(
                self._data[const.DATA_SYNC_QUEUE], const.SYNC_ACTIONS
            )
            self._data[const.DATA_SYNC_QUEUE] = SyncQueue.sweep(
                self._data[const.DATA_SYNC_QUEUE]
            )
            const.LOGGER.debug(
                "DEBUG: Push succeeded at %s (%s queue items completed)",
                synced_at,
                marked,
            )
            self.coordinator._persist_and_update()
            return True

    async def async_test_connection(self) -> bool:
        """Check the remote store connection and record the result."""
        if self._remote is None:
            return False
        try:
            await self._remote.fetch_by_filter(
                const.REMOTE_ENTITY_USERS, self._user_filter
            )
        except RemoteStoreError as err:
            const.LOGGER.debug("DEBUG: Connection test failed: %s", err)
            self._state[const.DATA_SYNC_CONNECTED] = False
            self._set_status(const.SYNC_STATUS_OFFLINE)
            return False

        was_connected = self.is_connected
        self._state[const.DATA_SYNC_CONNECTED] = True
        if not was_connected:
            const.LOGGER.info("INFO: Connection to remote store restored")
        if (
            self._state.get(const.DATA_SYNC_STATUS) in _RECOVERABLE_STATUSES
            and not self.pending_count()
        ):
            self._state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_SYNCED
        self.coordinator.async_update_listeners()
        return True

    async def async_force_sync(self) -> bool:
        """Test the connection, then push.

        Returns:
            True if the push succeeded
        """
        if self._remote is None:
            return False
        if not await self.async_test_connection():
            const.LOGGER.warning(
                "WARNING: Force sync aborted, remote store unreachable"
            )
            return False
        return await self.async_push()

    # =========================================================================
    # Retry Handling
    # =========================================================================

    def _handle_failure(self) -> None:
        """Apply the retry policy after a failed push."""
        decision = RetryPolicy.on_failure(self._state)
        self.coordinator._persist_and_update()

        if decision.retry:
            const.LOGGER.info(
                "INFO: Retrying push in %ss (%s/%s)",
                decision.delay_seconds,
                self._state[const.DATA_SYNC_RETRY_COUNT],
                const.RETRY_MAX_ATTEMPTS,
            )
            self._schedule_retry(decision.delay_seconds)
            return

        const.LOGGER.warning(
            "WARNING: Push failed after %s retries, offline until reconnected",
            const.RETRY_MAX_ATTEMPTS,
        )
        if self.sync_notifications:
            self.hass.async_create_task(
                async_send_notification(
                    self.hass,
                    const.TITLE_SYNC_OFFLINE,
                    const.MSG_SYNC_OFFLINE,
                    notification_id=const.NOTIFICATION_ID_OFFLINE,
                )
            )

    def _schedule_retry(self, delay_seconds: float) -> None:
        self._cancel_retry()
        self._retry_timer = self.hass.loop.call_later(
            delay_seconds, lambda: self.hass.add_job(self._async_retry())
        )

    def _cancel_retry(self) -> None:
        if self._retry_timer:
            self._retry_timer.cancel()
            self._retry_timer = None

    @property
    def retry_scheduled(self) -> bool:
        """Return True while a retry timer is pending."""
        return self._retry_timer is not None

    async def _async_retry(self) -> None:
        self._retry_timer = None
        if not self.auto_sync:
            const.LOGGER.debug("DEBUG: Retry skipped, auto-sync is off")
            return
        await self.async_push()

    # =========================================================================
    # Timer
    # =========================================================================

    async def _async_on_interval(self, _now: datetime) -> None:
        """Auto-sync while connected; check the connection while offline."""
        queue = self._data[const.DATA_SYNC_QUEUE]
        swept = SyncQueue.sweep(queue)
        self._data[const.DATA_SYNC_QUEUE] = swept
        if len(swept) != len(queue):
            const.LOGGER.debug(
                "DEBUG: Swept %d expired queue items", len(queue) - len(swept)
            )
            self.coordinator._persist()
        if self.push_in_progress:
            return

        if not self.is_connected:
            connected = await self.async_test_connection()
            if connected and self.auto_sync and self.pending_count():
                const.LOGGER.info("INFO: Connection restored, syncing pending changes")
                await self.async_push()
            return

        if self.auto_sync and self.pending_count():
            await self.async_push()

    # =========================================================================
    # Resets
    # =========================================================================

    async def async_reset_remote_data(self) -> bool:
        """Delete this user's remote record; local data is kept.

        Returns:
            True if the record was deleted
        """
        if self._remote is None or not self.is_connected:
            const.LOGGER.warning("WARNING: Remote reset skipped, not connected")
            return False
        try:
            await self._remote.delete(const.REMOTE_ENTITY_USERS, self._user_id)
        except RemoteStoreError as err:
            const.LOGGER.error("ERROR: Failed to delete remote data: %s", err)
            return False
        self._state[const.DATA_SYNC_LAST_SYNC] = None
        self.coordinator._persist_and_update()
        const.LOGGER.warning("WARNING: Remote data deleted for user %s", self._user_id)
        return True

    async def async_reset_all_data(self) -> None:
        """Delete the remote record (when connected) and all local data.

        With a remote backend, a fresh initial sync follows so the empty
        state becomes the remote record.
        """
        if self._remote is not None and self.is_connected:
            await self.async_reset_remote_data()

        self._cancel_retry()
        self.coordinator.replace_data(FitStreakStore.get_default_structure())
        const.LOGGER.warning("WARNING: All FitStreak data reset")

        if self._remote is None:
            self._state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_LOCAL
        self.coordinator._persist_and_update()
        if self._remote is not None:
            await self.async_initial_sync()
