"""Sync Engine - Pure logic for the sync queue, retry policy and remote record.

This engine provides stateless functions for:
- Sync queue item creation, completion marking and the time-bounded sweep
- Retry backoff arithmetic and the offline fallback transition
- Building the wholesale remote user record and applying one locally
- Last-writer-wins timestamp comparison

The sweep drops any item older than 24 hours whether or not it was synced.
An item that cannot be delivered for a full day is lost; this bound keeps the
queue from growing without limit while offline.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
State management belongs in SyncManager.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils
from .streak_engine import StreakTracker

if TYPE_CHECKING:
    from ..type_defs import RemoteUserRecord, SyncQueueItem, SyncStateData

_LOGGER = logging.getLogger(__name__)


# =============================================================================
# Sync Queue
# =============================================================================


class SyncQueue:
    """Pure operations over the list of pending sync items."""

    @staticmethod
    def create_item(
        action: str, data: dict[str, Any], timestamp: str | None = None
    ) -> SyncQueueItem:
        """Create an unsynced queue item holding a snapshot of `data`."""
        return {
            const.DATA_QUEUE_ACTION: action,
            const.DATA_QUEUE_DATA: copy.deepcopy(data),
            const.DATA_QUEUE_TIMESTAMP: timestamp or dt_utils.dt_now_iso(),
            const.DATA_QUEUE_SYNCED: False,
        }

    @staticmethod
    def enqueue(
        queue: list[SyncQueueItem],
        action: str,
        data: dict[str, Any],
        timestamp: str | None = None,
    ) -> SyncQueueItem:
        """Append a new unsynced item and return it."""
        item = SyncQueue.create_item(action, data, timestamp)
        queue.append(item)
        return item

    @staticmethod
    def mark_synced(queue: list[SyncQueueItem], actions: tuple[str, ...]) -> int:
        """Mark every pending item whose action is in `actions` as synced.

        Returns:
            Number of items newly marked
        """
        marked = 0
        for item in queue:
            if item.get(const.DATA_QUEUE_ACTION) in actions and not item.get(
                const.DATA_QUEUE_SYNCED
            ):
                item[const.DATA_QUEUE_SYNCED] = True
                marked += 1
        return marked

    @staticmethod
    def pending(queue: list[SyncQueueItem]) -> list[SyncQueueItem]:
        """Return items not yet synced."""
        return [item for item in queue if not item.get(const.DATA_QUEUE_SYNCED)]

    @staticmethod
    def sweep(
        queue: list[SyncQueueItem], now_utc: datetime | None = None
    ) -> list[SyncQueueItem]:
        """Return the queue without synced items and items older than 24 hours.

        Items with a missing or unparseable timestamp are dropped because
        their age cannot be bounded.

        Args:
            queue: Current queue (not modified)
            now_utc: Optional current time override for deterministic tests
        """
        current_time = now_utc or datetime.now(UTC)
        cutoff = current_time - const.SYNC_QUEUE_MAX_AGE

        retained: list[SyncQueueItem] = []
        for item in queue:
            if item.get(const.DATA_QUEUE_SYNCED):
                continue
            enqueued_at = dt_utils.dt_to_utc(item.get(const.DATA_QUEUE_TIMESTAMP))
            if enqueued_at is None or enqueued_at <= cutoff:
                continue
            retained.append(item)

        if len(retained) > const.SYNC_QUEUE_WARN_SIZE:
            _LOGGER.warning(
                "Large sync queue detected: %s items. Consider forcing a sync",
                len(retained),
            )
        return retained


# =============================================================================
# Retry Policy
# =============================================================================


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of a failed remote write.

    Attributes:
        retry: True if another attempt should be scheduled
        delay_seconds: Backoff before that attempt (0.0 when not retrying)
        went_offline: True if the retry cap is reached
    """

    retry: bool
    delay_seconds: float
    went_offline: bool


class RetryPolicy:
    """Exponential backoff with a capped attempt count."""

    @staticmethod
    def delay_ms(retry_count: int) -> int:
        """Return min(base * 2^retry_count, cap) in milliseconds."""
        return min(
            const.RETRY_BASE_DELAY_MS * (2**retry_count), const.RETRY_MAX_DELAY_MS
        )

    @staticmethod
    def initial_state() -> SyncStateData:
        """Return the sync state of a fresh install."""
        return {
            const.DATA_SYNC_CONNECTED: False,
            const.DATA_SYNC_LAST_SYNC: None,
            const.DATA_SYNC_RETRY_COUNT: 0,
            const.DATA_SYNC_STATUS: const.SYNC_STATUS_LOCAL,
        }

    @staticmethod
    def on_failure(state: SyncStateData) -> RetryDecision:
        """Record a failed remote write on `state` and decide what happens next.

        The counter is incremented first. While it stays within the maximum
        a retry is scheduled after the backoff delay. Once it exceeds the
        maximum, connectivity flips to offline and the counter resets so the
        next connection attempt starts with a zero retry count.
        """
        retry_count = state.get(const.DATA_SYNC_RETRY_COUNT, 0) + 1
        if retry_count <= const.RETRY_MAX_ATTEMPTS:
            state[const.DATA_SYNC_RETRY_COUNT] = retry_count
            state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_ERROR
            return RetryDecision(
                retry=True,
                delay_seconds=RetryPolicy.delay_ms(retry_count) / 1000,
                went_offline=False,
            )

        state[const.DATA_SYNC_RETRY_COUNT] = 0
        state[const.DATA_SYNC_CONNECTED] = False
        state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_OFFLINE
        return RetryDecision(retry=False, delay_seconds=0.0, went_offline=True)

    @staticmethod
    def on_success(state: SyncStateData, synced_at: str) -> None:
        """Record a successful remote write on `state`."""
        state[const.DATA_SYNC_CONNECTED] = True
        state[const.DATA_SYNC_LAST_SYNC] = synced_at
        state[const.DATA_SYNC_RETRY_COUNT] = 0
        state[const.DATA_SYNC_STATUS] = const.SYNC_STATUS_SYNCED


# =============================================================================
# Remote Record
# =============================================================================


def sanitize_payload(value: Any) -> Any:
    """Return a JSON-safe deep copy of `value`.

    Dict entries holding unsupported values are dropped. Tuples and sets
    become lists. Unsupported values elsewhere become None.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        return {
            str(key): sanitize_payload(item)
            for key, item in value.items()
            if _is_supported(item)
        }
    if isinstance(value, (list, tuple, set)):
        return [sanitize_payload(item) for item in value]
    return None


def _is_supported(value: Any) -> bool:
    """Return True for values sanitize_payload keeps as dict entries."""
    return value is None or isinstance(
        value, (bool, int, float, str, dict, list, tuple, set)
    )


class RemoteRecord:
    """Build, apply and compare the wholesale remote user record."""

    @staticmethod
    def build(data: dict[str, Any], synced_at: str) -> RemoteUserRecord:
        """Build the remote record from local state, stamped with `synced_at`."""
        profile = data.get(const.DATA_USER)
        if profile:
            profile = {
                **profile,
                const.DATA_USER_LAST_WEIGHT_UPDATE: profile.get(
                    const.DATA_USER_LAST_WEIGHT_UPDATE
                )
                or synced_at,
            }
        return sanitize_payload(
            {
                const.REMOTE_PROFILE: profile,
                const.DATA_DAILY_LOGS: data.get(const.DATA_DAILY_LOGS) or {},
                const.DATA_STREAKS: data.get(const.DATA_STREAKS)
                or StreakTracker.initial_state(),
                const.DATA_CUSTOM_REWARDS: data.get(const.DATA_CUSTOM_REWARDS) or [],
                const.DATA_ACHIEVEMENTS: data.get(const.DATA_ACHIEVEMENTS) or [],
                const.DATA_SETTINGS: data.get(const.DATA_SETTINGS)
                or dict(const.DEFAULT_SETTINGS),
                const.REMOTE_LAST_SYNC: synced_at,
                const.REMOTE_VERSION: const.DOCUMENT_VERSION,
            }
        )

    @staticmethod
    def is_newer(remote_last_sync: str | None, local_last_sync: str | None) -> bool:
        """Return True if the remote timestamp is strictly newer than local.

        A missing timestamp counts as the epoch.
        """
        epoch = datetime.fromtimestamp(0, UTC)
        remote_dt = dt_utils.dt_to_utc(remote_last_sync) or epoch
        local_dt = dt_utils.dt_to_utc(local_last_sync) or epoch
        return remote_dt > local_dt

    @staticmethod
    def apply(data: dict[str, Any], record: dict[str, Any]) -> list[str]:
        """Replace local entities with the remote copy, field by field.

        Every entity is replaced wholesale. A missing or empty entity counts
        as empty, since hosted backends drop empty containers. Only a null
        profile leaves the local profile in place.

        Returns:
            The local keys that were replaced
        """
        replaced: list[str] = []
        profile = record.get(const.REMOTE_PROFILE)
        if profile:
            data[const.DATA_USER] = copy.deepcopy(profile)
            replaced.append(const.DATA_USER)

        entities: dict[str, Any] = {
            const.DATA_DAILY_LOGS: record.get(const.DATA_DAILY_LOGS) or {},
            const.DATA_STREAKS: {
                **StreakTracker.initial_state(),
                **(record.get(const.DATA_STREAKS) or {}),
            },
            const.DATA_CUSTOM_REWARDS: record.get(const.DATA_CUSTOM_REWARDS) or [],
            const.DATA_ACHIEVEMENTS: record.get(const.DATA_ACHIEVEMENTS) or [],
            const.DATA_SETTINGS: {
                **const.DEFAULT_SETTINGS,
                **(record.get(const.DATA_SETTINGS) or {}),
            },
        }
        for local_key, value in entities.items():
            data[local_key] = copy.deepcopy(value)
            replaced.append(local_key)
        return replaced
