"""Unit tests for sync_engine.py: queue sweep, retry policy, remote record."""

from datetime import UTC, datetime, timedelta
import logging

import pytest

from custom_components.fitstreak import const
from custom_components.fitstreak.engines import (
    RemoteRecord,
    RetryPolicy,
    StreakTracker,
    SyncQueue,
)
from custom_components.fitstreak.engines.sync_engine import sanitize_payload
from custom_components.fitstreak.store import FitStreakStore
from tests.helpers import make_log_entry, make_profile

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)


def _ts(delta: timedelta) -> str:
    return (NOW - delta).isoformat()


# =============================================================================
# Sync Queue
# =============================================================================


class TestSyncQueue:
    """Queue items, completion and the 24-hour sweep."""

    def test_enqueue_snapshots_data(self) -> None:
        queue: list = []
        data = {"steps": 100}
        item = SyncQueue.enqueue(queue, const.SYNC_ACTION_DAILY_LOG, data)
        data["steps"] = 999
        assert queue == [item]
        assert item[const.DATA_QUEUE_DATA] == {"steps": 100}
        assert item[const.DATA_QUEUE_SYNCED] is False

    def test_mark_synced_counts_only_pending_matches(self) -> None:
        queue: list = []
        SyncQueue.enqueue(queue, const.SYNC_ACTION_DAILY_LOG, {})
        SyncQueue.enqueue(queue, const.SYNC_ACTION_SETTINGS, {})
        SyncQueue.enqueue(queue, "unknownAction", {})
        assert SyncQueue.mark_synced(queue, const.SYNC_ACTIONS) == 2
        assert SyncQueue.mark_synced(queue, const.SYNC_ACTIONS) == 0
        assert len(SyncQueue.pending(queue)) == 1

    def test_sweep_drops_synced_and_stale(self) -> None:
        fresh = SyncQueue.create_item("a", {}, _ts(timedelta(hours=1)))
        synced = SyncQueue.create_item("b", {}, _ts(timedelta(hours=1)))
        synced[const.DATA_QUEUE_SYNCED] = True
        stale = SyncQueue.create_item("c", {}, _ts(timedelta(hours=25)))
        queue = [fresh, synced, stale]

        assert SyncQueue.sweep(queue, NOW) == [fresh]
        assert len(queue) == 3

    def test_sweep_drops_item_exactly_24h_old(self) -> None:
        item = SyncQueue.create_item("a", {}, _ts(timedelta(hours=24)))
        assert SyncQueue.sweep([item], NOW) == []

    def test_sweep_drops_unparseable_timestamp(self) -> None:
        item = SyncQueue.create_item("a", {}, "yesterday-ish")
        assert SyncQueue.sweep([item], NOW) == []

    def test_sweep_warns_on_large_queue(self, caplog: pytest.LogCaptureFixture) -> None:
        queue = [
            SyncQueue.create_item("a", {}, _ts(timedelta(minutes=5)))
            for _ in range(101)
        ]
        with caplog.at_level(logging.WARNING):
            assert len(SyncQueue.sweep(queue, NOW)) == 101
        assert "Large sync queue" in caplog.text


# =============================================================================
# Retry Policy
# =============================================================================


class TestRetryPolicy:
    """Backoff arithmetic and the offline transition."""

    @pytest.mark.parametrize(
        ("retry_count", "expected"),
        [(0, 1000), (1, 2000), (2, 4000), (3, 8000), (5, 30000), (10, 30000)],
    )
    def test_delay_ms(self, retry_count: int, expected: int) -> None:
        assert RetryPolicy.delay_ms(retry_count) == expected

    def test_three_retries_then_offline(self) -> None:
        state = RetryPolicy.initial_state()
        state[const.DATA_SYNC_CONNECTED] = True

        delays = []
        for expected_count in (1, 2, 3):
            decision = RetryPolicy.on_failure(state)
            assert decision.retry is True
            assert state[const.DATA_SYNC_RETRY_COUNT] == expected_count
            assert state[const.DATA_SYNC_STATUS] == const.SYNC_STATUS_ERROR
            delays.append(decision.delay_seconds)
        assert delays == [2.0, 4.0, 8.0]

        decision = RetryPolicy.on_failure(state)
        assert decision.retry is False
        assert decision.went_offline is True
        assert state[const.DATA_SYNC_RETRY_COUNT] == 0
        assert state[const.DATA_SYNC_CONNECTED] is False
        assert state[const.DATA_SYNC_STATUS] == const.SYNC_STATUS_OFFLINE

    def test_success_resets(self) -> None:
        state = RetryPolicy.initial_state()
        RetryPolicy.on_failure(state)
        RetryPolicy.on_success(state, "2024-03-10T12:00:00+00:00")
        assert state == {
            const.DATA_SYNC_CONNECTED: True,
            const.DATA_SYNC_LAST_SYNC: "2024-03-10T12:00:00+00:00",
            const.DATA_SYNC_RETRY_COUNT: 0,
            const.DATA_SYNC_STATUS: const.SYNC_STATUS_SYNCED,
        }


# =============================================================================
# Remote Record
# =============================================================================


class TestRemoteRecord:
    """Building, comparing and applying the wholesale user record."""

    def test_build_shapes_record(self) -> None:
        data = FitStreakStore.get_default_structure()
        data[const.DATA_USER] = make_profile(lastWeightUpdate=None)
        data[const.DATA_DAILY_LOGS] = {"2024-03-04": make_log_entry("2024-03-04")}

        record = RemoteRecord.build(data, "2024-03-10T12:00:00+00:00")

        assert set(record) == {
            const.REMOTE_PROFILE,
            const.DATA_DAILY_LOGS,
            const.DATA_STREAKS,
            const.DATA_CUSTOM_REWARDS,
            const.DATA_ACHIEVEMENTS,
            const.DATA_SETTINGS,
            const.REMOTE_LAST_SYNC,
            const.REMOTE_VERSION,
        }
        assert record[const.REMOTE_VERSION] == "1.1"
        assert record[const.REMOTE_LAST_SYNC] == "2024-03-10T12:00:00+00:00"
        assert (
            record[const.REMOTE_PROFILE][const.DATA_USER_LAST_WEIGHT_UPDATE]
            == "2024-03-10T12:00:00+00:00"
        )
        assert data[const.DATA_USER][const.DATA_USER_LAST_WEIGHT_UPDATE] is None

    def test_build_without_profile(self) -> None:
        record = RemoteRecord.build(FitStreakStore.get_default_structure(), "x")
        assert record[const.REMOTE_PROFILE] is None

    def test_sanitize_drops_unsupported_values(self) -> None:
        payload = {"a": 1, "b": object(), "c": (1, 2), "d": {"e": {3}}}
        assert sanitize_payload(payload) == {"a": 1, "c": [1, 2], "d": {"e": [3]}}

    @pytest.mark.parametrize(
        ("remote", "local", "expected"),
        [
            ("2024-03-10T12:00:00+00:00", "2024-03-10T11:00:00+00:00", True),
            ("2024-03-10T11:00:00+00:00", "2024-03-10T12:00:00+00:00", False),
            ("2024-03-10T12:00:00+00:00", "2024-03-10T12:00:00+00:00", False),
            ("2024-03-10T12:00:00+00:00", None, True),
            (None, "2024-03-10T12:00:00+00:00", False),
            (None, None, False),
            ("2024-03-10T14:00:00+02:00", "2024-03-10T11:30:00+00:00", True),
        ],
    )
    def test_is_newer(self, remote, local, expected: bool) -> None:
        assert RemoteRecord.is_newer(remote, local) is expected

    def test_apply_replaces_every_entity(self) -> None:
        data = FitStreakStore.get_default_structure()
        data[const.DATA_CUSTOM_REWARDS] = [{"type": "streak", "streakDays": 3}]
        data[const.DATA_ACHIEVEMENTS] = [{"type": "streak", "value": 7}]
        data[const.DATA_SETTINGS][const.DATA_SETTINGS_WEIGHT_UNIT] = "kg"
        record = {
            const.REMOTE_PROFILE: make_profile(),
            const.DATA_DAILY_LOGS: {"2024-03-04": make_log_entry("2024-03-04")},
            const.DATA_CUSTOM_REWARDS: [],
        }

        replaced = RemoteRecord.apply(data, record)

        assert const.DATA_USER in replaced
        assert const.DATA_ACHIEVEMENTS in replaced
        assert data[const.DATA_USER] == make_profile()
        assert "2024-03-04" in data[const.DATA_DAILY_LOGS]
        assert data[const.DATA_CUSTOM_REWARDS] == []
        assert data[const.DATA_ACHIEVEMENTS] == []
        assert data[const.DATA_STREAKS] == StreakTracker.initial_state()
        assert data[const.DATA_SETTINGS] == const.DEFAULT_SETTINGS

    def test_apply_keeps_local_profile_when_remote_has_none(self) -> None:
        data = FitStreakStore.get_default_structure()
        data[const.DATA_USER] = make_profile(currentWeight=210)
        data[const.DATA_DAILY_LOGS] = {"2024-03-04": make_log_entry("2024-03-04")}

        replaced = RemoteRecord.apply(data, {const.REMOTE_PROFILE: None})

        assert const.DATA_USER not in replaced
        assert data[const.DATA_USER][const.DATA_USER_CURRENT_WEIGHT] == 210
        assert data[const.DATA_DAILY_LOGS] == {}
