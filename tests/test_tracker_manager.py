"""Tests for TrackerManager: profile, daily logging, settings and resets.

The local-only backend is used, so no remote traffic and no sync queue.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=unused-argument  # Some fixtures needed for setup only

from typing import Any

from homeassistant.core import HomeAssistant
import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.fitstreak import const
from custom_components.fitstreak.coordinator import FitStreakDataCoordinator
from custom_components.fitstreak.engines import (
    ConfirmationRequiredError,
    ValidationError,
)
from custom_components.fitstreak.utils import dt_utils
from tests.helpers import get_coordinator, make_log_entry, make_profile


@pytest.fixture
async def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> FitStreakDataCoordinator:
    """Return the coordinator with a 220 -> 180 lbs profile."""
    coordinator = get_coordinator(hass, init_integration)
    coordinator.tracker_manager.setup_profile(220, 180, 8000, 30, 2.5)
    return coordinator


def _log(coordinator: FitStreakDataCoordinator, date: str, **overrides: Any):
    values: dict[str, Any] = {
        "weight": 218.0,
        "steps": 9000,
        "exercise_minutes": 40,
        "water": 3.0,
        "exercise_types": ["walking"],
        "wellness_items": ["sleep", "meditation", "stretching"],
        "date": date,
    }
    values.update(overrides)
    return coordinator.tracker_manager.log_daily_entry(**values)


# =============================================================================
# Profile
# =============================================================================


async def test_setup_profile(coordinator: FitStreakDataCoordinator) -> None:
    """Setup stores the profile with current weight equal to start."""
    profile = coordinator.profile
    assert profile[const.DATA_USER_STARTING_WEIGHT] == 220
    assert profile[const.DATA_USER_CURRENT_WEIGHT] == 220
    assert profile[const.DATA_USER_GOAL_WEIGHT] == 180
    assert profile[const.DATA_USER_SETUP_DATE] is not None
    assert coordinator.streaks[const.DATA_STREAK_OVERALL] == 0


async def test_setup_profile_rejects_close_weights(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Invalid setup leaves no profile behind."""
    coordinator = get_coordinator(hass, init_integration)
    with pytest.raises(ValidationError):
        coordinator.tracker_manager.setup_profile(180, 180, 8000, 30, 2.5)
    assert coordinator.profile is None


async def test_log_requires_profile(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Logging before setup is an error."""
    coordinator = get_coordinator(hass, init_integration)
    with pytest.raises(ValidationError) as err:
        _log(coordinator, "2024-03-04")
    assert str(err.value) == const.MSG_NO_PROFILE


async def test_update_weight_goal_in_kg(coordinator: FitStreakDataCoordinator) -> None:
    """Goal weights entered in kg are stored in lbs."""
    stored = coordinator.tracker_manager.update_weight_goal(80, const.WEIGHT_UNIT_KG)
    assert round(stored, 2) == 176.37
    assert coordinator.profile[const.DATA_USER_GOAL_WEIGHT] == stored


async def test_update_weight_goal_uses_settings_unit(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Without an explicit unit the settings unit applies."""
    coordinator.tracker_manager.update_settings(
        {const.DATA_SETTINGS_WEIGHT_UNIT: const.WEIGHT_UNIT_KG}
    )
    stored = coordinator.tracker_manager.update_weight_goal(90)
    assert round(stored, 1) == 198.4


async def test_update_weight_goal_too_close(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """A goal within one pound of the start is rejected."""
    with pytest.raises(ValidationError):
        coordinator.tracker_manager.update_weight_goal(219.5, const.WEIGHT_UNIT_LBS)
    assert coordinator.profile[const.DATA_USER_GOAL_WEIGHT] == 180


async def test_update_daily_goals(coordinator: FitStreakDataCoordinator) -> None:
    """Targets are replaced after validation."""
    coordinator.tracker_manager.update_daily_goals(12000, 45, 3.0)
    assert coordinator.profile[const.DATA_USER_DAILY_STEPS] == 12000
    with pytest.raises(ValidationError):
        coordinator.tracker_manager.update_daily_goals(500, 45, 3.0)
    assert coordinator.profile[const.DATA_USER_DAILY_STEPS] == 12000


# =============================================================================
# Daily Log
# =============================================================================


async def test_consecutive_logs_build_streaks(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Three good days in a row give a streak of three."""
    for date in ("2024-03-04", "2024-03-05", "2024-03-06"):
        _log(coordinator, date)

    streaks = coordinator.streaks
    assert streaks[const.DATA_STREAK_OVERALL] == 3
    assert streaks[const.DATA_STREAK_WELLNESS] == 3
    assert streaks[const.DATA_STREAK_LAST_LOG_DATE] == "2024-03-06"
    assert coordinator.profile[const.DATA_USER_CURRENT_WEIGHT] == 218.0


async def test_missed_water_breaks_only_water(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """A missed category resets its own counter and the overall one."""
    _log(coordinator, "2024-03-04")
    _log(coordinator, "2024-03-05", water=1.0, weight=None)

    streaks = coordinator.streaks
    assert streaks[const.DATA_STREAK_WATER] == 0
    assert streaks[const.DATA_STREAK_STEPS] == 2
    assert streaks[const.DATA_STREAK_OVERALL] == 0


async def test_unusual_values_need_confirmation(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Unconfirmed unusual values are not saved; confirmed ones are."""
    with pytest.raises(ConfirmationRequiredError):
        _log(coordinator, "2024-03-04", steps=60000)
    assert coordinator.daily_logs == {}

    entry = _log(coordinator, "2024-03-04", steps=60000, confirmed=True)
    assert entry[const.DATA_LOG_STEPS] == 60000
    assert "2024-03-04" in coordinator.daily_logs


async def test_hard_error_is_never_saved(coordinator: FitStreakDataCoordinator) -> None:
    """Confirmation does not bypass hard errors."""
    with pytest.raises(ValidationError):
        _log(coordinator, "2024-03-04", exercise_types=[], confirmed=True)
    assert coordinator.daily_logs == {}


async def test_wellness_score_from_items(coordinator: FitStreakDataCoordinator) -> None:
    """The wellness score counts the selected items."""
    entry = _log(coordinator, "2024-03-04", wellness_items=["sleep", "journal"])
    assert entry[const.DATA_LOG_WELLNESS_SCORE] == 2
    assert coordinator.streaks[const.DATA_STREAK_WELLNESS] == 0


async def test_log_defaults_to_today(coordinator: FitStreakDataCoordinator) -> None:
    """Without a date the log is stored under today's local date."""
    entry = _log(coordinator, None)
    assert entry[const.DATA_LOG_DATE] == dt_utils.dt_today_iso()


async def test_relogging_a_day_overwrites(coordinator: FitStreakDataCoordinator) -> None:
    """A second log for a date replaces the first."""
    _log(coordinator, "2024-03-04", steps=9000)
    _log(coordinator, "2024-03-04", steps=12000)
    assert len(coordinator.daily_logs) == 1
    assert coordinator.daily_logs["2024-03-04"][const.DATA_LOG_STEPS] == 12000


async def test_partial_steps_setting(coordinator: FitStreakDataCoordinator) -> None:
    """Partial credit applies to logs after the setting changes."""
    coordinator.tracker_manager.update_settings(
        {const.DATA_SETTINGS_ALLOW_PARTIAL_STEPS: True}
    )
    _log(coordinator, "2024-03-04", steps=7200)
    assert coordinator.streaks[const.DATA_STREAK_STEPS] == 1


async def test_clear_daily_log(coordinator: FitStreakDataCoordinator) -> None:
    """Clearing removes the entry and leaves streaks alone."""
    _log(coordinator, "2024-03-04")
    assert coordinator.tracker_manager.clear_daily_log("2024-03-04") is True
    assert coordinator.daily_logs == {}
    assert coordinator.streaks[const.DATA_STREAK_OVERALL] == 1
    assert coordinator.tracker_manager.clear_daily_log("2024-03-04") is False


# =============================================================================
# Settings, Resets and Import
# =============================================================================


async def test_update_settings_rejects_unknown_key(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Unknown keys fail and nothing is applied."""
    with pytest.raises(ValidationError):
        coordinator.tracker_manager.update_settings(
            {const.DATA_SETTINGS_STRICT_WELLNESS: True, "fontSize": "large"}
        )
    assert coordinator.settings[const.DATA_SETTINGS_STRICT_WELLNESS] is False


async def test_reset_streaks_and_logs(coordinator: FitStreakDataCoordinator) -> None:
    """Streak reset keeps logs; log reset keeps the profile."""
    _log(coordinator, "2024-03-04")
    coordinator.achievements.append({"type": "streak", "value": 7})

    coordinator.tracker_manager.reset_streaks()
    assert coordinator.streaks[const.DATA_STREAK_OVERALL] == 0
    assert len(coordinator.daily_logs) == 1

    coordinator.tracker_manager.reset_logs()
    assert coordinator.daily_logs == {}
    assert coordinator.achievements == []
    assert coordinator.profile is not None


async def test_reset_profile_keeps_logs(coordinator: FitStreakDataCoordinator) -> None:
    """Profile reset leaves the daily logs."""
    _log(coordinator, "2024-03-04")
    coordinator.tracker_manager.reset_profile()
    assert coordinator.profile is None
    assert len(coordinator.daily_logs) == 1


async def test_reset_local_data_keeps_settings(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Local reset clears entities but not settings."""
    coordinator.tracker_manager.update_settings({const.DATA_SETTINGS_DATE_FORMAT: "ISO"})
    _log(coordinator, "2024-03-04")
    coordinator.reward_manager.add_custom_reward(
        const.REWARD_TYPE_STREAK, "Movie", streak_days=10
    )

    coordinator.tracker_manager.reset_local_data()

    assert coordinator.profile is None
    assert coordinator.daily_logs == {}
    assert coordinator.custom_rewards == []
    assert coordinator.settings[const.DATA_SETTINGS_DATE_FORMAT] == "ISO"


async def test_invalid_import_changes_nothing(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """A rejected import leaves local state untouched."""
    _log(coordinator, "2024-03-04")
    with pytest.raises(ValidationError):
        coordinator.tracker_manager.import_data({const.DATA_DAILY_LOGS: {}})
    assert len(coordinator.daily_logs) == 1


async def test_import_replaces_entities(coordinator: FitStreakDataCoordinator) -> None:
    """A valid import replaces profile and logs."""
    coordinator.tracker_manager.import_data(
        {
            const.DATA_USER: make_profile(startingWeight=300, currentWeight=280),
            const.DATA_DAILY_LOGS: {
                "2024-01-01": make_log_entry("2024-01-01"),
                "2024-01-02": make_log_entry("2024-01-02"),
            },
        }
    )
    assert coordinator.profile[const.DATA_USER_STARTING_WEIGHT] == 300
    assert sorted(coordinator.daily_logs) == ["2024-01-01", "2024-01-02"]


# =============================================================================
# Statistics and Persistence
# =============================================================================


async def test_app_stats(coordinator: FitStreakDataCoordinator) -> None:
    """Totals are computed over all logs."""
    _log(coordinator, "2024-03-04", steps=9000, exercise_minutes=40, water=3.0)
    _log(
        coordinator,
        "2024-03-05",
        steps=11000,
        exercise_minutes=20,
        water=2.25,
        weight=None,
    )

    stats = coordinator.tracker_manager.get_app_stats()

    assert stats["totalDaysLogged"] == 2
    assert stats["weightEntriesLogged"] == 1
    assert stats["totalSteps"] == 20000
    assert stats["totalExerciseMinutes"] == 60
    assert stats["totalWaterLiters"] == 5.25
    assert stats["currentStreak"] == 0
    assert stats["longestStreak"] == 2
    assert stats["cloudConnected"] is False
    assert stats["pendingSyncs"] == 0
    assert stats["weightProgress"] == {
        "starting": 220,
        "current": 218.0,
        "goal": 180,
        "lost": 2.0,
        "remaining": 38.0,
    }


async def test_local_backend_queues_nothing(
    coordinator: FitStreakDataCoordinator,
) -> None:
    """Without a remote backend the sync queue stays empty."""
    _log(coordinator, "2024-03-04")
    coordinator.tracker_manager.update_settings({const.DATA_SETTINGS_WEEK_START: "monday"})
    assert coordinator.sync_queue == []
    assert coordinator.sync_state[const.DATA_SYNC_STATUS] == const.SYNC_STATUS_LOCAL


async def test_changes_are_persisted(
    hass: HomeAssistant,
    coordinator: FitStreakDataCoordinator,
    hass_storage: dict[str, Any],
) -> None:
    """Accepted changes reach storage."""
    _log(coordinator, "2024-03-04")
    await hass.async_block_till_done()

    stored = hass_storage[const.STORAGE_KEY]["data"]
    assert "2024-03-04" in stored[const.DATA_DAILY_LOGS]
    assert stored[const.DATA_USER][const.DATA_USER_GOAL_WEIGHT] == 180
