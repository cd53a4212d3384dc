"""Unit tests for streak_engine.py StreakTracker.

2024-03-04 is a Monday; the week under test runs 2024-03-04 .. 2024-03-10.
"""

from custom_components.fitstreak import const
from custom_components.fitstreak.engines import StreakTracker
from tests.helpers import make_log_entry, make_streaks

ALL_MET = {
    const.GOAL_STEPS: True,
    const.GOAL_EXERCISE: True,
    const.GOAL_WATER: True,
    const.GOAL_WELLNESS: True,
}


def _apply(state, entry, goals_met=None, logs=None):
    logs = dict(logs or {})
    logs[entry[const.DATA_LOG_DATE]] = entry
    return StreakTracker.update(state, entry, goals_met or ALL_MET, logs)


class TestCounterTransitions:
    """The shared per-counter transition."""

    def test_next_count(self) -> None:
        assert StreakTracker.next_count(4, True, True) == 5
        assert StreakTracker.next_count(4, True, False) == 1
        assert StreakTracker.next_count(4, False, True) == 0

    def test_first_log_starts_every_streak(self) -> None:
        state = _apply(StreakTracker.initial_state(), make_log_entry("2024-03-04"))
        for key in (const.DATA_STREAK_OVERALL, *const.GOAL_CATEGORIES):
            assert state[key] == 1
        assert state[const.DATA_STREAK_LAST_LOG_DATE] == "2024-03-04"
        assert state[const.DATA_STREAK_WEEKLY_WEIGHT] is True
        assert state[const.DATA_STREAK_LAST_WEIGHT_DATE] == "2024-03-04"

    def test_consecutive_day_extends(self) -> None:
        state = make_streaks(
            overall=3, steps=3, exercise=3, water=3, wellness=3, lastLogDate="2024-03-04"
        )
        new_state = _apply(state, make_log_entry("2024-03-05"))
        assert new_state[const.DATA_STREAK_OVERALL] == 4
        assert new_state[const.DATA_STREAK_STEPS] == 4

    def test_gap_restarts_at_one(self) -> None:
        state = make_streaks(overall=9, steps=9, lastLogDate="2024-03-04")
        new_state = _apply(state, make_log_entry("2024-03-07"))
        assert new_state[const.DATA_STREAK_OVERALL] == 1
        assert new_state[const.DATA_STREAK_STEPS] == 1

    def test_missed_goal_resets_only_that_category(self) -> None:
        state = make_streaks(
            overall=2, steps=2, exercise=2, water=2, wellness=2, lastLogDate="2024-03-04"
        )
        goals = {**ALL_MET, const.GOAL_WATER: False}
        new_state = _apply(state, make_log_entry("2024-03-05"), goals)
        assert new_state[const.DATA_STREAK_WATER] == 0
        assert new_state[const.DATA_STREAK_STEPS] == 3
        assert new_state[const.DATA_STREAK_OVERALL] == 0

    def test_input_state_not_modified(self) -> None:
        state = make_streaks(steps=2, lastLogDate="2024-03-04")
        _apply(state, make_log_entry("2024-03-05"))
        assert state[const.DATA_STREAK_STEPS] == 2

    def test_reapplying_same_day_restarts(self) -> None:
        entry = make_log_entry("2024-03-05")
        state = make_streaks(overall=5, steps=5, lastLogDate="2024-03-04")
        once = _apply(state, entry)
        twice = _apply(once, entry)
        assert once[const.DATA_STREAK_STEPS] == 6
        assert twice[const.DATA_STREAK_STEPS] == 1


class TestWeeklyWeight:
    """Overall streak needs a weight entry in the Monday-starting week."""

    def test_no_weight_this_week_blocks_overall(self) -> None:
        state = _apply(
            StreakTracker.initial_state(), make_log_entry("2024-03-06", weight=None)
        )
        assert state[const.DATA_STREAK_STEPS] == 1
        assert state[const.DATA_STREAK_OVERALL] == 0
        assert state[const.DATA_STREAK_WEEKLY_WEIGHT] is False
        assert state[const.DATA_STREAK_LAST_WEIGHT_DATE] is None

    def test_monday_weight_covers_sunday(self) -> None:
        logs = {"2024-03-04": make_log_entry("2024-03-04", weight=215)}
        state = _apply(
            make_streaks(lastLogDate="2024-03-09"),
            make_log_entry("2024-03-10", weight=None),
            logs=logs,
        )
        assert state[const.DATA_STREAK_WEEKLY_WEIGHT] is True
        assert state[const.DATA_STREAK_OVERALL] == 1

    def test_previous_week_weight_does_not_count(self) -> None:
        logs = {"2024-03-10": make_log_entry("2024-03-10", weight=215)}
        state = _apply(
            make_streaks(overall=6, lastLogDate="2024-03-10"),
            make_log_entry("2024-03-11", weight=None),
            logs=logs,
        )
        assert state[const.DATA_STREAK_WEEKLY_WEIGHT] is False
        assert state[const.DATA_STREAK_OVERALL] == 0

    def test_weekly_weight_met_helper(self) -> None:
        logs = {"2024-03-08": make_log_entry("2024-03-08", weight=210)}
        assert StreakTracker.weekly_weight_met(logs, "2024-03-04") is True
        assert StreakTracker.weekly_weight_met(logs, "2024-03-11") is False

    def test_last_weight_date_kept_without_weight(self) -> None:
        state = _apply(
            make_streaks(lastLogDate="2024-03-04", lastWeightDate="2024-03-04"),
            make_log_entry("2024-03-05", weight=None),
        )
        assert state[const.DATA_STREAK_LAST_WEIGHT_DATE] == "2024-03-04"


def test_longest_streak() -> None:
    """Longest is the maximum of all five counters."""
    assert StreakTracker.longest(make_streaks(overall=2, water=11, steps=4)) == 11
    assert StreakTracker.longest(StreakTracker.initial_state()) == 0
