"""Streak Engine - Consecutive-day counters for each goal category.

Four category counters (steps, exercise, water, wellness) and one combined
"overall" counter. Every counter follows the same transition:

    goal met and yesterday == lastLogDate  -> counter + 1
    goal met and yesterday != lastLogDate  -> 1 (a gap restarts the streak)
    goal not met                           -> 0

The overall counter's "goal" is: all four category goals met AND at least one
weight entry exists in the Monday-starting week containing the entry's date.

The update is computed from the new entry and the stored lastLogDate only,
never replayed from history. It is NOT idempotent: applying the same entry
twice sees lastLogDate == today and restarts every met counter at 1. Callers
apply it exactly once per accepted daily log.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils
from .goal_engine import GoalEvaluator

if TYPE_CHECKING:
    from ..type_defs import DailyLogEntry, GoalsMet, StreakState


class StreakTracker:
    """Pure streak state transitions."""

    @staticmethod
    def initial_state() -> StreakState:
        """Return the starting streak state: all counters zero, no history."""
        return {
            const.DATA_STREAK_OVERALL: 0,
            const.DATA_STREAK_STEPS: 0,
            const.DATA_STREAK_EXERCISE: 0,
            const.DATA_STREAK_WATER: 0,
            const.DATA_STREAK_WELLNESS: 0,
            const.DATA_STREAK_LAST_LOG_DATE: None,
            const.DATA_STREAK_WEEKLY_WEIGHT: False,
            const.DATA_STREAK_LAST_WEIGHT_DATE: None,
        }

    @staticmethod
    def weekly_weight_met(daily_logs: dict[str, Any], date_str: str) -> bool:
        """Return True if any day of the Monday-starting week has a weight."""
        for week_date in dt_utils.dt_week_dates(date_str):
            log = daily_logs.get(week_date)
            if log and log.get(const.DATA_LOG_WEIGHT) is not None:
                return True
        return False

    @staticmethod
    def next_count(current: int, goal_met: bool, continues: bool) -> int:
        """Apply the counter transition for one category."""
        if not goal_met:
            return 0
        if continues:
            return current + 1
        return 1

    @staticmethod
    def update(
        state: StreakState,
        entry: DailyLogEntry,
        goals_met: GoalsMet,
        daily_logs: dict[str, Any],
    ) -> StreakState:
        """Return the streak state after accepting `entry`.

        Args:
            state: Current streak state (not modified)
            entry: The accepted daily entry
            goals_met: GoalEvaluator output for the entry
            daily_logs: All logs, already including `entry`

        Returns:
            A new StreakState
        """
        today = entry[const.DATA_LOG_DATE]
        yesterday = dt_utils.dt_date_offset(today, -1)
        continues = state.get(const.DATA_STREAK_LAST_LOG_DATE) == yesterday

        new_state: StreakState = {**StreakTracker.initial_state(), **state}
        for category in const.GOAL_CATEGORIES:
            new_state[category] = StreakTracker.next_count(
                state.get(category, 0), goals_met[category], continues
            )

        weekly_weight = StreakTracker.weekly_weight_met(daily_logs, today)
        new_state[const.DATA_STREAK_OVERALL] = StreakTracker.next_count(
            state.get(const.DATA_STREAK_OVERALL, 0),
            GoalEvaluator.all_met(goals_met) and weekly_weight,
            continues,
        )

        new_state[const.DATA_STREAK_LAST_LOG_DATE] = today
        new_state[const.DATA_STREAK_WEEKLY_WEIGHT] = weekly_weight
        if entry.get(const.DATA_LOG_WEIGHT) is not None:
            new_state[const.DATA_STREAK_LAST_WEIGHT_DATE] = today
        return new_state

    @staticmethod
    def longest(state: StreakState) -> int:
        """Return the largest of the five current counters."""
        return max(
            state.get(key, 0)
            for key in (*const.GOAL_CATEGORIES, const.DATA_STREAK_OVERALL)
        )

