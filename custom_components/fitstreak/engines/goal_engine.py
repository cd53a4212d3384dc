"""Goal Engine - Decide which daily goal categories an entry satisfies.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Out-of-range inputs are rejected earlier by ValidationRules, so evaluation
has no error conditions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import DailyLogEntry, GoalsMet, ProfileData


class GoalEvaluator:
    """Pure goal evaluation with configurable partial credit."""

    @staticmethod
    def steps_threshold(target: float, allow_partial: bool) -> float:
        """Return the step count that satisfies the steps goal."""
        factor = const.PARTIAL_STEPS_FACTOR if allow_partial else 1.0
        return target * factor

    @staticmethod
    def exercise_threshold(target: float, allow_partial: bool) -> float:
        """Return the exercise minutes that satisfy the exercise goal."""
        factor = const.PARTIAL_EXERCISE_FACTOR if allow_partial else 1.0
        return target * factor

    @staticmethod
    def wellness_threshold(strict: bool) -> int:
        """Return the wellness score that satisfies the wellness goal."""
        return const.WELLNESS_THRESHOLD_STRICT if strict else const.WELLNESS_THRESHOLD

    @staticmethod
    def evaluate(
        entry: DailyLogEntry,
        profile: ProfileData,
        settings: dict[str, Any] | None = None,
    ) -> GoalsMet:
        """Evaluate one daily entry against the profile's daily targets.

        Args:
            entry: The day's log entry
            profile: Profile carrying dailySteps/dailyExercise/dailyWater
            settings: Settings object; only allowPartialSteps,
                allowPartialExercise and strictWellness are read

        Returns:
            GoalsMet map with one boolean per category
        """
        settings = settings or {}
        allow_partial_steps = bool(
            settings.get(const.DATA_SETTINGS_ALLOW_PARTIAL_STEPS, False)
        )
        allow_partial_exercise = bool(
            settings.get(const.DATA_SETTINGS_ALLOW_PARTIAL_EXERCISE, False)
        )
        strict_wellness = bool(settings.get(const.DATA_SETTINGS_STRICT_WELLNESS, False))

        steps = entry.get(const.DATA_LOG_STEPS) or 0
        exercise = entry.get(const.DATA_LOG_EXERCISE_MINUTES) or 0
        water = entry.get(const.DATA_LOG_WATER) or 0
        wellness = entry.get(const.DATA_LOG_WELLNESS_SCORE) or 0

        return {
            const.GOAL_STEPS: steps
            >= GoalEvaluator.steps_threshold(
                profile[const.DATA_USER_DAILY_STEPS], allow_partial_steps
            ),
            const.GOAL_EXERCISE: exercise
            >= GoalEvaluator.exercise_threshold(
                profile[const.DATA_USER_DAILY_EXERCISE], allow_partial_exercise
            ),
            # No partial credit for water
            const.GOAL_WATER: water >= profile[const.DATA_USER_DAILY_WATER],
            const.GOAL_WELLNESS: wellness
            >= GoalEvaluator.wellness_threshold(strict_wellness),
        }

    @staticmethod
    def all_met(goals_met: GoalsMet) -> bool:
        """Return True when every category goal is met."""
        return all(goals_met[category] for category in const.GOAL_CATEGORIES)

    @staticmethod
    def any_met(goals_met: GoalsMet) -> bool:
        """Return True when at least one category goal is met."""
        return any(goals_met[category] for category in const.GOAL_CATEGORIES)
