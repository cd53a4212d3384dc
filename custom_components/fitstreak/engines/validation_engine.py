"""Validation Engine - Pure range and consistency checks on raw user input.

Two classes of problems are reported:
- Hard errors (ValidationError): malformed or impossible values. Terminal for
  the triggering action, never retried and never queued.
- Unusual values (ConfirmationRequiredError): plausible but outside the usual
  range. The caller may resubmit with explicit confirmation.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in values.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

from .. import const


class ValidationError(Exception):
    """Raised when an input value is malformed or out of its hard range.

    Attributes:
        field: Name of the offending field
        value: The rejected value
    """

    def __init__(self, field: str, value: Any, message: str) -> None:
        """Initialize ValidationError.

        Args:
            field: Name of the offending field
            value: The rejected value
            message: Human-readable explanation
        """
        self.field = field
        self.value = value
        super().__init__(message)


@dataclass(frozen=True)
class UnusualValue:
    """A daily-log value outside its usual range."""

    field: str
    value: float
    unit: str

    def describe(self) -> str:
        """Return the confirmation prompt text for this value."""
        return (
            f"The {self.field} value of {self.value} {self.unit} seems unusually "
            "high. Please confirm this is correct."
        )


class ConfirmationRequiredError(Exception):
    """Raised when a daily log carries unusual values that were not confirmed.

    Attributes:
        unusual_values: Every value that needs confirmation
    """

    def __init__(self, unusual_values: list[UnusualValue]) -> None:
        """Initialize ConfirmationRequiredError."""
        self.unusual_values = unusual_values
        super().__init__(" ".join(item.describe() for item in unusual_values))


def _is_number(value: Any) -> bool:
    """Return True for finite int/float values (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class ValidationRules:
    """Pure validation rules for profile, goal, log and reward input.

    All methods are static - no instance state.
    """

    @staticmethod
    def require_number(field: str, value: Any) -> float:
        """Return value unchanged if it is a finite number, else raise."""
        if not _is_number(value):
            raise ValidationError(field, value, f"{field} must be a valid number")
        return value

    @staticmethod
    def check_range(
        field: str, value: float, minimum: float, maximum: float, unit: str = ""
    ) -> None:
        """Raise ValidationError unless minimum <= value <= maximum."""
        ValidationRules.require_number(field, value)
        if value < minimum or value > maximum:
            suffix = f" {unit}" if unit else ""
            raise ValidationError(
                field,
                value,
                f"{field} must be between {minimum} and {maximum}{suffix}",
            )

    # -------------------------------------------------------------------------
    # Profile and goals
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_weight_pair(starting_weight: float, goal_weight: float) -> None:
        """Check both weights are in range and at least one unit apart."""
        ValidationRules.check_range(
            const.DATA_USER_STARTING_WEIGHT,
            starting_weight,
            const.PROFILE_WEIGHT_MIN,
            const.PROFILE_WEIGHT_MAX,
            const.WEIGHT_UNIT_LBS,
        )
        ValidationRules.check_range(
            const.DATA_USER_GOAL_WEIGHT,
            goal_weight,
            const.PROFILE_WEIGHT_MIN,
            const.PROFILE_WEIGHT_MAX,
            const.WEIGHT_UNIT_LBS,
        )
        if abs(starting_weight - goal_weight) < const.PROFILE_MIN_WEIGHT_DELTA:
            raise ValidationError(
                const.DATA_USER_GOAL_WEIGHT,
                goal_weight,
                "Starting and goal weight should be at least "
                f"{const.PROFILE_MIN_WEIGHT_DELTA} lb apart",
            )

    @staticmethod
    def validate_daily_targets(steps: int, exercise: int, water: float) -> None:
        """Check the three daily targets against their hard ranges."""
        ValidationRules.check_range(
            const.DATA_USER_DAILY_STEPS,
            steps,
            const.GOAL_STEPS_MIN,
            const.GOAL_STEPS_MAX,
            "steps",
        )
        ValidationRules.check_range(
            const.DATA_USER_DAILY_EXERCISE,
            exercise,
            const.GOAL_EXERCISE_MIN,
            const.GOAL_EXERCISE_MAX,
            "minutes",
        )
        ValidationRules.check_range(
            const.DATA_USER_DAILY_WATER,
            water,
            const.GOAL_WATER_MIN,
            const.GOAL_WATER_MAX,
            "liters",
        )

    @staticmethod
    def validate_setup(
        starting_weight: float,
        goal_weight: float,
        daily_steps: int,
        daily_exercise: int,
        daily_water: float,
    ) -> None:
        """Validate the full profile setup form."""
        ValidationRules.validate_weight_pair(starting_weight, goal_weight)
        ValidationRules.validate_daily_targets(daily_steps, daily_exercise, daily_water)

    # -------------------------------------------------------------------------
    # Daily log
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_daily_log(
        weight: float | None,
        steps: int,
        exercise_minutes: int,
        water: float,
        exercise_types: list[str],
        wellness_items: list[str],
    ) -> list[UnusualValue]:
        """Validate a daily log and return the values that need confirmation.

        Raises:
            ValidationError: negative or non-numeric values, too many wellness
                items, or exercise minutes logged without an exercise type.

        Returns:
            Unusual values (possibly empty). An empty list means the entry can
            be accepted as-is.
        """
        for field, value in (
            (const.DATA_LOG_STEPS, steps),
            (const.DATA_LOG_EXERCISE_MINUTES, exercise_minutes),
            (const.DATA_LOG_WATER, water),
        ):
            ValidationRules.require_number(field, value)
            if value < 0:
                raise ValidationError(field, value, f"{field} cannot be negative")

        if weight is not None:
            ValidationRules.require_number(const.DATA_LOG_WEIGHT, weight)
            if weight <= 0:
                raise ValidationError(
                    const.DATA_LOG_WEIGHT, weight, "weight must be positive"
                )

        if len(wellness_items) > const.LOG_WELLNESS_MAX_ITEMS:
            raise ValidationError(
                const.DATA_LOG_WELLNESS_ITEMS,
                wellness_items,
                f"At most {const.LOG_WELLNESS_MAX_ITEMS} wellness items can be logged",
            )

        if exercise_minutes > 0 and not exercise_types:
            raise ValidationError(
                const.DATA_LOG_EXERCISE_TYPES,
                exercise_types,
                "Please select at least one exercise type when logging exercise "
                "minutes.",
            )

        unusual: list[UnusualValue] = []
        if weight is not None and (
            weight < const.LOG_WEIGHT_MIN or weight > const.LOG_WEIGHT_MAX
        ):
            unusual.append(
                UnusualValue(const.DATA_LOG_WEIGHT, weight, const.WEIGHT_UNIT_LBS)
            )
        if steps > const.LOG_STEPS_MAX:
            unusual.append(UnusualValue(const.DATA_LOG_STEPS, steps, "steps"))
        if exercise_minutes > const.LOG_EXERCISE_MAX:
            unusual.append(
                UnusualValue(const.GOAL_EXERCISE, exercise_minutes, "minutes")
            )
        if water > const.LOG_WATER_MAX:
            unusual.append(UnusualValue(const.DATA_LOG_WATER, water, "liters"))
        return unusual

    # -------------------------------------------------------------------------
    # Custom rewards
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_custom_reward(
        reward_type: str,
        description: str,
        streak_days: int | None = None,
        weight_loss: float | None = None,
    ) -> None:
        """Validate a custom reward definition for its type."""
        if reward_type not in const.REWARD_TYPES:
            raise ValidationError(
                const.DATA_REWARD_TYPE, reward_type, f"Unknown reward type: {reward_type}"
            )
        if not description or not description.strip():
            raise ValidationError(
                const.DATA_REWARD_DESCRIPTION, description, "Reward description is required"
            )

        needs_streak = reward_type in (const.REWARD_TYPE_STREAK, const.REWARD_TYPE_COMBO)
        needs_weight = reward_type in (const.REWARD_TYPE_WEIGHT, const.REWARD_TYPE_COMBO)

        if needs_streak and (
            not _is_number(streak_days) or streak_days < const.REWARD_MIN_STREAK_DAYS
        ):
            raise ValidationError(
                const.DATA_REWARD_STREAK_DAYS,
                streak_days,
                "Please enter valid streak days",
            )
        if needs_weight and (
            not _is_number(weight_loss) or weight_loss < const.REWARD_MIN_WEIGHT_LOSS
        ):
            raise ValidationError(
                const.DATA_REWARD_WEIGHT_LOSS,
                weight_loss,
                "Please enter valid weight loss amount",
            )

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_settings_update(changes: dict[str, Any]) -> None:
        """Reject unknown settings keys and out-of-vocabulary choices."""
        choices = {
            const.DATA_SETTINGS_THEME_PREFERENCE: const.THEME_OPTIONS,
            const.DATA_SETTINGS_WEIGHT_UNIT: const.WEIGHT_UNITS,
            const.DATA_SETTINGS_DATE_FORMAT: const.DATE_FORMAT_OPTIONS,
            const.DATA_SETTINGS_WEEK_START: const.WEEK_START_OPTIONS,
        }
        for key, value in changes.items():
            if key not in const.DEFAULT_SETTINGS:
                raise ValidationError(key, value, f"Unknown setting: {key}")
            if key in choices and value not in choices[key]:
                raise ValidationError(
                    key, value, f"{key} must be one of {', '.join(choices[key])}"
                )
            if key not in choices and not isinstance(value, bool):
                raise ValidationError(key, value, f"{key} must be true or false")
