"""Tracker Manager - Profile, daily logging, goals, settings and resets.

This manager owns every mutation of the profile, the daily logs, the streak
state and the settings:
- Profile setup and goal updates (validated with ValidationRules)
- Daily logging: validation, goal evaluation, one streak update per log
- Settings updates
- Reset operations on local state
- Application statistics

Every accepted change is persisted, then announced with LOCAL_CHANGE so the
SyncManager can queue it and push it. A saved daily log is also announced
with DAILY_LOG_SAVED for unlock notices.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.util import dt as dt_util

from .. import const
from ..engines import (
    ConfirmationRequiredError,
    GoalEvaluator,
    StreakTracker,
    SyncQueue,
    ValidationError,
    ValidationRules,
)
from ..helpers import backup_helpers
from ..utils import dt_utils, math_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import AppStats, DailyLogEntry, ProfileData, WeightProgress


class TrackerManager(BaseManager):
    """Manager for the profile, daily logs, streaks and settings.

    NOT responsible for:
    - Milestones and achievements (RewardManager)
    - Remote writes (SyncManager, reached through LOCAL_CHANGE)
    """

    async def async_setup(self) -> None:
        """Set up the tracker manager.

        No event subscriptions needed - TrackerManager is called directly.
        """
        const.LOGGER.debug(
            "DEBUG: TrackerManager initialized for entry %s", self.entry_id
        )

    def _require_profile(self) -> ProfileData:
        profile = self._data.get(const.DATA_USER)
        if not profile:
            raise ValidationError(const.DATA_USER, None, const.MSG_NO_PROFILE)
        return profile

    # =========================================================================
    # Profile
    # =========================================================================

    def setup_profile(
        self,
        starting_weight: float,
        goal_weight: float,
        daily_steps: int,
        daily_exercise: int,
        daily_water: float,
    ) -> ProfileData:
        """Create (or replace) the profile and restart streak tracking.

        Raises:
            ValidationError: any value out of range or weights too close
        """
        ValidationRules.validate_setup(
            starting_weight, goal_weight, daily_steps, daily_exercise, daily_water
        )
        now_iso = dt_util.utcnow().isoformat()
        profile: ProfileData = {
            const.DATA_USER_STARTING_WEIGHT: starting_weight,
            const.DATA_USER_CURRENT_WEIGHT: starting_weight,
            const.DATA_USER_GOAL_WEIGHT: goal_weight,
            const.DATA_USER_DAILY_STEPS: daily_steps,
            const.DATA_USER_DAILY_EXERCISE: daily_exercise,
            const.DATA_USER_DAILY_WATER: daily_water,
            const.DATA_USER_SETUP_DATE: now_iso,
            const.DATA_USER_LAST_WEIGHT_UPDATE: now_iso,
        }
        self._data[const.DATA_USER] = profile
        self._data[const.DATA_STREAKS] = StreakTracker.initial_state()

        const.LOGGER.info(
            "INFO: Profile set up: %s -> %s lbs", starting_weight, goal_weight
        )
        self._local_change(push=True)
        return profile

    def update_daily_goals(
        self, daily_steps: int, daily_exercise: int, daily_water: float
    ) -> None:
        """Replace the three daily targets.

        Raises:
            ValidationError: no profile, or a target out of range
        """
        profile = self._require_profile()
        ValidationRules.validate_daily_targets(daily_steps, daily_exercise, daily_water)
        profile[const.DATA_USER_DAILY_STEPS] = daily_steps
        profile[const.DATA_USER_DAILY_EXERCISE] = daily_exercise
        profile[const.DATA_USER_DAILY_WATER] = daily_water

        const.LOGGER.info(
            "INFO: Daily goals updated: %s steps, %s min, %s L",
            daily_steps,
            daily_exercise,
            daily_water,
        )
        self._local_change(
            const.SYNC_ACTION_SETTINGS,
            {
                const.DATA_USER_DAILY_STEPS: daily_steps,
                const.DATA_USER_DAILY_EXERCISE: daily_exercise,
                const.DATA_USER_DAILY_WATER: daily_water,
            },
            push=True,
        )

    def update_weight_goal(self, goal_weight: float, unit: str | None = None) -> float:
        """Replace the goal weight, given in `unit` (default: the settings unit).

        Returns:
            The stored goal weight in lbs

        Raises:
            ValidationError: no profile, out of range, or too close to start
        """
        profile = self._require_profile()
        ValidationRules.require_number(const.DATA_USER_GOAL_WEIGHT, goal_weight)
        unit = unit or self._data[const.DATA_SETTINGS].get(
            const.DATA_SETTINGS_WEIGHT_UNIT, const.WEIGHT_UNIT_LBS
        )
        goal_lbs = math_utils.to_storage_weight(goal_weight, unit)
        ValidationRules.validate_weight_pair(
            profile[const.DATA_USER_STARTING_WEIGHT], goal_lbs
        )
        profile[const.DATA_USER_GOAL_WEIGHT] = goal_lbs

        const.LOGGER.info(
            "INFO: Goal weight updated to %s %s (%s lbs stored)",
            goal_weight,
            unit,
            math_utils.round_value(goal_lbs),
        )
        self._local_change(
            const.SYNC_ACTION_SETTINGS,
            {const.DATA_USER_GOAL_WEIGHT: goal_lbs},
            push=True,
        )
        return goal_lbs

    # =========================================================================
    # Daily Log
    # =========================================================================

    def log_daily_entry(
        self,
        *,
        weight: float | None,
        steps: int,
        exercise_minutes: int,
        water: float,
        exercise_types: list[str] | None = None,
        wellness_items: list[str] | None = None,
        date: str | None = None,
        confirmed: bool = False,
    ) -> DailyLogEntry:
        """Accept one daily log and update streaks exactly once.

        A second log for the same date overwrites the entry and runs the
        streak transition again. Callers must not submit the same entry twice.

        Raises:
            ValidationError: hard input errors or no profile
            ConfirmationRequiredError: unusual values and `confirmed` is False
        """
        profile = self._require_profile()
        exercise_types = list(exercise_types or [])
        wellness_items = list(wellness_items or [])

        unusual = ValidationRules.validate_daily_log(
            weight, steps, exercise_minutes, water, exercise_types, wellness_items
        )
        if unusual and not confirmed:
            raise ConfirmationRequiredError(unusual)

        log_date = date or dt_utils.dt_today_iso()
        if dt_utils.dt_parse_date(log_date) is None:
            raise ValidationError(const.DATA_LOG_DATE, log_date, "Invalid log date")

        now_iso = dt_util.utcnow().isoformat()
        entry: DailyLogEntry = {
            const.DATA_LOG_DATE: log_date,
            const.DATA_LOG_WEIGHT: weight,
            const.DATA_LOG_STEPS: steps,
            const.DATA_LOG_EXERCISE_MINUTES: exercise_minutes,
            const.DATA_LOG_EXERCISE_TYPES: exercise_types,
            const.DATA_LOG_WATER: water,
            const.DATA_LOG_WELLNESS_SCORE: len(wellness_items),
            const.DATA_LOG_WELLNESS_ITEMS: wellness_items,
            const.DATA_LOG_TIMESTAMP: now_iso,
        }

        daily_logs = self._data[const.DATA_DAILY_LOGS]
        daily_logs[log_date] = entry

        if weight is not None:
            profile[const.DATA_USER_CURRENT_WEIGHT] = weight
            profile[const.DATA_USER_LAST_WEIGHT_UPDATE] = now_iso

        goals_met = GoalEvaluator.evaluate(
            entry, profile, self._data[const.DATA_SETTINGS]
        )
        self._data[const.DATA_STREAKS] = StreakTracker.update(
            self._data[const.DATA_STREAKS], entry, goals_met, daily_logs
        )

        const.LOGGER.info(
            "INFO: Daily log saved for %s (goals met: %s, overall streak: %s)",
            log_date,
            [category for category, met in goals_met.items() if met],
            self._data[const.DATA_STREAKS][const.DATA_STREAK_OVERALL],
        )
        self._local_change(const.SYNC_ACTION_DAILY_LOG, dict(entry), push=True)
        self.emit(const.SIGNAL_SUFFIX_DAILY_LOG_SAVED, date=log_date)
        return entry

    def clear_daily_log(self, date: str | None = None) -> bool:
        """Delete the log for `date` (default today).

        Streak counters are left as they are.

        Returns:
            True if a log was removed
        """
        log_date = date or dt_utils.dt_today_iso()
        removed = self._data[const.DATA_DAILY_LOGS].pop(log_date, None)
        if removed is None:
            const.LOGGER.debug("DEBUG: No daily log to clear for %s", log_date)
            return False
        const.LOGGER.info("INFO: Cleared daily log for %s", log_date)
        self._local_change(push=True)
        return True

    # =========================================================================
    # Settings
    # =========================================================================

    def update_settings(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial settings update.

        Raises:
            ValidationError: unknown key or invalid value
        """
        if not changes:
            return dict(self._data[const.DATA_SETTINGS])
        ValidationRules.validate_settings_update(changes)
        self._data[const.DATA_SETTINGS].update(changes)
        const.LOGGER.info("INFO: Settings updated: %s", sorted(changes))
        self._local_change(const.SYNC_ACTION_SETTINGS, dict(changes))
        return dict(self._data[const.DATA_SETTINGS])

    # =========================================================================
    # Resets
    # =========================================================================

    def reset_streaks(self) -> None:
        """Reset every streak counter to zero."""
        self._data[const.DATA_STREAKS] = StreakTracker.initial_state()
        const.LOGGER.info("INFO: All streaks reset")
        self._local_change(push=True)

    def reset_profile(self) -> None:
        """Remove the profile but keep the daily logs."""
        self._data[const.DATA_USER] = None
        const.LOGGER.info("INFO: Profile reset (daily logs kept)")
        self._local_change(push=True)

    def reset_logs(self) -> None:
        """Remove all daily logs, streaks and achievements; keep the profile."""
        self._data[const.DATA_DAILY_LOGS] = {}
        self._data[const.DATA_STREAKS] = StreakTracker.initial_state()
        self._data[const.DATA_ACHIEVEMENTS] = []
        const.LOGGER.info("INFO: All daily logs, streaks and achievements cleared")
        self._local_change(push=True)

    def reset_local_data(self) -> None:
        """Remove profile, logs, streaks, custom rewards and achievements.

        Settings, the sync queue and the sync state are kept, and nothing is
        pushed so the remote copy can be pulled back later.
        """
        self._data[const.DATA_USER] = None
        self._data[const.DATA_DAILY_LOGS] = {}
        self._data[const.DATA_STREAKS] = StreakTracker.initial_state()
        self._data[const.DATA_CUSTOM_REWARDS] = []
        self._data[const.DATA_ACHIEVEMENTS] = []
        const.LOGGER.warning("WARNING: Local FitStreak data cleared")
        self.coordinator._persist_and_update()

    # =========================================================================
    # Import
    # =========================================================================

    def import_data(self, document: dict[str, Any]) -> None:
        """Replace local entities with an import document.

        The whole document is validated first; nothing changes on failure.

        Raises:
            ValidationError: invalid document
        """
        backup_helpers.validate_import_document(document)
        backup_helpers.apply_import(self._data, document)
        const.LOGGER.info(
            "INFO: Imported data with %s daily logs",
            len(self._data[const.DATA_DAILY_LOGS]),
        )
        self._local_change(push=True)

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_app_stats(self) -> AppStats:
        """Return totals and progress over the current state."""
        daily_logs = self._data[const.DATA_DAILY_LOGS].values()
        streaks = self._data[const.DATA_STREAKS]
        sync_state = self._data[const.DATA_SYNC_STATE]
        profile = self._data.get(const.DATA_USER)

        stats: AppStats = {
            "cloudConnected": bool(sync_state.get(const.DATA_SYNC_CONNECTED)),
            "lastCloudSync": sync_state.get(const.DATA_SYNC_LAST_SYNC),
            "profileCreated": (
                profile.get(const.DATA_USER_SETUP_DATE) if profile else None
            ),
            "totalDaysLogged": len(daily_logs),
            "weightEntriesLogged": sum(
                1 for log in daily_logs if log.get(const.DATA_LOG_WEIGHT) is not None
            ),
            "currentStreak": streaks.get(const.DATA_STREAK_OVERALL, 0),
            "longestStreak": StreakTracker.longest(streaks),
            "totalExerciseMinutes": sum(
                log.get(const.DATA_LOG_EXERCISE_MINUTES) or 0 for log in daily_logs
            ),
            "totalSteps": sum(log.get(const.DATA_LOG_STEPS) or 0 for log in daily_logs),
            "totalWaterLiters": math_utils.round_value(
                sum(log.get(const.DATA_LOG_WATER) or 0 for log in daily_logs)
            ),
            "achievementsUnlocked": len(self._data[const.DATA_ACHIEVEMENTS]),
            "customRewards": len(self._data[const.DATA_CUSTOM_REWARDS]),
            "pendingSyncs": len(SyncQueue.pending(self._data[const.DATA_SYNC_QUEUE])),
        }
        progress = self.weight_progress()
        if progress is not None:
            stats["weightProgress"] = progress
        return stats

    def weight_progress(self) -> WeightProgress | None:
        """Return starting/current/goal weight with lost and remaining amounts."""
        profile = self._data.get(const.DATA_USER)
        if not profile:
            return None
        starting = profile[const.DATA_USER_STARTING_WEIGHT]
        current = profile.get(const.DATA_USER_CURRENT_WEIGHT, starting)
        goal = profile[const.DATA_USER_GOAL_WEIGHT]
        return {
            "starting": starting,
            "current": current,
            "goal": goal,
            "lost": math_utils.round_value(starting - current),
            "remaining": math_utils.round_value(abs(current - goal)),
        }
