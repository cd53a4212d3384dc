"""Reward Manager - Custom rewards, milestones and the achievement ledger.

This manager handles:
- Custom reward creation and deletion
- The derived milestone list (regenerated on every read, never stored)
- Claiming: a guarded no-op unless the milestone is achieved and unclaimed
- "Achievement Unlocked" notices after each saved daily log

Event Flow:
    TrackerManager.log_daily_entry() -> emit(DAILY_LOG_SAVED)
                                              |
              RewardManager (listener) <------+
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.util import dt as dt_util

from .. import const
from ..engines import AchievementLedger, MilestoneGenerator, ValidationRules
from ..notification_helper import async_send_notification
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import AchievementData, CustomRewardData, MilestoneData


class RewardManager(BaseManager):
    """Manager for custom rewards, milestones and claims.

    NOT responsible for:
    - Streak counting (TrackerManager)
    - Remote writes (SyncManager, reached through LOCAL_CHANGE)
    """

    async def async_setup(self) -> None:
        """Set up the RewardManager.

        Subscribes to DAILY_LOG_SAVED for unlock notices.
        """
        self.listen(const.SIGNAL_SUFFIX_DAILY_LOG_SAVED, self._on_daily_log_saved)
        const.LOGGER.debug("DEBUG: RewardManager initialized for entry %s", self.entry_id)

    # =========================================================================
    # Milestones
    # =========================================================================

    def get_milestones(self) -> list[MilestoneData]:
        """Return the full ordered milestone list for the current profile."""
        return MilestoneGenerator.generate(
            self._data.get(const.DATA_USER),
            self._data[const.DATA_CUSTOM_REWARDS],
        )

    def get_unclaimed_achieved(self) -> list[MilestoneData]:
        """Return milestones reached but not yet claimed (streaks first)."""
        return AchievementLedger.unclaimed_achieved(
            self.get_milestones(),
            self._data[const.DATA_ACHIEVEMENTS],
            self._data[const.DATA_STREAKS],
            self._data.get(const.DATA_USER),
        )

    # =========================================================================
    # Custom Rewards
    # =========================================================================

    def add_custom_reward(
        self,
        reward_type: str,
        description: str,
        streak_days: int | None = None,
        weight_loss: float | None = None,
    ) -> CustomRewardData:
        """Create a custom reward.

        Raises:
            ValidationError: unknown type, empty description or bad threshold
        """
        ValidationRules.validate_custom_reward(
            reward_type, description, streak_days, weight_loss
        )
        reward: CustomRewardData = {
            const.DATA_REWARD_TYPE: reward_type,
            const.DATA_REWARD_DESCRIPTION: description.strip(),
            const.DATA_REWARD_CREATED_DATE: dt_util.utcnow().isoformat(),
        }
        if reward_type in (const.REWARD_TYPE_STREAK, const.REWARD_TYPE_COMBO):
            reward[const.DATA_REWARD_STREAK_DAYS] = streak_days
        if reward_type in (const.REWARD_TYPE_WEIGHT, const.REWARD_TYPE_COMBO):
            reward[const.DATA_REWARD_WEIGHT_LOSS] = weight_loss

        self._data[const.DATA_CUSTOM_REWARDS].append(reward)
        const.LOGGER.info(
            "INFO: Custom %s reward added: %s",
            reward_type,
            reward[const.DATA_REWARD_DESCRIPTION],
        )
        self._local_change(const.SYNC_ACTION_CUSTOM_REWARD, dict(reward), push=True)
        return reward

    def delete_custom_reward(self, index: int) -> CustomRewardData:
        """Delete the custom reward at `index`.

        Raises:
            IndexError: no reward at that position
        """
        rewards = self._data[const.DATA_CUSTOM_REWARDS]
        if index < 0 or index >= len(rewards):
            raise IndexError(f"No custom reward at index {index}")
        removed = rewards.pop(index)
        const.LOGGER.info(
            "INFO: Custom reward deleted: %s", removed.get(const.DATA_REWARD_DESCRIPTION)
        )
        self._local_change(
            const.SYNC_ACTION_DELETE_CUSTOM_REWARD, {const.FIELD_INDEX: index},
            push=True,
        )
        return removed

    # =========================================================================
    # Claims
    # =========================================================================

    def claim(self, milestone_type: str, value: float) -> AchievementData | None:
        """Claim the milestone identified by (type, value).

        Guarded no-op: returns None without raising when no such milestone
        exists, it is not achieved yet, or it was already claimed.

        Returns:
            The new achievement, or None when nothing was claimed
        """
        profile = self._data.get(const.DATA_USER)
        milestone = MilestoneGenerator.find(self.get_milestones(), milestone_type, value)
        if milestone is None or not profile:
            const.LOGGER.debug(
                "DEBUG: Claim ignored, no %s milestone at %s", milestone_type, value
            )
            return None

        streaks = self._data[const.DATA_STREAKS]
        achievements = self._data[const.DATA_ACHIEVEMENTS]
        if not AchievementLedger.is_achieved(milestone, streaks, profile):
            const.LOGGER.debug(
                "DEBUG: Claim ignored, milestone '%s' not achieved",
                milestone[const.DATA_MILESTONE_TITLE],
            )
            return None
        if AchievementLedger.is_claimed(milestone, achievements):
            const.LOGGER.debug(
                "DEBUG: Claim ignored, milestone '%s' already claimed",
                milestone[const.DATA_MILESTONE_TITLE],
            )
            return None

        achievement = AchievementLedger.build_achievement(
            milestone,
            streaks,
            profile,
            milestone.get(const.DATA_MILESTONE_CUSTOM_REWARD),
            dt_util.utcnow().isoformat(),
        )
        achievements.append(achievement)
        const.LOGGER.info(
            "INFO: Milestone claimed: %s", achievement[const.DATA_ACHIEVEMENT_TITLE]
        )
        self._local_change(
            const.SYNC_ACTION_ACHIEVEMENT, dict(achievement), push=True
        )
        return achievement

    # =========================================================================
    # Event Handlers
    # =========================================================================

    @callback
    def _on_daily_log_saved(self, payload: dict[str, Any]) -> None:
        """Announce every achieved but unclaimed milestone."""
        for milestone in self.get_unclaimed_achieved():
            self.hass.async_create_task(self._async_notify_unlocked(milestone))

    async def _async_notify_unlocked(self, milestone: MilestoneData) -> None:
        reward = milestone.get(const.DATA_MILESTONE_CUSTOM_REWARD)
        reward_text = (
            f" Your reward: {reward[const.DATA_REWARD_DESCRIPTION]}" if reward else ""
        )
        await async_send_notification(
            self.hass,
            const.TITLE_ACHIEVEMENT_UNLOCKED,
            f"Achievement Unlocked: {milestone[const.DATA_MILESTONE_TITLE]}!"
            f"{reward_text} Claim it with the claim_milestone action.",
            notification_id=(
                f"{const.NOTIFICATION_ID_ACHIEVEMENT}_"
                f"{milestone[const.DATA_MILESTONE_TYPE]}_"
                f"{milestone[const.DATA_MILESTONE_VALUE]}"
            ),
        )
