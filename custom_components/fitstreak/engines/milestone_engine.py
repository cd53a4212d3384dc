"""Milestone Engine - Derive milestones and evaluate the achievement ledger.

MilestoneGenerator builds the complete, ordered milestone list from the
profile and the custom rewards:
- Fixed streak milestones at 7, 14, 30, 50 and 100 days
- Weight milestones every 10 lbs of planned loss, plus "big win" tiers every
  25 lbs and "major milestone" tiers every 50 lbs (tiers overlap)
- Custom rewards whose (type, threshold) key matches no default milestone

A custom reward whose key matches a default milestone is attached to it
instead of being listed twice. When several rewards share a key, the one
created first wins the attachment.

AchievementLedger holds the predicates over the append-only achievements
list and builds the snapshot recorded at claim time.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
Output is deterministic for identical inputs.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import (
        AchievementData,
        CustomRewardData,
        MilestoneData,
        ProfileData,
        StreakState,
    )


def _fmt(value: float) -> str:
    """Render a threshold without a trailing .0 for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _same_value(left: Any, right: Any) -> bool:
    """Numeric equality that tolerates int/float spelling differences."""
    try:
        return float(left) == float(right)
    except (TypeError, ValueError):
        return False


class MilestoneGenerator:
    """Pure milestone derivation."""

    @staticmethod
    def reward_threshold(reward: CustomRewardData) -> float | None:
        """Return the threshold a streak or weight reward targets."""
        reward_type = reward.get(const.DATA_REWARD_TYPE)
        if reward_type == const.REWARD_TYPE_WEIGHT:
            return reward.get(const.DATA_REWARD_WEIGHT_LOSS)
        if reward_type == const.REWARD_TYPE_STREAK:
            return reward.get(const.DATA_REWARD_STREAK_DAYS)
        return None

    @staticmethod
    def streak_milestones() -> list[MilestoneData]:
        """Return the five fixed streak milestones."""
        return [
            {
                const.DATA_MILESTONE_TYPE: const.MILESTONE_TYPE_STREAK,
                const.DATA_MILESTONE_VALUE: days,
                const.DATA_MILESTONE_TITLE: title,
                const.DATA_MILESTONE_DESCRIPTION: (
                    f"Complete {days} consecutive days of goals"
                ),
            }
            for days, title in const.STREAK_MILESTONE_TITLES.items()
        ]

    @staticmethod
    def weight_milestones(profile: ProfileData | None) -> list[MilestoneData]:
        """Return default, big and major weight milestones for the planned loss."""
        if not profile:
            return []
        total_to_lose = (
            profile[const.DATA_USER_STARTING_WEIGHT] - profile[const.DATA_USER_GOAL_WEIGHT]
        )
        if total_to_lose <= 0:
            return []

        milestones: list[MilestoneData] = []
        for lost in range(
            const.WEIGHT_MILESTONE_STEP,
            int(total_to_lose) + 1,
            const.WEIGHT_MILESTONE_STEP,
        ):
            milestones.append(
                {
                    const.DATA_MILESTONE_TYPE: const.MILESTONE_TYPE_WEIGHT,
                    const.DATA_MILESTONE_VALUE: lost,
                    const.DATA_MILESTONE_TITLE: f"{lost} lbs Lost",
                    const.DATA_MILESTONE_DESCRIPTION: (
                        f"Lost {lost} pounds from starting weight"
                    ),
                }
            )
        for lost in range(
            const.WEIGHT_MILESTONE_BIG_STEP,
            int(total_to_lose) + 1,
            const.WEIGHT_MILESTONE_BIG_STEP,
        ):
            milestones.append(
                {
                    const.DATA_MILESTONE_TYPE: const.MILESTONE_TYPE_WEIGHT,
                    const.DATA_MILESTONE_VALUE: lost,
                    const.DATA_MILESTONE_TITLE: f"{lost} lbs Lost - BIG WIN!",
                    const.DATA_MILESTONE_DESCRIPTION: (
                        f"Amazing achievement: Lost {lost} pounds!"
                    ),
                    const.DATA_MILESTONE_IS_BIG: True,
                }
            )
        for lost in range(
            const.WEIGHT_MILESTONE_MAJOR_STEP,
            int(total_to_lose) + 1,
            const.WEIGHT_MILESTONE_MAJOR_STEP,
        ):
            milestones.append(
                {
                    const.DATA_MILESTONE_TYPE: const.MILESTONE_TYPE_WEIGHT,
                    const.DATA_MILESTONE_VALUE: lost,
                    const.DATA_MILESTONE_TITLE: f"{lost} lbs Lost - MAJOR MILESTONE!",
                    const.DATA_MILESTONE_DESCRIPTION: (
                        f"Incredible transformation: Lost {lost} pounds!"
                    ),
                    const.DATA_MILESTONE_IS_MAJOR: True,
                }
            )
        return milestones

    @staticmethod
    def find_reward(
        custom_rewards: list[CustomRewardData], milestone_type: str, value: float
    ) -> CustomRewardData | None:
        """Return the first-created reward keyed to (milestone_type, value)."""
        for reward in custom_rewards:
            if reward.get(const.DATA_REWARD_TYPE) != milestone_type:
                continue
            if _same_value(MilestoneGenerator.reward_threshold(reward), value):
                return reward
        return None

    @staticmethod
    def generate(
        profile: ProfileData | None, custom_rewards: list[CustomRewardData]
    ) -> list[MilestoneData]:
        """Return the ordered milestone list.

        Order: streak defaults, weight defaults, big tiers, major tiers, then
        custom milestones in reward creation order. Combo rewards never
        produce a milestone because they carry no single threshold key.
        """
        milestones = MilestoneGenerator.streak_milestones()
        milestones.extend(MilestoneGenerator.weight_milestones(profile))

        default_keys = {
            (m[const.DATA_MILESTONE_TYPE], float(m[const.DATA_MILESTONE_VALUE]))
            for m in milestones
        }

        for milestone in milestones:
            reward = MilestoneGenerator.find_reward(
                custom_rewards,
                milestone[const.DATA_MILESTONE_TYPE],
                milestone[const.DATA_MILESTONE_VALUE],
            )
            if reward is not None:
                milestone[const.DATA_MILESTONE_CUSTOM_REWARD] = copy.deepcopy(reward)

        custom_keys: set[tuple[str, float]] = set()
        for reward in custom_rewards:
            reward_type = reward.get(const.DATA_REWARD_TYPE)
            threshold = MilestoneGenerator.reward_threshold(reward)
            if threshold is None:
                continue
            key = (reward_type, float(threshold))
            if key in default_keys or key in custom_keys:
                continue
            custom_keys.add(key)

            if reward_type == const.REWARD_TYPE_WEIGHT:
                title = f"{_fmt(threshold)} lbs Lost - Custom Reward"
            else:
                title = f"{_fmt(threshold)} Day Streak - Custom Reward"
            milestones.append(
                {
                    const.DATA_MILESTONE_TYPE: reward_type,
                    const.DATA_MILESTONE_VALUE: threshold,
                    const.DATA_MILESTONE_TITLE: title,
                    const.DATA_MILESTONE_DESCRIPTION: (
                        f"Custom milestone: {reward.get(const.DATA_REWARD_DESCRIPTION, '')}"
                    ),
                    const.DATA_MILESTONE_IS_CUSTOM: True,
                    const.DATA_MILESTONE_CUSTOM_REWARD: copy.deepcopy(reward),
                }
            )
        return milestones

    @staticmethod
    def find(
        milestones: list[MilestoneData], milestone_type: str, value: float
    ) -> MilestoneData | None:
        """Return the first milestone with the given (type, value) key."""
        for milestone in milestones:
            if milestone[const.DATA_MILESTONE_TYPE] == milestone_type and _same_value(
                milestone[const.DATA_MILESTONE_VALUE], value
            ):
                return milestone
        return None


class AchievementLedger:
    """Pure predicates over the append-only achievements list."""

    @staticmethod
    def is_achieved(
        milestone: MilestoneData,
        streaks: StreakState,
        profile: ProfileData | None,
    ) -> bool:
        """Return True if the milestone threshold has been reached.

        Streak milestones compare against the overall counter. Weight
        milestones compare (starting - current weight) against the threshold.
        """
        milestone_type = milestone[const.DATA_MILESTONE_TYPE]
        value = milestone[const.DATA_MILESTONE_VALUE]
        if milestone_type == const.MILESTONE_TYPE_STREAK:
            return streaks.get(const.DATA_STREAK_OVERALL, 0) >= value
        if milestone_type == const.MILESTONE_TYPE_WEIGHT and profile:
            weight_lost = (
                profile[const.DATA_USER_STARTING_WEIGHT]
                - profile[const.DATA_USER_CURRENT_WEIGHT]
            )
            return weight_lost >= value
        return False

    @staticmethod
    def is_claimed(
        milestone: MilestoneData, achievements: list[AchievementData]
    ) -> bool:
        """Return True if an achievement with the same (type, value) exists."""
        return any(
            achievement.get(const.DATA_ACHIEVEMENT_TYPE)
            == milestone[const.DATA_MILESTONE_TYPE]
            and _same_value(
                achievement.get(const.DATA_ACHIEVEMENT_VALUE),
                milestone[const.DATA_MILESTONE_VALUE],
            )
            for achievement in achievements
        )

    @staticmethod
    def unclaimed_achieved(
        milestones: list[MilestoneData],
        achievements: list[AchievementData],
        streaks: StreakState,
        profile: ProfileData | None,
    ) -> list[MilestoneData]:
        """Return achieved milestones that have not been claimed, streaks first."""
        ordered = [
            m for m in milestones if m[const.DATA_MILESTONE_TYPE] == const.MILESTONE_TYPE_STREAK
        ] + [
            m for m in milestones if m[const.DATA_MILESTONE_TYPE] == const.MILESTONE_TYPE_WEIGHT
        ]
        return [
            milestone
            for milestone in ordered
            if AchievementLedger.is_achieved(milestone, streaks, profile)
            and not AchievementLedger.is_claimed(milestone, achievements)
        ]

    @staticmethod
    def build_achievement(
        milestone: MilestoneData,
        streaks: StreakState,
        profile: ProfileData,
        custom_reward: CustomRewardData | None,
        claimed_at: str,
    ) -> AchievementData:
        """Build the achievement record for a claim.

        The custom reward is deep-copied so later edits to the reward never
        rewrite history.
        """
        achievement: AchievementData = {
            const.DATA_ACHIEVEMENT_TYPE: milestone[const.DATA_MILESTONE_TYPE],
            const.DATA_ACHIEVEMENT_VALUE: milestone[const.DATA_MILESTONE_VALUE],
            const.DATA_ACHIEVEMENT_TITLE: milestone[const.DATA_MILESTONE_TITLE],
            const.DATA_ACHIEVEMENT_DESCRIPTION: milestone[
                const.DATA_MILESTONE_DESCRIPTION
            ],
            const.DATA_ACHIEVEMENT_CLAIMED_DATE: claimed_at,
            const.DATA_ACHIEVEMENT_CLAIMED_STREAK: streaks.get(
                const.DATA_STREAK_OVERALL, 0
            ),
            const.DATA_ACHIEVEMENT_CLAIMED_WEIGHT: profile[
                const.DATA_USER_CURRENT_WEIGHT
            ],
        }
        if custom_reward is not None:
            achievement[const.DATA_ACHIEVEMENT_CUSTOM_REWARD] = copy.deepcopy(
                custom_reward
            )
        return achievement
