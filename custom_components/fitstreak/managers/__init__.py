"""Managers for FitStreak integration.

Managers own stateful workflows and persist through the coordinator:
- TrackerManager: profile, daily logs, streaks, settings, resets, statistics
- RewardManager: custom rewards, milestones, claims, unlock notices
- SyncManager: sync queue, retries and reconciliation with the remote store
"""

from .base_manager import BaseManager
from .reward_manager import RewardManager
from .sync_manager import SyncManager
from .tracker_manager import TrackerManager

__all__ = [
    "BaseManager",
    "RewardManager",
    "SyncManager",
    "TrackerManager",
]
