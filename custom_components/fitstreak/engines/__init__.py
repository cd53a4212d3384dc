"""Engine modules for FitStreak integration.

Contains pure computation engines (no Home Assistant imports):
- validation_engine: Range and consistency checks on raw input
- goal_engine: Per-category daily goal evaluation
- streak_engine: Consecutive-day streak transitions
- milestone_engine: Milestone derivation and achievement ledger predicates
- sync_engine: Sync queue, retry policy and remote record handling
"""

# Use relative imports within package to avoid mypy module resolution issues
from .goal_engine import GoalEvaluator
from .milestone_engine import AchievementLedger, MilestoneGenerator
from .streak_engine import StreakTracker
from .sync_engine import RemoteRecord, RetryDecision, RetryPolicy, SyncQueue
from .validation_engine import (
    ConfirmationRequiredError,
    UnusualValue,
    ValidationError,
    ValidationRules,
)

__all__ = [
    "AchievementLedger",
    "ConfirmationRequiredError",
    "GoalEvaluator",
    "MilestoneGenerator",
    "RemoteRecord",
    "RetryDecision",
    "RetryPolicy",
    "StreakTracker",
    "SyncQueue",
    "UnusualValue",
    "ValidationError",
    "ValidationRules",
]
