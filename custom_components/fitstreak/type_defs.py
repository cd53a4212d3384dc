"""Type definitions for FitStreak data structures.

TypedDict shapes describe the persisted records. Keys use the portable
document spelling (camelCase) because the same records are written verbatim
to export files and to the remote user record.

IMPORTANT: This file must NOT import from coordinator.py, managers or helpers
to avoid circular dependencies. Only import from typing.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (.get() defaults,
isinstance guards) stay in the store and the engines.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"
MilestoneType = Literal["streak", "weight"]
RewardType = Literal["streak", "weight", "combo"]
SyncAction = Literal[
    "dailyLog", "customReward", "deleteCustomReward", "achievement", "settings"
]


# =============================================================================
# Profile and Daily Logs
# =============================================================================


class ProfileData(TypedDict):
    """User profile created once at setup.

    Weights are stored in lbs regardless of the display unit.
    """

    startingWeight: float
    currentWeight: float
    goalWeight: float
    dailySteps: int
    dailyExercise: int
    dailyWater: float
    setupDate: ISODatetime
    lastWeightUpdate: ISODatetime


class DailyLogEntry(TypedDict):
    """One day of tracked activity, keyed by its ISO date."""

    date: ISODate
    weight: float | None
    steps: int
    exerciseMinutes: int
    exerciseTypes: list[str]
    water: float
    wellnessScore: int  # len(wellnessItems)
    wellnessItems: list[str]
    timestamp: ISODatetime


class GoalsMet(TypedDict):
    """Per-category goal outcome for a single daily entry."""

    steps: bool
    exercise: bool
    water: bool
    wellness: bool


class StreakState(TypedDict):
    """Consecutive-day counters plus the bookkeeping needed to chain them."""

    overall: int
    steps: int
    exercise: int
    water: int
    wellness: int
    lastLogDate: ISODate | None
    weeklyWeight: bool
    lastWeightDate: ISODate | None


# =============================================================================
# Rewards, Milestones, Achievements
# =============================================================================


class CustomRewardData(TypedDict):
    """User-defined reward attached to a streak or weight threshold."""

    type: RewardType
    description: str
    createdDate: ISODatetime
    streakDays: NotRequired[int]
    weightLoss: NotRequired[float]


class MilestoneData(TypedDict):
    """Derived milestone. Never persisted on its own."""

    type: MilestoneType
    value: float
    title: str
    description: str
    isBig: NotRequired[bool]
    isMajor: NotRequired[bool]
    isCustom: NotRequired[bool]
    customReward: NotRequired[CustomRewardData]


class AchievementData(TypedDict):
    """Claimed milestone. Append-only."""

    type: MilestoneType
    value: float
    title: str
    description: str
    claimedDate: ISODatetime
    claimedStreak: int
    claimedWeight: float
    customReward: NotRequired[CustomRewardData]  # Copied at claim time


# =============================================================================
# Settings
# =============================================================================


class SettingsData(TypedDict):
    """User preferences synced with the rest of the record."""

    themePreference: str
    weightUnit: Literal["lbs", "kg"]
    dateFormat: str
    weekStart: str
    allowPartialSteps: bool
    allowPartialExercise: bool
    strictWellness: bool


# =============================================================================
# Sync
# =============================================================================


class SyncQueueItem(TypedDict):
    """Pending local mutation awaiting remote confirmation."""

    action: SyncAction
    data: dict[str, Any]
    timestamp: ISODatetime
    synced: bool


class SyncStateData(TypedDict):
    """Connectivity and retry bookkeeping for the reconciler."""

    connected: bool
    lastSync: ISODatetime | None
    retryCount: int
    status: str


class RemoteUserRecord(TypedDict):
    """Single remote record holding the whole user state."""

    profile: ProfileData | None
    dailyLogs: dict[ISODate, DailyLogEntry]
    streaks: StreakState
    customRewards: list[CustomRewardData]
    achievements: list[AchievementData]
    settings: SettingsData
    lastSync: ISODatetime
    version: str


# =============================================================================
# Statistics
# =============================================================================


class WeightProgress(TypedDict):
    """Weight progress summary in lbs."""

    starting: float
    current: float
    goal: float
    lost: float
    remaining: float


class AppStats(TypedDict):
    """Aggregate statistics over the local state."""

    cloudConnected: bool
    lastCloudSync: ISODatetime | None
    profileCreated: ISODatetime | None
    totalDaysLogged: int
    weightEntriesLogged: int
    currentStreak: int
    longestStreak: int
    totalExerciseMinutes: int
    totalSteps: int
    totalWaterLiters: float
    achievementsUnlocked: int
    customRewards: int
    pendingSyncs: int
    weightProgress: NotRequired[WeightProgress]
