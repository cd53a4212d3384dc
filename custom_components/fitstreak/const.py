# File: const.py
"""Constants for the FitStreak integration.

This file centralizes configuration keys, persisted field names, defaults,
validation ranges, milestone thresholds, sync tuning, service names and
dispatcher signal suffixes for consistency across the integration.

Persisted record fields use the portable document spelling (camelCase) so the
local store, export files and the remote user record share one shape.
"""

from datetime import timedelta
import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
FITSTREAK_TITLE = "FitStreak"

# Integration Domain
DOMAIN = "fitstreak"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "fitstreak_data"
STORAGE_VERSION = 1
SCHEMA_VERSION = 1

# Version tag written into remote records and export documents
DOCUMENT_VERSION = "1.1"

# ------------------------------------------------------------------------------------------------
# Config Entry Keys
# ------------------------------------------------------------------------------------------------
CONF_BACKEND = "backend"
CONF_DATABASE_URL = "database_url"
CONF_API_KEY = "api_key"
CONF_BIN_ID = "bin_id"
CONF_USER_ID = "user_id"

# Options
CONF_AUTO_SYNC = "auto_sync"
CONF_SYNC_NOTIFICATIONS = "sync_notifications"

DEFAULT_AUTO_SYNC = True
DEFAULT_SYNC_NOTIFICATIONS = True
DEFAULT_USER_ID = "user1"

# Remote backends
BACKEND_LOCAL = "local"
BACKEND_FIREBASE = "firebase"
BACKEND_JSONBIN = "jsonbin"
BACKEND_OPTIONS = [BACKEND_LOCAL, BACKEND_FIREBASE, BACKEND_JSONBIN]

# Firebase credential format
FIREBASE_API_KEY_MIN_LENGTH = 35
FIREBASE_API_KEY_MAX_LENGTH = 45
FIREBASE_API_KEY_PATTERN = r"^[A-Za-z0-9_-]+$"
FIREBASE_DATABASE_URL_PATTERN = (
    r"^https://[a-zA-Z0-9-]+-default-rtdb\."
    r"(firebaseio\.com|[a-z0-9-]+\.firebasedatabase\.app)/$"
)

# JSONBin endpoint
JSONBIN_BASE_URL = "https://api.jsonbin.io/v3/b"
JSONBIN_HEADER_MASTER_KEY = "X-Master-Key"
JSONBIN_HEADER_BIN_META = "X-Bin-Meta"

# Remote request timeout (seconds)
REMOTE_REQUEST_TIMEOUT = 15

# Config flow errors
ERROR_INVALID_API_KEY = "invalid_api_key"
ERROR_INVALID_DATABASE_URL = "invalid_database_url"
ERROR_INVALID_BIN_ID = "invalid_bin_id"
ERROR_CANNOT_CONNECT = "cannot_connect"
ABORT_SINGLE_INSTANCE = "single_instance_allowed"

# Config flow steps
CONFIG_FLOW_STEP_USER = "user"
CONFIG_FLOW_STEP_FIREBASE = "firebase"
CONFIG_FLOW_STEP_JSONBIN = "jsonbin"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Top-Level Storage Keys
# ------------------------------------------------------------------------------------------------
DATA_USER = "user"
DATA_DAILY_LOGS = "dailyLogs"
DATA_STREAKS = "streaks"
DATA_CUSTOM_REWARDS = "customRewards"
DATA_ACHIEVEMENTS = "achievements"
DATA_SETTINGS = "settings"
DATA_SYNC_QUEUE = "syncQueue"
DATA_SYNC_STATE = "syncState"
DATA_META = "meta"
DATA_META_SCHEMA_VERSION = "schemaVersion"

# Profile
DATA_USER_STARTING_WEIGHT = "startingWeight"
DATA_USER_CURRENT_WEIGHT = "currentWeight"
DATA_USER_GOAL_WEIGHT = "goalWeight"
DATA_USER_DAILY_STEPS = "dailySteps"
DATA_USER_DAILY_EXERCISE = "dailyExercise"
DATA_USER_DAILY_WATER = "dailyWater"
DATA_USER_SETUP_DATE = "setupDate"
DATA_USER_LAST_WEIGHT_UPDATE = "lastWeightUpdate"

# Profile fields an import document must carry as numbers
IMPORT_REQUIRED_USER_FIELDS = (
    DATA_USER_STARTING_WEIGHT,
    DATA_USER_GOAL_WEIGHT,
    DATA_USER_DAILY_STEPS,
    DATA_USER_DAILY_EXERCISE,
    DATA_USER_DAILY_WATER,
)

# Daily Log Entry
DATA_LOG_DATE = "date"
DATA_LOG_WEIGHT = "weight"
DATA_LOG_STEPS = "steps"
DATA_LOG_EXERCISE_MINUTES = "exerciseMinutes"
DATA_LOG_EXERCISE_TYPES = "exerciseTypes"
DATA_LOG_WATER = "water"
DATA_LOG_WELLNESS_SCORE = "wellnessScore"
DATA_LOG_WELLNESS_ITEMS = "wellnessItems"
DATA_LOG_TIMESTAMP = "timestamp"

# Streak State
DATA_STREAK_OVERALL = "overall"
DATA_STREAK_STEPS = "steps"
DATA_STREAK_EXERCISE = "exercise"
DATA_STREAK_WATER = "water"
DATA_STREAK_WELLNESS = "wellness"
DATA_STREAK_LAST_LOG_DATE = "lastLogDate"
DATA_STREAK_WEEKLY_WEIGHT = "weeklyWeight"
DATA_STREAK_LAST_WEIGHT_DATE = "lastWeightDate"

# Goal categories (each has its own streak counter)
GOAL_STEPS = "steps"
GOAL_EXERCISE = "exercise"
GOAL_WATER = "water"
GOAL_WELLNESS = "wellness"
GOAL_CATEGORIES = (GOAL_STEPS, GOAL_EXERCISE, GOAL_WATER, GOAL_WELLNESS)

# Milestone
DATA_MILESTONE_TYPE = "type"
DATA_MILESTONE_VALUE = "value"
DATA_MILESTONE_TITLE = "title"
DATA_MILESTONE_DESCRIPTION = "description"
DATA_MILESTONE_IS_BIG = "isBig"
DATA_MILESTONE_IS_MAJOR = "isMajor"
DATA_MILESTONE_IS_CUSTOM = "isCustom"
DATA_MILESTONE_CUSTOM_REWARD = "customReward"

MILESTONE_TYPE_STREAK = "streak"
MILESTONE_TYPE_WEIGHT = "weight"
MILESTONE_TYPES = [MILESTONE_TYPE_STREAK, MILESTONE_TYPE_WEIGHT]

# Custom Reward
DATA_REWARD_TYPE = "type"
DATA_REWARD_DESCRIPTION = "description"
DATA_REWARD_CREATED_DATE = "createdDate"
DATA_REWARD_STREAK_DAYS = "streakDays"
DATA_REWARD_WEIGHT_LOSS = "weightLoss"

REWARD_TYPE_STREAK = MILESTONE_TYPE_STREAK
REWARD_TYPE_WEIGHT = MILESTONE_TYPE_WEIGHT
REWARD_TYPE_COMBO = "combo"
REWARD_TYPES = [REWARD_TYPE_STREAK, REWARD_TYPE_WEIGHT, REWARD_TYPE_COMBO]

# Achievement
DATA_ACHIEVEMENT_TYPE = "type"
DATA_ACHIEVEMENT_VALUE = "value"
DATA_ACHIEVEMENT_TITLE = "title"
DATA_ACHIEVEMENT_DESCRIPTION = "description"
DATA_ACHIEVEMENT_CLAIMED_DATE = "claimedDate"
DATA_ACHIEVEMENT_CLAIMED_STREAK = "claimedStreak"
DATA_ACHIEVEMENT_CLAIMED_WEIGHT = "claimedWeight"
DATA_ACHIEVEMENT_CUSTOM_REWARD = "customReward"

# Settings
DATA_SETTINGS_THEME_PREFERENCE = "themePreference"
DATA_SETTINGS_WEIGHT_UNIT = "weightUnit"
DATA_SETTINGS_DATE_FORMAT = "dateFormat"
DATA_SETTINGS_WEEK_START = "weekStart"
DATA_SETTINGS_ALLOW_PARTIAL_STEPS = "allowPartialSteps"
DATA_SETTINGS_ALLOW_PARTIAL_EXERCISE = "allowPartialExercise"
DATA_SETTINGS_STRICT_WELLNESS = "strictWellness"

WEIGHT_UNIT_LBS = "lbs"
WEIGHT_UNIT_KG = "kg"
WEIGHT_UNITS = [WEIGHT_UNIT_LBS, WEIGHT_UNIT_KG]
THEME_OPTIONS = ["system", "light", "dark"]
DATE_FORMAT_OPTIONS = ["US", "EU", "ISO"]
WEEK_START_OPTIONS = ["sunday", "monday"]

DEFAULT_SETTINGS = {
    DATA_SETTINGS_THEME_PREFERENCE: "system",
    DATA_SETTINGS_WEIGHT_UNIT: WEIGHT_UNIT_LBS,
    DATA_SETTINGS_DATE_FORMAT: "US",
    DATA_SETTINGS_WEEK_START: "sunday",
    DATA_SETTINGS_ALLOW_PARTIAL_STEPS: False,
    DATA_SETTINGS_ALLOW_PARTIAL_EXERCISE: False,
    DATA_SETTINGS_STRICT_WELLNESS: False,
}

# Sync Queue Item
DATA_QUEUE_ACTION = "action"
DATA_QUEUE_DATA = "data"
DATA_QUEUE_TIMESTAMP = "timestamp"
DATA_QUEUE_SYNCED = "synced"

SYNC_ACTION_DAILY_LOG = "dailyLog"
SYNC_ACTION_CUSTOM_REWARD = "customReward"
SYNC_ACTION_DELETE_CUSTOM_REWARD = "deleteCustomReward"
SYNC_ACTION_ACHIEVEMENT = "achievement"
SYNC_ACTION_SETTINGS = "settings"
SYNC_ACTIONS = (
    SYNC_ACTION_DAILY_LOG,
    SYNC_ACTION_CUSTOM_REWARD,
    SYNC_ACTION_DELETE_CUSTOM_REWARD,
    SYNC_ACTION_ACHIEVEMENT,
    SYNC_ACTION_SETTINGS,
)

# Sync State
DATA_SYNC_CONNECTED = "connected"
DATA_SYNC_LAST_SYNC = "lastSync"
DATA_SYNC_RETRY_COUNT = "retryCount"
DATA_SYNC_STATUS = "status"

SYNC_STATUS_LOCAL = "local"
SYNC_STATUS_SYNCED = "synced"
SYNC_STATUS_SYNCING = "syncing"
SYNC_STATUS_ERROR = "error"
SYNC_STATUS_OFFLINE = "offline"
SYNC_STATUS_OPTIONS = [
    SYNC_STATUS_LOCAL,
    SYNC_STATUS_SYNCED,
    SYNC_STATUS_SYNCING,
    SYNC_STATUS_ERROR,
    SYNC_STATUS_OFFLINE,
]

# Remote user record
REMOTE_ENTITY_USERS = "users"
REMOTE_PROFILE = "profile"
REMOTE_LAST_SYNC = "lastSync"
REMOTE_VERSION = "version"

# Export document
EXPORT_DATE = "exportDate"
EXPORT_TYPE = "exportType"
EXPORT_VERSION = "version"
EXPORT_TYPE_LOCAL = "local"
EXPORT_TYPE_REMOTE = "remote"
EXPORT_FILE_PREFIX = "fitstreak_export"

# ------------------------------------------------------------------------------------------------
# Validation Ranges
# ------------------------------------------------------------------------------------------------
# Daily log: values outside the usual range need explicit confirmation
LOG_WEIGHT_MIN = 50
LOG_WEIGHT_MAX = 1000
LOG_STEPS_MAX = 50000
LOG_EXERCISE_MAX = 300
LOG_WATER_MAX = 10
LOG_WELLNESS_MAX_ITEMS = 5

# Profile setup and goal updates (hard limits)
PROFILE_WEIGHT_MIN = 50
PROFILE_WEIGHT_MAX = 1000
PROFILE_MIN_WEIGHT_DELTA = 1
GOAL_STEPS_MIN = 1000
GOAL_STEPS_MAX = 50000
GOAL_EXERCISE_MIN = 5
GOAL_EXERCISE_MAX = 300
GOAL_WATER_MIN = 0.5
GOAL_WATER_MAX = 10

# Custom rewards
REWARD_MIN_STREAK_DAYS = 1
REWARD_MIN_WEIGHT_LOSS = 0.1

# Unit conversion
LBS_TO_KG = 0.453592

# ------------------------------------------------------------------------------------------------
# Goal Evaluation
# ------------------------------------------------------------------------------------------------
PARTIAL_STEPS_FACTOR = 0.9
PARTIAL_EXERCISE_FACTOR = 0.8
WELLNESS_THRESHOLD = 3
WELLNESS_THRESHOLD_STRICT = 4

# ------------------------------------------------------------------------------------------------
# Milestones
# ------------------------------------------------------------------------------------------------
STREAK_MILESTONE_TITLES = {
    7: "7 Day Streak",
    14: "2 Week Streak",
    30: "30 Day Streak",
    50: "50 Day Streak",
    100: "100 Day Streak",
}
WEIGHT_MILESTONE_STEP = 10
WEIGHT_MILESTONE_BIG_STEP = 25
WEIGHT_MILESTONE_MAJOR_STEP = 50

# ------------------------------------------------------------------------------------------------
# Sync / Retry
# ------------------------------------------------------------------------------------------------
SYNC_QUEUE_MAX_AGE = timedelta(hours=24)
SYNC_QUEUE_WARN_SIZE = 100
RETRY_BASE_DELAY_MS = 1000
RETRY_MAX_DELAY_MS = 30000
RETRY_MAX_ATTEMPTS = 3
AUTO_SYNC_INTERVAL = timedelta(minutes=5)

# ------------------------------------------------------------------------------------------------
# Dispatcher Signal Suffixes
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_DAILY_LOG_SAVED = "daily_log_saved"
SIGNAL_SUFFIX_LOCAL_CHANGE = "local_change"

# Signal payload keys
SIGNAL_PAYLOAD_ACTION = "action"
SIGNAL_PAYLOAD_DATA = "data"
SIGNAL_PAYLOAD_PUSH = "push"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_SETUP_PROFILE = "setup_profile"
SERVICE_LOG_DAILY_ENTRY = "log_daily_entry"
SERVICE_UPDATE_DAILY_GOALS = "update_daily_goals"
SERVICE_UPDATE_WEIGHT_GOAL = "update_weight_goal"
SERVICE_UPDATE_SETTINGS = "update_settings"
SERVICE_ADD_CUSTOM_REWARD = "add_custom_reward"
SERVICE_DELETE_CUSTOM_REWARD = "delete_custom_reward"
SERVICE_CLAIM_MILESTONE = "claim_milestone"
SERVICE_FORCE_SYNC = "force_sync"
SERVICE_EXPORT_DATA = "export_data"
SERVICE_IMPORT_DATA = "import_data"
SERVICE_GET_APP_STATS = "get_app_stats"
SERVICE_RESET_STREAKS = "reset_streaks"
SERVICE_CLEAR_DAILY_LOG = "clear_daily_log"
SERVICE_RESET_PROFILE = "reset_profile"
SERVICE_RESET_LOGS = "reset_logs"
SERVICE_RESET_LOCAL_DATA = "reset_local_data"
SERVICE_RESET_REMOTE_DATA = "reset_remote_data"
SERVICE_RESET_ALL_DATA = "reset_all_data"

SERVICES = [
    SERVICE_SETUP_PROFILE,
    SERVICE_LOG_DAILY_ENTRY,
    SERVICE_UPDATE_DAILY_GOALS,
    SERVICE_UPDATE_WEIGHT_GOAL,
    SERVICE_UPDATE_SETTINGS,
    SERVICE_ADD_CUSTOM_REWARD,
    SERVICE_DELETE_CUSTOM_REWARD,
    SERVICE_CLAIM_MILESTONE,
    SERVICE_FORCE_SYNC,
    SERVICE_EXPORT_DATA,
    SERVICE_IMPORT_DATA,
    SERVICE_GET_APP_STATS,
    SERVICE_RESET_STREAKS,
    SERVICE_CLEAR_DAILY_LOG,
    SERVICE_RESET_PROFILE,
    SERVICE_RESET_LOGS,
    SERVICE_RESET_LOCAL_DATA,
    SERVICE_RESET_REMOTE_DATA,
    SERVICE_RESET_ALL_DATA,
]

# Service fields
FIELD_STARTING_WEIGHT = "starting_weight"
FIELD_GOAL_WEIGHT = "goal_weight"
FIELD_DAILY_STEPS = "daily_steps"
FIELD_DAILY_EXERCISE = "daily_exercise"
FIELD_DAILY_WATER = "daily_water"
FIELD_DATE = "date"
FIELD_WEIGHT = "weight"
FIELD_STEPS = "steps"
FIELD_EXERCISE_MINUTES = "exercise_minutes"
FIELD_EXERCISE_TYPES = "exercise_types"
FIELD_WATER = "water"
FIELD_WELLNESS_ITEMS = "wellness_items"
FIELD_CONFIRMED = "confirmed"
FIELD_UNIT = "unit"
FIELD_REWARD_TYPE = "reward_type"
FIELD_DESCRIPTION = "description"
FIELD_STREAK_DAYS = "streak_days"
FIELD_WEIGHT_LOSS = "weight_loss"
FIELD_INDEX = "index"
FIELD_MILESTONE_TYPE = "milestone_type"
FIELD_VALUE = "value"
FIELD_JSON_DATA = "json_data"
FIELD_FILE_PATH = "file_path"
FIELD_EXPORT_TYPE = "export_type"
FIELD_THEME_PREFERENCE = "theme_preference"
FIELD_WEIGHT_UNIT = "weight_unit"
FIELD_DATE_FORMAT = "date_format"
FIELD_WEEK_START = "week_start"
FIELD_ALLOW_PARTIAL_STEPS = "allow_partial_steps"
FIELD_ALLOW_PARTIAL_EXERCISE = "allow_partial_exercise"
FIELD_STRICT_WELLNESS = "strict_wellness"

# Service field -> settings key
SETTINGS_FIELD_MAP = {
    FIELD_THEME_PREFERENCE: DATA_SETTINGS_THEME_PREFERENCE,
    FIELD_WEIGHT_UNIT: DATA_SETTINGS_WEIGHT_UNIT,
    FIELD_DATE_FORMAT: DATA_SETTINGS_DATE_FORMAT,
    FIELD_WEEK_START: DATA_SETTINGS_WEEK_START,
    FIELD_ALLOW_PARTIAL_STEPS: DATA_SETTINGS_ALLOW_PARTIAL_STEPS,
    FIELD_ALLOW_PARTIAL_EXERCISE: DATA_SETTINGS_ALLOW_PARTIAL_EXERCISE,
    FIELD_STRICT_WELLNESS: DATA_SETTINGS_STRICT_WELLNESS,
}

# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_DOMAIN = "persistent_notification"
NOTIFY_SERVICE_CREATE = "create"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_NOTIFICATION_ID = "notification_id"

NOTIFICATION_ID_FRESH_START = "fitstreak_fresh_start"
NOTIFICATION_ID_OFFLINE = "fitstreak_offline"
NOTIFICATION_ID_ACHIEVEMENT = "fitstreak_achievement"

TITLE_FRESH_START = "FitStreak data reset"
MSG_FRESH_START = (
    "Stored FitStreak data could not be read and was replaced with a fresh start."
)
TITLE_SYNC_OFFLINE = "FitStreak sync offline"
MSG_SYNC_OFFLINE = (
    "Sync failed after multiple attempts. Data saved locally and will sync "
    "when connection is restored."
)
TITLE_ACHIEVEMENT_UNLOCKED = "Achievement Unlocked"
MSG_NO_ENTRY_FOUND = "No FitStreak entry found"
MSG_NO_PROFILE = "No profile has been set up yet"
MSG_NO_REMOTE = "No remote backend is configured"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_KEY_STREAK_PREFIX = "streak_"
SENSOR_KEY_CURRENT_WEIGHT = "current_weight"
SENSOR_KEY_PENDING_SYNCS = "pending_syncs"
SENSOR_KEY_SYNC_STATUS = "sync_status"

ATTR_STARTING_WEIGHT = "starting_weight"
ATTR_GOAL_WEIGHT = "goal_weight"
ATTR_WEIGHT_LOST = "weight_lost"
ATTR_WEIGHT_REMAINING = "weight_remaining"
ATTR_LAST_LOG_DATE = "last_log_date"
ATTR_WEEKLY_WEIGHT = "weekly_weight"
ATTR_LAST_SYNC = "last_sync"
ATTR_RETRY_COUNT = "retry_count"
ATTR_CONNECTED = "connected"
ATTR_LONGEST_STREAK = "longest_streak"

UNIT_DAYS = "days"
UNIT_ITEMS = "items"

ICON_STREAK = "mdi:fire"
ICON_CURRENT_WEIGHT = "mdi:scale-bathroom"
ICON_PENDING_SYNCS = "mdi:cloud-upload-outline"
ICON_SYNC_STATUS = "mdi:cloud-sync-outline"

DEVICE_MANUFACTURER = "FitStreak"
DEVICE_MODEL = "Habit Tracker"
