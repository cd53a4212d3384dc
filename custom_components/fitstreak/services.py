# File: services.py
"""Defines custom services for the FitStreak integration.

These services expose every tracker operation to scripts, automations and
dashboards: profile setup, daily logging, goals, settings, rewards, claims,
sync, import/export, statistics and resets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.util import dt as dt_util

from . import const
from .engines import ConfirmationRequiredError, ValidationError
from .helpers import backup_helpers
from .helpers.entity_helpers import get_first_fitstreak_entry
from .remote import RemoteStoreError

if TYPE_CHECKING:
    from .coordinator import FitStreakDataCoordinator

# --- Service Schemas ---
SETUP_PROFILE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_STARTING_WEIGHT): vol.Coerce(float),
        vol.Required(const.FIELD_GOAL_WEIGHT): vol.Coerce(float),
        vol.Required(const.FIELD_DAILY_STEPS): vol.Coerce(int),
        vol.Required(const.FIELD_DAILY_EXERCISE): vol.Coerce(int),
        vol.Required(const.FIELD_DAILY_WATER): vol.Coerce(float),
    }
)

LOG_DAILY_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_DATE): cv.date,
        vol.Optional(const.FIELD_WEIGHT): vol.Any(None, vol.Coerce(float)),
        vol.Optional(const.FIELD_STEPS, default=0): vol.Coerce(int),
        vol.Optional(const.FIELD_EXERCISE_MINUTES, default=0): vol.Coerce(int),
        vol.Optional(const.FIELD_EXERCISE_TYPES, default=[]): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_WATER, default=0): vol.Coerce(float),
        vol.Optional(const.FIELD_WELLNESS_ITEMS, default=[]): vol.All(
            cv.ensure_list, [cv.string]
        ),
        vol.Optional(const.FIELD_CONFIRMED, default=False): cv.boolean,
    }
)

UPDATE_DAILY_GOALS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DAILY_STEPS): vol.Coerce(int),
        vol.Required(const.FIELD_DAILY_EXERCISE): vol.Coerce(int),
        vol.Required(const.FIELD_DAILY_WATER): vol.Coerce(float),
    }
)

UPDATE_WEIGHT_GOAL_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_GOAL_WEIGHT): vol.Coerce(float),
        vol.Optional(const.FIELD_UNIT): vol.In(const.WEIGHT_UNITS),
    }
)

UPDATE_SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_THEME_PREFERENCE): vol.In(const.THEME_OPTIONS),
        vol.Optional(const.FIELD_WEIGHT_UNIT): vol.In(const.WEIGHT_UNITS),
        vol.Optional(const.FIELD_DATE_FORMAT): vol.In(const.DATE_FORMAT_OPTIONS),
        vol.Optional(const.FIELD_WEEK_START): vol.In(const.WEEK_START_OPTIONS),
        vol.Optional(const.FIELD_ALLOW_PARTIAL_STEPS): cv.boolean,
        vol.Optional(const.FIELD_ALLOW_PARTIAL_EXERCISE): cv.boolean,
        vol.Optional(const.FIELD_STRICT_WELLNESS): cv.boolean,
    }
)

ADD_CUSTOM_REWARD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_REWARD_TYPE): vol.In(const.REWARD_TYPES),
        vol.Required(const.FIELD_DESCRIPTION): cv.string,
        vol.Optional(const.FIELD_STREAK_DAYS): vol.Coerce(int),
        vol.Optional(const.FIELD_WEIGHT_LOSS): vol.Coerce(float),
    }
)

DELETE_CUSTOM_REWARD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_INDEX): vol.All(vol.Coerce(int), vol.Range(min=0)),
    }
)

CLAIM_MILESTONE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_MILESTONE_TYPE): vol.In(const.MILESTONE_TYPES),
        vol.Required(const.FIELD_VALUE): vol.Coerce(float),
    }
)

EXPORT_DATA_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_EXPORT_TYPE, default=const.EXPORT_TYPE_LOCAL): vol.In(
            [const.EXPORT_TYPE_LOCAL, const.EXPORT_TYPE_REMOTE]
        ),
    }
)

IMPORT_DATA_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Exclusive(const.FIELD_JSON_DATA, "source"): cv.string,
            vol.Exclusive(const.FIELD_FILE_PATH, "source"): cv.string,
        }
    ),
    cv.has_at_least_one_key(const.FIELD_JSON_DATA, const.FIELD_FILE_PATH),
)

CLEAR_DAILY_LOG_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_DATE): cv.date,
    }
)

EMPTY_SCHEMA = vol.Schema({})


def _get_coordinator(hass: HomeAssistant, label: str) -> FitStreakDataCoordinator:
    """Return the coordinator of the first entry or raise."""
    entry_id = get_first_fitstreak_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s: %s", label, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(const.MSG_NO_ENTRY_FOUND)
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def _raise_for(label: str, err: Exception) -> NoReturn:
    """Translate a domain error into HomeAssistantError."""
    if isinstance(err, ConfirmationRequiredError):
        const.LOGGER.info("INFO: %s: confirmation required: %s", label, err)
        raise HomeAssistantError(
            f"{err} Call again with {const.FIELD_CONFIRMED}: true to save anyway."
        ) from err
    const.LOGGER.warning("WARNING: %s: %s", label, err)
    raise HomeAssistantError(str(err)) from err


def async_setup_services(hass: HomeAssistant) -> None:
    """Register FitStreak services."""

    # ---------------------------------------------------------------------
    # Profile, Logging and Settings
    # ---------------------------------------------------------------------

    async def handle_setup_profile(call: ServiceCall) -> None:
        """Handle creating the profile."""
        coordinator = _get_coordinator(hass, "Setup Profile")
        try:
            coordinator.tracker_manager.setup_profile(
                starting_weight=call.data[const.FIELD_STARTING_WEIGHT],
                goal_weight=call.data[const.FIELD_GOAL_WEIGHT],
                daily_steps=call.data[const.FIELD_DAILY_STEPS],
                daily_exercise=call.data[const.FIELD_DAILY_EXERCISE],
                daily_water=call.data[const.FIELD_DAILY_WATER],
            )
        except ValidationError as err:
            _raise_for("Setup Profile", err)

    async def handle_log_daily_entry(call: ServiceCall) -> None:
        """Handle logging one day of activity."""
        coordinator = _get_coordinator(hass, "Log Daily Entry")
        log_date = call.data.get(const.FIELD_DATE)
        try:
            coordinator.tracker_manager.log_daily_entry(
                date=log_date.isoformat() if log_date else None,
                weight=call.data.get(const.FIELD_WEIGHT),
                steps=call.data[const.FIELD_STEPS],
                exercise_minutes=call.data[const.FIELD_EXERCISE_MINUTES],
                exercise_types=call.data[const.FIELD_EXERCISE_TYPES],
                water=call.data[const.FIELD_WATER],
                wellness_items=call.data[const.FIELD_WELLNESS_ITEMS],
                confirmed=call.data[const.FIELD_CONFIRMED],
            )
        except (ValidationError, ConfirmationRequiredError) as err:
            _raise_for("Log Daily Entry", err)

    async def handle_update_daily_goals(call: ServiceCall) -> None:
        """Handle updating the daily targets."""
        coordinator = _get_coordinator(hass, "Update Daily Goals")
        try:
            coordinator.tracker_manager.update_daily_goals(
                call.data[const.FIELD_DAILY_STEPS],
                call.data[const.FIELD_DAILY_EXERCISE],
                call.data[const.FIELD_DAILY_WATER],
            )
        except ValidationError as err:
            _raise_for("Update Daily Goals", err)

    async def handle_update_weight_goal(call: ServiceCall) -> None:
        """Handle updating the goal weight."""
        coordinator = _get_coordinator(hass, "Update Weight Goal")
        try:
            coordinator.tracker_manager.update_weight_goal(
                call.data[const.FIELD_GOAL_WEIGHT], call.data.get(const.FIELD_UNIT)
            )
        except ValidationError as err:
            _raise_for("Update Weight Goal", err)

    async def handle_update_settings(call: ServiceCall) -> None:
        """Handle a partial settings update."""
        coordinator = _get_coordinator(hass, "Update Settings")
        changes = {
            const.SETTINGS_FIELD_MAP[field]: value
            for field, value in call.data.items()
            if field in const.SETTINGS_FIELD_MAP
        }
        try:
            coordinator.tracker_manager.update_settings(changes)
        except ValidationError as err:
            _raise_for("Update Settings", err)

    # ---------------------------------------------------------------------
    # Rewards and Milestones
    # ---------------------------------------------------------------------

    async def handle_add_custom_reward(call: ServiceCall) -> None:
        """Handle creating a custom reward."""
        coordinator = _get_coordinator(hass, "Add Custom Reward")
        try:
            coordinator.reward_manager.add_custom_reward(
                call.data[const.FIELD_REWARD_TYPE],
                call.data[const.FIELD_DESCRIPTION],
                streak_days=call.data.get(const.FIELD_STREAK_DAYS),
                weight_loss=call.data.get(const.FIELD_WEIGHT_LOSS),
            )
        except ValidationError as err:
            _raise_for("Add Custom Reward", err)

    async def handle_delete_custom_reward(call: ServiceCall) -> None:
        """Handle deleting a custom reward by position."""
        coordinator = _get_coordinator(hass, "Delete Custom Reward")
        try:
            coordinator.reward_manager.delete_custom_reward(
                call.data[const.FIELD_INDEX]
            )
        except IndexError as err:
            _raise_for("Delete Custom Reward", err)

    async def handle_claim_milestone(call: ServiceCall) -> None:
        """Handle claiming a milestone.

        Claiming an unachieved or already-claimed milestone does nothing.
        """
        coordinator = _get_coordinator(hass, "Claim Milestone")
        coordinator.reward_manager.claim(
            call.data[const.FIELD_MILESTONE_TYPE], call.data[const.FIELD_VALUE]
        )

    # ---------------------------------------------------------------------
    # Sync, Import/Export and Statistics
    # ---------------------------------------------------------------------

    async def handle_force_sync(call: ServiceCall) -> None:
        """Handle a manual sync."""
        coordinator = _get_coordinator(hass, "Force Sync")
        sync_manager = coordinator.sync_manager
        if not sync_manager.has_remote:
            raise HomeAssistantError(const.MSG_NO_REMOTE)
        if not await sync_manager.async_force_sync():
            raise HomeAssistantError(
                "Sync failed. Changes are kept locally and will sync later."
            )

    async def handle_export_data(call: ServiceCall) -> dict[str, Any]:
        """Handle exporting local or remote data to a JSON file."""
        coordinator = _get_coordinator(hass, "Export Data")
        export_type = call.data[const.FIELD_EXPORT_TYPE]

        if export_type == const.EXPORT_TYPE_REMOTE:
            try:
                source = await coordinator.sync_manager.async_fetch_remote_record()
            except RemoteStoreError as err:
                _raise_for("Export Data", err)
            if source is None:
                raise HomeAssistantError("No remote data found to export")
        else:
            source = coordinator._data

        document = backup_helpers.build_export_document(
            source, export_type, dt_util.utcnow().isoformat()
        )
        path = await backup_helpers.async_write_export_file(
            hass, coordinator.store, document
        )
        if path is None:
            raise HomeAssistantError("Failed to write export file")
        return {const.FIELD_FILE_PATH: path, "document": document}

    async def handle_import_data(call: ServiceCall) -> None:
        """Handle importing a previously exported document."""
        coordinator = _get_coordinator(hass, "Import Data")
        try:
            if const.FIELD_FILE_PATH in call.data:
                document = await backup_helpers.async_read_import_file(
                    hass, call.data[const.FIELD_FILE_PATH]
                )
            else:
                document = backup_helpers.parse_import_json(
                    call.data[const.FIELD_JSON_DATA]
                )
            coordinator.tracker_manager.import_data(document)
        except ValidationError as err:
            _raise_for("Import Data", err)

    async def handle_get_app_stats(call: ServiceCall) -> dict[str, Any]:
        """Handle returning application statistics."""
        coordinator = _get_coordinator(hass, "Get App Stats")
        return dict(coordinator.tracker_manager.get_app_stats())

    # ---------------------------------------------------------------------
    # Resets
    # ---------------------------------------------------------------------

    async def handle_reset_streaks(call: ServiceCall) -> None:
        """Handle resetting all streak counters."""
        _get_coordinator(hass, "Reset Streaks").tracker_manager.reset_streaks()

    async def handle_clear_daily_log(call: ServiceCall) -> None:
        """Handle clearing one day's log (default today)."""
        coordinator = _get_coordinator(hass, "Clear Daily Log")
        log_date = call.data.get(const.FIELD_DATE)
        coordinator.tracker_manager.clear_daily_log(
            log_date.isoformat() if log_date else None
        )

    async def handle_reset_profile(call: ServiceCall) -> None:
        """Handle removing the profile (logs kept)."""
        _get_coordinator(hass, "Reset Profile").tracker_manager.reset_profile()

    async def handle_reset_logs(call: ServiceCall) -> None:
        """Handle removing logs, streaks and achievements."""
        _get_coordinator(hass, "Reset Logs").tracker_manager.reset_logs()

    async def handle_reset_local_data(call: ServiceCall) -> None:
        """Handle clearing local tracker data."""
        _get_coordinator(hass, "Reset Local Data").tracker_manager.reset_local_data()

    async def handle_reset_remote_data(call: ServiceCall) -> None:
        """Handle deleting the remote user record."""
        coordinator = _get_coordinator(hass, "Reset Remote Data")
        if not coordinator.sync_manager.has_remote:
            raise HomeAssistantError(const.MSG_NO_REMOTE)
        if not await coordinator.sync_manager.async_reset_remote_data():
            raise HomeAssistantError("Failed to delete remote data")

    async def handle_reset_all_data(call: ServiceCall) -> None:
        """Handle resetting local and remote data."""
        coordinator = _get_coordinator(hass, "Reset All Data")
        await coordinator.sync_manager.async_reset_all_data()

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SETUP_PROFILE,
        handle_setup_profile,
        schema=SETUP_PROFILE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_DAILY_ENTRY,
        handle_log_daily_entry,
        schema=LOG_DAILY_ENTRY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_DAILY_GOALS,
        handle_update_daily_goals,
        schema=UPDATE_DAILY_GOALS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_WEIGHT_GOAL,
        handle_update_weight_goal,
        schema=UPDATE_WEIGHT_GOAL_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_SETTINGS,
        handle_update_settings,
        schema=UPDATE_SETTINGS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_CUSTOM_REWARD,
        handle_add_custom_reward,
        schema=ADD_CUSTOM_REWARD_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_DELETE_CUSTOM_REWARD,
        handle_delete_custom_reward,
        schema=DELETE_CUSTOM_REWARD_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CLAIM_MILESTONE,
        handle_claim_milestone,
        schema=CLAIM_MILESTONE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_FORCE_SYNC,
        handle_force_sync,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EXPORT_DATA,
        handle_export_data,
        schema=EXPORT_DATA_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_IMPORT_DATA,
        handle_import_data,
        schema=IMPORT_DATA_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_APP_STATS,
        handle_get_app_stats,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_STREAKS,
        handle_reset_streaks,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CLEAR_DAILY_LOG,
        handle_clear_daily_log,
        schema=CLEAR_DAILY_LOG_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_PROFILE,
        handle_reset_profile,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_LOGS,
        handle_reset_logs,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_LOCAL_DATA,
        handle_reset_local_data,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_REMOTE_DATA,
        handle_reset_remote_data,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_ALL_DATA,
        handle_reset_all_data,
        schema=EMPTY_SCHEMA,
    )

    const.LOGGER.info("INFO: FitStreak services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister FitStreak services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: FitStreak services have been unregistered")
