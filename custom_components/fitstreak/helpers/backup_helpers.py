"""Export and import utilities for FitStreak.

Export documents carry the tracker entities plus `exportDate`, `exportType`
and `version`. Import accepts the same shape and is validated as a whole
before anything is applied.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from homeassistant.util import dt as dt_util

from .. import const
from ..engines import StreakTracker, ValidationError, ValidationRules

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..store import FitStreakStore

# Optional import keys and the container type each must have when present
_IMPORT_CONTAINERS: dict[str, type] = {
    const.DATA_DAILY_LOGS: dict,
    const.DATA_STREAKS: dict,
    const.DATA_CUSTOM_REWARDS: list,
    const.DATA_ACHIEVEMENTS: list,
    const.DATA_SETTINGS: dict,
}


def _read_text_file(path: str) -> str:
    """Read a UTF-8 text file from disk.

    This helper is used with hass.async_add_executor_job in async contexts.
    """
    return Path(path).read_text(encoding="utf-8")


def _write_text_file(path: str, content: str) -> None:
    """Write UTF-8 text content to disk.

    This helper is used with hass.async_add_executor_job in async contexts.
    """
    Path(path).write_text(content, encoding="utf-8")


def build_export_document(
    data: dict[str, Any], export_type: str, exported_at: str
) -> dict[str, Any]:
    """Build an export document from local state or a remote user record.

    A remote record stores the profile under `profile`; it is exported
    under `user` so both export types share one shape.
    """
    user = data.get(const.DATA_USER)
    if user is None:
        user = data.get(const.REMOTE_PROFILE)
    return copy.deepcopy(
        {
            const.DATA_USER: user,
            const.DATA_DAILY_LOGS: data.get(const.DATA_DAILY_LOGS) or {},
            const.DATA_STREAKS: data.get(const.DATA_STREAKS)
            or StreakTracker.initial_state(),
            const.DATA_CUSTOM_REWARDS: data.get(const.DATA_CUSTOM_REWARDS) or [],
            const.DATA_ACHIEVEMENTS: data.get(const.DATA_ACHIEVEMENTS) or [],
            const.DATA_SETTINGS: data.get(const.DATA_SETTINGS)
            or dict(const.DEFAULT_SETTINGS),
            const.EXPORT_DATE: exported_at,
            const.EXPORT_TYPE: export_type,
            const.EXPORT_VERSION: const.DOCUMENT_VERSION,
        }
    )


def parse_import_json(json_str: str) -> dict[str, Any]:
    """Decode import text and validate it as a whole.

    Raises:
        ValidationError: malformed JSON or an invalid document
    """
    try:
        document = json.loads(json_str)
    except (TypeError, ValueError) as err:
        raise ValidationError(
            const.FIELD_JSON_DATA, None, f"Import file is not valid JSON: {err}"
        ) from err
    validate_import_document(document)
    return document


def validate_import_document(document: Any) -> None:
    """Reject a document that cannot be imported in full.

    `user` must hold numeric startingWeight, goalWeight, dailySteps,
    dailyExercise and dailyWater. Optional entity keys must have their
    expected container type when present.

    Raises:
        ValidationError: describing the first problem found
    """
    if not isinstance(document, dict):
        raise ValidationError(
            const.FIELD_JSON_DATA, None, "Import file must contain a JSON object"
        )
    user = document.get(const.DATA_USER)
    if not isinstance(user, dict):
        raise ValidationError(
            const.DATA_USER, user, "Invalid data format: missing user profile"
        )
    for field in const.IMPORT_REQUIRED_USER_FIELDS:
        if field not in user:
            raise ValidationError(
                field, None, f"Invalid data format: user.{field} is missing"
            )
        try:
            ValidationRules.require_number(field, user[field])
        except ValidationError as err:
            raise ValidationError(
                field, user[field], f"Invalid data format: user.{field} must be numeric"
            ) from err

    for key, expected in _IMPORT_CONTAINERS.items():
        value = document.get(key)
        if value is not None and not isinstance(value, expected):
            raise ValidationError(
                key, value, f"Invalid data format: {key} has the wrong type"
            )


def apply_import(data: dict[str, Any], document: dict[str, Any]) -> None:
    """Replace the tracker entities in `data` with a validated import document.

    Entities absent from the document fall back to empty defaults. The sync
    queue and sync state are left as they are.
    """
    user = copy.deepcopy(document[const.DATA_USER])
    user.setdefault(
        const.DATA_USER_CURRENT_WEIGHT, user[const.DATA_USER_STARTING_WEIGHT]
    )
    data[const.DATA_USER] = user
    data[const.DATA_DAILY_LOGS] = copy.deepcopy(document.get(const.DATA_DAILY_LOGS) or {})
    data[const.DATA_STREAKS] = {
        **StreakTracker.initial_state(),
        **copy.deepcopy(document.get(const.DATA_STREAKS) or {}),
    }
    data[const.DATA_CUSTOM_REWARDS] = copy.deepcopy(
        document.get(const.DATA_CUSTOM_REWARDS) or []
    )
    data[const.DATA_ACHIEVEMENTS] = copy.deepcopy(
        document.get(const.DATA_ACHIEVEMENTS) or []
    )
    data[const.DATA_SETTINGS] = {
        **const.DEFAULT_SETTINGS,
        **copy.deepcopy(document.get(const.DATA_SETTINGS) or {}),
    }


async def async_write_export_file(
    hass: HomeAssistant, store: FitStreakStore, document: dict[str, Any]
) -> str | None:
    """Write an export document next to the storage file.

    File naming format: fitstreak_export_YYYY-MM-DD_HH-MM-SS_<type>.json

    Returns:
        Full path of the written file, or None if writing failed.
    """
    timestamp = dt_util.utcnow().strftime("%Y-%m-%d_%H-%M-%S")
    filename = (
        f"{const.EXPORT_FILE_PREFIX}_{timestamp}_{document[const.EXPORT_TYPE]}.json"
    )
    storage_dir = os.path.dirname(store.get_storage_path())
    path = os.path.join(storage_dir, filename)
    try:
        await hass.async_add_executor_job(
            lambda: os.makedirs(storage_dir, exist_ok=True)
        )
        await hass.async_add_executor_job(
            _write_text_file, path, json.dumps(document, indent=2)
        )
    except (OSError, TypeError, ValueError) as ex:
        const.LOGGER.error("ERROR: Failed to write export file %s: %s", path, ex)
        return None

    const.LOGGER.info("INFO: Exported FitStreak data to %s", path)
    return path


async def async_read_import_file(hass: HomeAssistant, path: str) -> dict[str, Any]:
    """Read and validate an import document from disk.

    Raises:
        ValidationError: unreadable file or invalid document
    """
    try:
        json_str = await hass.async_add_executor_job(_read_text_file, path)
    except OSError as err:
        raise ValidationError(
            const.FIELD_FILE_PATH, path, f"Cannot read import file: {err}"
        ) from err
    return parse_import_json(json_str)
