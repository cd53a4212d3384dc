"""Builders for profile, log and streak fixtures."""

from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from custom_components.fitstreak import const
from custom_components.fitstreak.coordinator import FitStreakDataCoordinator

PROFILE_DEFAULTS: dict[str, Any] = {
    const.FIELD_STARTING_WEIGHT: 220,
    const.FIELD_GOAL_WEIGHT: 180,
    const.FIELD_DAILY_STEPS: 8000,
    const.FIELD_DAILY_EXERCISE: 30,
    const.FIELD_DAILY_WATER: 2.5,
}


def make_profile(**overrides: Any) -> dict[str, Any]:
    """Return a stored profile dict."""
    profile = {
        const.DATA_USER_STARTING_WEIGHT: 220,
        const.DATA_USER_CURRENT_WEIGHT: 220,
        const.DATA_USER_GOAL_WEIGHT: 180,
        const.DATA_USER_DAILY_STEPS: 8000,
        const.DATA_USER_DAILY_EXERCISE: 30,
        const.DATA_USER_DAILY_WATER: 2.5,
        const.DATA_USER_SETUP_DATE: "2024-03-01T08:00:00+00:00",
        const.DATA_USER_LAST_WEIGHT_UPDATE: "2024-03-01T08:00:00+00:00",
    }
    profile.update(overrides)
    return profile


def make_log_entry(date: str, **overrides: Any) -> dict[str, Any]:
    """Return a daily log entry meeting every default goal."""
    entry = {
        const.DATA_LOG_DATE: date,
        const.DATA_LOG_WEIGHT: 218,
        const.DATA_LOG_STEPS: 9000,
        const.DATA_LOG_EXERCISE_MINUTES: 40,
        const.DATA_LOG_EXERCISE_TYPES: ["walking"],
        const.DATA_LOG_WATER: 3.0,
        const.DATA_LOG_WELLNESS_SCORE: 3,
        const.DATA_LOG_WELLNESS_ITEMS: ["sleep", "meditation", "stretching"],
        const.DATA_LOG_TIMESTAMP: f"{date}T20:00:00+00:00",
    }
    entry.update(overrides)
    return entry


def make_streaks(**overrides: Any) -> dict[str, Any]:
    """Return a streak state with zero counters."""
    streaks = {
        const.DATA_STREAK_OVERALL: 0,
        const.DATA_STREAK_STEPS: 0,
        const.DATA_STREAK_EXERCISE: 0,
        const.DATA_STREAK_WATER: 0,
        const.DATA_STREAK_WELLNESS: 0,
        const.DATA_STREAK_LAST_LOG_DATE: None,
        const.DATA_STREAK_WEEKLY_WEIGHT: False,
        const.DATA_STREAK_LAST_WEIGHT_DATE: None,
    }
    streaks.update(overrides)
    return streaks


async def setup_profile(hass: HomeAssistant, **overrides: Any) -> None:
    """Create the profile through the setup_profile service."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_SETUP_PROFILE,
        {**PROFILE_DEFAULTS, **overrides},
        blocking=True,
    )
    await hass.async_block_till_done()


def get_coordinator(
    hass: HomeAssistant, entry: ConfigEntry
) -> FitStreakDataCoordinator:
    """Return the coordinator of a loaded entry."""
    return hass.data[const.DOMAIN][entry.entry_id][const.COORDINATOR]
