# File: options_flow.py
"""Options Flow for the FitStreak integration.

Auto-sync and sync notifications are the only runtime options. Saving them
reloads the entry so the SyncManager picks up the new values.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from . import const


class FitStreakOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for sync behaviour."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and save the sync options."""
        self._entry_options = dict(self.config_entry.options)

        if user_input is not None:
            self._entry_options.update(user_input)
            const.LOGGER.debug(
                "DEBUG: Options Flow saving sync options: %s", self._entry_options
            )
            return self.async_create_entry(title="", data=self._entry_options)

        schema = vol.Schema(
            {
                vol.Required(
                    const.CONF_AUTO_SYNC,
                    default=self._entry_options.get(
                        const.CONF_AUTO_SYNC, const.DEFAULT_AUTO_SYNC
                    ),
                ): bool,
                vol.Required(
                    const.CONF_SYNC_NOTIFICATIONS,
                    default=self._entry_options.get(
                        const.CONF_SYNC_NOTIFICATIONS,
                        const.DEFAULT_SYNC_NOTIFICATIONS,
                    ),
                ): bool,
            }
        )
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT, data_schema=schema
        )
