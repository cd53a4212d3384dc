# File: config_flow.py
"""Config flow for the FitStreak integration.

The user picks a storage backend. Local-only needs nothing else; Firebase and
JSONBin ask for credentials, check their format and test the connection
before the entry is created.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import selector
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .options_flow import FitStreakOptionsFlowHandler
from .remote import RemoteStoreError, create_remote_store
from .remote.firebase import validate_api_key, validate_database_url
from .remote.jsonbin import validate_bin_id

# pylint: disable=abstract-method


class FitStreakConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for FitStreak."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._data: dict[str, Any] = {}

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Choose where tracker data is synced."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.ABORT_SINGLE_INSTANCE)

        if user_input is not None:
            backend = user_input[const.CONF_BACKEND]
            self._data = {const.CONF_BACKEND: backend}
            if backend == const.BACKEND_FIREBASE:
                return await self.async_step_firebase()
            if backend == const.BACKEND_JSONBIN:
                return await self.async_step_jsonbin()
            return self._create_entry()

        schema = vol.Schema(
            {
                vol.Required(
                    const.CONF_BACKEND, default=const.BACKEND_LOCAL
                ): selector.SelectSelector(
                    selector.SelectSelectorConfig(
                        options=const.BACKEND_OPTIONS,
                        mode=selector.SelectSelectorMode.LIST,
                        translation_key=const.CONF_BACKEND,
                    )
                ),
            }
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER, data_schema=schema
        )

    # --------------------------------------------------------------------------
    # FIREBASE
    # --------------------------------------------------------------------------
    async def async_step_firebase(self, user_input: dict[str, Any] | None = None):
        """Collect Firebase Realtime Database credentials."""
        errors: dict[str, str] = {}

        if user_input is not None:
            if validate_database_url(user_input[const.CONF_DATABASE_URL]):
                errors[const.CONF_DATABASE_URL] = const.ERROR_INVALID_DATABASE_URL
            if validate_api_key(user_input[const.CONF_API_KEY]):
                errors[const.CONF_API_KEY] = const.ERROR_INVALID_API_KEY

            if not errors:
                candidate = {
                    **self._data,
                    const.CONF_DATABASE_URL: user_input[const.CONF_DATABASE_URL].strip(),
                    const.CONF_API_KEY: user_input[const.CONF_API_KEY].strip(),
                    const.CONF_USER_ID: user_input[const.CONF_USER_ID].strip(),
                }
                if await self._async_test_connection(candidate):
                    self._data = candidate
                    return self._create_entry()
                errors["base"] = const.ERROR_CANNOT_CONNECT

        schema = vol.Schema(
            {
                vol.Required(const.CONF_DATABASE_URL): str,
                vol.Required(const.CONF_API_KEY): str,
                vol.Optional(const.CONF_USER_ID, default=const.DEFAULT_USER_ID): str,
            }
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_FIREBASE,
            data_schema=self.add_suggested_values_to_schema(schema, user_input),
            errors=errors,
        )

    # --------------------------------------------------------------------------
    # JSONBIN
    # --------------------------------------------------------------------------
    async def async_step_jsonbin(self, user_input: dict[str, Any] | None = None):
        """Collect JSONBin credentials."""
        errors: dict[str, str] = {}

        if user_input is not None:
            if validate_bin_id(user_input[const.CONF_BIN_ID]):
                errors[const.CONF_BIN_ID] = const.ERROR_INVALID_BIN_ID
            if not user_input[const.CONF_API_KEY].strip():
                errors[const.CONF_API_KEY] = const.ERROR_INVALID_API_KEY

            if not errors:
                candidate = {
                    **self._data,
                    const.CONF_BIN_ID: user_input[const.CONF_BIN_ID].strip(),
                    const.CONF_API_KEY: user_input[const.CONF_API_KEY].strip(),
                    const.CONF_USER_ID: user_input[const.CONF_USER_ID].strip(),
                }
                if await self._async_test_connection(candidate):
                    self._data = candidate
                    return self._create_entry()
                errors["base"] = const.ERROR_CANNOT_CONNECT

        schema = vol.Schema(
            {
                vol.Required(const.CONF_BIN_ID): str,
                vol.Required(const.CONF_API_KEY): str,
                vol.Optional(const.CONF_USER_ID, default=const.DEFAULT_USER_ID): str,
            }
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_JSONBIN,
            data_schema=self.add_suggested_values_to_schema(schema, user_input),
            errors=errors,
        )

    # --------------------------------------------------------------------------
    # HELPERS
    # --------------------------------------------------------------------------
    async def _async_test_connection(self, config: dict[str, Any]) -> bool:
        """Return True when the remote store answers a read."""
        remote_store = create_remote_store(async_get_clientsession(self.hass), config)
        if remote_store is None:
            return True
        try:
            await remote_store.fetch_all(const.REMOTE_ENTITY_USERS)
        except RemoteStoreError as err:
            const.LOGGER.warning(
                "WARNING: Config Flow connection test failed for %s: %s",
                config[const.CONF_BACKEND],
                err,
            )
            return False
        return True

    def _create_entry(self):
        """Finalize the config entry with backend data and default options."""
        const.LOGGER.info(
            "INFO: Creating FitStreak entry with backend: %s",
            self._data[const.CONF_BACKEND],
        )
        return self.async_create_entry(
            title=const.FITSTREAK_TITLE,
            data=self._data,
            options={
                const.CONF_AUTO_SYNC: const.DEFAULT_AUTO_SYNC,
                const.CONF_SYNC_NOTIFICATIONS: const.DEFAULT_SYNC_NOTIFICATIONS,
            },
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return FitStreakOptionsFlowHandler(config_entry)
