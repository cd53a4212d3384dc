"""Tests for the FitStreak config flow and options flow."""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=unused-argument  # Some fixtures needed for setup only

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.fitstreak import const
from tests.helpers import InMemoryRemoteStore

VALID_DATABASE_URL = "https://fitstreak-test-default-rtdb.firebaseio.com/"
VALID_API_KEY = "AIzaSyA1234567890abcdefghijklmnopqrstu"
VALID_BIN_ID = "65f1c2a3dc74654018b2e7d9"

SETUP_ENTRY_PATH = "custom_components.fitstreak.async_setup_entry"
REMOTE_FACTORY_PATH = "custom_components.fitstreak.config_flow.create_remote_store"


async def _start_flow(hass: HomeAssistant, backend: str):
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.CONFIG_FLOW_STEP_USER
    return await hass.config_entries.flow.async_configure(
        result.get("flow_id"), user_input={const.CONF_BACKEND: backend}
    )


async def test_local_backend_creates_entry(hass: HomeAssistant) -> None:
    """Local-only needs no further input."""
    with patch(SETUP_ENTRY_PATH, return_value=True):
        result = await _start_flow(hass, const.BACKEND_LOCAL)

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == const.FITSTREAK_TITLE
    assert result.get("data") == {const.CONF_BACKEND: const.BACKEND_LOCAL}
    assert result.get("options") == {
        const.CONF_AUTO_SYNC: True,
        const.CONF_SYNC_NOTIFICATIONS: True,
    }


async def test_firebase_backend_success(hass: HomeAssistant) -> None:
    """Valid Firebase credentials that answer a read create the entry."""
    result = await _start_flow(hass, const.BACKEND_FIREBASE)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.CONFIG_FLOW_STEP_FIREBASE

    with (
        patch(REMOTE_FACTORY_PATH, return_value=InMemoryRemoteStore()),
        patch(SETUP_ENTRY_PATH, return_value=True),
    ):
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                const.CONF_DATABASE_URL: f" {VALID_DATABASE_URL} ",
                const.CONF_API_KEY: VALID_API_KEY,
                const.CONF_USER_ID: "user1",
            },
        )

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    data = result.get("data")
    assert data[const.CONF_BACKEND] == const.BACKEND_FIREBASE
    assert data[const.CONF_DATABASE_URL] == VALID_DATABASE_URL
    assert data[const.CONF_USER_ID] == "user1"


async def test_firebase_invalid_credentials(hass: HomeAssistant) -> None:
    """Malformed URL and key are reported per field."""
    result = await _start_flow(hass, const.BACKEND_FIREBASE)
    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input={
            const.CONF_DATABASE_URL: "https://example.com/",
            const.CONF_API_KEY: "short",
            const.CONF_USER_ID: "user1",
        },
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {
        const.CONF_DATABASE_URL: const.ERROR_INVALID_DATABASE_URL,
        const.CONF_API_KEY: const.ERROR_INVALID_API_KEY,
    }


async def test_firebase_cannot_connect(hass: HomeAssistant) -> None:
    """A failing connection test keeps the form open."""
    unreachable = InMemoryRemoteStore()
    unreachable.fail_reads = True

    result = await _start_flow(hass, const.BACKEND_FIREBASE)
    with patch(REMOTE_FACTORY_PATH, return_value=unreachable):
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                const.CONF_DATABASE_URL: VALID_DATABASE_URL,
                const.CONF_API_KEY: VALID_API_KEY,
                const.CONF_USER_ID: "user1",
            },
        )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {"base": const.ERROR_CANNOT_CONNECT}
    assert unreachable.calls["fetch_all"] == 1


async def test_jsonbin_invalid_bin_id(hass: HomeAssistant) -> None:
    """Bin ids must be 16-40 letters and digits."""
    result = await _start_flow(hass, const.BACKEND_JSONBIN)
    assert result.get("step_id") == const.CONFIG_FLOW_STEP_JSONBIN

    result = await hass.config_entries.flow.async_configure(
        result.get("flow_id"),
        user_input={
            const.CONF_BIN_ID: "not-a-bin",
            const.CONF_API_KEY: "$2a$10$masterkey",
            const.CONF_USER_ID: "user1",
        },
    )

    assert result.get("type") == FlowResultType.FORM
    assert result.get("errors") == {const.CONF_BIN_ID: const.ERROR_INVALID_BIN_ID}


async def test_jsonbin_backend_success(hass: HomeAssistant) -> None:
    """Valid JSONBin credentials create the entry."""
    result = await _start_flow(hass, const.BACKEND_JSONBIN)
    with (
        patch(REMOTE_FACTORY_PATH, return_value=InMemoryRemoteStore()),
        patch(SETUP_ENTRY_PATH, return_value=True),
    ):
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                const.CONF_BIN_ID: VALID_BIN_ID,
                const.CONF_API_KEY: "$2a$10$masterkey",
                const.CONF_USER_ID: "user1",
            },
        )

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("data")[const.CONF_BIN_ID] == VALID_BIN_ID


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == const.ABORT_SINGLE_INSTANCE


async def test_options_flow_updates_sync_options(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Saving options stores them and reloads the entry."""
    result = await hass.config_entries.options.async_init(init_integration.entry_id)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == const.OPTIONS_FLOW_STEP_INIT

    result = await hass.config_entries.options.async_configure(
        result.get("flow_id"),
        user_input={
            const.CONF_AUTO_SYNC: False,
            const.CONF_SYNC_NOTIFICATIONS: False,
        },
    )
    await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert init_integration.options == {
        const.CONF_AUTO_SYNC: False,
        const.CONF_SYNC_NOTIFICATIONS: False,
    }
    assert init_integration.state is config_entries.ConfigEntryState.LOADED
