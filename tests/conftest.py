"""Shared fixtures for FitStreak tests."""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.fitstreak import const
from tests.helpers import InMemoryRemoteStore

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a local-only config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.FITSTREAK_TITLE,
        data={const.CONF_BACKEND: const.BACKEND_LOCAL},
        options={
            const.CONF_AUTO_SYNC: True,
            const.CONF_SYNC_NOTIFICATIONS: True,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def remote_config_entry() -> MockConfigEntry:
    """Return a Firebase-backed config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.FITSTREAK_TITLE,
        data={
            const.CONF_BACKEND: const.BACKEND_FIREBASE,
            const.CONF_DATABASE_URL: "https://fitstreak-test-default-rtdb.firebaseio.com/",
            const.CONF_API_KEY: "AIzaSyA1234567890abcdefghijklmnopqrstu",
            const.CONF_USER_ID: const.DEFAULT_USER_ID,
        },
        options={
            const.CONF_AUTO_SYNC: True,
            const.CONF_SYNC_NOTIFICATIONS: True,
        },
        entry_id="remote_entry_id",
    )


@pytest.fixture
def remote_store() -> InMemoryRemoteStore:
    """Return an empty in-memory remote store."""
    return InMemoryRemoteStore()


@pytest.fixture
async def init_integration(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> AsyncGenerator[MockConfigEntry]:
    """Set up FitStreak with the local-only backend."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    yield mock_config_entry

    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()


@pytest.fixture
async def init_remote_integration(
    hass: HomeAssistant,
    remote_config_entry: MockConfigEntry,
    remote_store: InMemoryRemoteStore,
) -> AsyncGenerator[MockConfigEntry]:
    """Set up FitStreak against the in-memory remote store."""
    remote_config_entry.add_to_hass(hass)
    with patch(
        "custom_components.fitstreak.create_remote_store",
        return_value=remote_store,
    ):
        assert await hass.config_entries.async_setup(remote_config_entry.entry_id)
        await hass.async_block_till_done()

    yield remote_config_entry

    await hass.config_entries.async_unload(remote_config_entry.entry_id)
    await hass.async_block_till_done()

