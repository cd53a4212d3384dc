# File: notification_helper.py
"""Sends user-visible notices through Home Assistant's persistent notifications.

Used for the sync-offline notice, the corrupt-storage fresh start notice and
"Achievement Unlocked" notices after a daily log.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import HomeAssistant

from . import const


async def async_send_notification(
    hass: HomeAssistant,
    title: str,
    message: str,
    notification_id: str | None = None,
) -> None:
    """Create a persistent notification.

    Gracefully handles a missing persistent_notification service. If the
    service doesn't exist, logs a warning and returns without raising.
    """
    domain = const.NOTIFY_DOMAIN
    service = const.NOTIFY_SERVICE_CREATE

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "WARNING: Notification service '%s.%s' not available - skipping "
            "notification '%s'",
            domain,
            service,
            title,
        )
        return

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if notification_id:
        payload[const.NOTIFY_NOTIFICATION_ID] = notification_id

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
        const.LOGGER.debug("DEBUG: Notification sent via '%s.%s'", domain, service)

    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs from fire-and-forget tasks; nothing may escape
        const.LOGGER.error(
            "ERROR: Unexpected error sending notification via '%s.%s': %s. Payload: %s",
            domain,
            service,
            err,
            payload,
        )
