"""Firebase Realtime Database adapter (REST API).

Records of an entity kind live under `<database_url>/<entity_kind>/<key>.json`.
The API key is passed as the `auth` query parameter.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .. import const
from .base import Records
from .http import HttpRemoteStore

if TYPE_CHECKING:
    import aiohttp


def validate_api_key(api_key: str | None) -> str | None:
    """Return an error message for a malformed Firebase API key, else None."""
    if not api_key or not isinstance(api_key, str):
        return "API key is required"
    trimmed = api_key.strip()
    if not (
        const.FIREBASE_API_KEY_MIN_LENGTH
        <= len(trimmed)
        <= const.FIREBASE_API_KEY_MAX_LENGTH
    ):
        return (
            f"Firebase API key should be {const.FIREBASE_API_KEY_MIN_LENGTH}-"
            f"{const.FIREBASE_API_KEY_MAX_LENGTH} characters long"
        )
    if not re.match(const.FIREBASE_API_KEY_PATTERN, trimmed):
        return (
            "API key contains invalid characters. Should only contain letters, "
            "numbers, hyphens, and underscores"
        )
    return None


def validate_database_url(database_url: str | None) -> str | None:
    """Return an error message for a malformed database URL, else None."""
    if not database_url or not isinstance(database_url, str):
        return "Database URL is required"
    if not re.match(const.FIREBASE_DATABASE_URL_PATTERN, database_url.strip()):
        return (
            "Invalid Firebase database URL format. Should be: "
            "https://YOUR-PROJECT-default-rtdb.firebaseio.com/"
        )
    return None


class FirebaseRemoteStore(HttpRemoteStore):
    """RemoteStore backed by a Firebase Realtime Database."""

    def __init__(
        self, session: aiohttp.ClientSession, database_url: str, api_key: str
    ) -> None:
        """Initialize the adapter."""
        super().__init__(session)
        self._base_url = database_url.strip().rstrip("/")
        self._api_key = api_key.strip()

    def _url(self, *parts: str) -> str:
        return f"{self._base_url}/{'/'.join(parts)}.json"

    @property
    def _params(self) -> dict[str, str]:
        return {"auth": self._api_key}

    async def fetch_all(self, entity_kind: str) -> Records:
        payload = await self._request(
            "fetch_all", "GET", self._url(entity_kind), params=self._params
        )
        if not isinstance(payload, dict):
            return {}
        return {key: value for key, value in payload.items() if isinstance(value, dict)}

    async def upsert(self, entity_kind: str, key: str, fields: dict[str, Any]) -> None:
        await self._request(
            "upsert",
            "PUT",
            self._url(entity_kind, key),
            params=self._params,
            json_body=fields,
        )

    async def delete(self, entity_kind: str, key: str) -> None:
        await self._request(
            "delete", "DELETE", self._url(entity_kind, key), params=self._params
        )
