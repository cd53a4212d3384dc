"""Remote store adapters for FitStreak.

- base: RemoteStore contract and RemoteStoreError
- firebase: Firebase Realtime Database REST adapter
- jsonbin: JSONBin.io single-document adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from .base import Records, RemoteStore, RemoteStoreError
from .firebase import FirebaseRemoteStore
from .jsonbin import JsonBinRemoteStore

if TYPE_CHECKING:
    from collections.abc import Mapping

    import aiohttp


def create_remote_store(
    session: aiohttp.ClientSession, config: Mapping[str, Any]
) -> RemoteStore | None:
    """Build the adapter selected in the config entry (None for local-only)."""
    backend = config.get(const.CONF_BACKEND, const.BACKEND_LOCAL)
    if backend == const.BACKEND_FIREBASE:
        return FirebaseRemoteStore(
            session, config[const.CONF_DATABASE_URL], config[const.CONF_API_KEY]
        )
    if backend == const.BACKEND_JSONBIN:
        return JsonBinRemoteStore(
            session, config[const.CONF_BIN_ID], config[const.CONF_API_KEY]
        )
    return None


__all__ = [
    "FirebaseRemoteStore",
    "JsonBinRemoteStore",
    "Records",
    "RemoteStore",
    "RemoteStoreError",
    "create_remote_store",
]
