"""JSONBin.io adapter.

The whole bin holds one document shaped as `{entity_kind: {key: fields}}`.
Writes read the latest document, modify it, and PUT it back.
"""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, Any

from .. import const
from .base import Records
from .http import HttpRemoteStore

if TYPE_CHECKING:
    import aiohttp

BIN_ID_PATTERN = r"^[A-Za-z0-9]{16,40}$"


def validate_bin_id(bin_id: str | None) -> str | None:
    """Return an error message for a malformed bin id, else None."""
    if not bin_id or not isinstance(bin_id, str):
        return "Bin ID is required"
    if not re.match(BIN_ID_PATTERN, bin_id.strip()):
        return "Bin ID should contain only letters and numbers"
    return None


class JsonBinRemoteStore(HttpRemoteStore):
    """RemoteStore backed by a single JSONBin document."""

    def __init__(
        self, session: aiohttp.ClientSession, bin_id: str, master_key: str
    ) -> None:
        """Initialize the adapter."""
        super().__init__(session)
        self._bin_url = f"{const.JSONBIN_BASE_URL}/{bin_id.strip()}"
        self._headers = {
            const.JSONBIN_HEADER_MASTER_KEY: master_key.strip(),
            const.JSONBIN_HEADER_BIN_META: "false",
        }
        # Serializes read-modify-write cycles issued by this process
        self._write_lock = asyncio.Lock()

    async def _read_document(self, operation: str) -> dict[str, Any]:
        payload = await self._request(
            operation, "GET", f"{self._bin_url}/latest", headers=self._headers
        )
        return payload if isinstance(payload, dict) else {}

    async def _write_document(self, operation: str, document: dict[str, Any]) -> None:
        await self._request(
            operation,
            "PUT",
            self._bin_url,
            headers={**self._headers, "Content-Type": "application/json"},
            json_body=document,
        )

    async def fetch_all(self, entity_kind: str) -> Records:
        document = await self._read_document("fetch_all")
        records = document.get(entity_kind)
        if not isinstance(records, dict):
            return {}
        return {key: value for key, value in records.items() if isinstance(value, dict)}

    async def upsert(self, entity_kind: str, key: str, fields: dict[str, Any]) -> None:
        async with self._write_lock:
            document = await self._read_document("upsert")
            records = document.get(entity_kind)
            if not isinstance(records, dict):
                records = {}
            records[key] = fields
            document[entity_kind] = records
            await self._write_document("upsert", document)

    async def delete(self, entity_kind: str, key: str) -> None:
        async with self._write_lock:
            document = await self._read_document("delete")
            records = document.get(entity_kind)
            if not isinstance(records, dict) or key not in records:
                return
            del records[key]
            await self._write_document("delete", document)
