"""Shared aiohttp plumbing for REST-backed remote stores."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from .. import const
from .base import RemoteStore, RemoteStoreError


class HttpRemoteStore(RemoteStore):
    """RemoteStore base that issues JSON requests over a shared aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: float = const.REMOTE_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize with the session owned by Home Assistant."""
        self._session = session
        self._timeout = timeout

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None if empty).

        Raises:
            RemoteStoreError: non-2xx status, timeout or transport error
        """
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session.request(
                    method, url, params=params, headers=headers, json=json_body
                ) as response:
                    if response.status >= 300:
                        body = await response.text()
                        raise RemoteStoreError(
                            operation,
                            f"HTTP {response.status} from {method} {url}: {body[:200]}",
                            status=response.status,
                        )
                    text = await response.text()
                    if not text:
                        return None
                    return await response.json(content_type=None)
        except TimeoutError as err:
            raise RemoteStoreError(operation, f"timed out after {self._timeout}s") from err
        except aiohttp.ClientError as err:
            raise RemoteStoreError(operation, str(err)) from err
        except ValueError as err:
            raise RemoteStoreError(operation, f"invalid JSON response: {err}") from err
