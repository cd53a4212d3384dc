"""Remote store contract.

Every hosted backend is wrapped by a thin adapter exposing the same four
operations. The reconciler depends on this contract only and never on
backend-specific request shapes.

Records are returned as a mapping of record key to record fields.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

Records = dict[str, dict[str, Any]]


class RemoteStoreError(Exception):
    """Raised when a remote store operation fails.

    Attributes:
        operation: The adapter operation that failed
        status: HTTP status code when the backend answered, else None
    """

    def __init__(
        self, operation: str, message: str, status: int | None = None
    ) -> None:
        """Initialize RemoteStoreError."""
        self.operation = operation
        self.status = status
        super().__init__(f"Remote {operation} failed: {message}")


class RemoteStore(ABC):
    """Narrow interface implemented once per hosted backend."""

    @abstractmethod
    async def fetch_all(self, entity_kind: str) -> Records:
        """Return every record of `entity_kind` (empty mapping if none).

        Raises:
            RemoteStoreError: transport or backend failure
        """

    async def fetch_by_filter(
        self,
        entity_kind: str,
        predicate: Callable[[str, dict[str, Any]], bool],
    ) -> Records:
        """Return records of `entity_kind` for which predicate(key, fields) holds.

        Filtering happens client-side unless an adapter overrides this.
        """
        records = await self.fetch_all(entity_kind)
        return {key: fields for key, fields in records.items() if predicate(key, fields)}

    @abstractmethod
    async def upsert(self, entity_kind: str, key: str, fields: dict[str, Any]) -> None:
        """Create or replace one record.

        Raises:
            RemoteStoreError: transport or backend failure
        """

    @abstractmethod
    async def delete(self, entity_kind: str, key: str) -> None:
        """Delete one record. Deleting a missing record is not an error.

        Raises:
            RemoteStoreError: transport or backend failure
        """
