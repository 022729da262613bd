from __future__ import annotations

from typing import Any, Iterator

from esorm.core import DataModel
from esorm.core.exceptions import (
    CollectionNotFoundError,
    ConnectionNotFoundError,
    IdentityDuplicateError,
)

from ._models import ConnectionConfig, IndexStatus


class ConnectionRecord(DataModel):
    """Registered connection."""

    identity: str
    """Connection name."""

    config: ConnectionConfig
    """Effective config, defaults applied."""

    connection: Any
    """Live connection handle shared by the collections."""

    collections: dict[str, Any] = {}
    """Collection objects by collection name."""

    indexes: dict[str, IndexStatus] = {}
    """Bootstrap status per index."""


class ConnectionRegistry:
    """Registered connections by identity.

    The registry is owned by whoever creates it. An adapter uses the
    registry it was given, so several adapters can share connections by
    sharing a registry.
    """

    _records: dict[str, ConnectionRecord]

    def __init__(self) -> None:
        self._records = dict()

    def add(self, record: ConnectionRecord) -> None:
        if record.identity in self._records:
            raise IdentityDuplicateError(record.identity)
        self._records[record.identity] = record

    def get(self, identity: str) -> ConnectionRecord:
        record = self._records.get(identity)
        if record is None:
            raise ConnectionNotFoundError(identity)
        return record

    def get_collection(self, identity: str, collection: str) -> Any:
        record = self.get(identity)
        if collection not in record.collections:
            raise CollectionNotFoundError(identity, collection)
        return record.collections[collection]

    def remove(self, identity: str) -> bool:
        return self._records.pop(identity, None) is not None

    def clear(self) -> None:
        self._records.clear()

    def identities(self) -> list[str]:
        return list(self._records.keys())

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ConnectionRecord]:
        return iter(list(self._records.values()))
