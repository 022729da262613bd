from __future__ import annotations

from typing import Any

from esorm.core import Callback, Component, operation

from ._models import CollectionDefinition, ConnectionConfig, ConnectionResult
from ._registry import ConnectionRegistry


class Adapter(Component):
    """Storage adapter that maps ORM lifecycle calls onto Elasticsearch.

    Every operation has a synchronous method and an awaitable twin with
    an ``a`` prefix. Both accept an optional ``callback``; when one is
    given it receives ``(error, result)`` exactly once and the method
    returns None.
    """

    syncable: bool = False

    DEFAULTS: dict[str, Any] = {
        "hosts": ["127.0.0.1:9200"],
        "sniff_on_start": True,
        "sniff_on_connection_fault": True,
        "keep_alive": False,
        "api_version": "8",
    }

    registry: ConnectionRegistry
    defaults: dict[str, Any]

    def __init__(
        self,
        registry: ConnectionRegistry | None = None,
        defaults: dict[str, Any] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            registry:
                Connection registry. A new empty registry
                is created when not given.
            defaults:
                Connection defaults, applied to options a
                connection config leaves unset.
        """
        self.registry = (
            registry if registry is not None else ConnectionRegistry()
        )
        self.defaults = {**self.DEFAULTS, **(defaults or {})}
        kwargs.setdefault("__provider__", "elasticsearch")
        super().__init__(**kwargs)

    @operation()
    def register_connection(
        self,
        config: dict[str, Any] | ConnectionConfig | None = None,
        collections: dict[str, dict | CollectionDefinition] | None = None,
        callback: Callback | None = None,
    ) -> ConnectionResult:
        """Register connection.

        Opens the connection, creates the indexes the collections
        need and registers a collection object for every collection
        that declares an index.

        Args:
            config:
                Connection config. Must carry an identity.
            collections:
                Collection definitions by collection name.
            callback:
                Completion callback.

        Returns:
            Connection result.

        Raises:
            IdentityMissingError:
                Config has no identity.
            IdentityDuplicateError:
                Identity is already registered.
            BootstrapError:
                An index could not be checked or created.
        """

    @operation()
    def teardown(
        self,
        connection: str | None = None,
        callback: Callback | None = None,
    ) -> None:
        """Remove one connection, or every connection when none is named.

        The client is not closed.
        """

    @operation()
    def describe(
        self,
        connection: str,
        collection: str,
        callback: Callback | None = None,
    ) -> None:
        """Describe collection. No-op."""

    @operation()
    def define(
        self,
        connection: str,
        collection: str,
        definition: Any = None,
        callback: Callback | None = None,
    ) -> None:
        """Define collection. No-op."""

    @operation()
    def drop(
        self,
        connection: str,
        collection: str,
        relations: Any = None,
        callback: Callback | None = None,
    ) -> None:
        """Drop collection. No-op."""

    @operation()
    def search(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Search documents.

        Args:
            connection:
                Connection identity.
            collection:
                Collection name.
            options:
                Search request body.
            indices:
                Indexes to search instead of the collection index.
            callback:
                Completion callback.

        Returns:
            Search response.
        """

    @operation()
    def create(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Index a document.

        Args:
            connection:
                Connection identity.
            collection:
                Collection name.
            options:
                Document.
            parent:
                Parent document reference.
            callback:
                Completion callback.

        Returns:
            Index response with the assigned document id.
        """

    create_index = create

    @operation()
    def update(
        self,
        connection: str,
        collection: str,
        id: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Update a document.

        Args:
            connection:
                Connection identity.
            collection:
                Collection name.
            id:
                Document id.
            options:
                Partial document, or a full update body.
            parent:
                Parent document reference.
            callback:
                Completion callback.

        Returns:
            Update response.
        """

    update_index = update

    @operation()
    def destroy(
        self,
        connection: str,
        collection: str,
        id: str,
        callback: Callback | None = None,
    ) -> Any:
        """Delete a document.

        Returns:
            Delete response.
        """

    destroy_index = destroy

    @operation()
    def count_index(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> int:
        """Count documents.

        Returns:
            Number of matching documents.
        """

    @operation()
    def bulk(
        self,
        connection: str,
        collection: str,
        options: list[Any],
        callback: Callback | None = None,
    ) -> Any:
        """Run bulk operations against the collection index.

        Returns:
            Bulk response.
        """

    @operation()
    def client(
        self,
        connection: str,
        collection: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Get the native synchronous client of a connection."""

    @operation()
    async def aregister_connection(
        self,
        config: dict[str, Any] | ConnectionConfig | None = None,
        collections: dict[str, dict | CollectionDefinition] | None = None,
        callback: Callback | None = None,
    ) -> ConnectionResult:
        """Register connection.

        Args:
            config:
                Connection config. Must carry an identity.
            collections:
                Collection definitions by collection name.
            callback:
                Completion callback.

        Returns:
            Connection result.
        """

    @operation()
    async def ateardown(
        self,
        connection: str | None = None,
        callback: Callback | None = None,
    ) -> None:
        """Remove one connection, or every connection when none is named."""

    @operation()
    async def adescribe(
        self,
        connection: str,
        collection: str,
        callback: Callback | None = None,
    ) -> None:
        """Describe collection. No-op."""

    @operation()
    async def adefine(
        self,
        connection: str,
        collection: str,
        definition: Any = None,
        callback: Callback | None = None,
    ) -> None:
        """Define collection. No-op."""

    @operation()
    async def adrop(
        self,
        connection: str,
        collection: str,
        relations: Any = None,
        callback: Callback | None = None,
    ) -> None:
        """Drop collection. No-op."""

    @operation()
    async def asearch(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Search documents."""

    @operation()
    async def acreate(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Index a document."""

    acreate_index = acreate

    @operation()
    async def aupdate(
        self,
        connection: str,
        collection: str,
        id: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Update a document."""

    aupdate_index = aupdate

    @operation()
    async def adestroy(
        self,
        connection: str,
        collection: str,
        id: str,
        callback: Callback | None = None,
    ) -> Any:
        """Delete a document."""

    adestroy_index = adestroy

    @operation()
    async def acount_index(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> int:
        """Count documents."""

    @operation()
    async def abulk(
        self,
        connection: str,
        collection: str,
        options: list[Any],
        callback: Callback | None = None,
    ) -> Any:
        """Run bulk operations against the collection index."""

    @operation()
    async def aclient(
        self,
        connection: str,
        collection: str | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Get the native asynchronous client of a connection.

        Every API method of the returned client is awaitable.
        """
