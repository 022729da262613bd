"""
Elasticsearch.
"""

from __future__ import annotations

__all__ = ["Elasticsearch"]

import functools
from typing import Any

from elasticsearch import AsyncElasticsearch
from elasticsearch import Elasticsearch as SyncElasticsearch
from elasticsearch import __versionstr__ as client_version

from esorm.core import Provider, get_logger
from esorm.core.exceptions import BootstrapError, IdentityDuplicateError

from .._helper import Helper
from .._models import (
    CollectionDefinition,
    ConnectionConfig,
    ConnectionResult,
    ElasticsearchSettings,
    IndexDescriptor,
    IndexStatus,
)
from .._registry import ConnectionRecord, ConnectionRegistry

logger = get_logger(__name__)

UPDATE_BODY_KEYS = (
    "doc",
    "script",
    "upsert",
    "doc_as_upsert",
    "scripted_upsert",
    "detect_noop",
)


class Elasticsearch(Provider):
    nparams: dict[str, Any]

    def __init__(
        self,
        nparams: dict[str, Any] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            nparams:
                Native parameters applied to every
                Elasticsearch client this provider opens.
        """
        self.nparams = nparams or dict()
        super().__init__(**kwargs)

    def _get_registry(self) -> ConnectionRegistry:
        return self.__component__.registry

    def _get_defaults(self) -> dict[str, Any]:
        return getattr(self.__component__, "defaults", None) or dict()

    def _open(
        self,
        config: dict[str, Any] | ConnectionConfig | None,
    ) -> ElasticsearchConnection:
        identity = Helper.get_identity(config)
        if identity in self._get_registry():
            raise IdentityDuplicateError(identity)
        connection_config = Helper.get_connection_config(
            config, self._get_defaults()
        )
        logger.info(
            "Opening connection %s to %s",
            identity,
            connection_config.hosts,
        )
        return ElasticsearchConnection(connection_config, self.nparams)

    def _register(
        self,
        connection: ElasticsearchConnection,
        collections: dict[str, CollectionDefinition],
        indexes: dict[str, IndexStatus],
    ) -> ConnectionResult:
        identity = str(connection.config.identity)
        record = ConnectionRecord(
            identity=identity,
            config=connection.config,
            connection=connection,
            indexes=indexes,
        )
        for name, definition in collections.items():
            if definition.elasticsearch is None:
                continue
            record.collections[name] = ElasticsearchCollection(
                name=name,
                settings=definition.elasticsearch,
                connection=connection,
            )
        self._get_registry().add(record)
        logger.info(
            "Registered connection %s with collections %s",
            identity,
            list(record.collections.keys()),
        )
        return ConnectionResult(
            identity=identity,
            indexes=indexes,
            collections=list(record.collections.keys()),
        )

    def _get_collection(
        self,
        connection: str,
        collection: str,
    ) -> ElasticsearchCollection:
        return self._get_registry().get_collection(connection, collection)

    def _get_connection(
        self,
        connection: str,
        collection: str | None,
    ) -> ElasticsearchConnection:
        if collection is not None:
            self._get_collection(connection, collection)
        return self._get_registry().get(connection).connection

    def register_connection(
        self,
        config: dict[str, Any] | ConnectionConfig | None = None,
        collections: dict[str, CollectionDefinition] | None = None,
    ) -> ConnectionResult:
        connection = self._open(config)
        definitions = collections or dict()
        indexes: dict[str, IndexStatus] = dict()
        try:
            for descriptor in Helper.group_indexes(definitions).values():
                indexes[descriptor.index] = self._ensure_index(
                    connection.client, descriptor
                )
            return self._register(connection, definitions, indexes)
        except Exception:
            connection.close()
            raise

    async def aregister_connection(
        self,
        config: dict[str, Any] | ConnectionConfig | None = None,
        collections: dict[str, CollectionDefinition] | None = None,
    ) -> ConnectionResult:
        connection = self._open(config)
        definitions = collections or dict()
        indexes: dict[str, IndexStatus] = dict()
        try:
            for descriptor in Helper.group_indexes(definitions).values():
                indexes[descriptor.index] = await self._aensure_index(
                    connection.aclient, descriptor
                )
            return self._register(connection, definitions, indexes)
        except Exception:
            await connection.aclose()
            raise

    def _ensure_index(
        self,
        client: SyncElasticsearch,
        descriptor: IndexDescriptor,
    ) -> IndexStatus:
        try:
            if client.indices.exists(index=descriptor.index):
                logger.info("Index %s exists", descriptor.index)
                return IndexStatus.EXISTS
            client.indices.create(
                **OperationConverter.convert_create_index(descriptor)
            )
        except Exception as e:
            raise BootstrapError(descriptor.index) from e
        logger.info(
            "Index %s created for %s",
            descriptor.index,
            descriptor.collections,
        )
        return IndexStatus.CREATED

    async def _aensure_index(
        self,
        aclient: AsyncElasticsearch,
        descriptor: IndexDescriptor,
    ) -> IndexStatus:
        try:
            if await aclient.indices.exists(index=descriptor.index):
                logger.info("Index %s exists", descriptor.index)
                return IndexStatus.EXISTS
            await aclient.indices.create(
                **OperationConverter.convert_create_index(descriptor)
            )
        except Exception as e:
            raise BootstrapError(descriptor.index) from e
        logger.info(
            "Index %s created for %s",
            descriptor.index,
            descriptor.collections,
        )
        return IndexStatus.CREATED

    def teardown(self, connection: str | None = None) -> None:
        registry = self._get_registry()
        if connection is None:
            registry.clear()
            logger.info("Removed all connections")
        elif registry.remove(connection):
            logger.info("Removed connection %s", connection)

    async def ateardown(self, connection: str | None = None) -> None:
        self.teardown(connection=connection)

    def describe(self, connection: str, collection: str) -> None:
        logger.debug("describe %s.%s", connection, collection)

    async def adescribe(self, connection: str, collection: str) -> None:
        self.describe(connection=connection, collection=collection)

    def define(
        self,
        connection: str,
        collection: str,
        definition: Any = None,
    ) -> None:
        logger.debug("define %s.%s", connection, collection)

    async def adefine(
        self,
        connection: str,
        collection: str,
        definition: Any = None,
    ) -> None:
        self.define(connection=connection, collection=collection)

    def drop(
        self,
        connection: str,
        collection: str,
        relations: Any = None,
    ) -> None:
        logger.debug("drop %s.%s", connection, collection)

    async def adrop(
        self,
        connection: str,
        collection: str,
        relations: Any = None,
    ) -> None:
        self.drop(connection=connection, collection=collection)

    def search(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return col.search(options=options, indices=indices)

    async def asearch(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return await col.asearch(options=options, indices=indices)

    def create(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return col.insert(document=options, parent=parent)

    async def acreate(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return await col.ainsert(document=options, parent=parent)

    def update(
        self,
        connection: str,
        collection: str,
        id: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return col.update(id=id, options=options, parent=parent)

    async def aupdate(
        self,
        connection: str,
        collection: str,
        id: str,
        options: dict[str, Any] | None = None,
        parent: str | None = None,
    ) -> Any:
        col = self._get_collection(connection, collection)
        return await col.aupdate(id=id, options=options, parent=parent)

    def destroy(self, connection: str, collection: str, id: str) -> Any:
        col = self._get_collection(connection, collection)
        return col.destroy(id=id)

    async def adestroy(
        self, connection: str, collection: str, id: str
    ) -> Any:
        col = self._get_collection(connection, collection)
        return await col.adestroy(id=id)

    def count_index(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
    ) -> int:
        col = self._get_collection(connection, collection)
        return col.count(options=options)

    async def acount_index(
        self,
        connection: str,
        collection: str,
        options: dict[str, Any] | None = None,
    ) -> int:
        col = self._get_collection(connection, collection)
        return await col.acount(options=options)

    def bulk(
        self,
        connection: str,
        collection: str,
        options: list[Any],
    ) -> Any:
        col = self._get_collection(connection, collection)
        return col.bulk(operations=options)

    async def abulk(
        self,
        connection: str,
        collection: str,
        options: list[Any],
    ) -> Any:
        col = self._get_collection(connection, collection)
        return await col.abulk(operations=options)

    def client(
        self,
        connection: str,
        collection: str | None = None,
    ) -> Any:
        return self._get_connection(connection, collection).client

    async def aclient(
        self,
        connection: str,
        collection: str | None = None,
    ) -> Any:
        return self._get_connection(connection, collection).aclient


class CompatibleClient:
    """Client mixin sending REST compatibility headers.

    Accept and Content-Type of every request are rewritten to the
    compatibility mimetype for the ``compatible_with`` major version.
    """

    compatible_with: str

    def perform_request(self, method: str, path: str, **kwargs: Any) -> Any:
        kwargs["headers"] = Helper.get_compatible_headers(
            kwargs.get("headers"), self.compatible_with
        )
        return super().perform_request(  # type: ignore[misc]
            method, path, **kwargs
        )


@functools.lru_cache(maxsize=None)
def get_compatible_client_class(base: type, compatible_with: str) -> type:
    return type(
        f"Compatible{base.__name__}",
        (CompatibleClient, base),
        {"compatible_with": compatible_with},
    )


class ElasticsearchConnection:
    config: ConnectionConfig
    nparams: dict[str, Any]

    _client: SyncElasticsearch
    _aclient: AsyncElasticsearch

    _init: bool
    _ainit: bool

    def __init__(
        self,
        config: ConnectionConfig,
        nparams: dict[str, Any] | None = None,
    ):
        self.config = config
        self.nparams = nparams or dict()
        self._init = False
        self._ainit = False

    @property
    def client(self) -> SyncElasticsearch:
        if not self._init:
            client_class = self._get_client_class(SyncElasticsearch)
            self._client = client_class(**self._get_client_params())
            self._init = True
        return self._client

    @property
    def aclient(self) -> AsyncElasticsearch:
        if not self._ainit:
            client_class = self._get_client_class(AsyncElasticsearch)
            self._aclient = client_class(**self._get_client_params())
            self._ainit = True
        return self._aclient

    def close(self) -> None:
        if self._init:
            self._client.close()
            self._init = False

    async def aclose(self) -> None:
        if self._ainit:
            await self._aclient.close()
            self._ainit = False

    def _get_compatible_with(self) -> str | None:
        if not self.config.api_version:
            return None
        major = str(self.config.api_version).split(".")[0]
        if major == client_version.split(".")[0]:
            return None
        return major

    def _get_client_class(self, base: type) -> type:
        compatible_with = self._get_compatible_with()
        if compatible_with is None:
            return base
        return get_compatible_client_class(base, compatible_with)

    def _get_client_params(self) -> dict:
        def _add_if_not_none(key, value):
            return {key: value} if value is not None else {}

        def _convert_if_list(value):
            return tuple(value) if isinstance(value, list) else value

        config = self.config
        args = {
            "hosts": Helper.get_hosts(config.hosts),
            **_add_if_not_none("sniff_on_start", config.sniff_on_start),
            **_add_if_not_none(
                "sniff_on_node_failure", config.sniff_on_connection_fault
            ),
            **_add_if_not_none("api_key", _convert_if_list(config.api_key)),
            **_add_if_not_none(
                "basic_auth", _convert_if_list(config.basic_auth)
            ),
            **_add_if_not_none("verify_certs", config.verify_certs),
            **_add_if_not_none("ca_certs", config.ca_certs),
            **_add_if_not_none("request_timeout", config.request_timeout),
        }
        headers = self._get_headers()
        if headers:
            args["headers"] = headers

        args.update(self.nparams)
        if config.nparams is not None:
            args.update(config.nparams)
        return args

    def _get_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.config.keep_alive is False:
            headers["connection"] = "close"
        return headers


class ElasticsearchCollection:
    name: str
    settings: ElasticsearchSettings
    connection: ElasticsearchConnection
    op_converter: OperationConverter
    result_converter: ResultConverter

    def __init__(
        self,
        name: str,
        settings: ElasticsearchSettings,
        connection: ElasticsearchConnection,
    ):
        self.name = name
        self.settings = settings
        self.connection = connection
        self.op_converter = OperationConverter(settings.index)
        self.result_converter = ResultConverter()

    @property
    def index(self) -> str:
        return self.settings.index

    def search(
        self,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
    ) -> Any:
        args = self.op_converter.convert_search(options, indices)
        return self.connection.client.search(**args)

    async def asearch(
        self,
        options: dict[str, Any] | None = None,
        indices: str | list[str] | None = None,
    ) -> Any:
        args = self.op_converter.convert_search(options, indices)
        return await self.connection.aclient.search(**args)

    def insert(
        self,
        document: dict[str, Any] | None,
        parent: str | None = None,
    ) -> Any:
        args = self.op_converter.convert_insert(document, parent)
        return self.connection.client.index(**args)

    async def ainsert(
        self,
        document: dict[str, Any] | None,
        parent: str | None = None,
    ) -> Any:
        args = self.op_converter.convert_insert(document, parent)
        return await self.connection.aclient.index(**args)

    def update(
        self,
        id: str,
        options: dict[str, Any] | None,
        parent: str | None = None,
    ) -> Any:
        args = self.op_converter.convert_update(id, options, parent)
        return self.connection.client.update(**args)

    async def aupdate(
        self,
        id: str,
        options: dict[str, Any] | None,
        parent: str | None = None,
    ) -> Any:
        args = self.op_converter.convert_update(id, options, parent)
        return await self.connection.aclient.update(**args)

    def destroy(self, id: str) -> Any:
        args = self.op_converter.convert_destroy(id)
        return self.connection.client.delete(**args)

    async def adestroy(self, id: str) -> Any:
        args = self.op_converter.convert_destroy(id)
        return await self.connection.aclient.delete(**args)

    def count(self, options: dict[str, Any] | None = None) -> int:
        args = self.op_converter.convert_count(options)
        resp = self.connection.client.count(**args)
        return self.result_converter.convert_count(resp)

    async def acount(self, options: dict[str, Any] | None = None) -> int:
        args = self.op_converter.convert_count(options)
        resp = await self.connection.aclient.count(**args)
        return self.result_converter.convert_count(resp)

    def bulk(self, operations: list[Any]) -> Any:
        args = self.op_converter.convert_bulk(operations)
        return self.connection.client.bulk(**args)

    async def abulk(self, operations: list[Any]) -> Any:
        args = self.op_converter.convert_bulk(operations)
        return await self.connection.aclient.bulk(**args)


class OperationConverter:
    index: str

    def __init__(self, index: str) -> None:
        self.index = index

    @staticmethod
    def convert_create_index(descriptor: IndexDescriptor) -> dict:
        return {
            "index": descriptor.index,
            "body": {"mappings": descriptor.mappings},
        }

    def convert_search(
        self,
        options: dict[str, Any] | None,
        indices: str | list[str] | None,
    ) -> dict:
        args: dict = {"index": indices or self.index}
        if options:
            args["body"] = options
        return args

    def convert_insert(
        self,
        document: dict[str, Any] | None,
        parent: str | None,
    ) -> dict:
        args: dict = {"index": self.index, "document": document or {}}
        if parent is not None:
            args["routing"] = parent
        return args

    def convert_update(
        self,
        id: str,
        options: dict[str, Any] | None,
        parent: str | None,
    ) -> dict:
        options = options or {}
        if any(key in options for key in UPDATE_BODY_KEYS):
            body = options
        else:
            body = {"doc": options}
        args: dict = {"index": self.index, "id": id, "body": body}
        if parent is not None:
            args["routing"] = parent
        return args

    def convert_destroy(self, id: str) -> dict:
        return {"index": self.index, "id": id}

    def convert_count(self, options: dict[str, Any] | None) -> dict:
        args: dict = {"index": self.index}
        if options:
            args["body"] = options
        return args

    def convert_bulk(self, operations: list[Any]) -> dict:
        return {"index": self.index, "operations": operations}


class ResultConverter:
    def convert_count(self, response: Any) -> int:
        return int(response.get("count", 0))
