from __future__ import annotations

from enum import Enum
from typing import Any

from esorm.core import DataModel, DataModelField


class IndexStatus(str, Enum):
    CREATED = "created"
    EXISTS = "exists"


class ConnectionConfig(DataModel):
    """Connection config.

    Field names are snake_case; the host framework's camelCase keys
    (``sniffOnStart``, ``apiVersion``, ...) are accepted as aliases.
    Options left as None are filled from the adapter defaults.
    """

    identity: str | None = None
    """Unique connection name."""

    hosts: list[str] | str | None = None
    """Cluster hosts as host:port strings or URLs."""

    sniff_on_start: bool | None = DataModelField(
        default=None, alias="sniffOnStart"
    )
    """Discover cluster nodes when the client starts."""

    sniff_on_connection_fault: bool | None = DataModelField(
        default=None, alias="sniffOnConnectionFault"
    )
    """Rediscover cluster nodes after a node failure."""

    keep_alive: bool | None = DataModelField(default=None, alias="keepAlive")
    """Keep HTTP connections open between requests."""

    api_version: str | None = DataModelField(
        default=None, alias="apiVersion"
    )
    """REST API compatibility version."""

    api_key: str | list[str] | None = DataModelField(
        default=None, alias="apiKey"
    )
    basic_auth: list[str] | None = DataModelField(
        default=None, alias="basicAuth"
    )
    verify_certs: bool | None = DataModelField(
        default=None, alias="verifyCerts"
    )
    ca_certs: str | None = DataModelField(default=None, alias="caCerts")
    request_timeout: float | None = DataModelField(
        default=None, alias="requestTimeout"
    )

    nparams: dict[str, Any] | None = None
    """Native parameters passed to the Elasticsearch client."""


class ElasticsearchSettings(DataModel):
    """Elasticsearch block of a collection definition."""

    index: str
    """Target index."""

    mappings: dict[str, Any] | None = None
    """Mapping, either keyed by collection name or given directly."""


class CollectionDefinition(DataModel):
    """Collection definition supplied by the host framework.

    Only the Elasticsearch block is read; every other key of the
    definition is ignored.
    """

    identity: str | None = None

    elasticsearch: ElasticsearchSettings | None = DataModelField(
        default=None, alias="elasticSearch"
    )


class IndexDescriptor(DataModel):
    """Index and the combined mapping of the collections that target it."""

    index: str
    collections: list[str] = []
    mappings: dict[str, Any] = {}


class ConnectionResult(DataModel):
    """Result of registering a connection."""

    identity: str
    """Connection name."""

    indexes: dict[str, IndexStatus] = {}
    """Bootstrap status per index."""

    collections: list[str] = []
    """Registered collection names."""
