# type: ignore

import pytest

from esorm.adapter import (
    BootstrapError,
    CollectionNotFoundError,
    ConnectionNotFoundError,
    ConnectionRegistry,
    IdentityDuplicateError,
    IdentityMissingError,
    IndexStatus,
)

from ._fake_cluster import FakeApiError
from ._providers import get_component
from ._sync_and_async_client import AdapterSyncAndAsyncClient

people_mapping = {
    "properties": {
        "name": {"type": "keyword"},
        "age": {"type": "integer"},
    }
}

collections = {
    "users": {
        "identity": "users",
        "attributes": {"name": "string", "age": "integer"},
        "elasticSearch": {
            "index": "people",
            "mappings": {"users": people_mapping},
        },
    },
}


def get_client(async_call: bool, **kwargs) -> AdapterSyncAndAsyncClient:
    return AdapterSyncAndAsyncClient(
        adapter=get_component(**kwargs), async_call=async_call
    )


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, error, result):
        self.calls.append((error, result))


async def register(client, identity="es1", definitions=None):
    return await client.register_connection(
        {"identity": identity, "hosts": ["localhost:9200"]},
        definitions if definitions is not None else collections,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection(cluster, async_call: bool):
    client = get_client(async_call)

    assert "people" not in cluster.indices

    result = await register(client)

    assert result.identity == "es1"
    assert result.indexes == {"people": IndexStatus.CREATED}
    assert result.collections == ["users"]
    assert cluster.indices["people"]["mappings"] == people_mapping
    assert cluster.call_names() == ["indices.exists", "indices.create"]
    assert cluster.calls[1][1] == {
        "index": "people",
        "body": {"mappings": people_mapping},
    }
    assert "es1" in client.registry


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection_existing_index(cluster, async_call: bool):
    client = get_client(async_call)
    cluster.add_index("people")

    result = await register(client)

    assert result.indexes == {"people": IndexStatus.EXISTS}
    assert cluster.call_names() == ["indices.exists"]
    assert cluster.indices["people"]["mappings"] == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection_shared_index(cluster, async_call: bool):
    client = get_client(async_call)
    definitions = {
        "users": collections["users"],
        "admins": {
            "elasticsearch": {
                "index": "people",
                "mappings": {
                    "properties": {"level": {"type": "integer"}},
                },
            },
        },
        "events": {
            "elasticSearch": {
                "index": "logs",
                "mappings": {
                    "events": {"properties": {"at": {"type": "date"}}},
                },
            },
        },
        "settings": {"identity": "settings"},
    }

    result = await register(client, definitions=definitions)

    assert result.indexes == {
        "people": IndexStatus.CREATED,
        "logs": IndexStatus.CREATED,
    }
    assert result.collections == ["users", "admins", "events"]
    assert cluster.call_names() == [
        "indices.exists",
        "indices.create",
        "indices.exists",
        "indices.create",
    ]
    assert [kwargs["index"] for _, kwargs in cluster.calls] == [
        "people",
        "people",
        "logs",
        "logs",
    ]
    assert cluster.indices["people"]["mappings"] == {
        "properties": {
            "name": {"type": "keyword"},
            "age": {"type": "integer"},
            "level": {"type": "integer"},
        }
    }
    assert cluster.indices["logs"]["mappings"] == {
        "properties": {"at": {"type": "date"}}
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "config",
    [
        None,
        {},
        {"hosts": ["localhost:9200"]},
        {"identity": ""},
        {"identity": None, "sniffOnStart": "not a flag"},
        {"hosts": 9200, "keepAlive": {"nested": True}},
    ],
)
async def test_register_connection_identity_missing(
    cluster, async_call: bool, config: dict | None
):
    client = get_client(async_call)

    with pytest.raises(IdentityMissingError):
        await client.register_connection(config, collections)

    assert len(client.registry) == 0
    assert cluster.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection_identity_duplicate(
    cluster, async_call: bool
):
    client = get_client(async_call)
    await register(client)
    record = client.registry.get("es1")

    with pytest.raises(IdentityDuplicateError):
        await client.register_connection(
            {"identity": "es1", "hosts": ["otherhost:9200"]}, {}
        )

    assert client.registry.get("es1") is record
    assert record.config.hosts == ["localhost:9200"]
    assert len(client.registry) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection_bootstrap_failure(
    cluster, async_call: bool
):
    client = get_client(async_call)
    definitions = {
        "users": collections["users"],
        "events": {"elasticSearch": {"index": "logs"}},
    }
    failure = FakeApiError("cluster unavailable")
    cluster.failures["indices.create"] = failure

    with pytest.raises(BootstrapError) as exc_info:
        await register(client, definitions=definitions)

    assert exc_info.value.index == "people"
    assert exc_info.value.__cause__ is failure
    assert cluster.call_names() == ["indices.exists", "indices.create"]
    assert "es1" not in client.registry
    assert len(cluster.clients) == 1
    assert cluster.clients[0].closed is True

    cluster.failures.clear()
    result = await register(client, definitions=definitions)
    assert cluster.clients[-1].closed is False
    assert result.indexes == {
        "people": IndexStatus.CREATED,
        "logs": IndexStatus.CREATED,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_register_connection_callback(cluster, async_call: bool):
    client = get_client(async_call)
    callback = Recorder()

    result = await client.register_connection(
        {"identity": "es1"}, collections, callback=callback
    )

    assert result is None
    assert len(callback.calls) == 1
    error, value = callback.calls[0]
    assert error is None
    assert value.identity == "es1"

    await client.register_connection(
        {"identity": "es1"}, collections, callback=callback
    )
    assert len(callback.calls) == 2
    error, value = callback.calls[1]
    assert isinstance(error, IdentityDuplicateError)
    assert value is None


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_create_with_callback(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)
    callback = Recorder()

    result = await client.create(
        "es1", "users", {"name": "Ann"}, None, callback=callback
    )

    assert result is None
    assert len(callback.calls) == 1
    error, response = callback.calls[0]
    assert error is None
    assert response["result"] == "created"
    assert response["_id"]
    docs = cluster.indices["people"]["docs"]
    assert docs[response["_id"]]["_source"] == {"name": "Ann"}


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_document_operations(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)

    ann = await client.create("es1", "users", {"name": "Ann", "age": 30})
    bob = await client.create_index("es1", "users", {"name": "Bob", "age": 40})

    response = await client.update(
        "es1", "users", ann["_id"], {"age": 31}
    )
    assert response["result"] == "updated"
    assert cluster.calls[-1][1]["body"] == {"doc": {"age": 31}}
    assert cluster.indices["people"]["docs"][ann["_id"]]["_source"] == {
        "name": "Ann",
        "age": 31,
    }

    response = await client.search(
        "es1", "users", {"query": {"term": {"name": "Bob"}}}
    )
    hits = response["hits"]["hits"]
    assert [hit["_id"] for hit in hits] == [bob["_id"]]
    assert cluster.calls[-1][1]["index"] == "people"

    count = await client.count_index("es1", "users")
    assert count == 2
    count = await client.count_index(
        "es1", "users", {"query": {"match": {"age": 31}}}
    )
    assert count == 1

    response = await client.destroy("es1", "users", bob["_id"])
    assert response["result"] == "deleted"
    assert await client.count_index("es1", "users") == 1

    response = await client.bulk(
        "es1",
        "users",
        [
            {"index": {"_id": "c1"}},
            {"name": "Cid", "age": 22},
            {"delete": {"_id": ann["_id"]}},
        ],
    )
    assert response["errors"] is False
    assert cluster.calls[-1][1]["index"] == "people"
    assert set(cluster.indices["people"]["docs"].keys()) == {"c1"}


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_parent_reference(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)

    child = await client.create("es1", "users", {"name": "Kid"}, "p1")
    assert cluster.calls[-1][1]["routing"] == "p1"

    await client.update(
        "es1",
        "users",
        child["_id"],
        {"script": {"source": "ctx._source.age = 1"}},
        "p1",
    )
    assert cluster.calls[-1][1]["routing"] == "p1"
    assert cluster.calls[-1][1]["body"] == {
        "script": {"source": "ctx._source.age = 1"}
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_search_indices_override(cluster, async_call: bool):
    client = get_client(async_call)
    cluster.add_index("archive")
    await register(client)

    await client.search("es1", "users", None, "archive")

    assert cluster.calls[-1] == ("search", {"index": "archive", "body": None})


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_operation_error(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)
    failure = FakeApiError("search_phase_execution_exception")
    cluster.failures["search"] = failure

    with pytest.raises(FakeApiError) as exc_info:
        await client.search("es1", "users", {"query": {"match_all": {}}})
    assert exc_info.value is failure

    callback = Recorder()
    result = await client.search("es1", "users", callback=callback)
    assert result is None
    assert callback.calls == [(failure, None)]

    with pytest.raises(FakeApiError):
        await client.update("es1", "users", "missing", {"age": 1})
    assert "es1" in client.registry


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_callback_error_not_redelivered(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)
    calls = []

    def callback(error, result):
        calls.append((error, result))
        raise RuntimeError("callback failed")

    with pytest.raises(RuntimeError):
        await client.count_index("es1", "users", callback=callback)

    assert calls == [(None, 0)]


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_lookup_errors(cluster, async_call: bool):
    client = get_client(async_call)
    await register(
        client,
        definitions={
            "users": collections["users"],
            "settings": {"identity": "settings"},
        },
    )

    with pytest.raises(ConnectionNotFoundError):
        await client.search("es2", "users")
    with pytest.raises(CollectionNotFoundError):
        await client.create("es1", "settings", {"key": "value"})
    with pytest.raises(CollectionNotFoundError):
        await client.client("es1", "missing")


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_teardown(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client, identity="es1")
    await register(client, identity="es2")
    await register(client, identity="es3")

    await client.teardown("es2")
    assert client.registry.identities() == ["es1", "es3"]
    assert [record.identity for record in client.registry] == ["es1", "es3"]

    await client.teardown("unknown")
    assert client.registry.identities() == ["es1", "es3"]

    callback = Recorder()
    await client.teardown(callback=callback)
    assert callback.calls == [(None, None)]
    assert len(client.registry) == 0

    await client.teardown("es1")
    await register(client, identity="es1")
    assert "es1" in client.registry


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_schema_operations(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)
    callback = Recorder()

    assert await client.describe("es1", "users") is None
    assert await client.define("es1", "users", {"name": "string"}) is None
    assert await client.drop("es1", "users", []) is None
    await client.drop("es1", "users", callback=callback)

    assert callback.calls == [(None, None)]
    assert cluster.call_names() == ["indices.exists", "indices.create"]


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_client(cluster, async_call: bool):
    client = get_client(async_call)
    await register(client)

    native = await client.client("es1", "users")

    assert native is cluster.clients[-1]
    if async_call:
        assert await native.indices.exists(index="people") is True
    else:
        assert native.indices.exists(index="people") is True

    callback = Recorder()
    await client.client("es1", callback=callback)
    assert callback.calls == [(None, native)]


@pytest.mark.asyncio
@pytest.mark.parametrize("async_call", [False, True])
async def test_shared_registry(cluster, async_call: bool):
    registry = ConnectionRegistry()
    first = get_client(async_call, registry=registry)
    second = get_client(async_call, registry=registry)
    other = get_client(async_call)

    await register(first)

    response = await second.create("es1", "users", {"name": "Dee"})
    assert response["_id"]
    with pytest.raises(IdentityDuplicateError):
        await register(second)
    with pytest.raises(ConnectionNotFoundError):
        await other.search("es1", "users")


def test_connection_params(cluster):
    adapter = get_component()
    adapter.register_connection(
        {
            "identity": "es1",
            "hosts": ["localhost:9200", "https://node2:9243"],
            "sniffOnStart": False,
            "keepAlive": True,
            "apiVersion": "7.10",
            "basicAuth": ["elastic", "secret"],
            "nparams": {"max_retries": 5},
        },
        {},
    )

    native = adapter.client("es1")
    params = native.params
    assert params["hosts"] == [
        "http://localhost:9200",
        "https://node2:9243",
    ]
    assert params["sniff_on_start"] is False
    assert params["sniff_on_node_failure"] is True
    assert params["basic_auth"] == ("elastic", "secret")
    assert params["max_retries"] == 5
    assert "headers" not in params
    assert type(native).compatible_with == "7"


def test_connection_defaults(cluster):
    adapter = get_component(defaults={"hosts": ["search:9200"]})
    adapter.register_connection({"identity": "es1"})

    record = adapter.registry.get("es1")
    assert record.config.hosts == ["search:9200"]
    assert record.config.sniff_on_start is True
    assert record.config.keep_alive is False

    params = adapter.client("es1").params
    assert params["hosts"] == ["http://search:9200"]
    assert params["sniff_on_start"] is True
    assert params["headers"] == {"connection": "close"}
    assert adapter.syncable is False
