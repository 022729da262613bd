import pytest

from esorm.adapter.providers import elasticsearch as provider_module

from ._fake_cluster import (
    FakeAsyncElasticsearch,
    FakeCluster,
    FakeElasticsearch,
)


@pytest.fixture
def cluster(monkeypatch) -> FakeCluster:
    cluster = FakeCluster()
    monkeypatch.setattr(
        provider_module,
        "SyncElasticsearch",
        type("FakeElasticsearch", (FakeElasticsearch,), {"cluster": cluster}),
    )
    monkeypatch.setattr(
        provider_module,
        "AsyncElasticsearch",
        type(
            "FakeAsyncElasticsearch",
            (FakeAsyncElasticsearch,),
            {"cluster": cluster},
        ),
    )
    return cluster
