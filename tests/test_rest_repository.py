"""Tests for the Atlas REST repository client (no network)."""

import json

import httpx
import pytest

from lineage_bridge.config import RepositoryConfig
from lineage_bridge.entities.builders import path_to_entity, rename_table_updates
from lineage_bridge.entities.types import ResourceKind
from lineage_bridge.repository import (
    AtlasRestRepository,
    InMemoryRepository,
    RepositoryConnectionError,
    RepositoryError,
    create_repository,
)


class Recorder:
    """MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={})


@pytest.fixture
def repo_config():
    return RepositoryConfig(url="http://atlas:21000/", username=None, password=None, timeout_seconds=5)


def make_repository(config, handler) -> AtlasRestRepository:
    return AtlasRestRepository(config=config, transport=httpx.MockTransport(handler))


class TestCreateEntities:

    def test_bulk_post_in_creation_order(self, repo_config):
        recorder = Recorder()
        repository = make_repository(repo_config, recorder)

        repository.create_entities([path_to_entity("s3a://mybucket/a/b/c.txt")])

        (request,) = recorder.requests
        assert request.method == "POST"
        assert str(request.url) == "http://atlas:21000/api/atlas/v2/entity/bulk"
        body = json.loads(request.content)
        assert [e["typeName"] for e in body["entities"]] == [
            "aws_s3_bucket",
            "aws_s3_pseudo_dir",
            "aws_s3_object",
        ]

    def test_empty_graph_list_sends_nothing(self, repo_config):
        recorder = Recorder()
        make_repository(repo_config, recorder).create_entities([])
        assert recorder.requests == []

    def test_basic_auth(self):
        recorder = Recorder()
        config = RepositoryConfig(url="http://atlas:21000", username="admin", password="secret")
        make_repository(config, recorder).create_entities([path_to_entity("hdfs://nn/x")])

        assert recorder.requests[0].headers["Authorization"].startswith("Basic ")


class TestUniqueAttributeCalls:

    def test_update(self, repo_config):
        recorder = Recorder()
        updates = rename_table_updates("sales", "orders", "orders_v2", "prod")

        make_repository(repo_config, recorder).update_entity_by_unique_attribute(
            ResourceKind.TABLE, updates.table_old_name, updates.table
        )

        (request,) = recorder.requests
        assert request.method == "PUT"
        assert request.url.path == "/api/atlas/v2/entity/uniqueAttribute/type/hive_table"
        assert request.url.params["attr:qualifiedName"] == "sales.orders@prod"
        body = json.loads(request.content)
        assert body["entity"]["attributes"]["qualifiedName"] == "sales.orders_v2@prod"

    def test_delete(self, repo_config):
        recorder = Recorder()
        make_repository(repo_config, recorder).delete_entity_by_unique_attribute(
            ResourceKind.STORAGE_DESCRIPTOR, "sales.orders@prod_storage"
        )

        (request,) = recorder.requests
        assert request.method == "DELETE"
        assert request.url.path == "/api/atlas/v2/entity/uniqueAttribute/type/hive_storagedesc"
        assert request.url.params["attr:qualifiedName"] == "sales.orders@prod_storage"

    def test_delete_of_absent_entity_succeeds(self, repo_config):
        repository = make_repository(repo_config, Recorder(status_code=404))
        repository.delete_entity_by_unique_attribute(ResourceKind.TABLE, "sales.gone@prod")


class TestErrors:

    def test_http_error_status(self, repo_config):
        repository = make_repository(repo_config, Recorder(status_code=500))

        with pytest.raises(RepositoryError, match="HTTP 500"):
            repository.create_entities([path_to_entity("hdfs://nn/x")])

    def test_update_not_found_is_an_error(self, repo_config):
        repository = make_repository(repo_config, Recorder(status_code=404))
        updates = rename_table_updates("sales", "orders", "orders_v2", "prod")

        with pytest.raises(RepositoryError):
            repository.update_entity_by_unique_attribute(ResourceKind.TABLE, updates.table_old_name, updates.table)

    def test_connection_error(self, repo_config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        repository = make_repository(repo_config, refuse)

        with pytest.raises(RepositoryConnectionError):
            repository.delete_entity_by_unique_attribute(ResourceKind.TABLE, "sales.orders@prod")


class TestCreateRepository:

    def test_dry_run(self):
        assert isinstance(create_repository(RepositoryConfig(dry_run=True)), InMemoryRepository)

    def test_rest(self):
        assert isinstance(create_repository(RepositoryConfig(dry_run=False)), AtlasRestRepository)
