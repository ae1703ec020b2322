"""Shared test fixtures for the lineage bridge."""

import sys
from pathlib import Path

import pytest

# Run against the local src tree without an install
_REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from lineage_bridge.catalog.registry import InMemoryCatalog
from lineage_bridge.catalog.types import (
    CatalogDatabase,
    CatalogStorageFormat,
    CatalogTable,
    TableType,
)
from lineage_bridge.config import CacheConfig, ClusterConfig, Config, FileSystemConfig
from lineage_bridge.events.processor import CatalogEventProcessor
from lineage_bridge.repository.memory import InMemoryRepository


CLUSTER = "prod"


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def sales_db() -> CatalogDatabase:
    return CatalogDatabase(
        name="Sales",
        location_uri="hdfs://nn:8020/warehouse/sales.db",
        description="Sales data mart",
        properties={"team": "revenue"},
    )


@pytest.fixture
def orders_table() -> CatalogTable:
    return CatalogTable(
        database="sales",
        name="Orders",
        table_type=TableType.EXTERNAL,
        storage=CatalogStorageFormat(
            location_uri="hdfs:///warehouse/t",
            input_format="org.apache.hadoop.mapred.TextInputFormat",
            output_format="org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat",
            serde="org.apache.hadoop.hive.serde2.lazy.LazySimpleSerDe",
            properties={"serialization.format": "1"},
        ),
        provider="hive",
        partition_column_names=("dt",),
        owner="etl",
        create_time=1700000000000,
        properties={"transient_lastDdlTime": "1700000000"},
    )


@pytest.fixture
def catalog(sales_db, orders_table) -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.register_database(sales_db)
    catalog.register_table(orders_table)
    return catalog


# =============================================================================
# Processor Fixtures
# =============================================================================

@pytest.fixture
def config() -> Config:
    """Test configuration, independent of LINEAGE_BRIDGE_* variables."""
    return Config(
        cluster=ClusterConfig(cluster_name=CLUSTER, owner="catalog-admin", session_id=None),
        cache=CacheConfig(ttl_seconds=600.0, max_size=100),
        filesystem=FileSystemConfig(default_fs="file:///", working_directory="/tmp"),
    )


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def processor(repository, catalog, config) -> CatalogEventProcessor:
    return CatalogEventProcessor(repository=repository, catalog=catalog, config=config)
