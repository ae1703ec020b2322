"""Tests for qualified-name rules."""

from lineage_bridge.entities.naming import (
    bucket_qualified_name,
    database_qualified_name,
    filesystem_path_qualified_name,
    message_topic_qualified_name,
    object_qualified_name,
    pseudo_directory_qualified_name,
    split_object_path,
    storage_descriptor_qualified_name,
    table_qualified_name,
    wide_column_table_qualified_name,
)
from lineage_bridge.entities.uri import ResolvedUri, resolve_uri


class TestCatalogNames:
    """Database, table and storage descriptor names."""

    def test_database(self):
        assert database_qualified_name("prod", "Sales") == "sales@prod"

    def test_table_is_case_insensitive(self):
        assert table_qualified_name("prod", "Sales", "Orders") == "sales.orders@prod"
        assert table_qualified_name("prod", "SALES", "orders") == table_qualified_name("prod", "sales", "ORDERS")

    def test_cluster_keeps_its_case(self):
        assert database_qualified_name("Prod-East", "sales") == "sales@Prod-East"

    def test_storage_descriptor_suffix(self):
        assert storage_descriptor_qualified_name("sales.orders@prod") == "sales.orders@prod_storage"

    def test_temporary_table_salted_with_session(self):
        name = table_qualified_name("prod", "sales", "Scratch", temporary=True, salt="sess42")
        assert name == "sales.scratch_sess42@prod"

    def test_temporary_table_without_session_gets_random_salt(self):
        first = table_qualified_name("prod", "sales", "scratch", temporary=True)
        second = table_qualified_name("prod", "sales", "scratch", temporary=True)

        assert first.startswith("sales.scratch_")
        assert first.endswith("@prod")
        assert first != second

    def test_salt_ignored_for_permanent_tables(self):
        assert table_qualified_name("prod", "sales", "orders", salt="sess42") == "sales.orders@prod"


class TestExternalSourceNames:
    """Wide-column tables and message topics."""

    def test_wide_column_table(self):
        assert wide_column_table_qualified_name("prod", "Analytics", "Events") == "analytics:events@prod"

    def test_wide_column_strips_namespace_prefix(self):
        assert wide_column_table_qualified_name("prod", "analytics", "analytics:events") == "analytics:events@prod"

    def test_wide_column_default_namespace(self):
        assert wide_column_table_qualified_name("prod", "", "events") == "default:events@prod"

    def test_topic_uses_own_cluster(self):
        assert message_topic_qualified_name("prod", "Clicks") == "clicks@prod"

    def test_topic_on_custom_cluster(self):
        assert message_topic_qualified_name("prod", "clicks", "kafka-eu") == "clicks@kafka-eu"


class TestPathNames:
    """Filesystem and object-store names."""

    def test_distributed_path_lowercased(self):
        uri = resolve_uri("hdfs://nn:8020/Warehouse/Sales.db")
        assert filesystem_path_qualified_name(uri) == "hdfs://nn:8020/warehouse/sales.db"

    def test_distributed_path_keeps_authority_case(self):
        uri = ResolvedUri(scheme="hdfs", authority="NameNode:8020", path="/A")
        assert filesystem_path_qualified_name(uri) == "hdfs://NameNode:8020/a"

    def test_other_schemes_unchanged(self):
        uri = resolve_uri("gs://Bucket/Some/Path")
        assert filesystem_path_qualified_name(uri) == "gs://Bucket/Some/Path"

    def test_split_object_path(self):
        assert split_object_path("/a/b/c.txt") == ("/a/b/", "c.txt")
        assert split_object_path("/c.txt") == ("/", "c.txt")

    def test_object_store_names(self):
        assert bucket_qualified_name("MyBucket") == "s3://MyBucket"
        assert pseudo_directory_qualified_name("MyBucket", "/a/B/c.txt") == "s3://MyBucket/a/B/"
        assert object_qualified_name("MyBucket", "/a/B/c.txt") == "s3://MyBucket/a/B/c.txt"
