"""Qualified-name rules for every resource kind.

A qualified name is the repository's identity for an entity: it must be
reproducible from the same coordinates so that creates are idempotent
upserts and deletes/updates can address an entity without looking it up.

Catalog coordinates (databases, tables, namespaces, topics) are
lower-cased before concatenation, so names compare case-insensitively by
construction. Object-store bucket and object names keep their case, the
store itself is case-sensitive.
"""

from __future__ import annotations

import uuid

from .uri import ResolvedUri


DISTRIBUTED_FS_SCHEME = "hdfs"
OBJECT_STORE_PREFIX = "s3://"
STORAGE_SUFFIX = "_storage"
DEFAULT_NAMESPACE = "default"


def database_qualified_name(cluster: str, db: str) -> str:
    return f"{db.lower()}@{cluster}"


def table_qualified_name(
    cluster: str,
    db: str,
    table: str,
    *,
    temporary: bool = False,
    salt: str | None = None,
) -> str:
    """
    Qualified name of a catalog table.

    Temporary tables have no identity that survives their session, so the
    table component is suffixed with the session id, or a random string
    when there is no session. The same temporary table can therefore get
    different names across sessions; this is a known limitation.
    """
    table_part = table.lower()
    if temporary:
        table_part = f"{table_part}_{salt or uuid.uuid4().hex}"
    return f"{db.lower()}.{table_part}@{cluster}"


def storage_descriptor_qualified_name(table_qualified_name: str) -> str:
    return table_qualified_name + STORAGE_SUFFIX


def wide_column_table_qualified_name(cluster: str, namespace: str, table: str) -> str:
    """`namespace:table@cluster`, with any `namespace:` prefix stripped from the table."""
    namespace = (namespace or DEFAULT_NAMESPACE).lower()
    table = table.lower()
    prefix = f"{namespace}:"
    if table.startswith(prefix):
        table = table[len(prefix):]
    return f"{namespace}:{table}@{cluster}"


def message_topic_qualified_name(
    cluster: str,
    topic: str,
    custom_cluster: str | None = None,
) -> str:
    return f"{topic.lower()}@{custom_cluster or cluster}"


def filesystem_path_qualified_name(uri: ResolvedUri) -> str:
    """
    Qualified name of a filesystem path.

    Distributed filesystem paths are lower-cased in their path portion;
    every other scheme uses the URI string as-is.
    """
    if uri.scheme == DISTRIBUTED_FS_SCHEME:
        return f"{uri.scheme}://{uri.authority}{uri.path.lower()}"
    return str(uri)


def bucket_qualified_name(bucket: str) -> str:
    return f"{OBJECT_STORE_PREFIX}{bucket}"


def split_object_path(path: str) -> tuple[str, str]:
    """Split `/a/b/c.txt` into (`/a/b/`, `c.txt`)."""
    head, sep, tail = path.rpartition("/")
    return head + sep, tail


def pseudo_directory_qualified_name(bucket: str, path: str) -> str:
    directory, _ = split_object_path(path)
    return bucket_qualified_name(bucket) + directory


def object_qualified_name(bucket: str, path: str) -> str:
    _, name = split_object_path(path)
    return pseudo_directory_qualified_name(bucket, path) + name
