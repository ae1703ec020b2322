"""Entity builders - native definitions to entity graphs.

Every builder is a pure function of its inputs: no catalog access, no
wall clock. Building the same definition twice yields identical
attribute maps (temporary tables without a session id excepted, see
`naming.table_qualified_name`).
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Iterable

from ..catalog.types import (
    CatalogDatabase,
    CatalogTable,
    MessageTopicInfo,
    TableType,
    WideColumnTableInfo,
)
from .naming import (
    DEFAULT_NAMESPACE,
    DISTRIBUTED_FS_SCHEME,
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
from .types import Entity, EntityReference, EntityWithDependencies, ResourceKind
from .uri import ResolvedUri, UriResolver


OBJECT_STORE_SCHEME = re.compile(r"s3[an]?")

_default_resolver = UriResolver()


# =============================================================================
# Catalog entities
# =============================================================================

def database_to_entity(
    db: CatalogDatabase,
    cluster: str,
    owner: str,
) -> EntityWithDependencies:
    """
    Build a database entity.

    The owner is supplied by the caller; catalog database definitions do
    not carry one reliably.
    """
    entity = Entity(
        kind=ResourceKind.DATABASE,
        attributes={
            "qualifiedName": database_qualified_name(cluster, db.name),
            "name": db.name.lower(),
            "clusterName": cluster,
            "location": db.location_uri,
            "description": db.description,
            "parameters": dict(db.properties),
            "owner": owner,
            "ownerType": "USER",
        },
    )
    return EntityWithDependencies(entity)


def qualified_name_for_table(
    table: CatalogTable,
    cluster: str,
    session_id: str | None = None,
) -> str:
    """Qualified name of a table definition, salting temporary tables."""
    return table_qualified_name(
        cluster,
        table.database,
        table.name,
        temporary=table.is_temporary,
        salt=table.session_id or session_id,
    )


def storage_descriptor_to_entity(
    table: CatalogTable,
    table_qualified_name: str,
) -> EntityWithDependencies:
    """Build the storage descriptor entity of a table."""
    storage = table.storage
    qualified_name = storage_descriptor_qualified_name(table_qualified_name)
    attributes = {
        "qualifiedName": qualified_name,
        "name": qualified_name,
        "location": storage.location_uri,
        "inputFormat": storage.input_format,
        "outputFormat": storage.output_format,
        "serde": storage.serde,
        "compressed": storage.compressed,
        "parameters": dict(storage.properties),
    }
    return EntityWithDependencies(Entity(ResourceKind.STORAGE_DESCRIPTOR, attributes))


def _table_entity(
    table: CatalogTable,
    qualified_name: str,
    db_ref: EntityReference,
    sd_ref: EntityReference,
) -> Entity:
    attributes = {
        "qualifiedName": qualified_name,
        "name": table.name.lower(),
        "owner": table.owner,
        "createTime": table.create_time,
        "lastAccessTime": table.last_access_time,
        "tableType": table.table_type.value,
        "temporary": table.is_temporary,
        "provider": table.provider,
        "partitionColumnNames": list(table.partition_column_names),
        "parameters": dict(table.properties),
        "comment": table.comment,
    }
    if table.table_type == TableType.VIEW:
        attributes["viewOriginalText"] = table.view_text

    return Entity(
        kind=ResourceKind.TABLE,
        attributes=attributes,
        relationship_attributes={"db": db_ref, "sd": sd_ref},
    )


def table_to_entities(
    table: CatalogTable,
    cluster: str,
    db_definition: CatalogDatabase | None = None,
    owner: str = "",
    session_id: str | None = None,
) -> EntityWithDependencies:
    """
    Build a table with its database and storage descriptor as dependencies.

    Without a pre-fetched database definition the `db` relationship is a
    reference only and the database is not part of the graph.
    """
    qualified_name = qualified_name_for_table(table, cluster, session_id)
    sd = storage_descriptor_to_entity(table, qualified_name)

    dependencies: list[EntityWithDependencies] = []
    if db_definition is not None:
        db = database_to_entity(db_definition, cluster, owner)
        dependencies.append(db)
        db_ref = db.entity.reference()
    else:
        db_ref = EntityReference(ResourceKind.DATABASE, database_qualified_name(cluster, table.database))
    dependencies.append(sd)

    entity = _table_entity(table, qualified_name, db_ref, sd.entity.reference())
    return EntityWithDependencies(entity, tuple(dependencies))


def table_to_entities_for_alter(
    table: CatalogTable,
    cluster: str,
    session_id: str | None = None,
) -> EntityWithDependencies:
    """
    Build a table for an alter: `db` and `sd` point at entities the
    repository already holds from the original create, no payload.
    """
    qualified_name = qualified_name_for_table(table, cluster, session_id)
    db_ref = EntityReference(ResourceKind.DATABASE, database_qualified_name(cluster, table.database))
    sd_ref = EntityReference(
        ResourceKind.STORAGE_DESCRIPTOR,
        storage_descriptor_qualified_name(qualified_name),
    )
    return EntityWithDependencies(_table_entity(table, qualified_name, db_ref, sd_ref))


def table_to_reference(db: str, table: str, cluster: str) -> EntityReference:
    return EntityReference(ResourceKind.TABLE, table_qualified_name(cluster, db, table))


@dataclass(frozen=True)
class RenameUpdates:
    """Minimal update entities for a table rename, keyed by their old names."""
    storage_descriptor: Entity
    storage_descriptor_old_name: str
    table: Entity
    table_old_name: str


def rename_table_updates(db: str, old_name: str, new_name: str, cluster: str) -> RenameUpdates:
    """
    Build the two updates that re-identify a renamed table.

    Each carries only the new qualified name and display name; applied
    against the old qualified name they rename the entity in place.
    """
    old_table = table_qualified_name(cluster, db, old_name)
    new_table = table_qualified_name(cluster, db, new_name)
    new_sd = storage_descriptor_qualified_name(new_table)

    return RenameUpdates(
        storage_descriptor=Entity(
            ResourceKind.STORAGE_DESCRIPTOR,
            {"qualifiedName": new_sd, "name": new_sd},
        ),
        storage_descriptor_old_name=storage_descriptor_qualified_name(old_table),
        table=Entity(
            ResourceKind.TABLE,
            {"qualifiedName": new_table, "name": new_name.lower()},
        ),
        table_old_name=old_table,
    )


# =============================================================================
# Path entities
# =============================================================================

def _object_store_entities(uri: ResolvedUri) -> EntityWithDependencies:
    """Object <- pseudo-directory <- bucket chain for an object-store URI."""
    bucket = uri.authority
    path = uri.path_without_scheme_and_authority
    dir_name, object_name = split_object_path(path)

    bucket_entity = Entity(
        ResourceKind.OBJECT_STORE_BUCKET,
        {"qualifiedName": bucket_qualified_name(bucket), "name": bucket},
    )

    dir_qualified_name = pseudo_directory_qualified_name(bucket, path)
    dir_entity = Entity(
        ResourceKind.OBJECT_STORE_PSEUDO_DIRECTORY,
        {
            "qualifiedName": dir_qualified_name,
            "name": dir_name,
            "objectPrefix": dir_qualified_name,
        },
        {"bucket": bucket_entity.reference()},
    )

    object_entity = Entity(
        ResourceKind.OBJECT_STORE_OBJECT,
        {
            "qualifiedName": object_qualified_name(bucket, path),
            "name": object_name,
            "path": path,
        },
        {"pseudoDirectory": dir_entity.reference()},
    )

    dir_node = EntityWithDependencies(dir_entity, (EntityWithDependencies(bucket_entity),))
    return EntityWithDependencies(object_entity, (dir_node,))


def uri_to_entity(uri: ResolvedUri) -> EntityWithDependencies:
    """
    Build the entity graph of a resolved location, dispatching on scheme.

    Unrecognized schemes fall back to a generic filesystem path.
    """
    if OBJECT_STORE_SCHEME.fullmatch(uri.scheme):
        return _object_store_entities(uri)

    bare_path = uri.path_without_scheme_and_authority.lower()
    attributes = {
        "qualifiedName": filesystem_path_qualified_name(uri),
        "name": bare_path,
        "path": bare_path,
    }
    if uri.scheme == DISTRIBUTED_FS_SCHEME:
        attributes["clusterName"] = uri.authority
        return EntityWithDependencies(Entity(ResourceKind.HDFS_PATH, attributes))

    return EntityWithDependencies(Entity(ResourceKind.FILESYSTEM_PATH, attributes))


def path_to_entity(path: str, resolver: UriResolver | None = None) -> EntityWithDependencies:
    """Resolve a raw location and build its entity graph."""
    return uri_to_entity((resolver or _default_resolver).resolve(path))


def files_to_directory_entities(
    files: Iterable[str],
    resolver: UriResolver | None = None,
) -> list[EntityWithDependencies]:
    """One path graph per distinct parent directory of the given files."""
    resolver = resolver or _default_resolver
    directories: dict[str, ResolvedUri] = {}
    for file in files:
        uri = resolver.resolve(file)
        parent = ResolvedUri(
            scheme=uri.scheme,
            authority=uri.authority,
            path=posixpath.dirname(uri.path_without_scheme_and_authority.rstrip("/")) or "/",
        )
        directories.setdefault(str(parent), parent)
    return [uri_to_entity(uri) for uri in directories.values()]


# =============================================================================
# External source entities
# =============================================================================

def wide_column_table_to_entity(cluster: str, info: WideColumnTableInfo) -> EntityWithDependencies:
    namespace = (info.namespace or DEFAULT_NAMESPACE).lower()
    table = info.table_name.lower()
    entity = Entity(
        ResourceKind.WIDE_COLUMN_TABLE,
        {
            "qualifiedName": wide_column_table_qualified_name(cluster, namespace, table),
            "name": table,
            "clusterName": cluster,
            "uri": f"{namespace}:{table}",
        },
    )
    return EntityWithDependencies(entity)


def message_topic_to_entity(cluster: str, info: MessageTopicInfo) -> EntityWithDependencies:
    topic = info.topic_name.lower()
    cluster_name = info.cluster_name or cluster
    entity = Entity(
        ResourceKind.MESSAGE_TOPIC,
        {
            "qualifiedName": message_topic_qualified_name(cluster, topic, info.cluster_name),
            "name": topic,
            "clusterName": cluster_name,
            "uri": topic,
            "topic": topic,
        },
    )
    return EntityWithDependencies(entity)
