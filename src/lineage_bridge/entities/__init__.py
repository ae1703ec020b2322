"""Entity model - qualified names, location URIs and entity graph builders."""

from .types import (
    Entity,
    EntityReference,
    EntityWithDependencies,
    ResourceKind,
    flatten_graphs,
)
from .uri import FileSystemDefaults, ResolvedUri, UriResolutionError, UriResolver, resolve_uri
from .builders import (
    RenameUpdates,
    database_to_entity,
    files_to_directory_entities,
    message_topic_to_entity,
    path_to_entity,
    rename_table_updates,
    table_to_entities,
    table_to_entities_for_alter,
    table_to_reference,
    wide_column_table_to_entity,
)

__all__ = [
    "Entity",
    "EntityReference",
    "EntityWithDependencies",
    "ResourceKind",
    "flatten_graphs",
    "FileSystemDefaults",
    "ResolvedUri",
    "UriResolutionError",
    "UriResolver",
    "resolve_uri",
    "RenameUpdates",
    "database_to_entity",
    "files_to_directory_entities",
    "message_topic_to_entity",
    "path_to_entity",
    "rename_table_updates",
    "table_to_entities",
    "table_to_entities_for_alter",
    "table_to_reference",
    "wide_column_table_to_entity",
]
