"""Entity types - resource kinds, entities and dependency graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


QUALIFIED_NAME = "qualifiedName"


class ResourceKind(str, Enum):
    """Resource kinds, valued by their repository type name."""
    DATABASE = "hive_db"
    TABLE = "hive_table"
    STORAGE_DESCRIPTOR = "hive_storagedesc"
    FILESYSTEM_PATH = "fs_path"
    HDFS_PATH = "hdfs_path"
    OBJECT_STORE_OBJECT = "aws_s3_object"
    OBJECT_STORE_BUCKET = "aws_s3_bucket"
    OBJECT_STORE_PSEUDO_DIRECTORY = "aws_s3_pseudo_dir"
    WIDE_COLUMN_TABLE = "hbase_table"
    MESSAGE_TOPIC = "kafka_topic"


@dataclass(frozen=True, slots=True)
class EntityReference:
    """
    Pointer to an entity by its unique attribute.

    Carries no payload; the repository resolves it against an entity
    it already holds (or one created earlier in the same request).
    """
    kind: ResourceKind
    qualified_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "typeName": self.kind.value,
            "uniqueAttributes": {QUALIFIED_NAME: self.qualified_name},
        }


def _serialize(value: Any) -> Any:
    if isinstance(value, EntityReference):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _serialize(value[k]) for k in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Entity:
    """
    A typed metadata entity.

    `attributes` hold plain values (str, bool, int timestamps in epoch
    millis, str->str maps). `relationship_attributes` hold
    EntityReference values. `qualifiedName` is mandatory: it is the
    identity the repository upserts, updates and deletes by.
    """
    kind: ResourceKind
    attributes: dict[str, Any] = field(default_factory=dict)
    relationship_attributes: dict[str, EntityReference] = field(default_factory=dict)

    def __post_init__(self):
        if not self.attributes.get(QUALIFIED_NAME):
            raise ValueError(f"{self.kind.value} entity requires a '{QUALIFIED_NAME}' attribute")

    @property
    def qualified_name(self) -> str:
        return self.attributes[QUALIFIED_NAME]

    @property
    def key(self) -> tuple[ResourceKind, str]:
        return (self.kind, self.qualified_name)

    def reference(self) -> EntityReference:
        """Reference-only pointer to this entity."""
        return EntityReference(self.kind, self.qualified_name)

    def to_dict(self) -> dict[str, Any]:
        """Repository payload (deterministic key order)."""
        data: dict[str, Any] = {
            "typeName": self.kind.value,
            "attributes": _serialize(self.attributes),
        }
        if self.relationship_attributes:
            data["relationshipAttributes"] = _serialize(self.relationship_attributes)
        return data


@dataclass(frozen=True)
class EntityWithDependencies:
    """
    An entity and the entities it depends on.

    Forms a DAG rooted at the primary entity, e.g. a table depending on
    its database and storage descriptor, or an object-store object
    depending on its pseudo-directory which depends on its bucket.
    """
    entity: Entity
    dependencies: tuple[EntityWithDependencies, ...] = ()

    @property
    def kind(self) -> ResourceKind:
        return self.entity.kind

    @property
    def qualified_name(self) -> str:
        return self.entity.qualified_name

    def iter_nodes(self) -> Iterator[EntityWithDependencies]:
        """Walk the graph depth-first, dependencies before this node."""
        for dep in self.dependencies:
            yield from dep.iter_nodes()
        yield self

    def flatten(self) -> list[Entity]:
        """Entities in creation order, each (kind, qualifiedName) once."""
        return flatten_graphs([self])


def flatten_graphs(graphs: list[EntityWithDependencies]) -> list[Entity]:
    """Flatten several graphs into one creation-ordered entity list."""
    seen: set[tuple[ResourceKind, str]] = set()
    ordered: list[Entity] = []
    for graph in graphs:
        for node in graph.iter_nodes():
            if node.entity.key in seen:
                continue
            seen.add(node.entity.key)
            ordered.append(node.entity)
    return ordered
