"""Catalog types - native definitions of databases, tables and external sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TableType(str, Enum):
    """Catalog table types."""
    MANAGED = "MANAGED"
    EXTERNAL = "EXTERNAL"
    VIEW = "VIEW"


@dataclass(frozen=True, slots=True)
class CatalogDatabase:
    """Definition of a catalog database as the catalog reports it."""
    name: str
    location_uri: str
    description: str = ""
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CatalogStorageFormat:
    """Where and how a table's data is stored."""
    location_uri: str | None = None
    input_format: str | None = None
    output_format: str | None = None
    serde: str | None = None
    compressed: bool = False
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CatalogTable:
    """
    Definition of a catalog table.

    Timestamps are epoch milliseconds as recorded by the catalog; entity
    builders copy them verbatim so rebuilding a table is idempotent.
    """
    database: str
    name: str
    table_type: TableType = TableType.MANAGED
    storage: CatalogStorageFormat = field(default_factory=CatalogStorageFormat)
    provider: str | None = None
    partition_column_names: tuple[str, ...] = ()
    owner: str = ""
    create_time: int = 0
    last_access_time: int = -1
    properties: dict[str, str] = field(default_factory=dict)
    comment: str | None = None
    view_text: str | None = None

    # Temporary tables live for one session only
    is_temporary: bool = False
    session_id: str | None = None

    @property
    def identifier(self) -> str:
        return f"{self.database}.{self.name}"


@dataclass(frozen=True, slots=True)
class WideColumnTableInfo:
    """An HBase-style table addressed by namespace and name."""
    namespace: str
    table_name: str


@dataclass(frozen=True, slots=True)
class MessageTopicInfo:
    """A message-bus topic, optionally on a cluster other than ours."""
    topic_name: str
    cluster_name: str | None = None
