"""Catalog event types.

Pre-events carry coordinates only. Post-create and post-alter events also
carry only coordinates: the live definition is re-fetched from the
catalog. Drop pre-events are the last chance to read a definition before
the catalog discards it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AlterTableKind(str, Enum):
    """What an alter-table event changed."""
    TABLE = "table"
    DATA_SCHEMA = "dataSchema"
    STATS = "stats"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> AlterTableKind:
        """Map a catalog token to a kind; unknown tokens become OTHER."""
        for kind in cls:
            if value and kind.value.lower() == value.lower():
                return kind
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class CatalogEvent:
    """Base class of all catalog events."""


@dataclass(frozen=True, slots=True)
class DatabaseEvent(CatalogEvent):
    database: str


@dataclass(frozen=True, slots=True)
class TableEvent(CatalogEvent):
    database: str
    table: str


@dataclass(frozen=True, slots=True)
class CreateDatabasePreEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class CreateDatabaseEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class DropDatabasePreEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class DropDatabaseEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class AlterDatabasePreEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class AlterDatabaseEvent(DatabaseEvent):
    pass


@dataclass(frozen=True, slots=True)
class CreateTablePreEvent(TableEvent):
    pass


@dataclass(frozen=True, slots=True)
class CreateTableEvent(TableEvent):
    pass


@dataclass(frozen=True, slots=True)
class DropTablePreEvent(TableEvent):
    pass


@dataclass(frozen=True, slots=True)
class DropTableEvent(TableEvent):
    pass


@dataclass(frozen=True, slots=True)
class RenameTablePreEvent(TableEvent):
    new_name: str


@dataclass(frozen=True, slots=True)
class RenameTableEvent(TableEvent):
    new_name: str


@dataclass(frozen=True, slots=True)
class AlterTablePreEvent(TableEvent):
    kind: AlterTableKind = AlterTableKind.TABLE


@dataclass(frozen=True, slots=True)
class AlterTableEvent(TableEvent):
    kind: AlterTableKind = AlterTableKind.TABLE


EVENT_TYPES: dict[str, type[CatalogEvent]] = {
    cls.__name__: cls
    for cls in (
        CreateDatabasePreEvent,
        CreateDatabaseEvent,
        DropDatabasePreEvent,
        DropDatabaseEvent,
        AlterDatabasePreEvent,
        AlterDatabaseEvent,
        CreateTablePreEvent,
        CreateTableEvent,
        DropTablePreEvent,
        DropTableEvent,
        RenameTablePreEvent,
        RenameTableEvent,
        AlterTablePreEvent,
        AlterTableEvent,
    )
}


def event_from_dict(data: dict[str, Any]) -> CatalogEvent:
    """
    Build an event from a plain mapping.

    Format: `{"event": "RenameTableEvent", "database": "sales",
    "table": "orders", "new_name": "orders_v2"}`.

    Raises:
        ValueError: If the event name is unknown or fields are missing
    """
    data = dict(data)
    name = data.pop("event", None)
    cls = EVENT_TYPES.get(name or "")
    if cls is None:
        raise ValueError(f"Unknown catalog event: {name!r}")
    if "kind" in data:
        data["kind"] = AlterTableKind.parse(data["kind"])
    try:
        return cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid fields for {name}: {e}") from e
