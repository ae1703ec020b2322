"""Catalog events - types, correlation cache, processor and dispatcher."""

from .types import (
    AlterDatabaseEvent,
    AlterDatabasePreEvent,
    AlterTableEvent,
    AlterTableKind,
    AlterTablePreEvent,
    CatalogEvent,
    CreateDatabaseEvent,
    CreateDatabasePreEvent,
    CreateTableEvent,
    CreateTablePreEvent,
    DropDatabaseEvent,
    DropDatabasePreEvent,
    DropTableEvent,
    DropTablePreEvent,
    RenameTableEvent,
    RenameTablePreEvent,
    event_from_dict,
)
from .cache import CorrelationCache
from .processor import CatalogEventProcessor, Outcome
from .dispatcher import EventDispatcher

__all__ = [
    "AlterDatabaseEvent",
    "AlterDatabasePreEvent",
    "AlterTableEvent",
    "AlterTableKind",
    "AlterTablePreEvent",
    "CatalogEvent",
    "CreateDatabaseEvent",
    "CreateDatabasePreEvent",
    "CreateTableEvent",
    "CreateTablePreEvent",
    "DropDatabaseEvent",
    "DropDatabasePreEvent",
    "DropTableEvent",
    "DropTablePreEvent",
    "RenameTableEvent",
    "RenameTablePreEvent",
    "event_from_dict",
    "CorrelationCache",
    "CatalogEventProcessor",
    "Outcome",
    "EventDispatcher",
]
