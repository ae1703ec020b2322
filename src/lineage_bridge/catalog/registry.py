"""Catalog lookup - the definition source the event processor reads from."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from .types import CatalogDatabase, CatalogTable

logger = logging.getLogger(__name__)


class CatalogNotFoundError(LookupError):
    """Raised when a catalog resource does not exist (anymore)."""
    pass


class NoSuchDatabaseError(CatalogNotFoundError):
    def __init__(self, db: str):
        super().__init__(f"Database '{db}' not found")
        self.db = db


class NoSuchTableError(CatalogNotFoundError):
    def __init__(self, db: str, table: str):
        super().__init__(f"Table '{db}.{table}' not found")
        self.db = db
        self.table = table


class CatalogLookup(ABC):
    """
    Read access to the live catalog.

    Post-create and post-alter events only carry names, so the processor
    re-fetches the definition through this interface.
    """

    @abstractmethod
    def get_database(self, name: str) -> CatalogDatabase:
        """Return a database definition or raise NoSuchDatabaseError."""
        ...

    @abstractmethod
    def get_table(self, db: str, name: str) -> CatalogTable:
        """Return a table definition or raise NoSuchTableError."""
        ...


@dataclass
class InMemoryCatalog(CatalogLookup):
    """
    Thread-safe in-memory catalog.

    Names are matched case-insensitively, as catalog identifiers are.
    """
    _databases: dict[str, CatalogDatabase] = field(default_factory=dict)
    _tables: dict[tuple[str, str], CatalogTable] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    def get_database(self, name: str) -> CatalogDatabase:
        with self._lock:
            db = self._databases.get(name.lower())
        if db is None:
            raise NoSuchDatabaseError(name)
        return db

    def get_table(self, db: str, name: str) -> CatalogTable:
        with self._lock:
            table = self._tables.get((db.lower(), name.lower()))
        if table is None:
            raise NoSuchTableError(db, name)
        return table

    def register_database(self, db: CatalogDatabase) -> None:
        with self._lock:
            self._databases[db.name.lower()] = db

    def register_table(self, table: CatalogTable) -> None:
        with self._lock:
            self._tables[(table.database.lower(), table.name.lower())] = table

    def drop_database(self, name: str) -> None:
        """Drop a database and every table in it."""
        key = name.lower()
        with self._lock:
            if self._databases.pop(key, None) is None:
                raise NoSuchDatabaseError(name)
            for table_key in [k for k in self._tables if k[0] == key]:
                del self._tables[table_key]

    def drop_table(self, db: str, name: str) -> None:
        with self._lock:
            if self._tables.pop((db.lower(), name.lower()), None) is None:
                raise NoSuchTableError(db, name)

    def rename_table(self, db: str, name: str, new_name: str) -> CatalogTable:
        with self._lock:
            table = self._tables.pop((db.lower(), name.lower()), None)
            if table is None:
                raise NoSuchTableError(db, name)
            renamed = replace(table, name=new_name)
            self._tables[(db.lower(), new_name.lower())] = renamed
        logger.debug(f"Renamed table {db}.{name} to {db}.{new_name}")
        return renamed

    def databases(self) -> list[str]:
        with self._lock:
            return sorted(self._databases)

    def tables(self, db: str) -> list[str]:
        with self._lock:
            return sorted(t for d, t in self._tables if d == db.lower())
