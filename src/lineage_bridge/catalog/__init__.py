"""Catalog system - native definitions and the live-catalog lookup."""

from .types import (
    CatalogDatabase,
    CatalogStorageFormat,
    CatalogTable,
    MessageTopicInfo,
    TableType,
    WideColumnTableInfo,
)
from .registry import (
    CatalogLookup,
    CatalogNotFoundError,
    InMemoryCatalog,
    NoSuchDatabaseError,
    NoSuchTableError,
)

__all__ = [
    "CatalogDatabase",
    "CatalogStorageFormat",
    "CatalogTable",
    "MessageTopicInfo",
    "TableType",
    "WideColumnTableInfo",
    "CatalogLookup",
    "CatalogNotFoundError",
    "InMemoryCatalog",
    "NoSuchDatabaseError",
    "NoSuchTableError",
]
