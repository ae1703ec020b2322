"""Catalog loader - builds an in-memory catalog from YAML/JSON files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .registry import InMemoryCatalog
from .types import CatalogDatabase, CatalogStorageFormat, CatalogTable, TableType


logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Loads catalog definitions from YAML or JSON files.

    File format:
    ```yaml
    sales:
      location: hdfs://nn:8020/warehouse/sales.db
      description: Sales data mart
      properties:
        team: revenue
      tables:
        orders:
          type: EXTERNAL
          owner: etl
          create_time: 1700000000000
          provider: parquet
          partition_columns: [dt]
          storage:
            location: s3a://lake/sales/orders
            input_format: org.apache.hadoop.mapred.TextInputFormat
    ```
    """

    def load_file(self, path: str | Path) -> InMemoryCatalog:
        """Load catalog from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                import json
                data = json.load(f)

        return self.load_dict(data or {})

    def load_dict(self, data: dict[str, Any], catalog: InMemoryCatalog | None = None) -> InMemoryCatalog:
        """Load catalog from a dictionary, optionally into an existing catalog."""
        catalog = catalog if catalog is not None else InMemoryCatalog()

        for db_name, db_data in data.items():
            db_data = db_data or {}
            catalog.register_database(self.parse_database(db_name, db_data))
            for table_name, table_data in (db_data.get("tables") or {}).items():
                catalog.register_table(self.parse_table(db_name, table_name, table_data or {}))
                logger.debug(f"Loaded catalog table: {db_name}.{table_name}")

        logger.info(f"Loaded {len(catalog.databases())} databases")
        return catalog

    def parse_database(self, name: str, data: dict[str, Any]) -> CatalogDatabase:
        return CatalogDatabase(
            name=name,
            location_uri=data.get("location", ""),
            description=data.get("description", ""),
            properties=dict(data.get("properties", {})),
        )

    def parse_table(self, db: str, name: str, data: dict[str, Any]) -> CatalogTable:
        """Parse a single table definition from dictionary."""
        table_type = TableType.MANAGED
        if "type" in data:
            try:
                table_type = TableType(str(data["type"]).upper())
            except ValueError:
                logger.warning(f"Unknown table type '{data['type']}' for {db}.{name}, defaulting to MANAGED")

        sd_data = data.get("storage", {})
        storage = CatalogStorageFormat(
            location_uri=sd_data.get("location"),
            input_format=sd_data.get("input_format"),
            output_format=sd_data.get("output_format"),
            serde=sd_data.get("serde"),
            compressed=sd_data.get("compressed", False),
            properties=dict(sd_data.get("properties", {})),
        )

        return CatalogTable(
            database=db,
            name=name,
            table_type=table_type,
            storage=storage,
            provider=data.get("provider"),
            partition_column_names=tuple(data.get("partition_columns", [])),
            owner=data.get("owner", ""),
            create_time=int(data.get("create_time", 0)),
            last_access_time=int(data.get("last_access_time", -1)),
            properties=dict(data.get("properties", {})),
            comment=data.get("comment"),
            view_text=data.get("view_text"),
            is_temporary=data.get("temporary", False),
            session_id=data.get("session_id"),
        )


def load_catalog(source: str | Path | dict) -> InMemoryCatalog:
    """
    Convenience function to load a catalog.

    Args:
        source: File path or dictionary

    Returns:
        InMemoryCatalog with loaded databases and tables
    """
    loader = CatalogLoader()

    if isinstance(source, dict):
        return loader.load_dict(source)
    return loader.load_file(source)
