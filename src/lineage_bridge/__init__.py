"""
Catalog Lineage Bridge - catalog events to metadata entities

Listens to the lifecycle events of a table catalog and mirrors them into
a metadata/lineage repository:
- Stable qualified names for databases, tables, storage and paths
- Entity graphs with dependencies created before dependents
- Pre-drop snapshots so post-drop events can retire derived entities
"""

__version__ = "0.1.0"
