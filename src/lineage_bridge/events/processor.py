"""Catalog event processor - catalog events to repository calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ..catalog.registry import CatalogLookup, CatalogNotFoundError
from ..catalog.types import CatalogDatabase, CatalogTable
from ..config import Config
from ..entities.builders import (
    database_to_entity,
    path_to_entity,
    qualified_name_for_table,
    rename_table_updates,
    table_to_entities,
    table_to_entities_for_alter,
)
from ..entities.naming import (
    database_qualified_name,
    storage_descriptor_qualified_name,
    table_qualified_name,
)
from ..entities.types import ResourceKind
from ..entities.uri import FileSystemDefaults, UriResolutionError, UriResolver
from ..repository.base import MetadataRepository
from .cache import CorrelationCache
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
)


logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """What processing an event did at the repository boundary."""
    NO_OP = "no_op"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_CASCADE = "delete_cascade"
    IGNORED = "ignored"


@dataclass
class CatalogEventProcessor:
    """
    Translates catalog events into metadata repository calls.

    Events must be processed one at a time, in delivery order: a drop
    pre-event caches the definition the matching post-event needs.
    Repository failures propagate to the caller; unrecognized events are
    logged and dropped.
    """
    repository: MetadataRepository
    catalog: CatalogLookup
    config: Config = field(default_factory=Config)
    cache: CorrelationCache | None = None
    resolver: UriResolver | None = None

    _handlers: dict[type, Callable[[CatalogEvent], Outcome]] = field(default_factory=dict, init=False)

    def __post_init__(self):
        if self.cache is None:
            self.cache = CorrelationCache(
                max_size=self.config.cache.max_size,
                ttl_seconds=self.config.cache.ttl_seconds,
            )
        if self.resolver is None:
            self.resolver = UriResolver(FileSystemDefaults.from_config(self.config.filesystem))

        self._handlers = {
            CreateDatabasePreEvent: self._no_op,
            CreateDatabaseEvent: self._create_database,
            DropDatabasePreEvent: self._stage_database_drop,
            DropDatabaseEvent: self._drop_database,
            AlterDatabasePreEvent: self._no_op,
            AlterDatabaseEvent: self._alter_database,
            CreateTablePreEvent: self._no_op,
            CreateTableEvent: self._create_table,
            DropTablePreEvent: self._stage_table_drop,
            DropTableEvent: self._drop_table,
            RenameTablePreEvent: self._no_op,
            RenameTableEvent: self._rename_table,
            AlterTablePreEvent: self._no_op,
            AlterTableEvent: self._alter_table,
        }

    @property
    def cluster(self) -> str:
        return self.config.cluster.cluster_name

    def process(self, event: CatalogEvent) -> Outcome:
        """Process a single event."""
        for cls in type(event).__mro__:
            handler = self._handlers.get(cls)
            if handler is not None:
                return handler(event)

        logger.debug(f"Drop unknown event {event!r}")
        return Outcome.IGNORED

    __call__ = process

    # -------------------------------------------------------------------------
    # Catalog access
    # -------------------------------------------------------------------------

    def _fetch_database(self, db: str) -> CatalogDatabase | None:
        try:
            return self.catalog.get_database(db)
        except CatalogNotFoundError:
            return None

    def _fetch_table(self, db: str, table: str) -> CatalogTable | None:
        try:
            return self.catalog.get_table(db, table)
        except CatalogNotFoundError:
            return None

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _no_op(self, event: CatalogEvent) -> Outcome:
        return Outcome.NO_OP

    def _upsert_database(self, db: str) -> bool:
        definition = self._fetch_database(db)
        if definition is None:
            logger.warning(f"Database {db} vanished before it could be recorded")
            return False
        entity = database_to_entity(definition, self.cluster, self.config.cluster.owner)
        self.repository.create_entities([entity])
        return True

    def _create_database(self, event: CreateDatabaseEvent) -> Outcome:
        if not self._upsert_database(event.database):
            return Outcome.IGNORED
        logger.debug(f"Created db entity {event.database}")
        return Outcome.CREATE

    def _alter_database(self, event: AlterDatabaseEvent) -> Outcome:
        if not self._upsert_database(event.database):
            return Outcome.IGNORED
        logger.debug(f"Updated db entity {event.database}")
        return Outcome.UPDATE

    def _stage_database_drop(self, event: DropDatabasePreEvent) -> Outcome:
        definition = self._fetch_database(event.database)
        if definition is None:
            logger.debug(f"Catalog already deleted the database: {event.database}")
        else:
            self.cache.put(database_qualified_name(self.cluster, event.database), definition)
        return Outcome.NO_OP

    def _drop_database(self, event: DropDatabaseEvent) -> Outcome:
        qualified_name = database_qualified_name(self.cluster, event.database)
        self.repository.delete_entity_by_unique_attribute(ResourceKind.DATABASE, qualified_name)
        logger.debug(f"Deleted db entity {event.database}")

        definition: CatalogDatabase | None = self.cache.take(qualified_name)
        if definition is None or not definition.location_uri:
            return Outcome.DELETE

        try:
            path = path_to_entity(definition.location_uri, self.resolver)
        except UriResolutionError as e:
            logger.warning(f"Cannot resolve location of dropped database {event.database}: {e}")
            return Outcome.DELETE
        self.repository.delete_entity_by_unique_attribute(path.kind, path.qualified_name)
        logger.debug(f"Deleted path entity {path.qualified_name} of db {event.database}")
        return Outcome.DELETE_CASCADE

    def _create_table(self, event: CreateTableEvent) -> Outcome:
        table = self._fetch_table(event.database, event.table)
        if table is None:
            logger.warning(f"Table {event.database}.{event.table} vanished before it could be recorded")
            return Outcome.IGNORED

        graph = table_to_entities(
            table,
            self.cluster,
            db_definition=self._fetch_database(event.database),
            owner=self.config.cluster.owner,
            session_id=self.config.cluster.session_id,
        )
        self.repository.create_entities([graph])
        logger.debug(f"Created table entity {event.table} without columns")
        return Outcome.CREATE

    def _stage_table_drop(self, event: DropTablePreEvent) -> Outcome:
        table = self._fetch_table(event.database, event.table)
        if table is None:
            logger.debug(f"Catalog already deleted the table: {event.database}.{event.table}")
        else:
            self.cache.put(table_qualified_name(self.cluster, event.database, event.table), table)
        return Outcome.NO_OP

    def _drop_table(self, event: DropTableEvent) -> Outcome:
        qualified_name = table_qualified_name(self.cluster, event.database, event.table)
        definition: CatalogTable | None = self.cache.take(qualified_name)

        if definition is None:
            self.repository.delete_entity_by_unique_attribute(ResourceKind.TABLE, qualified_name)
            logger.debug(f"Deleted table entity {event.table}")
            return Outcome.DELETE

        # Temporary tables were created under a session-salted name
        if definition.is_temporary and not (definition.session_id or self.config.cluster.session_id):
            logger.warning(
                f"Cannot address temporary table {event.database}.{event.table} without a session id, "
                "leaving its entities in the repository"
            )
            return Outcome.IGNORED
        table_name = qualified_name_for_table(definition, self.cluster, self.config.cluster.session_id)

        self.repository.delete_entity_by_unique_attribute(ResourceKind.TABLE, table_name)
        logger.debug(f"Deleted table entity {table_name}")
        self.repository.delete_entity_by_unique_attribute(
            ResourceKind.STORAGE_DESCRIPTOR,
            storage_descriptor_qualified_name(table_name),
        )
        logger.debug(f"Deleted storage entity for {event.database}.{event.table}")
        return Outcome.DELETE_CASCADE

    def _rename_table(self, event: RenameTableEvent) -> Outcome:
        updates = rename_table_updates(event.database, event.table, event.new_name, self.cluster)
        self.repository.update_entity_by_unique_attribute(
            ResourceKind.STORAGE_DESCRIPTOR,
            updates.storage_descriptor_old_name,
            updates.storage_descriptor,
        )
        self.repository.update_entity_by_unique_attribute(
            ResourceKind.TABLE,
            updates.table_old_name,
            updates.table,
        )
        logger.debug(f"Rename table entity {event.table} to {event.new_name}")
        return Outcome.UPDATE

    def _alter_table(self, event: AlterTableEvent) -> Outcome:
        if event.kind == AlterTableKind.DATA_SCHEMA:
            logger.debug(
                "Detected updating of table schema but ignored: "
                "column update will not be tracked here"
            )
            return Outcome.IGNORED
        if event.kind == AlterTableKind.STATS:
            logger.debug("Stats update will not be tracked here")
            return Outcome.IGNORED
        if event.kind != AlterTableKind.TABLE:
            logger.debug(f"Ignoring alter of kind {event.kind.value} on {event.database}.{event.table}")
            return Outcome.IGNORED

        table = self._fetch_table(event.database, event.table)
        if table is None:
            logger.warning(f"Table {event.database}.{event.table} vanished before its alter could be recorded")
            return Outcome.IGNORED

        graph = table_to_entities_for_alter(table, self.cluster, self.config.cluster.session_id)
        self.repository.create_entities([graph])
        logger.debug(f"Updated table entity {event.table} without columns")
        return Outcome.UPDATE
