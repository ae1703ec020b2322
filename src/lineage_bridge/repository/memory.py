"""In-memory repository - records calls instead of sending them."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from ..entities.types import Entity, EntityWithDependencies, ResourceKind, flatten_graphs
from .base import MetadataRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepositoryCall:
    """One recorded repository call."""
    operation: str  # create | update | delete
    kind: ResourceKind
    qualified_name: str
    payload: dict[str, Any] | None = None


@dataclass
class InMemoryRepository(MetadataRepository):
    """
    Repository that keeps entities in a dict and records every call.

    Used for dry runs and tests. Updates by unique attribute re-key the
    stored entity when the update carries a new qualifiedName.
    """
    calls: list[RepositoryCall] = field(default_factory=list)
    entities: dict[tuple[ResourceKind, str], dict[str, Any]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def create_entities(self, graphs: list[EntityWithDependencies]) -> None:
        with self._lock:
            for entity in flatten_graphs(graphs):
                payload = entity.to_dict()
                self.entities[entity.key] = payload
                self.calls.append(RepositoryCall("create", entity.kind, entity.qualified_name, payload))
                logger.debug(f"create {entity.kind.value} {entity.qualified_name}")

    def update_entity_by_unique_attribute(
        self,
        kind: ResourceKind,
        qualified_name: str,
        entity: Entity,
    ) -> None:
        payload = entity.to_dict()
        with self._lock:
            self.calls.append(RepositoryCall("update", kind, qualified_name, payload))
            current = self.entities.pop((kind, qualified_name), None)
            if current is not None:
                current["attributes"].update(payload["attributes"])
                self.entities[(kind, entity.qualified_name)] = current
        logger.debug(f"update {kind.value} {qualified_name} -> {entity.qualified_name}")

    def delete_entity_by_unique_attribute(self, kind: ResourceKind, qualified_name: str) -> None:
        with self._lock:
            self.calls.append(RepositoryCall("delete", kind, qualified_name))
            self.entities.pop((kind, qualified_name), None)
        logger.debug(f"delete {kind.value} {qualified_name}")

    def calls_of(self, operation: str) -> list[RepositoryCall]:
        return [c for c in self.calls if c.operation == operation]

    def reset(self) -> None:
        with self._lock:
            self.calls.clear()
            self.entities.clear()
