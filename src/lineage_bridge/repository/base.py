"""Metadata repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..entities.types import Entity, EntityWithDependencies, ResourceKind


class RepositoryError(Exception):
    """Base exception for metadata repository call failures."""
    pass


class RepositoryConnectionError(RepositoryError):
    """Raised when the repository cannot be reached."""
    pass


class MetadataRepository(ABC):
    """
    Abstract metadata repository client.

    Calls are synchronous and not retried; a failure raises RepositoryError
    and the triggering event is considered lost.
    """

    @abstractmethod
    def create_entities(self, graphs: list[EntityWithDependencies]) -> None:
        """
        Create or update every entity of the given graphs.

        Dependencies are sent before the entities referencing them.
        """
        ...

    @abstractmethod
    def update_entity_by_unique_attribute(
        self,
        kind: ResourceKind,
        qualified_name: str,
        entity: Entity,
    ) -> None:
        """Apply `entity`'s attributes to the entity currently named `qualified_name`."""
        ...

    @abstractmethod
    def delete_entity_by_unique_attribute(self, kind: ResourceKind, qualified_name: str) -> None:
        """Delete the entity of `kind` named `qualified_name`."""
        ...
