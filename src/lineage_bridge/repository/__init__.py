"""Metadata repository clients."""

from ..config import RepositoryConfig
from .base import MetadataRepository, RepositoryConnectionError, RepositoryError
from .memory import InMemoryRepository, RepositoryCall
from .rest import AtlasRestRepository


def create_repository(config: RepositoryConfig) -> MetadataRepository:
    """Build the repository client a configuration asks for."""
    if config.dry_run:
        return InMemoryRepository()
    return AtlasRestRepository(config=config)


__all__ = [
    "MetadataRepository",
    "RepositoryConnectionError",
    "RepositoryError",
    "InMemoryRepository",
    "RepositoryCall",
    "AtlasRestRepository",
    "create_repository",
]
