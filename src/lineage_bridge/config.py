"""Configuration for the lineage bridge."""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass, field
from typing import Any


class ConfigError(ValueError):
    """Raised when a configuration file or section is invalid."""
    pass


def _env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(f"LINEAGE_BRIDGE_{name}", default)


def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


@dataclass
class ClusterConfig:
    """Identity of the catalog cluster being mirrored."""
    # Suffix of every qualified name (name@cluster)
    cluster_name: str = field(
        default_factory=lambda: _env("CLUSTER_NAME", "primary")
    )

    # Owner stamped on database entities (catalog definitions carry none)
    owner: str = field(
        default_factory=lambda: _env("OWNER") or current_user()
    )

    # Salt for temporary table names; random per build when unset
    session_id: str | None = field(
        default_factory=lambda: _env("SESSION_ID")
    )


@dataclass
class RepositoryConfig:
    """Metadata repository (Atlas REST) connection."""
    url: str = field(
        default_factory=lambda: _env("REPOSITORY_URL", "http://localhost:21000")
    )
    username: str | None = field(
        default_factory=lambda: _env("REPOSITORY_USERNAME")
    )
    password: str | None = field(
        default_factory=lambda: _env("REPOSITORY_PASSWORD")
    )
    timeout_seconds: float = field(
        default_factory=lambda: float(_env("REPOSITORY_TIMEOUT", "30"))
    )

    # Record calls in memory instead of sending them
    dry_run: bool = False


@dataclass
class CacheConfig:
    """Bounds of the pre-drop correlation cache."""
    ttl_seconds: float = 600.0  # 10 minutes
    max_size: int = 10000


@dataclass
class DispatcherConfig:
    """Event delivery queue."""
    max_queue_size: int = 10000
    poll_interval_seconds: float = 1.0


@dataclass
class FileSystemConfig:
    """Ambient filesystem used to qualify scheme-less locations."""
    default_fs: str = field(
        default_factory=lambda: _env("DEFAULT_FS", "file:///")
    )

    # None = process working directory
    working_directory: str | None = None


@dataclass
class Config:
    """Main configuration container."""
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    dispatcher: DispatcherConfig = field(default_factory=DispatcherConfig)
    filesystem: FileSystemConfig = field(default_factory=FileSystemConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from dictionary."""
        try:
            return cls(
                cluster=ClusterConfig(**data.get("cluster", {})),
                repository=RepositoryConfig(**data.get("repository", {})),
                cache=CacheConfig(**data.get("cache", {})),
                dispatcher=DispatcherConfig(**data.get("dispatcher", {})),
                filesystem=FileSystemConfig(**data.get("filesystem", {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | None) -> Config:
        """Load from a YAML/JSON file by suffix, or defaults when no path."""
        if not path:
            return cls()
        if path.endswith((".yaml", ".yml")):
            return cls.from_yaml(path)
        return cls.from_json(path)
