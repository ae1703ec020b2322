"""Location URI resolution.

Catalog locations arrive as anything from `s3a://bucket/key` to a bare
relative path. Qualified names for paths are built from the resolved
URI, so scheme-less locations are qualified against the ambient default
filesystem first.
"""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import SplitResult, urlsplit

from ..config import FileSystemConfig, current_user


logger = logging.getLogger(__name__)

LOCAL_SCHEME = "file"


class UriResolutionError(ValueError):
    """Raised when a location cannot be turned into a URI at all."""
    pass


@dataclass(frozen=True, slots=True)
class ResolvedUri:
    """
    An absolute, scheme-qualified location.

    `text` is the rendered URI. For locations that already carried a
    scheme it is the input string unchanged.
    """
    scheme: str
    authority: str
    path: str
    query: str = ""
    fragment: str = ""
    text: str = ""

    def __str__(self) -> str:
        return self.text or self.render()

    def render(self) -> str:
        uri = f"{self.scheme}://{self.authority}{self.path}"
        if self.query:
            uri += f"?{self.query}"
        if self.fragment:
            uri += f"#{self.fragment}"
        return uri

    @property
    def path_without_scheme_and_authority(self) -> str:
        return self.path or "/"

    @classmethod
    def from_split(cls, parts: SplitResult, text: str) -> ResolvedUri:
        return cls(
            scheme=parts.scheme,
            authority=parts.netloc,
            path=parts.path,
            query=parts.query,
            fragment=parts.fragment,
            text=text,
        )


@dataclass(frozen=True, slots=True)
class FileSystemDefaults:
    """Default filesystem used to qualify scheme-less locations."""
    default_fs: str = "file:///"
    working_directory: str | None = None

    @classmethod
    def from_config(cls, config: FileSystemConfig) -> FileSystemDefaults:
        return cls(default_fs=config.default_fs, working_directory=config.working_directory)


class UriResolver:
    """
    Turns raw location strings into absolute URIs.

    - Strings that parse with a scheme are returned unchanged.
    - Scheme-less strings are qualified with the default filesystem.
    - Local (`file`) results use the long `file:///abs/path` form and keep
      any `#fragment` (distributed-cache style references).
    - Strings that fail to parse are treated as absolute local paths.
    """

    def __init__(self, defaults: FileSystemDefaults | None = None):
        self.defaults = defaults or FileSystemDefaults()
        self._default_parts = urlsplit(self.defaults.default_fs)

    def resolve(self, raw: str) -> ResolvedUri:
        if raw is None or not raw.strip():
            raise UriResolutionError("Cannot resolve an empty location")

        try:
            parts = urlsplit(raw)
        except ValueError as e:
            logger.debug(f"Unparseable location '{raw}' ({e}), treating as local path")
            return self._local(raw)

        if parts.scheme:
            return ResolvedUri.from_split(parts, text=raw)

        if self._default_parts.scheme in ("", LOCAL_SCHEME):
            local_path = parts.path + (f"?{parts.query}" if parts.query else "")
            return self._local(local_path, parts.fragment)

        return self._remote(parts)

    def _local(self, path: str, fragment: str = "") -> ResolvedUri:
        base = self.defaults.working_directory
        absolute = os.path.abspath(os.path.join(base, path) if base else path)
        uri = Path(absolute).as_uri()
        parts = urlsplit(uri)
        text = f"{uri}#{fragment}" if fragment else uri
        return ResolvedUri(
            scheme=LOCAL_SCHEME,
            authority=parts.netloc,
            path=parts.path,
            fragment=fragment,
            text=text,
        )

    def _remote(self, parts: SplitResult) -> ResolvedUri:
        path = parts.path
        if not path.startswith("/"):
            working = self.defaults.working_directory or f"/user/{current_user()}"
            path = posixpath.join(working, path)
        path = posixpath.normpath(path)
        if path.startswith("//"):
            path = "/" + path.lstrip("/")

        return ResolvedUri(
            scheme=self._default_parts.scheme,
            authority=self._default_parts.netloc,
            path=path,
            query=parts.query,
            fragment=parts.fragment,
        )


def resolve_uri(raw: str, defaults: FileSystemDefaults | None = None) -> ResolvedUri:
    """Resolve a location with a one-off resolver."""
    return UriResolver(defaults).resolve(raw)
