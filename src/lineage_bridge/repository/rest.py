"""Atlas REST repository client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..config import RepositoryConfig
from ..entities.types import (
    QUALIFIED_NAME,
    Entity,
    EntityWithDependencies,
    ResourceKind,
    flatten_graphs,
)
from .base import MetadataRepository, RepositoryConnectionError, RepositoryError


logger = logging.getLogger(__name__)

API_ROOT = "/api/atlas/v2"


@dataclass
class AtlasRestRepository(MetadataRepository):
    """
    Repository client for the Atlas v2 REST API.

    Usage:
        repo = AtlasRestRepository(RepositoryConfig(url="http://atlas:21000"))
        repo.create_entities([graph])

    Endpoints:
        POST   /entity/bulk                                      create/update
        PUT    /entity/uniqueAttribute/type/{type}?attr:qualifiedName=...  update
        DELETE /entity/uniqueAttribute/type/{type}?attr:qualifiedName=...  delete
    """
    config: RepositoryConfig = field(default_factory=RepositoryConfig)

    # Custom transport (tests use httpx.MockTransport)
    transport: httpx.BaseTransport | None = None

    def create_entities(self, graphs: list[EntityWithDependencies]) -> None:
        entities = flatten_graphs(graphs)
        if not entities:
            return
        body = {"entities": [e.to_dict() for e in entities]}
        self._request("POST", "/entity/bulk", json=body)
        logger.debug(f"Created {len(entities)} entities: {[e.qualified_name for e in entities]}")

    def update_entity_by_unique_attribute(
        self,
        kind: ResourceKind,
        qualified_name: str,
        entity: Entity,
    ) -> None:
        self._request(
            "PUT",
            f"/entity/uniqueAttribute/type/{kind.value}",
            params={f"attr:{QUALIFIED_NAME}": qualified_name},
            json={"entity": entity.to_dict()},
        )
        logger.debug(f"Updated {kind.value} {qualified_name}")

    def delete_entity_by_unique_attribute(self, kind: ResourceKind, qualified_name: str) -> None:
        response = self._request(
            "DELETE",
            f"/entity/uniqueAttribute/type/{kind.value}",
            params={f"attr:{QUALIFIED_NAME}": qualified_name},
            allow_not_found=True,
        )
        if response.status_code == 404:
            logger.debug(f"{kind.value} {qualified_name} already absent from repository")
        else:
            logger.debug(f"Deleted {kind.value} {qualified_name}")

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        url = f"{self.config.url.rstrip('/')}{API_ROOT}{path}"
        try:
            with httpx.Client(
                timeout=self.config.timeout_seconds,
                auth=self._auth(),
                transport=self.transport,
            ) as client:
                response = client.request(method, url, params=params, json=json)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise RepositoryConnectionError(f"Cannot reach metadata repository at {self.config.url}: {e}") from e
        except httpx.HTTPError as e:
            raise RepositoryError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404 and allow_not_found:
            return response
        if response.status_code >= 400:
            raise RepositoryError(
                f"{method} {path} failed with HTTP {response.status_code}: {response.text}"
            )
        return response

    def _auth(self) -> httpx.BasicAuth | None:
        if self.config.username:
            return httpx.BasicAuth(self.config.username, self.config.password or "")
        return None
