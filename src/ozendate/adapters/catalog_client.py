"""Remote dish catalog client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class CatalogClient(Protocol):
    """Interface for fetching the remote dish catalog."""

    async def fetch_catalog(self) -> list[dict[str, object]]:
        """Return the raw catalog entries."""


@dataclass
class HttpxCatalogClient(CatalogClient):
    """Catalog client using httpx."""

    url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str) -> "HttpxCatalogClient":
        """Create a catalog client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def fetch_catalog(self) -> list[dict[str, object]]:
        """GET the catalog JSON array."""
        response = await self.http_client.get(self.url, timeout=15)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise RuntimeError("Dish catalog is not a JSON array")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
