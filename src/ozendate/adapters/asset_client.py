"""Thumbnail download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class AssetClient(Protocol):
    """Interface for downloading dish thumbnails."""

    async def download_bytes(self, url: str) -> bytes:
        """Download a file and return its bytes."""


@dataclass
class HttpxAssetClient(AssetClient):
    """Asset client using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxAssetClient":
        """Create an asset client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def download_bytes(self, url: str) -> bytes:
        """Download ``url`` and return the body."""
        response = await self.http_client.get(url, timeout=20)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
