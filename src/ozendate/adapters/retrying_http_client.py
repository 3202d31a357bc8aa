"""HTTP client wrapper with exponential backoff on rate limits."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx

from ozendate.errors import MaxRetriesReachedError

_logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


@dataclass
class RetryingHttpClient:
    """Send requests sequentially, backing off on retryable statuses.

    ``max_retries`` counts retries after the first attempt. Before retry
    ``n`` (0-based) the client waits ``base_delay_ms * 2**n`` milliseconds.
    Non-retryable responses are returned as-is; callers inspect the status.
    """

    http_client: httpx.AsyncClient
    max_retries: int = 3
    base_delay_ms: int = 1000
    retry_server_errors: bool = True
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    @classmethod
    def create(
        cls,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        retry_server_errors: bool = True,
        timeout: float = 60.0,
    ) -> "RetryingHttpClient":
        """Create a retrying client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(timeout=timeout),
            max_retries=max_retries,
            base_delay_ms=base_delay_ms,
            retry_server_errors=retry_server_errors,
        )

    def is_retryable(self, status_code: int) -> bool:
        if status_code == _RATE_LIMITED:
            return True
        return self.retry_server_errors and status_code >= 500  # noqa: PLR2004

    async def send(
        self,
        request: httpx.Request,
        max_retries: int | None = None,
        base_delay_ms: int | None = None,
    ) -> httpx.Response:
        """Send ``request``, retrying on 429 (and 5xx) and transport errors."""
        retries = self.max_retries if max_retries is None else max_retries
        delay_ms = self.base_delay_ms if base_delay_ms is None else base_delay_ms
        attempts = retries + 1
        for attempt in range(attempts):
            final = attempt == attempts - 1
            try:
                response = await self.http_client.send(request)
            except httpx.TransportError as exc:
                if final:
                    raise
                _logger.warning(
                    "Request to %s failed (attempt %s/%s): %s",
                    request.url.path,
                    attempt + 1,
                    attempts,
                    exc,
                )
            else:
                if not self.is_retryable(response.status_code):
                    return response
                await response.aclose()
                _logger.warning(
                    "Request to %s returned %s (attempt %s/%s)",
                    request.url.path,
                    response.status_code,
                    attempt + 1,
                    attempts,
                )
                if final:
                    break
            await self.sleep(delay_ms * 2**attempt / 1000)
        raise MaxRetriesReachedError

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
