"""Gemini generateContent client over the retrying HTTP wrapper."""

import logging
from dataclasses import dataclass
from typing import Protocol

from ozendate.adapters.retrying_http_client import RetryingHttpClient
from ozendate.errors import UpstreamApiError

_logger = logging.getLogger(__name__)


class GeminiClient(Protocol):
    """Interface for calling a Gemini model."""

    async def generate_content(
        self, model: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Send a generateContent request and return the decoded body."""


@dataclass
class HttpxGeminiClient(GeminiClient):
    """Gemini REST client implemented with httpx."""

    api_key: str
    base_url: str
    http: RetryingHttpClient

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        retry_server_errors: bool = True,
        timeout: float = 60.0,
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed retrying session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http=RetryingHttpClient.create(
                max_retries=max_retries,
                base_delay_ms=base_delay_ms,
                retry_server_errors=retry_server_errors,
                timeout=timeout,
            ),
        )

    async def generate_content(
        self, model: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """POST to models/{model}:generateContent."""
        url = f"{self.base_url}/models/{model}:generateContent"
        request = self.http.http_client.build_request(
            "POST", url, params={"key": self.api_key}, json=payload
        )
        response = await self.http.send(request)
        if not response.is_success:
            error = UpstreamApiError.from_response(response)
            _logger.warning("Gemini %s failed: %s", model, error)
            raise error
        body = response.json()
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message") or "Unknown error"
            raise UpstreamApiError(response.status_code, message)
        return body

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http.close()
