"""Exceptions raised by the table coordination workflow."""

import httpx


class OzendateError(Exception):
    """Base class for failures surfaced to the user."""


class ImageDecodeError(OzendateError):
    """The uploaded file could not be read as an image."""


class ImageLoadError(OzendateError):
    """An image needed for local compositing failed to decode."""


class MaxRetriesReachedError(OzendateError):
    """Every attempt hit a retryable status."""

    def __init__(self, message: str = "Max retries reached") -> None:
        super().__init__(message)


class UpstreamApiError(OzendateError):
    """The remote model answered with an error."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "UpstreamApiError":
        """Build an error from a non-2xx response, preferring the upstream message."""
        text = response.text
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, text or response.reason_phrase)
        message = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        return cls(response.status_code, message or "Unknown error")


class NoDataInResponseError(OzendateError):
    """A successful response did not contain the expected payload."""


class RecommendationParseError(OzendateError):
    """The recommendation text was not a valid JSON array of dishes."""
