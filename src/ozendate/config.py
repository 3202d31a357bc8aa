"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from ozendate.domain.geometry import MarkerEncoding
from ozendate.domain.session import RecommendationSource, WorkflowOptions

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    recommendation_model: str = "gemini-2.5-flash-preview-09-2025"
    image_model: str = "gemini-2.5-flash-image-preview"
    http_timeout_seconds: float = 60.0
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_server_errors: bool = True
    marker_encoding: MarkerEncoding = MarkerEncoding.PERCENTAGE
    local_compositing: bool = False
    recommendation_source: RecommendationSource = RecommendationSource.MODEL
    recommendation_count: int = 5
    catalog_url: str | None = None
    selection_delay_ms: int = 500
    composite_jpeg_quality: int = 90
    session_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def workflow_options(self) -> WorkflowOptions:
        """Collect the workflow variation points into one struct."""
        return WorkflowOptions(
            marker_encoding=self.marker_encoding,
            local_compositing=self.local_compositing,
            recommendation_source=self.recommendation_source,
            recommendation_count=self.recommendation_count,
            selection_delay_ms=self.selection_delay_ms,
        )
