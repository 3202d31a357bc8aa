"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ozendate.adapters.asset_client import HttpxAssetClient
from ozendate.adapters.catalog_client import HttpxCatalogClient
from ozendate.adapters.gemini_client import HttpxGeminiClient
from ozendate.config import Settings
from ozendate.services.compositor import ImageCompositor
from ozendate.services.session_store import InMemorySessionStore, SessionStore
from ozendate.services.state_machine import AppStateMachine
from ozendate.services.tableware import TablewareService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tableware_service: TablewareService
    compositor: ImageCompositor
    session_store: SessionStore
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gemini_client = HttpxGeminiClient.create(
        api_key=resolved_settings.gemini_api_key,
        base_url=resolved_settings.gemini_base_url,
        max_retries=resolved_settings.max_retries,
        base_delay_ms=resolved_settings.retry_base_delay_ms,
        retry_server_errors=resolved_settings.retry_server_errors,
        timeout=resolved_settings.http_timeout_seconds,
    )
    catalog_client = (
        HttpxCatalogClient.create(resolved_settings.catalog_url)
        if resolved_settings.catalog_url
        else None
    )
    asset_client = HttpxAssetClient.create()
    tableware_service = TablewareService(
        client=gemini_client,
        recommendation_model=resolved_settings.recommendation_model,
        image_model=resolved_settings.image_model,
        catalog_client=catalog_client,
        asset_client=asset_client,
    )
    compositor = ImageCompositor(jpeg_quality=resolved_settings.composite_jpeg_quality)
    options = resolved_settings.workflow_options()

    def new_session() -> AppStateMachine:
        return AppStateMachine(
            tableware_service=tableware_service,
            options=options,
            compositor=compositor,
        )

    async def close_resources() -> None:
        await gemini_client.close()
        await asset_client.close()
        if catalog_client is not None:
            await catalog_client.close()

    return AppContainer(
        settings=resolved_settings,
        tableware_service=tableware_service,
        compositor=compositor,
        session_store=InMemorySessionStore(
            factory=new_session, ttl_seconds=resolved_settings.session_ttl_seconds
        ),
        close_resources=close_resources,
    )
