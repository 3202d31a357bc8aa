"""Shared test fixtures."""

import io
import struct
import zlib
from dataclasses import dataclass, field

import pytest
from PIL import Image

from ozendate.adapters.asset_client import AssetClient
from ozendate.adapters.catalog_client import CatalogClient
from ozendate.adapters.gemini_client import GeminiClient
from ozendate.config import Settings
from ozendate.containers import AppContainer
from ozendate.domain.session import WorkflowOptions
from ozendate.services.compositor import ImageCompositor
from ozendate.services.session_store import InMemorySessionStore
from ozendate.services.state_machine import AppStateMachine
from ozendate.services.tableware import TablewareService

RECOMMENDATION_MODEL = "recommend-model"
IMAGE_MODEL = "image-model"


def make_image(
    width: int = 1000,
    height: int = 800,
    color: tuple[int, ...] = (200, 180, 160),
    image_format: str = "PNG",
) -> bytes:
    """Encode a solid-colour image."""
    mode = "RGBA" if len(color) == 4 else "RGB"  # noqa: PLR2004
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_oversized_png(width: int = 30000, height: int = 30000) -> bytes:
    """Build a tiny PNG whose header declares a huge canvas."""

    def chunk(kind: bytes, body: bytes) -> bytes:
        crc = zlib.crc32(kind + body) & 0xFFFFFFFF
        return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )


def text_response(text: str) -> dict[str, object]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def image_response(
    data: str = "AAA=", mime_type: str = "image/png"
) -> dict[str, object]:
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here you go"},
                        {"inlineData": {"mimeType": mime_type, "data": data}},
                    ]
                }
            }
        ]
    }


RECOMMENDATIONS_JSON = (
    '[{"name_ja": "青い小鉢", "name_en": "a small blue bowl"},'
    ' {"name_ja": "木の皿", "name_en": "a rustic wooden plate"},'
    ' {"name_ja": "ガラスのコップ", "name_en": "a modern glass cup"},'
    ' {"name_ja": "白い平皿", "name_en": "a white flat plate"}]'
)


@dataclass
class FakeGeminiClient(GeminiClient):
    """Fake Gemini client replaying queued results per model."""

    responses: dict[str, list[object]] = field(default_factory=dict)
    calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def queue(self, model: str, *results: object) -> None:
        self.responses.setdefault(model, []).extend(results)

    async def generate_content(
        self, model: str, payload: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append((model, payload))
        result = self.responses[model].pop(0)
        if isinstance(result, Exception):
            raise result
        return result  # type: ignore[return-value]

    def calls_for(self, model: str) -> list[dict[str, object]]:
        return [payload for called, payload in self.calls if called == model]


@dataclass
class FakeCatalogClient(CatalogClient):
    """Fake catalog returning fixed entries."""

    entries: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "name": "青い陶器のボウル",
                "name_en": "a blue ceramic bowl",
                "image": "https://assets.test/bowl.png",
            },
            {
                "name": "ガラスのコップ",
                "name_en": "a clear glass cup",
                "image": "https://assets.test/cup.png",
            },
        ]
    )
    fetches: int = 0

    async def fetch_catalog(self) -> list[dict[str, object]]:
        self.fetches += 1
        return self.entries


@dataclass
class FakeAssetClient(AssetClient):
    """Fake asset client returning a small red square."""

    content: bytes = field(default_factory=lambda: make_image(40, 20, (255, 0, 0)))
    downloads: list[str] = field(default_factory=list)

    async def download_bytes(self, url: str) -> bytes:
        self.downloads.append(url)
        return self.content


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gemini_api_key="gemini-key",
        recommendation_model=RECOMMENDATION_MODEL,
        image_model=IMAGE_MODEL,
        selection_delay_ms=0,
    )


@pytest.fixture
def gemini_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def asset_client() -> FakeAssetClient:
    return FakeAssetClient()


@pytest.fixture
def tableware_service(
    gemini_client: FakeGeminiClient, asset_client: FakeAssetClient
) -> TablewareService:
    return TablewareService(
        client=gemini_client,
        recommendation_model=RECOMMENDATION_MODEL,
        image_model=IMAGE_MODEL,
        catalog_client=FakeCatalogClient(),
        asset_client=asset_client,
    )


@pytest.fixture
def machine_factory(tableware_service: TablewareService):  # type: ignore[no-untyped-def]
    def build(**option_overrides: object) -> AppStateMachine:
        options = WorkflowOptions(selection_delay_ms=0, **option_overrides)  # type: ignore[arg-type]
        return AppStateMachine(
            tableware_service=tableware_service,
            options=options,
            sleep=no_sleep,
        )

    return build


@pytest.fixture
def container(settings: Settings, tableware_service: TablewareService) -> AppContainer:
    options = settings.workflow_options()

    def new_session() -> AppStateMachine:
        return AppStateMachine(
            tableware_service=tableware_service,
            options=options,
            sleep=no_sleep,
        )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tableware_service=tableware_service,
        compositor=ImageCompositor(),
        session_store=InMemorySessionStore(factory=new_session),
        close_resources=close_resources,
    )
