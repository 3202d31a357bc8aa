"""Tableware recommendation and placement via the image model."""

import json
import logging
from dataclasses import dataclass, field

from pydantic import TypeAdapter, ValidationError

from ozendate.adapters.asset_client import AssetClient
from ozendate.adapters.catalog_client import CatalogClient
from ozendate.adapters.gemini_client import GeminiClient
from ozendate.domain.dishes import RECOMMENDED_DISHES, Dish
from ozendate.domain.gemini import (
    CatalogEntry,
    GenerateContentResponse,
    RecommendedDish,
)
from ozendate.domain.geometry import Placement
from ozendate.domain.session import RecommendationSource
from ozendate.errors import NoDataInResponseError, RecommendationParseError
from ozendate.images import to_data_url
from ozendate.services.generation_requests import GenerationRequestBuilder

_logger = logging.getLogger(__name__)

NO_RECOMMENDATION_TEXT_MESSAGE = "APIから有効なJSONテキストが返されませんでした。"
NO_IMAGE_DATA_MESSAGE = "生成された画像データがAPIレスポンスに含まれていませんでした。"

_RECOMMENDATIONS = TypeAdapter(list[RecommendedDish])
_CATALOG = TypeAdapter(list[CatalogEntry])


@dataclass
class TablewareService:
    """Recommend dishes for a photo and render the chosen one into it."""

    client: GeminiClient
    recommendation_model: str
    image_model: str
    builder: GenerationRequestBuilder = field(default_factory=GenerationRequestBuilder)
    catalog_client: CatalogClient | None = None
    asset_client: AssetClient | None = None
    _catalog: list[Dish] | None = field(default=None, init=False, repr=False)

    async def recommend(
        self,
        image: bytes,
        mime_type: str,
        count: int,
        source: RecommendationSource = RecommendationSource.MODEL,
    ) -> list[Dish]:
        """Return the dishes to offer for ``image``."""
        if source == RecommendationSource.STATIC:
            return list(RECOMMENDED_DISHES)

        catalog = None
        if source == RecommendationSource.CATALOG:
            catalog = await self.load_catalog()
        request = self.builder.recommendation_request(
            image, mime_type, count, catalog=catalog
        )
        raw = await self.client.generate_content(
            self.recommendation_model, request.payload()
        )
        text = GenerateContentResponse.model_validate(raw).first_text()
        if not text:
            raise NoDataInResponseError(NO_RECOMMENDATION_TEXT_MESSAGE)
        try:
            proposed = _RECOMMENDATIONS.validate_python(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise RecommendationParseError(str(exc)) from exc
        return _resolve(proposed, catalog)

    async def place(
        self,
        image: bytes,
        mime_type: str,
        dish: Dish,
        placement: Placement,
    ) -> str:
        """Generate the table photo with ``dish`` added and return a data URL."""
        request = self.builder.generation_request(image, mime_type, dish, placement)
        raw = await self.client.generate_content(self.image_model, request.payload())
        inline = GenerateContentResponse.model_validate(raw).first_inline_data()
        if inline is None or not inline.data:
            _logger.error("Image response without inline data: %s", json.dumps(raw))
            raise NoDataInResponseError(NO_IMAGE_DATA_MESSAGE)
        return to_data_url(inline.data, inline.mime_type or "image/jpeg")

    async def load_catalog(self) -> list[Dish]:
        """Fetch the remote catalog once and reuse it afterwards."""
        if self._catalog is not None:
            return self._catalog
        if self.catalog_client is None:
            raise RuntimeError("Remote catalog is not configured")
        try:
            raw = await self.catalog_client.fetch_catalog()
            entries = _CATALOG.validate_python(raw)
        except ValidationError as exc:
            raise RecommendationParseError(str(exc)) from exc
        self._catalog = [
            Dish(
                display_name=entry.name,
                generation_name=entry.name_en,
                thumbnail_url=entry.image,
            )
            for entry in entries
        ]
        _logger.info("Loaded %s catalog dishes", len(self._catalog))
        return self._catalog

    async def fetch_thumbnail(self, url: str) -> bytes:
        """Download a dish thumbnail for local compositing."""
        if self.asset_client is None:
            raise RuntimeError("Thumbnail downloads are not configured")
        return await self.asset_client.download_bytes(url)


def _resolve(proposed: list[RecommendedDish], catalog: list[Dish] | None) -> list[Dish]:
    """Turn model output into dishes, reusing catalog entries when they match."""
    by_name = {dish.generation_name: dish for dish in catalog or []}
    dishes = []
    for item in proposed:
        known = by_name.get(item.name_en)
        if known is not None:
            dishes.append(known)
        else:
            dishes.append(
                Dish(display_name=item.name_ja, generation_name=item.name_en)
            )
    return dishes
