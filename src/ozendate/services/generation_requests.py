"""Prompt and payload construction for the two model calls."""

import json
from collections.abc import Sequence
from dataclasses import dataclass

from ozendate.domain.dishes import Dish
from ozendate.domain.generation import GenerationRequest, ResponseModality
from ozendate.domain.geometry import MarkerEncoding, Placement

RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name_ja": {"type": "STRING"},
            "name_en": {"type": "STRING"},
        },
        "required": ["name_ja", "name_en"],
    },
}

_BLEND_INSTRUCTIONS = (
    "The new item should blend in naturally with the existing lighting, "
    "shadows, and perspective. Maintain the original image's style and quality."
)


@dataclass(frozen=True)
class GenerationRequestBuilder:
    """Build recommendation and placement requests."""

    use_response_schema: bool = True

    def recommendation_request(
        self,
        image: bytes,
        mime_type: str,
        count: int,
        catalog: Sequence[Dish] | None = None,
    ) -> GenerationRequest:
        """Ask for ``count`` dishes, optionally picked from ``catalog``."""
        if catalog:
            entries = [
                {"name_ja": dish.display_name, "name_en": dish.generation_name}
                for dish in catalog
            ]
            prompt = (
                "Analyze the attached image of a table setting. A user wants to "
                f"place a new item. From the catalog below, choose {count} items "
                "that would complement the existing items in terms of style, "
                "color, and occasion. Provide the response as a valid JSON array "
                "of objects copied from the catalog, where each object has a "
                "'name_ja' (Japanese name) and a 'name_en' (English name).\n"
                f"Catalog: {json.dumps(entries, ensure_ascii=False)}"
            )
        else:
            prompt = (
                "Analyze the attached image of a table setting. A user wants to "
                f"place a new item. Suggest {count} diverse types of tableware "
                "(like 'a small blue ceramic bowl', 'a rustic wooden plate', "
                "'a modern glass cup') that would complement the existing items "
                "in terms of style, color, and occasion. Provide the response as "
                "a valid JSON array of objects, where each object has a "
                "'name_ja' (Japanese name) and a 'name_en' (English name for the "
                "image generation prompt)."
            )
        return GenerationRequest(
            prompt=prompt,
            image=image,
            mime_type=mime_type,
            modality=ResponseModality.JSON,
            response_schema=(
                RECOMMENDATION_SCHEMA if self.use_response_schema else None
            ),
        )

    def generation_request(
        self,
        image: bytes,
        mime_type: str,
        dish: Dish,
        placement: Placement,
    ) -> GenerationRequest:
        """Ask the image model to insert ``dish`` at ``placement``."""
        if placement.encoding == MarkerEncoding.PERCENTAGE:
            prompt = (
                f"Please place {dish.generation_name} on the table in the image. "
                "The desired location is approximately at "
                f"{placement.x:.1f}% from the left and {placement.y:.1f}% from "
                f"the top. {_BLEND_INSTRUCTIONS}"
            )
        else:
            prompt = (
                f"Photo of a table setting. Place {dish.generation_name} on the "
                "table. The desired location for the new item is at the center "
                f"of the provided mask area. {_BLEND_INSTRUCTIONS} "
                "Do not change anything else in the image."
            )
        return GenerationRequest(
            prompt=prompt,
            image=image,
            mime_type=mime_type,
            modality=ResponseModality.IMAGE,
        )
