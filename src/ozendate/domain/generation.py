"""Outbound request value objects for the image model."""

import base64
from dataclasses import dataclass
from enum import StrEnum


class ResponseModality(StrEnum):
    """Kind of output requested from the model."""

    IMAGE = "IMAGE"
    JSON = "JSON"


@dataclass(frozen=True)
class GenerationRequest:
    """Prompt plus inline image, discarded once the call completes."""

    prompt: str
    image: bytes
    mime_type: str
    modality: ResponseModality
    response_schema: dict[str, object] | None = None

    def payload(self) -> dict[str, object]:
        """Render the generateContent request body."""
        encoded = base64.b64encode(self.image).decode("ascii")
        generation_config: dict[str, object]
        if self.modality == ResponseModality.IMAGE:
            generation_config = {"responseModalities": ["IMAGE"]}
        else:
            generation_config = {"responseMimeType": "application/json"}
            if self.response_schema is not None:
                generation_config["responseSchema"] = self.response_schema
        return {
            "contents": [
                {
                    "parts": [
                        {"text": self.prompt},
                        {"inlineData": {"mimeType": self.mime_type, "data": encoded}},
                    ]
                }
            ],
            "generationConfig": generation_config,
        }
