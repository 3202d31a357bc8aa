"""Pydantic models for generateContent responses and catalog payloads."""

from pydantic import BaseModel, ConfigDict, Field


class InlineData(BaseModel):
    """Base64 payload with its declared MIME type."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str | None = Field(default=None, alias="mimeType")
    data: str | None = None


class Part(BaseModel):
    """A single response part: text or inline binary data."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    inline_data: InlineData | None = Field(default=None, alias="inlineData")


class Content(BaseModel):
    parts: list[Part] = Field(default_factory=list)


class Candidate(BaseModel):
    content: Content | None = None


class ApiError(BaseModel):
    message: str | None = None


class GenerateContentResponse(BaseModel):
    """Top-level generateContent response."""

    candidates: list[Candidate] = Field(default_factory=list)
    error: ApiError | None = None

    def _first_parts(self) -> list[Part]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        return self.candidates[0].content.parts

    def first_inline_data(self) -> InlineData | None:
        """Return the first part of the first candidate carrying image data."""
        for part in self._first_parts():
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data
        return None

    def first_text(self) -> str | None:
        """Return the first non-empty text part of the first candidate."""
        for part in self._first_parts():
            if part.text:
                return part.text
        return None


class RecommendedDish(BaseModel):
    """A dish proposed by the recommendation model."""

    name_ja: str
    name_en: str


class CatalogEntry(BaseModel):
    """An entry of the remote dish catalog."""

    name: str
    name_en: str
    image: str | None = None
