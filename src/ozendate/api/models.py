"""Pydantic models for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from ozendate.domain.dishes import Dish
from ozendate.domain.session import Session


class ImageUpload(BaseModel):
    """Uploaded photo as a data URL or bare base64 string."""

    image: str


class MarkerRequest(BaseModel):
    """Click position inside the displayed image element."""

    x: float = Field(ge=0)
    y: float = Field(ge=0)
    displayed_width: float = Field(gt=0)
    displayed_height: float = Field(gt=0)


class DishChoice(BaseModel):
    """Index into the current recommendations."""

    index: int = Field(ge=0)


class DishView(BaseModel):
    display_name: str
    generation_name: str
    thumbnail_url: str | None = None

    @classmethod
    def from_dish(cls, dish: Dish) -> "DishView":
        return cls(
            display_name=dish.display_name,
            generation_name=dish.generation_name,
            thumbnail_url=dish.thumbnail_url,
        )


class MarkerView(BaseModel):
    x: float
    y: float


class SessionView(BaseModel):
    """Client-facing snapshot of a session."""

    id: UUID
    stage: str
    instruction: str
    has_image: bool
    image_width: float | None = None
    image_height: float | None = None
    marker: MarkerView | None = None
    recommendations: list[DishView]
    selected_dish: DishView | None = None
    result_image: str | None = None
    is_loading: bool
    error_message: str | None = None

    @classmethod
    def from_session(cls, session_id: UUID, session: Session) -> "SessionView":
        natural = session.natural_size
        marker = session.marker
        selected = session.selected_dish
        return cls(
            id=session_id,
            stage=session.stage.value,
            instruction=session.instruction,
            has_image=session.original_image is not None,
            image_width=natural.width if natural else None,
            image_height=natural.height if natural else None,
            marker=MarkerView(x=marker.x, y=marker.y) if marker else None,
            recommendations=[DishView.from_dish(d) for d in session.recommendations],
            selected_dish=DishView.from_dish(selected) if selected else None,
            result_image=session.result_image,
            is_loading=session.is_loading,
            error_message=session.error_message,
        )
