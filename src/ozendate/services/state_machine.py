"""Async controller that drives one session through the workflow."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ozendate.domain.geometry import Point, Size
from ozendate.domain.session import Session, WorkflowOptions
from ozendate.errors import ImageDecodeError
from ozendate.images import decode_image
from ozendate.services.compositor import ImageCompositor
from ozendate.services.coordinates import CoordinateMapper
from ozendate.services.tableware import TablewareService
from ozendate.services.workflow import (
    DishSelected,
    ErrorDismissed,
    Event,
    GenerationFailed,
    GenerationSucceeded,
    ImageUploaded,
    MarkerPlaced,
    RecommendationsFailed,
    RecommendationsReceived,
    ResetRequested,
    UploadFailed,
    apply,
    can_place_marker,
    can_select_dish,
)

_logger = logging.getLogger(__name__)


@dataclass
class AppStateMachine:
    """Own a ``Session`` and run the I/O each transition needs.

    State changes go through :func:`apply`. Methods that start a network
    call are split in two: a synchronous step that updates the session and
    returns a ticket (the session epoch), and an async step that performs
    the call. A ``None`` ticket means the action was ignored.
    """

    tableware_service: TablewareService
    options: WorkflowOptions = field(default_factory=WorkflowOptions)
    compositor: ImageCompositor = field(default_factory=ImageCompositor)
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)
    state: Session = field(default_factory=Session)

    @property
    def mapper(self) -> CoordinateMapper:
        return CoordinateMapper(self.options.marker_encoding)

    def dispatch(self, event: Event) -> Session:
        """Apply ``event`` to the current session."""
        self.state = apply(self.state, event)
        return self.state

    async def upload(self, data: bytes) -> Session:
        """Load the uploaded file and move to the editor."""
        try:
            decoded = await decode_image(data)
        except ImageDecodeError as exc:
            return self.dispatch(UploadFailed(str(exc)))
        return self.dispatch(
            ImageUploaded(
                image=decoded.data,
                mime_type=decoded.mime_type,
                natural_size=decoded.size,
            )
        )

    def place_marker(self, click: Point, displayed_size: Size) -> int | None:
        """Record the marker; return a ticket if recommendations must load."""
        if not can_place_marker(self.state):
            return None
        self.dispatch(MarkerPlaced(point=click, displayed_size=displayed_size))
        return self.state.epoch

    async def load_recommendations(self, ticket: int) -> Session:
        """Fetch recommendations for the marker placed under ``ticket``."""
        session = self.state
        if session.epoch != ticket or not session.recommendations_loading:
            return session
        if session.original_image is None or session.original_mime_type is None:
            return session
        try:
            dishes = await self.tableware_service.recommend(
                session.original_image,
                session.original_mime_type,
                self.options.recommendation_count,
                self.options.recommendation_source,
            )
        except Exception as exc:
            _logger.exception("Failed to get recommendations")
            return self.dispatch(RecommendationsFailed(ticket, str(exc)))
        return self.dispatch(RecommendationsReceived(ticket, tuple(dishes)))

    async def click_image(self, click: Point, displayed_size: Size) -> Session:
        """Place the marker and wait for recommendations."""
        ticket = self.place_marker(click, displayed_size)
        if ticket is None:
            return self.state
        return await self.load_recommendations(ticket)

    def select_dish(self, index: int) -> int | None:
        """Lock the selection; return a ticket if generation must start."""
        recommendations = self.state.recommendations
        if not 0 <= index < len(recommendations):
            return None
        dish = recommendations[index]
        if not can_select_dish(self.state, dish):
            return None
        self.dispatch(DishSelected(dish))
        return self.state.epoch

    async def generate(self, ticket: int) -> Session:
        """Render the selected dish into the photo."""
        await self.sleep(self.options.selection_delay_ms / 1000)
        session = self.state
        if session.epoch != ticket or session.selected_dish is None:
            return session
        try:
            image_data_url = await self._render(session)
        except Exception as exc:
            _logger.exception("Image generation failed")
            return self.dispatch(GenerationFailed(ticket, str(exc)))
        return self.dispatch(GenerationSucceeded(ticket, image_data_url))

    async def choose_dish(self, index: int) -> Session:
        """Select a dish and wait for the generated image."""
        ticket = self.select_dish(index)
        if ticket is None:
            return self.state
        return await self.generate(ticket)

    def dismiss_error(self) -> Session:
        return self.dispatch(ErrorDismissed())

    def reset(self) -> Session:
        """Return to the upload screen with every field cleared."""
        return self.dispatch(ResetRequested())

    async def _render(self, session: Session) -> str:
        image = session.original_image
        mime_type = session.original_mime_type
        marker = session.marker
        displayed = session.displayed_size
        dish = session.selected_dish
        if image is None or mime_type is None or dish is None:
            raise ValueError("no image or dish to render")
        if marker is None or displayed is None:
            raise ValueError("marker has not been placed")

        placement = self.mapper.map(marker, displayed, session.natural_size)
        if self.options.local_compositing and dish.thumbnail_url:
            thumbnail = await self.tableware_service.fetch_thumbnail(dish.thumbnail_url)
            image = await self.compositor.composite(image, thumbnail, marker, displayed)
            mime_type = "image/jpeg"
        return await self.tableware_service.place(image, mime_type, dish, placement)
