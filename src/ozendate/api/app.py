"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status

from ozendate.api.models import (
    DishChoice,
    DishView,
    ImageUpload,
    MarkerRequest,
    SessionView,
)
from ozendate.app_logging import configure_logging
from ozendate.containers import AppContainer
from ozendate.domain.dishes import RECOMMENDED_DISHES
from ozendate.domain.geometry import Point, Size
from ozendate.errors import ImageDecodeError
from ozendate.images import parse_data_url
from ozendate.services.state_machine import AppStateMachine


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    def _machine(request: Request, session_id: UUID) -> AppStateMachine:
        state_container: AppContainer = request.app.state.container
        machine = state_container.session_store.get(session_id)
        if machine is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return machine

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dishes")
    async def dishes() -> list[DishView]:
        """Return the static dish catalog."""
        return [DishView.from_dish(dish) for dish in RECOMMENDED_DISHES]

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(request: Request) -> SessionView:
        """Start a new session on the upload screen."""
        state_container: AppContainer = request.app.state.container
        session_id, machine = state_container.session_store.create()
        logger.info("Started session %s", session_id)
        return SessionView.from_session(session_id, machine.state)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> SessionView:
        """Return the current state of a session."""
        machine = _machine(request, session_id)
        return SessionView.from_session(session_id, machine.state)

    @app.post("/sessions/{session_id}/image")
    async def upload_image(
        session_id: UUID, body: ImageUpload, request: Request
    ) -> SessionView:
        """Upload the table photo."""
        machine = _machine(request, session_id)
        try:
            data, _ = parse_data_url(body.image)
        except ImageDecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        session = await machine.upload(data)
        return SessionView.from_session(session_id, session)

    @app.post("/sessions/{session_id}/marker")
    async def place_marker(
        session_id: UUID,
        body: MarkerRequest,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> SessionView:
        """Place the marker and start loading recommendations."""
        machine = _machine(request, session_id)
        ticket = machine.place_marker(
            Point(body.x, body.y),
            Size(body.displayed_width, body.displayed_height),
        )
        if ticket is not None:
            background_tasks.add_task(machine.load_recommendations, ticket)
        return SessionView.from_session(session_id, machine.state)

    @app.post("/sessions/{session_id}/dish")
    async def choose_dish(
        session_id: UUID,
        body: DishChoice,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> SessionView:
        """Select a recommended dish and start generating the image."""
        machine = _machine(request, session_id)
        ticket = machine.select_dish(body.index)
        if ticket is not None:
            background_tasks.add_task(machine.generate, ticket)
        return SessionView.from_session(session_id, machine.state)

    @app.post("/sessions/{session_id}/error/dismiss")
    async def dismiss_error(session_id: UUID, request: Request) -> SessionView:
        """Close the error notice."""
        machine = _machine(request, session_id)
        return SessionView.from_session(session_id, machine.dismiss_error())

    @app.post("/sessions/{session_id}/reset")
    async def reset(session_id: UUID, request: Request) -> SessionView:
        """Clear the session and return to the upload screen."""
        machine = _machine(request, session_id)
        return SessionView.from_session(session_id, machine.reset())

    return app
