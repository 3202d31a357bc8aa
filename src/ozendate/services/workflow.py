"""Pure session transitions: ``apply(session, event) -> session``."""

import logging
from dataclasses import dataclass, replace

from ozendate.domain.dishes import Dish
from ozendate.domain.geometry import Point, Size
from ozendate.domain.session import Session, Stage

_logger = logging.getLogger(__name__)

RECOMMENDATION_FAILED_PREFIX = "AIによる提案の取得に失敗しました。"
GENERATION_FAILED_PREFIX = "画像の生成に失敗しました。詳細: "


@dataclass(frozen=True)
class ImageUploaded:
    image: bytes
    mime_type: str
    natural_size: Size


@dataclass(frozen=True)
class UploadFailed:
    message: str


@dataclass(frozen=True)
class MarkerPlaced:
    point: Point
    displayed_size: Size


@dataclass(frozen=True)
class RecommendationsReceived:
    epoch: int
    dishes: tuple[Dish, ...]


@dataclass(frozen=True)
class RecommendationsFailed:
    epoch: int
    message: str


@dataclass(frozen=True)
class DishSelected:
    dish: Dish


@dataclass(frozen=True)
class GenerationSucceeded:
    epoch: int
    image_data_url: str


@dataclass(frozen=True)
class GenerationFailed:
    epoch: int
    message: str


@dataclass(frozen=True)
class ErrorDismissed:
    pass


@dataclass(frozen=True)
class ResetRequested:
    pass


Event = (
    ImageUploaded
    | UploadFailed
    | MarkerPlaced
    | RecommendationsReceived
    | RecommendationsFailed
    | DishSelected
    | GenerationSucceeded
    | GenerationFailed
    | ErrorDismissed
    | ResetRequested
)


def can_place_marker(session: Session) -> bool:
    return session.stage == Stage.EDITOR and session.marker is None


def can_select_dish(session: Session, dish: Dish) -> bool:
    return (
        session.stage == Stage.EDITOR
        and session.marker is not None
        and not session.recommendations_loading
        and not session.selection_locked
        and dish in session.recommendations
    )


def apply(session: Session, event: Event) -> Session:  # noqa: PLR0911, PLR0912
    """Return the session that results from ``event``.

    Events that do not fit the current state are ignored and the session is
    returned unchanged. Results tagged with an old epoch are dropped.
    """
    if isinstance(event, ResetRequested):
        return Session(epoch=session.epoch + 1)

    if isinstance(event, ErrorDismissed):
        return replace(session, error_message=None)

    if isinstance(event, ImageUploaded):
        if session.stage != Stage.UPLOAD:
            return session
        return replace(
            session,
            stage=Stage.EDITOR,
            original_image=event.image,
            original_mime_type=event.mime_type,
            natural_size=event.natural_size,
            error_message=None,
        )

    if isinstance(event, UploadFailed):
        if session.stage != Stage.UPLOAD:
            return session
        return replace(session, error_message=event.message)

    if isinstance(event, MarkerPlaced):
        if not can_place_marker(session):
            return session
        return replace(
            session,
            marker=event.point,
            displayed_size=event.displayed_size,
            recommendations=(),
            recommendations_loading=True,
        )

    if isinstance(event, RecommendationsReceived | RecommendationsFailed):
        if (
            _is_stale(session, event.epoch)
            or session.stage != Stage.EDITOR
            or not session.recommendations_loading
        ):
            return session
        if isinstance(event, RecommendationsReceived):
            return replace(
                session,
                recommendations=event.dishes,
                recommendations_loading=False,
            )
        return replace(
            session,
            marker=None,
            displayed_size=None,
            recommendations_loading=False,
            error_message=f"{RECOMMENDATION_FAILED_PREFIX}{event.message}",
        )

    if isinstance(event, DishSelected):
        if not can_select_dish(session, event.dish):
            return session
        return replace(session, selected_dish=event.dish, stage=Stage.LOADING)

    if isinstance(event, GenerationSucceeded | GenerationFailed):
        if _is_stale(session, event.epoch) or session.stage != Stage.LOADING:
            return session
        if isinstance(event, GenerationSucceeded):
            return replace(
                session,
                stage=Stage.RESULT,
                result_image=event.image_data_url,
                error_message=None,
            )
        return replace(
            session,
            stage=Stage.EDITOR,
            selected_dish=None,
            error_message=f"{GENERATION_FAILED_PREFIX}{event.message}",
        )

    return session


def _is_stale(session: Session, epoch: int) -> bool:
    if epoch != session.epoch:
        _logger.info("Discarding result from epoch %s (now %s)", epoch, session.epoch)
        return True
    return False
