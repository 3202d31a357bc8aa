"""Tests for pure session transitions."""

from dataclasses import fields

from ozendate.domain.dishes import RECOMMENDED_DISHES
from ozendate.domain.geometry import Point, Size
from ozendate.domain.session import Session, Stage
from ozendate.services.workflow import (
    GENERATION_FAILED_PREFIX,
    RECOMMENDATION_FAILED_PREFIX,
    DishSelected,
    ErrorDismissed,
    GenerationFailed,
    GenerationSucceeded,
    ImageUploaded,
    MarkerPlaced,
    RecommendationsFailed,
    RecommendationsReceived,
    ResetRequested,
    UploadFailed,
    apply,
)

DISHES = RECOMMENDED_DISHES[:4]
SIZE = Size(1000, 800)


def _editor() -> Session:
    return apply(Session(), ImageUploaded(b"img", "image/png", SIZE))


def _with_marker() -> Session:
    return apply(_editor(), MarkerPlaced(Point(100, 80), SIZE))


def _ready() -> Session:
    return apply(_with_marker(), RecommendationsReceived(0, DISHES))


def test_upload_moves_to_editor() -> None:
    session = _editor()

    assert session.stage == Stage.EDITOR
    assert session.original_image == b"img"
    assert session.natural_size == SIZE
    assert session.instruction.startswith("1.")


def test_upload_failure_stays_on_upload() -> None:
    session = apply(Session(), UploadFailed("broken"))

    assert session.stage == Stage.UPLOAD
    assert session.error_message == "broken"


def test_marker_starts_loading_recommendations() -> None:
    session = _with_marker()

    assert session.marker == Point(100, 80)
    assert session.recommendations == ()
    assert session.recommendations_loading
    assert session.is_loading


def test_second_click_is_ignored() -> None:
    session = _with_marker()

    assert apply(session, MarkerPlaced(Point(5, 5), SIZE)) is session


def test_click_on_upload_screen_is_ignored() -> None:
    session = Session()

    assert apply(session, MarkerPlaced(Point(5, 5), SIZE)) is session


def test_recommendations_populate_list() -> None:
    session = _ready()

    assert session.recommendations == DISHES
    assert not session.recommendations_loading
    assert session.instruction.startswith("2.")


def test_recommendation_failure_clears_marker() -> None:
    session = apply(_with_marker(), RecommendationsFailed(0, "boom"))

    assert session.stage == Stage.EDITOR
    assert session.marker is None
    assert not session.recommendations_loading
    assert session.error_message == f"{RECOMMENDATION_FAILED_PREFIX}boom"


def test_dish_selection_locks_and_loads() -> None:
    session = apply(_ready(), DishSelected(DISHES[1]))

    assert session.stage == Stage.LOADING
    assert session.selected_dish == DISHES[1]
    assert session.selection_locked


def test_second_selection_is_ignored() -> None:
    session = apply(_ready(), DishSelected(DISHES[1]))

    assert apply(session, DishSelected(DISHES[2])) is session


def test_unknown_dish_is_ignored() -> None:
    session = _ready()

    assert apply(session, DishSelected(RECOMMENDED_DISHES[7])) is session


def test_generation_success_shows_result() -> None:
    loading = apply(_ready(), DishSelected(DISHES[0]))

    session = apply(loading, GenerationSucceeded(0, "data:image/png;base64,AAA="))

    assert session.stage == Stage.RESULT
    assert session.result_image == "data:image/png;base64,AAA="
    assert session.error_message is None


def test_generation_failure_returns_to_editor() -> None:
    loading = apply(_ready(), DishSelected(DISHES[0]))

    session = apply(loading, GenerationFailed(0, "nope"))

    assert session.stage == Stage.EDITOR
    assert session.selected_dish is None
    assert session.marker == Point(100, 80)
    assert session.error_message == f"{GENERATION_FAILED_PREFIX}nope"


def test_error_dismissal_only_clears_message() -> None:
    failed = apply(_with_marker(), RecommendationsFailed(0, "boom"))

    session = apply(failed, ErrorDismissed())

    assert session.error_message is None
    assert session.stage == failed.stage
    assert session.marker is None


def test_reset_clears_every_field() -> None:
    loading = apply(_ready(), DishSelected(DISHES[0]))
    done = apply(loading, GenerationSucceeded(0, "data:image/png;base64,AAA="))

    session = apply(done, ResetRequested())

    initial = Session()
    for item in fields(Session):
        if item.name == "epoch":
            continue
        assert getattr(session, item.name) == getattr(initial, item.name), item.name
    assert session.epoch == done.epoch + 1
    assert not session.is_loading


def test_stale_results_are_discarded() -> None:
    marker_before_reset = _with_marker()
    fresh = apply(marker_before_reset, ResetRequested())
    fresh = apply(fresh, ImageUploaded(b"new", "image/png", SIZE))
    fresh = apply(fresh, MarkerPlaced(Point(1, 1), SIZE))

    session = apply(fresh, RecommendationsReceived(marker_before_reset.epoch, DISHES))

    assert session is fresh
    assert session.recommendations_loading


def test_generation_result_outside_loading_is_ignored() -> None:
    session = _ready()

    assert apply(session, GenerationSucceeded(0, "data:x")) is session
