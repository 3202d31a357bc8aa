"""Session state for one table coordination interaction."""

from dataclasses import dataclass
from enum import StrEnum

from ozendate.domain.dishes import Dish
from ozendate.domain.geometry import MarkerEncoding, Point, Size


class Stage(StrEnum):
    """Top-level screens of the workflow."""

    UPLOAD = "upload"
    EDITOR = "editor"
    LOADING = "loading"
    RESULT = "result"


class RecommendationSource(StrEnum):
    """Where the dishes offered after a click come from."""

    STATIC = "static"
    CATALOG = "catalog"
    MODEL = "model"


@dataclass(frozen=True)
class WorkflowOptions:
    """Variation points of the workflow."""

    marker_encoding: MarkerEncoding = MarkerEncoding.PERCENTAGE
    local_compositing: bool = False
    recommendation_source: RecommendationSource = RecommendationSource.MODEL
    recommendation_count: int = 5
    selection_delay_ms: int = 500


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of a user's session.

    ``epoch`` advances on every reset so that responses to requests issued
    before the reset can be recognised and dropped.
    """

    stage: Stage = Stage.UPLOAD
    original_image: bytes | None = None
    original_mime_type: str | None = None
    natural_size: Size | None = None
    marker: Point | None = None
    displayed_size: Size | None = None
    recommendations: tuple[Dish, ...] = ()
    recommendations_loading: bool = False
    selected_dish: Dish | None = None
    result_image: str | None = None
    error_message: str | None = None
    epoch: int = 0

    @property
    def is_loading(self) -> bool:
        return self.recommendations_loading or self.stage == Stage.LOADING

    @property
    def selection_locked(self) -> bool:
        return self.selected_dish is not None

    @property
    def instruction(self) -> str:
        """User-facing hint for the current step."""
        if self.stage == Stage.UPLOAD:
            return "テーブルの写真をアップロードしてください。"
        if self.stage == Stage.LOADING:
            return "AIが画像を生成中です..."
        if self.stage == Stage.RESULT:
            return "完成です!"
        if self.marker is None:
            return "1. 新しい食器を置きたい場所をクリックしてください。"
        if self.recommendations_loading:
            return "AIがあなたにおすすめの食器を考えています..."
        if self.recommendations:
            return "2. AIの提案から追加したい食器を選んでください。"
        return ""
