"""Map clicks on the displayed image to placement coordinates."""

from dataclasses import dataclass

from ozendate.domain.geometry import MarkerEncoding, Placement, Point, Size


@dataclass(frozen=True)
class CoordinateMapper:
    """Convert a click inside the displayed image element.

    The natural size is only known once the image has decoded; mapping
    before that is a programming error and raises ``ValueError``.
    """

    encoding: MarkerEncoding = MarkerEncoding.PERCENTAGE

    def map(self, click: Point, displayed: Size, natural: Size | None) -> Placement:
        """Return the click in the configured encoding."""
        if self.encoding == MarkerEncoding.PIXEL:
            return Placement(x=click.x, y=click.y, encoding=MarkerEncoding.PIXEL)
        size = _require_natural(natural)
        native = self.to_natural(click, displayed, size)
        return Placement(
            x=_clamp_percent(native.x / size.width * 100),
            y=_clamp_percent(native.y / size.height * 100),
            encoding=MarkerEncoding.PERCENTAGE,
        )

    def to_natural(self, click: Point, displayed: Size, natural: Size | None) -> Point:
        """Scale a display-space point into the image's native pixel space."""
        size = _require_natural(natural)
        if displayed.is_empty:
            raise ValueError("displayed image size must be positive")
        scale_x = size.width / displayed.width
        scale_y = size.height / displayed.height
        return Point(x=click.x * scale_x, y=click.y * scale_y)


def _require_natural(natural: Size | None) -> Size:
    if natural is None or natural.is_empty:
        raise ValueError("natural image size is not available yet")
    return natural


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))
