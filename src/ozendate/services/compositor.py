"""Local compositing of a dish thumbnail onto the table photo."""

import asyncio
import io
import logging
from dataclasses import dataclass, field

from PIL import Image, UnidentifiedImageError

from ozendate.domain.geometry import Point, Size
from ozendate.errors import ImageLoadError
from ozendate.services.coordinates import CoordinateMapper

_logger = logging.getLogger(__name__)

OVERLAY_WIDTH_RATIO = 0.15


@dataclass
class ImageCompositor:
    """Paste an overlay centred on a clicked point and flatten to JPEG."""

    jpeg_quality: int = 90
    mapper: CoordinateMapper = field(default_factory=CoordinateMapper)

    async def composite(
        self,
        base_image: bytes,
        overlay_image: bytes,
        click: Point,
        displayed: Size,
    ) -> bytes:
        """Return JPEG bytes of ``base_image`` with the overlay drawn on it.

        The Pillow work runs in a worker thread.

        Args:
            base_image: Encoded table photo.
            overlay_image: Encoded dish thumbnail.
            click: Click position in displayed-element pixels.
            displayed: Size of the displayed element at click time.
        """
        return await asyncio.to_thread(
            self._composite, base_image, overlay_image, click, displayed
        )

    def _composite(
        self,
        base_image: bytes,
        overlay_image: bytes,
        click: Point,
        displayed: Size,
    ) -> bytes:
        base = _load(base_image, "base").convert("RGBA")
        overlay = _load(overlay_image, "overlay").convert("RGBA")

        center = self.mapper.to_natural(
            click, displayed, Size(base.width, base.height)
        )
        width = max(1, round(base.width * OVERLAY_WIDTH_RATIO))
        height = max(1, round(width * overlay.height / overlay.width))
        overlay = overlay.resize((width, height), Image.Resampling.LANCZOS)

        left = round(center.x - width / 2)
        top = round(center.y - height / 2)
        visible = _clip(overlay, left, top, base)
        base.alpha_composite(visible, (max(0, left), max(0, top)))

        buffer = io.BytesIO()
        base.convert("RGB").save(buffer, format="JPEG", quality=self.jpeg_quality)
        _logger.info(
            "Composited %sx%s overlay at (%s, %s) on %sx%s image",
            width,
            height,
            left,
            top,
            base.width,
            base.height,
        )
        return buffer.getvalue()


def _load(data: bytes, label: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"Failed to load {label} image") from exc
    return image


def _clip(overlay: Image.Image, left: int, top: int, base: Image.Image) -> Image.Image:
    """Crop the part of ``overlay`` that falls outside ``base``."""
    box = (
        max(0, -left),
        max(0, -top),
        min(overlay.width, base.width - left),
        min(overlay.height, base.height - top),
    )
    return overlay.crop(box)
