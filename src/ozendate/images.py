"""Image decoding and data URL helpers."""

import asyncio
import base64
import binascii
import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ozendate.domain.geometry import Size
from ozendate.errors import ImageDecodeError

_DATA_URL_PREFIX = "data:"
_UPLOAD_FORMATS = frozenset({"JPEG", "PNG", "WEBP"})
# Multi-picture JPEGs from phone cameras; the first frame is a plain JPEG.
_FORMAT_ALIASES = {"MPO": "JPEG"}
_JPEG_QUALITY = 90


@dataclass(frozen=True)
class DecodedImage:
    """An image that decoded successfully, in a format the model accepts."""

    mime_type: str
    size: Size
    data: bytes


def to_data_url(data: bytes | str, mime_type: str) -> str:
    """Build a base64 data URL from raw bytes or an already encoded string."""
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def parse_data_url(value: str) -> tuple[bytes, str | None]:
    """Split a ``data:<mime>;base64,<data>`` URL into bytes and MIME type.

    Bare base64 strings are accepted as well; their MIME type is unknown.
    """
    mime_type = None
    encoded = value
    if value.startswith(_DATA_URL_PREFIX):
        header, _, encoded = value.partition(",")
        mime_type = header[len(_DATA_URL_PREFIX) :].split(";")[0] or None
    try:
        return base64.b64decode(encoded, validate=True), mime_type
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError("画像データを読み込めませんでした。") from exc


def _decode(data: bytes) -> DecodedImage:
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            size = Size(image.width, image.height)
            image_format = _FORMAT_ALIASES.get(image.format or "", image.format)
            if image_format in _UPLOAD_FORMATS:
                return DecodedImage(
                    mime_type=Image.MIME[image_format], size=size, data=data
                )
            return DecodedImage(
                mime_type="image/jpeg", size=size, data=_to_jpeg(image)
            )
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError("画像ファイルを読み込めませんでした。") from exc


def _to_jpeg(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=_JPEG_QUALITY)
    return buffer.getvalue()


async def decode_image(data: bytes) -> DecodedImage:
    """Decode ``data`` off the event loop and report its type and size.

    Formats the image model does not accept are re-encoded as JPEG.
    """
    return await asyncio.to_thread(_decode, data)
