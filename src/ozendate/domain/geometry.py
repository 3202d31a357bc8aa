"""Coordinate value objects."""

from dataclasses import dataclass
from enum import StrEnum


class MarkerEncoding(StrEnum):
    """How a marker location is expressed to the image model."""

    PIXEL = "pixel"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class Point:
    """A position in pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class Size:
    """Width and height in pixels."""

    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Placement:
    """A marker location in the encoding the prompt will use."""

    x: float
    y: float
    encoding: MarkerEncoding
