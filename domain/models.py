from __future__ import annotations

import math
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

POINT_TAG = "P"
LINE_TAG = "L"
POINT_RADIUS = 3
SVG_NS = "http://www.w3.org/2000/svg"

_FLOAT32 = struct.Struct("<f")


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE-754 binary32 value.

    Raises ``ValueError`` for NaN, infinities and magnitudes that overflow
    binary32, so every stored coordinate is finite.
    """
    if not math.isfinite(value):
        msg = f"Coordinate must be finite, got {value!r}"
        raise ValueError(msg)
    try:
        (rounded,) = _FLOAT32.unpack(_FLOAT32.pack(value))
    except OverflowError as exc:
        msg = f"Coordinate {value!r} overflows a 32-bit float"
        raise ValueError(msg) from exc
    return float(rounded)


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0

    @field_validator("x", "y", "z", mode="after")
    @classmethod
    def ensure_float32(cls, value: float) -> float:
        return to_float32(value)

    def xy(self) -> Tuple[float, float]:
        return self.x, self.y


class Color(BaseModel):
    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    def to_svg(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


class PointItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["point"] = "point"
    point: Point
    color: Color
    label: str = ""

    def points(self) -> Tuple[Point, ...]:
        return (self.point,)


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["line"] = "line"
    start: Point = Field(..., alias="from")
    end: Point = Field(..., alias="to")
    color: Color

    def points(self) -> Tuple[Point, ...]:
        return self.start, self.end


MapItem = Annotated[Union[PointItem, LineItem], Field(discriminator="kind")]


@dataclass(frozen=True)
class MapItems:
    """Ordered map items; later items draw over earlier ones."""

    items: Tuple[MapItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[PointItem | LineItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> PointItem | LineItem:
        return self.items[index]

    @property
    def point_items(self) -> Tuple[PointItem, ...]:
        return tuple(item for item in self.items if isinstance(item, PointItem))

    @property
    def line_items(self) -> Tuple[LineItem, ...]:
        return tuple(item for item in self.items if isinstance(item, LineItem))

    def points(self) -> Iterator[Point]:
        for item in self.items:
            yield from item.points()

    def concat(self, *others: MapItems) -> MapItems:
        combined = list(self.items)
        for other in others:
            combined.extend(other.items)
        return MapItems(items=tuple(combined))


@dataclass(frozen=True)
class BoundingBox:
    origin_x: float
    origin_y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.origin_x, self.origin_y, self.width, self.height


@dataclass(frozen=True)
class SvgDocument:
    text: str
    width: float
    height: float

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")
