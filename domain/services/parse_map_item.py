from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import List, Tuple

from pydantic import ValidationError

from domain.errors import MapItemParseError
from domain.models import LINE_TAG, POINT_TAG, Color, LineItem, Point, PointItem

logger = logging.getLogger(__name__)

POINT_FIELD_COUNT = 8
LINE_FIELD_COUNT = 9

_FLOAT_LITERAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_UINT_LITERAL = re.compile(r"\+?\d+", re.ASCII)
MAX_CHANNEL_DIGITS = 3


class MapItemParser:
    """Parses map file lines such as::

        P 78.2306, -50.5124, 0.0020, 255, 0, 0, 3, to_The_Steamfont_Mountains
        L 1000.0, 0.0, 0.0, 1000.0, -50.0, 0.0, 255, 0, 0
    """

    def __init__(self) -> None:
        self.field_separator = re.compile(r",\s+")

    def parse(self, line: str) -> PointItem | LineItem:
        line = _strip_terminator(line)
        if not line:
            raise MapItemParseError(line, "Missing line identifier")

        tag = line[0]
        if tag not in (POINT_TAG, LINE_TAG):
            raise MapItemParseError(line, f"Unrecognized line identifier {tag!r}")
        if line[1:2] != " ":
            raise MapItemParseError(line, "No line content")

        fields = self.split_fields(line[2:])
        if tag == POINT_TAG:
            return self._parse_point_item(line, fields)
        return self._parse_line_item(line, fields)

    def split_fields(self, content: str) -> List[str]:
        return self.field_separator.split(content)

    def parse_lines(
        self, lines: Iterable[str], *, source: str = "<lines>"
    ) -> Iterator[Tuple[int, PointItem | LineItem]]:
        """Yield ``(line_number, item)`` for every line that parses; skip the rest."""
        return self.parse_numbered_lines(enumerate(lines, start=1), source=source)

    def parse_numbered_lines(
        self, numbered_lines: Iterable[Tuple[int, str]], *, source: str = "<lines>"
    ) -> Iterator[Tuple[int, PointItem | LineItem]]:
        for number, line in numbered_lines:
            try:
                item = self.parse(line)
            except MapItemParseError as exc:
                logger.debug("Skipping %s:%d: %s", source, number, exc.reason)
                continue
            yield number, item

    def _parse_point_item(self, line: str, fields: List[str]) -> PointItem:
        if len(fields) != POINT_FIELD_COUNT:
            raise MapItemParseError(
                line, f"Point needs {POINT_FIELD_COUNT} fields, got {len(fields)}"
            )
        x, y, z, r, g, b, _point_type, label = fields
        try:
            return PointItem(
                point=self._parse_point(line, x, y, z),
                color=self._parse_color(line, r, g, b),
                label=label,
            )
        except ValidationError as exc:
            raise MapItemParseError(line, _first_error(exc)) from exc

    def _parse_line_item(self, line: str, fields: List[str]) -> LineItem:
        if len(fields) != LINE_FIELD_COUNT:
            raise MapItemParseError(
                line, f"Line needs {LINE_FIELD_COUNT} fields, got {len(fields)}"
            )
        fx, fy, fz, tx, ty, tz, r, g, b = fields
        try:
            return LineItem(
                start=self._parse_point(line, fx, fy, fz),
                end=self._parse_point(line, tx, ty, tz),
                color=self._parse_color(line, r, g, b),
            )
        except ValidationError as exc:
            raise MapItemParseError(line, _first_error(exc)) from exc

    def _parse_point(self, line: str, x: str, y: str, z: str) -> Point:
        return Point(
            x=self._parse_coordinate(line, x),
            y=self._parse_coordinate(line, y),
            z=self._parse_coordinate(line, z),
        )

    def _parse_color(self, line: str, r: str, g: str, b: str) -> Color:
        return Color(
            r=self._parse_channel(line, r),
            g=self._parse_channel(line, g),
            b=self._parse_channel(line, b),
        )

    def _parse_coordinate(self, line: str, raw: str) -> float:
        if not _FLOAT_LITERAL.fullmatch(raw):
            raise MapItemParseError(line, f"Invalid coordinate {raw!r}")
        return float(raw)

    def _parse_channel(self, line: str, raw: str) -> int:
        if not _UINT_LITERAL.fullmatch(raw):
            raise MapItemParseError(line, f"Invalid color channel {raw!r}")
        digits = raw.lstrip("+").lstrip("0") or "0"
        if len(digits) > MAX_CHANNEL_DIGITS:
            raise MapItemParseError(line, f"Color channel out of range {raw[:16]!r}")
        return int(digits)


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first["msg"]


DEFAULT_PARSER = MapItemParser()


def parse_map_item(line: str) -> PointItem | LineItem:
    return DEFAULT_PARSER.parse(line)
