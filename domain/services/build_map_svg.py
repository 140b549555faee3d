from __future__ import annotations

import xml.etree.ElementTree as ET
from decimal import Decimal
from typing import Dict

from domain.models import (
    POINT_RADIUS,
    SVG_NS,
    BoundingBox,
    LineItem,
    MapItems,
    PointItem,
    SvgDocument,
    to_float32,
)

ET.register_namespace("", SVG_NS)

LINE_ITEM_CLASS = "line-item"
POINT_ITEM_CLASS = "point-item-circle"


class MapSvgBuilder:
    def build(self, items: MapItems, box: BoundingBox) -> SvgDocument:
        root = ET.Element(
            _q("svg"),
            {
                "width": format_number(box.width),
                "height": format_number(box.height),
                "viewBox": " ".join(format_number(value) for value in box.as_tuple()),
            },
        )
        for item in items:
            match item:
                case LineItem():
                    ET.SubElement(root, _q("path"), self._line_attributes(item))
                case PointItem():
                    ET.SubElement(root, _q("circle"), self._point_attributes(item))
                case _:
                    msg = f"Unsupported map item: {item!r}"
                    raise TypeError(msg)

        ET.indent(root)
        text = ET.tostring(root, encoding="unicode") + "\n"
        return SvgDocument(text=text, width=box.width, height=box.height)

    def _line_attributes(self, item: LineItem) -> Dict[str, str]:
        start, end = item.start, item.end
        return {
            "d": (
                f"M {format_number(start.x)} {format_number(start.y)} "
                f"L {format_number(end.x)} {format_number(end.y)}"
            ),
            "stroke": item.color.to_svg(),
            "fill": "none",
            "class": LINE_ITEM_CLASS,
        }

    def _point_attributes(self, item: PointItem) -> Dict[str, str]:
        return {
            "cx": format_number(item.point.x),
            "cy": format_number(item.point.y),
            "r": str(POINT_RADIUS),
            "fill": item.color.to_svg(),
            "class": POINT_ITEM_CLASS,
        }


def format_number(value: float) -> str:
    """Shortest plain decimal that reads back as ``value``.

    Binary32 values only need to round-trip through binary32, so ``-50.5124``
    prints as typed rather than as its float64 expansion.
    """
    text = repr(value)
    for precision in range(1, 18):
        candidate = f"{value:.{precision}g}"
        if _same_value(float(candidate), value):
            text = candidate
            break
    plain = format(Decimal(text), "f")
    return "0" if plain == "-0" and value == 0 else plain


def _same_value(candidate: float, value: float) -> bool:
    if candidate == value:
        return True
    try:
        return to_float32(value) == value and to_float32(candidate) == value
    except ValueError:
        return False


def _q(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"
