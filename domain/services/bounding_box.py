from __future__ import annotations

from domain.models import BoundingBox, MapItems, to_float32

EMPTY_BOUNDING_BOX = BoundingBox(origin_x=0.0, origin_y=0.0, width=0.0, height=0.0)


def compute_bounding_box(items: MapItems) -> BoundingBox:
    """Smallest axis-aligned box around the (x, y) projection of every item point.

    Coordinates are finite by construction, so plain float ordering is total.
    Extents are rounded to binary32 like the coordinates they are built from.
    """
    xs = []
    ys = []
    for point in items.points():
        xs.append(point.x)
        ys.append(point.y)
    if not xs:
        return EMPTY_BOUNDING_BOX

    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    return BoundingBox(
        origin_x=min_x,
        origin_y=min_y,
        width=_extent(min_x, max_x),
        height=_extent(min_y, max_y),
    )


def _extent(low: float, high: float) -> float:
    span = high - low
    try:
        return to_float32(span)
    except ValueError:
        # Wider than binary32 can hold; keep the exact double.
        return span
