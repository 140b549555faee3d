from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from domain.models import BoundingBox, MapItems, SvgDocument
from domain.ports.rendering import Rasterizer, SvgDocumentWriter
from domain.ports.repositories import MapRepository
from domain.services.bounding_box import compute_bounding_box
from domain.services.build_map_svg import MapSvgBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapDrawing:
    items: MapItems
    box: BoundingBox
    document: SvgDocument


@dataclass(frozen=True)
class RenderSummary:
    output: Path
    item_count: int
    point_count: int
    line_count: int
    box: BoundingBox
    document: SvgDocument
    svg_output: Path | None = None


class MapRenderService:
    """Load map files, lay them out in their bounding box and hand the SVG to a rasterizer."""

    def __init__(
        self,
        repository: MapRepository,
        rasterizer: Rasterizer,
        builder: MapSvgBuilder | None = None,
        svg_writer: SvgDocumentWriter | None = None,
    ) -> None:
        self.repository = repository
        self.rasterizer = rasterizer
        self.builder = builder or MapSvgBuilder()
        self.svg_writer = svg_writer

    def draw(self, paths: Sequence[Path]) -> MapDrawing:
        items = self.repository.load_all(paths)
        box = compute_bounding_box(items)
        logger.debug("Bounding box for %d items: %s", len(items), box)
        return MapDrawing(items=items, box=box, document=self.builder.build(items, box))

    def render(
        self,
        paths: Sequence[Path],
        output: Path,
        svg_output: Path | None = None,
    ) -> RenderSummary:
        """Rasterize the map to ``output``; optionally keep the SVG at ``svg_output``.

        The SVG is written first and removed again if rasterizing fails, so a
        failed run leaves neither file behind.
        """
        if svg_output is not None and self.svg_writer is None:
            msg = "svg_output requires an svg_writer"
            raise ValueError(msg)

        drawing = self.draw(paths)
        if svg_output is not None:
            self.svg_writer.save(drawing.document, svg_output)
        try:
            self.rasterizer.render(drawing.document, output)
        except Exception:
            if svg_output is not None:
                self._discard_svg(svg_output)
            raise
        return RenderSummary(
            output=output,
            item_count=len(drawing.items),
            point_count=len(drawing.items.point_items),
            line_count=len(drawing.items.line_items),
            box=drawing.box,
            document=drawing.document,
            svg_output=svg_output,
        )

    def _discard_svg(self, path: Path) -> None:
        try:
            self.svg_writer.discard(path)
        except OSError:
            logger.warning("Could not remove %s after a failed render", path, exc_info=True)
