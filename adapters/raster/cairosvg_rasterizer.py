from __future__ import annotations

import logging
from pathlib import Path

import cairosvg

from adapters.filesystem.file_utils import write_bytes_atomic
from domain.errors import MapRenderError
from domain.models import SvgDocument
from domain.ports.rendering import Rasterizer

logger = logging.getLogger(__name__)


class CairoSvgRasterizer(Rasterizer):
    def __init__(self, scale: float = 1.0) -> None:
        if scale <= 0:
            msg = f"scale must be > 0, got {scale}"
            raise ValueError(msg)
        self.scale = scale

    def render(self, document: SvgDocument, path: Path) -> None:
        write_bytes_atomic(path, self.render_png(document))
        logger.info("Wrote %s", path)

    def render_png(self, document: SvgDocument) -> bytes:
        pixel_width = document.width * self.scale
        pixel_height = document.height * self.scale
        if pixel_width < 1 or pixel_height < 1:
            msg = (
                "Could not create a pixmap: canvas is "
                f"{pixel_width:g}x{pixel_height:g} pixels, need at least 1x1"
            )
            raise MapRenderError(msg)

        try:
            png = cairosvg.svg2png(bytestring=document.to_bytes(), scale=self.scale)
        except Exception as exc:  # noqa: BLE001
            msg = f"Failed to render the SVG: {exc}"
            raise MapRenderError(msg) from exc
        if not png:
            msg = "Failed to render the SVG: renderer returned no data"
            raise MapRenderError(msg)
        return png
