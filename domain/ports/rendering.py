from __future__ import annotations

from pathlib import Path
from typing import Protocol

from domain.models import SvgDocument


class Rasterizer(Protocol):
    def render(self, document: SvgDocument, path: Path) -> None: ...


class SvgDocumentWriter(Protocol):
    def save(self, document: SvgDocument, path: Path) -> None: ...

    def discard(self, path: Path) -> None: ...
