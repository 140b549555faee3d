from __future__ import annotations

import contextlib
from pathlib import Path

from adapters.filesystem.file_utils import write_text_atomic
from domain.models import SvgDocument
from domain.ports.rendering import SvgDocumentWriter


class FileSystemSvgWriter(SvgDocumentWriter):
    def save(self, document: SvgDocument, path: Path) -> None:
        write_text_atomic(path, document.text)

    def discard(self, path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
