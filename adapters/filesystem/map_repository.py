from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Tuple

from domain.errors import MapLoadError
from domain.models import MapItems
from domain.ports.repositories import MapRepository
from domain.services.parse_map_item import DEFAULT_PARSER, MapItemParser

logger = logging.getLogger(__name__)


class FileSystemMapRepository(MapRepository):
    def __init__(
        self,
        parser: MapItemParser | None = None,
        *,
        encoding: str = "utf-8",
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            msg = f"max_workers must be >= 1, got {max_workers}"
            raise ValueError(msg)
        self.parser = parser or DEFAULT_PARSER
        self.encoding = encoding
        self.max_workers = max_workers

    def load_all(self, paths: Sequence[Path]) -> MapItems:
        paths = [Path(path) for path in paths]
        if self.max_workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as executor:
                # map() yields in submission order, so file order is kept.
                loaded = list(executor.map(self.load_by_path, paths))
        else:
            loaded = [self.load_by_path(path) for path in paths]
        return MapItems().concat(*loaded)

    def load_by_path(self, path: Path) -> MapItems:
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            reason = exc.strerror or exc.__class__.__name__
            raise MapLoadError(path, f"Failed to read map file ({reason})") from exc

        raw_lines = split_lines(content)
        numbered = self._decode_lines(raw_lines, source=str(path))
        items = tuple(
            item for _, item in self.parser.parse_numbered_lines(numbered, source=str(path))
        )
        skipped = len(raw_lines) - len(items)
        logger.info("Loaded %d items from %s (%d lines skipped)", len(items), path, skipped)
        return MapItems(items=items)

    def _decode_lines(self, raw_lines: Sequence[bytes], *, source: str) -> Iterator[Tuple[int, str]]:
        for number, raw in enumerate(raw_lines, start=1):
            try:
                yield number, raw.decode(self.encoding)
            except UnicodeDecodeError as exc:
                logger.debug("Skipping %s:%d: undecodable bytes (%s)", source, number, exc.reason)


def split_lines(content: bytes) -> List[bytes]:
    """Split on ``\\n`` only. A ``\\r`` before the newline is left for the parser to drop."""
    lines = content.split(b"\n")
    if lines and not lines[-1]:
        lines.pop()
    return lines
