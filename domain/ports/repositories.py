from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import MapItems


class MapRepository(Protocol):
    def load_all(self, paths: Sequence[Path]) -> MapItems: ...

    def load_by_path(self, path: Path) -> MapItems: ...
