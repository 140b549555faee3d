from __future__ import annotations

from pathlib import Path


class MapItemParseError(ValueError):
    """Raised when a single map line does not match the item grammar."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class MapLoadError(OSError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class MapWriteError(OSError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class MapRenderError(RuntimeError):
    pass
