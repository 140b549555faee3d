from __future__ import annotations

import contextlib
from pathlib import Path

from domain.errors import MapWriteError


def write_bytes_atomic(path: Path, payload: bytes) -> None:
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(payload)
        tmp_path.replace(path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise MapWriteError(path, f"Failed to write output file ({exc.strerror or exc})") from exc


def write_text_atomic(path: Path, content: str) -> None:
    write_bytes_atomic(path, content.encode("utf-8"))
