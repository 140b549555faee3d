from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, LoaderSettings, RenderSettings
from app.logging_config import PROJECT_LOGGERS


def _clear_eqmap_env() -> None:
    for key in list(os.environ):
        if key.startswith("EQMAP_"):
            os.environ.pop(key, None)


_clear_eqmap_env()


@pytest.fixture(autouse=True)
def clear_eqmap_env() -> Generator[None, None, None]:
    _clear_eqmap_env()
    yield
    _clear_eqmap_env()


@pytest.fixture(autouse=True)
def reset_project_loggers() -> Generator[None, None, None]:
    yield
    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def write_map(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, *lines: str) -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        log_level="WARNING",
        loader=LoaderSettings(max_workers=1, encoding="utf-8"),
        render=RenderSettings(scale=1.0),
    )
