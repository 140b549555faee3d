from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import AppSettings, LoaderSettings, load_settings
from tests.helpers.map_fixtures import repo_root


def _write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings()

    assert settings.log_level == "WARNING"
    assert settings.log_level_number == logging.WARNING
    assert settings.loader.max_workers == 1
    assert settings.loader.encoding == "utf-8"
    assert settings.render.scale == 1.0


def test_yaml_then_env_then_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _write_yaml(
        tmp_path / "eqmap.yaml",
        "log_level: info\nloader:\n  max_workers: 3\n  encoding: latin-1\nrender:\n  scale: 2\n",
    )

    from_yaml = load_settings(config)
    assert from_yaml.log_level == "INFO"
    assert from_yaml.loader.max_workers == 3
    assert from_yaml.loader.encoding == "iso8859-1"
    assert from_yaml.render.scale == 2.0

    monkeypatch.setenv("EQMAP_LOADER__MAX_WORKERS", "5")
    from_env = load_settings(config)
    assert from_env.loader.max_workers == 5
    assert from_env.loader.encoding == "iso8859-1"

    overridden = load_settings(config, loader={"max_workers": 7}, log_level="debug")
    assert overridden.loader.max_workers == 7
    assert overridden.log_level == "DEBUG"


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _write_yaml(tmp_path / "custom.yaml", "render:\n  scale: 4\n")
    monkeypatch.setenv("EQMAP_CONFIG_PATH", str(config))

    assert load_settings().render.scale == 4.0


def test_default_config_file_in_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "config").mkdir()
    _write_yaml(tmp_path / "config" / "eqmap.yaml", "log_level: ERROR\n")
    monkeypatch.chdir(tmp_path)

    assert load_settings().log_level == "ERROR"


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_settings(tmp_path / "absent.yaml")


def test_yaml_path_is_not_sticky(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    load_settings(_write_yaml(tmp_path / "once.yaml", "render:\n  scale: 3\n"))

    assert load_settings().render.scale == 1.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"log_level": "LOUD"},
        {"loader": {"max_workers": 0}},
        {"loader": {"encoding": "no-such-codec"}},
        {"loader": {"encoding": "utf-16"}},
        {"render": {"scale": 0}},
    ],
)
def test_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        AppSettings(**overrides)


def test_example_config_is_valid() -> None:
    settings = load_settings(repo_root() / "config" / "eqmap.example.yaml")

    assert settings.loader == LoaderSettings(max_workers=4, encoding="utf-8")
    assert settings.log_level == "INFO"
