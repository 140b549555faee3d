from __future__ import annotations

import codecs
import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

DEFAULT_CONFIG_PATH = Path("config/eqmap.yaml")
CONFIG_PATH_ENV = "EQMAP_CONFIG_PATH"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class LoaderSettings(BaseModel):
    max_workers: int = Field(default=1, ge=1)
    encoding: str = "utf-8"

    @field_validator("encoding", mode="after")
    @classmethod
    def ensure_known_encoding(cls, value: str) -> str:
        try:
            name = codecs.lookup(value).name
        except LookupError as exc:
            msg = f"loader.encoding is not a known codec: {value}"
            raise ValueError(msg) from exc
        # Map files are split on the raw newline byte before decoding.
        if "\n".encode(name) != b"\n":
            msg = f"loader.encoding must encode newline as a single byte: {value}"
            raise ValueError(msg)
        return name


class RenderSettings(BaseModel):
    scale: float = Field(default=1.0, gt=0)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EQMAP_", env_nested_delimiter="__")

    log_level: str = "WARNING"
    loader: LoaderSettings = LoaderSettings()
    render: RenderSettings = RenderSettings()

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "WARNING").strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None, **overrides: object) -> AppSettings:
    env_path = os.getenv(CONFIG_PATH_ENV)
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings(**overrides)
    finally:
        AppSettings._yaml_path = previous
