"""Typed configuration models for errdefs runtime settings."""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "errdefs" / "errdefs.yaml"

CONFIG_PATH: ContextVar[Path] = ContextVar(
    "errdefs_config_path", default=DEFAULT_CONFIG_PATH
)


class LoggingSettings(BaseModel):
    """Structured logging configuration for errdefs adapters."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "errdefs"
    environment: str = "dev"


class ProcessSettings(BaseModel):
    """Identity of the running process, recorded in captured stack traces."""

    version: str = "dev"
    revision: str = "dirty"


class StackSettings(BaseModel):
    """Stack capture limits."""

    max_depth: int = Field(default=32, gt=0)


class ErrdefsSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="ERRDEFS_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    process: ProcessSettings = Field(default_factory=ProcessSettings)
    stack: StackSettings = Field(default_factory=StackSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply errdefs precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=CONFIG_PATH.get(),
                yaml_file_encoding="utf-8",
            ),
        )
