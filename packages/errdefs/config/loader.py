"""Settings loading and the process-wide settings instance.

The cascade is always:
1) Keyword overrides passed to ``load_settings``
2) Environment variables (``ERRDEFS_`` prefix, ``__`` nesting)
3) ``~/.config/errdefs/errdefs.yaml`` or an explicit ``config_path``
4) Model defaults

Example: ``ERRDEFS_PROCESS__VERSION=1.4.0`` -> ``process.version = "1.4.0"``.

Processes install their settings once at startup with ``configure``; readers
such as the stack capturer call ``get_settings``, which falls back to loading
from the environment on first use.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from .models import CONFIG_PATH, DEFAULT_CONFIG_PATH, ErrdefsSettings

_configured: ErrdefsSettings | None = None


def load_settings(
    *, config_path: str | Path | None = None, **overrides: Any
) -> ErrdefsSettings:
    """Build settings from overrides, environment and the YAML file."""
    resolved = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    token = CONFIG_PATH.set(resolved)
    try:
        return ErrdefsSettings(**overrides)
    finally:
        CONFIG_PATH.reset(token)


def configure(settings: ErrdefsSettings) -> None:
    """Install the process-wide settings instance."""
    global _configured
    _configured = settings


def get_settings() -> ErrdefsSettings:
    """Return the installed settings, loading defaults once if none were set."""
    if _configured is not None:
        return _configured
    return _default_settings()


def reset_settings() -> None:
    """Drop installed and cached settings so the next read reloads them."""
    global _configured
    _configured = None
    _default_settings.cache_clear()


@lru_cache(maxsize=1)
def _default_settings() -> ErrdefsSettings:
    """Load settings from the default sources once per process."""
    return load_settings()
