"""Public API for errdefs configuration."""

from .loader import configure, get_settings, load_settings, reset_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ErrdefsSettings,
    LoggingSettings,
    ProcessSettings,
    StackSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ErrdefsSettings",
    "LoggingSettings",
    "ProcessSettings",
    "StackSettings",
    "configure",
    "get_settings",
    "load_settings",
    "reset_settings",
]
