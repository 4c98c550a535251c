"""Configuration module for the xkepster client."""
from .settings import (
    Configuration,
    LogLevel,
    configure,
    get_config,
    load_settings,
    reset_configuration,
)

__all__ = [
    "Configuration",
    "LogLevel",
    "configure",
    "get_config",
    "load_settings",
    "reset_configuration",
]
