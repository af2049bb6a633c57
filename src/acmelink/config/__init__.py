"""Configuration subsystem for acmelink.

Public API::

    from acmelink.config import build_settings, load_settings

    settings = load_settings("config.yaml")   # from a file
    settings = build_settings()               # all defaults
"""

from acmelink.config.loader import ConfigValidationError, load_settings
from acmelink.config.settings import (
    ClientSettings,
    ConnectorSettings,
    LoggingSettings,
    ProviderSettings,
    build_settings,
)

__all__ = [
    "ClientSettings",
    "ConfigValidationError",
    "ConnectorSettings",
    "LoggingSettings",
    "ProviderSettings",
    "build_settings",
    "load_settings",
]
