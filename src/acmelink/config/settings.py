"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.

Access pattern::

    from acmelink.config import load_settings

    settings = load_settings("acmelink.yaml")
    settings.connector.timeout_seconds   # typed, IDE-autocompleted
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USER_AGENT = "acmelink"

# ---------------------------------------------------------------------------
# Connector
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConnectorSettings:
    """HTTP transport configuration (timeouts, proxy, TLS trust)."""

    timeout_seconds: float
    user_agent: str
    proxy_url: str | None
    verify_ssl: bool
    ca_cert_path: str | None
    max_response_bytes: int


def _build_connector(data: dict | None) -> ConnectorSettings:
    d = data or {}
    return ConnectorSettings(
        timeout_seconds=d.get("timeout_seconds", 10),
        user_agent=d.get("user_agent", DEFAULT_USER_AGENT),
        proxy_url=d.get("proxy_url"),
        verify_ssl=d.get("verify_ssl", True),
        ca_cert_path=d.get("ca_cert_path"),
        max_response_bytes=d.get("max_response_bytes", 1048576),
    )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderSettings:
    """Extra provider classes and provider-specific options."""

    extra: tuple[str, ...]
    pebble_ca_cert_path: str | None


def _build_providers(data: dict | None) -> ProviderSettings:
    d = data or {}
    return ProviderSettings(
        extra=tuple(d.get("extra", [])),
        pebble_ca_cert_path=d.get("pebble_ca_cert_path"),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Library logging configuration (level, format)."""

    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClientSettings:
    """Root of the settings tree."""

    connector: ConnectorSettings
    providers: ProviderSettings
    logging: LoggingSettings


def build_settings(data: dict | None = None) -> ClientSettings:
    """Build the full typed settings tree from raw config data.

    Missing sections and keys fall back to their defaults, so
    ``build_settings()`` alone yields a usable configuration.
    """
    d = data or {}
    return ClientSettings(
        connector=_build_connector(d.get("connector")),
        providers=_build_providers(d.get("providers")),
        logging=_build_logging(d.get("logging")),
    )
