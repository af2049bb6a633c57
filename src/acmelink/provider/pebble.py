"""Provider for Pebble, the Let's Encrypt test server.

``acme://pebble`` maps to ``https://localhost:14000/dir``; host, port
and path can be given explicitly, e.g. ``acme://pebble/pebble.test:14443``.

Pebble serves its API with a certificate from its own throwaway CA,
so this provider overrides :meth:`create_http_connector` to trust the
configured Pebble CA bundle, or to skip verification when none is set.
"""

from __future__ import annotations

import dataclasses
import logging
from urllib.parse import urlsplit

from acmelink.config.settings import build_settings
from acmelink.connector.http import HttpConnector
from acmelink.provider.base import AcmeProvider

log = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 14000
DIRECTORY_PATH = "/dir"


class PebbleAcmeProvider(AcmeProvider):
    """Maps ``acme://pebble[/host[:port]]`` to a Pebble directory URL."""

    def accepts(self, server_uri: str) -> bool:
        parts = urlsplit(server_uri)
        return parts.scheme == "acme" and parts.netloc == "pebble"

    def resolve(self, server_uri: str) -> str:
        if not self.accepts(server_uri):
            msg = f"Not a Pebble URI: {server_uri}"
            raise ValueError(msg)

        target = urlsplit(server_uri).path.strip("/")
        if not target:
            return f"https://{DEFAULT_HOST}:{DEFAULT_PORT}{DIRECTORY_PATH}"

        parsed = urlsplit(f"//{target}")
        try:
            port = parsed.port or DEFAULT_PORT
        except ValueError as exc:
            msg = f"Invalid Pebble port in {server_uri}"
            raise ValueError(msg) from exc
        if not parsed.hostname or parsed.path:
            msg = f"Invalid Pebble host in {server_uri}"
            raise ValueError(msg)
        return f"https://{parsed.hostname}:{port}{DIRECTORY_PATH}"

    def create_http_connector(self) -> HttpConnector:
        if self._connector_factory is not None:
            return super().create_http_connector()

        settings = self._settings or build_settings()
        ca_cert_path = settings.providers.pebble_ca_cert_path
        if ca_cert_path:
            connector = dataclasses.replace(
                settings.connector,
                ca_cert_path=ca_cert_path,
                verify_ssl=True,
            )
        else:
            connector = dataclasses.replace(settings.connector, verify_ssl=False)
        return HttpConnector(connector)
