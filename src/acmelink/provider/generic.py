"""Provider for any ACME server addressed by its directory URL."""

from __future__ import annotations

from urllib.parse import urlsplit

from acmelink.provider.base import AcmeProvider


class GenericAcmeProvider(AcmeProvider):
    """Accepts ``http`` and ``https`` URIs and uses them as-is."""

    def accepts(self, server_uri: str) -> bool:
        parts = urlsplit(server_uri)
        return parts.scheme in ("http", "https") and bool(parts.netloc)

    def resolve(self, server_uri: str) -> str:
        if not self.accepts(server_uri):
            msg = f"Not an http(s) directory URL: {server_uri}"
            raise ValueError(msg)
        return server_uri
