"""Provider for Let's Encrypt.

``acme://letsencrypt.org`` selects the production server,
``acme://letsencrypt.org/staging`` the staging server.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from acmelink.provider.base import AcmeProvider

PRODUCTION_DIRECTORY = "https://acme-v02.api.letsencrypt.org/directory"
STAGING_DIRECTORY = "https://acme-staging-v02.api.letsencrypt.org/directory"

_DIRECTORIES = {
    "": PRODUCTION_DIRECTORY,
    "/": PRODUCTION_DIRECTORY,
    "/v02": PRODUCTION_DIRECTORY,
    "/staging": STAGING_DIRECTORY,
    "/staging/v02": STAGING_DIRECTORY,
}


class LetsEncryptAcmeProvider(AcmeProvider):
    """Maps ``acme://letsencrypt.org[/staging]`` to the Let's Encrypt directories."""

    def accepts(self, server_uri: str) -> bool:
        parts = urlsplit(server_uri)
        return parts.scheme == "acme" and parts.netloc == "letsencrypt.org"

    def resolve(self, server_uri: str) -> str:
        if not self.accepts(server_uri):
            msg = f"Not a Let's Encrypt URI: {server_uri}"
            raise ValueError(msg)
        path = urlsplit(server_uri).path
        try:
            return _DIRECTORIES[path]
        except KeyError:
            msg = f"Unknown Let's Encrypt instance '{path}' in {server_uri}"
            raise ValueError(msg) from None
