"""Caller-owned session state for one relationship with one ACME server.

The provider layer never creates or stores a :class:`Session`.  It
receives one per call and may update :attr:`Session.nonce` as a side
effect of a successful directory fetch.  Sessions are not thread-safe;
callers sharing one across threads must serialise access themselves.
"""

from __future__ import annotations

import logging
from typing import Any

from acmelink.core.jws import public_jwk
from acmelink.errors import AcmeError

log = logging.getLogger(__name__)


class Session:
    """Mutable state for talking to a single ACME server.

    Parameters
    ----------
    server_uri:
        The server identifier as given by the user, e.g.
        ``"https://acme.example.com/directory"`` or
        ``"acme://letsencrypt.org/staging"``.
    key_pair:
        The account private key (RSA or EC), if one is known yet.
    locale:
        Preferred language for server messages, sent as
        ``Accept-Language``.

    """

    def __init__(
        self,
        server_uri: str,
        key_pair: Any = None,  # noqa: ANN401
        *,
        locale: str | None = None,
    ) -> None:
        if not server_uri:
            msg = "server_uri is required"
            raise ValueError(msg)
        self.server_uri = server_uri
        self.key_pair = key_pair
        self.locale = locale
        self.nonce: str | None = None
        # Opaque cache for callers (resolved endpoints, metadata, ...)
        self.resources: dict[str, Any] = {}

    def public_jwk(self) -> dict[str, str]:
        """Return the public JWK of the account key.

        Raises
        ------
        AcmeError
            If no key pair has been set on this session.

        """
        if self.key_pair is None:
            msg = "Session has no account key pair"
            raise AcmeError(msg)
        return public_jwk(self.key_pair)

    def __repr__(self) -> str:
        return f"Session(server_uri={self.server_uri!r})"
