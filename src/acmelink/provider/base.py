"""Abstract base class for ACME providers.

A provider encapsulates everything that differs between ACME servers:
which server URIs it handles (:meth:`AcmeProvider.accepts`), where the
directory of a server URI lives (:meth:`AcmeProvider.resolve`), and how
the HTTP transport is configured
(:meth:`AcmeProvider.create_http_connector`).  Everything else,
fetching the directory and building challenge objects, is shared.

Callers only ever need :meth:`connect`, :meth:`directory` and
:meth:`create_challenge`; they never depend on a concrete provider
class.
"""

from __future__ import annotations

import abc
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from acmelink.challenge.registry import CHALLENGES
from acmelink.connector.connection import DefaultConnection
from acmelink.connector.http import HttpConnector

if TYPE_CHECKING:
    from collections.abc import Callable

    from acmelink.challenge.base import Challenge
    from acmelink.config.settings import ClientSettings, ConnectorSettings
    from acmelink.connector.connection import Connection
    from acmelink.session import Session

log = logging.getLogger(__name__)


class AcmeProvider(abc.ABC):
    """Base class for all ACME provider implementations.

    Subclasses must implement :meth:`accepts` and :meth:`resolve`.

    Parameters
    ----------
    settings:
        The client settings tree.  Only the ``connector`` and
        ``providers`` sections are read.
    connector_factory:
        Optional callable returning the :class:`HttpConnector` to use.
        Lets callers swap the transport without subclassing.

    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        connector_factory: Callable[[], HttpConnector] | None = None,
    ) -> None:
        self._settings = settings
        self._connector_factory = connector_factory

    @property
    def connector_settings(self) -> ConnectorSettings | None:
        return self._settings.connector if self._settings is not None else None

    @abc.abstractmethod
    def accepts(self, server_uri: str) -> bool:
        """Check whether this provider handles *server_uri*."""

    @abc.abstractmethod
    def resolve(self, server_uri: str) -> str:
        """Return the directory URL for *server_uri*.

        Must be a pure function of its argument.

        Raises
        ------
        ValueError
            If *server_uri* is not handled by this provider.

        """

    def create_http_connector(self) -> HttpConnector:
        """Create the :class:`HttpConnector` for new connections.

        Subclasses may override this method to configure the
        transport.
        """
        if self._connector_factory is not None:
            return self._connector_factory()
        return HttpConnector(self.connector_settings)

    def connect(self) -> Connection:
        """Return a fresh connection.  The caller must close it."""
        return DefaultConnection(self.create_http_connector())

    def directory(self, session: Session, server_uri: str) -> dict[str, Any]:
        """Fetch the ACME directory of *server_uri*.

        Performs exactly one request.  If the response carries a
        ``Replay-Nonce`` header, it is stored in ``session.nonce`` so
        the caller's first signed request needs no extra nonce fetch.

        Raises
        ------
        TypeError
            If *session* or *server_uri* is ``None``.
        AcmeNetworkError
            If the server cannot be reached.
        AcmeProtocolError
            If the server answers with anything but HTTP 200.
        AcmeParseError
            If the body is not a JSON object.

        """
        if session is None:
            msg = "session must not be None"
            raise TypeError(msg)
        if server_uri is None:
            msg = "server_uri must not be None"
            raise TypeError(msg)

        with self.connect() as conn:
            url = self.resolve(server_uri)
            conn.send_request(url, session)
            conn.accept(HTTPStatus.OK)

            # use the nonce header if there is one, saves a HEAD request
            conn.update_session(session)

            directory = conn.read_json_response()

        log.debug(
            "Fetched directory of %s",
            server_uri,
            extra={"provider": type(self).__name__, "server_uri": server_uri, "url": url},
        )
        return directory

    def create_challenge(self, session: Session, challenge_type: str) -> Challenge | None:
        """Create a new challenge of *challenge_type* bound to *session*.

        Returns ``None`` if the challenge type is not supported.

        Raises
        ------
        TypeError
            If *session* or *challenge_type* is ``None``.
        ChallengeRegistryError
            If the challenge class is broken.

        """
        return CHALLENGES.create(session, challenge_type)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"
