"""Scoped connections to an ACME server.

A :class:`Connection` wraps one :class:`HttpConnector` for the
duration of a single exchange.  Use it as a context manager so the
underlying response is released on every exit path::

    with provider.connect() as conn:
        conn.send_request(url, session)
        conn.accept(200)
        conn.update_session(session)
        data = conn.read_json_response()
"""

from __future__ import annotations

import abc
import json
import logging
import re
from typing import TYPE_CHECKING, Any

from acmelink.errors import (
    PROBLEM_CONTENT_TYPE,
    AcmeError,
    AcmeNetworkError,
    AcmeParseError,
    AcmeProtocolError,
)

if TYPE_CHECKING:
    from types import TracebackType

    from acmelink.connector.http import HttpConnector
    from acmelink.session import Session

log = logging.getLogger(__name__)

REPLAY_NONCE_HEADER = "Replay-Nonce"

# RFC 8555 §6.5.1: a nonce is a non-empty base64url string
_NONCE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class Connection(abc.ABC):
    """A single-use connection to an ACME server."""

    @abc.abstractmethod
    def send_request(self, url: str, session: Session) -> None:
        """Send a GET request to *url* on behalf of *session*."""

    @abc.abstractmethod
    def accept(self, *status_codes: int) -> int:
        """Check the response status against *status_codes*.

        Returns the status on a match.

        Raises
        ------
        AcmeProtocolError
            If the status is not one of *status_codes*.

        """

    @abc.abstractmethod
    def read_json_response(self) -> dict[str, Any]:
        """Parse the response body as a JSON object.

        Raises
        ------
        AcmeParseError
            If the body is not a JSON object.

        """

    @abc.abstractmethod
    def get_nonce(self) -> str | None:
        """Return the ``Replay-Nonce`` of the response, if it carried a valid one."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the connection.  Calling it more than once is harmless."""

    def update_session(self, session: Session) -> None:
        """Copy the response nonce into *session*, if there is one.

        Leaves the session untouched when the response carried no
        usable nonce.
        """
        nonce = self.get_nonce()
        if nonce is not None:
            session.nonce = nonce

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            self.close()
            return
        # Keep the original error; a failed release is only logged
        try:
            self.close()
        except Exception:  # noqa: BLE001
            log.warning("Error closing connection after %s", exc_type.__name__, exc_info=True)


class DefaultConnection(Connection):
    """Connection backed by an :class:`HttpConnector`.

    Parameters
    ----------
    connector:
        The transport to send requests through.

    """

    def __init__(self, connector: HttpConnector) -> None:
        self._connector = connector
        self._response: Any = None
        self._url: str | None = None
        self._body: bytes | None = None
        self._closed = False

    def send_request(self, url: str, session: Session) -> None:
        if session is None:
            msg = "session must not be None"
            raise TypeError(msg)
        if self._closed:
            msg = "Connection is closed"
            raise AcmeError(msg)

        self._release_response()

        headers = {"Accept": "application/json"}
        if session.locale:
            headers["Accept-Language"] = session.locale

        log.debug("GET %s", url, extra={"url": url})
        self._url = url
        self._response = self._connector.open(url, headers=headers)

    def accept(self, *status_codes: int) -> int:
        resp = self._require_response()
        status = resp.status
        if status in status_codes:
            return status

        problem = self._read_problem()
        problem_type = problem.get("type") if problem else None
        if not isinstance(problem_type, str):
            problem_type = None
        detail = problem.get("detail") if problem else None
        if not isinstance(detail, str) or not detail:
            detail = f"Unexpected response from ACME server: HTTP {status}"
        log.debug(
            "Rejected HTTP %d response",
            status,
            extra={"url": self._url, "status": status, "problem_type": problem_type},
        )
        raise AcmeProtocolError(
            status,
            detail,
            problem_type=problem_type,
        )

    def read_json_response(self) -> dict[str, Any]:
        body = self._read_body()
        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"ACME server returned an unparsable response: {exc}"
            raise AcmeParseError(msg) from exc

        if not isinstance(data, dict):
            msg = f"ACME server returned a JSON {type(data).__name__}, expected an object"
            raise AcmeParseError(msg)
        return data

    def get_nonce(self) -> str | None:
        resp = self._require_response()
        nonce = resp.headers.get(REPLAY_NONCE_HEADER)
        if nonce is None:
            return None
        nonce = nonce.strip()
        if not _NONCE_RE.match(nonce):
            log.warning("Ignoring malformed %s header", REPLAY_NONCE_HEADER)
            return None
        log.debug("Received replay nonce")
        return nonce

    def close(self) -> None:
        try:
            self._release_response()
        finally:
            self._closed = True

    # -- internals ---------------------------------------------------------

    def _require_response(self) -> Any:  # noqa: ANN401
        if self._response is None:
            msg = "No request has been sent on this connection"
            raise AcmeError(msg)
        return self._response

    def _release_response(self) -> None:
        if self._response is not None:
            try:
                self._response.close()
            finally:
                self._response = None
                self._body = None

    def _read_body(self) -> bytes:
        """Read the body once, enforcing the configured size limit."""
        resp = self._require_response()
        if self._body is not None:
            return self._body

        max_bytes = self._connector.settings.max_response_bytes
        try:
            body = resp.read(max_bytes + 1)
        except OSError as exc:
            msg = f"Error reading response from ACME server: {exc}"
            raise AcmeNetworkError(msg) from exc

        if len(body) > max_bytes:
            msg = f"ACME server response exceeds {max_bytes} bytes"
            raise AcmeParseError(msg)
        self._body = body
        return body

    def _read_problem(self) -> dict[str, Any] | None:
        """Return the RFC 7807 problem document of an error response, if any."""
        content_type = self._response.headers.get("Content-Type", "")
        if not content_type.startswith(PROBLEM_CONTENT_TYPE):
            return None
        try:
            problem = json.loads(self._read_body().decode("utf-8"))
        except (AcmeError, UnicodeDecodeError, json.JSONDecodeError):
            log.debug("Could not parse problem document", exc_info=True)
            return None
        return problem if isinstance(problem, dict) else None
