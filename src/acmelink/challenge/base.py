"""Abstract base classes for ACME challenge objects.

Every challenge class (built-in and custom) inherits from
:class:`Challenge`, sets :attr:`Challenge.challenge_type`, and keeps the
single-argument constructor ``Challenge(session)`` so the registry can
build it.  Server data is loaded afterwards with :meth:`Challenge.unmarshal`.
"""

from __future__ import annotations

import abc
import logging
import re
from typing import TYPE_CHECKING, Any, ClassVar

from acmelink.core.jws import key_authorization
from acmelink.core.types import ChallengeStatus
from acmelink.errors import AcmeError, AcmeParseError

if TYPE_CHECKING:
    from acmelink.core.types import ChallengeType
    from acmelink.session import Session

log = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class Challenge(abc.ABC):
    """Base class for all ACME challenges.

    Parameters
    ----------
    session:
        The session this challenge is bound to.  It is the only
        constructor dependency.

    """

    challenge_type: ClassVar[ChallengeType]
    """The ACME challenge type this class handles."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._data: dict[str, Any] = {}

    @property
    def session(self) -> Session:
        return self._session

    # -- server data -------------------------------------------------------

    def unmarshal(self, data: dict[str, Any]) -> None:
        """Load the challenge object sent by the server.

        Raises
        ------
        AcmeParseError
            If *data* is not an object or describes a different
            challenge type.

        """
        if not isinstance(data, dict):
            msg = "Challenge data must be a JSON object"
            raise AcmeParseError(msg)
        received = data.get("type")
        if received != self.challenge_type:
            msg = f"Cannot load '{received}' data into a {self.challenge_type} challenge"
            raise AcmeParseError(msg)
        self._data = dict(data)

    @property
    def url(self) -> str | None:
        return self._data.get("url")

    @property
    def status(self) -> ChallengeStatus:
        return ChallengeStatus.parse(self._data.get("status", "pending"))

    @property
    def validated(self) -> str | None:
        """RFC 3339 timestamp of a successful validation, if any."""
        return self._data.get("validated")

    @property
    def error(self) -> dict[str, Any] | None:
        """The problem document attached to a failed challenge, if any."""
        return self._data.get("error")

    def respond(self) -> dict[str, Any]:
        """Return the payload that tells the server to start validation.

        RFC 8555 §7.5.1 specifies an empty object.
        """
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, status={self.status.value!r})"


class TokenChallenge(Challenge):
    """A challenge whose proof is derived from a server token and the account key."""

    @property
    def token(self) -> str:
        """The server-issued token.

        Raises
        ------
        AcmeError
            If no data was loaded or the token is not base64url.

        """
        token = self._data.get("token")
        if not isinstance(token, str) or not _TOKEN_RE.match(token):
            msg = f"{self.challenge_type} challenge has no valid token"
            raise AcmeError(msg)
        return token

    def get_authorization(self) -> str:
        """Return the key authorization for the session's account key."""
        return key_authorization(self.token, self.session.public_jwk())
