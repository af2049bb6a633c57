"""Error types raised by the ACME provider layer.

Recoverable faults derive from :class:`AcmeError` and carry a
``retryable`` hint so callers can decide on backoff.  Programming and
packaging defects raise :class:`ChallengeRegistryError`, which is
deliberately *not* an :class:`AcmeError`.

Usage::

    try:
        directory = provider.directory(session, uri)
    except AcmeProtocolError as exc:
        log.warning("server said %s (%s)", exc.status, exc.problem_type)
    except AcmeParseError:
        ...
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# RFC 8555 §6.7 -- ACME error-type URNs
# ---------------------------------------------------------------------------
_P = "urn:ietf:params:acme:error:"

BAD_NONCE = _P + "badNonce"
CONNECTION = _P + "connection"
MALFORMED = _P + "malformed"
RATE_LIMITED = _P + "rateLimited"
SERVER_INTERNAL = _P + "serverInternal"
UNAUTHORIZED = _P + "unauthorized"
USER_ACTION_REQUIRED = _P + "userActionRequired"

# Problem types that a caller may retry as-is (fresh nonce / after backoff)
_RETRYABLE_PROBLEMS = frozenset({BAD_NONCE, RATE_LIMITED})

PROBLEM_CONTENT_TYPE = "application/problem+json"


class AcmeError(Exception):
    """Base class for recoverable ACME faults.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.
    retryable:
        Whether the failure is transient and the operation may be retried.

    """

    def __init__(self, detail: str, *, retryable: bool = False) -> None:
        self.detail = detail
        self.retryable = retryable
        super().__init__(detail)


class AcmeNetworkError(AcmeError):
    """The server could not be reached (DNS, connect, TLS, timeout)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, retryable=True)


class AcmeProtocolError(AcmeError):
    """The server answered with an unexpected HTTP status.

    Parameters
    ----------
    status:
        The HTTP status code actually received.
    detail:
        Human-readable description.  When the server sent an RFC 7807
        problem document this is its ``detail`` member.
    problem_type:
        The problem ``type`` URN, if the body was a problem document.

    """

    def __init__(
        self,
        status: int,
        detail: str,
        *,
        problem_type: str | None = None,
    ) -> None:
        self.status = status
        self.problem_type = problem_type
        retryable = status >= 500 or problem_type in _RETRYABLE_PROBLEMS  # noqa: PLR2004
        super().__init__(detail, retryable=retryable)


class AcmeParseError(AcmeError):
    """The server answered OK but the body could not be parsed."""


class ChallengeRegistryError(RuntimeError):
    """A challenge class is broken or could not be registered.

    Signals a defect in the package or in a challenge implementation,
    never a condition a caller should retry.
    """
