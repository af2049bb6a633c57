"""Historical TLS-SNI challenges (ACME drafts, superseded by tls-alpn-01).

Still registered so that sessions against older servers can load the
challenge objects those servers offer.  Both variants prove control by
presenting a self-signed certificate for a synthetic ``.acme.invalid``
SNI name derived from SHA-256 digests.
"""

from __future__ import annotations

import hashlib
from typing import Any

from acmelink.challenge.base import TokenChallenge
from acmelink.core.types import ChallengeType

_INVALID_SUFFIX = ".acme.invalid"


def _sni_name(value: str, suffix: str) -> str:
    """Split the hex SHA-256 of *value* into two 32-char labels."""
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
    return f"{digest[:32]}.{digest[32:]}{suffix}"


class _LegacyTlsSniChallenge(TokenChallenge):
    def respond(self) -> dict[str, Any]:
        # Pre-RFC servers expect the key authorization in the response
        return {
            "type": self.challenge_type.value,
            "keyAuthorization": self.get_authorization(),
        }


class TlsSni01Challenge(_LegacyTlsSniChallenge):
    """tls-sni-01 challenge."""

    challenge_type = ChallengeType.TLS_SNI_01

    @property
    def subject(self) -> str:
        """The SNI name the validation certificate must be issued for."""
        return _sni_name(self.get_authorization(), _INVALID_SUFFIX)


class TlsSni02Challenge(_LegacyTlsSniChallenge):
    """tls-sni-02 challenge."""

    challenge_type = ChallengeType.TLS_SNI_02

    @property
    def subject(self) -> str:
        """SAN A, the SNI name the server connects with."""
        return _sni_name(self.token, ".token" + _INVALID_SUFFIX)

    @property
    def san_b(self) -> str:
        """SAN B, derived from the key authorization."""
        return _sni_name(self.get_authorization(), ".ka" + _INVALID_SUFFIX)
