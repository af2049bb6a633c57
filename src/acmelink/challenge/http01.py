"""HTTP-01 challenge (RFC 8555 §8.3).

The client serves the key authorization at
``http://{domain}/.well-known/acme-challenge/{token}``.
"""

from __future__ import annotations

from acmelink.challenge.base import TokenChallenge
from acmelink.core.types import ChallengeType

WELL_KNOWN_PREFIX = "/.well-known/acme-challenge/"


class Http01Challenge(TokenChallenge):
    """HTTP-01 challenge."""

    challenge_type = ChallengeType.HTTP_01

    @property
    def authorization(self) -> str:
        """The exact response body the server expects to fetch."""
        return self.get_authorization()

    @property
    def well_known_path(self) -> str:
        return WELL_KNOWN_PREFIX + self.token
