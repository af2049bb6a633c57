"""DNS-01 challenge (RFC 8555 §8.4).

The client publishes a TXT record at ``_acme-challenge.{domain}``
containing the base64url SHA-256 digest of the key authorization.
"""

from __future__ import annotations

import hashlib

from acmelink.challenge.base import TokenChallenge
from acmelink.core.jws import b64url_encode
from acmelink.core.types import ChallengeType

RECORD_NAME_PREFIX = "_acme-challenge"


class Dns01Challenge(TokenChallenge):
    """DNS-01 challenge."""

    challenge_type = ChallengeType.DNS_01

    @property
    def digest(self) -> str:
        """The TXT record value."""
        return b64url_encode(hashlib.sha256(self.get_authorization().encode("utf-8")).digest())

    @staticmethod
    def record_name(domain: str) -> str:
        """Return the TXT record name for *domain*.

        A leading wildcard label and a trailing dot are dropped, since
        the record always lives on the base domain.
        """
        domain = domain.strip().rstrip(".")
        if domain.startswith("*."):
            domain = domain[2:]
        return f"{RECORD_NAME_PREFIX}.{domain}"
