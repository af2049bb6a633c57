"""Enumerated ACME protocol constants.

All enums inherit from ``StrEnum`` so their ``.value`` is the plain
string used on the wire and they compare equal to it.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Challenge types
# ---------------------------------------------------------------------------


class ChallengeType(StrEnum):
    HTTP_01 = "http-01"
    DNS_01 = "dns-01"
    OOB_01 = "oob-01"
    # Superseded TLS-SNI variants, still offered by older servers
    TLS_SNI_01 = "tls-sni-01"
    TLS_SNI_02 = "tls-sni-02"


# ---------------------------------------------------------------------------
# Challenge status
# ---------------------------------------------------------------------------


class ChallengeStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    VALID = "valid"
    INVALID = "invalid"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> ChallengeStatus:
        """Map a server-supplied status string, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN
