"""Out-of-band challenge.

The server gives a URL where a human completes validation by some
means outside the protocol; the client only reports when done.
"""

from __future__ import annotations

from acmelink.challenge.base import Challenge
from acmelink.core.types import ChallengeType
from acmelink.errors import AcmeError


class OutOfBand01Challenge(Challenge):
    """oob-01 challenge."""

    challenge_type = ChallengeType.OOB_01

    @property
    def validation_url(self) -> str:
        href = self._data.get("href")
        if not href:
            msg = "oob-01 challenge has no validation URL"
            raise AcmeError(msg)
        return href
