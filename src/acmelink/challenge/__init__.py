"""ACME challenge objects.

Exports the abstract base classes, the built-in challenge types, and
the process-wide registry.
"""

from acmelink.challenge.base import Challenge, TokenChallenge
from acmelink.challenge.dns01 import Dns01Challenge
from acmelink.challenge.http01 import Http01Challenge
from acmelink.challenge.oob01 import OutOfBand01Challenge
from acmelink.challenge.registry import CHALLENGES, ChallengeRegistry
from acmelink.challenge.tls_sni import TlsSni01Challenge, TlsSni02Challenge

__all__ = [
    "CHALLENGES",
    "Challenge",
    "ChallengeRegistry",
    "Dns01Challenge",
    "Http01Challenge",
    "OutOfBand01Challenge",
    "TlsSni01Challenge",
    "TlsSni02Challenge",
    "TokenChallenge",
]
