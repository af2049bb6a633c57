"""acmelink -- ACME provider abstraction layer.

Public API::

    from acmelink import Session, find_provider

    session = Session("https://acme.example.com/directory")
    provider = find_provider(session.server_uri)
    directory = provider.directory(session, session.server_uri)
    challenge = provider.create_challenge(session, "http-01")
"""

from acmelink.errors import (
    AcmeError,
    AcmeNetworkError,
    AcmeParseError,
    AcmeProtocolError,
    ChallengeRegistryError,
)
from acmelink.provider import AcmeProvider, find_provider
from acmelink.session import Session

__version__ = "0.3.0"

__all__ = [
    "AcmeError",
    "AcmeNetworkError",
    "AcmeParseError",
    "AcmeProtocolError",
    "AcmeProvider",
    "ChallengeRegistryError",
    "Session",
    "__version__",
    "find_provider",
]
