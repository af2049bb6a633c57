"""Pluggable ACME provider system.

Exports the abstract base class, the built-in providers, and the
registry lookup.
"""

from acmelink.provider.base import AcmeProvider
from acmelink.provider.generic import GenericAcmeProvider
from acmelink.provider.letsencrypt import LetsEncryptAcmeProvider
from acmelink.provider.pebble import PebbleAcmeProvider
from acmelink.provider.registry import find_provider

__all__ = [
    "AcmeProvider",
    "GenericAcmeProvider",
    "LetsEncryptAcmeProvider",
    "PebbleAcmeProvider",
    "find_provider",
]
