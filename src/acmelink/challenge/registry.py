"""Challenge class registry.

Maps ACME challenge-type strings to challenge classes and builds new
challenge instances bound to a session.  The process-wide registry
:data:`CHALLENGES` is built once when this module is imported and is
read-only afterwards, so concurrent lookups need no locking.

A broken registration (wrong base class, missing ``challenge_type``,
duplicate type, unusable constructor) raises
:class:`ChallengeRegistryError` at import time and aborts startup.

Usage::

    from acmelink.challenge.registry import CHALLENGES

    challenge = CHALLENGES.create(session, "dns-01")
    if challenge is None:
        ...  # type not supported, offer another one
"""

from __future__ import annotations

import inspect
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from acmelink.challenge.base import Challenge
from acmelink.challenge.dns01 import Dns01Challenge
from acmelink.challenge.http01 import Http01Challenge
from acmelink.challenge.oob01 import OutOfBand01Challenge
from acmelink.challenge.tls_sni import TlsSni01Challenge, TlsSni02Challenge
from acmelink.core.types import ChallengeType
from acmelink.errors import ChallengeRegistryError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from acmelink.session import Session

log = logging.getLogger(__name__)

_BUILTIN_CHALLENGES: tuple[type[Challenge], ...] = (
    Dns01Challenge,
    Http01Challenge,
    OutOfBand01Challenge,
    TlsSni01Challenge,
    TlsSni02Challenge,
)


class ChallengeRegistry:
    """Immutable mapping of challenge type to challenge class.

    Parameters
    ----------
    classes:
        The challenge classes to register.  Each one is validated
        before the registry is sealed.

    Raises
    ------
    ChallengeRegistryError
        If any class cannot be registered.

    """

    def __init__(self, classes: Iterable[type[Challenge]]) -> None:
        table: dict[str, type[Challenge]] = {}
        for cls in classes:
            self._validate_class(cls)
            challenge_type = cls.challenge_type
            if challenge_type in table:
                msg = (
                    f"Duplicate registration for challenge type '{challenge_type}': "
                    f"{table[challenge_type].__name__} and {cls.__name__}"
                )
                raise ChallengeRegistryError(msg)
            table[challenge_type] = cls
        self._classes: Mapping[str, type[Challenge]] = MappingProxyType(table)
        log.debug("Challenge registry built: %s", ", ".join(table))

    @staticmethod
    def _validate_class(cls: type) -> None:
        """Verify that *cls* can be registered and constructed from a session."""
        if not (isinstance(cls, type) and issubclass(cls, Challenge)):
            msg = f"{cls!r} is not a subclass of Challenge"
            raise ChallengeRegistryError(msg)

        challenge_type = getattr(cls, "challenge_type", None)
        if not isinstance(challenge_type, ChallengeType):
            msg = (
                f"Challenge class '{cls.__name__}' has challenge_type="
                f"{challenge_type!r}, which is not a valid ChallengeType"
            )
            raise ChallengeRegistryError(msg)

        if inspect.isabstract(cls):
            msg = f"Challenge class '{cls.__name__}' is abstract"
            raise ChallengeRegistryError(msg)

        try:
            inspect.signature(cls).bind(object())
        except (TypeError, ValueError) as exc:
            msg = f"Challenge class '{cls.__name__}' cannot be constructed from a session alone"
            raise ChallengeRegistryError(msg) from exc

    # -- lookup ------------------------------------------------------------

    def create(self, session: Session, challenge_type: str) -> Challenge | None:
        """Build a new challenge of *challenge_type* bound to *session*.

        Returns ``None`` if the type is not registered.

        Raises
        ------
        TypeError
            If *session* or *challenge_type* is ``None``.
        ChallengeRegistryError
            If the registered class fails to construct.

        """
        if session is None:
            msg = "session must not be None"
            raise TypeError(msg)
        if challenge_type is None:
            msg = "challenge_type must not be None"
            raise TypeError(msg)

        cls = self._classes.get(challenge_type)
        if cls is None:
            log.debug(
                "No challenge class registered for %s",
                challenge_type,
                extra={"challenge_type": str(challenge_type)},
            )
            return None

        try:
            return cls(session)
        except Exception as exc:
            msg = f"Could not instantiate a challenge for type '{challenge_type}'"
            raise ChallengeRegistryError(msg) from exc

    def get_class(self, challenge_type: str) -> type[Challenge] | None:
        """Return the class registered for *challenge_type*, or ``None``."""
        return self._classes.get(challenge_type)

    @property
    def types(self) -> list[ChallengeType]:
        """Return the registered challenge types."""
        return [cls.challenge_type for cls in self._classes.values()]

    def __contains__(self, challenge_type: object) -> bool:
        return challenge_type in self._classes

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)


CHALLENGES = ChallengeRegistry(_BUILTIN_CHALLENGES)
"""The process-wide registry of built-in challenge classes."""
