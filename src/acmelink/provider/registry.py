"""Provider registry.

Finds the provider responsible for a server URI.  Built-in providers
are tried first, then custom providers listed in
``providers.extra`` as ``ext:package.module.ClassName``.

Usage::

    from acmelink.provider.registry import find_provider

    provider = find_provider("acme://letsencrypt.org/staging", settings)
    directory = provider.directory(session, session.server_uri)
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import TYPE_CHECKING

from acmelink.errors import AcmeError
from acmelink.provider.base import AcmeProvider
from acmelink.provider.generic import GenericAcmeProvider
from acmelink.provider.letsencrypt import LetsEncryptAcmeProvider
from acmelink.provider.pebble import PebbleAcmeProvider

if TYPE_CHECKING:
    from acmelink.config.settings import ClientSettings

log = logging.getLogger(__name__)

# Specific providers first; the generic one accepts any http(s) URL
_BUILTIN_PROVIDERS: tuple[type[AcmeProvider], ...] = (
    LetsEncryptAcmeProvider,
    PebbleAcmeProvider,
    GenericAcmeProvider,
)


def find_provider(
    server_uri: str,
    settings: ClientSettings | None = None,
) -> AcmeProvider:
    """Return a provider instance that accepts *server_uri*.

    Parameters
    ----------
    server_uri:
        The server URI given by the user.
    settings:
        Client settings, passed on to the provider and used to find
        extra provider classes.

    Raises
    ------
    AcmeError
        If no provider accepts the URI or an extra provider cannot
        be loaded.

    """
    if server_uri is None:
        msg = "server_uri must not be None"
        raise TypeError(msg)

    candidates = list(_BUILTIN_PROVIDERS)
    if settings is not None:
        candidates.extend(_load_external(entry[4:]) for entry in settings.providers.extra)

    for cls in candidates:
        provider = cls(settings)
        if provider.accepts(server_uri):
            log.debug(
                "Using %s for %s",
                cls.__name__,
                server_uri,
                extra={"provider": cls.__name__, "server_uri": server_uri},
            )
            return provider

    msg = f"No ACME provider accepts '{server_uri}'"
    raise AcmeError(msg)


def _load_external(fqn: str) -> type[AcmeProvider]:
    """Import a custom provider class by fully-qualified name.

    Parameters
    ----------
    fqn:
        e.g. ``"mycompany.pki.providers.InternalCaProvider"``

    """
    module_path, _, cls_name = fqn.rpartition(".")
    if not module_path:
        msg = (
            f"Invalid external provider '{fqn}': must be fully "
            "qualified (e.g. 'mypackage.module.ClassName')"
        )
        raise AcmeError(msg)

    try:
        module = importlib.import_module(module_path)
        cls = getattr(module, cls_name)
    except (ImportError, AttributeError) as exc:
        msg = f"Failed to load external provider '{fqn}': {exc}"
        raise AcmeError(msg) from exc

    if not (isinstance(cls, type) and issubclass(cls, AcmeProvider)):
        msg = f"External provider '{fqn}' must be a subclass of AcmeProvider"
        raise AcmeError(msg)

    if inspect.isabstract(cls):
        msg = f"External provider '{fqn}' does not implement accepts() and resolve()"
        raise AcmeError(msg)

    log.info("Loaded external provider: %s", fqn)
    return cls
