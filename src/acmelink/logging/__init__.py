"""Logging subsystem for acmelink.

Public API::

    from acmelink.logging import configure_logging

    configure_logging(settings.logging)
"""

from acmelink.logging.setup import configure_logging

__all__ = ["configure_logging"]
