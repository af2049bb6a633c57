"""HTTP transport and scoped connections."""

from acmelink.connector.connection import Connection, DefaultConnection
from acmelink.connector.http import HttpConnector

__all__ = [
    "Connection",
    "DefaultConnection",
    "HttpConnector",
]
