"""Root conftest for the acmelink test suite."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

from acmelink.config.settings import build_settings  # noqa: E402
from acmelink.session import Session  # noqa: E402

# ---------------------------------------------------------------------------
# Fake HTTP responses
# ---------------------------------------------------------------------------


class FakeResponse:
    """Stands in for an ``http.client.HTTPResponse`` / ``HTTPError``."""

    def __init__(
        self,
        status: int = 200,
        body: bytes = b"{}",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status = status
        self.headers = headers or {}
        self._body = body
        self.close_count = 0
        self.read_count = 0

    def read(self, amt: int | None = None) -> bytes:
        self.read_count += 1
        return self._body if amt is None else self._body[:amt]

    def close(self) -> None:
        self.close_count += 1


def make_connector(*responses: FakeResponse, settings=None) -> MagicMock:
    """Return a fake HttpConnector whose ``open`` yields *responses* in order."""
    connector = MagicMock()
    connector.settings = settings or build_settings().connector
    connector.open.side_effect = list(responses)
    return connector


# ---------------------------------------------------------------------------
# Keys and sessions
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def ec_key():
    """A P-256 account key, generated once per test run."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def rsa_key():
    """A 2048-bit RSA account key, generated once per test run."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture()
def session(ec_key) -> Session:
    """A session against a test server with an EC account key."""
    return Session("https://ca.example/directory", ec_key)


@pytest.fixture()
def fake_response():
    """The :class:`FakeResponse` class, for building canned responses."""
    return FakeResponse


@pytest.fixture()
def fake_connector():
    """The :func:`make_connector` helper."""
    return make_connector


@pytest.fixture(autouse=True)
def _restore_acmelink_logger():
    """Undo ``configure_logging`` side effects after each test."""
    logger = logging.getLogger("acmelink")
    saved = (logger.level, logger.propagate, list(logger.handlers))
    yield
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers[:] = saved[2]
