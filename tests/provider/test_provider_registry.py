"""Tests for the built-in providers and acmelink.provider.registry."""

from __future__ import annotations

import ssl
from unittest.mock import MagicMock, patch

import pytest

from acmelink.config.settings import build_settings
from acmelink.connector.http import HttpConnector
from acmelink.errors import AcmeError
from acmelink.provider.base import AcmeProvider
from acmelink.provider.generic import GenericAcmeProvider
from acmelink.provider.letsencrypt import (
    PRODUCTION_DIRECTORY,
    STAGING_DIRECTORY,
    LetsEncryptAcmeProvider,
)
from acmelink.provider.pebble import PebbleAcmeProvider
from acmelink.provider.registry import find_provider

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _InternalCaProvider(AcmeProvider):
    """A custom provider as a user package would ship it."""

    def accepts(self, server_uri):
        return server_uri.startswith("acme://internal")

    def resolve(self, server_uri):
        return "https://pki.corp.example/acme/directory"


class _HalfProvider(AcmeProvider):
    def accepts(self, server_uri):
        return True


class _NotAProvider:
    pass


def _ext_settings(*entries: str):
    return build_settings({"providers": {"extra": list(entries)}})


# ---------------------------------------------------------------------------
# Built-in providers
# ---------------------------------------------------------------------------


class TestGenericProvider:
    @pytest.mark.parametrize(
        ("uri", "accepted"),
        [
            ("https://ca.example/directory", True),
            ("http://localhost:4001/directory", True),
            ("acme://letsencrypt.org", False),
            ("ftp://ca.example/directory", False),
            ("https://", False),
        ],
    )
    def test_accepts(self, uri, accepted):
        assert GenericAcmeProvider().accepts(uri) is accepted

    def test_resolve_is_identity(self):
        uri = "https://ca.example/acme/directory?x=1"
        assert GenericAcmeProvider().resolve(uri) == uri

    def test_resolve_rejects_foreign_uri(self):
        with pytest.raises(ValueError, match="http"):
            GenericAcmeProvider().resolve("acme://pebble")


class TestLetsEncryptProvider:
    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("acme://letsencrypt.org", PRODUCTION_DIRECTORY),
            ("acme://letsencrypt.org/", PRODUCTION_DIRECTORY),
            ("acme://letsencrypt.org/v02", PRODUCTION_DIRECTORY),
            ("acme://letsencrypt.org/staging", STAGING_DIRECTORY),
            ("acme://letsencrypt.org/staging/v02", STAGING_DIRECTORY),
        ],
    )
    def test_resolve(self, uri, expected):
        provider = LetsEncryptAcmeProvider()
        assert provider.accepts(uri)
        assert provider.resolve(uri) == expected

    def test_unknown_instance(self):
        with pytest.raises(ValueError, match="/v01"):
            LetsEncryptAcmeProvider().resolve("acme://letsencrypt.org/v01")

    def test_foreign_uri(self):
        provider = LetsEncryptAcmeProvider()
        assert not provider.accepts("https://acme-v02.api.letsencrypt.org/directory")
        with pytest.raises(ValueError):
            provider.resolve("acme://example.org")


class TestPebbleProvider:
    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("acme://pebble", "https://localhost:14000/dir"),
            ("acme://pebble/", "https://localhost:14000/dir"),
            ("acme://pebble/pebble.test", "https://pebble.test:14000/dir"),
            ("acme://pebble/pebble.test:14443", "https://pebble.test:14443/dir"),
            ("acme://pebble/127.0.0.1:15000", "https://127.0.0.1:15000/dir"),
        ],
    )
    def test_resolve(self, uri, expected):
        assert PebbleAcmeProvider().resolve(uri) == expected

    @pytest.mark.parametrize(
        "uri",
        ["acme://pebble/host:notaport", "acme://pebble/host/extra", "acme://pebble/:14000"],
    )
    def test_invalid_targets(self, uri):
        with pytest.raises(ValueError, match="Invalid Pebble"):
            PebbleAcmeProvider().resolve(uri)

    def test_connector_skips_verification_without_ca(self):
        connector = PebbleAcmeProvider().create_http_connector()
        assert connector.settings.verify_ssl is False
        assert connector.create_ssl_context().verify_mode == ssl.CERT_NONE

    def test_connector_trusts_configured_ca(self):
        settings = build_settings(
            {
                "connector": {"timeout_seconds": 5},
                "providers": {"pebble_ca_cert_path": "/opt/pebble/minica.pem"},
            },
        )
        connector = PebbleAcmeProvider(settings).create_http_connector()

        assert connector.settings.verify_ssl is True
        assert connector.settings.ca_cert_path == "/opt/pebble/minica.pem"
        assert connector.settings.timeout_seconds == 5

    def test_connector_factory_still_wins(self):
        custom = HttpConnector()
        assert PebbleAcmeProvider(connector_factory=lambda: custom).create_http_connector() is custom


# ---------------------------------------------------------------------------
# find_provider
# ---------------------------------------------------------------------------


class TestFindProvider:
    @pytest.mark.parametrize(
        ("uri", "expected_cls"),
        [
            ("acme://letsencrypt.org/staging", LetsEncryptAcmeProvider),
            ("acme://pebble", PebbleAcmeProvider),
            ("https://ca.example/directory", GenericAcmeProvider),
        ],
    )
    def test_builtin_lookup(self, uri, expected_cls):
        assert type(find_provider(uri)) is expected_cls

    def test_settings_passed_to_provider(self):
        settings = build_settings({"connector": {"timeout_seconds": 2}})
        provider = find_provider("https://ca.example/directory", settings)
        assert provider.create_http_connector().settings.timeout_seconds == 2

    def test_no_provider(self):
        with pytest.raises(AcmeError, match="No ACME provider"):
            find_provider("acme://unknown.example")

    def test_none_uri(self):
        with pytest.raises(TypeError):
            find_provider(None)

    @patch("acmelink.provider.registry.importlib.import_module")
    def test_external_provider(self, mock_import):
        mock_module = MagicMock()
        mock_module.InternalCaProvider = _InternalCaProvider
        mock_import.return_value = mock_module

        provider = find_provider(
            "acme://internal",
            _ext_settings("ext:corp.pki.InternalCaProvider"),
        )

        assert isinstance(provider, _InternalCaProvider)
        mock_import.assert_called_with("corp.pki")

    @patch("acmelink.provider.registry.importlib.import_module")
    def test_builtins_take_precedence(self, mock_import):
        mock_module = MagicMock()
        mock_module.InternalCaProvider = _InternalCaProvider
        mock_import.return_value = mock_module

        provider = find_provider(
            "https://ca.example/directory",
            _ext_settings("ext:corp.pki.InternalCaProvider"),
        )
        assert isinstance(provider, GenericAcmeProvider)

    def test_external_without_module(self):
        with pytest.raises(AcmeError, match="fully qualified"):
            find_provider("acme://internal", _ext_settings("ext:NoModulePart"))

    @patch("acmelink.provider.registry.importlib.import_module")
    def test_external_import_failure(self, mock_import):
        mock_import.side_effect = ImportError("No module named 'corp'")

        with pytest.raises(AcmeError, match="Failed to load") as exc_info:
            find_provider("acme://internal", _ext_settings("ext:corp.pki.Missing"))
        assert isinstance(exc_info.value.__cause__, ImportError)

    @patch("acmelink.provider.registry.importlib.import_module")
    def test_external_not_a_provider(self, mock_import):
        mock_module = MagicMock()
        mock_module.Thing = _NotAProvider
        mock_import.return_value = mock_module

        with pytest.raises(AcmeError, match="subclass of AcmeProvider"):
            find_provider("acme://internal", _ext_settings("ext:corp.pki.Thing"))

    @patch("acmelink.provider.registry.importlib.import_module")
    def test_external_abstract_provider(self, mock_import):
        mock_module = MagicMock()
        mock_module.Half = _HalfProvider
        mock_import.return_value = mock_module

        with pytest.raises(AcmeError, match="does not implement"):
            find_provider("acme://internal", _ext_settings("ext:corp.pki.Half"))
