"""Tests for the acmelink CLI entry point (acmelink.cli.main).

``main()`` imports its collaborators inside the function body, so
patches target the source module (e.g. ``acmelink.provider.find_provider``),
not ``acmelink.cli.main``.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import yaml

from acmelink import __version__
from acmelink.cli.main import _build_parser, main
from acmelink.errors import AcmeNetworkError, AcmeProtocolError

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def parser():
    return _build_parser()


@pytest.fixture
def tmp_config(tmp_path):
    """Write a small valid config YAML and return its path."""
    cfg_path = tmp_path / "acmelink.yaml"
    cfg_path.write_text(
        yaml.safe_dump(
            {
                "connector": {"timeout_seconds": 4},
                "logging": {"level": "warning", "format": "text"},
            },
        ),
        encoding="utf-8",
    )
    return str(cfg_path)


def _provider_returning(directory, nonce=None):
    provider = MagicMock()

    def _directory(session, server_uri):
        session.nonce = nonce
        return directory

    provider.directory.side_effect = _directory
    return provider


# ===========================================================================
# Parser construction
# ===========================================================================


class TestBuildParser:
    def test_command_required(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args([])

    def test_directory_subcommand(self, parser):
        args = parser.parse_args(["directory", "acme://pebble"])
        assert args.command == "directory"
        assert args.server_uri == "acme://pebble"
        assert args.config is None
        assert args.debug is False

    def test_directory_needs_uri(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["directory"])

    def test_global_options(self, parser, tmp_config):
        args = parser.parse_args(["-c", tmp_config, "--debug", "challenges"])
        assert args.config == tmp_config
        assert args.debug is True
        assert args.command == "challenges"

    def test_version(self, parser, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ===========================================================================
# challenges
# ===========================================================================


class TestChallengesCommand:
    def test_lists_types_sorted(self, capsys):
        main(["challenges"])

        lines = capsys.readouterr().out.split()
        assert lines == ["dns-01", "http-01", "oob-01", "tls-sni-01", "tls-sni-02"]


# ===========================================================================
# directory
# ===========================================================================


class TestDirectoryCommand:
    @patch("acmelink.provider.find_provider")
    def test_prints_directory(self, mock_find, capsys):
        directory = {"newOrder": "https://ca.example/order", "newNonce": "https://ca.example/nonce"}
        mock_find.return_value = _provider_returning(directory, nonce="abc123")

        main(["directory", "https://ca.example/directory"])

        captured = capsys.readouterr()
        assert json.loads(captured.out) == directory
        assert "replay nonce harvested: yes" in captured.err

        server_uri, settings = mock_find.call_args.args
        assert server_uri == "https://ca.example/directory"
        assert settings.connector.timeout_seconds == 10

    @patch("acmelink.provider.find_provider")
    def test_reports_missing_nonce(self, mock_find, capsys):
        mock_find.return_value = _provider_returning({})

        main(["directory", "acme://pebble"])

        assert "replay nonce harvested: no" in capsys.readouterr().err

    @patch("acmelink.provider.find_provider")
    def test_config_file_settings_used(self, mock_find, tmp_config):
        mock_find.return_value = _provider_returning({})

        main(["-c", tmp_config, "directory", "acme://pebble"])

        settings = mock_find.call_args.args[1]
        assert settings.connector.timeout_seconds == 4

    @pytest.mark.parametrize(
        "exc",
        [
            AcmeProtocolError(403, "Forbidden"),
            AcmeNetworkError("connection refused"),
        ],
    )
    @patch("acmelink.provider.find_provider")
    def test_acme_errors_exit_1(self, mock_find, exc, capsys):
        mock_find.return_value.directory.side_effect = exc

        with pytest.raises(SystemExit) as exc_info:
            main(["directory", "https://ca.example/directory"])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("acmelink: error:")

    def test_unknown_provider_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["directory", "gopher://ca.example"])

        assert exc_info.value.code == 1
        assert "No ACME provider" in capsys.readouterr().err

    @patch("acmelink.provider.find_provider")
    def test_debug_reraises(self, mock_find):
        mock_find.return_value.directory.side_effect = AcmeProtocolError(500, "boom")

        with pytest.raises(AcmeProtocolError):
            main(["--debug", "directory", "https://ca.example/directory"])


# ===========================================================================
# Config errors
# ===========================================================================


class TestConfigErrors:
    def test_invalid_config_exits_1(self, tmp_path, capsys):
        cfg_path = tmp_path / "bad.yaml"
        cfg_path.write_text("connector:\n  timeout_seconds: -1\n", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(cfg_path), "challenges"])

        assert exc_info.value.code == 1
        assert "timeout_seconds" in capsys.readouterr().err

    def test_missing_config_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(tmp_path / "absent.yaml"), "challenges"])

        assert exc_info.value.code == 1
        assert "Cannot read" in capsys.readouterr().err
