"""acmelink command-line entry point.

Usage::

    acmelink directory https://acme.example.com/directory
    acmelink -c config.yaml directory acme://letsencrypt.org/staging
    acmelink challenges
    python -m acmelink directory acme://pebble
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from acmelink.config.settings import ClientSettings

log = logging.getLogger(__name__)


def _get_version() -> str:
    from acmelink import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acmelink",
        description="acmelink -- inspect ACME servers through their providers",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        metavar="PATH",
        help="Path to a configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    directory_parser = subparsers.add_parser(
        "directory",
        help="Fetch and print the directory of an ACME server",
    )
    directory_parser.add_argument("server_uri", help="Directory URL or acme:// URI")

    subparsers.add_parser("challenges", help="List supported challenge types")

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"acmelink: error: {message}", file=sys.stderr)  # noqa: T201


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, runs the command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    from acmelink.config import ConfigValidationError, build_settings, load_settings

    try:
        settings = load_settings(args.config) if args.config else build_settings()
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)

    from acmelink.logging import configure_logging

    if args.config or args.debug:
        configure_logging(settings.logging)
        if args.debug:
            logging.getLogger("acmelink").setLevel(logging.DEBUG)

    if args.command == "challenges":
        _run_challenges()
    else:
        _run_directory(settings, args)


def _run_challenges() -> None:
    from acmelink.challenge.registry import CHALLENGES

    for challenge_type in sorted(CHALLENGES.types):
        print(challenge_type.value)  # noqa: T201


def _run_directory(settings: ClientSettings, args: argparse.Namespace) -> None:
    from acmelink.errors import AcmeError
    from acmelink.provider import find_provider
    from acmelink.session import Session

    try:
        session = Session(args.server_uri)
        provider = find_provider(session.server_uri, settings)
        directory = provider.directory(session, session.server_uri)
    except (AcmeError, ValueError) as exc:
        if args.debug:
            raise
        _print_error(str(exc))
        sys.exit(1)

    print(json.dumps(directory, indent=2, sort_keys=True))  # noqa: T201
    harvested = "yes" if session.nonce is not None else "no"
    print(f"replay nonce harvested: {harvested}", file=sys.stderr)  # noqa: T201
