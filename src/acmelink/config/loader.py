"""Load client settings from a YAML or JSON file.

Lifecycle::

    settings = load_settings("/etc/acmelink/config.yaml")
    provider = find_provider(uri, settings)

String values of the form ``${VAR}`` or ``${VAR:-default}`` are
replaced with environment variables, then the data is checked against
the bundled JSON schema (``schema.json``) and a few cross-field rules
before the settings tree is built.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator, ValidationError

from acmelink.config.settings import ClientSettings, build_settings

log = logging.getLogger(__name__)

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_SCHEMA_PATH = Path(__file__).parent / "schema.json"


class ConfigValidationError(Exception):
    """Raised when loading or validation finds one or more problems."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


@functools.cache
def _schema_validator() -> Draft202012Validator:
    schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _validate_schema(data: dict[str, Any]) -> None:
    """Check *data* against the bundled schema, reporting every violation."""
    errors = sorted(
        _schema_validator().iter_errors(data),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    if errors:
        raise ConfigValidationError(
            [f"{_error_path(e)}: {e.message}" for e in errors],
        )


def _error_path(error: ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path) or "<root>"


# ---------------------------------------------------------------------------
# Cross-field validation
# ---------------------------------------------------------------------------


def _additional_checks(settings: ClientSettings) -> None:
    """Rules the schema cannot express.  Runs after schema validation."""
    errors: list[str] = []

    connector = settings.connector
    if not connector.verify_ssl and connector.ca_cert_path:
        errors.append(
            "connector.ca_cert_path has no effect when connector.verify_ssl is false",
        )

    if errors:
        raise ConfigValidationError(errors)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_settings(config_file: str | Path) -> ClientSettings:
    """Read, resolve, validate and build settings from *config_file*.

    ``${VAR}`` references are resolved before schema validation, so
    substituted values are checked like literal ones.

    Raises
    ------
    ConfigValidationError
        If the file is unreadable, malformed, or fails validation.

    """
    path = Path(config_file)
    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        raise ConfigValidationError([f"Cannot read '{path}': {exc}"]) from exc
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigValidationError([f"Cannot parse '{path}': {exc}"]) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigValidationError([f"'{path}' must contain a mapping at the top level"])

    _resolve_env_vars(data)
    _validate_schema(data)
    settings = build_settings(data)
    _additional_checks(settings)
    log.debug("Loaded settings from %s", path)
    return settings
