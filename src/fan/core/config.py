"""
Server configuration for fan-ls.

Settings come from four layers, later layers winning:

1. Built-in defaults
2. The ``[server]`` table of a ``fan.toml`` file
3. ``FAN_*`` environment variables
4. Command-line options

Example ``fan.toml``::

    [server]
    log_level = "DEBUG"
    link_diagnostics = true
    link_severity = "hint"
    max_nesting_depth = 32

Environment values:
    - FAN_LOG_LEVEL: logging level name
    - FAN_LINK_DIAGNOSTICS: "1"/"true"/"yes" or "0"/"false"/"no"
    - FAN_LINK_SEVERITY: "information" or "hint"
    - FAN_MAX_NESTING_DEPTH: positive integer
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "fan.toml"
ENV_PREFIX = "FAN_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class DiagnosticLevel(StrEnum):
    """Severity used for cross-link diagnostics."""

    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class ServerConfig:
    """Runtime settings for the language server and parser."""

    log_level: str = "INFO"
    link_diagnostics: bool = True
    link_severity: DiagnosticLevel = DiagnosticLevel.INFORMATION
    max_nesting_depth: int = 64


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ServerConfig:
    """
    Load configuration from a toml file and the environment.

    Args:
        path: Explicit config file. When omitted, ``fan.toml`` in the current
            directory is used if it exists.
        environ: Environment mapping (defaults to ``os.environ``)
        overrides: Values applied last, e.g. from command-line options

    Returns:
        Resolved ServerConfig

    Raises:
        ConfigError: If the file cannot be read or a value is invalid
    """
    if environ is None:
        environ = os.environ

    config = ServerConfig()

    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        if candidate.exists():
            path = candidate
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        config = _apply(config, _read_server_table(path), origin=str(path))

    env_values = {
        key[len(ENV_PREFIX) :].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX)
    }
    if env_values:
        config = _apply(config, env_values, origin="environment")

    if overrides:
        config = _apply(config, overrides, origin="command line")

    return config


def _read_server_table(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    server = data.get("server", {})
    if not isinstance(server, dict):
        raise ConfigError(f"[server] in {path} must be a table")
    return server


def _apply(config: ServerConfig, values: Mapping[str, Any], origin: str) -> ServerConfig:
    """Return a copy of config with recognised keys from values applied."""
    updates: dict[str, Any] = {}

    for key, raw in values.items():
        if key == "log_level":
            level = str(raw).upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ConfigError(f"Unknown log level {raw!r} in {origin}")
            updates["log_level"] = level
        elif key == "link_diagnostics":
            updates["link_diagnostics"] = _parse_bool(raw, key, origin)
        elif key == "link_severity":
            try:
                updates["link_severity"] = DiagnosticLevel(str(raw).lower())
            except ValueError:
                choices = ", ".join(level.value for level in DiagnosticLevel)
                raise ConfigError(
                    f"Unknown link_severity {raw!r} in {origin} (expected one of: {choices})"
                ) from None
        elif key == "max_nesting_depth":
            try:
                depth = int(raw)
            except (TypeError, ValueError):
                raise ConfigError(f"max_nesting_depth must be an integer in {origin}") from None
            if depth < 1:
                raise ConfigError(f"max_nesting_depth must be positive in {origin}")
            updates["max_nesting_depth"] = depth
        else:
            logger.debug(f"Ignoring unknown config key {key!r} from {origin}")

    return replace(config, **updates)


def _parse_bool(raw: Any, key: str, origin: str) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean in {origin}, got {raw!r}")
