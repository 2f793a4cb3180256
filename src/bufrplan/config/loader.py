"""
bufrplan — configuration loader.

File: src/bufrplan/config/loader.py
Last updated: 2026-10-18

Purpose
- Read user overrides from a config file, apply environment debug overrides,
  and hand the result to the pure resolver.

What should be included in this file
- Precedence: env (``BUFRNIX_DEBUG*``) > file > package defaults > schema defaults.
- TOML via ``tomllib``, YAML via ``PyYAML``, JSON via ``json``.

Functional requirements
- An explicit config path must exist; the default ``bufrplan.toml`` is optional.
- Malformed files and non-object roots raise ``ConfigLoadError``.

Non-functional requirements
- All environment and filesystem access for configuration lives here.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

from bufrplan.config.resolver import EffectiveConfig, deep_merge, resolve
from bufrplan.config.schema import OPTION_SCHEMA, PACKAGE_DEFAULTS
from bufrplan.constants import (
    DEFAULT_CONFIG_FILE,
    ENV_DEBUG,
    ENV_DEBUG_LEVEL,
    ENV_DEBUG_LOG,
    SUPPORTED_CONFIG_SUFFIXES,
)

logger = structlog.get_logger(__name__)


class ConfigLoadError(ValueError):
    """Raised when config cannot be read or environment overrides cannot be coerced."""


def resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def load_overrides(path: str | Path, *, required: bool = True) -> dict[str, Any]:
    """Parse a user override file; the format follows the file suffix."""

    resolved = Path(path)
    if not resolved.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {resolved}")
        return {}

    suffix = resolved.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        supported = ", ".join(SUPPORTED_CONFIG_SUFFIXES)
        raise ConfigLoadError(f"unsupported config format {suffix!r}; expected one of: {supported}")

    try:
        if suffix == ".toml":
            with resolved.open("rb") as handle:
                parsed: object = tomllib.load(handle)
        elif suffix == ".json":
            with resolved.open("r", encoding="utf-8") as handle:
                parsed = json.load(handle)
        else:
            with resolved.open("r", encoding="utf-8") as handle:
                parsed = yaml.safe_load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {resolved}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"invalid JSON in {resolved}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"invalid YAML in {resolved}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {resolved}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(f"config root must be an object: {resolved}")
    return parsed


def env_debug_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate ``BUFRNIX_DEBUG*`` variables into a ``debug`` override layer.

    ``BUFRNIX_DEBUG_LEVEL`` and ``BUFRNIX_DEBUG_LOG`` only apply when
    ``BUFRNIX_DEBUG`` is set and non-empty.
    """

    if not environ.get(ENV_DEBUG):
        return {}
    debug: dict[str, Any] = {"enable": True}
    raw_level = environ.get(ENV_DEBUG_LEVEL, "").strip()
    if raw_level:
        try:
            level = int(raw_level)
        except ValueError as exc:
            raise ConfigLoadError(
                f"{ENV_DEBUG_LEVEL} must be an integer, got {raw_level!r}"
            ) from exc
        if not 1 <= level <= 3:
            raise ConfigLoadError(f"{ENV_DEBUG_LEVEL} must be between 1 and 3, got {level}")
        debug["verbosity"] = level
    log_file = environ.get(ENV_DEBUG_LOG, "")
    if log_file:
        debug["logFile"] = log_file
    return {"debug": debug}


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> EffectiveConfig:
    """Load the effective configuration.

    ``overrides`` are merged on top of the file layer (before environment
    overrides) and are mainly useful for callers that build configs in code.
    """

    resolved_path = resolve_config_path(config_path)
    env_map = dict(os.environ if environ is None else environ)

    file_layer = load_overrides(resolved_path, required=config_path is not None)
    user_layer = deep_merge(file_layer, overrides or {})
    user_layer = deep_merge(user_layer, env_debug_overrides(env_map))

    effective = resolve(OPTION_SCHEMA, PACKAGE_DEFAULTS, user_layer)
    logger.debug(
        "config_loaded",
        path=str(resolved_path),
        file_present=bool(file_layer),
        enabled_languages=list(effective.enabled_languages()),
    )
    return effective


__all__ = [
    "ConfigLoadError",
    "env_debug_overrides",
    "load_config",
    "load_overrides",
    "resolve_config_path",
]
