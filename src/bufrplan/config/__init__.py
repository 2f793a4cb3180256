"""
bufrplan config package public API.

File: src/bufrplan/config/__init__.py
Last updated: 2026-10-18

Purpose
- Export the option schema, the resolver, the loader, and their error types.

Functional requirements
- Support loading from ``bufrplan.toml`` (or YAML/JSON) + ``BUFRNIX_DEBUG*`` env overrides.
- Fail fast with structured validation/load errors.
"""

from bufrplan.config.loader import (
    ConfigLoadError,
    env_debug_overrides,
    load_config,
    load_overrides,
    resolve_config_path,
)
from bufrplan.config.options import (
    ConfigValidationError,
    ConfigValidationIssue,
    Option,
    OptionTree,
    TypeMismatchError,
    UnknownOptionError,
    check_layer,
    extract_defaults,
    lookup_option,
    mk_option,
)
from bufrplan.config.resolver import EffectiveConfig, deep_merge, resolve, resolve_defaults
from bufrplan.config.schema import OPTION_SCHEMA, PACKAGE_DEFAULTS, language_names

__all__ = [
    "OPTION_SCHEMA",
    "PACKAGE_DEFAULTS",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "EffectiveConfig",
    "Option",
    "OptionTree",
    "TypeMismatchError",
    "UnknownOptionError",
    "check_layer",
    "deep_merge",
    "env_debug_overrides",
    "extract_defaults",
    "language_names",
    "load_config",
    "load_overrides",
    "lookup_option",
    "mk_option",
    "resolve",
    "resolve_config_path",
    "resolve_defaults",
]
