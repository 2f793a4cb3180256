"""Stable constants shared across bufrplan stages."""

from __future__ import annotations

from typing import Final

# Configuration files.
DEFAULT_CONFIG_FILE: Final[str] = "bufrplan.toml"
SUPPORTED_CONFIG_SUFFIXES: Final[tuple[str, ...]] = (".toml", ".yaml", ".yml", ".json")

# Environment overrides for the debug sub-tree (also honoured by generated scripts).
ENV_DEBUG: Final[str] = "BUFRNIX_DEBUG"
ENV_DEBUG_LEVEL: Final[str] = "BUFRNIX_DEBUG_LEVEL"
ENV_DEBUG_LOG: Final[str] = "BUFRNIX_DEBUG_LOG"

# Proto discovery.
PROTO_SUFFIX: Final[str] = ".proto"

# Tools every generation plan needs regardless of language.
BASE_RUNTIME_INPUTS: Final[tuple[str, ...]] = ("bash", "protobuf")

# Compiler invocation.
PROTOC_COMMAND: Final[str] = "protoc"

# Debug verbosity levels used by the script logging capability.
LEVEL_INFO: Final[int] = 1
LEVEL_DEBUG: Final[int] = 2
LEVEL_TRACE: Final[int] = 3
LEVEL_NAMES: Final[dict[int, str]] = {
    LEVEL_INFO: "INFO",
    LEVEL_DEBUG: "DEBUG",
    LEVEL_TRACE: "TRACE",
}
LOG_PREFIX: Final[str] = "[bufrplan]"

__all__ = [
    "BASE_RUNTIME_INPUTS",
    "DEFAULT_CONFIG_FILE",
    "ENV_DEBUG",
    "ENV_DEBUG_LEVEL",
    "ENV_DEBUG_LOG",
    "LEVEL_DEBUG",
    "LEVEL_INFO",
    "LEVEL_NAMES",
    "LEVEL_TRACE",
    "LOG_PREFIX",
    "PROTOC_COMMAND",
    "PROTO_SUFFIX",
    "SUPPORTED_CONFIG_SUFFIXES",
]
