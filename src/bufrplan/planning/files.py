"""
bufrplan — per-language proto file set resolution.

File: src/bufrplan/planning/files.py
Last updated: 2026-10-18

Purpose
- Decide which ``.proto`` files a language compiles.

What should be included in this file
- ``files_for`` precedence policy (language files, global files, discovery).
- ``discover_proto_files`` default discoverer.

Functional requirements
- Explicit lists keep their order and duplicates; ``additionalFiles`` is appended.
- An empty base list falls back to discovery, never to an empty result by default.
- Zero discovered files yields an empty tuple, not an error.

Non-functional requirements
- Discovery is injectable so planning stays testable without disk access.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from bufrplan.constants import PROTO_SUFFIX

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

logger = structlog.get_logger(__name__)

Discoverer = Callable[[str], Iterable[str]]


def discover_proto_files(directory: str) -> tuple[str, ...]:
    """Recursively list ``*.proto`` files under ``directory`` in sorted order.

    Returned paths keep ``directory`` as their prefix. A missing directory yields nothing.
    """

    root = Path(directory)
    if not root.is_dir():
        return ()
    found = sorted(
        path.relative_to(root).as_posix()
        for path in root.rglob(f"*{PROTO_SUFFIX}")
        if path.is_file()
    )
    prefix = directory.rstrip("/")
    return tuple(f"{prefix}/{relative}" for relative in found)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    return [str(item) for item in value]


def files_for(
    language: str,
    language_config: Mapping[str, Any],
    effective: EffectiveConfig,
    *,
    discover: Discoverer = discover_proto_files,
) -> tuple[str, ...]:
    """Resolve the ordered file list ``language`` compiles."""

    local_files = language_config.get("files")
    if local_files is None:
        local_files = effective.get_path("protoc.files", ())
    base = _as_list(local_files)
    additional = _as_list(language_config.get("additionalFiles"))
    if base:
        return tuple(base + additional)

    source_directories = _as_list(effective.get_path("protoc.sourceDirectories", ()))
    directories = source_directories or [str(effective.get("root", "."))]
    discovered: list[str] = []
    for directory in directories:
        discovered.extend(discover(directory))
    logger.debug(
        "proto_files_discovered",
        language=language,
        directories=directories,
        count=len(discovered),
    )
    return tuple(discovered + additional)


__all__ = ["Discoverer", "discover_proto_files", "files_for"]
