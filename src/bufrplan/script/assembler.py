"""
bufrplan — generation script assembler.

File: src/bufrplan/script/assembler.py
Last updated: 2026-10-18

Purpose
- Turn a ``GenerationPlan`` into one sequential bash program.

What should be included in this file
- Debug variable block, include-path setup, one block per generation unit.
- ``EmptyFileSetWarning`` for units with nothing to compile.

Functional requirements
- Units run strictly in plan order; each block prints
  ``Generating <language> code for output path: <path>`` first.
- Per unit: file list, init hooks, output directory, compiler invocation,
  generate hooks.
- Units with zero files are skipped with a warning instead of invoking protoc.
- When any unit runs nanopb, the first ``*.options`` file found under the
  working directory is passed to every nanopb invocation.

Non-functional requirements
- Hooks become shell text only here; the plan keeps them as discrete steps.
"""

from __future__ import annotations

import shlex
import warnings
from collections.abc import Iterable

import structlog

from bufrplan.config.resolver import EffectiveConfig
from bufrplan.constants import LEVEL_DEBUG, LEVEL_INFO, PROTOC_COMMAND
from bufrplan.modules.composer import parse_output_flag
from bufrplan.planning.compiler import GenerationPlan, GenerationUnit
from bufrplan.script.debug import ShellDebug

logger = structlog.get_logger(__name__)

SCRIPT_HEADER = "#!/usr/bin/env bash\nset -euo pipefail\n"

NANOPB_OPTIONS_PREAMBLE = """\
nanopb_opts=""
options_file=$(find . -name "*.options" -type f 2>/dev/null | sort | head -n 1 || true)
if [ -n "$options_file" ]; then
  echo "Found nanopb options file: $options_file"
  nanopb_opts="--nanopb_opt=-f$options_file"
fi"""


class EmptyFileSetWarning(UserWarning):
    """A generation unit resolved to zero ``.proto`` files."""


def status_line(unit: GenerationUnit) -> str:
    return f"Generating {unit.language} code for output path: {unit.output_path}"


def _include_args(directories: Iterable[str]) -> str:
    return " ".join(f"-I {shlex.quote(str(directory))}" for directory in directories)


def _quote_files(files: Iterable[str]) -> str:
    return " ".join(shlex.quote(path) for path in files)


def uses_nanopb(unit: GenerationUnit) -> bool:
    for plugin in unit.protoc_plugins:
        parsed = parse_output_flag(plugin)
        if parsed is not None and parsed[0] == "nanopb":
            return True
    return False


def _unit_block(unit: GenerationUnit, debug: ShellDebug) -> str:
    lines: list[str] = [
        f"# Generating for language: {unit.language}, Path: {unit.output_path}",
        f'echo "{status_line(unit)}"',
    ]
    if not unit.has_files:
        message = f"No .proto files found for {unit.language}; skipping {unit.output_path}"
        lines.append(f'echo "Warning: {message}" >&2')
        return "\n".join(lines) + "\n"

    lines.append(f"lang_proto_files={shlex.quote(_quote_files(unit.files))}")
    lines.append(f'echo "Proto files for {unit.language}: $lang_proto_files"')
    init = unit.init_hooks_text
    if init:
        lines.append(init.rstrip("\n"))
    lines.append(f"mkdir -p {shlex.quote(unit.output_path)}")
    lines.append('protoc_args="$base_protoc_args"')
    for plugin in unit.protoc_plugins:
        lines.append(f"protoc_args=\"$protoc_args {_escape_for_double_quotes(plugin)}\"")
    if uses_nanopb(unit):
        lines.append('protoc_args="$protoc_args $nanopb_opts"')
    invocation = 'eval "$protoc_cmd $protoc_args $lang_proto_files"'
    trace = debug.trace_command("$protoc_cmd $protoc_args $lang_proto_files")
    if trace:
        lines.append(trace.rstrip("\n"))
    lines.append(debug.time_command(invocation))
    generate = unit.generate_hooks_text
    if generate:
        lines.append(generate.rstrip("\n"))
    logged = debug.log(LEVEL_DEBUG, f"Finished {unit.language} for {unit.output_path}")
    if logged:
        lines.append(logged.rstrip("\n"))
    return "\n".join(lines) + "\n"


def _escape_for_double_quotes(fragment: str) -> str:
    # ``$(...)`` substitutions in plugin flags are expanded by ``eval``, not here.
    return fragment.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")


def assemble_script(plan: GenerationPlan, effective: EffectiveConfig) -> str:
    """Render ``plan`` as a bash script using ``effective`` for debug and include paths."""

    debug = ShellDebug.from_config(effective.get("debug", {}))
    include_dirs = effective.get_path("protoc.includeDirectories", ()) or ()

    sections: list[str] = [
        SCRIPT_HEADER,
        "# --- bufrplan generation script ---",
        debug.config_block().rstrip("\n"),
    ]
    start = debug.log(LEVEL_INFO, "Starting code generation with per-language file support")
    if start:
        sections.append(start.rstrip("\n"))
    sections.append(f"protoc_cmd={shlex.quote(PROTOC_COMMAND)}")
    sections.append(f"base_protoc_args={shlex.quote(_include_args(include_dirs))}")
    if any(uses_nanopb(unit) for unit in plan.units):
        sections.append(NANOPB_OPTIONS_PREAMBLE)
    sections.append("")

    for unit in plan.units:
        if not unit.has_files:
            warnings.warn(
                f"{unit.language} unit for {unit.output_path!r} has no .proto files; skipped",
                EmptyFileSetWarning,
                stacklevel=2,
            )
            logger.warning(
                "empty_file_set", language=unit.language, output_path=unit.output_path
            )
        sections.append(_unit_block(unit, debug))

    done = debug.log(LEVEL_INFO, "Multiple output path code generation completed successfully")
    if done:
        sections.append(done.rstrip("\n"))
    return "\n".join(sections).rstrip("\n") + "\n"


__all__ = [
    "NANOPB_OPTIONS_PREAMBLE",
    "SCRIPT_HEADER",
    "EmptyFileSetWarning",
    "assemble_script",
    "status_line",
    "uses_nanopb",
]
