"""Output rendering for the bufrplan CLI.

File: src/bufrplan/ui/render.py
Last updated: 2026-10-18

Purpose
- Provide a thin plain-text rendering layer for CLI output.
- Render generation plans and effective configs as text, JSON, or YAML.

Functional requirements
- Output is deterministic for a given plan/config.
- Structured formats (JSON/YAML) carry the same payload as ``to_dict``.
"""

from __future__ import annotations

import json
import sys
from typing import IO, TYPE_CHECKING

import yaml

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from bufrplan.modules.composer import LanguageRegistry
    from bufrplan.planning.compiler import GenerationPlan


class CLIRenderer:
    """Thin CLI output renderer writing to one text stream."""

    def __init__(self, *, stream: IO[str] | None = None, verbose: bool = False) -> None:
        self.verbose = verbose
        self._stream = stream

    @property
    def stream(self) -> IO[str]:
        return self._stream if self._stream is not None else sys.stdout

    def text(self, line: str) -> None:
        print(line, file=self.stream)

    def kv(self, key: str, value: object) -> None:
        print(f"{key}: {value}", file=self.stream)

    def section(self, title: str) -> None:
        """Print a section header with a preceding blank line."""

        print(f"\n{title}", file=self.stream)

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        for entry in entries:
            print(f"  {prefix}{entry}", file=self.stream)

    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print a formatted ASCII table."""

        if not rows:
            return
        widths = [len(header) for header in headers]
        for row in rows:
            for index, cell in enumerate(row[: len(headers)]):
                widths[index] = max(widths[index], len(str(cell)))

        def _pad(cells: Sequence[str]) -> str:
            return "  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

        print(f"  {_pad(list(headers))}", file=self.stream)
        print(f"  {'  '.join('-' * width for width in widths)}", file=self.stream)
        for row in rows:
            print(f"  {_pad(list(row))}", file=self.stream)

    def json(self, payload: Mapping[str, object] | Sequence[object]) -> None:
        print(json.dumps(payload, indent=2, sort_keys=False), file=self.stream)

    def yaml(self, payload: Mapping[str, object]) -> None:
        rendered = yaml.safe_dump(
            payload, sort_keys=False, default_flow_style=False, allow_unicode=False, width=120
        )
        self.stream.write(rendered if rendered.endswith("\n") else rendered + "\n")

    def plan(self, plan: GenerationPlan) -> None:
        """Human-readable plan summary."""

        self.kv("units", len(plan.units))
        self.kv("runtime inputs", ", ".join(plan.global_runtime_inputs))
        for unit in plan.units:
            self.section(f"{unit.language} -> {unit.output_path}")
            self.kv("  files", len(unit.files))
            if self.verbose:
                self.items(unit.files)
            self.text("  protoc plugins:")
            self.items(unit.protoc_plugins)
            hooks = [step.name for step in (*unit.init_hooks, *unit.generate_hooks)]
            if hooks:
                self.kv("  hooks", ", ".join(hooks))

    def languages(self, registry: LanguageRegistry, enabled: Sequence[str] = ()) -> None:
        rows = [
            (
                module.name,
                "yes" if module.name in enabled else "no",
                ", ".join(module.feature_keys) or "-",
            )
            for module in registry.modules()
        ]
        self.table(("language", "enabled", "features"), rows)


def create_renderer(*, verbose: bool = False, stream: IO[str] | None = None) -> CLIRenderer:
    return CLIRenderer(stream=stream, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer"]
