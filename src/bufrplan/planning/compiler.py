"""
bufrplan — generation plan compiler.

File: src/bufrplan/planning/compiler.py
Last updated: 2026-10-18

Purpose
- Expand every enabled language into one generation unit per output path.

What should be included in this file
- ``normalize_output_path`` (idempotent, total).
- ``GenerationUnit`` / ``GenerationPlan`` immutable value types.
- ``compile_plan`` orchestration over the language registry.

Functional requirements
- Languages are visited in schema declaration order; paths in declaration order.
- Modules are fully re-evaluated per path against a scoped config whose
  ``outputPath`` is a single string.
- Runtime inputs are collected once per language from the first path.
- An empty ``outputPath`` list contributes no units and no runtime inputs.
- Any failure aborts the whole compile; no partial plan is returned.

Non-functional requirements
- Pure apart from the injectable discoverer.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from bufrplan.config.resolver import EffectiveConfig
from bufrplan.constants import BASE_RUNTIME_INPUTS
from bufrplan.modules import DEFAULT_LANGUAGE_REGISTRY, HookStep, LanguageRegistry, compose_language
from bufrplan.modules.base import render_hooks
from bufrplan.planning.files import Discoverer, discover_proto_files, files_for

logger = structlog.get_logger(__name__)


class PlanCompilationError(ValueError):
    """Raised when an effective configuration cannot be turned into a plan."""

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        super().__init__(f"language {language!r}: {message}")


def normalize_output_path(value: str | Sequence[str]) -> tuple[str, ...]:
    """``"a"`` becomes ``("a",)``; a sequence of paths is kept in order."""

    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class GenerationUnit:
    """One concrete (language, output path) pair."""

    language: str
    output_path: str
    files: tuple[str, ...]
    protoc_plugins: tuple[str, ...]
    init_hooks: tuple[HookStep, ...] = ()
    generate_hooks: tuple[HookStep, ...] = ()

    @property
    def init_hooks_text(self) -> str:
        return render_hooks(self.init_hooks)

    @property
    def generate_hooks_text(self) -> str:
        return render_hooks(self.generate_hooks)

    @property
    def has_files(self) -> bool:
        return bool(self.files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "outputPath": self.output_path,
            "files": list(self.files),
            "protocPlugins": list(self.protoc_plugins),
            "initHooks": [step.to_dict() for step in self.init_hooks],
            "generateHooks": [step.to_dict() for step in self.generate_hooks],
        }


@dataclass(frozen=True, slots=True)
class GenerationPlan:
    """Ordered generation units plus the deduplicated global tool set."""

    units: tuple[GenerationUnit, ...]
    global_runtime_inputs: tuple[str, ...]

    def units_for(self, language: str) -> tuple[GenerationUnit, ...]:
        return tuple(unit for unit in self.units if unit.language == language)

    @property
    def languages(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for unit in self.units:
            seen.setdefault(unit.language, None)
        return tuple(seen)

    def to_dict(self) -> dict[str, Any]:
        return {
            "units": [unit.to_dict() for unit in self.units],
            "globalRuntimeInputs": list(self.global_runtime_inputs),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def _scoped(
    effective: EffectiveConfig, language: str, path: str
) -> tuple[EffectiveConfig, Mapping[str, Any]]:
    local = dict(effective.language(language))
    local["outputPath"] = path
    scoped_global = effective.with_language(language, local)
    return scoped_global, scoped_global.language(language)


def _dedupe(items: Sequence[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def compile_plan(
    effective: EffectiveConfig,
    *,
    registry: LanguageRegistry = DEFAULT_LANGUAGE_REGISTRY,
    discover: Discoverer = discover_proto_files,
) -> GenerationPlan:
    """Compile ``effective`` into an ordered ``GenerationPlan``."""

    units: list[GenerationUnit] = []
    runtime_inputs: list[str] = list(BASE_RUNTIME_INPUTS)

    for language in effective.enabled_languages():
        if not registry.contains(language):
            raise PlanCompilationError(language, "enabled but no language module is registered")
        module = registry.get(language)
        paths = normalize_output_path(effective.language(language)["outputPath"])
        if not paths:
            logger.warning("empty_output_path_list", language=language)
            continue

        for index, path in enumerate(paths):
            if not isinstance(path, str) or not path.strip():
                raise PlanCompilationError(language, f"outputPath[{index}] is blank")
            scoped_global, scoped_local = _scoped(effective, language, path)
            result = compose_language(module, scoped_global, scoped_local)
            files = files_for(language, scoped_local, scoped_global, discover=discover)
            if index == 0:
                runtime_inputs.extend(result.runtime_inputs)
            units.append(
                GenerationUnit(
                    language=language,
                    output_path=path,
                    files=files,
                    protoc_plugins=result.protoc_plugins,
                    init_hooks=result.init_hooks,
                    generate_hooks=result.generate_hooks,
                )
            )
            logger.debug(
                "plan_unit_compiled",
                language=language,
                output_path=path,
                files=len(files),
                plugins=len(result.protoc_plugins),
            )

    plan = GenerationPlan(units=tuple(units), global_runtime_inputs=_dedupe(runtime_inputs))
    logger.info(
        "plan_compiled",
        units=len(plan.units),
        languages=list(plan.languages),
        runtime_inputs=len(plan.global_runtime_inputs),
    )
    return plan


__all__ = [
    "GenerationPlan",
    "GenerationUnit",
    "PlanCompilationError",
    "compile_plan",
    "normalize_output_path",
]
