"""
bufrplan — language module registry and composer.

File: src/bufrplan/modules/composer.py
Last updated: 2026-10-18

Purpose
- Map language identifiers to statically registered ``LanguageModule`` entries.
- Compose a language's base module and feature modules into one result.

What should be included in this file
- ``LanguageModule`` registry entry with declared base-flag precedence data.
- ``LanguageRegistry`` plus the ``register_builtin_language`` decorator.
- ``compose_language`` with output-flag conflict detection.

Functional requirements
- Feature modules run in declaration order after the base module.
- A subsuming feature drops the base ``--<family>_out=`` flag only when enabled.
- Two output flags of the same family targeting the same path are a fatal conflict.

Non-functional requirements
- Deterministic registration order; duplicate registration is rejected.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

from bufrplan.modules.base import (
    LocalConfig,
    PluginModule,
    PluginModuleResult,
    combine,
    is_enabled,
    scoped_feature,
)

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

logger = structlog.get_logger(__name__)

_OUT_FLAG_RE = re.compile(r"^--(?P<family>[A-Za-z0-9_+\-]+?)_out=(?P<value>.*)$")


class ModuleCompositionConflict(ValueError):
    """Two modules of one language emit an output flag for the same family and path."""

    def __init__(self, language: str, family: str, path: str, flags: tuple[str, ...]) -> None:
        self.language = language
        self.family = family
        self.path = path
        self.flags = flags
        rendered = ", ".join(flags)
        super().__init__(
            f"language {language!r}: conflicting --{family}_out flags for path {path!r} "
            f"with no declared precedence ({rendered})"
        )


def parse_output_flag(flag: str) -> tuple[str, str] | None:
    """Return ``(family, path)`` for a ``--<family>_out=[params:]path`` flag, else ``None``."""

    match = _OUT_FLAG_RE.match(flag)
    if match is None:
        return None
    value = match.group("value")
    _, _, path = value.rpartition(":")
    return match.group("family"), path


@dataclass(frozen=True, slots=True)
class FeatureSlot:
    """One feature sub-tree of a language, bound to its plugin module."""

    key: str
    module: PluginModule
    description: str = ""


@dataclass(frozen=True, slots=True)
class LanguageModule:
    """Registry entry: base module, ordered feature slots, and precedence data."""

    name: str
    base: PluginModule
    features: tuple[FeatureSlot, ...] = ()
    subsumes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("LanguageModule.name cannot be empty")
        keys = [slot.key for slot in self.features]
        if len(keys) != len(set(keys)):
            raise ValueError(f"LanguageModule {self.name!r} declares duplicate feature keys")
        unknown = sorted(set(self.subsumes) - set(keys))
        if unknown:
            raise ValueError(
                f"LanguageModule {self.name!r} subsumes undeclared features: {', '.join(unknown)}"
            )
        object.__setattr__(self, "subsumes", MappingProxyType(dict(self.subsumes)))

    @property
    def feature_keys(self) -> tuple[str, ...]:
        return tuple(slot.key for slot in self.features)

    def feature_modules(self) -> tuple[PluginModule, ...]:
        return tuple(scoped_feature(slot.key, slot.module) for slot in self.features)


LanguageFactory = Callable[[], LanguageModule]


class LanguageRegistry:
    """Deterministic registry from language identifier to ``LanguageModule``."""

    __slots__ = ("_modules",)

    def __init__(self, modules: tuple[LanguageModule, ...] = ()) -> None:
        self._modules: dict[str, LanguageModule] = {}
        for module in modules:
            self.register(module)

    def register(self, module: LanguageModule) -> None:
        if not isinstance(module, LanguageModule):
            raise ValueError("LanguageRegistry entries must be LanguageModule")
        if module.name in self._modules:
            raise ValueError(f"language {module.name!r} is already registered")
        self._modules[module.name] = module

    def contains(self, name: str) -> bool:
        return name in self._modules

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def get(self, name: str) -> LanguageModule:
        module = self._modules.get(name)
        if module is None:
            known = ", ".join(self.names())
            raise KeyError(f"unknown language {name!r}; registered: [{known}]")
        return module

    def names(self) -> tuple[str, ...]:
        return tuple(self._modules)

    def modules(self) -> tuple[LanguageModule, ...]:
        return tuple(self._modules.values())


DEFAULT_LANGUAGE_REGISTRY = LanguageRegistry()


def register_builtin_language(
    *, registry: LanguageRegistry | None = None
) -> Callable[[LanguageFactory], LanguageFactory]:
    """Decorator that builds a ``LanguageModule`` from a factory and registers it."""

    target = registry if registry is not None else DEFAULT_LANGUAGE_REGISTRY

    def decorator(factory: LanguageFactory) -> LanguageFactory:
        target.register(factory())
        return factory

    return decorator


def compose_language(
    language: LanguageModule,
    global_config: EffectiveConfig,
    local_config: LocalConfig,
) -> PluginModuleResult:
    """Run base then features; apply declared precedence; reject output-flag conflicts."""

    base_result = language.base(global_config, local_config)
    for feature_key, family in language.subsumes.items():
        sub_tree = local_config.get(feature_key)
        if isinstance(sub_tree, Mapping) and is_enabled(sub_tree):
            base_result = base_result.without_plugins(_is_family_out(family))
            logger.debug(
                "base_output_flag_subsumed",
                language=language.name,
                feature=feature_key,
                family=family,
            )

    combined = base_result + combine(language.feature_modules(), global_config, local_config)
    _check_output_conflicts(language.name, combined.protoc_plugins)
    return combined


def _is_family_out(family: str) -> Callable[[str], bool]:
    def predicate(flag: str) -> bool:
        parsed = parse_output_flag(flag)
        return parsed is not None and parsed[0] == family

    return predicate


def _check_output_conflicts(language: str, flags: tuple[str, ...]) -> None:
    seen: dict[tuple[str, str], str] = {}
    for flag in flags:
        parsed = parse_output_flag(flag)
        if parsed is None:
            continue
        previous = seen.get(parsed)
        if previous is not None:
            family, path = parsed
            raise ModuleCompositionConflict(language, family, path, (previous, flag))
        seen[parsed] = flag


__all__ = [
    "DEFAULT_LANGUAGE_REGISTRY",
    "FeatureSlot",
    "LanguageFactory",
    "LanguageModule",
    "LanguageRegistry",
    "ModuleCompositionConflict",
    "compose_language",
    "parse_output_flag",
    "register_builtin_language",
]
