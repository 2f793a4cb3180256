"""
bufrplan — configuration resolver.

File: src/bufrplan/config/resolver.py
Last updated: 2026-10-18

Purpose
- Produce one immutable effective configuration from schema defaults,
  package defaults, and user overrides.

What should be included in this file
- Right-biased deep merge that treats lists as scalars.
- ``EffectiveConfig`` read-only view with per-language scoping helpers.

Functional requirements
- Every layer is validated against the option schema before merging.
- No partial effective config is ever returned.

Non-functional requirements
- Pure: no environment variables, no filesystem access.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from bufrplan.config.options import OptionTree, check_layer, extract_defaults
from bufrplan.config.schema import OPTION_SCHEMA, PACKAGE_DEFAULTS, language_names


def deep_merge(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base``; non-mapping values replace wholesale.

    Frozen inputs (an ``EffectiveConfig`` or its tree) are accepted; sequences keep
    their list or tuple kind so a tree merged with itself compares equal to it.
    """

    merged = _copy_tree(base)
    _merge_into(merged, overlay)
    return merged


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key, value in overlay.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        else:
            target[key] = _copy_tree(value)


def _copy_tree(value: object) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy_tree(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_tree(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_copy_tree(item) for item in value)
    return copy.deepcopy(value)


def _thaw(value: object) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return copy.deepcopy(value)


def _freeze(value: object) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True, slots=True, eq=False)
class EffectiveConfig(Mapping[str, Any]):
    """Fully resolved, read-only configuration tree.

    Equality ignores the list/tuple distinction, so an effective config equals
    any mapping holding the same plain data.
    """

    tree: Mapping[str, Any]
    language_order: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tree", _freeze(self.tree))
        if not self.language_order:
            languages = self.tree.get("languages", {})
            object.__setattr__(self, "language_order", tuple(languages))

    def __getitem__(self, key: str) -> Any:
        return self.tree[key]

    def __contains__(self, key: object) -> bool:
        return key in self.tree

    def __iter__(self) -> Iterator[str]:
        return iter(self.tree)

    def __len__(self) -> int:
        return len(self.tree)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EffectiveConfig):
            if self.language_order != other.language_order:
                return False
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == _thaw(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def get(self, key: str, default: Any = None) -> Any:
        return self.tree.get(key, default)

    def get_path(self, dotted: str, default: Any = None) -> Any:
        cursor: Any = self.tree
        for part in dotted.split("."):
            if not isinstance(cursor, Mapping) or part not in cursor:
                return default
            cursor = cursor[part]
        return cursor

    @property
    def languages(self) -> Mapping[str, Mapping[str, Any]]:
        return self.tree["languages"]

    def language(self, name: str) -> Mapping[str, Any]:
        try:
            return self.languages[name]
        except KeyError:
            raise KeyError(f"unknown language {name!r}") from None

    def enabled_languages(self) -> tuple[str, ...]:
        """Enabled languages in declaration order."""

        return tuple(
            name
            for name in self.language_order
            if name in self.languages and bool(self.languages[name].get("enable"))
        )

    def with_language(self, name: str, local: Mapping[str, object]) -> EffectiveConfig:
        """Return a copy whose ``languages.<name>`` is replaced by ``local``."""

        scoped = dict(self.tree)
        languages = dict(self.languages)
        languages[name] = local
        scoped["languages"] = languages
        return EffectiveConfig(tree=scoped, language_order=self.language_order)

    def to_dict(self) -> dict[str, Any]:
        return _thaw(self.tree)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def resolve(
    schema: OptionTree = OPTION_SCHEMA,
    package_defaults: Mapping[str, object] | None = None,
    user_overrides: Mapping[str, object] | None = None,
) -> EffectiveConfig:
    """Resolve ``defaults ⊕ package_defaults ⊕ user_overrides`` into an effective config.

    Raises ``UnknownOptionError`` / ``TypeMismatchError`` before anything is merged.
    """

    package_layer: Mapping[str, object] = (
        PACKAGE_DEFAULTS if package_defaults is None else package_defaults
    )
    user_layer: Mapping[str, object] = {} if user_overrides is None else user_overrides

    check_layer(schema, package_layer)
    check_layer(schema, user_layer)

    defaults = extract_defaults(schema)
    merged = deep_merge(deep_merge(defaults, package_layer), user_layer)
    return EffectiveConfig(tree=merged, language_order=language_names(schema))


def resolve_defaults(schema: OptionTree = OPTION_SCHEMA) -> EffectiveConfig:
    """Effective config with no user overrides applied."""

    return resolve(schema, PACKAGE_DEFAULTS, None)


__all__ = [
    "EffectiveConfig",
    "deep_merge",
    "resolve",
    "resolve_defaults",
]
