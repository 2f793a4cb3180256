"""
bufrplan — typed option schema primitives.

File: src/bufrplan/config/options.py
Last updated: 2026-10-18

Purpose
- Define the option type variants, the ``Option`` leaf, and schema walkers.

What should be included in this file
- One frozen dataclass per option kind (bool/int/str/enum/list/either/null/package/attrs).
- Defaults extraction and strict validation of partial config layers.
- Structured validation errors carrying dotted key paths.

Functional requirements
- Unknown keys are rejected with ``UnknownOptionError``.
- Values incompatible with the leaf type are rejected with ``TypeMismatchError``.

Non-functional requirements
- Pure functions only; no environment or filesystem access.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypeAlias, Union

IssueKind = Literal["unknown", "type"]


@dataclass(frozen=True, slots=True)
class BoolType:
    def describe(self) -> str:
        return "boolean"

    def accepts(self, value: object) -> bool:
        return isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class IntType:
    minimum: int | None = None
    maximum: int | None = None

    def describe(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return f"integer in [{self.minimum}, {self.maximum}]"
        return "integer"

    def accepts(self, value: object) -> bool:
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if self.minimum is not None and value < self.minimum:
            return False
        return self.maximum is None or value <= self.maximum


@dataclass(frozen=True, slots=True)
class StrType:
    def describe(self) -> str:
        return "string"

    def accepts(self, value: object) -> bool:
        return isinstance(value, str)


@dataclass(frozen=True, slots=True)
class EnumType:
    values: tuple[str, ...]

    def describe(self) -> str:
        return "one of: " + ", ".join(self.values)

    def accepts(self, value: object) -> bool:
        return isinstance(value, str) and value in self.values


@dataclass(frozen=True, slots=True)
class ListType:
    item: OptionType

    def describe(self) -> str:
        return f"list of {self.item.describe()}"

    def accepts(self, value: object) -> bool:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return False
        return all(self.item.accepts(entry) for entry in value)


@dataclass(frozen=True, slots=True)
class EitherType:
    first: OptionType
    second: OptionType

    def describe(self) -> str:
        return f"{self.first.describe()} or {self.second.describe()}"

    def accepts(self, value: object) -> bool:
        return self.first.accepts(value) or self.second.accepts(value)


@dataclass(frozen=True, slots=True)
class NullOr:
    inner: OptionType

    def describe(self) -> str:
        return f"null or {self.inner.describe()}"

    def accepts(self, value: object) -> bool:
        return value is None or self.inner.accepts(value)


@dataclass(frozen=True, slots=True)
class PackageType:
    """Opaque reference to an external tool; ``None`` means "not available"."""

    def describe(self) -> str:
        return "tool reference"

    def accepts(self, value: object) -> bool:
        return value is None or (isinstance(value, str) and bool(value.strip()))


@dataclass(frozen=True, slots=True)
class AttrsType:
    def describe(self) -> str:
        return "object"

    def accepts(self, value: object) -> bool:
        return isinstance(value, Mapping) and all(isinstance(key, str) for key in value)


OptionType: TypeAlias = Union[
    BoolType,
    IntType,
    StrType,
    EnumType,
    ListType,
    EitherType,
    NullOr,
    PackageType,
    AttrsType,
]


@dataclass(frozen=True, slots=True)
class Option:
    """Schema leaf: type, default value, and human description."""

    type: OptionType
    default: object = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.default is not None and not self.type.accepts(self.default):
            raise ValueError(
                f"default {self.default!r} does not match option type {self.type.describe()}"
            )


OptionTree: TypeAlias = Mapping[str, Union[Option, "OptionTree"]]

STRING_LIST: Final[ListType] = ListType(StrType())


def mk_option(option_type: OptionType, default: object = None, description: str = "") -> Option:
    """Shorthand used by the schema data table."""

    return Option(type=option_type, default=default, description=description)


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str
    kind: IssueKind = "type"


class ConfigValidationError(ValueError):
    """Raised when a config layer does not conform to the option schema."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(item.path for item in self.issues)


class UnknownOptionError(ConfigValidationError):
    """A config key does not exist anywhere in the option schema."""


class TypeMismatchError(ConfigValidationError):
    """A config value does not match the type declared by the schema."""


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str, kind: IssueKind) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message, kind=kind))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(sorted(self._items, key=lambda item: (item.path, item.kind)))

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def is_option(node: object) -> bool:
    return isinstance(node, Option)


def extract_defaults(schema: OptionTree, path: Sequence[str] = ()) -> dict[str, Any]:
    """Return the defaults-only tree for ``schema`` (or the sub-tree at ``path``)."""

    node: object = schema
    walked: list[str] = []
    for part in path:
        walked.append(part)
        if not isinstance(node, Mapping) or part not in node:
            raise UnknownOptionError(
                (ConfigValidationIssue(".".join(walked), "unknown option", "unknown"),)
            )
        node = node[part]
    if isinstance(node, Option):
        raise ValueError(f"{'.'.join(path)} is an option, not an option tree")
    assert isinstance(node, Mapping)
    return _defaults_of(node)


def _defaults_of(tree: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, node in tree.items():
        if isinstance(node, Option):
            out[key] = copy.deepcopy(node.default)
        elif isinstance(node, Mapping):
            out[key] = _defaults_of(node)
        else:
            out[key] = node
    return out


def lookup_option(schema: OptionTree, dotted: str) -> Option | OptionTree:
    """Return the schema node at ``dotted`` or raise ``UnknownOptionError``."""

    node: object = schema
    for part in dotted.split("."):
        if not isinstance(node, Mapping) or part not in node:
            raise UnknownOptionError(
                (ConfigValidationIssue(dotted, "unknown option", "unknown"),)
            )
        node = node[part]
    return node  # type: ignore[return-value]


def check_layer(schema: OptionTree, layer: Mapping[str, object] | object) -> None:
    """Validate a partial config layer against ``schema``.

    Raises ``UnknownOptionError`` when any issue is an unknown key, otherwise
    ``TypeMismatchError``. All issues are reported together.
    """

    issues = _IssueCollector()
    if not isinstance(layer, Mapping):
        issues.add("<root>", f"expected object, got {type(layer).__name__}", "type")
    else:
        _check_tree(schema, layer, "", issues)

    if not issues.has_issues:
        return
    collected = issues.items()
    if any(item.kind == "unknown" for item in collected):
        raise UnknownOptionError(collected)
    raise TypeMismatchError(collected)


def _check_tree(
    schema: Mapping[str, object],
    payload: Mapping[object, object],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in payload:
        if not isinstance(key, str):
            issues.add(
                path or "<root>",
                f"object key must be string, got {type(key).__name__}",
                "type",
            )
            continue
        key_path = _join(path, key)
        node = schema.get(key)
        value = payload[key]
        if node is None:
            issues.add(key_path, "unknown option", "unknown")
        elif isinstance(node, Option):
            if not node.type.accepts(value):
                issues.add(
                    key_path,
                    f"expected {node.type.describe()}, got {_describe_value(value)}",
                    "type",
                )
        elif isinstance(node, Mapping):
            if isinstance(value, Mapping):
                _check_tree(node, value, key_path, issues)
            else:
                issues.add(key_path, f"expected object, got {_describe_value(value)}", "type")


def _describe_value(value: object) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "STRING_LIST",
    "AttrsType",
    "BoolType",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "EitherType",
    "EnumType",
    "IntType",
    "ListType",
    "NullOr",
    "Option",
    "OptionTree",
    "OptionType",
    "PackageType",
    "StrType",
    "TypeMismatchError",
    "UnknownOptionError",
    "check_layer",
    "extract_defaults",
    "is_option",
    "lookup_option",
    "mk_option",
]
