"""
bufrplan — unit tests for the configuration resolver

File: tests/unit/config/test_resolver.py
Last updated: 2026-10-18

Purpose
- Validate layered resolution: schema defaults, package defaults, user overrides.

What this test file should cover
- Right-biased deep merge with wholesale list replacement.
- Merge idempotence.
- Validation happens before merging.
- Effective config is read-only and scoped per language.
"""

from __future__ import annotations

from collections.abc import Mapping

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bufrplan.config.options import TypeMismatchError, UnknownOptionError
from bufrplan.config.resolver import EffectiveConfig, deep_merge, resolve, resolve_defaults

_KEYS = st.text(alphabet="abcdef", min_size=1, max_size=4)
_LEAVES = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-10, max_value=10),
    st.text(max_size=5),
    st.lists(st.integers(min_value=0, max_value=5), max_size=3),
)
_TREES = st.recursive(
    _LEAVES,
    lambda children: st.dictionaries(_KEYS, children, max_size=4),
    max_leaves=12,
)
_MAPPINGS = st.dictionaries(_KEYS, _TREES, max_size=5)


def test_deep_merge_is_right_biased() -> None:
    merged = deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}})

    assert merged == {"a": {"b": 3, "c": 2}, "d": 1}


def test_deep_merge_replaces_lists_wholesale() -> None:
    merged = deep_merge({"options": ["x", "y"]}, {"options": ["z"]})

    assert merged == {"options": ["z"]}


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"b": [1]}}
    overlay = {"a": {"c": 2}}

    merged = deep_merge(base, overlay)
    merged["a"]["b"].append(9)

    assert base == {"a": {"b": [1]}}
    assert overlay == {"a": {"c": 2}}


@settings(max_examples=75, deadline=None)
@given(tree=_MAPPINGS)
def test_deep_merge_is_idempotent(tree: dict[str, object]) -> None:
    assert deep_merge(tree, tree) == tree


@settings(max_examples=75, deadline=None)
@given(base=_MAPPINGS, overlay=_MAPPINGS)
def test_reapplying_an_overlay_changes_nothing(
    base: dict[str, object], overlay: dict[str, object]
) -> None:
    once = deep_merge(base, overlay)

    assert deep_merge(once, overlay) == once


def test_resolved_config_merges_with_itself_unchanged() -> None:
    tree = resolve(user_overrides={"languages": {"go": {"enable": True}}}).to_dict()

    assert deep_merge(tree, tree) == tree


def test_effective_config_merges_with_itself_unchanged() -> None:
    effective = resolve(user_overrides={"languages": {"go": {"enable": True}}})

    merged = deep_merge(effective, effective)

    assert merged == effective
    assert EffectiveConfig(tree=merged, language_order=effective.language_order) == effective
    assert deep_merge(effective.tree, effective.tree) == effective.tree


@settings(max_examples=40, deadline=None)
@given(
    go_enabled=st.booleans(),
    options=st.lists(st.sampled_from(["paths=import", "module=x", "a=b"]), max_size=3),
    roots=st.lists(st.sampled_from(["./proto", "./api", "./vendor"]), min_size=1, max_size=3),
)
def test_effective_config_merge_is_idempotent(
    go_enabled: bool, options: list[str], roots: list[str]
) -> None:
    effective = resolve(
        user_overrides={
            "protoc": {"sourceDirectories": roots},
            "languages": {"go": {"enable": go_enabled, "options": options}},
        }
    )

    assert deep_merge(effective, effective) == effective


def test_effective_config_is_a_mapping() -> None:
    effective = resolve_defaults()

    assert isinstance(effective, Mapping)
    assert len(effective) == len(effective.to_dict())
    assert set(effective.keys()) == {"root", "debug", "protoc", "languages"}
    assert effective == effective.to_dict()
    assert effective != resolve(user_overrides={"root": "./elsewhere"})


def test_user_options_replace_default_list() -> None:
    effective = resolve(user_overrides={"languages": {"go": {"options": ["paths=import"]}}})

    assert effective.language("go")["options"] == ("paths=import",)


def test_package_defaults_sit_between_schema_and_user_layers() -> None:
    defaults = resolve_defaults()
    assert defaults.language("go")["package"] == "protoc-gen-go"
    assert defaults.get_path("languages.go.grpc.package") == "protoc-gen-go-grpc"

    overridden = resolve(user_overrides={"languages": {"go": {"package": "my-protoc-gen-go"}}})
    assert overridden.language("go")["package"] == "my-protoc-gen-go"


def test_unknown_key_fails_before_merge() -> None:
    with pytest.raises(UnknownOptionError) as excinfo:
        resolve(user_overrides={"languages": {"go": {"grpc": {"enabled": True}}}})

    assert excinfo.value.paths == ("languages.go.grpc.enabled",)


def test_type_mismatch_fails_before_merge() -> None:
    with pytest.raises(TypeMismatchError):
        resolve(user_overrides={"languages": {"go": {"outputPath": 5}}})


def test_invalid_package_defaults_layer_is_rejected() -> None:
    with pytest.raises(UnknownOptionError):
        resolve(package_defaults={"languages": {"go": {"pkg": "x"}}})


def test_effective_config_is_read_only() -> None:
    effective = resolve_defaults()

    with pytest.raises(TypeError):
        effective.tree["root"] = "elsewhere"  # type: ignore[index]
    assert isinstance(effective.language("go")["options"], tuple)


def test_enabled_languages_follow_declaration_order() -> None:
    effective = resolve(
        user_overrides={
            "languages": {"swift": {"enable": True}, "js": {"enable": True}, "go": {"enable": True}}
        }
    )

    assert effective.enabled_languages() == ("go", "js", "swift")


def test_language_lookup_and_path_access() -> None:
    effective = resolve_defaults()

    assert effective.get_path("protoc.sourceDirectories") == ("./proto",)
    assert effective.get_path("protoc.missing", "fallback") == "fallback"
    with pytest.raises(KeyError, match="unknown language"):
        effective.language("cobol")


def test_with_language_returns_scoped_copy() -> None:
    effective = resolve(user_overrides={"languages": {"go": {"enable": True}}})
    local = dict(effective.language("go"))
    local["outputPath"] = "pkg/proto"

    scoped = effective.with_language("go", local)

    assert scoped.language("go")["outputPath"] == "pkg/proto"
    assert effective.language("go")["outputPath"] == "gen/go"
    assert scoped.language_order == effective.language_order


def test_to_dict_and_json_round_trip_plain_values() -> None:
    effective = resolve(user_overrides={"languages": {"go": {"outputPath": ["a", "b"]}}})

    data = effective.to_dict()

    assert data["languages"]["go"]["outputPath"] == ["a", "b"]
    assert '"outputPath":["a","b"]' in effective.to_json()
    assert EffectiveConfig(tree=data) == effective
