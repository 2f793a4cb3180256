"""
bufrplan — unit tests for the generation plan compiler

File: tests/unit/planning/test_plan_compiler.py
Last updated: 2026-10-18

Purpose
- Validate expansion of enabled languages into ordered (language, output path) units.

What this test file should cover
- One unit per output path; units grouped by language in declaration order.
- Each unit's output flags target only its own path.
- Runtime inputs are deduplicated and seeded with the base tools.
- Missing modules and blank paths are fatal.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bufrplan.config.resolver import resolve
from bufrplan.modules import LanguageRegistry, parse_output_flag
from bufrplan.planning.compiler import (
    GenerationPlan,
    PlanCompilationError,
    compile_plan,
    normalize_output_path,
)

_PATHS = st.lists(
    st.text(alphabet="abcdefgh/_-", min_size=1, max_size=10).filter(lambda path: path.strip()),
    min_size=1,
    max_size=4,
    unique=True,
)

_ALL_GO_FEATURES = {
    key: {"enable": True}
    for key in ("grpc", "gateway", "validate", "connect", "vtprotobuf", "json", "openapiv2")
}


def _discover(directory: str) -> tuple[str, ...]:
    return (f"{directory}/service.proto",)


def _plan(overrides: dict[str, object]) -> GenerationPlan:
    return compile_plan(resolve(user_overrides=overrides), discover=_discover)


def test_multi_path_go_with_grpc_yields_isolated_units() -> None:
    plan = _plan(
        {
            "languages": {
                "go": {
                    "enable": True,
                    "outputPath": ["gen/go", "pkg/proto"],
                    "grpc": {"enable": True},
                }
            }
        }
    )

    assert [(unit.language, unit.output_path) for unit in plan.units] == [
        ("go", "gen/go"),
        ("go", "pkg/proto"),
    ]
    first, second = plan.units
    assert "--go-grpc_out=gen/go" in first.protoc_plugins
    assert not any("pkg/proto" in flag for flag in first.protoc_plugins)
    assert "--go-grpc_out=pkg/proto" in second.protoc_plugins
    assert not any("gen/go" in flag for flag in second.protoc_plugins)


def test_hooks_are_re_evaluated_per_path() -> None:
    plan = _plan({"languages": {"go": {"enable": True, "outputPath": ["gen/go", "pkg/proto"]}}})

    first, second = plan.units
    assert 'mkdir -p "gen/go"' in first.init_hooks_text
    assert 'mkdir -p "pkg/proto"' in second.init_hooks_text
    assert "pkg/proto" not in first.init_hooks_text


def test_python_files_come_from_discovery() -> None:
    plan = _plan(
        {
            "protoc": {"sourceDirectories": ["./proto"]},
            "languages": {"python": {"enable": True, "additionalFiles": ["extra.proto"]}},
        }
    )

    (unit,) = plan.units
    assert unit.files == ("./proto/service.proto", "extra.proto")


def test_units_are_grouped_in_language_declaration_order() -> None:
    plan = _plan(
        {
            "languages": {
                "js": {"enable": True, "outputPath": ["web/a", "web/b"]},
                "go": {"enable": True, "outputPath": ["gen/go", "pkg/proto"]},
            }
        }
    )

    assert [unit.language for unit in plan.units] == ["go", "go", "js", "js"]
    assert plan.languages == ("go", "js")
    assert [unit.output_path for unit in plan.units_for("js")] == ["web/a", "web/b"]


def test_disabled_languages_produce_no_units() -> None:
    plan = _plan({})

    assert plan.units == ()
    assert plan.global_runtime_inputs == ("bash", "protobuf")


def test_runtime_inputs_are_deduplicated_in_first_seen_order() -> None:
    plan = _plan(
        {
            "languages": {
                "go": {"enable": True, "grpc": {"enable": True}},
                "python": {"enable": True},
                "php": {"enable": True},
            }
        }
    )

    assert plan.global_runtime_inputs == (
        "bash",
        "protobuf",
        "protoc-gen-go",
        "protoc-gen-go-grpc",
    )


@settings(max_examples=40, deadline=None)
@given(paths=_PATHS)
def test_one_unit_per_output_path(paths: list[str]) -> None:
    plan = _plan({"languages": {"go": {"enable": True, "outputPath": paths}}})

    assert [unit.output_path for unit in plan.units] == paths


@settings(max_examples=40, deadline=None)
@given(paths=_PATHS)
def test_every_output_flag_targets_its_own_unit_path(paths: list[str]) -> None:
    plan = _plan(
        {
            "languages": {
                "go": {"enable": True, "outputPath": paths, **_ALL_GO_FEATURES},
                "js": {"enable": True, "outputPath": paths, "connect": {"enable": True}},
                "dart": {"enable": True, "outputPath": paths, "grpc": {"enable": True}},
                "elixir": {"enable": True, "outputPath": paths, "grpc": {"enable": True}},
            }
        }
    )

    assert len(plan.units) == 4 * len(paths)
    for unit in plan.units:
        parsed = [parse_output_flag(flag) for flag in unit.protoc_plugins]
        targets = {item[1] for item in parsed if item is not None}
        assert targets == {unit.output_path}


def test_feature_with_its_own_output_path_keeps_it_for_every_unit() -> None:
    plan = _plan(
        {
            "languages": {
                "js": {
                    "enable": True,
                    "outputPath": ["web/a", "web/b"],
                    "es": {"outputPath": "web/es"},
                }
            }
        }
    )

    for unit in plan.units:
        assert "--es_out=web/es" in unit.protoc_plugins


def test_dart_grpc_replaces_base_output_flag() -> None:
    plan = _plan({"languages": {"dart": {"enable": True, "grpc": {"enable": True}}}})

    (unit,) = plan.units
    assert "--dart_out=grpc:lib/proto" in unit.protoc_plugins
    assert "--dart_out=lib/proto" not in unit.protoc_plugins


def test_unregistered_language_is_fatal() -> None:
    effective = resolve(user_overrides={"languages": {"go": {"enable": True}}})

    with pytest.raises(PlanCompilationError, match="no language module is registered") as excinfo:
        compile_plan(effective, registry=LanguageRegistry(), discover=_discover)

    assert excinfo.value.language == "go"


@pytest.mark.parametrize(
    ("output_path", "message"),
    [
        (["gen/go", "  "], r"outputPath\[1\] is blank"),
        ("", r"outputPath\[0\] is blank"),
    ],
)
def test_blank_output_paths_are_fatal(output_path: object, message: str) -> None:
    with pytest.raises(PlanCompilationError, match=message):
        _plan({"languages": {"go": {"enable": True, "outputPath": output_path}}})


def test_empty_output_path_list_yields_no_units() -> None:
    plan = _plan(
        {
            "languages": {
                "go": {"enable": True, "outputPath": [], "grpc": {"enable": True}},
                "python": {"enable": True},
            }
        }
    )

    assert plan.units_for("go") == ()
    assert [unit.language for unit in plan.units] == ["python"]
    assert "protoc-gen-go-grpc" not in plan.global_runtime_inputs


@settings(max_examples=50, deadline=None)
@given(
    value=st.one_of(
        st.text(max_size=6),
        st.lists(st.text(max_size=6), max_size=4),
    )
)
def test_normalize_output_path_is_idempotent(value: object) -> None:
    once = normalize_output_path(value)  # type: ignore[arg-type]

    assert normalize_output_path(once) == once
    assert isinstance(once, tuple)


def test_plan_serializes_with_camel_case_keys() -> None:
    plan = _plan({"languages": {"swift": {"enable": True}}})

    payload = plan.to_dict()

    assert payload["globalRuntimeInputs"] == ["bash", "protobuf", "protoc-gen-swift"]
    unit = payload["units"][0]
    assert unit["language"] == "swift"
    assert unit["outputPath"] == "gen/swift"
    assert unit["protocPlugins"] == ["--swift_out=gen/swift"]
    assert unit["initHooks"][0] == {
        "name": "create-output-directory",
        "script": 'mkdir -p "gen/swift"',
    }
    assert '"outputPath": "gen/swift"' in plan.to_json()
