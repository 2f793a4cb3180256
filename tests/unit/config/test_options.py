"""
bufrplan — unit tests for option schema primitives

File: tests/unit/config/test_options.py
Last updated: 2026-10-18

Purpose
- Validate option types, defaults extraction, and strict layer validation.

What this test file should cover
- Defaults tree mirrors the schema shape.
- Unknown keys and type mismatches carry dotted paths.
- Option leaves reject defaults that violate their own type.
"""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from bufrplan.config.options import (
    AttrsType,
    BoolType,
    ConfigValidationError,
    EitherType,
    IntType,
    ListType,
    NullOr,
    Option,
    PackageType,
    StrType,
    TypeMismatchError,
    UnknownOptionError,
    check_layer,
    extract_defaults,
    lookup_option,
)
from bufrplan.config.schema import OPTION_SCHEMA, language_names


def _shape(node: object) -> object:
    if isinstance(node, Mapping):
        return {key: _shape(value) for key, value in node.items()}
    return None


def test_defaults_tree_has_same_shape_as_schema() -> None:
    defaults = extract_defaults(OPTION_SCHEMA)

    assert _shape(defaults) == _shape(OPTION_SCHEMA)


def test_defaults_carry_declared_values() -> None:
    defaults = extract_defaults(OPTION_SCHEMA)

    assert defaults["root"] == "./proto"
    assert defaults["debug"] == {"enable": False, "verbosity": 1, "logFile": ""}
    assert defaults["protoc"]["files"] == []
    assert defaults["languages"]["go"]["outputPath"] == "gen/go"
    assert defaults["languages"]["go"]["options"] == ["paths=source_relative"]
    assert defaults["languages"]["js"]["es"]["enable"] is True
    assert defaults["languages"]["js"]["es"]["outputPath"] is None
    assert defaults["languages"]["go"]["package"] is None


def test_defaults_are_fresh_copies() -> None:
    first = extract_defaults(OPTION_SCHEMA)
    first["languages"]["go"]["options"].append("mutated")

    second = extract_defaults(OPTION_SCHEMA)

    assert second["languages"]["go"]["options"] == ["paths=source_relative"]


def test_defaults_for_sub_tree_and_unknown_path() -> None:
    go_defaults = extract_defaults(OPTION_SCHEMA, ("languages", "go"))
    assert go_defaults["outputPath"] == "gen/go"
    assert go_defaults["grpc"]["enable"] is False

    with pytest.raises(UnknownOptionError) as excinfo:
        extract_defaults(OPTION_SCHEMA, ("languages", "cobol"))
    assert excinfo.value.paths == ("languages.cobol",)


def test_language_names_follow_declaration_order() -> None:
    assert language_names() == (
        "go",
        "js",
        "python",
        "dart",
        "elixir",
        "doc",
        "php",
        "swift",
        "cpp",
        "java",
        "kotlin",
        "csharp",
        "c",
        "scala",
        "svg",
    )


def test_valid_partial_layer_passes() -> None:
    check_layer(
        OPTION_SCHEMA,
        {
            "debug": {"enable": True, "verbosity": 3},
            "languages": {
                "go": {"enable": True, "outputPath": ["gen/go", "pkg/proto"]},
                "js": {"es": {"outputPath": "web/es"}},
                "python": {"files": None},
            },
        },
    )


def test_unknown_key_reports_dotted_path() -> None:
    with pytest.raises(UnknownOptionError) as excinfo:
        check_layer(OPTION_SCHEMA, {"languages": {"go": {"bogus": 1}}})

    assert excinfo.value.paths == ("languages.go.bogus",)
    assert str(excinfo.value).startswith("invalid config:\n- languages.go.bogus: unknown option")


def test_type_mismatch_reports_expected_type() -> None:
    with pytest.raises(TypeMismatchError) as excinfo:
        check_layer(OPTION_SCHEMA, {"debug": {"verbosity": 7}})

    issue = excinfo.value.issues[0]
    assert issue.path == "debug.verbosity"
    assert issue.message == "expected integer in [1, 3], got int"


def test_unknown_wins_when_issues_are_mixed() -> None:
    with pytest.raises(UnknownOptionError) as excinfo:
        check_layer(
            OPTION_SCHEMA,
            {"debug": {"enable": "yes"}, "languages": {"rust": {"enable": True}}},
        )

    assert excinfo.value.paths == ("debug.enable", "languages.rust")
    assert [issue.kind for issue in excinfo.value.issues] == ["type", "unknown"]


def test_scalar_where_object_expected() -> None:
    with pytest.raises(TypeMismatchError) as excinfo:
        check_layer(OPTION_SCHEMA, {"debug": True})

    assert excinfo.value.paths == ("debug",)
    assert "expected object, got bool" in str(excinfo.value)


def test_non_mapping_root_is_rejected() -> None:
    with pytest.raises(TypeMismatchError) as excinfo:
        check_layer(OPTION_SCHEMA, ["languages"])

    assert excinfo.value.paths == ("<root>",)


def test_validation_errors_are_value_errors() -> None:
    assert issubclass(UnknownOptionError, ConfigValidationError)
    assert issubclass(TypeMismatchError, ValueError)


def test_option_rejects_default_of_wrong_type() -> None:
    with pytest.raises(ValueError, match="does not match option type"):
        Option(BoolType(), "x")


@pytest.mark.parametrize(
    ("option_type", "value", "accepted"),
    [
        (IntType(), True, False),
        (IntType(minimum=1, maximum=3), 2, True),
        (IntType(minimum=1, maximum=3), 0, False),
        (EitherType(StrType(), ListType(StrType())), "gen/go", True),
        (EitherType(StrType(), ListType(StrType())), ["a", "b"], True),
        (EitherType(StrType(), ListType(StrType())), ["a", 1], False),
        (ListType(StrType()), "not-a-list", False),
        (NullOr(StrType()), None, True),
        (PackageType(), None, True),
        (PackageType(), "   ", False),
        (AttrsType(), {"plugin": "buf.build/x"}, True),
        (AttrsType(), {1: "x"}, False),
    ],
)
def test_option_type_acceptance(option_type: object, value: object, accepted: bool) -> None:
    assert option_type.accepts(value) is accepted  # type: ignore[attr-defined]


def test_lookup_option_returns_leaf_or_raises() -> None:
    leaf = lookup_option(OPTION_SCHEMA, "languages.go.outputPath")
    assert isinstance(leaf, Option)
    assert leaf.default == "gen/go"

    with pytest.raises(UnknownOptionError):
        lookup_option(OPTION_SCHEMA, "languages.go.nope")
