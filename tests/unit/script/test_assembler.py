"""
bufrplan — unit tests for the generation script assembler

File: tests/unit/script/test_assembler.py
Last updated: 2026-10-18

Purpose
- Validate the rendered bash script: ordering, quoting, debug wrapping, empty units.

What this test file should cover
- One status line per unit, in plan order.
- Per-unit step order: files, init hooks, mkdir, compiler flags, invocation, generate hooks.
- Units without files are skipped with ``EmptyFileSetWarning``.
- nanopb units pick up the discovered ``.options`` file.
"""

from __future__ import annotations

import warnings

import pytest

from bufrplan.config.resolver import EffectiveConfig, resolve
from bufrplan.planning.compiler import compile_plan
from bufrplan.script.assembler import (
    NANOPB_OPTIONS_PREAMBLE,
    SCRIPT_HEADER,
    EmptyFileSetWarning,
    assemble_script,
    status_line,
)


def _discover(directory: str) -> tuple[str, ...]:
    return (f"{directory}/a.proto", f"{directory}/b.proto")


def _script(overrides: dict[str, object], *, discover=_discover) -> tuple[str, EffectiveConfig]:
    effective = resolve(user_overrides=overrides)
    plan = compile_plan(effective, discover=discover)
    return assemble_script(plan, effective), effective


def test_script_starts_with_header_and_base_arguments() -> None:
    script, _ = _script({"languages": {"swift": {"enable": True}}})

    assert script.startswith(SCRIPT_HEADER)
    assert "protoc_cmd=protoc\n" in script
    assert "base_protoc_args='-I ./proto'\n" in script
    assert 'if [ -n "${BUFRNIX_DEBUG:-}" ]; then' in script


def test_status_lines_follow_plan_order() -> None:
    script, effective = _script(
        {
            "languages": {
                "go": {"enable": True, "outputPath": ["gen/go", "pkg/proto"]},
                "python": {"enable": True},
            }
        }
    )
    plan = compile_plan(effective, discover=_discover)

    positions = [script.index(status_line(unit)) for unit in plan.units]

    assert len(positions) == 3
    assert positions == sorted(positions)
    assert "Generating go code for output path: gen/go" in script


def test_unit_steps_are_emitted_in_order() -> None:
    script, _ = _script({"languages": {"go": {"enable": True}}})

    markers = [
        'echo "Generating go code for output path: gen/go"',
        "lang_proto_files='./proto/a.proto ./proto/b.proto'",
        "# hook: create-output-directory",
        "mkdir -p gen/go",
        'protoc_args="$protoc_args --go_out=gen/go"',
        'eval "$protoc_cmd $protoc_args $lang_proto_files"',
        "# hook: go-summary",
    ]
    positions = [script.index(marker) for marker in markers]

    assert positions == sorted(positions)


def test_dollar_substitutions_are_deferred_to_eval() -> None:
    script, _ = _script({"languages": {"php": {"enable": True, "grpc": {"enable": True}}}})

    assert (
        'protoc_args="$protoc_args --plugin=protoc-gen-grpc=\\$(command -v grpc_php_plugin)"'
        in script
    )


def test_nanopb_units_receive_options_file_argument() -> None:
    script, _ = _script(
        {
            "languages": {
                "c": {"enable": True, "nanopb": {"enable": True}},
                "go": {"enable": True},
            }
        }
    )

    go_block, c_block = script.split("# Generating for language: c")

    assert script.count(NANOPB_OPTIONS_PREAMBLE) == 1
    assert script.index(NANOPB_OPTIONS_PREAMBLE) > script.index("base_protoc_args=")
    assert 'protoc_args="$protoc_args --nanopb_out=gen/c/nanopb"' in c_block
    assert 'protoc_args="$protoc_args $nanopb_opts"' in c_block
    assert "$nanopb_opts" not in go_block.split("# Generating for language: go")[1]


def test_options_file_lookup_is_absent_without_nanopb() -> None:
    script, _ = _script({"languages": {"c": {"enable": True, "upb": {"enable": True}}}})

    assert "nanopb_opts" not in script
    assert 'protoc_args="$protoc_args --upb_out=gen/c/upb"' in script


def test_empty_unit_is_skipped_with_warning() -> None:
    with pytest.warns(EmptyFileSetWarning, match="no .proto files"):
        script, _ = _script({"languages": {"go": {"enable": True}}}, discover=lambda _: ())

    assert "Warning: No .proto files found for go; skipping gen/go" in script
    assert "eval " not in script


def test_debug_disabled_emits_no_runtime_logging() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", EmptyFileSetWarning)
        script, _ = _script({"languages": {"go": {"enable": True}}})

    assert "[bufrplan] INFO" not in script
    assert "start_time=" not in script
    assert "debug_enable=false" in script


def test_trace_verbosity_wraps_compiler_invocation() -> None:
    script, _ = _script(
        {"debug": {"enable": True, "verbosity": 3}, "languages": {"go": {"enable": True}}}
    )

    assert "[bufrplan] INFO: Starting code generation" in script
    assert "[bufrplan] DEBUG: Executing command:" in script
    assert "start_time=$(date +%s.%N)" in script
    assert '{ eval "$protoc_cmd $protoc_args $lang_proto_files"; cmd_status=$?; }' in script
    assert "(exit $cmd_status)" in script


def test_info_verbosity_logs_to_configured_file() -> None:
    script, _ = _script(
        {
            "debug": {"enable": True, "verbosity": 1, "logFile": "/tmp/bufr.log"},
            "languages": {"go": {"enable": True}},
        }
    )

    start = 'INFO: Starting code generation with per-language file support" >> /tmp/bufr.log'
    assert start in script
    assert "Executing command:" not in script
    assert "start_time=" not in script
