"""
bufrplan — unit tests for the language registry and composer

File: tests/unit/modules/test_composer.py
Last updated: 2026-10-18

Purpose
- Validate output-flag parsing, declared base-flag precedence, and conflict detection.
- Validate deterministic registry behaviour.
"""

from __future__ import annotations

import pytest

from bufrplan.config.resolver import EffectiveConfig, resolve_defaults
from bufrplan.config.schema import language_names
from bufrplan.modules import (
    DEFAULT_LANGUAGE_REGISTRY,
    FeatureSlot,
    LanguageModule,
    LanguageRegistry,
    ModuleCompositionConflict,
    PluginModuleResult,
    compose_language,
    feature,
    parse_output_flag,
    register_builtin_language,
)
from bufrplan.modules.base import LocalConfig

_GLOBAL = resolve_defaults()


@feature
def _base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=("protoc-gen-x",),
        protoc_plugins=(f"--x_out={local['outputPath']}", "--x_opt=base"),
    )


@feature
def _service(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(protoc_plugins=(f"--x_out=plugins=svc:{local['outputPath']}",))


@feature
def _extra(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(protoc_plugins=(f"--extra_out={local['outputPath']}",))


def _local(*, service: bool = False, extra: bool = False) -> dict[str, object]:
    return {
        "enable": True,
        "outputPath": "gen/x",
        "service": {"enable": service},
        "extra": {"enable": extra},
    }


@pytest.mark.parametrize(
    ("flag", "expected"),
    [
        ("--go_out=gen/go", ("go", "gen/go")),
        ("--elixir_out=plugins=grpc:lib", ("elixir", "lib")),
        ("--js_out=import_style=commonjs,binary:gen/js", ("js", "gen/js")),
        ("--grpc_python_out=gen/python", ("grpc_python", "gen/python")),
        ("--python_betterproto_out=gen/bp", ("python_betterproto", "gen/bp")),
        ("--go_opt=paths=source_relative", None),
        ("--plugin=protoc-gen-grpc=$(command -v grpc_php_plugin)", None),
    ],
)
def test_parse_output_flag(flag: str, expected: tuple[str, str] | None) -> None:
    assert parse_output_flag(flag) == expected


def test_features_run_after_base_in_declaration_order() -> None:
    language = LanguageModule(
        name="x",
        base=_base,
        features=(FeatureSlot("extra", _extra), FeatureSlot("service", _service)),
        subsumes={"service": "x"},
    )

    result = compose_language(language, _GLOBAL, _local(service=True, extra=True))

    assert result.protoc_plugins == (
        "--x_opt=base",
        "--extra_out=gen/x",
        "--x_out=plugins=svc:gen/x",
    )


def test_subsuming_feature_keeps_base_flag_while_disabled() -> None:
    language = LanguageModule(
        name="x",
        base=_base,
        features=(FeatureSlot("service", _service),),
        subsumes={"service": "x"},
    )

    result = compose_language(language, _GLOBAL, _local())

    assert result.protoc_plugins == ("--x_out=gen/x", "--x_opt=base")


def test_same_family_and_path_without_precedence_conflicts() -> None:
    language = LanguageModule(
        name="x",
        base=_base,
        features=(FeatureSlot("service", _service),),
    )

    with pytest.raises(ModuleCompositionConflict) as excinfo:
        compose_language(language, _GLOBAL, _local(service=True))

    assert excinfo.value.language == "x"
    assert excinfo.value.family == "x"
    assert excinfo.value.path == "gen/x"
    assert excinfo.value.flags == ("--x_out=gen/x", "--x_out=plugins=svc:gen/x")


def test_feature_modules_are_scoped_to_their_sub_tree() -> None:
    language = LanguageModule(name="x", base=_base, features=(FeatureSlot("extra", _extra),))

    (bound,) = language.feature_modules()

    assert bound.__name__ == "extra_feature"
    assert language.feature_keys == ("extra",)


def test_language_module_validates_its_declaration() -> None:
    with pytest.raises(ValueError, match="duplicate feature keys"):
        LanguageModule(
            name="x",
            base=_base,
            features=(FeatureSlot("extra", _extra), FeatureSlot("extra", _service)),
        )
    with pytest.raises(ValueError, match="subsumes undeclared features"):
        LanguageModule(name="x", base=_base, subsumes={"grpc": "x"})
    with pytest.raises(ValueError, match="name cannot be empty"):
        LanguageModule(name=" ", base=_base)


def test_registry_rejects_duplicates_and_unknown_names() -> None:
    registry = LanguageRegistry((LanguageModule(name="x", base=_base),))

    with pytest.raises(ValueError, match="already registered"):
        registry.register(LanguageModule(name="x", base=_extra))
    with pytest.raises(KeyError, match="unknown language"):
        registry.get("y")
    assert "x" in registry
    assert registry.contains("x")
    assert not registry.contains("y")


def test_register_decorator_targets_given_registry() -> None:
    registry = LanguageRegistry()

    @register_builtin_language(registry=registry)
    def first() -> LanguageModule:
        return LanguageModule(name="first", base=_base)

    @register_builtin_language(registry=registry)
    def second() -> LanguageModule:
        return LanguageModule(name="second", base=_extra)

    assert registry.names() == ("first", "second")
    assert registry.get("first").base is _base
    assert "first" not in DEFAULT_LANGUAGE_REGISTRY


def test_default_registry_covers_every_schema_language() -> None:
    assert set(DEFAULT_LANGUAGE_REGISTRY.names()) == set(language_names())
