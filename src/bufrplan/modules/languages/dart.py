"""Dart language module; gRPC generation replaces the plain ``--dart_out`` flag."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    LocalConfig,
    PluginModuleResult,
    echo_step,
    feature,
    joined_option_flag,
    mkdir_step,
    tools,
)
from bufrplan.modules.composer import FeatureSlot, LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig


@feature
def dart_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    init = [mkdir_step(output_path)]
    package_name = local.get("packageName") or ""
    if package_name:
        init.append(echo_step("package-name", f"Generating Dart code for package: {package_name}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--dart_out={output_path}",
            *joined_option_flag("dart", local.get("options") or ()),
        ),
        init_hooks=tuple(init),
        generate_hooks=(echo_step("dart-summary", f"Generated Dart code in {output_path}"),),
    )


@feature
def dart_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--dart_out=grpc:{local['outputPath']}",),
        init_hooks=(echo_step("dart-grpc-init", "Enabling Dart gRPC generation..."),),
    )


@register_builtin_language()
def dart_language() -> LanguageModule:
    return LanguageModule(
        name="dart",
        base=dart_base,
        features=(FeatureSlot("grpc", dart_grpc, "gRPC service stubs"),),
        subsumes={"grpc": "dart"},
    )
