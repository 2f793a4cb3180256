"""Java language module: protobuf messages, gRPC stubs, and protoc-gen-validate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    HookStep,
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
def java_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    init: list[HookStep] = [mkdir_step(output_path)]
    package_name = local.get("packageName") or ""
    if package_name:
        init.append(echo_step("package-name", f"Generating Java code for package: {package_name}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package"), local.get("jdk")),
        protoc_plugins=(
            f"--java_out={output_path}",
            *joined_option_flag("java", local.get("options") or ()),
        ),
        init_hooks=tuple(init),
        generate_hooks=(echo_step("java-summary", f"Generated Java code in {output_path}"),),
    )


@feature
def java_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc-java=$(command -v protoc-gen-grpc-java)",
            f"--grpc-java_out={local['outputPath']}",
            *joined_option_flag("grpc-java", local.get("options") or ()),
        ),
    )


@feature
def java_protovalidate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    options = ["lang=java", *(str(option) for option in local.get("options") or ())]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--validate_out={','.join(options)}:{local['outputPath']}",),
    )


@register_builtin_language()
def java_language() -> LanguageModule:
    return LanguageModule(
        name="java",
        base=java_base,
        features=(
            FeatureSlot("grpc", java_grpc, "gRPC service stubs"),
            FeatureSlot("protovalidate", java_protovalidate, "message validators"),
        ),
    )
