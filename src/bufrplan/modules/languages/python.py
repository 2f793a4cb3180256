"""Python language module: protobuf messages, gRPC stubs, and type stubs."""

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

# Every generated directory must be importable as a package.
_INIT_PY_SCRIPT = """\
find "{path}" -type d | while IFS= read -r dir; do
  [ -f "$dir/__init__.py" ] || touch "$dir/__init__.py"
done"""


@feature
def python_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--python_out={output_path}",
            *joined_option_flag("python", local.get("options") or ()),
        ),
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=(
            HookStep(name="create-init-files", script=_INIT_PY_SCRIPT.format(path=output_path)),
            echo_step("python-summary", f"Generated Python code in {output_path}"),
        ),
    )


@feature
def python_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc_python=$(command -v grpc_python_plugin)",
            f"--grpc_python_out={output_path}",
            *joined_option_flag("grpc_python", local.get("options") or ()),
        ),
    )


@feature
def python_pyi(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--pyi_out={local['outputPath']}",),
    )


@feature
def python_mypy(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--mypy_out={output_path}",
            *joined_option_flag("mypy", local.get("options") or ()),
        ),
    )


@feature
def python_betterproto(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    options = [str(option) for option in local.get("options") or ()]
    if local.get("pydantic") and "pydantic_dataclasses" not in options:
        options.append("pydantic_dataclasses")
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--python_betterproto_out={output_path}",
            *joined_option_flag("python_betterproto", options),
        ),
    )


@register_builtin_language()
def python_language() -> LanguageModule:
    return LanguageModule(
        name="python",
        base=python_base,
        features=(
            FeatureSlot("grpc", python_grpc, "grpcio service stubs"),
            FeatureSlot("pyi", python_pyi, "protoc .pyi stubs"),
            FeatureSlot("mypy", python_mypy, "mypy-protobuf stubs"),
            FeatureSlot("betterproto", python_betterproto, "betterproto dataclasses"),
        ),
    )
