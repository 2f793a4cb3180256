"""Elixir language module."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    HookStep,
    LocalConfig,
    PluginModuleResult,
    echo_step,
    feature,
    mkdir_step,
    tools,
)
from bufrplan.modules.composer import FeatureSlot, LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

_FORMATTER_SCRIPT = """\
if [ ! -f "{path}/.formatter.exs" ]; then
  cat > "{path}/.formatter.exs" << 'EOF'
[
  inputs: ["*.{{ex,exs}}", "{{lib,test}}/**/*.{{ex,exs}}"],
  line_length: 120
]
EOF
fi"""


def elixir_option_flags(options: Sequence[object]) -> tuple[str, ...]:
    """All options as one ``--elixir_opt=a --elixir_opt=b`` fragment."""

    rendered = [str(option) for option in options if str(option).strip()]
    if not rendered:
        return ()
    return ("--elixir_opt=" + " --elixir_opt=".join(rendered),)


@feature
def elixir_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    init = [mkdir_step(output_path)]
    namespace = local.get("namespace") or ""
    if namespace:
        init.append(
            echo_step("namespace", f"Creating Elixir modules with namespace: {namespace}")
        )
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--elixir_out={output_path}",
            *elixir_option_flags(local.get("options") or ()),
        ),
        init_hooks=tuple(init),
        generate_hooks=(
            echo_step("elixir-announce", "Generating Elixir code..."),
            HookStep(name="write-formatter", script=_FORMATTER_SCRIPT.format(path=output_path)),
        ),
    )


@feature
def elixir_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--elixir_out=plugins=grpc:{output_path}",
            *elixir_option_flags(local.get("options") or ()),
        ),
        init_hooks=(echo_step("elixir-grpc-init", "Enabling Elixir gRPC generation..."),),
        generate_hooks=(
            echo_step("elixir-grpc-summary", f"Generated Elixir gRPC services in {output_path}"),
        ),
    )


@feature
def elixir_validate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        init_hooks=(echo_step("elixir-validate-init", "Preparing Elixir validation support..."),),
        generate_hooks=(
            echo_step(
                "elixir-validate-hint",
                "Note: To use validation in Elixir, add protoc_validate to your mix.exs "
                "dependencies",
            ),
        ),
    )


@register_builtin_language()
def elixir_language() -> LanguageModule:
    return LanguageModule(
        name="elixir",
        base=elixir_base,
        features=(
            FeatureSlot("grpc", elixir_grpc, "gRPC services and stubs"),
            FeatureSlot("validate", elixir_validate, "validation hints"),
        ),
        subsumes={"grpc": "elixir"},
    )
