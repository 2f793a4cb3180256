"""Swift language module."""

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
from bufrplan.modules.composer import LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig


@feature
def swift_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    init = [mkdir_step(output_path)]
    package_name = local.get("packageName") or ""
    if package_name:
        init.append(echo_step("package-name", f"Generating Swift code for package: {package_name}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--swift_out={output_path}",
            *joined_option_flag("swift", local.get("options") or ()),
        ),
        init_hooks=tuple(init),
        generate_hooks=(echo_step("swift-summary", f"Generated Swift code in {output_path}"),),
    )


@register_builtin_language()
def swift_language() -> LanguageModule:
    return LanguageModule(name="swift", base=swift_base)
