"""SVG schema diagrams: protoc-gen-d2 writes D2 sources, ``d2`` renders them."""

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
from bufrplan.modules.composer import LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

_RENDER_SCRIPT = """\
if command -v d2 >/dev/null 2>&1; then
  find "{path}" -name "*.d2" -type f | sort | while read -r d2_file; do
    d2 "$d2_file" "${{d2_file%.d2}}.svg"
  done
else
  echo "d2 not found; leaving D2 sources in {path}"
fi"""


@feature
def svg_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--d2_out={output_path}",
            *joined_option_flag("d2", local.get("options") or ()),
        ),
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=(
            HookStep(name="render-svg", script=_RENDER_SCRIPT.format(path=output_path)),
            echo_step("svg-summary", f"Generated SVG diagrams in {output_path}"),
        ),
    )


@register_builtin_language()
def svg_language() -> LanguageModule:
    return LanguageModule(name="svg", base=svg_base)
