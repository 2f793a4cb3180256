"""Documentation generation via protoc-gen-doc, with an optional MDX reference page."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import yaml

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

# protoc-gen-doc has no MDX renderer; MDX is markdown behind a frontmatter block.
_RENDERERS = {"mdx": "markdown"}

_MDX_SCRIPT = """\
mdx_tmp=$(mktemp -d)
mdx_args="--doc_out=$mdx_tmp --doc_opt=markdown,reference.md"
eval "$protoc_cmd $base_protoc_args $mdx_args $lang_proto_files"
mkdir -p "{path}"
{{
  cat << 'BUFRPLAN_EOF'
---
{frontmatter}---

BUFRPLAN_EOF
  cat "$mdx_tmp/reference.md"
}} > "{path}/{output_file}"
rm -rf "$mdx_tmp"
"""


def doc_option(local: LocalConfig) -> str:
    """Explicit options win, then ``<customTemplate>,<outputFile>``, then ``<format>,<outputFile>``.

    ``mdx`` renders through the markdown template.
    """

    options = [str(option) for option in local.get("options") or () if str(option).strip()]
    if options:
        return ",".join(options)
    output_file = local.get("outputFile") or "index.html"
    template = local.get("customTemplate")
    if template:
        return f"{template},{output_file}"
    doc_format = str(local.get("format") or "html")
    return f"{_RENDERERS.get(doc_format, doc_format)},{output_file}"


def mdx_frontmatter(local: Mapping[str, Any]) -> str:
    """YAML frontmatter: ``title`` and ``description`` first, extra attributes after."""

    front: dict[str, Any] = {
        "title": local.get("title") or "API Reference",
        "description": local.get("description") or "",
    }
    extra = local.get("frontmatter") or {}
    front.update(_plain(extra))
    return yaml.safe_dump(front, sort_keys=False, default_flow_style=False)


def _plain(value: object) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@feature
def doc_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--doc_out={output_path}", f"--doc_opt={doc_option(local)}"),
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=(echo_step("doc-summary", f"Generated documentation in {output_path}"),),
    )


@feature
def doc_mdx(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    path = local["outputPath"]
    output_file = local.get("outputFile") or "api-reference.mdx"
    script = _MDX_SCRIPT.format(
        path=path, output_file=output_file, frontmatter=mdx_frontmatter(local)
    )
    return PluginModuleResult(
        generate_hooks=(
            HookStep(name="write-mdx-reference", script=script),
            echo_step("mdx-summary", f"Generated MDX reference in {path}/{output_file}"),
        )
    )


@register_builtin_language()
def doc_language() -> LanguageModule:
    return LanguageModule(
        name="doc",
        base=doc_base,
        features=(FeatureSlot("mdx", doc_mdx, "MDX reference page"),),
    )
