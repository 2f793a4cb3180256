"""C language module: protobuf-c, nanopb, and upb generators.

Each generator writes into its own directory; the language ``outputPath``
only hosts the shared root.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    LocalConfig,
    PluginModuleResult,
    echo_step,
    feature,
    joined_option_flag,
    mkdir_step,
    option_flags,
    tools,
)
from bufrplan.modules.composer import FeatureSlot, LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

C_GENERATORS = ("protobuf-c", "nanopb", "upb")


def _any_generator(local: LocalConfig) -> bool:
    for key in C_GENERATORS:
        sub_tree = local.get(key)
        if isinstance(sub_tree, Mapping) and sub_tree.get("enable"):
            return True
    return False


def nanopb_options(local: LocalConfig) -> list[str]:
    """Generator settings as nanopb ``-s`` field options, then user options."""

    options = [f"-smax_size:{int(local.get('maxSize', 1024))}"]
    if local.get("fixedLength"):
        options.append("-sfixed_length:true")
    if local.get("noUnions"):
        options.append("-sno_unions:true")
    msgid_type = str(local.get("msgidType") or "").strip()
    if msgid_type:
        options.append(f"-smsgid_type:{msgid_type}")
    options.extend(str(option) for option in local.get("options") or ())
    return options


@feature
def c_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    if not _any_generator(local):
        init = (
            mkdir_step(output_path),
            echo_step(
                "c-no-generator",
                "Warning: C is enabled but none of protobuf-c, nanopb, upb is enabled",
            ),
        )
    else:
        init = (mkdir_step(output_path),)
    return PluginModuleResult(init_hooks=init)


@feature
def c_protobuf_c(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--c_out={path}", *joined_option_flag("c", local.get("options") or ())),
        init_hooks=(mkdir_step(path, name="create-protobuf-c-directory"),),
        generate_hooks=(echo_step("protobuf-c-summary", f"Generated protobuf-c code in {path}"),),
    )


@feature
def c_nanopb(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--nanopb_out={path}", *option_flags("nanopb", nanopb_options(local))),
        init_hooks=(mkdir_step(path, name="create-nanopb-directory"),),
        generate_hooks=(echo_step("nanopb-summary", f"Generated nanopb code in {path}"),),
    )


@feature
def c_upb(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--upb_out={path}",
            *joined_option_flag("upb", local.get("options") or ()),
        ),
        init_hooks=(mkdir_step(path, name="create-upb-directory"),),
        generate_hooks=(echo_step("upb-summary", f"Generated upb code in {path}"),),
    )


@register_builtin_language()
def c_language() -> LanguageModule:
    return LanguageModule(
        name="c",
        base=c_base,
        features=(
            FeatureSlot("protobuf-c", c_protobuf_c, "protobuf-c sources"),
            FeatureSlot("nanopb", c_nanopb, "nanopb embedded sources"),
            FeatureSlot("upb", c_upb, "upb sources"),
        ),
    )
