"""Go language module: base generator plus gRPC, gateway, validation and friends."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    HookStep,
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


def _plugin_flags(family: str, local: Mapping[str, object]) -> tuple[str, ...]:
    output_path = local["outputPath"]
    options = local.get("options") or ()
    return (f"--{family}_out={output_path}", *option_flags(family, options))


def _bsr_plugin_refs(plugins: object) -> tuple[str, ...]:
    refs: list[str] = []
    for entry in plugins or ():
        if isinstance(entry, str):
            refs.append(entry)
        elif isinstance(entry, Mapping) and isinstance(entry.get("plugin"), str):
            refs.append(entry["plugin"])
    return tuple(refs)


@feature
def go_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    init: list[HookStep] = [mkdir_step(output_path)]
    prefix = local.get("packagePrefix") or ""
    if prefix:
        init.append(echo_step("package-prefix", f"Using Go package prefix: {prefix}"))
    plugin_refs = _bsr_plugin_refs(local.get("plugins"))
    if plugin_refs:
        init.append(
            echo_step(
                "remote-plugins",
                "Remote plugins are resolved outside protoc: " + ", ".join(plugin_refs),
            )
        )
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("go", local),
        init_hooks=tuple(init),
        generate_hooks=(echo_step("go-summary", f"Generated Go code in {output_path}"),),
    )


@feature
def go_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("go-grpc", local),
    )


@feature
def go_gateway(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("grpc-gateway", local),
        generate_hooks=(
            echo_step(
                "gateway-summary", f"Generated gRPC-Gateway handlers in {local['outputPath']}"
            ),
        ),
    )


@feature
def go_validate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("validate", local),
    )


@feature
def go_connect(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("connect-go", local),
    )


@feature
def go_vtprotobuf(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("go-vtproto", local),
    )


@feature
def go_json(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("go-json", local),
    )


@feature
def go_openapiv2(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("openapiv2", local),
        generate_hooks=(
            echo_step("openapiv2-summary", f"Generated OpenAPI v2 documents in {output_path}"),
        ),
    )


@feature
def go_protovalidate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        init_hooks=(
            echo_step(
                "protovalidate-hint",
                "protovalidate-go enforces buf.validate rules at runtime; "
                "no extra code is generated",
            ),
        ),
    )


@feature
def go_federation(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=_plugin_flags("grpc-federation", local),
        generate_hooks=(
            echo_step("federation-summary", f"Generated gRPC Federation servers in {output_path}"),
        ),
    )


def struct_transformer_options(local: Mapping[str, object]) -> tuple[str, ...]:
    """Settings first, then user options, in one comma-joined flag."""

    settings = [
        f"goRepoPackage={local.get('goRepoPackage', 'models')}",
        f"goProtobufPackage={local.get('goProtobufPackage', 'proto')}",
        f"goModelsFilePath={local.get('goModelsFilePath', 'models/models.go')}",
        f"package={local.get('outputPackage', 'transform')}",
    ]
    settings.extend(str(option) for option in local.get("options") or ())
    return joined_option_flag("struct-transformer", settings)


@feature
def go_struct_transformer(
    global_config: EffectiveConfig, local: LocalConfig
) -> PluginModuleResult:
    output_path = local["outputPath"]
    package = local.get("outputPackage") or "transform"
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--struct-transformer_out={output_path}",
            *struct_transformer_options(local),
        ),
        init_hooks=(
            mkdir_step(f"{output_path}/{package}", name="create-transformer-directory"),
        ),
    )


@register_builtin_language()
def go_language() -> LanguageModule:
    return LanguageModule(
        name="go",
        base=go_base,
        features=(
            FeatureSlot("grpc", go_grpc, "gRPC service stubs"),
            FeatureSlot("gateway", go_gateway, "gRPC-Gateway reverse proxy"),
            FeatureSlot("validate", go_validate, "protoc-gen-validate"),
            FeatureSlot("connect", go_connect, "Connect-Go handlers"),
            FeatureSlot("vtprotobuf", go_vtprotobuf, "vtprotobuf fast paths"),
            FeatureSlot("json", go_json, "JSON marshalers"),
            FeatureSlot("openapiv2", go_openapiv2, "OpenAPI v2 documents"),
            FeatureSlot("protovalidate", go_protovalidate, "protovalidate-go runtime checks"),
            FeatureSlot("federation", go_federation, "gRPC Federation BFF servers"),
            FeatureSlot("structTransformer", go_struct_transformer, "struct transformers"),
        ),
    )
