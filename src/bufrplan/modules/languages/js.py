"""JavaScript/TypeScript language module.

The base generator only runs when a ``protoc-gen-js`` tool is available.
``es`` and ``tsProto`` may target their own output directories.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

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

TS_PROTO_DEFAULT_OPTIONS: Final[tuple[str, ...]] = (
    "esModuleInterop=true",
    "outputServices=nice-grpc",
    "outputClientImpl=false",
    "useOptionals=messages",
    "useDate=date",
    "forceLong=string",
)


@feature
def js_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    package = local.get("package")
    plugins: tuple[str, ...] = ()
    generate: list[HookStep] = [
        echo_step("js-summary", f"Generated JavaScript code in {output_path}")
    ]
    if package:
        plugins = (f"--js_out=import_style=commonjs,binary:{output_path}",)
    else:
        generate.append(
            echo_step(
                "js-unavailable",
                "Note: protoc-gen-js is not configured; only ES-module generators ran.",
            )
        )
    return PluginModuleResult(
        runtime_inputs=tools("protobuf", "typescript", package),
        protoc_plugins=plugins,
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=tuple(generate),
    )


def es_options(local: LocalConfig) -> list[str]:
    """User options, then ``target=`` and ``import_extension=`` unless already given."""

    options = [str(option) for option in local.get("options") or ()]
    target = local.get("target") or ""
    if target and not any(option.startswith("target=") for option in options):
        options.append(f"target={target}")
    extension = local.get("importExtension") or ""
    if extension and not any(option.startswith("import_extension=") for option in options):
        options.append(f"import_extension={extension}")
    return options


@feature
def js_es(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--es_out={output_path}", *joined_option_flag("es", es_options(local))),
        init_hooks=(mkdir_step(output_path, name="create-es-output-directory"),),
    )


@feature
def js_connect(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--connect-es_out={output_path}",
            *joined_option_flag("connect-es", local.get("options") or ()),
        ),
    )


@feature
def js_grpc_web(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    params = [f"import_style={local.get('importStyle', 'commonjs')}"]
    params.append(f"mode={local.get('mode', 'grpcweb')}")
    params.extend(str(option) for option in local.get("options") or ())
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--grpc-web_out={','.join(params)}:{output_path}",),
        init_hooks=(echo_step("grpc-web-init", "Enabling gRPC-Web generation..."),),
    )


@feature
def js_twirp(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--twirp_js_out={output_path}",
            *joined_option_flag("twirp_js", local.get("options") or ()),
        ),
    )


@feature
def js_protovalidate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    # Validation rules are read at runtime by @bufbuild/protovalidate; no extra plugin.
    target = local.get("target", "ts")
    return PluginModuleResult(
        init_hooks=(
            echo_step("protovalidate-init", f"Preparing protovalidate-es support ({target})..."),
        ),
        generate_hooks=(
            echo_step(
                "protovalidate-hint",
                "Note: add @bufbuild/protovalidate to your package.json to validate messages",
            ),
        ),
    )


@feature
def js_ts_proto(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    options = list(local.get("options") or ()) or list(TS_PROTO_DEFAULT_OPTIONS)
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package"), "typescript"),
        protoc_plugins=(
            f"--ts_proto_out={output_path}",
            *joined_option_flag("ts_proto", options),
        ),
        init_hooks=(
            mkdir_step(output_path, name="create-ts-proto-output-directory"),
            echo_step("ts-proto-init", "Initializing ts-proto code generation..."),
        ),
        generate_hooks=(
            echo_step(
                "ts-proto-summary", f"Generated ts-proto TypeScript interfaces to {output_path}"
            ),
        ),
    )


@register_builtin_language()
def js_language() -> LanguageModule:
    return LanguageModule(
        name="js",
        base=js_base,
        features=(
            FeatureSlot("es", js_es, "protoc-gen-es modules"),
            FeatureSlot("connect", js_connect, "Connect-ES clients"),
            FeatureSlot("grpcWeb", js_grpc_web, "gRPC-Web clients"),
            FeatureSlot("twirp", js_twirp, "Twirp clients"),
            FeatureSlot("protovalidate", js_protovalidate, "protovalidate-es runtime"),
            FeatureSlot("tsProto", js_ts_proto, "ts-proto interfaces"),
        ),
    )
