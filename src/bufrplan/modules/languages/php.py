"""PHP language module: messages, gRPC clients, Twirp services, framework and async glue."""

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
from bufrplan.modules.languages.php_integrations import php_async, php_frameworks

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig


@feature
def php_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    namespace = local.get("namespace") or ""
    metadata_namespace = local.get("metadataNamespace") or ""
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--php_out={output_path}",
            *joined_option_flag("php", local.get("options") or ()),
        ),
        init_hooks=(
            mkdir_step(output_path),
            echo_step(
                "namespaces",
                f"Using PHP namespace {namespace} (metadata: {metadata_namespace})",
            ),
        ),
        generate_hooks=(echo_step("php-summary", f"Generated PHP code in {output_path}"),),
    )


@feature
def php_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    options = [str(option) for option in local.get("options") or ()]
    if local.get("clientOnly") and "generate_server=false" not in options:
        options.append("generate_server=false")
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc=$(command -v grpc_php_plugin)",
            f"--grpc_out={output_path}",
            *joined_option_flag("grpc", options),
        ),
    )


@feature
def php_twirp(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--twirp_php_out={output_path}",
            *joined_option_flag("twirp_php", local.get("options") or ()),
        ),
    )


@register_builtin_language()
def php_language() -> LanguageModule:
    return LanguageModule(
        name="php",
        base=php_base,
        features=(
            FeatureSlot("grpc", php_grpc, "gRPC clients"),
            FeatureSlot("twirp", php_twirp, "Twirp services"),
            FeatureSlot("frameworks", php_frameworks, "Laravel and Symfony integration"),
            FeatureSlot("async", php_async, "ReactPHP, Swoole and Fiber runtimes"),
        ),
    )
