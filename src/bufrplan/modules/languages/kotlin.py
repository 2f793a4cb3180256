"""Kotlin language module.

Kotlin protobuf code builds on generated Java classes, so every unit emits both
``--java_out`` and ``--kotlin_out``. Unless configured, the two source trees
live in ``<outputPath>/java`` and ``<outputPath>/kotlin``.
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from typing import TYPE_CHECKING, NamedTuple

from bufrplan.modules.base import (
    HookStep,
    LocalConfig,
    PluginModuleResult,
    echo_step,
    feature,
    joined_option_flag,
    mkdir_step,
    tools,
    write_file_step,
)
from bufrplan.modules.composer import FeatureSlot, LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

_PLUGIN_DIR = ".bufrplan/bin"

_BUILD_TEMPLATE = """\
plugins {{
    kotlin("jvm") version "{kotlin_version}"
}}

repositories {{
    mavenCentral()
}}

dependencies {{
    implementation("com.google.protobuf:protobuf-kotlin:{protobuf_version}")
    implementation("org.jetbrains.kotlinx:kotlinx-coroutines-core:{coroutines_version}")
{extra_dependencies}}}

kotlin {{
    jvmToolchain({jvm_target})
}}

sourceSets {{
    main {{
        java.srcDir("{java_dir}")
        kotlin.srcDir("{kotlin_dir}")
    }}
}}
"""

_PACKAGE_INFO_SCRIPT = """\
find "{java}" -name '*.java' -exec dirname {{}} \\; | sort -u | while IFS= read -r dir; do
  [ -f "$dir/package-info.java" ] && continue
  pkg="${{dir#"{java}"/}}"
  printf 'package %s;\\n' "${{pkg//\\//.}}" > "$dir/package-info.java"
done"""

_JAR_WRAPPER_SCRIPT = """\
mkdir -p "{directory}"
cat > "{wrapper}" << 'BUFRPLAN_EOF'
#!/usr/bin/env bash
exec java -jar "{jar}" "$@"
BUFRPLAN_EOF
chmod +x "{wrapper}"
"""


class KotlinPaths(NamedTuple):
    java: str
    kotlin: str


def kotlin_paths(local: Mapping[str, object]) -> KotlinPaths:
    """Java and Kotlin source roots for one output path."""

    output_path = str(local["outputPath"])
    java = local.get("javaOutputPath") or f"{output_path}/java"
    kotlin = local.get("kotlinOutputPath") or f"{output_path}/kotlin"
    return KotlinPaths(java=str(java), kotlin=str(kotlin))


def _language_paths(global_config: EffectiveConfig) -> KotlinPaths:
    return kotlin_paths(global_config.language("kotlin"))


def _plugin_flag(plugin: str, command: str, jar: object) -> tuple[str, tuple[HookStep, ...]]:
    """Plugin flag plus any init step needed to run ``jar`` as ``protoc-gen-<plugin>``."""

    if not jar:
        return f"--plugin=protoc-gen-{plugin}=$(command -v {command})", ()
    wrapper = f"{_PLUGIN_DIR}/protoc-gen-{plugin}"
    script = _JAR_WRAPPER_SCRIPT.format(directory=_PLUGIN_DIR, wrapper=wrapper, jar=jar)
    return f"--plugin=protoc-gen-{plugin}={wrapper}", (
        HookStep(name=f"{plugin}-jar-wrapper", script=script),
    )


def _enabled(local: Mapping[str, object], key: str) -> Mapping[str, object] | None:
    tree = local.get(key)
    if isinstance(tree, Mapping) and tree.get("enable"):
        return tree
    return None


def gradle_build(local: Mapping[str, object]) -> str:
    output_path = str(local["outputPath"])
    paths = kotlin_paths(local)
    extra: list[str] = []
    grpc = _enabled(local, "grpc")
    if grpc is not None:
        extra.append(f'    implementation("io.grpc:grpc-protobuf:{grpc.get("grpcVersion")}")')
        extra.append(
            f'    implementation("io.grpc:grpc-kotlin-stub:{grpc.get("grpcKotlinVersion")}")'
        )
    connect = _enabled(local, "connect")
    if connect is not None:
        extra.append(
            "    implementation("
            f'"com.connectrpc:connect-kotlin-google-java-ext:{connect.get("connectVersion")}")'
        )
    return _BUILD_TEMPLATE.format(
        kotlin_version=local.get("kotlinVersion", "2.1.20"),
        protobuf_version=local.get("protobufVersion", "4.28.2"),
        coroutines_version=local.get("coroutinesVersion", "1.8.0"),
        extra_dependencies="".join(f"{line}\n" for line in extra),
        jvm_target=local.get("jvmTarget", 17),
        java_dir=posixpath.relpath(paths.java, output_path),
        kotlin_dir=posixpath.relpath(paths.kotlin, output_path),
    )


@feature
def kotlin_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    paths = kotlin_paths(local)
    generate: list[HookStep] = []
    if local.get("generateBuildFile", True):
        generate.append(
            write_file_step(
                "write-gradle-build", f"{output_path}/build.gradle.kts", gradle_build(local)
            )
        )
        generate.append(
            write_file_step(
                "write-gradle-settings",
                f"{output_path}/settings.gradle.kts",
                f'rootProject.name = "{local.get("projectName", "GeneratedProtos")}"',
            )
        )
    if local.get("generatePackageInfo"):
        generate.append(
            HookStep(name="write-package-info", script=_PACKAGE_INFO_SCRIPT.format(java=paths.java))
        )
    generate.append(echo_step("kotlin-summary", f"Generated Kotlin code in {paths.kotlin}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package"), local.get("jdk")),
        protoc_plugins=(
            f"--java_out={paths.java}",
            f"--kotlin_out={paths.kotlin}",
            *joined_option_flag("kotlin", local.get("options") or ()),
        ),
        init_hooks=(
            mkdir_step(output_path),
            mkdir_step(paths.java, name="create-java-directory"),
            mkdir_step(paths.kotlin, name="create-kotlin-directory"),
        ),
        generate_hooks=tuple(generate),
    )


@feature
def kotlin_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    paths = _language_paths(global_config)
    grpckt_flag, wrapper_steps = _plugin_flag(
        "grpckt", "protoc-gen-grpc-kotlin", local.get("grpcKotlinJar")
    )
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc-java=$(command -v protoc-gen-grpc-java)",
            f"--grpc-java_out={paths.java}",
            grpckt_flag,
            f"--grpckt_out={paths.kotlin}",
            *joined_option_flag("grpckt", local.get("options") or ()),
        ),
        init_hooks=wrapper_steps,
    )


@feature
def kotlin_connect(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    paths = _language_paths(global_config)
    plugin_flag, wrapper_steps = _plugin_flag(
        "connect-kotlin", "protoc-gen-connect-kotlin", local.get("connectKotlinJar")
    )
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            plugin_flag,
            f"--connect-kotlin_out={paths.kotlin}",
            *joined_option_flag("connect-kotlin", local.get("options") or ()),
        ),
        init_hooks=wrapper_steps,
    )


@register_builtin_language()
def kotlin_language() -> LanguageModule:
    return LanguageModule(
        name="kotlin",
        base=kotlin_base,
        features=(
            FeatureSlot("grpc", kotlin_grpc, "gRPC coroutine stubs"),
            FeatureSlot("connect", kotlin_connect, "Connect-Kotlin clients"),
        ),
    )
