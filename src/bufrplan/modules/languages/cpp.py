"""C++ language module: protobuf messages, gRPC services, and embedded C runtimes."""

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
    tools,
    write_file_step,
)
from bufrplan.modules.composer import FeatureSlot, LanguageModule, register_builtin_language

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

_CMAKE_TEMPLATE = """\
cmake_minimum_required(VERSION 3.16)
project(generated_protos CXX)

set(CMAKE_CXX_STANDARD {standard})
set(CMAKE_CXX_STANDARD_REQUIRED ON)

find_package(Protobuf REQUIRED)
{grpc_find}
file(GLOB_RECURSE PROTO_SOURCES CONFIGURE_DEPENDS "${{CMAKE_CURRENT_SOURCE_DIR}}/*.cc")
add_library(generated_protos ${{PROTO_SOURCES}})
target_include_directories(generated_protos PUBLIC ${{CMAKE_CURRENT_SOURCE_DIR}}{includes})
target_link_libraries(generated_protos PUBLIC {libraries})
{definitions}"""

_PKG_CONFIG_TEMPLATE = """\
prefix=${{pcfiledir}}
includedir=${{prefix}}

Name: generated-protos
Description: Generated protobuf C++ sources
Version: {version}
Requires: {requires}
Cflags: -I${{includedir}}
"""


def cpp_output_flag(local: LocalConfig) -> str:
    """``--cpp_out=`` with the ``lite:`` parameter for the lite runtime."""

    prefix = "lite:" if local.get("runtime") == "lite" else ""
    return f"--cpp_out={prefix}{local['outputPath']}"


def _runtime_library(local: LocalConfig) -> str:
    if local.get("runtime") == "lite":
        return "protobuf::libprotobuf-lite"
    return "protobuf::libprotobuf"


def cmake_lists(local: LocalConfig) -> str:
    standard = str(local.get("standard") or "c++17").removeprefix("c++")
    grpc = local.get("grpc")
    grpc_enabled = isinstance(grpc, Mapping) and bool(grpc.get("enable"))
    libraries = [_runtime_library(local)]
    if grpc_enabled:
        libraries.append("gRPC::grpc++")
    include_paths = local.get("includePaths") or ()
    includes = "".join(f" {path}" for path in include_paths)
    definitions = (
        "target_compile_definitions(generated_protos PUBLIC PROTOBUF_USE_ARENAS=1)\n"
        if local.get("arenaAllocation")
        else ""
    )
    return _CMAKE_TEMPLATE.format(
        standard=standard,
        grpc_find="find_package(gRPC CONFIG REQUIRED)\n" if grpc_enabled else "",
        includes=includes,
        libraries=" ".join(libraries),
        definitions=definitions,
    )


@feature
def cpp_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    summary = (
        f"Using {local.get('standard', 'c++17')}, "
        f"optimize_for={local.get('optimizeFor', 'SPEED')}, "
        f"{local.get('runtime', 'full')} runtime, "
        f"protobuf {local.get('protobufVersion', 'latest')}"
    )
    generate: list[HookStep] = []
    if local.get("cmakeIntegration", True):
        generate.append(
            write_file_step("write-cmake", f"{output_path}/CMakeLists.txt", cmake_lists(local))
        )
    if local.get("pkgConfigIntegration", True):
        requires = "protobuf-lite" if local.get("runtime") == "lite" else "protobuf"
        generate.append(
            write_file_step(
                "write-pkg-config",
                f"{output_path}/generated-protos.pc",
                _PKG_CONFIG_TEMPLATE.format(
                    version=local.get("protobufVersion", "latest"), requires=requires
                ),
            )
        )
    generate.append(echo_step("cpp-summary", f"Generated C++ code in {output_path}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            cpp_output_flag(local),
            *joined_option_flag("cpp", local.get("options") or ()),
        ),
        init_hooks=(mkdir_step(output_path), echo_step("cpp-settings", summary)),
        generate_hooks=tuple(generate),
    )


@feature
def cpp_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    options = [str(option) for option in local.get("options") or ()]
    if local.get("generateMockCode") and "generate_mock_code=true" not in options:
        options.append("generate_mock_code=true")
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc=$(command -v grpc_cpp_plugin)",
            f"--grpc_out={local['outputPath']}",
            *joined_option_flag("grpc", options),
        ),
    )


@feature
def cpp_nanopb(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--nanopb_out={local['outputPath']}",
            *joined_option_flag("nanopb", local.get("options") or ()),
        ),
    )


@feature
def cpp_protobuf_c(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--c_out={local['outputPath']}",
            *joined_option_flag("c", local.get("options") or ()),
        ),
    )


@register_builtin_language()
def cpp_language() -> LanguageModule:
    return LanguageModule(
        name="cpp",
        base=cpp_base,
        features=(
            FeatureSlot("grpc", cpp_grpc, "gRPC services"),
            FeatureSlot("nanopb", cpp_nanopb, "nanopb embedded sources"),
            FeatureSlot("protobuf-c", cpp_protobuf_c, "protobuf-c sources"),
        ),
    )
