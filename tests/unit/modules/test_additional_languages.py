"""
bufrplan — unit tests for the C-family, JVM, .NET, and diagram language modules

File: tests/unit/modules/test_additional_languages.py
Last updated: 2026-10-18

Purpose
- Pin flags, tools, and scaffolding hooks for cpp, java, kotlin, csharp, c, scala, and svg.

What this test file should cover
- Per-language defaults and feature flags in declaration order.
- Build-file scaffolding content for the languages that write one.
- Sub-generator output directories for C and derived source roots for Kotlin.
"""

from __future__ import annotations

from typing import Any

from bufrplan.config.resolver import resolve
from bufrplan.modules import DEFAULT_LANGUAGE_REGISTRY, PluginModuleResult, compose_language
from bufrplan.modules.languages.c import nanopb_options
from bufrplan.modules.languages.kotlin import kotlin_paths
from bufrplan.planning.compiler import compile_plan


def _compose(language: str, **overrides: Any) -> PluginModuleResult:
    effective = resolve(
        user_overrides={"languages": {language: {"enable": True, **overrides}}}
    )
    module = DEFAULT_LANGUAGE_REGISTRY.get(language)
    return compose_language(module, effective, effective.language(language))


def _hook_names(result: PluginModuleResult) -> list[str]:
    return [step.name for step in (*result.init_hooks, *result.generate_hooks)]


def _script(result: PluginModuleResult, name: str) -> str:
    for step in (*result.init_hooks, *result.generate_hooks):
        if step.name == name:
            return step.script
    raise AssertionError(f"no hook named {name!r}")


def test_cpp_defaults_write_build_integration() -> None:
    result = _compose("cpp")

    assert result.protoc_plugins == ("--cpp_out=gen/cpp",)
    assert result.runtime_inputs == ("protobuf",)
    assert _hook_names(result) == [
        "create-output-directory",
        "cpp-settings",
        "write-cmake",
        "write-pkg-config",
        "cpp-summary",
    ]
    cmake = _script(result, "write-cmake")
    assert 'cat > "gen/cpp/CMakeLists.txt"' in cmake
    assert "set(CMAKE_CXX_STANDARD 17)" in cmake
    assert "protobuf::libprotobuf)" in cmake
    assert "gRPC" not in cmake


def test_cpp_lite_runtime_with_grpc_mocks_and_nanopb() -> None:
    result = _compose(
        "cpp",
        runtime="lite",
        standard="c++20",
        cmakeIntegration=True,
        pkgConfigIntegration=False,
        grpc={"enable": True, "generateMockCode": True},
        nanopb={"enable": True},
    )

    assert result.protoc_plugins == (
        "--cpp_out=lite:gen/cpp",
        "--plugin=protoc-gen-grpc=$(command -v grpc_cpp_plugin)",
        "--grpc_out=gen/cpp",
        "--grpc_opt=generate_mock_code=true",
        "--nanopb_out=gen/cpp",
        "--nanopb_opt=max_size=1024,max_count=16",
    )
    assert result.runtime_inputs == ("protobuf", "grpc", "nanopb")
    assert "write-pkg-config" not in _hook_names(result)
    cmake = _script(result, "write-cmake")
    assert "set(CMAKE_CXX_STANDARD 20)" in cmake
    assert "protobuf::libprotobuf-lite gRPC::grpc++" in cmake


def test_java_features() -> None:
    result = _compose(
        "java",
        packageName="com.acme.api",
        grpc={"enable": True},
        protovalidate={"enable": True},
    )

    assert result.protoc_plugins == (
        "--java_out=gen/java",
        "--plugin=protoc-gen-grpc-java=$(command -v protoc-gen-grpc-java)",
        "--grpc-java_out=gen/java",
        "--validate_out=lang=java:gen/java",
    )
    assert result.runtime_inputs == (
        "protobuf",
        "jdk17",
        "protoc-gen-grpc-java",
        "protoc-gen-validate-java",
    )
    assert "package-name" in _hook_names(result)


def test_kotlin_defaults_split_java_and_kotlin_roots() -> None:
    result = _compose("kotlin")

    assert result.protoc_plugins == (
        "--java_out=gen/kotlin/java",
        "--kotlin_out=gen/kotlin/kotlin",
    )
    assert result.runtime_inputs == ("protobuf", "jdk17")
    assert _hook_names(result) == [
        "create-output-directory",
        "create-java-directory",
        "create-kotlin-directory",
        "write-gradle-build",
        "write-gradle-settings",
        "kotlin-summary",
    ]
    build = _script(result, "write-gradle-build")
    assert 'java.srcDir("java")' in build
    assert "jvmToolchain(17)" in build
    assert "grpc-kotlin-stub" not in build


def test_kotlin_paths_honour_explicit_roots() -> None:
    paths = kotlin_paths(
        {"outputPath": "gen/kotlin", "javaOutputPath": "src/main/java", "kotlinOutputPath": None}
    )

    assert paths.java == "src/main/java"
    assert paths.kotlin == "gen/kotlin/kotlin"


def test_kotlin_grpc_from_local_jar() -> None:
    result = _compose(
        "kotlin",
        generateBuildFile=True,
        grpc={"enable": True, "grpcKotlinJar": "/opt/grpckt.jar"},
    )

    assert result.protoc_plugins == (
        "--java_out=gen/kotlin/java",
        "--kotlin_out=gen/kotlin/kotlin",
        "--plugin=protoc-gen-grpc-java=$(command -v protoc-gen-grpc-java)",
        "--grpc-java_out=gen/kotlin/java",
        "--plugin=protoc-gen-grpckt=.bufrplan/bin/protoc-gen-grpckt",
        "--grpckt_out=gen/kotlin/kotlin",
    )
    wrapper = _script(result, "grpckt-jar-wrapper")
    assert 'exec java -jar "/opt/grpckt.jar" "$@"' in wrapper
    assert 'chmod +x ".bufrplan/bin/protoc-gen-grpckt"' in wrapper
    assert "io.grpc:grpc-kotlin-stub:1.4.2" in _script(result, "write-gradle-build")


def test_kotlin_roots_follow_each_output_path() -> None:
    effective = resolve(
        user_overrides={
            "languages": {
                "kotlin": {
                    "enable": True,
                    "outputPath": ["gen/a", "gen/b"],
                    "connect": {"enable": True},
                }
            }
        }
    )
    plan = compile_plan(effective, discover=lambda directory: (f"{directory}/a.proto",))

    first, second = plan.units_for("kotlin")
    assert "--connect-kotlin_out=gen/a/kotlin" in first.protoc_plugins
    assert "--connect-kotlin_out=gen/b/kotlin" in second.protoc_plugins
    assert "--java_out=gen/b/java" in second.protoc_plugins


def test_csharp_options_and_grpc_project_file() -> None:
    result = _compose(
        "csharp",
        namespace="Acme.Api",
        fileExtension=".g.cs",
        grpc={"enable": True, "generateServerBase": True},
    )

    assert result.protoc_plugins == (
        "--csharp_out=gen/csharp",
        "--csharp_opt=base_namespace=Acme.Api,file_extension=.g.cs",
        "--plugin=protoc-gen-grpc=$(command -v grpc_csharp_plugin)",
        "--grpc_out=gen/csharp",
    )
    assert result.runtime_inputs == ("protobuf", "dotnet-sdk_8", "grpc-csharp-plugin")
    csproj = _script(result, "write-csproj")
    assert 'cat > "gen/csharp/GeneratedProtos.csproj"' in csproj
    assert "<RootNamespace>Acme.Api</RootNamespace>" in csproj
    assert '<PackageReference Include="Google.Protobuf" Version="3.31.0" />' in csproj
    assert '<PackageReference Include="Grpc.AspNetCore" Version="2.72.0" />' in csproj
    assert "Grpc.Net.ClientFactory" not in csproj


def test_csharp_assembly_info_and_package_metadata() -> None:
    result = _compose(
        "csharp",
        projectName="Orders",
        packageId="Acme.Orders",
        generateAssemblyInfo=True,
        assemblyVersion="2.1.0.0",
    )

    assert result.protoc_plugins == ("--csharp_out=gen/csharp",)
    csproj = _script(result, "write-csproj")
    assert "<PackageId>Acme.Orders</PackageId>" in csproj
    assert "<GenerateAssemblyInfo>false</GenerateAssemblyInfo>" in csproj
    assert "<RootNamespace>Orders</RootNamespace>" in csproj
    info = _script(result, "write-assembly-info")
    assert "gen/csharp/Properties/AssemblyInfo.cs" in info
    assert '[assembly: AssemblyVersion("2.1.0.0")]' in info


def test_c_without_generators_warns() -> None:
    result = _compose("c")

    assert result.protoc_plugins == ()
    assert _hook_names(result) == ["create-output-directory", "c-no-generator"]


def test_c_generators_use_their_own_directories() -> None:
    result = _compose(
        "c",
        nanopb={"enable": True, "maxSize": 256, "noUnions": True},
        upb={"enable": True},
    )

    assert result.protoc_plugins == (
        "--nanopb_out=gen/c/nanopb",
        "--nanopb_opt=-smax_size:256",
        "--nanopb_opt=-sno_unions:true",
        "--upb_out=gen/c/upb",
    )
    assert result.runtime_inputs == ("nanopb", "protoc-gen-upb")
    assert _hook_names(result) == [
        "create-output-directory",
        "create-nanopb-directory",
        "create-upb-directory",
        "nanopb-summary",
        "upb-summary",
    ]


def test_c_generator_without_own_path_inherits_language_path() -> None:
    result = _compose("c", **{"protobuf-c": {"enable": True, "outputPath": None}})

    assert result.protoc_plugins == ("--c_out=gen/c",)


def test_nanopb_options_order() -> None:
    options = nanopb_options(
        {"maxSize": 64, "fixedLength": True, "msgidType": "uint16_t", "options": ["-v"]}
    )

    assert options == ["-smax_size:64", "-sfixed_length:true", "-smsgid_type:uint16_t", "-v"]


def test_scala_grpc_subsumes_base_output() -> None:
    result = _compose("scala", grpc={"enable": True}, validate={"enable": True})

    assert result.protoc_plugins == (
        "--scala_out=grpc:gen/scala",
        "--scalapb-validate_out=gen/scala",
    )
    assert "scalapb-validate" in result.runtime_inputs


def test_scala_build_files() -> None:
    result = _compose(
        "scala",
        generateBuildFile=True,
        organization="com.acme",
        json={"enable": True},
    )

    assert result.protoc_plugins == ("--scala_out=gen/scala",)
    names = _hook_names(result)
    assert names[:2] == ["create-output-directory", "scalapb-json4s-hint"]
    assert names[2:] == [
        "write-build-sbt",
        "write-plugins-sbt",
        "write-build-properties",
        "scala-summary",
    ]
    build = _script(result, "write-build-sbt")
    assert 'ThisBuild / organization := "com.acme"' in build
    assert '"com.thesamet.scalapb" %% "scalapb-json4s" % "0.7.0"' in build
    assert "scalapb-runtime-grpc" not in build
    assert 'sbt.version=1.10.5' in _script(result, "write-build-properties")


def test_svg_renders_diagrams_when_d2_is_present() -> None:
    result = _compose("svg")

    assert result.protoc_plugins == ("--d2_out=gen/svg",)
    assert result.runtime_inputs == ("protoc-gen-d2",)
    assert _hook_names(result) == ["create-output-directory", "render-svg", "svg-summary"]
    render = _script(result, "render-svg")
    assert "if command -v d2 >/dev/null 2>&1; then" in render
    assert 'd2 "$d2_file" "${d2_file%.d2}.svg"' in render
