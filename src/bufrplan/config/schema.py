"""
bufrplan — option schema data and package defaults.

File: src/bufrplan/config/schema.py
Last updated: 2026-10-18

Purpose
- Declare every configuration key with its type, default, and description.
- Declare the default tool reference for every language and feature ``package`` slot.

What should be included in this file
- The ``OPTION_SCHEMA`` tree consumed by the resolver.
- The ``PACKAGE_DEFAULTS`` layer merged between schema defaults and user overrides.

Functional requirements
- Language declaration order in ``OPTION_SCHEMA["languages"]`` is the plan order.

Non-functional requirements
- Data only; no merge or validation logic lives here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from bufrplan.config.options import (
    STRING_LIST,
    AttrsType,
    BoolType,
    EitherType,
    EnumType,
    IntType,
    ListType,
    NullOr,
    Option,
    OptionTree,
    PackageType,
    StrType,
    mk_option,
)

OUTPUT_PATH_TYPE: Final = EitherType(StrType(), STRING_LIST)


def _common(label: str, *, output_path: str, options: list[str] | None = None) -> dict[str, Option]:
    return {
        "enable": mk_option(BoolType(), False, f"Enable code generation for {label}."),
        "package": mk_option(PackageType(), None, f"Tool providing the core {label} plugin."),
        "files": mk_option(
            NullOr(STRING_LIST),
            None,
            f"Proto files to compile for {label}. If null, uses the global `protoc.files` list.",
        ),
        "additionalFiles": mk_option(
            STRING_LIST, [], f"Extra proto files compiled only for {label}, appended to the list."
        ),
        "outputPath": mk_option(
            OUTPUT_PATH_TYPE,
            output_path,
            f"Output directory or directories for generated {label} code.",
        ),
        "options": mk_option(
            STRING_LIST, list(options or []), f"Options passed to the {label} plugin."
        ),
    }


def _feature(
    label: str,
    *,
    options: list[str] | None = None,
    enabled: bool = False,
    **extra: Option,
) -> dict[str, Option]:
    tree: dict[str, Option] = {
        "enable": mk_option(BoolType(), enabled, f"Enable {label}."),
        "package": mk_option(PackageType(), None, f"Tool providing {label}."),
        "options": mk_option(STRING_LIST, list(options or []), f"Options for {label}."),
    }
    tree.update(extra)
    return tree


def _feature_output_path(
    label: str, *, default: str | None = None, inherits: str = "the language output path"
) -> Option:
    return mk_option(
        NullOr(StrType()),
        default,
        f"Output directory for {label}; null uses {inherits}.",
    )


OPTION_SCHEMA: Final[OptionTree] = {
    "root": mk_option(
        StrType(), "./proto", "Root directory searched for `.proto` files as a last resort."
    ),
    "debug": {
        "enable": mk_option(BoolType(), False, "Enable debug logging in the generated script."),
        "verbosity": mk_option(
            IntType(minimum=1, maximum=3), 1, "Debug verbosity (1=INFO, 2=DEBUG, 3=TRACE)."
        ),
        "logFile": mk_option(StrType(), "", "Debug log file; empty logs to stderr."),
    },
    "protoc": {
        "sourceDirectories": mk_option(
            STRING_LIST, ["./proto"], "Directories searched for `.proto` files to compile."
        ),
        "includeDirectories": mk_option(
            STRING_LIST, ["./proto"], "Directories passed to `protoc` with `-I`."
        ),
        "files": mk_option(
            STRING_LIST, [], "Explicit `.proto` files; empty means discover from directories."
        ),
    },
    "languages": {
        "go": {
            **_common("Go", output_path="gen/go", options=["paths=source_relative"]),
            "packagePrefix": mk_option(StrType(), "", "Prefix applied to the Go package path."),
            "plugins": mk_option(
                ListType(EitherType(StrType(), AttrsType())),
                [],
                "Buf Schema Registry plugin references.",
            ),
            "grpc": _feature("Go gRPC generation", options=["paths=source_relative"]),
            "gateway": _feature("grpc-gateway generation", options=["paths=source_relative"]),
            "validate": _feature("protoc-gen-validate for Go", options=["lang=go"]),
            "connect": _feature("Connect-Go generation", options=["paths=source_relative"]),
            "vtprotobuf": _feature(
                "vtprotobuf fast marshalling",
                options=["paths=source_relative", "features=marshal+unmarshal+size"],
            ),
            "json": _feature(
                "protoc-gen-go-json marshalers", options=["paths=source_relative", "orig_name=true"]
            ),
            "openapiv2": _feature("OpenAPI v2 documentation", options=["logtostderr=true"]),
            "protovalidate": _feature("protovalidate-go runtime validation"),
            "federation": _feature(
                "gRPC Federation BFF generation", options=["paths=source_relative"]
            ),
            "structTransformer": _feature(
                "protobuf to Go struct transformers",
                goRepoPackage=mk_option(StrType(), "models", "Go package of the business models."),
                goProtobufPackage=mk_option(
                    StrType(), "proto", "Go package of the generated protobuf code."
                ),
                goModelsFilePath=mk_option(
                    StrType(), "models/models.go", "File declaring the business model structs."
                ),
                outputPackage=mk_option(
                    StrType(), "transform", "Package name of the generated transformers."
                ),
            ),
        },
        "js": {
            **_common("JavaScript", output_path="gen/js"),
            "packageName": mk_option(StrType(), "", "npm package name for generated code."),
            "es": _feature(
                "protoc-gen-es generation",
                options=["target=ts"],
                enabled=True,
                outputPath=_feature_output_path("protoc-gen-es"),
                target=mk_option(EnumType(("js", "ts", "dts", "")), "ts", "ES output target."),
                importExtension=mk_option(StrType(), "", "Import extension for generated files."),
            ),
            "connect": _feature("Connect-ES generation"),
            "grpcWeb": _feature(
                "gRPC-Web generation",
                importStyle=mk_option(
                    EnumType(("closure", "commonjs", "commonjs+dts", "typescript")),
                    "commonjs",
                    "gRPC-Web import style.",
                ),
                mode=mk_option(
                    EnumType(("grpcweb", "grpcwebtext")), "grpcweb", "gRPC-Web wire mode."
                ),
            ),
            "twirp": _feature("Twirp JavaScript generation"),
            "protovalidate": _feature(
                "protovalidate-es runtime validation",
                target=mk_option(EnumType(("js", "ts")), "ts", "Validation helper target."),
            ),
            "tsProto": _feature(
                "ts-proto generation",
                outputPath=_feature_output_path("ts-proto"),
            ),
        },
        "python": {
            **_common("Python", output_path="gen/python"),
            "grpc": _feature("Python gRPC generation"),
            "pyi": _feature("Python type stub (.pyi) generation"),
            "mypy": _feature("mypy-protobuf stub generation"),
            "betterproto": _feature(
                "betterproto dataclass generation",
                pydantic=mk_option(BoolType(), False, "Generate pydantic dataclasses."),
            ),
        },
        "dart": {
            **_common("Dart", output_path="lib/proto"),
            "packageName": mk_option(StrType(), "", "Dart package name for generated code."),
            "grpc": _feature("Dart gRPC generation"),
        },
        "elixir": {
            **_common("Elixir", output_path="lib"),
            "namespace": mk_option(StrType(), "", "Namespace for generated Elixir modules."),
            "grpc": _feature("Elixir gRPC generation"),
            "validate": _feature("Elixir validation support"),
        },
        "doc": {
            **_common("documentation", output_path="gen/doc"),
            "format": mk_option(
                EnumType(("html", "markdown", "json", "docbook", "mdx")),
                "html",
                "Documentation format; ignored when `options` is set.",
            ),
            "outputFile": mk_option(
                StrType(), "index.html", "Documentation file name; ignored when `options` is set."
            ),
            "customTemplate": mk_option(
                NullOr(StrType()),
                None,
                "Go template used instead of `format`; ignored when `options` is set.",
            ),
            "mdx": {
                "enable": mk_option(BoolType(), False, "Enable MDX reference generation."),
                "outputFile": mk_option(StrType(), "api-reference.mdx", "MDX file name."),
                "title": mk_option(StrType(), "API Reference", "Frontmatter title."),
                "description": mk_option(
                    StrType(),
                    "Generated API documentation from Protocol Buffers",
                    "Frontmatter description.",
                ),
                "frontmatter": mk_option(AttrsType(), {}, "Extra frontmatter attributes."),
                "outputPath": mk_option(
                    NullOr(StrType()),
                    "./doc/src/content/docs/reference",
                    "Output directory for the MDX file; null inherits the doc output path.",
                ),
            },
        },
        "php": {
            **_common("PHP", output_path="gen/php"),
            "namespace": mk_option(StrType(), "Generated", "Root PHP namespace."),
            "metadataNamespace": mk_option(StrType(), "GPBMetadata", "PHP metadata namespace."),
            "grpc": _feature(
                "PHP gRPC generation",
                clientOnly=mk_option(BoolType(), False, "Generate client stubs only."),
            ),
            "twirp": _feature("Twirp PHP generation"),
            "frameworks": {
                "laravel": {
                    "enable": mk_option(BoolType(), False, "Enable Laravel integration code."),
                    "serviceProvider": mk_option(
                        BoolType(), True, "Generate a Laravel service provider."
                    ),
                    "artisanCommands": mk_option(
                        BoolType(), True, "Generate Artisan console commands."
                    ),
                },
                "symfony": {
                    "enable": mk_option(BoolType(), False, "Enable Symfony integration code."),
                    "bundle": mk_option(BoolType(), True, "Generate a Symfony bundle."),
                    "messengerIntegration": mk_option(
                        BoolType(), True, "Generate Symfony Messenger handlers."
                    ),
                },
            },
            "async": {
                "reactphp": {
                    "enable": mk_option(BoolType(), False, "Enable ReactPHP integration."),
                    "version": mk_option(StrType(), "^1.0", "ReactPHP version constraint."),
                },
                "swoole": {
                    "enable": mk_option(BoolType(), False, "Enable Swoole/OpenSwoole integration."),
                    "coroutines": mk_option(BoolType(), True, "Use Swoole coroutines."),
                },
                "fibers": {
                    "enable": mk_option(BoolType(), False, "Enable PHP 8.1+ Fiber support."),
                },
            },
        },
        "swift": {
            **_common("Swift", output_path="gen/swift"),
            "packageName": mk_option(StrType(), "", "Swift package name for generated code."),
        },
        "cpp": {
            **_common("C++", output_path="gen/cpp"),
            "protobufVersion": mk_option(
                EnumType(("3.21", "3.25", "3.27", "4.25", "5.29", "latest")),
                "latest",
                "protobuf runtime version the generated code targets.",
            ),
            "standard": mk_option(
                EnumType(("c++17", "c++20", "c++23")), "c++17", "C++ language standard."
            ),
            "optimizeFor": mk_option(
                EnumType(("SPEED", "CODE_SIZE", "LITE_RUNTIME")), "SPEED", "Optimization mode."
            ),
            "runtime": mk_option(EnumType(("full", "lite")), "full", "protobuf runtime flavour."),
            "cmakeIntegration": mk_option(BoolType(), True, "Write a CMakeLists.txt."),
            "pkgConfigIntegration": mk_option(BoolType(), True, "Write a pkg-config file."),
            "includePaths": mk_option(
                STRING_LIST, [], "Extra include directories for the CMake target."
            ),
            "arenaAllocation": mk_option(BoolType(), False, "Compile with arena allocation."),
            "grpc": _feature(
                "C++ gRPC generation",
                generateMockCode=mk_option(BoolType(), False, "Generate gMock service stubs."),
            ),
            "nanopb": _feature(
                "nanopb generation for C++", options=["max_size=1024", "max_count=16"]
            ),
            "protobuf-c": _feature("protobuf-c generation for C++"),
        },
        "java": {
            **_common("Java", output_path="gen/java"),
            "packageName": mk_option(StrType(), "", "Base Java package for generated classes."),
            "jdk": mk_option(PackageType(), None, "JDK running Java-based plugins."),
            "grpc": _feature("Java gRPC generation"),
            "protovalidate": _feature("protovalidate-java validation"),
        },
        "kotlin": {
            **_common("Kotlin", output_path="gen/kotlin"),
            "jdk": mk_option(PackageType(), None, "JDK running Kotlin plugins."),
            "javaOutputPath": _feature_output_path(
                "the Java sources Kotlin builds on", inherits="<outputPath>/java"
            ),
            "kotlinOutputPath": _feature_output_path(
                "generated Kotlin sources", inherits="<outputPath>/kotlin"
            ),
            "projectName": mk_option(StrType(), "GeneratedProtos", "Gradle project name."),
            "kotlinVersion": mk_option(StrType(), "2.1.20", "Kotlin version."),
            "protobufVersion": mk_option(StrType(), "4.28.2", "protobuf library version."),
            "jvmTarget": mk_option(IntType(minimum=8), 17, "JVM target version."),
            "coroutinesVersion": mk_option(StrType(), "1.8.0", "kotlinx.coroutines version."),
            "generateBuildFile": mk_option(BoolType(), True, "Write a build.gradle.kts."),
            "generatePackageInfo": mk_option(
                BoolType(), False, "Write package-info.java files for generated packages."
            ),
            "grpc": _feature(
                "Kotlin gRPC generation",
                grpcVersion=mk_option(StrType(), "1.62.2", "grpc-java version."),
                grpcKotlinVersion=mk_option(StrType(), "1.4.2", "grpc-kotlin version."),
                grpcKotlinJar=mk_option(
                    NullOr(StrType()), None, "Local protoc-gen-grpc-kotlin jar."
                ),
            ),
            "connect": _feature(
                "Connect-Kotlin generation",
                connectVersion=mk_option(StrType(), "0.7.3", "connect-kotlin version."),
                connectKotlinJar=mk_option(
                    NullOr(StrType()), None, "Local protoc-gen-connect-kotlin jar."
                ),
            ),
        },
        "csharp": {
            **_common("C#", output_path="gen/csharp"),
            "sdk": mk_option(PackageType(), None, ".NET SDK used to build generated code."),
            "namespace": mk_option(StrType(), "", "Base namespace for generated classes."),
            "targetFramework": mk_option(StrType(), "net8.0", "Target framework moniker."),
            "langVersion": mk_option(StrType(), "latest", "C# language version."),
            "nullable": mk_option(BoolType(), True, "Enable nullable reference types."),
            "fileExtension": mk_option(StrType(), ".cs", "Extension of generated source files."),
            "generateProjectFile": mk_option(BoolType(), True, "Write a .csproj file."),
            "projectName": mk_option(StrType(), "GeneratedProtos", "Project and .csproj name."),
            "packageId": mk_option(StrType(), "", "NuGet package id."),
            "packageVersion": mk_option(StrType(), "1.0.0", "NuGet package version."),
            "generatePackageOnBuild": mk_option(BoolType(), False, "Pack on every build."),
            "generateAssemblyInfo": mk_option(BoolType(), False, "Write AssemblyInfo.cs."),
            "assemblyVersion": mk_option(StrType(), "1.0.0.0", "Assembly version."),
            "protobufVersion": mk_option(StrType(), "3.31.0", "Google.Protobuf version."),
            "grpc": _feature(
                "C# gRPC generation",
                grpcVersion=mk_option(StrType(), "2.72.0", "Grpc.Net.Client version."),
                grpcCoreVersion=mk_option(StrType(), "2.72.0", "Grpc.Core.Api version."),
                generateClientFactory=mk_option(
                    BoolType(), False, "Reference Grpc.Net.ClientFactory."
                ),
                generateServerBase=mk_option(
                    BoolType(), False, "Reference Grpc.AspNetCore for service bases."
                ),
            ),
        },
        "c": {
            **_common("C", output_path="gen/c"),
            "protobuf-c": _feature(
                "protobuf-c generation",
                outputPath=_feature_output_path("protobuf-c", default="gen/c/protobuf-c"),
            ),
            "nanopb": _feature(
                "nanopb generation",
                outputPath=_feature_output_path("nanopb", default="gen/c/nanopb"),
                maxSize=mk_option(IntType(minimum=1), 1024, "Default max_size for nanopb fields."),
                fixedLength=mk_option(BoolType(), False, "Use fixed-length repeated fields."),
                noUnions=mk_option(BoolType(), False, "Generate oneofs without C unions."),
                msgidType=mk_option(StrType(), "", "C type used for message ids."),
            ),
            "upb": _feature(
                "upb generation",
                outputPath=_feature_output_path("upb", default="gen/c/upb"),
            ),
        },
        "scala": {
            **_common("Scala", output_path="gen/scala"),
            "scalaVersion": mk_option(StrType(), "3.3.3", "Scala version."),
            "scalapbVersion": mk_option(StrType(), "1.0.0-alpha.1", "ScalaPB version."),
            "sbtVersion": mk_option(StrType(), "1.10.5", "sbt version."),
            "sbtProtocVersion": mk_option(StrType(), "1.0.7", "sbt-protoc version."),
            "projectName": mk_option(StrType(), "generated-protos", "sbt project name."),
            "projectVersion": mk_option(StrType(), "0.1.0", "sbt project version."),
            "organization": mk_option(StrType(), "", "sbt organization."),
            "generateBuildFile": mk_option(BoolType(), False, "Write build.sbt files."),
            "grpc": _feature("ScalaPB gRPC generation"),
            "json": _feature(
                "scalapb-json4s support",
                json4sVersion=mk_option(StrType(), "0.7.0", "scalapb-json4s version."),
            ),
            "validate": _feature("scalapb-validate generation"),
        },
        "svg": {
            **_common("SVG diagrams", output_path="gen/svg"),
        },
    },
}


PACKAGE_DEFAULTS: Final[dict[str, Any]] = {
    "languages": {
        "go": {
            "package": "protoc-gen-go",
            "grpc": {"package": "protoc-gen-go-grpc"},
            "gateway": {"package": "protoc-gen-grpc-gateway"},
            "validate": {"package": "protoc-gen-validate"},
            "connect": {"package": "protoc-gen-connect-go"},
            "vtprotobuf": {"package": "protoc-gen-go-vtproto"},
            "json": {"package": "protoc-gen-go-json"},
            "openapiv2": {"package": "protoc-gen-openapiv2"},
            "protovalidate": {"package": "protovalidate-go"},
            "federation": {"package": "protoc-gen-grpc-federation"},
            "structTransformer": {"package": "protoc-gen-struct-transformer"},
        },
        "js": {
            "package": "protoc-gen-js",
            "es": {"package": "protoc-gen-es"},
            "connect": {"package": "protoc-gen-connect-es"},
            "grpcWeb": {"package": "protoc-gen-grpc-web"},
            "twirp": {"package": "protoc-gen-twirp_js"},
            "tsProto": {"package": "protoc-gen-ts_proto"},
        },
        "python": {
            "package": "protobuf",
            "grpc": {"package": "grpcio-tools"},
            "pyi": {"package": "protobuf"},
            "mypy": {"package": "mypy-protobuf"},
            "betterproto": {"package": "betterproto"},
        },
        "dart": {
            "package": "protoc-gen-dart",
            "grpc": {"package": "protoc-gen-dart"},
        },
        "elixir": {
            "package": "protoc-gen-elixir",
            "grpc": {"package": "protoc-gen-elixir"},
        },
        "doc": {"package": "protoc-gen-doc"},
        "php": {
            "package": "protobuf",
            "grpc": {"package": "grpc-php-plugin"},
            "twirp": {"package": "protoc-gen-twirp_php"},
        },
        "swift": {"package": "protoc-gen-swift"},
        "cpp": {
            "package": "protobuf",
            "grpc": {"package": "grpc"},
            "nanopb": {"package": "nanopb"},
            "protobuf-c": {"package": "protobuf-c"},
        },
        "java": {
            "package": "protobuf",
            "jdk": "jdk17",
            "grpc": {"package": "protoc-gen-grpc-java"},
            "protovalidate": {"package": "protoc-gen-validate-java"},
        },
        "kotlin": {
            "package": "protobuf",
            "jdk": "jdk17",
            "grpc": {"package": "protoc-gen-grpc-kotlin"},
            "connect": {"package": "protoc-gen-connect-kotlin"},
        },
        "csharp": {
            "package": "protobuf",
            "sdk": "dotnet-sdk_8",
            "grpc": {"package": "grpc-csharp-plugin"},
        },
        "c": {
            "protobuf-c": {"package": "protobuf-c"},
            "nanopb": {"package": "nanopb"},
            "upb": {"package": "protoc-gen-upb"},
        },
        "scala": {
            "package": "scalapb",
            "grpc": {"package": "scalapb"},
            "validate": {"package": "scalapb-validate"},
        },
        "svg": {"package": "protoc-gen-d2"},
    },
}


def language_names(schema: OptionTree = OPTION_SCHEMA) -> tuple[str, ...]:
    """Return languages in schema declaration order."""

    languages = schema.get("languages")
    if not isinstance(languages, Mapping):
        return ()
    return tuple(languages)


__all__ = [
    "OPTION_SCHEMA",
    "OUTPUT_PATH_TYPE",
    "PACKAGE_DEFAULTS",
    "language_names",
]
