"""C# language module: protobuf messages, gRPC services, and project scaffolding."""

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

_CSPROJ_TEMPLATE = """\
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
{properties}  </PropertyGroup>
  <ItemGroup>
{references}  </ItemGroup>
</Project>
"""

_ASSEMBLY_INFO_TEMPLATE = """\
using System.Reflection;

[assembly: AssemblyTitle("{project}")]
[assembly: AssemblyVersion("{version}")]
[assembly: AssemblyFileVersion("{version}")]
"""


def csharp_options(local: LocalConfig) -> list[str]:
    """Derived generator options first, then user options."""

    options: list[str] = []
    namespace = local.get("namespace") or ""
    if namespace:
        options.append(f"base_namespace={namespace}")
    extension = local.get("fileExtension") or ".cs"
    if extension != ".cs":
        options.append(f"file_extension={extension}")
    options.extend(str(option) for option in local.get("options") or ())
    return options


def _bool(value: object) -> str:
    return "true" if value else "false"


def csproj(local: LocalConfig) -> str:
    project = local.get("projectName") or "GeneratedProtos"
    properties = [
        ("TargetFramework", local.get("targetFramework", "net8.0")),
        ("LangVersion", local.get("langVersion", "latest")),
        ("Nullable", "enable" if local.get("nullable", True) else "disable"),
        ("RootNamespace", local.get("namespace") or project),
    ]
    if local.get("packageId"):
        properties.append(("PackageId", local["packageId"]))
        properties.append(("Version", local.get("packageVersion", "1.0.0")))
    properties.append(("GeneratePackageOnBuild", _bool(local.get("generatePackageOnBuild"))))
    if local.get("generateAssemblyInfo"):
        properties.append(("GenerateAssemblyInfo", "false"))

    references = [("Google.Protobuf", local.get("protobufVersion", "3.31.0"))]
    grpc = local.get("grpc")
    if isinstance(grpc, Mapping) and grpc.get("enable"):
        grpc_version = grpc.get("grpcVersion", "2.72.0")
        references.append(("Grpc.Net.Client", grpc_version))
        references.append(("Grpc.Core.Api", grpc.get("grpcCoreVersion", "2.72.0")))
        references.append(("Grpc.Tools", grpc_version))
        if grpc.get("generateClientFactory"):
            references.append(("Grpc.Net.ClientFactory", grpc_version))
        if grpc.get("generateServerBase"):
            references.append(("Grpc.AspNetCore", grpc_version))

    return _CSPROJ_TEMPLATE.format(
        properties="".join(f"    <{name}>{value}</{name}>\n" for name, value in properties),
        references="".join(
            f'    <PackageReference Include="{name}" Version="{version}" />\n'
            for name, version in references
        ),
    )


@feature
def csharp_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    project = local.get("projectName") or "GeneratedProtos"
    generate: list[HookStep] = []
    if local.get("generateProjectFile", True):
        generate.append(
            write_file_step("write-csproj", f"{output_path}/{project}.csproj", csproj(local))
        )
    if local.get("generateAssemblyInfo"):
        generate.append(
            write_file_step(
                "write-assembly-info",
                f"{output_path}/Properties/AssemblyInfo.cs",
                _ASSEMBLY_INFO_TEMPLATE.format(
                    project=project, version=local.get("assemblyVersion", "1.0.0.0")
                ),
            )
        )
    generate.append(echo_step("csharp-summary", f"Generated C# code in {output_path}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package"), local.get("sdk")),
        protoc_plugins=(
            f"--csharp_out={output_path}",
            *joined_option_flag("csharp", csharp_options(local)),
        ),
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=tuple(generate),
    )


@feature
def csharp_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            "--plugin=protoc-gen-grpc=$(command -v grpc_csharp_plugin)",
            f"--grpc_out={local['outputPath']}",
            *joined_option_flag("grpc", local.get("options") or ()),
        ),
    )


@register_builtin_language()
def csharp_language() -> LanguageModule:
    return LanguageModule(
        name="csharp",
        base=csharp_base,
        features=(FeatureSlot("grpc", csharp_grpc, "gRPC clients and service bases"),),
    )
