"""Scala language module via ScalaPB, with optional sbt scaffolding."""

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

_BUILD_SBT_TEMPLATE = """\
ThisBuild / scalaVersion := "{scala_version}"
ThisBuild / version := "{project_version}"
{organization}
lazy val root = (project in file("."))
  .settings(
    name := "{project_name}",
    Compile / PB.protoSources := Seq(baseDirectory.value / "proto"),
    Compile / PB.targets := Seq(
      scalapb.gen({generator_args}) -> (Compile / sourceManaged).value / "scalapb"
    ),
    libraryDependencies ++= Seq(
{dependencies}    )
  )
"""

_PLUGINS_SBT_TEMPLATE = """\
addSbtPlugin("com.thesamet" % "sbt-protoc" % "{sbt_protoc_version}")
libraryDependencies += "com.thesamet.scalapb" %% "compilerplugin" % "{scalapb_version}"
"""


def _enabled(local: LocalConfig, key: str) -> bool:
    sub_tree = local.get(key)
    return isinstance(sub_tree, Mapping) and bool(sub_tree.get("enable"))


def build_sbt(local: LocalConfig) -> str:
    scalapb_version = local.get("scalapbVersion", "1.0.0-alpha.1")
    runtime = f'"com.thesamet.scalapb" %% "scalapb-runtime" % "{scalapb_version}"'
    dependencies = [f'{runtime} % "protobuf"']
    if _enabled(local, "grpc"):
        dependencies.append(
            f'"com.thesamet.scalapb" %% "scalapb-runtime-grpc" % "{scalapb_version}"'
        )
        dependencies.append('"io.grpc" % "grpc-netty" % scalapb.compiler.Version.grpcJavaVersion')
    if _enabled(local, "json"):
        json4s = local["json"].get("json4sVersion", "0.7.0")
        dependencies.append(f'"com.thesamet.scalapb" %% "scalapb-json4s" % "{json4s}"')
    organization = local.get("organization") or ""
    return _BUILD_SBT_TEMPLATE.format(
        scala_version=local.get("scalaVersion", "3.3.3"),
        project_version=local.get("projectVersion", "0.1.0"),
        organization=f'ThisBuild / organization := "{organization}"\n' if organization else "",
        project_name=local.get("projectName") or "generated-protos",
        generator_args="grpc = true" if _enabled(local, "grpc") else "",
        dependencies="".join(f"      {dependency},\n" for dependency in dependencies),
    )


@feature
def scala_base(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    output_path = local["outputPath"]
    generate: list[HookStep] = []
    if local.get("generateBuildFile"):
        generate.append(
            write_file_step("write-build-sbt", f"{output_path}/build.sbt", build_sbt(local))
        )
        generate.append(
            write_file_step(
                "write-plugins-sbt",
                f"{output_path}/project/plugins.sbt",
                _PLUGINS_SBT_TEMPLATE.format(
                    sbt_protoc_version=local.get("sbtProtocVersion", "1.0.7"),
                    scalapb_version=local.get("scalapbVersion", "1.0.0-alpha.1"),
                ),
            )
        )
        generate.append(
            write_file_step(
                "write-build-properties",
                f"{output_path}/project/build.properties",
                f"sbt.version={local.get('sbtVersion', '1.10.5')}\n",
            )
        )
    generate.append(echo_step("scala-summary", f"Generated Scala code in {output_path}"))
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--scala_out={output_path}",
            *joined_option_flag("scala", local.get("options") or ()),
        ),
        init_hooks=(mkdir_step(output_path),),
        generate_hooks=tuple(generate),
    )


@feature
def scala_grpc(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    params = ",".join(["grpc", *(str(option) for option in local.get("options") or ())])
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(f"--scala_out={params}:{local['outputPath']}",),
    )


@feature
def scala_json(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    version = local.get("json4sVersion", "0.7.0")
    return PluginModuleResult(
        init_hooks=(
            echo_step("scalapb-json4s-hint", f"JSON support requires scalapb-json4s {version}"),
        ),
    )


@feature
def scala_validate(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return PluginModuleResult(
        runtime_inputs=tools(local.get("package")),
        protoc_plugins=(
            f"--scalapb-validate_out={local['outputPath']}",
            *joined_option_flag("scalapb-validate", local.get("options") or ()),
        ),
    )


@register_builtin_language()
def scala_language() -> LanguageModule:
    return LanguageModule(
        name="scala",
        base=scala_base,
        features=(
            FeatureSlot("grpc", scala_grpc, "ScalaPB with gRPC stubs"),
            FeatureSlot("json", scala_json, "scalapb-json4s runtime"),
            FeatureSlot("validate", scala_validate, "scalapb-validate validators"),
        ),
        subsumes={"grpc": "scala"},
    )
