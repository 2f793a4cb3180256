"""
bufrplan — plugin module contract.

File: src/bufrplan/modules/base.py
Last updated: 2026-10-18

Purpose
- Define the four-field ``PluginModuleResult`` every language feature returns.
- Provide the uniform ``combine`` aggregation and the disabled-module identity.

What should be included in this file
- ``HookStep``: a named, discrete shell step (hooks are ordered step tuples).
- ``PluginModule`` callable protocol: ``(global_config, local_config) -> result``.
- ``feature`` gate and ``scoped_feature`` sub-tree binding helpers.

Functional requirements
- ``combine`` preserves module declaration order and never sorts or dedupes flags.
- A module whose local ``enable`` is false behaves as ``EMPTY_RESULT``.

Non-functional requirements
- Results are immutable values; composition has no side effects.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

ToolRef = str
LocalConfig = Mapping[str, Any]

_HEREDOC_MARKER = "BUFRPLAN_EOF"


@dataclass(frozen=True, slots=True)
class HookStep:
    """One named shell step inside an init/generate hook."""

    name: str
    script: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("HookStep.name must not be empty")

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "script": self.script}


@dataclass(frozen=True, slots=True)
class PluginModuleResult:
    """Required tools, compiler flags, and pre/post hooks for one module."""

    runtime_inputs: tuple[ToolRef, ...] = ()
    protoc_plugins: tuple[str, ...] = ()
    init_hooks: tuple[HookStep, ...] = ()
    generate_hooks: tuple[HookStep, ...] = ()

    def __add__(self, other: PluginModuleResult) -> PluginModuleResult:
        if not isinstance(other, PluginModuleResult):
            return NotImplemented
        return PluginModuleResult(
            runtime_inputs=self.runtime_inputs + other.runtime_inputs,
            protoc_plugins=self.protoc_plugins + other.protoc_plugins,
            init_hooks=self.init_hooks + other.init_hooks,
            generate_hooks=self.generate_hooks + other.generate_hooks,
        )

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_RESULT

    @property
    def init_hooks_text(self) -> str:
        return render_hooks(self.init_hooks)

    @property
    def generate_hooks_text(self) -> str:
        return render_hooks(self.generate_hooks)

    def without_plugins(self, predicate: Callable[[str], bool]) -> PluginModuleResult:
        return PluginModuleResult(
            runtime_inputs=self.runtime_inputs,
            protoc_plugins=tuple(flag for flag in self.protoc_plugins if not predicate(flag)),
            init_hooks=self.init_hooks,
            generate_hooks=self.generate_hooks,
        )


EMPTY_RESULT = PluginModuleResult()


class PluginModule(Protocol):
    def __call__(
        self, global_config: EffectiveConfig, local_config: LocalConfig
    ) -> PluginModuleResult: ...


def combine(
    modules: Iterable[PluginModule],
    global_config: EffectiveConfig,
    local_config: LocalConfig,
) -> PluginModuleResult:
    """Run ``modules`` in order and concatenate their results fieldwise."""

    combined = EMPTY_RESULT
    for module in modules:
        combined = combined + module(global_config, local_config)
    return combined


def render_hooks(steps: Sequence[HookStep]) -> str:
    """Render hook steps into one shell fragment (script boundary only)."""

    chunks: list[str] = []
    for step in steps:
        body = step.script.strip("\n")
        if not body:
            continue
        chunks.append(f"# hook: {step.name}\n{body}\n")
    return "".join(chunks)


def is_enabled(local_config: LocalConfig) -> bool:
    return bool(local_config.get("enable", False))


def feature(module: PluginModule) -> PluginModule:
    """Gate ``module`` on its own ``enable`` flag; disabled modules return ``EMPTY_RESULT``."""

    @functools.wraps(module)
    def gated(global_config: EffectiveConfig, local_config: LocalConfig) -> PluginModuleResult:
        if not is_enabled(local_config):
            return EMPTY_RESULT
        return module(global_config, local_config)

    return gated


def scoped_feature(key: str, module: PluginModule) -> PluginModule:
    """Bind ``module`` to ``local_config[key]``, inheriting the parent ``outputPath``.

    A feature sub-tree that declares its own non-null ``outputPath`` keeps it.
    """

    def bound(global_config: EffectiveConfig, local_config: LocalConfig) -> PluginModuleResult:
        raw = local_config.get(key)
        sub_tree: dict[str, Any] = dict(raw) if isinstance(raw, Mapping) else {"enable": False}
        if sub_tree.get("outputPath") is None:
            sub_tree["outputPath"] = local_config.get("outputPath")
        return module(global_config, sub_tree)

    bound.__name__ = f"{key}_feature"
    bound.__qualname__ = bound.__name__
    return bound


def tools(*refs: object) -> tuple[ToolRef, ...]:
    """Keep only usable tool references, in order."""

    return tuple(ref for ref in refs if isinstance(ref, str) and ref.strip())


def option_flags(family: str, options: Iterable[object]) -> tuple[str, ...]:
    """One ``--<family>_opt=`` flag per option."""

    return tuple(f"--{family}_opt={option}" for option in options if str(option).strip())


def joined_option_flag(
    family: str, options: Sequence[object], *, separator: str = ","
) -> tuple[str, ...]:
    """A single ``--<family>_opt=`` flag joining every option, or nothing."""

    rendered = [str(option) for option in options if str(option).strip()]
    if not rendered:
        return ()
    return (f"--{family}_opt={separator.join(rendered)}",)


def mkdir_step(path: str, *, name: str = "create-output-directory") -> HookStep:
    return HookStep(name=name, script=f'mkdir -p "{path}"')


def echo_step(name: str, message: str) -> HookStep:
    return HookStep(name=name, script=f'echo "{message}"')


def write_file_step(name: str, path: str, content: str, *, overwrite: bool = False) -> HookStep:
    """Write ``content`` to ``path`` through a quoted heredoc.

    Existing files are left alone unless ``overwrite`` is set.
    """

    body = content if content.endswith("\n") else content + "\n"
    write = (
        f'mkdir -p "$(dirname "{path}")"\n'
        f"cat > \"{path}\" << '{_HEREDOC_MARKER}'\n{body}{_HEREDOC_MARKER}"
    )
    if overwrite:
        return HookStep(name=name, script=write)
    return HookStep(name=name, script=f'if [ ! -f "{path}" ]; then\n{write}\nfi')


__all__ = [
    "EMPTY_RESULT",
    "HookStep",
    "LocalConfig",
    "PluginModule",
    "PluginModuleResult",
    "ToolRef",
    "combine",
    "echo_step",
    "feature",
    "is_enabled",
    "joined_option_flag",
    "mkdir_step",
    "option_flags",
    "render_hooks",
    "scoped_feature",
    "tools",
    "write_file_step",
]
