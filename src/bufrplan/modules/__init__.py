"""
bufrplan — plugin modules.

File: src/bufrplan/modules/__init__.py
Last updated: 2026-10-18

Purpose
- Plugin module contract, language registry, and the built-in languages.

Functional requirements
- Importing this package populates ``DEFAULT_LANGUAGE_REGISTRY``.
"""

from bufrplan.modules import languages
from bufrplan.modules.base import (
    EMPTY_RESULT,
    HookStep,
    LocalConfig,
    PluginModule,
    PluginModuleResult,
    ToolRef,
    combine,
    feature,
    render_hooks,
    scoped_feature,
)
from bufrplan.modules.composer import (
    DEFAULT_LANGUAGE_REGISTRY,
    FeatureSlot,
    LanguageModule,
    LanguageRegistry,
    ModuleCompositionConflict,
    compose_language,
    parse_output_flag,
    register_builtin_language,
)

__all__ = [
    "DEFAULT_LANGUAGE_REGISTRY",
    "EMPTY_RESULT",
    "FeatureSlot",
    "HookStep",
    "LanguageModule",
    "LanguageRegistry",
    "LocalConfig",
    "ModuleCompositionConflict",
    "PluginModule",
    "PluginModuleResult",
    "ToolRef",
    "combine",
    "compose_language",
    "feature",
    "languages",
    "parse_output_flag",
    "register_builtin_language",
    "render_hooks",
    "scoped_feature",
]
