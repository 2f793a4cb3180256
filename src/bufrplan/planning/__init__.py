"""
bufrplan planning package public API.

File: src/bufrplan/planning/__init__.py
Last updated: 2026-10-18

Purpose
- Export file set resolution and the generation plan compiler.
"""

from bufrplan.planning.compiler import (
    GenerationPlan,
    GenerationUnit,
    PlanCompilationError,
    compile_plan,
    normalize_output_path,
)
from bufrplan.planning.files import Discoverer, discover_proto_files, files_for

__all__ = [
    "Discoverer",
    "GenerationPlan",
    "GenerationUnit",
    "PlanCompilationError",
    "compile_plan",
    "discover_proto_files",
    "files_for",
    "normalize_output_path",
]
