"""
bufrplan — layered protobuf generation config to executable plan.

File: src/bufrplan/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Defines public package-level metadata and import boundaries.

What should be included in this file
- Version export and minimal public API surface (keep small).

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Key interfaces / contracts
- ``resolve`` -> ``compile_plan`` -> ``assemble_script`` is the whole pipeline.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
