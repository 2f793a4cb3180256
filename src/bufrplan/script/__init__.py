"""
bufrplan script package public API.

File: src/bufrplan/script/__init__.py
Last updated: 2026-10-18

Purpose
- Export the script assembler and the shell logging capability.
"""

from bufrplan.script.assembler import (
    SCRIPT_HEADER,
    EmptyFileSetWarning,
    assemble_script,
    status_line,
)
from bufrplan.script.debug import ShellDebug

__all__ = [
    "SCRIPT_HEADER",
    "EmptyFileSetWarning",
    "ShellDebug",
    "assemble_script",
    "status_line",
]
