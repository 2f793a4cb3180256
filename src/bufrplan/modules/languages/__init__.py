"""
bufrplan — built-in language modules.

File: src/bufrplan/modules/languages/__init__.py
Last updated: 2026-10-18

Purpose
- Importing this package registers every built-in language in
  ``DEFAULT_LANGUAGE_REGISTRY``.

Functional requirements
- Plan order comes from the option schema, not from registration order.
"""

from bufrplan.modules.languages import (
    c,
    cpp,
    csharp,
    dart,
    doc,
    elixir,
    go,
    java,
    js,
    kotlin,
    php,
    python,
    scala,
    svg,
    swift,
)

__all__ = [
    "c",
    "cpp",
    "csharp",
    "dart",
    "doc",
    "elixir",
    "go",
    "java",
    "js",
    "kotlin",
    "php",
    "python",
    "scala",
    "svg",
    "swift",
]
