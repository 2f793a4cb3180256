"""
bufrplan — shell logging capability for generated scripts.

File: src/bufrplan/script/debug.py
Last updated: 2026-10-18

Purpose
- Render leveled log lines, command traces, and command timing as shell fragments.

Functional requirements
- Every helper is a no-op (empty string, or the command unchanged) when debug is
  disabled or the verbosity is below the helper's threshold.
- ``time_command`` preserves the wrapped command's exit status.
- ``config_block`` honours ``BUFRNIX_DEBUG`` / ``BUFRNIX_DEBUG_LEVEL`` /
  ``BUFRNIX_DEBUG_LOG`` at script run time.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bufrplan.constants import (
    ENV_DEBUG,
    ENV_DEBUG_LEVEL,
    ENV_DEBUG_LOG,
    LEVEL_DEBUG,
    LEVEL_NAMES,
    LEVEL_TRACE,
    LOG_PREFIX,
)

_TIMESTAMP = "$(date '+%Y-%m-%d %H:%M:%S')"


def _echo_payload(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("`", "\\`")


@dataclass(frozen=True, slots=True)
class ShellDebug:
    """Debug settings frozen at plan time."""

    enable: bool = False
    verbosity: int = 1
    log_file: str = ""

    @classmethod
    def from_config(cls, debug: Mapping[str, Any]) -> ShellDebug:
        return cls(
            enable=bool(debug.get("enable", False)),
            verbosity=int(debug.get("verbosity", 1)),
            log_file=str(debug.get("logFile", "")),
        )

    def enabled_for(self, level: int) -> bool:
        return self.enable and self.verbosity >= level

    def _sink(self) -> str:
        if self.log_file:
            return f">> {shlex.quote(self.log_file)}"
        return ">&2"

    def log(self, level: int, message: str) -> str:
        if not self.enabled_for(level):
            return ""
        label = LEVEL_NAMES.get(level, "")
        prefix = f"{label}: " if label else ""
        return f'echo "{_TIMESTAMP} {LOG_PREFIX} {prefix}{_echo_payload(message)}" {self._sink()}\n'

    def trace_command(self, command: str) -> str:
        if not self.enabled_for(LEVEL_DEBUG):
            return ""
        return (
            f'echo "{_TIMESTAMP} {LOG_PREFIX} DEBUG: Executing command:" >&2\n'
            f'echo "  {_echo_payload(command)}" >&2\n'
        )

    def time_command(self, command: str) -> str:
        if not self.enabled_for(LEVEL_TRACE):
            return command
        shown = _echo_payload(command)
        return (
            f'echo "{_TIMESTAMP} {LOG_PREFIX} TRACE: Starting command execution" >&2\n'
            f'echo "  {shown}" >&2\n'
            "start_time=$(date +%s.%N)\n"
            f"{{ {command}; cmd_status=$?; }}\n"
            "end_time=$(date +%s.%N)\n"
            "duration=$(awk -v end=\"$end_time\" -v start=\"$start_time\" "
            "'BEGIN{print end - start}')\n"
            f'echo "{_TIMESTAMP} {LOG_PREFIX} TRACE: Command completed in $duration seconds '
            'with status $cmd_status" >&2\n'
            "if [ $cmd_status -ne 0 ]; then\n"
            f'  echo "{_TIMESTAMP} {LOG_PREFIX} ERROR: Command failed with status $cmd_status" '
            ">&2\n"
            "fi\n"
            "(exit $cmd_status)"
        )

    def config_block(self) -> str:
        """Shell variables mirroring these settings, with env overrides applied."""

        return (
            f"debug_enable={'true' if self.enable else 'false'}\n"
            f"debug_verbosity={self.verbosity}\n"
            f"debug_logfile={shlex.quote(self.log_file)}\n"
            f'if [ -n "${{{ENV_DEBUG}:-}}" ]; then\n'
            "  debug_enable=true\n"
            f'  if [ -n "${{{ENV_DEBUG_LEVEL}:-}}" ]; then\n'
            f'    debug_verbosity="${ENV_DEBUG_LEVEL}"\n'
            "  fi\n"
            f'  if [ -n "${{{ENV_DEBUG_LOG}:-}}" ]; then\n'
            f'    debug_logfile="${ENV_DEBUG_LOG}"\n'
            "  fi\n"
            "fi\n"
            'if [ -n "$debug_logfile" ] && [ "$debug_enable" = "true" ]; then\n'
            '  mkdir -p "$(dirname "$debug_logfile")" 2>/dev/null || true\n'
            '  touch "$debug_logfile" 2>/dev/null || '
            'echo "Warning: Could not create log file $debug_logfile" >&2\n'
            "fi\n"
        )


__all__ = ["ShellDebug"]
