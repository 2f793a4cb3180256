"""Executable CLI entrypoint for ``bufrplan``.

Every failure leaves the process through one of the ``ExitCode`` values:
configuration problems map to ``CONFIG_ERROR``, planning problems to
``PLAN_ERROR``, anything unrecognised to ``INTERNAL_ERROR`` with a traceback.
"""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Deterministic process exit-code contract."""

    SUCCESS = 0
    CONFIG_ERROR = 2
    PLAN_ERROR = 3
    INTERNAL_ERROR = 4


def _exit_routes() -> tuple[tuple[tuple[type[BaseException], ...], ExitCode], ...]:
    from bufrplan.config.loader import ConfigLoadError
    from bufrplan.config.options import ConfigValidationError
    from bufrplan.modules.composer import ModuleCompositionConflict
    from bufrplan.planning.compiler import PlanCompilationError

    return (
        ((ConfigLoadError, ConfigValidationError), ExitCode.CONFIG_ERROR),
        ((PlanCompilationError, ModuleCompositionConflict), ExitCode.PLAN_ERROR),
        ((FileNotFoundError, NotADirectoryError, PermissionError), ExitCode.CONFIG_ERROR),
    )


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and translate its outcome into an ``ExitCode``.

    ``SystemExit`` raised by argparse keeps its own status.
    """

    try:
        from bufrplan.ui.cli import run_cli

        status: object = run_cli(argv)
    except SystemExit as exc:
        status = exc.code
    except Exception as exc:  # noqa: BLE001 - process boundary
        code = _route_exception(exc)
        _report_failure(exc, code)
        return int(code)
    return _exit_status(status)


def _exit_status(status: object) -> int:
    if status is None:
        return ExitCode.SUCCESS.value
    if isinstance(status, int) and status in frozenset(ExitCode):
        return status
    if isinstance(status, str) and status.strip():
        print(status.strip(), file=sys.stderr)
    return ExitCode.INTERNAL_ERROR.value


def _route_exception(exc: BaseException) -> ExitCode:
    """Exit code for ``exc``, following explicit causes and unsuppressed contexts."""

    routes = _exit_routes()
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        for types, code in routes:
            if isinstance(current, types):
                return code
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__
    return ExitCode.INTERNAL_ERROR


def _report_failure(exc: BaseException, code: ExitCode) -> None:
    if code is ExitCode.INTERNAL_ERROR:
        sys.stderr.writelines(traceback.format_exception(exc))
        return
    print(str(exc).strip() or type(exc).__name__, file=sys.stderr)


__all__ = ["ExitCode", "cli_entrypoint"]
