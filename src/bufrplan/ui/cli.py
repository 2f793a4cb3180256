"""Command-line interface router for bufrplan."""

from __future__ import annotations

import argparse
import sys
import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from bufrplan.config import EffectiveConfig, load_config
from bufrplan.constants import DEFAULT_CONFIG_FILE
from bufrplan.modules import DEFAULT_LANGUAGE_REGISTRY
from bufrplan.observability import setup_logging
from bufrplan.planning import GenerationPlan, compile_plan
from bufrplan.script import EmptyFileSetWarning, assemble_script
from bufrplan.ui.render import CLIRenderer, create_renderer


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="bufrplan",
        description=(
            "bufrplan: compile a layered protobuf generation config into a plan.\n\n"
            "Common workflows:\n"
            "  bufrplan plan               Show generation units per language/path\n"
            "  bufrplan script -o gen.sh   Write the generation shell script\n"
            "  bufrplan config --json      Dump the effective configuration\n"
            "  bufrplan languages          List built-in languages and features\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help=f"Path to a TOML/YAML/JSON config (default: ./{DEFAULT_CONFIG_FILE} if present).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--log-json",
        action="store_true",
        default=False,
        help="Emit process logs as JSON lines.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan",
        parents=[common],
        help="Compile and print the generation plan",
    )
    output_format = plan_parser.add_mutually_exclusive_group()
    output_format.add_argument("--json", action="store_true", help="Emit JSON output")
    output_format.add_argument("--yaml", action="store_true", help="Emit YAML output")
    plan_parser.set_defaults(handler=_cmd_plan)

    script_parser = subparsers.add_parser(
        "script",
        parents=[common],
        help="Assemble the generation shell script",
    )
    script_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the script to this path (made executable) instead of stdout.",
    )
    script_parser.set_defaults(handler=_cmd_script)

    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print the effective configuration",
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    languages_parser = subparsers.add_parser(
        "languages",
        parents=[common],
        help="List registered languages and their features",
    )
    languages_parser.set_defaults(handler=_cmd_languages)

    return parser


def run_cli(argv: Sequence[str] | None = None, *, stdout: IO[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    renderer = create_renderer(verbose=bool(namespace.verbose), stream=stdout)
    try:
        result = handler(namespace, renderer)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _load_effective_config(args: argparse.Namespace) -> EffectiveConfig:
    effective = load_config(args.config_path)
    setup_logging(effective.get("debug", {}), json_lines=bool(args.log_json))
    return effective


def _compile(effective: EffectiveConfig) -> GenerationPlan:
    return compile_plan(effective, registry=DEFAULT_LANGUAGE_REGISTRY)


def _cmd_plan(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    effective = _load_effective_config(args)
    plan = _compile(effective)
    if args.json:
        renderer.json(plan.to_dict())
    elif args.yaml:
        renderer.yaml(plan.to_dict())
    else:
        renderer.plan(plan)
    return 0


def _cmd_script(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    effective = _load_effective_config(args)
    plan = _compile(effective)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", EmptyFileSetWarning)
        script = assemble_script(plan, effective)
    for item in caught:
        print(f"warning: {item.message}", file=sys.stderr)

    if args.output is None:
        renderer.stream.write(script)
        return 0

    destination = Path(args.output)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(script, encoding="utf-8")
        destination.chmod(0o755)
    except OSError as exc:
        raise CLIError(f"unable to write script to {destination}: {exc}", exit_code=4) from exc
    renderer.kv("wrote", destination.as_posix())
    return 0


def _cmd_config(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    effective = _load_effective_config(args)
    if args.json:
        renderer.json(effective.to_dict())
    else:
        renderer.yaml(effective.to_dict())
    return 0


def _cmd_languages(args: argparse.Namespace, renderer: CLIRenderer) -> int:
    effective = _load_effective_config(args)
    renderer.languages(DEFAULT_LANGUAGE_REGISTRY, effective.enabled_languages())
    return 0


__all__ = ["CLIError", "build_parser", "run_cli"]
