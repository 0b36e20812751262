# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for hvmbench.

Every operation is a subcommand of `hvmbench`. The global options
(--config, --log-level) are inherited by every subcommand through
argparse's parent parser mechanism.

Usage:
    hvmbench run
    hvmbench run --config configs/bench.yaml --program QuickSort --evaluator GHC
    hvmbench run --runs 5 --dry-run
    hvmbench list --config configs/bench.yaml
    hvmbench info
"""

import argparse
import sys

from hvmbench.cli.commands import handle_info, handle_list, handle_run
from hvmbench.cli.exit_codes import USER_ERROR


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so its help doesn't collide with the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: built-in registry).",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands with their handler functions via set_defaults(func=...)."""
    run_parser = subparsers.add_parser(
        "run", parents=[parent], help="Build, run and time every program under every evaluator."
    )
    run_parser.set_defaults(func=handle_run)
    run_parser.add_argument(
        "--program",
        action="append",
        default=None,
        dest="programs",
        help="Only benchmark this program (repeatable).",
    )
    run_parser.add_argument(
        "--evaluator",
        action="append",
        default=None,
        dest="evaluators",
        help="Only benchmark under this evaluator (repeatable).",
    )
    run_parser.add_argument(
        "--runs",
        type=_positive_int,
        default=None,
        help="Timed repetitions per input size (overrides the config file).",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log the commands that would run without executing them.",
    )

    list_parser = subparsers.add_parser(
        "list", parents=[parent], help="Show the configured programs and evaluators."
    )
    list_parser.set_defaults(func=handle_list)

    info_parser = subparsers.add_parser(
        "info", parents=[parent], help="Display environment information."
    )
    info_parser.set_defaults(func=handle_info)


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="hvmbench",
        description="hvmbench — time programs across compilers and runtimes.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args(argv)

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
