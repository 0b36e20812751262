# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the hvmbench CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path

from hvmbench.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from hvmbench.config.defaults import default_config
from hvmbench.config.exceptions import ConfigError
from hvmbench.config.loader import load_config
from hvmbench.config.schema import HvmbenchConfig
from hvmbench.logging.logger import get_logger
from hvmbench.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, HvmbenchConfig | None, logging.Logger]:
    """
    The shared setup every command needs: load config, run bootstrap.

    Without --config the built-in registry is used. Returns
    (exit_code, config, logger); if exit_code is not SUCCESS the caller
    should return it immediately.
    """
    logger = get_logger(f"hvmbench.cli.{command_name}", log_level=args.log_level or "INFO")

    try:
        if args.config is not None:
            config = load_config(Path(args.config))
        else:
            config = default_config()
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    bootstrap(config.global_config, log_level=args.log_level)
    logger.debug(
        "Configuration loaded",
        extra={"command": command_name, "config": args.config or "built-in"},
    )
    return SUCCESS, config, logger


def handle_run(args: argparse.Namespace) -> int:
    """
    Run the benchmark suite and write one CSV per program.

    Evaluators that fail to build or run are logged and left as gaps in
    the CSV; the command still succeeds. Only a failure of the harness
    itself returns RUNTIME_ERROR, and CSVs already written stay on disk.
    """
    exit_code, config, logger = _load_and_bootstrap(args, "run")
    if exit_code != SUCCESS:
        return exit_code

    if config is None or config.bench is None:
        logger.error(
            "Bench config section is required",
            extra={"command": "run"},
        )
        return CONFIG_ERROR

    try:
        bench = config.bench.subset(programs=args.programs, evaluators=args.evaluators)
    except ValueError as err:
        logger.error("Invalid selection", extra={"command": "run", "error": str(err)})
        return VALIDATION_ERROR

    if args.runs is not None:
        bench = bench.model_copy(update={"runs": args.runs})

    from hvmbench.runner.loop import run_suite
    from hvmbench.utils.paths import resolve_base_directory

    base_dir = resolve_base_directory(args.config)
    logger.info(
        "Starting benchmark session",
        extra={
            "command": "run",
            "dry_run": args.dry_run,
            "programs": [p.name for p in bench.programs],
            "evaluators": bench.evaluator_names,
            "runs": bench.runs,
            "warmup_runs": bench.warmup_runs,
            "base_dir": str(base_dir),
        },
    )

    try:
        results = run_suite(bench, base_dir, dry_run=args.dry_run)
    except Exception as err:
        logger.error(
            "Benchmark session failed",
            extra={"command": "run", "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR

    failures = {r.program: r.failed_evaluators for r in results if r.failed_evaluators}
    logger.info(
        "Benchmark session complete",
        extra={
            "command": "run",
            "written": [str(r.csv_path) for r in results if r.csv_path is not None],
            "failed_evaluators": failures,
        },
    )
    return SUCCESS


def handle_list(args: argparse.Namespace) -> int:
    """Log the configured programs and evaluators in registry order."""
    exit_code, config, logger = _load_and_bootstrap(args, "list")
    if exit_code != SUCCESS:
        return exit_code

    if config is None or config.bench is None:
        logger.error("No bench section in config", extra={"command": "list"})
        return CONFIG_ERROR

    for program in config.bench.programs:
        sizes = program.sizes
        logger.info(
            "Program",
            extra={
                "program": program.name,
                "input_sizes": len(sizes),
                "first": sizes[0],
                "last": sizes[-1],
            },
        )
    for evaluator in config.bench.evaluators:
        logger.info(
            "Evaluator",
            extra={
                "evaluator": evaluator.name,
                "extension": evaluator.extension,
                "pre_build": evaluator.pre_build,
                "run": evaluator.run,
            },
        )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("hvmbench.cli.info", log_level=args.log_level or "INFO")

    from hvmbench import __version__
    from hvmbench.runtime.bootstrap import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "hvmbench_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "cpu_count": system_info.cpu_count,
            "config": args.config,
        },
    )
    return SUCCESS
