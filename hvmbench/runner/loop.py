# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The benchmark loop.

For every program in the registry, for every evaluator:
  1. Locate <programs_dir>/<program>/main<ext>
  2. Run the evaluator's pre-build commands once
  3. For every input size, run the timed command warmup_runs + runs times,
     drop the warm-up timings and average the rest
  4. Record one Measurement per input size

A build or execution failure is contained to the evaluator it happened in:
it gets logged with the program and evaluator names, the evaluator's
remaining sizes are skipped, and the loop moves on. Nothing is retried.

Each program's CSV is written as soon as its evaluators are done, so a
crash halfway through a long session leaves the earlier results on disk.

The command executor and the clock are parameters. Tests pass fakes for
both and check the arithmetic without spawning a single process.
"""

import functools
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from hvmbench.config.schema import BenchConfig, EvaluatorConfig, ProgramConfig
from hvmbench.harness.errors import BuildFailure, CommandError, ExecutionFailure
from hvmbench.harness.runner import render_command, run_command, run_commands
from hvmbench.logging.logger import get_logger
from hvmbench.reporting.writer import build_result_table, write_csv
from hvmbench.runner.models import (
    BenchPaths,
    EvaluatorOutcome,
    Measurement,
    ProgramResult,
)
from hvmbench.utils.paths import ensure_directory

logger = get_logger(__name__)

Executor = Callable[[str], None]
Clock = Callable[[], float]


def average_timings(timings: Sequence[float], warmup: int = 1) -> float:
    """
    Mean of the timings after dropping the first `warmup` entries.

    Raises:
        ValueError: If nothing is left to average.
    """
    timed = timings[warmup:]
    if not timed:
        raise ValueError(
            f"Need more than {warmup} timing(s) to average, got {len(timings)}"
        )
    return sum(timed) / len(timed)


def _default_executor(bench: BenchConfig) -> Executor:
    return functools.partial(
        run_command,
        timeout_seconds=bench.timeout_seconds,
        capture_output=bench.capture_output,
    )


def _template_values(
    program: ProgramConfig,
    evaluator: EvaluatorConfig,
    paths: BenchPaths,
) -> dict[str, object]:
    source_dir = paths.programs_dir / program.name
    return {
        "program": program.name,
        "source": str(source_dir / f"main{evaluator.extension}"),
        "source_dir": str(source_dir),
        "bin_dir": str(paths.bin_dir),
    }


def _build(
    program: ProgramConfig,
    evaluator: EvaluatorConfig,
    values: dict[str, object],
    paths: BenchPaths,
    execute: Executor,
) -> None:
    source = Path(str(values["source"]))
    if not source.is_file():
        raise BuildFailure(program.name, evaluator.name, f"source file not found: {source}")

    ensure_directory(paths.bin_dir)

    try:
        run_commands(
            (render_command(template, **values) for template in evaluator.pre_build),
            execute=execute,
        )
    except CommandError as err:
        raise BuildFailure(program.name, evaluator.name, str(err)) from err


def _measure(
    program: ProgramConfig,
    evaluator: EvaluatorConfig,
    input_size: int,
    values: dict[str, object],
    bench: BenchConfig,
    execute: Executor,
    clock: Clock,
) -> Measurement:
    timings: list[float] = []
    total = bench.warmup_runs + bench.runs

    try:
        command = render_command(evaluator.run, n=input_size, **values)
        for repetition in range(total):
            start = clock()
            execute(command)
            elapsed = clock() - start
            timings.append(elapsed)
            logger.debug(
                "Run timed",
                extra={
                    "program": program.name,
                    "evaluator": evaluator.name,
                    "input_size": input_size,
                    "repetition": repetition,
                    "warmup": repetition < bench.warmup_runs,
                    "elapsed_seconds": elapsed,
                },
            )
    except CommandError as err:
        raise ExecutionFailure(program.name, evaluator.name, input_size, str(err)) from err

    average = average_timings(timings, warmup=bench.warmup_runs)
    logger.info(
        "Measured",
        extra={
            "program": program.name,
            "evaluator": evaluator.name,
            "input_size": input_size,
            "average_time_seconds": average,
        },
    )
    return Measurement(
        evaluator=evaluator.name,
        program=program.name,
        input_size=input_size,
        average_time_seconds=average,
    )


def benchmark_evaluator(
    program: ProgramConfig,
    evaluator: EvaluatorConfig,
    bench: BenchConfig,
    paths: BenchPaths,
    execute: Optional[Executor] = None,
    clock: Clock = time.perf_counter,
) -> EvaluatorOutcome:
    """
    Build a program under one evaluator and time it at every input size.

    Never raises BuildFailure or ExecutionFailure: those end up on the
    returned outcome, next to whatever measurements finished first.
    """
    execute = execute or _default_executor(bench)
    values = _template_values(program, evaluator, paths)
    measurements: list[Measurement] = []

    try:
        _build(program, evaluator, values, paths, execute)
        for input_size in program.sizes:
            measurements.append(
                _measure(program, evaluator, input_size, values, bench, execute, clock)
            )
    except (BuildFailure, ExecutionFailure) as err:
        logger.error(
            f"Could not run {program.name}: {evaluator.name} target. Verify it exists.",
            extra={
                "program": program.name,
                "evaluator": evaluator.name,
                "failure": type(err).__name__,
                "error": str(err),
                "completed_sizes": len(measurements),
            },
        )
        return EvaluatorOutcome(
            evaluator=evaluator.name,
            program=program.name,
            measurements=tuple(measurements),
            error=err,
        )

    return EvaluatorOutcome(
        evaluator=evaluator.name,
        program=program.name,
        measurements=tuple(measurements),
    )


def benchmark_program(
    program: ProgramConfig,
    bench: BenchConfig,
    paths: BenchPaths,
    execute: Optional[Executor] = None,
    clock: Clock = time.perf_counter,
) -> list[EvaluatorOutcome]:
    """Run every evaluator in registry order against one program."""
    outcomes: list[EvaluatorOutcome] = []
    for evaluator in bench.evaluators:
        logger.info(
            "Benchmarking",
            extra={
                "program": program.name,
                "evaluator": evaluator.name,
                "input_sizes": len(program.sizes),
                "runs": bench.runs,
            },
        )
        outcomes.append(
            benchmark_evaluator(program, evaluator, bench, paths, execute=execute, clock=clock)
        )
    return outcomes


def plan_program(
    program: ProgramConfig,
    bench: BenchConfig,
    paths: BenchPaths,
) -> list[str]:
    """
    Every command a real run would issue for this program, in order,
    with each run command listed once per input size (not per repetition).
    """
    commands: list[str] = []
    for evaluator in bench.evaluators:
        values = _template_values(program, evaluator, paths)
        commands.extend(render_command(t, **values) for t in evaluator.pre_build)
        commands.extend(
            render_command(evaluator.run, n=n, **values) for n in program.sizes
        )
    return commands


def run_suite(
    bench: BenchConfig,
    base_dir: Path,
    execute: Optional[Executor] = None,
    clock: Clock = time.perf_counter,
    dry_run: bool = False,
) -> list[ProgramResult]:
    """
    Benchmark every program in the registry and write one CSV per program.

    With dry_run the commands are rendered and logged but nothing is
    executed and nothing is written.
    """
    paths = BenchPaths.from_config(bench, base_dir)
    results: list[ProgramResult] = []

    for program in bench.programs:
        if dry_run:
            for command in plan_program(program, bench, paths):
                logger.info(
                    "Dry run: would execute",
                    extra={"program": program.name, "command": command},
                )
            results.append(ProgramResult(program=program.name))
            continue

        outcomes = benchmark_program(program, bench, paths, execute=execute, clock=clock)

        logger.info("Done! Saving results...", extra={"program": program.name})
        table = build_result_table(
            program.sizes,
            bench.evaluator_names,
            [m for outcome in outcomes for m in outcome.measurements],
        )
        csv_path = write_csv(table, paths.results_dir, program.name)
        logger.info(
            "Results saved",
            extra={"program": program.name, "path": str(csv_path)},
        )
        results.append(ProgramResult(program=program.name, outcomes=outcomes, csv_path=csv_path))

    return results
