# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models passed between the benchmark loop and the result writer.

All frozen: a measurement is recorded once after its repetitions finish
and never touched again.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hvmbench.config.schema import BenchConfig
from hvmbench.harness.errors import HarnessError


@dataclass(frozen=True)
class Measurement:
    """Average wall-clock time of one (program, evaluator, input size) triple."""

    evaluator: str
    program: str
    input_size: int
    average_time_seconds: float


@dataclass(frozen=True)
class EvaluatorOutcome:
    """
    Everything one evaluator produced for one program.

    On success error is None and there is a measurement per input size.
    On failure error holds the BuildFailure/ExecutionFailure and
    measurements holds whatever finished before it (nothing, for a build
    failure).
    """

    evaluator: str
    program: str
    measurements: tuple[Measurement, ...] = ()
    error: Optional[HarnessError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ResultTable:
    """
    Pivoted view of a program's measurements.

    Rows follow input_sizes; columns follow evaluator registry order.
    A None cell is a gap: that evaluator has no number for that size.
    """

    input_sizes: tuple[int, ...]
    columns: dict[str, tuple[Optional[float], ...]]

    @property
    def evaluators(self) -> list[str]:
        return list(self.columns)


@dataclass(frozen=True)
class ProgramResult:
    """What run_suite hands back per program."""

    program: str
    outcomes: list[EvaluatorOutcome] = field(default_factory=list)
    csv_path: Optional[Path] = None

    @property
    def failed_evaluators(self) -> list[str]:
        return [o.evaluator for o in self.outcomes if not o.succeeded]


@dataclass(frozen=True)
class BenchPaths:
    """Absolute locations the harness reads from and writes to."""

    programs_dir: Path
    bin_dir: Path
    results_dir: Path

    @classmethod
    def from_config(cls, bench: BenchConfig, base_dir: Path) -> "BenchPaths":
        """Resolve the configured directories; relative ones hang off base_dir."""
        base = base_dir.resolve()

        def _resolve(raw: str) -> Path:
            path = Path(raw).expanduser()
            return path if path.is_absolute() else (base / path).resolve()

        return cls(
            programs_dir=_resolve(bench.programs_directory),
            bin_dir=_resolve(bench.bin_directory),
            results_dir=_resolve(bench.results_directory),
        )
