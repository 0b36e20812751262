# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Result writer: pivot a program's measurements into a table and save it as CSV.

The output is one file per program:

    <results_dir>/<Program>.csv

    X,HVM,GHC
    0,0.0021,0.0018
    1,0.0023,
    ...

First column is the input size, then one column per evaluator in registry
order. A blank cell means that evaluator produced no number for that size
(it failed to build, or an earlier size failed and the rest were skipped).
A blank is never written as 0.

The file is replaced atomically, so rerunning a program overwrites the old
table and a crash mid-write leaves the previous file intact.
"""

import csv
import io
from pathlib import Path
from typing import Iterable, Optional, Sequence

from hvmbench.harness.errors import ReportError
from hvmbench.runner.models import Measurement, ResultTable
from hvmbench.utils.filesystem import atomic_write

SIZE_COLUMN = "X"


def build_result_table(
    input_sizes: Sequence[int],
    evaluator_names: Sequence[str],
    measurements: Iterable[Measurement],
) -> ResultTable:
    """
    Pivot flat measurements into rows keyed by input size.

    Cells are placed by (evaluator, input_size), not by arrival order, so a
    partially failed evaluator lines up correctly with the others.

    Raises:
        ReportError: If a measurement names an unknown evaluator or size, or
                     if the same (evaluator, size) pair shows up twice.
    """
    sizes = tuple(input_sizes)
    row_of = {size: index for index, size in enumerate(sizes)}
    if len(row_of) != len(sizes):
        raise ReportError(f"Input sizes contain duplicates: {list(sizes)}")

    grid: dict[str, list[Optional[float]]] = {
        name: [None] * len(sizes) for name in evaluator_names
    }
    seen: set[tuple[str, int]] = set()

    for m in measurements:
        if m.evaluator not in grid:
            raise ReportError(f"Measurement for unregistered evaluator '{m.evaluator}'")
        if m.input_size not in row_of:
            raise ReportError(
                f"Measurement for {m.evaluator} at unconfigured input size {m.input_size}"
            )
        key = (m.evaluator, m.input_size)
        if key in seen:
            raise ReportError(
                f"Duplicate measurement for {m.evaluator} at input size {m.input_size}"
            )
        seen.add(key)
        grid[m.evaluator][row_of[m.input_size]] = m.average_time_seconds

    return ResultTable(
        input_sizes=sizes,
        columns={name: tuple(cells) for name, cells in grid.items()},
    )


def format_csv(table: ResultTable) -> str:
    """Render the table as CSV text with a header row and a trailing newline."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([SIZE_COLUMN, *table.evaluators])
    for row_index, size in enumerate(table.input_sizes):
        row: list[object] = [size]
        for name in table.evaluators:
            cell = table.columns[name][row_index]
            row.append("" if cell is None else cell)
        writer.writerow(row)
    return buffer.getvalue()


def write_csv(table: ResultTable, results_dir: Path, program_name: str) -> Path:
    """
    Write <results_dir>/<program_name>.csv, replacing any existing file.

    Returns the path that was written.
    """
    target = results_dir / f"{program_name}.csv"
    atomic_write(target, format_csv(table))
    return target
