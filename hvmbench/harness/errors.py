# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the benchmark harness.

BuildFailure and ExecutionFailure are contained at evaluator granularity:
the loop catches them, logs them and moves on to the next evaluator. Anything
else that escapes to the CLI aborts the session.
"""

from typing import Optional


class HarnessError(Exception):
    """Base for all harness errors."""


class CommandError(HarnessError):
    """
    A single shell command failed: non-zero exit, could not be spawned, or
    ran past its timeout. exit_code is None when the process never produced
    one (spawn failure, timeout).
    """

    def __init__(
        self,
        command: str,
        reason: str,
        exit_code: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.reason = reason
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"{reason}: {command}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


class BuildFailure(HarnessError):
    """Pre-build commands failed, or the source file for the evaluator is missing."""

    def __init__(self, program: str, evaluator: str, cause: str) -> None:
        self.program = program
        self.evaluator = evaluator
        self.cause = cause
        super().__init__(f"[{evaluator}] {program}: build failed: {cause}")


class ExecutionFailure(HarnessError):
    """A timed run command failed for one input size."""

    def __init__(self, program: str, evaluator: str, input_size: int, cause: str) -> None:
        self.program = program
        self.evaluator = evaluator
        self.input_size = input_size
        self.cause = cause
        super().__init__(
            f"[{evaluator}] {program} n={input_size}: execution failed: {cause}"
        )


class ReportError(HarnessError):
    """Measurements can't be pivoted into a table (duplicate or unknown cells)."""
