# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Command runner: render a command template, run it, wait for it.

Everything is synchronous. One command finishes before the next starts,
because anything running alongside a timed benchmark skews its wall-clock
numbers. Commands are shell strings (they come straight from the registry
and routinely use shell features like redirection), so they go through
subprocess.run(shell=True).

By default the child's stdout/stderr go straight to the console, which is
what you want when a compiler prints an error. With capture_output the
streams are collected instead and the tail of stderr rides along on the
CommandError.

run_command itself never logs. The benchmark loop wraps it in a clock, and
whatever happens between spawn and return ends up in the measurement.
"""

import functools
import subprocess
import time
from typing import Callable, Iterable, Optional

from hvmbench.harness.errors import CommandError
from hvmbench.logging.logger import get_logger

logger = get_logger(__name__)

# How much captured stderr to keep on a CommandError.
_STDERR_TAIL_CHARS = 2000


def render_command(template: str, **values: object) -> str:
    """
    Fill a command template's named placeholders.

    Pure string formatting, no shell quoting. Templates are checked when the
    config loads, so an error here means a caller forgot to pass a value or
    built an evaluator without validation. Either way it surfaces as a
    CommandError and stays contained to the evaluator that owns the template.
    """
    try:
        return template.format(**values)
    except KeyError as err:
        raise CommandError(template, f"missing value for placeholder {err}") from err
    except (ValueError, IndexError, AttributeError, TypeError) as err:
        raise CommandError(template, f"malformed template ({err})") from err


def run_command(
    command: str,
    timeout_seconds: Optional[float] = None,
    capture_output: bool = False,
) -> None:
    """
    Run one shell command and wait for it to exit.

    Raises:
        CommandError: On non-zero exit, spawn failure, or timeout.
    """
    try:
        result = subprocess.run(
            command,
            shell=True,
            capture_output=capture_output,
            text=True,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired as err:
        raise CommandError(command, f"timed out after {timeout_seconds}s") from err
    except OSError as err:
        raise CommandError(command, f"could not start process ({err})") from err

    if result.returncode != 0:
        stderr = (result.stderr or "")[-_STDERR_TAIL_CHARS:].rstrip() if capture_output else ""
        raise CommandError(
            command,
            f"exited with status {result.returncode}",
            exit_code=result.returncode,
            stderr=stderr,
        )


def run_commands(
    commands: Iterable[str],
    execute: Optional[Callable[[str], None]] = None,
    timeout_seconds: Optional[float] = None,
    capture_output: bool = False,
) -> None:
    """
    Run commands in order. The first failure stops the sequence and propagates.

    execute defaults to run_command with the given timeout and capture
    settings. The loop passes its own executor so builds go through the
    same path as timed runs.
    """
    if execute is None:
        execute = functools.partial(
            run_command,
            timeout_seconds=timeout_seconds,
            capture_output=capture_output,
        )

    for command in commands:
        start = time.monotonic()
        execute(command)
        logger.debug(
            "Command finished",
            extra={
                "command": command,
                "elapsed_seconds": round(time.monotonic() - start, 6),
            },
        )
