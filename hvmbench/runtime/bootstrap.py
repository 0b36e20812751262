# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for hvmbench.

The one-time setup that happens before any benchmark runs:
  1. Refuse to start on an interpreter older than 3.11
  2. Configure the package logger from the global config
  3. Log what machine the numbers are about to come from

Timings are only comparable between runs on the same hardware, so the
machine snapshot goes into the log of every session.
"""

import os
import platform
import sys
from pathlib import Path
from typing import NamedTuple, Optional

from hvmbench.config.schema import GlobalConfig
from hvmbench.logging.logger import configure_logging, get_logger

MINIMUM_PYTHON = (3, 11)


class SystemInfo(NamedTuple):
    """The machine a benchmark session ran on."""

    python_version: str
    platform: str
    architecture: str
    hostname: str
    cpu_count: int


def check_minimum_python(version: Optional[tuple[int, int]] = None) -> None:
    """
    Raises:
        RuntimeError: If the interpreter (or the given version) is below 3.11.
    """
    current = version or tuple(sys.version_info[:2])
    if current < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        found = ".".join(str(part) for part in current)
        raise RuntimeError(f"hvmbench requires Python >= {required}, found {found}")


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
        cpu_count=os.cpu_count() or 1,
    )


def bootstrap(config: GlobalConfig, log_level: Optional[str] = None) -> SystemInfo:
    """
    Run the bootstrap sequence and return the machine snapshot it logged.

    Args:
        config: The validated global configuration.
        log_level: Overrides config.log_level when given (the --log-level flag).
    """
    check_minimum_python()

    log_file = Path(config.log_file) if config.log_file is not None else None
    configure_logging(log_level or config.log_level, log_file)

    logger = get_logger("hvmbench.runtime")
    system_info = get_system_info()
    logger.info(
        "hvmbench bootstrap complete",
        extra={"project_name": config.project_name, **system_info._asdict()},
    )
    return system_info
