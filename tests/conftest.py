# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for hvmbench tests.

The benchmark loop takes its command executor and clock as parameters, so
most tests drive it with FakeToolchain: a stand-in that records every
command, advances a fake clock by a scripted duration per command, and
fails the commands it's told to fail. No compiler is ever spawned.
"""

import logging
import textwrap
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import pytest

from hvmbench.config.schema import BenchConfig
from hvmbench.harness.errors import CommandError
from hvmbench.logging.logger import PACKAGE_LOGGER


class FakeToolchain:
    """Executor + clock pair for driving the benchmark loop without processes."""

    def __init__(
        self,
        durations: Optional[Callable[[str, int], float]] = None,
        fail_when: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.now = 0.0
        self.commands: list[str] = []
        self._durations = durations or (lambda command, call_index: 1.0)
        self._fail_when = fail_when or (lambda command: False)

    def clock(self) -> float:
        return self.now

    def __call__(self, command: str) -> None:
        call_index = sum(1 for c in self.commands if c == command)
        self.commands.append(command)
        if self._fail_when(command):
            raise CommandError(command, "exited with status 1", exit_code=1)
        self.now += self._durations(command, call_index)


def make_bench(**overrides: Any) -> BenchConfig:
    """A two-evaluator registry (HVM, GHC) with one small program."""
    data: dict[str, Any] = {
        "config_version": "1.0.0",
        "runs": 3,
        "programs_directory": "programs",
        "bin_directory": ".bin",
        "results_directory": "_results_",
        "programs": [{"name": "QuickSort", "input_sizes": [0, 1, 2]}],
        "evaluators": [
            {
                "name": "HVM",
                "extension": ".hvm",
                "pre_build": [
                    "hvm compile {source}",
                    "clang -O2 -lpthread {source_dir}/main.c -o {bin_dir}/hvm",
                ],
                "run": "{bin_dir}/hvm {n}",
            },
            {
                "name": "GHC",
                "extension": ".hs",
                "pre_build": ["ghc -O2 {source} -o {bin_dir}/ghc"],
                "run": "{bin_dir}/ghc {n}",
            },
        ],
    }
    data.update(overrides)
    return BenchConfig.model_validate(data)


def write_sources(base_dir: Path, bench: BenchConfig) -> None:
    """Create main<ext> for every (program, evaluator) pair under programs_directory."""
    for program in bench.programs:
        program_dir = base_dir / bench.programs_directory / program.name
        program_dir.mkdir(parents=True, exist_ok=True)
        for evaluator in bench.evaluators:
            (program_dir / f"main{evaluator.extension}").write_text("", encoding="utf-8")


@pytest.fixture()
def fake_toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    A minimal valid config with a bench section whose commands only use
    the shell, so the CLI can run it end to end on any POSIX machine.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "hvmbench-test"
          log_level: "DEBUG"
        bench:
          config_version: "1.0.0"
          runs: 2
          programs_directory: "programs"
          results_directory: "_results_"
          programs:
            - name: Echo
              input_sizes: [1, 2]
          evaluators:
            - name: SH
              extension: ".sh"
              pre_build: ["cp {source} {bin_dir}/echo.sh"]
              run: "sh {bin_dir}/echo.sh {n}"
            - name: Broken
              extension: ".missing"
              run: "true"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")

    program_dir = tmp_path / "programs" / "Echo"
    program_dir.mkdir(parents=True)
    (program_dir / "main.sh").write_text("exit 0\n", encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing required field)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "hvmbench-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def bench_factory() -> Callable[..., BenchConfig]:
    return make_bench


@pytest.fixture()
def toolchain_factory() -> Callable[..., FakeToolchain]:
    return FakeToolchain


@pytest.fixture()
def bench_dir(tmp_path: Path) -> Callable[[BenchConfig], Path]:
    """Lay out source files for a registry under tmp_path and return tmp_path."""

    def _layout(bench: BenchConfig) -> Path:
        write_sources(tmp_path, bench)
        return tmp_path

    return _layout


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """
    Drop handlers from the package logger after each test so a handler bound
    to one test's captured stdout doesn't leak into the next.
    """
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
