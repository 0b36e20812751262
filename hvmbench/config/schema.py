# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for hvmbench.

The benchmark registry (which programs to run, at which input sizes, under
which evaluators) is plain data described by the frozen pydantic models below.
Nothing in the harness reads module-level tables: the CLI loads one of these
objects and passes it down, so two harness runs with different registries
never see each other's state.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Command templates use str.format-style named placeholders. The set of names
a template may reference is fixed per template kind and checked here, so a
typo like {sorce} fails at load time instead of in the middle of a run.
"""

import string
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Placeholders available to pre-build templates.
BUILD_PLACEHOLDERS: frozenset[str] = frozenset({"program", "source", "source_dir", "bin_dir"})

# Run templates additionally see the input size.
RUN_PLACEHOLDERS: frozenset[str] = BUILD_PLACEHOLDERS | {"n"}

# Stand-ins with the types render_command gets at run time: paths are str, n is int.
_SAMPLE_VALUES: dict[str, object] = {
    "program": "Program",
    "source": "programs/Program/main.ext",
    "source_dir": "programs/Program",
    "bin_dir": ".bin",
    "n": 0,
}

# Names double as directory names and CSV file names, so keep them path-safe.
_NAME_PATTERN = r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$"


def template_fields(template: str) -> set[str]:
    """
    Return the placeholder names a command template references.

    Raises:
        ValueError: If the template is malformed (unbalanced braces) or uses
                    positional fields like {} or {0}.
    """
    fields: set[str] = set()
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name is None:
            continue
        if field_name == "" or field_name.isdigit():
            raise ValueError(
                f"Positional placeholders are not allowed in command template: {template!r}"
            )
        fields.add(field_name)
    return fields


def _check_template(template: str, allowed: frozenset[str]) -> str:
    if not template.strip():
        raise ValueError("Command template must not be empty")
    unknown = template_fields(template) - allowed
    if unknown:
        raise ValueError(
            f"Unknown placeholder(s) {sorted(unknown)} in {template!r}. "
            f"Allowed: {sorted(allowed)}"
        )
    try:
        template.format(**{name: _SAMPLE_VALUES[name] for name in allowed})
    except (ValueError, TypeError) as err:
        raise ValueError(f"Malformed command template {template!r}: {err}") from err
    return template


class GlobalConfig(BaseModel):
    """
    Cross-cutting settings: project identity and observability.

    This is loaded before anything else and decides how loud the
    harness is and where its JSON log lines go.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="hvmbench", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class InputRangeConfig(BaseModel):
    """An arithmetic run of input sizes: start, start+step, ... (count values)."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    start: int = Field(default=0, ge=0, description="First input size")
    step: int = Field(default=1, ge=1, description="Distance between consecutive sizes")
    count: int = Field(ge=1, description="How many sizes to generate")

    def expand(self) -> tuple[int, ...]:
        return tuple(self.start + i * self.step for i in range(self.count))


class ProgramConfig(BaseModel):
    """
    One benchmark program.

    The name identifies a directory holding one main<ext> source per
    evaluator. Input sizes are the argument values every evaluator gets run
    with, and they become the rows of the program's CSV.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    name: str = Field(pattern=_NAME_PATTERN, description="Program and directory name")
    input_sizes: Union[list[int], InputRangeConfig] = Field(
        description="Explicit list of sizes, or a {start, step, count} range",
    )

    @field_validator("input_sizes")
    @classmethod
    def _check_sizes(
        cls, value: Union[list[int], InputRangeConfig]
    ) -> Union[list[int], InputRangeConfig]:
        if isinstance(value, InputRangeConfig):
            return value
        if not value:
            raise ValueError("input_sizes must not be empty")
        if any(n < 0 for n in value):
            raise ValueError("input_sizes must be non-negative")
        if len(set(value)) != len(value):
            raise ValueError("input_sizes must not contain duplicates")
        return value

    @property
    def sizes(self) -> tuple[int, ...]:
        """The input sizes in benchmark order, whichever way they were written."""
        if isinstance(self.input_sizes, InputRangeConfig):
            return self.input_sizes.expand()
        return tuple(self.input_sizes)


class EvaluatorConfig(BaseModel):
    """
    How to build and invoke a program under one toolchain.

    pre_build runs once per program before any timing starts (compile, link).
    run is the command that gets timed, once per repetition per input size.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    name: str = Field(pattern=_NAME_PATTERN, description="Evaluator name, also the CSV column")
    extension: str = Field(
        pattern=r"^\.[A-Za-z0-9_.-]+$",
        description="Source file extension, e.g. '.hs' for main.hs",
    )
    pre_build: list[str] = Field(
        default_factory=list,
        description="Shell command templates run in order before timing",
    )
    run: str = Field(description="Shell command template that gets timed")

    @field_validator("pre_build")
    @classmethod
    def _check_pre_build(cls, value: list[str]) -> list[str]:
        for template in value:
            _check_template(template, BUILD_PLACEHOLDERS)
        return value

    @field_validator("run")
    @classmethod
    def _check_run(cls, value: str) -> str:
        return _check_template(value, RUN_PLACEHOLDERS)


class BenchConfig(BaseModel):
    """
    The benchmark registry plus the knobs that control a run.

    Programs and evaluators are ordered lists; that order is the iteration
    order of the harness and the column order of every CSV.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    runs: int = Field(
        default=3,
        ge=1,
        description="Timed repetitions averaged per input size",
    )
    warmup_runs: int = Field(
        default=1,
        ge=0,
        description="Leading repetitions executed but left out of the average",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Kill any single build or run command after this long",
    )
    capture_output: bool = Field(
        default=False,
        description="Capture child output instead of letting it reach the console",
    )
    programs_directory: str = Field(
        default=".",
        description="Where the per-program source directories live",
    )
    bin_directory: str = Field(
        default=".bin",
        description="Staging directory for compiled artifacts",
    )
    results_directory: str = Field(
        default="_results_",
        description="Where <program>.csv files are written",
    )
    programs: list[ProgramConfig] = Field(min_length=1)
    evaluators: list[EvaluatorConfig] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "BenchConfig":
        for label, names in (
            ("program", [p.name for p in self.programs]),
            ("evaluator", [e.name for e in self.evaluators]),
        ):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {label} name(s): {duplicates}")
        return self

    @property
    def evaluator_names(self) -> list[str]:
        return [e.name for e in self.evaluators]

    def subset(
        self,
        programs: Optional[list[str]] = None,
        evaluators: Optional[list[str]] = None,
    ) -> "BenchConfig":
        """
        Narrow the registry to the named programs and evaluators.

        Registry order is kept no matter what order the names come in.
        None means "keep everything".

        Raises:
            ValueError: If a name isn't in the registry.
        """
        update: dict[str, object] = {}
        if programs:
            unknown = sorted(set(programs) - {p.name for p in self.programs})
            if unknown:
                raise ValueError(f"Unknown program(s): {unknown}")
            update["programs"] = [p for p in self.programs if p.name in programs]
        if evaluators:
            unknown = sorted(set(evaluators) - set(self.evaluator_names))
            if unknown:
                raise ValueError(f"Unknown evaluator(s): {unknown}")
            update["evaluators"] = [e for e in self.evaluators if e.name in evaluators]
        return self.model_copy(update=update)


class HvmbenchConfig(BaseModel):
    """
    Top-level config container.

    A YAML file may hold just `global:` (enough for `hvmbench info`) or
    `global:` + `bench:`. Commands that need the registry check for it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    bench: Optional[BenchConfig] = Field(default=None)
