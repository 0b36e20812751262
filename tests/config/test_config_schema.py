# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

Boundary values, placeholder checking, name uniqueness and registry subsets.
"""

import pytest
from pydantic import ValidationError

from hvmbench.config.schema import (
    EvaluatorConfig,
    InputRangeConfig,
    ProgramConfig,
    template_fields,
)


class TestProgramConfig:
    def test_explicit_sizes(self) -> None:
        program = ProgramConfig(name="QuickSort", input_sizes=[4, 2, 8])
        assert program.sizes == (4, 2, 8)

    def test_range_sizes(self) -> None:
        program = ProgramConfig.model_validate(
            {"name": "TreeSum", "input_sizes": {"start": 2, "step": 3, "count": 4}}
        )
        assert program.sizes == (2, 5, 8, 11)

    def test_empty_sizes_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProgramConfig(name="P", input_sizes=[])

    def test_duplicate_sizes_rejected(self) -> None:
        with pytest.raises(ValidationError, match="duplicates"):
            ProgramConfig(name="P", input_sizes=[1, 2, 1])

    def test_negative_sizes_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProgramConfig(name="P", input_sizes=[-1])

    @pytest.mark.parametrize("name", ["../escape", "a/b", "", ".hidden"])
    def test_path_unsafe_names_rejected(self, name: str) -> None:
        with pytest.raises(ValidationError):
            ProgramConfig(name=name, input_sizes=[1])


class TestInputRangeConfig:
    def test_count_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            InputRangeConfig(count=0)

    def test_step_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            InputRangeConfig(step=0, count=3)


class TestEvaluatorConfig:
    def test_valid_templates(self) -> None:
        evaluator = EvaluatorConfig(
            name="RUST",
            extension=".rs",
            pre_build=["rustc -O {source} -o {bin_dir}/rust"],
            run="{bin_dir}/rust {n}",
        )
        assert evaluator.pre_build == ["rustc -O {source} -o {bin_dir}/rust"]

    def test_pre_build_defaults_to_empty(self) -> None:
        evaluator = EvaluatorConfig(name="JS", extension=".js", run="node {source} {n}")
        assert evaluator.pre_build == []

    def test_unknown_placeholder_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown placeholder"):
            EvaluatorConfig(name="JS", extension=".js", run="node {sorce} {n}")

    def test_input_size_not_available_to_pre_build(self) -> None:
        with pytest.raises(ValidationError, match="Unknown placeholder"):
            EvaluatorConfig(name="JS", extension=".js", pre_build=["gen {n}"], run="node {source}")

    def test_positional_placeholder_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Positional"):
            EvaluatorConfig(name="JS", extension=".js", run="node {} {n}")

    @pytest.mark.parametrize("run", ["{bin_dir}/x {n!x}", "{bin_dir}/x {n:q}", "{bin_dir:d}/x {n}"])
    def test_malformed_run_template_rejected(self, run: str) -> None:
        with pytest.raises(ValidationError, match="Malformed command template"):
            EvaluatorConfig(name="JS", extension=".js", run=run)

    def test_malformed_pre_build_template_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Malformed command template"):
            EvaluatorConfig(
                name="JS", extension=".js", pre_build=["cp {program:d} x"], run="node {source}"
            )

    def test_format_specs_matching_the_value_type_are_allowed(self) -> None:
        evaluator = EvaluatorConfig(
            name="JS", extension=".js", run="node {source!r} {n:05d}"
        )
        assert evaluator.run == "node {source!r} {n:05d}"

    def test_extension_needs_leading_dot(self) -> None:
        with pytest.raises(ValidationError):
            EvaluatorConfig(name="JS", extension="js", run="node {source}")


class TestTemplateFields:
    def test_collects_names(self) -> None:
        assert template_fields("{bin_dir}/hvm {n} {n}") == {"bin_dir", "n"}

    def test_escaped_braces_are_not_fields(self) -> None:
        assert template_fields("awk '{{print}}' {source}") == {"source"}


class TestBenchConfig:
    def test_runs_must_be_positive(self, bench_factory) -> None:
        with pytest.raises(ValidationError):
            bench_factory(runs=0)

    def test_warmup_may_be_zero(self, bench_factory) -> None:
        assert bench_factory(warmup_runs=0).warmup_runs == 0

    def test_timeout_must_be_positive(self, bench_factory) -> None:
        with pytest.raises(ValidationError):
            bench_factory(timeout_seconds=0)

    def test_duplicate_evaluator_names_rejected(self, bench_factory) -> None:
        with pytest.raises(ValidationError, match="Duplicate evaluator"):
            bench_factory(evaluators=[
                {"name": "GHC", "extension": ".hs", "run": "a {n}"},
                {"name": "GHC", "extension": ".hs", "run": "b {n}"},
            ])

    def test_duplicate_program_names_rejected(self, bench_factory) -> None:
        with pytest.raises(ValidationError, match="Duplicate program"):
            bench_factory(programs=[
                {"name": "P", "input_sizes": [1]},
                {"name": "P", "input_sizes": [2]},
            ])

    def test_needs_at_least_one_evaluator(self, bench_factory) -> None:
        with pytest.raises(ValidationError):
            bench_factory(evaluators=[])


class TestSubset:
    def test_keeps_registry_order(self, bench_factory) -> None:
        bench = bench_factory().subset(evaluators=["GHC", "HVM"])
        assert bench.evaluator_names == ["HVM", "GHC"]

    def test_filters_evaluators(self, bench_factory) -> None:
        bench = bench_factory().subset(evaluators=["GHC"])
        assert bench.evaluator_names == ["GHC"]

    def test_none_keeps_everything(self, bench_factory) -> None:
        original = bench_factory()
        assert original.subset() == original

    def test_unknown_program_raises(self, bench_factory) -> None:
        with pytest.raises(ValueError, match="Unknown program"):
            bench_factory().subset(programs=["Nope"])

    def test_unknown_evaluator_raises(self, bench_factory) -> None:
        with pytest.raises(ValueError, match="Unknown evaluator"):
            bench_factory().subset(evaluators=["Nope"])
