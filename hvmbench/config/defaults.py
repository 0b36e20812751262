# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Built-in registry used when no --config is given.

QuickSort over sizes 0..64, built and run under HVM (compiled to C, then
clang) and GHC. The binaries land in the bin staging directory and the run
templates invoke them from there.
"""

from typing import Any

from hvmbench.config.loader import parse_config
from hvmbench.config.schema import HvmbenchConfig

DEFAULT_CONFIG: dict[str, Any] = {
    "global": {
        "config_version": "1.0.0",
        "project_name": "hvmbench",
        "log_level": "INFO",
    },
    "bench": {
        "config_version": "1.0.0",
        "runs": 3,
        "programs": [
            {"name": "QuickSort", "input_sizes": {"start": 0, "step": 1, "count": 65}},
        ],
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
    },
}


def default_config() -> HvmbenchConfig:
    return parse_config(DEFAULT_CONFIG, source="built-in registry")
