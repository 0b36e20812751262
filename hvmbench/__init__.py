# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
hvmbench — compile, run and time small programs across compilers and runtimes.

Subsystems:
  - config: registry schema, YAML loader, built-in defaults
  - harness: shell command runner and error hierarchy
  - runner: the benchmark loop and its data models
  - reporting: pivoting measurements into per-program CSV files
  - cli: the `hvmbench` command
"""

__version__ = "0.1.0"
