# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Process-level plumbing for the benchmark harness.

  - runner: rendering command templates and running shell commands
  - errors: the harness exception hierarchy
"""
