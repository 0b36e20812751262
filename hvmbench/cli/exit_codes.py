# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

An evaluator that fails to build or run is not an error at this level:
the session still finishes with SUCCESS and the gap shows up in the CSV.
RUNTIME_ERROR is reserved for the harness itself falling over.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4
