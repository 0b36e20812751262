# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

Kept apart from the harness errors so the CLI can tell a bad registry file
apart from a benchmark that blew up halfway through.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation.
    This covers missing fields, duplicate program or evaluator names,
    unknown command placeholders and out-of-range values like runs: 0.
    """
