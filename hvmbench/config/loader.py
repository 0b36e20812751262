# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader — reads YAML from disk and produces a validated, frozen HvmbenchConfig.

The loading pipeline is linear:
  1. Read raw text from the file
  2. Parse as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen, immutable config object

A broken registry stops the harness before a single compiler is invoked.
There is no fallback to the built-in registry when a file was given.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hvmbench.config.exceptions import ConfigLoadError, ConfigValidationError
from hvmbench.config.schema import HvmbenchConfig


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed dict.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't valid YAML.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def parse_config(raw_data: dict[str, Any], source: str = "<memory>") -> HvmbenchConfig:
    """
    Validate an already-parsed mapping into a HvmbenchConfig.

    Raises:
        ConfigValidationError: Schema violations (missing fields, wrong types,
                               unknown keys, bad placeholders, duplicate names).
    """
    try:
        return HvmbenchConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {source}:\n{err}"
        ) from err


def load_config(config_path: Path) -> HvmbenchConfig:
    """
    Load, validate, and freeze a config file into a HvmbenchConfig object.

    This is the single entry point for reading a registry from disk.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A fully validated, frozen HvmbenchConfig instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations.
    """
    raw_data = _read_yaml_file(config_path)
    return parse_config(raw_data, source=str(config_path))
