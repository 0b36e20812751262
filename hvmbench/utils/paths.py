# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Path helpers."""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_base_directory(config_path: str | None) -> Path:
    """
    Directory that relative paths in a registry are resolved against.

    That's the directory holding the config file, so a config can sit next to
    its program folders and be run from anywhere. Without a config file it's
    the current working directory.
    """
    if config_path is None:
        return Path.cwd()
    return Path(config_path).expanduser().resolve().parent
