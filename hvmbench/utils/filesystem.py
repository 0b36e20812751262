# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Safe filesystem operations for hvmbench.

Result files are written atomically: the content goes to a temporary file in
the same directory as the target, which is then renamed over it. Rename on
the same filesystem is atomic on POSIX, so a reader (or a crashed run) only
ever sees the old table or the complete new one.
"""

import os
import tempfile
from pathlib import Path


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically, replacing whatever was there.

    Parent directories are created as needed. The file ends up with the
    same permissions a plain open() would give it (0666 minus the umask),
    not the owner-only mode temporary files are created with.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False: the file has to outlive close() so it can be renamed.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".hvmbench_tmp_",
        suffix=".tmp",
        delete=False,
        newline="",
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        os.chmod(temp_path, 0o666 & ~_current_umask())
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise
