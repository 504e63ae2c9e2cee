"""
Atomic file operations for lib4bin.

Every file placed in the output tree is written to a temporary file in the
destination directory and renamed into place, so an interrupted copy never
leaves a truncated binary or library behind.
"""

from __future__ import annotations

import json
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional, Union


def _fsync_dir(directory: Path) -> None:
    try:
        dir_fd = os.open(str(directory), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError):
        # O_DIRECTORY not available on all platforms
        pass


def atomic_copy_file(
    src: Union[str, Path],
    dst: Union[str, Path],
    mode: Optional[int] = None,
) -> Path:
    """
    Copy a file atomically, replacing any existing file at ``dst``.

    Symlinks in ``src`` are followed; the destination always receives the
    file contents.

    Args:
        src: Source file path
        dst: Destination file path (parent must exist)
        mode: Permission bits for the copy; defaults to the source's bits

    Returns:
        The destination path
    """
    src = Path(src)
    dst = Path(dst)

    if mode is None:
        mode = stat.S_IMODE(os.stat(src).st_mode)

    fd, temp_path = tempfile.mkstemp(
        dir=dst.parent,
        prefix=f".{dst.name}.",
        suffix=".tmp",
    )

    try:
        with os.fdopen(fd, "wb") as out, open(src, "rb") as inp:
            shutil.copyfileobj(inp, out, 1024 * 1024)
            out.flush()
            os.fsync(out.fileno())

        os.chmod(temp_path, mode)
        os.replace(temp_path, dst)
        _fsync_dir(dst.parent)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

    return dst


def atomic_write_text(path: Union[str, Path], content: str, mode: int = 0o644) -> None:
    """
    Write text content to file atomically.

    Args:
        path: Destination file path
        content: Text content to write
        mode: File permissions (default 0o644)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
        _fsync_dir(path.parent)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def atomic_write_json(
    path: Union[str, Path],
    data: Any,
    indent: int = 2,
    mode: int = 0o644,
) -> None:
    """
    Write JSON data to file atomically.

    Args:
        path: Destination file path
        data: JSON-serializable data
        indent: JSON indentation (default 2)
        mode: File permissions (default 0o644)
    """
    content = json.dumps(data, indent=indent, ensure_ascii=False)
    atomic_write_text(path, content + '\n', mode)
