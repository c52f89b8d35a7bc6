"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    with path.open("r", encoding=encoding) as fp:
        return fp.read()


def sibling_with_suffix(path: Path, suffix: str) -> Path:
    """``/a/b/video.mp4`` + ``-thumbnail.png`` -> ``/a/b/video-thumbnail.png``."""
    return path.with_name(f"{path.stem}{suffix}")


def atomic_write(path: Path, writer: Callable[[Path], None], *, mode: int | None = None) -> Path:
    """Let ``writer`` fill a temp file next to ``path`` and move it into place.

    A reader never observes a partially written ``path``; on failure the
    temp file is removed and any previous ``path`` stays untouched.
    """
    ensure_parent(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        writer(tmp_path)
        if mode is not None and os.name == "posix":
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


def write_text(path: Path, data: str, *, encoding: str = "utf-8", mode: int | None = None) -> Path:
    return atomic_write(path, lambda tmp: tmp.write_text(data, encoding=encoding), mode=mode)


__all__ = ["atomic_write", "ensure_parent", "read_text", "sibling_with_suffix", "write_text"]
