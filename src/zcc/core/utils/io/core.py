"""File primitives shared by the JSON and YAML helpers.

Writes go through a sibling temp file that is flushed, fsync'd and renamed
over the target, so readers never observe a half-written registry or
settings file.
"""
from __future__ import annotations

import fcntl
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Callable, Iterable, List, TextIO, Union

PathLike = Union[str, Path]

_CHUNK = 64 * 1024


def ensure_parent_dir(path: PathLike) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) if needed and return it.

    Raises:
        NotADirectoryError: If ``path`` exists as a file
    """
    directory = Path(path)
    if directory.exists() and not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write(path: PathLike, write_fn: Callable[[TextIO], None], *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with whatever ``write_fn`` writes to a temp file.

    The temp file lives in the target's directory so the final ``os.replace``
    never crosses filesystems. It holds an exclusive lock while being written
    and is removed if anything fails before the rename.
    """
    target = Path(path)
    ensure_parent_dir(target)
    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            write_fn(handle)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def read_text(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")


def write_text(path: PathLike, content: str) -> None:
    atomic_write(path, lambda handle: handle.write(content))


def sha256_file(path: PathLike) -> str:
    """Hex SHA-256 of the file's bytes, read in chunks."""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        while chunk := handle.read(_CHUNK):
            digest.update(chunk)
    return digest.hexdigest()


def remove_empty_dirs(paths: Iterable[Path]) -> List[Path]:
    """Remove the directories in ``paths`` that exist and are empty.

    Returns the directories actually removed; anything else is left alone.
    """
    removed: List[Path] = []
    for directory in paths:
        if not directory.is_dir() or any(directory.iterdir()):
            continue
        try:
            directory.rmdir()
        except OSError:
            continue
        removed.append(directory)
    return removed


__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "read_text",
    "remove_empty_dirs",
    "sha256_file",
    "write_text",
]
