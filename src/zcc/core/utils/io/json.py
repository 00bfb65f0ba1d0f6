"""JSON state files (registries, snapshots, trust records)."""
from __future__ import annotations

import fcntl
import json
from pathlib import Path
from typing import Any

from .core import PathLike, atomic_write

_MISSING = object()


def read_json(path: PathLike, *, default: Any = _MISSING) -> Any:
    """Parse ``path`` under a shared lock.

    A missing file returns ``default`` when one is given and raises
    ``FileNotFoundError`` otherwise. Malformed JSON always raises
    ``json.JSONDecodeError``; callers decide whether to fall back.
    """
    source = Path(path)
    if not source.exists():
        if default is _MISSING:
            raise FileNotFoundError(f"JSON file not found: {source}")
        return default
    with open(source, "r", encoding="utf-8") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_SH)
        return json.load(handle)


def write_json_atomic(path: PathLike, data: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """Atomically write ``data`` as pretty JSON with a trailing newline."""

    def _dump(handle) -> None:
        json.dump(data, handle, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        handle.write("\n")

    atomic_write(path, _dump)


__all__ = ["read_json", "write_json_atomic"]
