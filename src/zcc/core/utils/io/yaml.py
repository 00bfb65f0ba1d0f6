"""YAML loading for configuration layers and bundled schemas."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, List

import yaml

from .core import PathLike


def read_yaml(path: PathLike, default: Any = None, raise_on_error: bool = False) -> Any:
    """Load a YAML document.

    An empty document yields ``default``. A missing or unparsable file also
    yields ``default`` unless ``raise_on_error`` is set, in which case the
    ``FileNotFoundError`` or ``yaml.YAMLError`` propagates.
    """
    source = Path(path)
    try:
        with open(source, "r", encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return default if data is None else data


def iter_yaml_files(directory: Path) -> List[Path]:
    """``*.yaml`` and ``*.yml`` files directly in ``directory``, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix in (".yaml", ".yml")),
        key=lambda p: p.name,
    )


__all__ = ["iter_yaml_files", "read_yaml"]
