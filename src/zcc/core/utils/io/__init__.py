"""File I/O helpers: atomic writes, locked reads, JSON and YAML."""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    remove_empty_dirs,
    sha256_file,
    write_text,
)
from .json import read_json, write_json_atomic
from .yaml import iter_yaml_files, read_yaml

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "iter_yaml_files",
    "read_json",
    "read_text",
    "read_yaml",
    "remove_empty_dirs",
    "sha256_file",
    "write_json_atomic",
    "write_text",
]
