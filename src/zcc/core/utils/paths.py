"""Project root resolution and well-known zcc paths."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

ZCC_DIR_NAME = ".zcc"
CLAUDE_DIR_NAME = ".claude"

_ROOT_MARKERS = (ZCC_DIR_NAME, ".git", CLAUDE_DIR_NAME)


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. ``ZCC_PROJECT_ROOT`` environment variable
    2. Nearest ancestor of ``start`` (default: cwd) containing ``.zcc``, ``.git``
       or ``.claude``
    3. ``start`` itself
    """
    env_root = os.environ.get("ZCC_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return here


def get_user_config_dir() -> Path:
    """Return the per-user zcc directory (``~/.zcc`` unless ``ZCC_HOME`` is set)."""
    env_home = os.environ.get("ZCC_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ZCC_DIR_NAME


def is_within(child: Path, parent: Path) -> bool:
    """Return True if ``child`` resolves to ``parent`` or a path inside it."""
    try:
        c = Path(child).resolve()
        p = Path(parent).resolve()
    except OSError:
        return False
    return c == p or c.is_relative_to(p)


__all__ = [
    "ZCC_DIR_NAME",
    "CLAUDE_DIR_NAME",
    "resolve_project_root",
    "get_user_config_dir",
    "is_within",
]
