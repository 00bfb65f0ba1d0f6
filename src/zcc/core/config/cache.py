"""Process-wide cache of merged configuration, one entry per project.

An entry is reused only while the ``ZCC_*`` environment and the project's
``.zcc/config`` files are unchanged, so a config file written mid-process
is picked up on the next lookup.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

_config_cache: Dict[Tuple[Any, ...], Dict[str, Any]] = {}


def _resolve_root(repo_root: Optional[Path]) -> Path:
    from zcc.core.utils.paths import resolve_project_root

    if repo_root is None:
        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _fingerprint(root: Path) -> Tuple[Any, ...]:
    from zcc.core.utils.io import iter_yaml_files
    from zcc.core.utils.paths import ZCC_DIR_NAME

    env = tuple(sorted((k, v) for k, v in os.environ.items() if k.startswith("ZCC_")))
    files = []
    for path in iter_yaml_files(root / ZCC_DIR_NAME / "config"):
        try:
            stat = path.stat()
        except OSError:
            continue
        files.append((path.name, stat.st_mtime_ns, stat.st_size))
    return (str(root), env, tuple(files))


def get_cached_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Merged configuration for ``repo_root`` (auto-detected when None)."""
    root = _resolve_root(repo_root)
    key = _fingerprint(root)
    cfg = _config_cache.get(key)
    if cfg is None:
        from .manager import ConfigManager

        cfg = ConfigManager(repo_root=root).load_config()
        _config_cache[key] = cfg
    return cfg


def clear_all_caches() -> None:
    _config_cache.clear()


__all__ = ["clear_all_caches", "get_cached_config"]
