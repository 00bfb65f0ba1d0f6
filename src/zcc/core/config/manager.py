"""Layered zcc configuration.

Layers, lowest priority first:

1. bundled defaults in ``zcc/data/config/*.yaml``
2. user files in ``~/.zcc/config/*.yaml`` (``$ZCC_HOME/config``)
3. project files in ``<project>/.zcc/config/*.yaml``
4. ``ZCC_<SECTION>__<KEY>`` environment variables

Files within a layer merge in file-name order. Invalid YAML is an error,
never silently skipped.
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from zcc.core.utils.io import iter_yaml_files, read_yaml
from zcc.core.utils.merge import deep_merge
from zcc.core.utils.paths import ZCC_DIR_NAME, get_user_config_dir, resolve_project_root
from zcc.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ZCC_"
ENV_SEPARATOR = "__"

# Variables that locate zcc itself; never config keys.
RESERVED_ENV = frozenset({"ZCC_PROJECT_ROOT", "ZCC_HOME"})

_INT_RE = re.compile(r"[-+]?\d+")
_FLOAT_RE = re.compile(r"[-+]?\d*\.\d+")


def coerce_env_value(raw: str) -> Any:
    """Interpret an environment string as bool, int, float, JSON or text."""
    value = raw.strip()
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INT_RE.fullmatch(value):
        return int(value)
    if _FLOAT_RE.fullmatch(value):
        return float(value)
    if value[:1] in ("[", "{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return value


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Iterator[Tuple[List[str], Any]]:
    """Yield ``(key path, value)`` for each ``ZCC_A__B`` variable."""
    env = os.environ if environ is None else environ
    for name in sorted(env):
        if not name.startswith(ENV_PREFIX) or name in RESERVED_ENV:
            continue
        raw_key = name[len(ENV_PREFIX):]
        if ENV_SEPARATOR not in raw_key:
            continue
        parts = raw_key.split(ENV_SEPARATOR)
        if not all(parts):
            logger.warning("Ignoring malformed config variable %s", name)
            continue
        yield [p.lower() for p in parts], coerce_env_value(env[name])


def _set_path(target: Dict[str, Any], path: List[str], value: Any) -> None:
    node = target
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[path[-1]] = value


class ConfigManager:
    """Merge every configuration layer for one project."""

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = self.repo_root / ZCC_DIR_NAME / "config"

    def layer_dirs(self) -> List[Path]:
        return [self.core_config_dir, self.user_config_dir, self.project_config_dir]

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {path}")
        return data

    def load_config(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        for directory in self.layer_dirs():
            for path in iter_yaml_files(directory):
                cfg = deep_merge(cfg, self.load_yaml(path))
        for key_path, value in env_overrides():
            _set_path(cfg, key_path, value)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"http.timeout_seconds"``."""
        from .cache import get_cached_config

        node: Any = get_cached_config(repo_root=self.repo_root)
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node


__all__ = ["ConfigManager", "ENV_PREFIX", "coerce_env_value", "env_overrides"]
