"""Bundled data shipped inside the zcc package.

Subpackages: ``config`` (defaults), ``schemas`` (manifest schema),
``hooks/templates``, ``commands`` and ``starter-packs``.
"""
from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """Filesystem path of ``zcc/data/<subpackage>[/<filename>]``."""
    root = Path(str(resources.files("zcc.data"))) / subpackage
    return root / filename if filename else root


@lru_cache(maxsize=None)
def read_yaml(subpackage: str, filename: str) -> Dict[str, Any]:
    """Parse a bundled YAML file once per process. Callers must not mutate it."""
    text = get_data_path(subpackage, filename).read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


__all__ = ["get_data_path", "read_yaml"]
