"""Dictionary merging for configuration layers."""
from __future__ import annotations

from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated by ``override``, recursing into nested mappings.

    Neither input is modified. Non-mapping values (lists included) in
    ``override`` replace what ``base`` had.

        >>> deep_merge({"http": {"retries": 3, "timeout_seconds": 30}}, {"http": {"retries": 5}})
        {'http': {'retries': 5, 'timeout_seconds': 30}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
