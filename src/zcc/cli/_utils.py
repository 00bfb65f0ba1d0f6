"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Optional, Tuple

from zcc.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Return ``--repo-root`` when given, else the auto-detected project root."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def get_source_registry(args: argparse.Namespace):
    """Build and initialize the project's :class:`SourceRegistry`."""
    from zcc.core.sources import SourceRegistry

    registry = SourceRegistry(get_repo_root(args))
    registry.initialize()
    return registry


def get_pack_manager(args: argparse.Namespace):
    """Build a :class:`StarterPackManager` wired to every enabled source."""
    from zcc.core.packs.manager import StarterPackManager

    return StarterPackManager.from_source_registry(get_repo_root(args))


def resolve_pack_source(manager, pack_name: str, source_name: Optional[str] = None) -> Tuple[str, Any]:
    """Return ``(source_id, source)`` for ``pack_name``, honouring ``--source``."""
    from zcc.core.exceptions import PackNotFoundError

    if source_name is None:
        found = manager.registry.find_pack_source(pack_name)
        if found is None:
            raise PackNotFoundError(f"Pack '{pack_name}' not found in any registered source")
        return found
    source = manager.registry.get_source(source_name)
    if source is None:
        raise PackNotFoundError(f"Pack source '{source_name}' is not registered")
    return source_name, source


__all__ = ["get_repo_root", "get_source_registry", "get_pack_manager", "resolve_pack_source"]
