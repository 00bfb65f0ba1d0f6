"""Typed accessors over one section of the merged configuration."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """One top-level config section exposed as cached properties.

    Subclasses name their section and turn raw values into typed ones::

        class HttpConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "http"

            @cached_property
            def retries(self) -> int:
                return int(self.section.get("retries", 3))

    Relative paths in a section are resolved against :attr:`repo_root`.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self._repo_root = Path(repo_root) if repo_root is not None else None
        self._config = get_cached_config(repo_root=self._repo_root)

    @cached_property
    def repo_root(self) -> Path:
        if self._repo_root is not None:
            return self._repo_root
        from zcc.core.utils.paths import resolve_project_root

        return resolve_project_root()

    @abstractmethod
    def _config_section(self) -> str:
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        value = self._config.get(self._config_section())
        return value if isinstance(value, dict) else {}


__all__ = ["BaseDomainConfig"]
