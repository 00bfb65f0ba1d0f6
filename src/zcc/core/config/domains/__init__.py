"""Domain-specific configuration accessors."""
from __future__ import annotations

from .hooks import HooksConfig
from .http import GitHubConfig, HttpConfig
from .logging import LoggingConfig
from .packs import PacksConfig, ToolsConfig

__all__ = [
    "HooksConfig",
    "HttpConfig",
    "GitHubConfig",
    "LoggingConfig",
    "PacksConfig",
    "ToolsConfig",
]
