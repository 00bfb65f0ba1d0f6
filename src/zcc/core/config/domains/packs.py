"""Domain-specific configuration for starter packs and tool checks."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class PacksConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "packs"

    @cached_property
    def starter_packs_dir(self) -> Optional[Path]:
        """Override for the local starter packs directory (None = bundled)."""
        raw = str(self.section.get("starter_packs_dir") or "").strip()
        if not raw:
            return None
        path = Path(raw).expanduser()
        return path if path.is_absolute() else (self.repo_root / path)

    @cached_property
    def max_retries(self) -> int:
        return int(self.section.get("max_retries", 3))


class ToolsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "tools"

    @cached_property
    def check_timeout_seconds(self) -> float:
        return float(self.section.get("check_timeout_seconds", 5))
