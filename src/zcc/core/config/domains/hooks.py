"""Domain-specific configuration for the hook subsystem."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class HooksConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "hooks"

    @cached_property
    def default_timeout_ms(self) -> int:
        """Timeout applied to hooks that do not declare one."""
        return int(self.section.get("default_timeout_ms", 30000))

    @cached_property
    def settings_file(self) -> str:
        """File name under ``.claude/`` that receives generated hook wiring."""
        return str(self.section.get("settings_file") or "settings.toml")

    @cached_property
    def section_header(self) -> str:
        return str(self.section.get("section_header") or "# zcc Hooks")
