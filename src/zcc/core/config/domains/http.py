"""Domain-specific configuration for remote pack sources."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class HttpConfig(BaseDomainConfig):
    """Timeouts and retry policy for HTTP requests."""

    def _config_section(self) -> str:
        return "http"

    @cached_property
    def timeout_seconds(self) -> float:
        return float(self.section.get("timeout_seconds", 30))

    @cached_property
    def retries(self) -> int:
        return int(self.section.get("retries", 3))

    @cached_property
    def retry_delay_seconds(self) -> float:
        return float(self.section.get("retry_delay_seconds", 1.0))

    @cached_property
    def user_agent(self) -> str:
        return str(self.section.get("user_agent") or "zcc/1.0.0")


class GitHubConfig(BaseDomainConfig):
    """Defaults for GitHub pack sources."""

    def _config_section(self) -> str:
        return "github"

    @cached_property
    def api_base(self) -> str:
        return str(self.section.get("api_base") or "https://api.github.com").rstrip("/")

    @cached_property
    def branch(self) -> str:
        return str(self.section.get("branch") or "main")

    @cached_property
    def directory(self) -> str:
        return str(self.section.get("directory") or "packs")

    @cached_property
    def cache_ttl_seconds(self) -> float:
        return float(self.section.get("cache_ttl_seconds", 300))
