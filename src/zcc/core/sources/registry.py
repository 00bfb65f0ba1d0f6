"""Configured pack sources for a project.

Persisted at ``.zcc/sources.json``::

    {"sources": [{"id", "type", "enabled", "priority", "config"}], "defaultSource": "local"}

The ``local`` source always exists and can be neither removed nor disabled.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from zcc.core.config.domains import PacksConfig
from zcc.core.exceptions import ConfigurationError, SourceError, SourceNotFoundError
from zcc.core.packs.sources import GitHubPackSource, HttpPackSource, LocalPackSource, PackSource
from zcc.core.sources.models import (
    LOCAL_SOURCE_ID,
    SourceConfig,
    SourceRegistryConfig,
    default_local_source,
)
from zcc.core.utils.io import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class SourceRegistry:
    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root)
        self.config_path = self.project_root / ".zcc" / "sources.json"
        self._configs: Dict[str, SourceConfig] = {}
        self._sources: Dict[str, PackSource] = {}
        self._default_id = LOCAL_SOURCE_ID

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        self._load()
        self._sources.clear()
        for source_id, cfg in self._configs.items():
            if not cfg.enabled:
                continue
            try:
                self._sources[source_id] = self.create_source(cfg)
            except Exception as e:
                logger.warning("Failed to initialize source %s: %s", source_id, e)

    def _load(self) -> None:
        registry_cfg: Optional[SourceRegistryConfig] = None
        if self.config_path.exists():
            try:
                registry_cfg = SourceRegistryConfig.from_dict(read_json(self.config_path))
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Failed to load source configuration, using defaults: %s", e)

        needs_save = registry_cfg is None
        if registry_cfg is None:
            registry_cfg = SourceRegistryConfig.defaults()

        self._configs = {cfg.id: cfg for cfg in registry_cfg.sources}
        if LOCAL_SOURCE_ID not in self._configs:
            self._configs = {LOCAL_SOURCE_ID: default_local_source(), **self._configs}
            needs_save = True
        self._default_id = registry_cfg.default_source or LOCAL_SOURCE_ID
        if self._default_id not in self._configs:
            self._default_id = LOCAL_SOURCE_ID
        if needs_save:
            self.save()

    def save(self) -> None:
        cfg = SourceRegistryConfig(sources=list(self._configs.values()), default_source=self._default_id)
        write_json_atomic(self.config_path, cfg.to_dict())

    def create_source(self, config: SourceConfig) -> PackSource:
        """Instantiate the pack source described by ``config``."""
        options = config.config
        if config.type == "local":
            path = options.get("path")
            if path:
                return LocalPackSource(Path(path))
            return LocalPackSource(PacksConfig(repo_root=self.project_root).starter_packs_dir)
        if config.type == "github":
            if not options.get("owner") or not options.get("repo"):
                raise ConfigurationError(
                    f"GitHub source '{config.id}' requires owner and repo",
                    suggestion="Pass --owner and --repo",
                )
            return GitHubPackSource(
                options["owner"],
                options["repo"],
                name=config.id,
                branch=options.get("branch"),
                directory=options.get("directory"),
                token=options.get("token"),
            )
        if config.type == "http":
            if not options.get("url"):
                raise ConfigurationError(f"HTTP source '{config.id}' requires a url", suggestion="Pass --url")
            return HttpPackSource(options["url"], name=config.id, token=options.get("token"))
        if config.type == "custom":
            raise ConfigurationError(f"Custom source type is not supported (source '{config.id}')")
        raise ConfigurationError(f"Unknown source type: {config.type}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def _require(self, source_id: str) -> SourceConfig:
        cfg = self._configs.get(source_id)
        if cfg is None:
            raise SourceNotFoundError(f"Source '{source_id}' not found")
        return cfg

    def add_source(self, config: SourceConfig) -> None:
        if config.id in self._configs:
            raise SourceError(f"Source with ID {config.id} already exists", "SOURCE_EXISTS")
        source = self.create_source(config)
        try:
            source.list_packs()
        except Exception as e:
            raise SourceError(f"Source {config.id} is not accessible: {e}", "SOURCE_UNREACHABLE") from e

        self._configs[config.id] = config
        if config.enabled:
            self._sources[config.id] = source
        self.save()
        logger.info("Added pack source '%s' (%s)", config.id, config.type)

    def remove_source(self, source_id: str) -> None:
        if source_id == LOCAL_SOURCE_ID:
            raise SourceError("Cannot remove the local source", "SOURCE_PROTECTED")
        self._require(source_id)
        self._configs.pop(source_id)
        self._sources.pop(source_id, None)
        if self._default_id == source_id:
            self._default_id = LOCAL_SOURCE_ID
        self.save()

    def update_source(self, source_id: str, changes: Mapping[str, Any]) -> SourceConfig:
        current = self._require(source_id)
        fields = {k: v for k, v in changes.items() if k in ("type", "enabled", "priority", "config")}
        if source_id == LOCAL_SOURCE_ID and fields.get("enabled") is False:
            raise SourceError("Cannot disable the local source", "SOURCE_PROTECTED")

        updated = replace(current, **fields)
        if updated.enabled and ("type" in fields or "config" in fields or source_id not in self._sources):
            self._sources[source_id] = self.create_source(updated)
        elif not updated.enabled:
            self._sources.pop(source_id, None)

        self._configs[source_id] = updated
        self.save()
        return updated

    def enable_source(self, source_id: str) -> SourceConfig:
        return self.update_source(source_id, {"enabled": True})

    def disable_source(self, source_id: str) -> SourceConfig:
        return self.update_source(source_id, {"enabled": False})

    def set_default_source(self, source_id: str) -> None:
        cfg = self._require(source_id)
        if not cfg.enabled:
            raise SourceError(f"Source '{source_id}' is disabled. Enable it first.", "SOURCE_DISABLED")
        self._default_id = source_id
        self.save()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_default_source(self) -> str:
        return self._default_id

    def get_source(self, source_id: str) -> Optional[PackSource]:
        return self._sources.get(source_id)

    def get_source_config(self, source_id: str) -> Optional[SourceConfig]:
        return self._configs.get(source_id)

    def list_sources(self) -> List[SourceConfig]:
        return sorted(self._configs.values(), key=lambda c: (c.priority, c.id))

    def list_all_packs(self) -> Dict[str, List[str]]:
        packs: Dict[str, List[str]] = {}
        for source_id, source in self._sources.items():
            try:
                packs[source_id] = source.list_packs()
            except Exception as e:
                logger.warning("Failed to list packs from source %s: %s", source_id, e)
                packs[source_id] = []
        return packs

    def iter_sources_in_lookup_order(self) -> Iterator[Tuple[str, PackSource]]:
        """Yield the default source, then other enabled sources by ascending priority."""
        default = self._sources.get(self._default_id)
        if default is not None:
            yield self._default_id, default
        for cfg in self.list_sources():
            if cfg.id == self._default_id or not cfg.enabled:
                continue
            source = self._sources.get(cfg.id)
            if source is not None:
                yield cfg.id, source

    def find_pack(self, name: str) -> Optional[Tuple[str, PackSource]]:
        for source_id, source in self.iter_sources_in_lookup_order():
            if source.has_pack(name):
                return source_id, source
        return None


__all__ = ["SourceRegistry"]
