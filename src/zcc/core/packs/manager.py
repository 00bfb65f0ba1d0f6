"""Top-level starter pack orchestration.

``install_pack`` works through an explicit queue instead of recursing into
dependencies: dependencies that are not yet installed are pushed to the front
of the queue and the dependent pack is re-queued at the back. Each pack gets
a bounded number of attempts.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Set

from zcc.core.config.domains import PacksConfig
from zcc.core.exceptions import PackNotFoundError
from zcc.core.packs.installer import PackInstaller
from zcc.core.packs.models import (
    PackDependencyResult,
    PackInstallationResult,
    PackInstallOptions,
    PackStructure,
    ValidationResult,
)
from zcc.core.packs.registry import PackRegistry
from zcc.core.packs.sources import LocalPackSource, PackSource
from zcc.core.packs.validator import PackValidator

logger = logging.getLogger(__name__)

MAX_RETRIES = 3


class StarterPackManager:
    def __init__(
        self,
        project_root: Path,
        *,
        registry: Optional[PackRegistry] = None,
        installer: Optional[PackInstaller] = None,
        validator: Optional[PackValidator] = None,
        max_retries: Optional[int] = None,
    ) -> None:
        self.project_root = Path(project_root)
        cfg = PacksConfig(repo_root=self.project_root)
        self.registry = registry or PackRegistry(local_source=LocalPackSource(cfg.starter_packs_dir))
        self.installer = installer or PackInstaller(self.project_root)
        self.validator = validator or PackValidator()
        self.max_retries = max_retries if max_retries is not None else (cfg.max_retries or MAX_RETRIES)

    @classmethod
    def from_source_registry(cls, project_root: Path, source_registry=None, **kwargs: Any) -> StarterPackManager:
        """Build a manager whose pack registry mirrors the configured sources.

        The default source is consulted first, then the rest by priority.
        """
        from zcc.core.sources.registry import SourceRegistry

        sources = source_registry or SourceRegistry(project_root)
        sources.initialize()
        registry = PackRegistry(register_local=False)
        for source_id, source in sources.iter_sources_in_lookup_order():
            registry.register_source(source_id, source)
        return cls(project_root, registry=registry, **kwargs)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_packs(self) -> List[PackStructure]:
        return self.registry.list_available_packs()

    def load_pack(self, name: str, source: Optional[str] = None) -> PackStructure:
        return self.registry.load_pack(name, source)

    def validate_pack(self, pack: PackStructure, source: PackSource) -> ValidationResult:
        return self.validator.validate_pack_structure(pack, source)

    def search_packs(self, **criteria: Any) -> List[PackStructure]:
        return self.registry.search_packs(**criteria)

    def get_recommended_packs(self, project_type: str) -> List[PackStructure]:
        return self.registry.get_recommended_packs(project_type)

    def has_pack(self, name: str) -> bool:
        return self.registry.has_pack(name)

    def resolve_dependencies(self, name: str) -> PackDependencyResult:
        return self.registry.resolve_dependencies(name)

    def register_pack_source(self, name: str, source: PackSource) -> None:
        self.registry.register_source(name, source)

    def get_registry_stats(self) -> Dict[str, Any]:
        return self.registry.get_registry_stats()

    def clear_cache(self) -> None:
        self.registry.clear_cache()

    def list_installed_packs(self) -> Dict[str, Dict[str, Any]]:
        return self.installer.list_installed_packs()

    # ------------------------------------------------------------------
    # Install / uninstall
    # ------------------------------------------------------------------
    def install_pack(self, name: str, options: Optional[PackInstallOptions] = None) -> PackInstallationResult:
        opts = options or PackInstallOptions()
        dep_opts = replace(opts, skip_optional=False, source=None)

        queue: Deque[str] = deque([name])
        installed: Set[str] = set()
        failed: Set[str] = set()
        attempts: Dict[str, int] = {}
        root_result: Optional[PackInstallationResult] = None

        while queue:
            current = queue.popleft()
            if current in installed or current in failed:
                continue
            is_root = current == name

            try:
                deps = self.registry.resolve_dependencies(current)
                if deps.missing or deps.circular:
                    errors = [f"Dependency '{d}' not found" for d in deps.missing]
                    errors += [f"Circular dependency: {d}" for d in deps.circular]
                    if is_root:
                        return PackInstallationResult.failure(*errors)
                    logger.warning("Cannot install dependency '%s': %s", current, "; ".join(errors))
                    failed.add(current)
                    continue

                pending = [d for d in deps.resolved if d not in installed and d not in failed]
                if pending:
                    logger.debug("Queueing dependencies of '%s': %s", current, ", ".join(pending))
                    queue.extendleft(reversed(pending))
                    queue.append(current)
                    continue

                for dep in deps.resolved:
                    if dep in failed:
                        logger.warning("Failed to install dependency '%s', continuing anyway", dep)

                result = self.install_pack_direct(current, opts if is_root else dep_opts)
            except Exception as e:
                logger.error("Failed to install pack '%s': %s", current, e)
                result = PackInstallationResult.failure(f"Installation failed: {e}")

            if result.success:
                installed.add(current)
                if is_root:
                    root_result = result
                continue

            attempts[current] = attempts.get(current, 0) + 1
            if attempts[current] < self.max_retries:
                logger.warning(
                    "Install of '%s' failed (attempt %d/%d), retrying",
                    current,
                    attempts[current],
                    self.max_retries,
                )
                queue.append(current)
                continue

            failed.add(current)
            if is_root:
                return PackInstallationResult.failure(
                    f"Failed to install pack '{name}' after {attempts[current]} attempts: {'; '.join(result.errors)}"
                )
            logger.warning("Giving up on dependency '%s' after %d attempts", current, attempts[current])

        if root_result is not None:
            return root_result
        return PackInstallationResult.failure(f"Failed to install pack '{name}'")

    def install_pack_direct(self, name: str, options: Optional[PackInstallOptions] = None) -> PackInstallationResult:
        """Load, validate and install ``name`` without touching its dependencies."""
        opts = options or PackInstallOptions()
        if opts.source:
            source = self.registry.get_source(opts.source)
            if source is None:
                raise PackNotFoundError(f"Pack source '{opts.source}' is not registered")
            source_name = opts.source
        else:
            found = self.registry.find_pack_source(name)
            if found is None:
                raise PackNotFoundError(f"Pack '{name}' not found in any registered source")
            source_name, source = found

        pack = self.registry.load_pack(name, source_name)
        validation = self.validator.validate_pack_structure(pack, source)
        for warning in validation.warnings:
            logger.warning("%s: %s", name, warning)
        if not validation.valid:
            return PackInstallationResult.failure(*validation.errors)
        return self.installer.install_pack(pack, source, opts)

    def uninstall_pack(self, name: str) -> PackInstallationResult:
        return self.installer.uninstall_pack(name)


__all__ = ["MAX_RETRIES", "StarterPackManager"]
