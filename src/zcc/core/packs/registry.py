"""Aggregate several pack sources behind one lookup."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from zcc.core.exceptions import PackError, PackNotFoundError
from zcc.core.packs.models import PackDependencyResult, PackStructure
from zcc.core.packs.sources import GitHubPackSource, HttpPackSource, LocalPackSource, PackSource, parse_github_url

logger = logging.getLogger(__name__)


class PackRegistry:
    """Registered sources are consulted in insertion order; ``local`` comes first."""

    def __init__(self, *, local_source: Optional[PackSource] = None, register_local: bool = True) -> None:
        self._sources: Dict[str, PackSource] = {}
        self._cache: Dict[str, PackStructure] = {}
        if register_local:
            self.register_source("local", local_source or LocalPackSource())

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    def register_source(self, name: str, source: PackSource) -> None:
        self._sources[name] = source
        logger.debug("Registered pack source '%s' (%s)", name, source.source_type)

    def register_from_url(
        self,
        name: str,
        url: str,
        *,
        token: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> PackSource:
        """Register a GitHub source when ``url`` points at GitHub, else a plain HTTP source."""
        parsed = parse_github_url(url)
        source: PackSource
        if parsed:
            owner, repo = parsed
            source = GitHubPackSource(owner, repo, name=name, branch=branch, token=token)
        else:
            source = HttpPackSource(url, name=name, token=token)
        self.register_source(name, source)
        return source

    def get_source(self, name: str) -> Optional[PackSource]:
        return self._sources.get(name)

    def get_source_names(self) -> List[str]:
        return list(self._sources)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def list_available_packs(self) -> List[PackStructure]:
        """Load every pack from every source; the first source to provide a name wins."""
        packs: List[PackStructure] = []
        seen: Set[str] = set()
        for source_name, source in self._sources.items():
            try:
                names = source.list_packs()
            except Exception as e:
                logger.warning("Error listing packs from source '%s': %s", source_name, e)
                continue
            for pack_name in names:
                if pack_name in seen:
                    logger.debug("Pack '%s' already found in another source, skipping", pack_name)
                    continue
                try:
                    packs.append(self.load_pack(pack_name, source_name))
                    seen.add(pack_name)
                except Exception as e:
                    logger.warning("Failed to load pack '%s' from %s: %s", pack_name, source_name, e)
        logger.debug("Found %d total packs across all sources", len(packs))
        return packs

    def load_pack(self, name: str, preferred_source: Optional[str] = None) -> PackStructure:
        cache_key = f"{preferred_source}:{name}" if preferred_source else name
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        last_error: Optional[Exception] = None
        for source_name in [preferred_source] if preferred_source else list(self._sources):
            source = self._sources.get(source_name)
            if source is None:
                continue
            try:
                if source.has_pack(name):
                    pack = source.load_pack(name)
                    self._cache[cache_key] = pack
                    logger.debug("Loaded pack '%s' from '%s'", name, source_name)
                    return pack
            except Exception as e:
                last_error = e
                logger.debug("Failed to load pack '%s' from '%s': %s", name, source_name, e)

        raise PackNotFoundError(
            f"Pack '{name}' not found in any registered source",
            suggestion=f"Last error: {last_error}" if last_error else "No sources available",
        )

    def find_pack_source(self, name: str) -> Optional[Tuple[str, PackSource]]:
        for source_name, source in self._sources.items():
            try:
                if source.has_pack(name):
                    return source_name, source
            except Exception as e:
                logger.debug("Error checking for pack '%s' in '%s': %s", name, source_name, e)
        return None

    def has_pack(self, name: str) -> bool:
        return self.find_pack_source(name) is not None

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------
    def resolve_dependencies(self, name: str) -> PackDependencyResult:
        """Depth-first walk of ``name``'s dependencies.

        ``resolved`` is in install order (dependencies first) and excludes
        ``name`` itself. A cycle records the re-entered pack in ``circular``
        and the walk carries on with its siblings.
        """
        result = PackDependencyResult()
        visiting: Set[str] = set()
        visited: Set[str] = set()

        def visit(current: str, chain: List[str]) -> None:
            if current in visiting:
                result.circular.append(current)
                logger.warning("Circular dependency detected: %s", " -> ".join([*chain, current]))
                return
            if current in visited:
                return
            if not self.has_pack(current):
                result.missing.append(current)
                logger.warning("Missing dependency: %s", current)
                return

            visiting.add(current)
            try:
                pack = self.load_pack(current)
            except PackError as e:
                visiting.discard(current)
                result.missing.append(current)
                logger.error("Error resolving dependencies for '%s': %s", current, e)
                return
            for dependency in pack.manifest.dependencies:
                visit(dependency, [*chain, current])
            visiting.discard(current)
            visited.add(current)
            result.resolved.append(current)

        visit(name, [])
        if name in result.resolved:
            result.resolved.remove(name)
        return result

    def validate_dependencies(self, name: str) -> Dict[str, Any]:
        issues: List[str] = []
        deps = self.resolve_dependencies(name)
        if deps.missing:
            issues.append(f"Missing dependencies: {', '.join(deps.missing)}")
        if deps.circular:
            issues.append(f"Circular dependencies: {', '.join(deps.circular)}")
        return {"valid": not issues, "issues": issues}

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def search_packs(
        self,
        *,
        category: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        compatible_with: Optional[Iterable[str]] = None,
        author: Optional[str] = None,
    ) -> List[PackStructure]:
        """Filter available packs. All ``tags`` must match; any ``compatible_with`` entry may."""
        wanted_tags = list(tags or [])
        wanted_compat = list(compatible_with or [])
        matches: List[PackStructure] = []
        for pack in self.list_available_packs():
            m = pack.manifest
            if category and m.category != category:
                continue
            if wanted_tags and not all(t in m.tags for t in wanted_tags):
                continue
            if wanted_compat and not any(c in m.compatible_with for c in wanted_compat):
                continue
            if author and m.author != author:
                continue
            matches.append(pack)
        return matches

    def get_recommended_packs(self, project_type: str) -> List[PackStructure]:
        packs = self.search_packs(compatible_with=[project_type])
        return sorted(packs, key=lambda p: p.manifest.name)

    def get_registry_stats(self) -> Dict[str, Any]:
        packs = self.list_available_packs()
        categories: Dict[str, int] = {}
        authors: Dict[str, int] = {}
        for pack in packs:
            category = pack.manifest.category or "general"
            categories[category] = categories.get(category, 0) + 1
            authors[pack.manifest.author] = authors.get(pack.manifest.author, 0) + 1
        return {
            "totalPacks": len(packs),
            "sourceCount": len(self._sources),
            "categoryCounts": categories,
            "authorCounts": authors,
        }

    def clear_cache(self) -> None:
        self._cache.clear()
        for source in self._sources.values():
            clear = getattr(source, "clear_cache", None)
            if callable(clear):
                clear()
        logger.debug("Cleared pack cache")


__all__ = ["PackRegistry"]
