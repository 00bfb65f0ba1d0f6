from __future__ import annotations

from pathlib import Path

import pytest

from helpers.packs import make_manifest, make_pack

from zcc.core.exceptions import PackNotFoundError
from zcc.core.packs.registry import PackRegistry
from zcc.core.packs.sources import GitHubPackSource, HttpPackSource, LocalPackSource


def _registry(packs_dir: Path) -> PackRegistry:
    return PackRegistry(local_source=LocalPackSource(packs_dir))


def _pack(packs_dir: Path, name: str, deps=(), **fields) -> None:
    make_pack(packs_dir, name, manifest=make_manifest(name, dependencies=list(deps), **fields))


class TestLookup:
    def test_first_source_wins(self, tmp_path: Path) -> None:
        first = tmp_path / "first"
        second = tmp_path / "second"
        make_pack(first, "shared", manifest=make_manifest("shared", version="1.0.0"))
        make_pack(second, "shared", manifest=make_manifest("shared", version="2.0.0"))
        make_pack(second, "only-second")
        registry = PackRegistry(local_source=LocalPackSource(first))
        registry.register_source("team", LocalPackSource(second))

        packs = {p.name: p.manifest.version for p in registry.list_available_packs()}

        assert packs == {"shared": "1.0.0", "only-second": "1.0.0"}
        assert registry.find_pack_source("only-second")[0] == "team"
        assert registry.load_pack("shared", "team").manifest.version == "2.0.0"

    def test_unknown_pack_raises(self, packs_dir: Path) -> None:
        with pytest.raises(PackNotFoundError, match="not found in any registered source"):
            _registry(packs_dir).load_pack("ghost")

    def test_register_from_url_picks_source_kind(self, packs_dir: Path) -> None:
        registry = _registry(packs_dir)
        gh = registry.register_from_url("gh", "https://github.com/acme/packs")
        plain = registry.register_from_url("web", "https://packs.example.com")
        assert isinstance(gh, GitHubPackSource)
        assert (gh.owner, gh.repo) == ("acme", "packs")
        assert isinstance(plain, HttpPackSource)
        assert registry.get_source_names() == ["local", "gh", "web"]

    def test_broken_pack_is_skipped_in_listing(self, packs_dir: Path) -> None:
        _pack(packs_dir, "good")
        broken = packs_dir / "broken"
        (broken / "components").mkdir(parents=True)
        (broken / "manifest.json").write_text("{", encoding="utf-8")

        assert [p.name for p in _registry(packs_dir).list_available_packs()] == ["good"]


class TestDependencies:
    def test_chain_resolves_in_install_order(self, packs_dir: Path) -> None:
        _pack(packs_dir, "a", ["b"])
        _pack(packs_dir, "b", ["c"])
        _pack(packs_dir, "c")

        result = _registry(packs_dir).resolve_dependencies("a")

        assert result.resolved == ["c", "b"]
        assert result.missing == []
        assert result.circular == []

    def test_cycle_is_reported(self, packs_dir: Path) -> None:
        _pack(packs_dir, "a", ["b"])
        _pack(packs_dir, "b", ["a"])

        result = _registry(packs_dir).resolve_dependencies("a")

        assert result.circular == ["a"]
        assert result.ok is False

    def test_missing_dependency(self, packs_dir: Path) -> None:
        _pack(packs_dir, "a", ["nowhere"])
        registry = _registry(packs_dir)

        assert registry.resolve_dependencies("a").missing == ["nowhere"]
        assert registry.validate_dependencies("a") == {
            "valid": False,
            "issues": ["Missing dependencies: nowhere"],
        }

    def test_diamond_visits_shared_dependency_once(self, packs_dir: Path) -> None:
        _pack(packs_dir, "top", ["left", "right"])
        _pack(packs_dir, "left", ["base"])
        _pack(packs_dir, "right", ["base"])
        _pack(packs_dir, "base")

        assert _registry(packs_dir).resolve_dependencies("top").resolved == ["base", "left", "right"]


class TestSearch:
    def test_filters_combine(self, packs_dir: Path) -> None:
        _pack(packs_dir, "web", category="frontend", tags=["react", "ts"], compatibleWith=["claude"])
        _pack(packs_dir, "api", category="backend", tags=["python"], author="someone")
        _pack(packs_dir, "ui", category="frontend", tags=["react"])
        registry = _registry(packs_dir)

        assert [p.name for p in registry.search_packs(category="frontend")] == ["ui", "web"]
        assert [p.name for p in registry.search_packs(tags=["react", "ts"])] == ["web"]
        assert [p.name for p in registry.search_packs(compatible_with=["claude", "other"])] == ["web"]
        assert [p.name for p in registry.search_packs(author="someone")] == ["api"]
        assert [p.name for p in registry.get_recommended_packs("claude")] == ["web"]

    def test_stats(self, packs_dir: Path) -> None:
        _pack(packs_dir, "one", category="backend")
        _pack(packs_dir, "two")
        stats = _registry(packs_dir).get_registry_stats()
        assert stats == {
            "totalPacks": 2,
            "sourceCount": 1,
            "categoryCounts": {"backend": 1, "general": 1},
            "authorCounts": {"tests": 2},
        }
