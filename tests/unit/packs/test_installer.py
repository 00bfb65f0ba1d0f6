from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path

from helpers.packs import make_manifest, make_pack

from zcc.core.packs.installer import PackInstaller
from zcc.core.packs.models import PackInstallOptions
from zcc.core.packs.sources import LocalPackSource


def _load(packs_dir: Path, name: str):
    source = LocalPackSource(packs_dir)
    return source.load_pack(name), source


def _read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class _FailOnceHookManager:
    def __init__(self) -> None:
        self.calls = 0

    def configure_pack_hooks(self, pack_name, hooks):
        self.calls += 1
        if self.calls == 1:
            raise OSError("disk full")
        return []

    def remove_hook(self, hook_id) -> None:
        pass


class TestInstall:
    def test_components_land_in_fixed_locations(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            components={
                "modes": [{"name": "engineer", "required": True}],
                "workflows": [{"name": "review"}],
                "agents": [{"name": "researcher"}],
            },
        )
        make_pack(packs_dir, "demo", manifest=manifest, contents={"modes/engineer": "# Engineer\n"})
        pack, source = _load(packs_dir, "demo")

        result = PackInstaller(project_root).install_pack(pack, source)

        assert result.success, result.errors
        assert result.installed["modes"] == ["engineer"]
        assert result.installed["workflows"] == ["review"]
        assert result.installed["agents"] == ["researcher"]
        assert (project_root / ".zcc/modes/engineer.md").read_text(encoding="utf-8") == "# Engineer\n"
        assert (project_root / ".zcc/workflows/review.md").is_file()
        assert (project_root / ".claude/agents/researcher.md").is_file()

        registry = _read_json(project_root / ".zcc/file-registry.json")
        assert registry["files"][".zcc/modes/engineer.md"]["pack"] == "demo"
        assert registry["files"][".zcc/modes/engineer.md"]["originalPath"] == "modes/engineer.md"
        assert registry["packs"]["demo"]["version"] == "1.0.0"

        installed = _read_json(project_root / ".zcc/packs.json")["packs"]["demo"]
        assert installed["version"] == "1.0.0"
        assert installed["source"]["type"] == "local"
        assert (project_root / ".zcc/packs/demo.manifest.json").is_file()

    def test_dry_run_writes_nothing(self, project_root: Path, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo")
        pack, source = _load(packs_dir, "demo")

        result = PackInstaller(project_root).install_pack(pack, source, PackInstallOptions(dry_run=True))

        assert result.success
        assert result.installed["modes"] == ["demo-mode"]
        assert not (project_root / ".zcc/modes").exists()
        assert not (project_root / ".zcc/file-registry.json").exists()
        assert not (project_root / ".zcc/packs.json").exists()

    def test_skip_optional_components(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            components={"modes": [{"name": "core", "required": True}, {"name": "extra"}]},
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")

        result = PackInstaller(project_root).install_pack(pack, source, PackInstallOptions(skip_optional=True))

        assert result.installed["modes"] == ["core"]
        assert result.skipped["modes"] == ["extra"]
        assert not (project_root / ".zcc/modes/extra.md").exists()

    def test_untracked_existing_file_skipped_unless_forced(self, project_root: Path, packs_dir: Path) -> None:
        existing = project_root / ".zcc/modes/demo-mode.md"
        existing.parent.mkdir(parents=True, exist_ok=True)
        existing.write_text("mine\n", encoding="utf-8")
        make_pack(packs_dir, "demo")
        pack, source = _load(packs_dir, "demo")

        result = PackInstaller(project_root).install_pack(pack, source)
        assert result.skipped["modes"] == ["demo-mode"]
        assert existing.read_text(encoding="utf-8") == "mine\n"

        forced = PackInstaller(project_root).install_pack(pack, source, PackInstallOptions(force=True))
        assert forced.installed["modes"] == ["demo-mode"]
        assert existing.read_text(encoding="utf-8") == "# demo-mode\n"

    def test_conflict_with_other_pack_fails(self, project_root: Path, packs_dir: Path) -> None:
        shared = {"modes": [{"name": "shared", "required": True}]}
        make_pack(packs_dir, "first", manifest=make_manifest("first", components=shared))
        make_pack(packs_dir, "second", manifest=make_manifest("second", components=shared))
        installer = PackInstaller(project_root)

        first, source = _load(packs_dir, "first")
        assert installer.install_pack(first, source).success

        second, _ = _load(packs_dir, "second")
        result = installer.install_pack(second, source)

        assert result.success is False
        assert result.errors == ["Conflict: Mode 'shared' conflicts with pack 'first'"]

    def test_reinstall_of_same_pack_is_not_a_conflict(self, project_root: Path, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo")
        pack, source = _load(packs_dir, "demo")
        installer = PackInstaller(project_root)
        assert installer.install_pack(pack, source).success

        again = installer.install_pack(pack, source, PackInstallOptions(force=True))
        assert again.success
        assert again.installed["modes"] == ["demo-mode"]

    def test_unforced_reinstall_rewrites_nothing(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            components={"modes": [{"name": "demo-mode", "required": True}], "workflows": [{"name": "review"}]},
        )
        make_pack(packs_dir, "demo", manifest=manifest, scripts={"hello.sh": "#!/bin/sh\necho hello\n"})
        pack, source = _load(packs_dir, "demo")
        installer = PackInstaller(project_root)
        assert installer.install_pack(pack, source).success
        files = [
            project_root / ".zcc/modes/demo-mode.md",
            project_root / ".zcc/workflows/review.md",
            project_root / ".zcc/scripts/hello.sh",
        ]
        before = {p: (p.stat().st_mtime_ns, p.read_bytes()) for p in files}

        again = installer.install_pack(pack, source)

        assert again.success, again.errors
        assert all(not names for names in again.installed.values())
        assert again.skipped["modes"] == ["demo-mode"]
        assert again.skipped["workflows"] == ["review"]
        assert {p: (p.stat().st_mtime_ns, p.read_bytes()) for p in files} == before

    def test_recorded_checksums_match_file_bytes(self, project_root: Path, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo", contents={"modes/demo-mode": "# Demo\n\nbody text\n"})
        pack, source = _load(packs_dir, "demo")

        assert PackInstaller(project_root).install_pack(pack, source).success

        target = project_root / ".zcc/modes/demo-mode.md"
        info = _read_json(project_root / ".zcc/file-registry.json")["files"][".zcc/modes/demo-mode.md"]
        assert info["checksum"] == "sha256:" + hashlib.sha256(target.read_bytes()).hexdigest()

    def test_forced_takeover_moves_ownership(self, project_root: Path, packs_dir: Path) -> None:
        shared = {"modes": [{"name": "shared", "required": True}]}
        make_pack(packs_dir, "a", manifest=make_manifest("a", components=shared), contents={"modes/shared": "# from a\n"})
        make_pack(packs_dir, "b", manifest=make_manifest("b", components=shared), contents={"modes/shared": "# from b\n"})
        installer = PackInstaller(project_root)
        first, source = _load(packs_dir, "a")
        assert installer.install_pack(first, source).success
        second, _ = _load(packs_dir, "b")
        assert installer.install_pack(second, source, PackInstallOptions(force=True)).success

        registry = _read_json(project_root / ".zcc/file-registry.json")
        assert registry["files"][".zcc/modes/shared.md"]["pack"] == "b"
        assert registry["packs"]["a"]["files"] == []

        assert PackInstaller(project_root).uninstall_pack("a").success
        assert (project_root / ".zcc/modes/shared.md").read_text(encoding="utf-8") == "# from b\n"

    def test_files_stay_tracked_when_a_later_step_fails(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            hooks=[{"name": "greet", "event": "SessionStart", "command": "echo hi"}],
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")
        hooks = _FailOnceHookManager()
        installer = PackInstaller(project_root, hook_manager=hooks)

        failed = installer.install_pack(pack, source)
        assert failed.success is False
        assert failed.errors == ["Installation failed: disk full"]
        assert installer.file_registry.get_pack_files("demo") == [".zcc/modes/demo-mode.md"]

        retried = installer.install_pack(pack, source)
        assert retried.success, retried.errors
        assert retried.skipped["modes"] == ["demo-mode"]
        assert installer.file_registry.get_pack_files("demo") == [".zcc/modes/demo-mode.md"]

        assert installer.uninstall_pack("demo").success
        assert not (project_root / ".zcc/modes/demo-mode.md").exists()

    def test_scripts_are_installed_executable(self, project_root: Path, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo", scripts={"hello.sh": "#!/bin/sh\necho hello\n", "notes.txt": "plain\n"})
        pack, source = _load(packs_dir, "demo")

        assert PackInstaller(project_root).install_pack(pack, source).success

        script = project_root / ".zcc/scripts/hello.sh"
        assert script.read_text(encoding="utf-8") == "#!/bin/sh\necho hello\n"
        assert os.access(script, os.X_OK)
        assert (project_root / ".zcc/scripts/notes.txt").is_file()
        registry = _read_json(project_root / ".zcc/file-registry.json")
        assert registry["files"][".zcc/scripts/hello.sh"]["originalPath"] == "scripts/hello.sh"

    def test_configuration_merged_without_overriding_default_mode(self, project_root: Path, packs_dir: Path) -> None:
        config_path = project_root / ".zcc/config.json"
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps({"defaultMode": "existing", "keep": 1}), encoding="utf-8")
        manifest = make_manifest(
            "demo",
            configuration={"defaultMode": "demo-mode", "projectSettings": {"ticketsDir": "tickets"}},
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")

        assert PackInstaller(project_root).install_pack(pack, source).success

        assert _read_json(config_path) == {"defaultMode": "existing", "keep": 1, "ticketsDir": "tickets"}
        snapshot = _read_json(project_root / ".zcc/packs/demo.manifest.json")
        assert snapshot["appliedConfiguration"] == {"ticketsDir": "tickets"}

    def test_post_install_commands_are_never_run(self, project_root: Path, packs_dir: Path) -> None:
        marker = project_root / "ran.txt"
        manifest = make_manifest(
            "demo",
            postInstall={"message": "Welcome!", "commands": [f"touch {marker}"]},
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")

        result = PackInstaller(project_root).install_pack(pack, source)

        assert result.success
        assert result.post_install_message == "Welcome!"
        assert not marker.exists()

    def test_manifest_hooks_are_configured(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            hooks=[{"name": "greet", "event": "SessionStart", "command": "echo hi"}],
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")

        assert PackInstaller(project_root).install_pack(pack, source).success

        definition = _read_json(project_root / ".zcc/hooks/definitions/demo-greet.json")
        assert definition["hooks"][0]["command"] == "echo hi"
        settings = (project_root / ".claude/settings.toml").read_text(encoding="utf-8")
        assert 'command = "echo hi"' in settings
        snapshot = _read_json(project_root / ".zcc/packs/demo.manifest.json")
        assert snapshot["configuredHooks"] == ["demo-greet"]


class TestUninstall:
    def test_not_installed_fails(self, project_root: Path) -> None:
        result = PackInstaller(project_root).uninstall_pack("ghost")
        assert result.success is False
        assert result.errors == ["Pack 'ghost' is not installed"]

    def test_removes_pristine_and_keeps_modified(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            components={"modes": [{"name": "a", "required": True}, {"name": "b"}]},
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")
        assert PackInstaller(project_root).install_pack(pack, source).success
        edited = project_root / ".zcc/modes/b.md"
        edited.write_text("user notes\n", encoding="utf-8")

        result = PackInstaller(project_root).uninstall_pack("demo")

        assert result.success, result.errors
        assert result.installed["modes"] == ["a"]
        assert result.skipped["modes"] == ["b"]
        assert not (project_root / ".zcc/modes/a.md").exists()
        assert edited.read_text(encoding="utf-8") == "user notes\n"
        assert "demo" not in _read_json(project_root / ".zcc/packs.json")["packs"]
        assert not (project_root / ".zcc/packs/demo.manifest.json").exists()
        registry = _read_json(project_root / ".zcc/file-registry.json")
        assert registry["files"][".zcc/modes/b.md"]["pack"] == ""
        assert "demo" not in registry["packs"]

    def test_reverts_only_unchanged_configuration(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            configuration={"defaultMode": "demo-mode", "projectSettings": {"ticketsDir": "tickets", "lang": "en"}},
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")
        assert PackInstaller(project_root).install_pack(pack, source).success
        config_path = project_root / ".zcc/config.json"
        config = _read_json(config_path)
        config["lang"] = "fr"
        config_path.write_text(json.dumps(config), encoding="utf-8")

        PackInstaller(project_root).uninstall_pack("demo")

        assert _read_json(config_path) == {"lang": "fr"}

    def test_removes_configured_hooks(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest(
            "demo",
            hooks=[{"name": "greet", "event": "SessionStart", "command": "echo hi"}],
        )
        make_pack(packs_dir, "demo", manifest=manifest)
        pack, source = _load(packs_dir, "demo")
        assert PackInstaller(project_root).install_pack(pack, source).success

        result = PackInstaller(project_root).uninstall_pack("demo")

        assert result.success, result.errors
        assert not (project_root / ".zcc/hooks/definitions/demo-greet.json").exists()
        settings = (project_root / ".claude/settings.toml").read_text(encoding="utf-8")
        assert "echo hi" not in settings

    def test_reinstall_keeps_default_mode_revertible(self, project_root: Path, packs_dir: Path) -> None:
        manifest = make_manifest("d", configuration={"defaultMode": "d-mode"})
        make_pack(packs_dir, "d", manifest=manifest)
        pack, source = _load(packs_dir, "d")
        installer = PackInstaller(project_root)
        assert installer.install_pack(pack, source).success
        assert installer.install_pack(pack, source).success

        snapshot = _read_json(project_root / ".zcc/packs/d.manifest.json")
        assert snapshot["appliedConfiguration"] == {"defaultMode": "d-mode"}

        assert installer.uninstall_pack("d").success
        assert _read_json(project_root / ".zcc/config.json") == {}
