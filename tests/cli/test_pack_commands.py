from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.cli import run_command, run_json
from helpers.io_utils import write_yaml
from helpers.packs import make_manifest, make_pack

from zcc.cli.pack import install as pack_install
from zcc.cli.pack import list as pack_list
from zcc.cli.pack import search as pack_search
from zcc.cli.pack import show as pack_show
from zcc.cli.pack import uninstall as pack_uninstall
from zcc.cli.pack import validate as pack_validate


@pytest.fixture
def library(project_root: Path, packs_dir: Path) -> Path:
    """Point the local source at ``packs_dir`` and fill it with two packs."""
    write_yaml(project_root / ".zcc/config/packs.yaml", {"packs": {"starter_packs_dir": str(packs_dir)}})
    make_pack(packs_dir, "base", manifest=make_manifest("base", category="core", tags=["python"]))
    make_pack(
        packs_dir,
        "web",
        manifest=make_manifest("web", dependencies=["base"], tags=["python", "web"], compatibleWith=["django"]),
    )
    return packs_dir


def test_list_available(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_list, [], project_root, capsys)
    assert code == 0
    assert {p["name"] for p in payload["packs"]} == {"base", "web"}

    run_command(pack_list, [], project_root)
    assert "  web v1.0.0 - Test starter pack web" in capsys.readouterr().out


def test_show_includes_dependencies(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_show, ["web"], project_root, capsys)

    assert code == 0
    assert payload["manifest"]["name"] == "web"
    assert payload["dependencies"]["resolved"] == ["base"]
    assert payload["installed"] is False


def test_show_unknown_pack(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_show, ["ghost"], project_root, capsys)
    assert code == 1
    assert payload["error"] == "pack_show_error"
    assert payload["code"] == "PACK_NOT_FOUND"


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["--tag", "python"], {"base", "web"}),
        (["--tag", "python", "--tag", "web"], {"web"}),
        (["--category", "core"], {"base"}),
        (["--compatible-with", "rails", "--compatible-with", "django"], {"web"}),
        (["--author", "nobody"], set()),
    ],
)
def test_search(project_root: Path, library: Path, capsys, argv, expected) -> None:
    code, payload = run_json(pack_search, argv, project_root, capsys)
    assert code == 0
    assert {p["name"] for p in payload["packs"]} == expected


def test_install_with_dependencies_then_uninstall(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_install, ["web"], project_root, capsys)

    assert code == 0
    assert payload["success"] is True
    assert (project_root / ".zcc/modes/base-mode.md").is_file()
    assert (project_root / ".zcc/modes/web-mode.md").is_file()

    _, installed = run_json(pack_list, ["--installed"], project_root, capsys)
    assert set(installed["installed"]) == {"base", "web"}

    records = json.loads((project_root / ".zcc/security/trust-records.json").read_text(encoding="utf-8"))
    assert [r["packName"] for r in records] == ["web"]

    code, payload = run_json(pack_uninstall, ["web"], project_root, capsys)
    assert code == 0
    assert payload["success"] is True
    assert not (project_root / ".zcc/modes/web-mode.md").exists()
    assert (project_root / ".zcc/modes/base-mode.md").exists()


def test_install_dry_run_writes_nothing(project_root: Path, library: Path, capsys) -> None:
    run_command(pack_install, ["base", "--dry-run"], project_root)

    assert "✓ Would install pack 'base'" in capsys.readouterr().out
    assert not (project_root / ".zcc/modes/base-mode.md").exists()


def test_hooks_from_untrusted_author_need_consent(project_root: Path, library: Path, capsys) -> None:
    make_pack(
        library,
        "hooked",
        manifest=make_manifest("hooked", hooks=[{"name": "greet", "event": "SessionStart", "command": "echo hi"}]),
    )

    code, payload = run_json(pack_install, ["hooked"], project_root, capsys)
    assert code == 1
    assert payload["code"] == "CONSENT_REQUIRED"
    assert "--yes" in payload["suggestion"]
    assert not (project_root / ".zcc/modes/hooked-mode.md").exists()

    code, payload = run_json(pack_install, ["hooked", "--yes"], project_root, capsys)
    assert code == 0
    assert any("hooks" in w for w in payload["warnings"])
    assert (project_root / ".zcc/hooks/definitions/hooked-greet.json").is_file()


def test_install_unknown_pack(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_install, ["ghost"], project_root, capsys)
    assert code == 1
    assert payload["code"] == "PACK_NOT_FOUND"


def test_uninstall_not_installed(project_root: Path, library: Path, capsys) -> None:
    run_command(pack_uninstall, ["base"], project_root)
    assert "Pack 'base' is not installed" in capsys.readouterr().err


def test_validate(project_root: Path, library: Path, capsys) -> None:
    code, payload = run_json(pack_validate, ["web"], project_root, capsys)
    assert code == 0
    assert payload["valid"] is True
    assert payload["dependencyIssues"] == []


def test_validate_reports_missing_component(project_root: Path, library: Path, capsys) -> None:
    (library / "base" / "components" / "modes" / "base-mode.md").unlink()

    code, payload = run_json(pack_validate, ["base"], project_root, capsys)

    assert code == 1
    assert payload["valid"] is False
    assert payload["errors"]


def test_bundled_packs_listed_without_config(project_root: Path, capsys) -> None:
    code, payload = run_json(pack_list, [], project_root, capsys)
    assert code == 0
    assert "essentials" in {p["name"] for p in payload["packs"]}
