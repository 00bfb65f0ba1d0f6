from __future__ import annotations

from pathlib import Path

import pytest

from zcc.core.commands import CommandGenerator, CommandTemplate
from zcc.core.commands.generator import load_command_templates, required_scripts
from zcc.core.exceptions import FileSystemError


def _provide_scripts(project_root: Path) -> None:
    for rel in required_scripts():
        path = project_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\n", encoding="utf-8")


def test_bundled_templates() -> None:
    names = [t.name for t in load_command_templates()]
    assert names == ["ticket", "mode", "zcc"]
    assert required_scripts() == [".zcc/scripts/ticket-context.sh", ".zcc/scripts/mode-switch.sh"]


def test_missing_scripts_block_generation(project_root: Path) -> None:
    generator = CommandGenerator(project_root)

    with pytest.raises(FileSystemError) as exc:
        generator.initialize()

    assert exc.value.code == "MISSING_COMMAND_SCRIPTS"
    assert "  - .zcc/scripts/ticket-context.sh" in str(exc.value)
    assert exc.value.context["missing"] == required_scripts()
    assert not generator.are_commands_installed()


def test_force_generates_without_scripts(project_root: Path) -> None:
    written = CommandGenerator(project_root).initialize(force=True)
    assert [p.name for p in written] == ["ticket.md", "mode.md", "zcc.md"]


def test_rendered_frontmatter(project_root: Path) -> None:
    _provide_scripts(project_root)
    generator = CommandGenerator(project_root)
    generator.initialize()

    ticket = generator.command_path("ticket").read_text(encoding="utf-8")
    assert ticket.startswith(
        "---\n"
        "allowed-tools: Bash(sh .zcc/scripts/ticket-context.sh)\n"
        "argument-hint: [ticket-name]\n"
        "description: Manage tickets stored as .md files in .zcc/tickets/ directories\n"
        "---\n\n# Ticket Management\n"
    )
    assert "!`sh .zcc/scripts/ticket-context.sh $ARGUMENTS`" in ticket

    status = generator.command_path("zcc").read_text(encoding="utf-8")
    assert "argument-hint" not in status
    assert "allowed-tools: Bash(zcc pack list), Bash(ls:.zcc/modes/)" in status
    assert status.endswith("\n") and not status.endswith("\n\n")


def test_render_single_template(project_root: Path) -> None:
    generator = CommandGenerator(project_root)
    text = generator.render(CommandTemplate(name="x", description="Demo", allowed_tools=["Read"], body="Hello"))
    assert text == "---\nallowed-tools: Read\ndescription: Demo\n---\n\nHello\n"


def test_status_and_cleanup(project_root: Path) -> None:
    _provide_scripts(project_root)
    generator = CommandGenerator(project_root)
    assert generator.cleanup() is False

    generator.initialize()
    assert generator.are_commands_installed()
    generator.command_path("mode").unlink()
    assert generator.installed_commands() == ["ticket", "zcc"]

    assert generator.cleanup() is True
    assert not (project_root / ".claude" / "commands").exists()
