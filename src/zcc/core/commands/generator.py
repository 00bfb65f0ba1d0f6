"""Generate Claude slash commands under ``.claude/commands``.

Command definitions and the markdown template are bundled in
``zcc/data/commands`` and rendered with Jinja2.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined

from zcc.core.context import ProjectContext
from zcc.core.exceptions import FileSystemError
from zcc.core.utils.io import ensure_directory, write_text
from zcc.data import get_data_path, read_yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandTemplate:
    name: str
    description: str
    allowed_tools: List[str] = field(default_factory=list)
    argument_hint: Optional[str] = None
    body: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CommandTemplate:
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            allowed_tools=[str(t) for t in data.get("allowed_tools") or []],
            argument_hint=data.get("argument_hint"),
            body=str(data.get("body", "")).rstrip(),
        )


def load_command_templates() -> List[CommandTemplate]:
    data = read_yaml("commands", "commands.yaml")
    return [CommandTemplate.from_dict(c) for c in data.get("commands") or []]


def required_scripts() -> List[str]:
    return [str(s) for s in read_yaml("commands", "commands.yaml").get("required_scripts") or []]


class CommandGenerator:
    def __init__(self, project_root: Path) -> None:
        self.context = ProjectContext(Path(project_root))
        self.project_root = self.context.project_root
        self.commands_dir = self.context.claude_dir / "commands"
        self.templates = load_command_templates()
        # Frontmatter control blocks sit on their own lines.
        env = Environment(trim_blocks=True, lstrip_blocks=True, undefined=StrictUndefined)
        self._template = env.from_string(get_data_path("commands", "command.md.j2").read_text(encoding="utf-8"))

    def command_path(self, name: str) -> Path:
        return self.commands_dir / f"{name}.md"

    def missing_scripts(self) -> List[str]:
        return [s for s in required_scripts() if not (self.project_root / s).exists()]

    def validate_dependencies(self) -> None:
        """Raise when the scripts the commands shell out to are absent."""
        missing = self.missing_scripts()
        if missing:
            lines = ["Missing required scripts for custom commands:"]
            lines.extend(f"  - {script}" for script in missing)
            raise FileSystemError(
                "\n".join(lines),
                "MISSING_COMMAND_SCRIPTS",
                "Install a starter pack that provides them or re-run with --force",
                context={"missing": missing},
            )

    def render(self, template: CommandTemplate) -> str:
        return self._template.render(
            allowed_tools=template.allowed_tools,
            argument_hint=template.argument_hint,
            description=template.description,
            body=template.body,
        ).rstrip() + "\n"

    def initialize(self, force: bool = False) -> List[Path]:
        """Write every command file and return their paths.

        Args:
            force: Generate even when required scripts are missing
        """
        ensure_directory(self.commands_dir)
        if not force:
            self.validate_dependencies()
        written: List[Path] = []
        for template in self.templates:
            path = self.command_path(template.name)
            write_text(path, self.render(template))
            logger.debug("Generated command: %s", path.name)
            written.append(path)
        logger.info("Generated %d commands in %s", len(written), self.commands_dir)
        return written

    def are_commands_installed(self) -> bool:
        return all(self.command_path(t.name).exists() for t in self.templates)

    def installed_commands(self) -> List[str]:
        return [t.name for t in self.templates if self.command_path(t.name).exists()]

    def cleanup(self) -> bool:
        if not self.commands_dir.exists():
            return False
        shutil.rmtree(self.commands_dir)
        logger.info("Removed %s", self.commands_dir)
        return True


__all__ = ["CommandGenerator", "CommandTemplate", "load_command_templates", "required_scripts"]
