"""Explicit per-project context.

A ``ProjectContext`` is constructed once per CLI invocation (or test) and
passed to the services that need project paths. There is no process-wide
instance.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from zcc.core.utils.io import ensure_directory
from zcc.core.utils.paths import CLAUDE_DIR_NAME, ZCC_DIR_NAME


@dataclass
class ProjectContext:
    """Well-known paths of a single project."""

    project_root: Path

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root).resolve()

    @property
    def zcc_dir(self) -> Path:
        return self.project_root / ZCC_DIR_NAME

    @property
    def claude_dir(self) -> Path:
        return self.project_root / CLAUDE_DIR_NAME

    @property
    def hooks_dir(self) -> Path:
        return self.zcc_dir / "hooks"

    @property
    def config_path(self) -> Path:
        """Project settings merged by installed packs (``.zcc/config.json``)."""
        return self.zcc_dir / "config.json"

    def ensure_structure(self) -> None:
        """Create the directories every install writes into."""
        for d in (
            self.zcc_dir / "modes",
            self.zcc_dir / "workflows",
            self.zcc_dir / "scripts",
            self.zcc_dir / "packs",
            self.hooks_dir / "definitions",
            self.hooks_dir / "scripts",
            self.claude_dir / "agents",
        ):
            ensure_directory(d)


__all__ = ["ProjectContext"]
