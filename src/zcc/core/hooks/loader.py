"""Hook definition files.

Definitions live in ``.zcc/hooks/definitions/*.json`` as
``{"version": "1.0.0", "hooks": [<HookConfig>, ...]}``. Generated hook
scripts live in ``.zcc/hooks/scripts``.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from zcc.core.exceptions import HookError
from zcc.core.utils.io import ensure_directory, read_json, write_json_atomic, write_text
from zcc.core.utils.paths import is_within

from .models import HookConfig

logger = logging.getLogger(__name__)

DEFINITION_VERSION = "1.0.0"


def _definition(config: HookConfig) -> Dict[str, Any]:
    return {"version": DEFINITION_VERSION, "hooks": [config.to_dict()]}


class HookConfigLoader:
    """Read and update hook definition files in one directory."""

    def __init__(self, definitions_dir: Path, *, default_timeout: int = 30000) -> None:
        self.definitions_dir = Path(definitions_dir)
        self.default_timeout = default_timeout

    def definition_files(self) -> List[Path]:
        if not self.definitions_dir.is_dir():
            return []
        return sorted(self.definitions_dir.glob("*.json"))

    def load_definition(self, path: Path) -> Dict[str, Any]:
        data = read_json(path)
        if not isinstance(data, dict) or not isinstance(data.get("hooks"), list):
            raise HookError(f"Invalid hook definition: {path.name}", "INVALID_HOOK_DEFINITION")
        return data

    def load_all(self) -> List[HookConfig]:
        """Return every hook from every definition file.

        Unreadable files are logged and skipped.
        """
        configs: List[HookConfig] = []
        for path in self.definition_files():
            try:
                definition = self.load_definition(path)
                for entry in definition["hooks"]:
                    configs.append(HookConfig.from_dict(entry, default_timeout=self.default_timeout))
            except (OSError, json.JSONDecodeError, HookError, ValueError) as e:
                logger.warning("Failed to load hook definition %s: %s", path.name, e)
        return configs

    def save(self, config: HookConfig, filename: Optional[str] = None) -> Path:
        path = self.definitions_dir / (filename or f"{config.id}.json")
        write_json_atomic(path, _definition(config))
        return path

    def save_definition(self, path: Path, definition: Dict[str, Any]) -> None:
        write_json_atomic(path, definition)

    def delete(self, filename: str) -> bool:
        path = self.definitions_dir / filename
        if not path.exists():
            return False
        path.unlink()
        return True

    def find_hook(self, hook_id: str) -> Optional[Tuple[Path, Dict[str, Any]]]:
        """Locate the definition file that declares ``hook_id``."""
        for path in self.definition_files():
            try:
                definition = self.load_definition(path)
            except (OSError, json.JSONDecodeError, HookError) as e:
                logger.debug("Skipping %s: %s", path.name, e)
                continue
            for entry in definition["hooks"]:
                if isinstance(entry, dict) and entry.get("id") == hook_id:
                    return path, definition
        return None

    def set_enabled(self, hook_id: str, enabled: bool) -> bool:
        found = self.find_hook(hook_id)
        if found is None:
            return False
        path, definition = found
        for entry in definition["hooks"]:
            if isinstance(entry, dict) and entry.get("id") == hook_id:
                entry["enabled"] = enabled
        write_json_atomic(path, definition)
        return True


class HookFileManager:
    """Writes and removes the files backing a hook."""

    def __init__(self, project_root: Path, hooks_dir: Path, definitions_dir: Path) -> None:
        self.project_root = Path(project_root)
        self.hooks_dir = Path(hooks_dir)
        self.definitions_dir = Path(definitions_dir)

    @property
    def scripts_dir(self) -> Path:
        return self.hooks_dir / "scripts"

    def write_script_file(self, name: str, content: str) -> str:
        """Write an executable hook script and return its project-relative command."""
        ensure_directory(self.scripts_dir)
        script = self.scripts_dir / f"{name}.sh"
        write_text(script, content)
        os.chmod(script, 0o755)
        return "./" + script.relative_to(self.project_root).as_posix()

    def save_hook_definition(self, config: HookConfig) -> Path:
        path = self.definitions_dir / f"{config.id}.json"
        write_json_atomic(path, _definition(config))
        return path

    def _command_path(self, command: str) -> Path:
        path = Path(command)
        return path if path.is_absolute() else (self.project_root / path).resolve()

    def remove_hook_files(self, config: HookConfig) -> List[Path]:
        """Remove the hook's definition, and its script when it lives in the hooks dir."""
        removed: List[Path] = []
        definition = self.definitions_dir / f"{config.id}.json"
        if definition.exists():
            definition.unlink()
            removed.append(definition)

        if config.command:
            script = self._command_path(config.command.split()[0])
            if is_within(script, self.hooks_dir.resolve()) and script.is_file():
                script.unlink()
                removed.append(script)
        return removed


__all__ = ["DEFINITION_VERSION", "HookConfigLoader", "HookFileManager"]
