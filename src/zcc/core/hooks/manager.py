"""Project-level hook management.

``HookManager`` owns the hook registry for one project: it loads hook
definitions from ``.zcc/hooks/definitions``, persists changes back to them
and regenerates the hook section of ``.claude/settings.toml``.
"""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from zcc.core.config.domains import HooksConfig
from zcc.core.context import ProjectContext
from zcc.core.exceptions import HookError, HookNotFoundError
from zcc.core.packs.models import PackHook
from zcc.core.utils.io import ensure_directory, read_json, read_text, write_text
from zcc.data import get_data_path

from .hook import Hook
from .loader import HookConfigLoader, HookFileManager
from .models import HookConfig, HookContext, HookEvent, HookMatcher, HookResult
from .registry import HookRegistry

logger = logging.getLogger(__name__)


def templates_dir() -> Path:
    return get_data_path("hooks", "templates")


def pack_hook_id(pack_name: str, hook_name: str) -> str:
    return f"{pack_name}-{hook_name}"


class HookManager:
    def __init__(self, project_root: Path, *, config: Optional[HooksConfig] = None) -> None:
        self.context = ProjectContext(Path(project_root))
        self.project_root = self.context.project_root
        self.config = config or HooksConfig(repo_root=self.project_root)
        self.hooks_dir = self.context.hooks_dir
        self.definitions_dir = self.hooks_dir / "definitions"
        self.registry = HookRegistry()
        self.loader = HookConfigLoader(self.definitions_dir, default_timeout=self.config.default_timeout_ms)
        self.files = HookFileManager(self.project_root, self.hooks_dir, self.definitions_dir)

    @property
    def settings_path(self) -> Path:
        return self.context.claude_dir / self.config.settings_file

    def initialize(self) -> None:
        """Create hook directories, load definitions and refresh settings."""
        for d in (self.context.claude_dir, self.definitions_dir, self.files.scripts_dir):
            ensure_directory(d)
        self.registry.clear()
        configs = self.loader.load_all()
        self.registry.load_hooks(configs)
        logger.info("Loaded %d hook definitions", len(configs))
        self.generate_settings()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def render_settings_section(self) -> str:
        lines: List[str] = []
        for event, hooks in self.registry.get_all_hooks():
            for hook in hooks:
                if not hook.enabled:
                    continue
                lines.append("")
                lines.append("[[hooks]]")
                lines.append(f"event = {json.dumps(event.value)}")
                lines.append(f"command = {json.dumps(hook.config.command)}")
                if hook.config.args:
                    lines.append(f"args = {json.dumps(hook.config.args)}")
        return "\n".join(lines) + "\n" if lines else ""

    def generate_settings(self) -> Path:
        """Rewrite the zcc section of the settings file.

        Content before the section header is preserved; everything from the
        header onward is regenerated.
        """
        header = self.config.section_header
        section = header + "\n" + self.render_settings_section()
        path = self.settings_path
        if path.exists():
            existing = read_text(path)
            index = existing.find(header)
            if index == -1:
                content = existing + "\n" + section
            else:
                content = existing[:index] + section
        else:
            content = section
        write_text(path, content.strip() + "\n")
        logger.debug("Updated %s", path)
        return path

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def add_hook(self, config: HookConfig, *, persist: bool = True) -> Hook:
        """Register ``config``, replacing any hook with the same id."""
        self.registry.remove_hook(config.id)
        hook = self.registry.add_hook(config)
        if persist:
            self.files.save_hook_definition(config)
        self.generate_settings()
        return hook

    def get_hook(self, hook_id: str) -> Optional[Hook]:
        return self.registry.get_hook(hook_id)

    def _find_config(self, hook_id: str) -> Optional[HookConfig]:
        hook = self.registry.get_hook(hook_id)
        if hook is not None:
            return hook.config
        found = self.loader.find_hook(hook_id)
        if found is None:
            return None
        _, definition = found
        for entry in definition["hooks"]:
            if entry.get("id") == hook_id:
                return HookConfig.from_dict(entry, default_timeout=self.config.default_timeout_ms)
        return None

    def remove_hook(self, hook_id: str) -> HookConfig:
        """Remove a hook, its definition file and its generated script.

        Raises:
            HookNotFoundError: If no hook with ``hook_id`` exists
        """
        config = self._find_config(hook_id)
        if config is None:
            raise HookNotFoundError(f"Hook not found: {hook_id}", suggestion="Run 'zcc hook list' to see hook ids")
        self.registry.remove_hook(hook_id)
        self.files.remove_hook_files(config)
        found = self.loader.find_hook(hook_id)
        if found is not None:
            # Shared definition files (pack hook components) keep their other hooks.
            path, definition = found
            definition["hooks"] = [h for h in definition["hooks"] if h.get("id") != hook_id]
            if definition["hooks"]:
                self.loader.save_definition(path, definition)
            else:
                path.unlink()
        self.generate_settings()
        logger.info("Removed hook %s", hook_id)
        return config

    def set_hook_enabled(self, hook_id: str, enabled: bool) -> None:
        hook = self.registry.get_hook(hook_id)
        if not self.loader.set_enabled(hook_id, enabled):
            if hook is None:
                raise HookNotFoundError(f"Hook not found: {hook_id}")
            hook.config.enabled = enabled
            self.files.save_hook_definition(hook.config)
        elif hook is not None:
            hook.config.enabled = enabled
        self.generate_settings()

    def enable_hook(self, hook_id: str) -> None:
        self.set_hook_enabled(hook_id, True)

    def disable_hook(self, hook_id: str) -> None:
        self.set_hook_enabled(hook_id, False)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------
    def list_templates(self) -> List[str]:
        directory = templates_dir()
        if not directory.is_dir():
            return []
        return sorted(p.stem for p in directory.glob("*.json"))

    def load_template(self, template_name: str) -> Dict[str, Any]:
        path = templates_dir() / f"{template_name}.json"
        if not path.is_file():
            available = ", ".join(self.list_templates()) or "none"
            raise HookError(
                f"Hook template not found: {template_name}",
                "TEMPLATE_NOT_FOUND",
                f"Available templates: {available}",
            )
        return read_json(path)

    def create_hook_from_template(
        self,
        template_name: str,
        *,
        hook_id: Optional[str] = None,
        name: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> HookConfig:
        """Create and persist a hook from a bundled template.

        Templates carrying a ``script`` body get it written to
        ``.zcc/hooks/scripts/<id>.sh``, which becomes the hook's command.
        """
        template = dict(self.load_template(template_name))
        script = template.pop("script", None)
        data = {**template, **(overrides or {})}
        data["id"] = hook_id or f"{template_name}-{int(time.time() * 1000)}"
        data["name"] = name or template.get("name") or template_name
        try:
            if script:
                data["command"] = self.files.write_script_file(data["id"], str(script))
            config = HookConfig.from_dict(data, default_timeout=self.config.default_timeout_ms)
        except (OSError, ValueError) as e:
            raise HookError(f"Failed to create hook from template: {e}") from e
        self.add_hook(config)
        logger.info("Created hook %s from template %s", config.id, template_name)
        return config

    # ------------------------------------------------------------------
    # Packs
    # ------------------------------------------------------------------
    def configure_pack_hooks(self, pack_name: str, hooks: Iterable[PackHook]) -> List[str]:
        """Register the hooks a pack declares and return their ids."""
        ids: List[str] = []
        for pack_hook in hooks:
            config = HookConfig(
                id=pack_hook_id(pack_name, pack_hook.name),
                name=pack_hook.name,
                event=HookEvent.parse(pack_hook.event),
                command=pack_hook.command,
                enabled=pack_hook.enabled,
                description=pack_hook.description,
                matcher=HookMatcher.from_dict(pack_hook.matcher) if pack_hook.matcher else None,
                args=list(pack_hook.args),
                timeout=self.config.default_timeout_ms,
                priority=pack_hook.priority,
            )
            self.registry.remove_hook(config.id)
            self.registry.add_hook(config)
            self.files.save_hook_definition(config)
            ids.append(config.id)
        if ids:
            self.generate_settings()
        return ids

    # ------------------------------------------------------------------
    # Queries and execution
    # ------------------------------------------------------------------
    def get_all_hooks(self) -> List[Tuple[HookEvent, List[Hook]]]:
        return self.registry.get_all_hooks()

    def list_hooks(self) -> List[Hook]:
        return [hook for _, hooks in self.registry.get_all_hooks() for hook in hooks]

    def execute(self, event: HookEvent, context: HookContext) -> List[HookResult]:
        return self.registry.execute_hooks(event, context)


__all__ = ["HookManager", "pack_hook_id", "templates_dir"]
