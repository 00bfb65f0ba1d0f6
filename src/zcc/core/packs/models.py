"""Data models for starter packs.

On-disk JSON keeps the camelCase keys used by pack manifests; the Python
attributes are snake_case.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

COMPONENT_TYPES: Tuple[str, ...] = ("modes", "workflows", "agents", "hooks")


def component_extension(component_type: str) -> str:
    """Hook components are JSON definitions; every other type is markdown."""
    return ".json" if component_type == "hooks" else ".md"


def singular(component_type: str) -> str:
    return component_type[:-1] if component_type.endswith("s") else component_type


@dataclass(frozen=True, slots=True)
class ComponentRef:
    """A named component listed in a pack manifest."""

    name: str
    required: bool = False
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "required": self.required}
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ComponentRef:
        if isinstance(data, str):
            return cls(name=data)
        return cls(
            name=str(data.get("name", "")),
            required=bool(data.get("required", False)),
            description=data.get("description"),
        )


@dataclass(frozen=True, slots=True)
class ToolDependency:
    """An external CLI tool a pack works best with (informational only)."""

    name: str
    version: Optional[str] = None
    required: bool = True
    install_command: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "required": self.required}
        if self.version:
            data["version"] = self.version
        if self.install_command:
            data["installCommand"] = self.install_command
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ToolDependency:
        return cls(
            name=str(data.get("name", "")),
            version=data.get("version"),
            required=data.get("required") is not False,
            install_command=data.get("installCommand"),
            description=data.get("description"),
        )


@dataclass(frozen=True, slots=True)
class PackHook:
    """A hook a pack asks to be configured at install time."""

    name: str
    event: str
    command: str
    enabled: bool = True
    args: Tuple[str, ...] = ()
    matcher: Optional[Dict[str, Any]] = None
    priority: int = 0
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "event": self.event,
            "command": self.command,
            "enabled": self.enabled,
        }
        if self.args:
            data["args"] = list(self.args)
        if self.matcher:
            data["matcher"] = dict(self.matcher)
        if self.priority:
            data["priority"] = self.priority
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PackHook:
        return cls(
            name=str(data.get("name", "")),
            event=str(data.get("event", "")),
            command=str(data.get("command", "")),
            enabled=data.get("enabled") is not False,
            args=tuple(str(a) for a in data.get("args") or ()),
            matcher=dict(data["matcher"]) if isinstance(data.get("matcher"), dict) else None,
            priority=int(data.get("priority") or 0),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class PackManifest:
    """A starter pack manifest (``manifest.json``)."""

    name: str
    version: str
    description: str
    author: str = ""
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    components: Dict[str, Tuple[ComponentRef, ...]] = field(default_factory=dict)
    configuration: Optional[Dict[str, Any]] = None
    post_install: Optional[Dict[str, Any]] = None
    hooks: Tuple[PackHook, ...] = ()
    compatible_with: Tuple[str, ...] = ()
    tool_dependencies: Tuple[ToolDependency, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def components_of(self, component_type: str) -> Tuple[ComponentRef, ...]:
        return self.components.get(component_type, ())

    def iter_components(self):
        """Yield ``(component_type, ComponentRef)`` in install order."""
        for ctype in COMPONENT_TYPES:
            for ref in self.components_of(ctype):
                yield ctype, ref

    @property
    def default_mode(self) -> Optional[str]:
        return (self.configuration or {}).get("defaultMode")

    @property
    def project_settings(self) -> Dict[str, Any]:
        return dict((self.configuration or {}).get("projectSettings") or {})

    @property
    def post_install_message(self) -> Optional[str]:
        return (self.post_install or {}).get("message")

    @property
    def post_install_commands(self) -> List[str]:
        return [str(c) for c in (self.post_install or {}).get("commands") or []]

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        data: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "components": {
                ctype: [ref.to_dict() for ref in refs]
                for ctype, refs in self.components.items()
            },
        }
        if self.category:
            data["category"] = self.category
        if self.tags:
            data["tags"] = list(self.tags)
        if self.dependencies or self.tool_dependencies:
            if self.tool_dependencies:
                data["dependencies"] = {
                    "packs": list(self.dependencies),
                    "tools": [t.to_dict() for t in self.tool_dependencies],
                }
            else:
                data["dependencies"] = list(self.dependencies)
        if self.compatible_with:
            data["compatibleWith"] = list(self.compatible_with)
        if self.configuration:
            data["configuration"] = dict(self.configuration)
        if self.post_install:
            data["postInstall"] = dict(self.post_install)
        if self.hooks:
            data["hooks"] = [h.to_dict() for h in self.hooks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PackManifest:
        """Build a manifest from parsed JSON.

        ``dependencies`` is either a list of pack names or an object with
        ``packs`` and ``tools`` lists.
        """
        raw_deps = data.get("dependencies") or []
        tools: List[ToolDependency] = []
        if isinstance(raw_deps, dict):
            pack_deps = raw_deps.get("packs") or []
            tools = [ToolDependency.from_dict(t) for t in raw_deps.get("tools") or [] if isinstance(t, dict)]
        else:
            pack_deps = raw_deps

        components: Dict[str, Tuple[ComponentRef, ...]] = {}
        for ctype, refs in (data.get("components") or {}).items():
            if ctype in COMPONENT_TYPES and isinstance(refs, list):
                components[ctype] = tuple(ComponentRef.from_dict(r) for r in refs)

        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            author=str(data.get("author", "")),
            category=data.get("category"),
            tags=tuple(str(t) for t in data.get("tags") or ()),
            dependencies=tuple(str(d) for d in pack_deps),
            components=components,
            configuration=dict(data["configuration"]) if isinstance(data.get("configuration"), dict) else None,
            post_install=dict(data["postInstall"]) if isinstance(data.get("postInstall"), dict) else None,
            hooks=tuple(PackHook.from_dict(h) for h in data.get("hooks") or () if isinstance(h, dict)),
            compatible_with=tuple(str(c) for c in data.get("compatibleWith") or ()),
            tool_dependencies=tuple(tools),
            raw=dict(data),
        )


@dataclass(frozen=True, slots=True)
class PackStructure:
    """A loaded manifest plus its on-disk or remote location."""

    manifest: PackManifest
    path: str
    components_path: Optional[str] = None

    @property
    def name(self) -> str:
        return self.manifest.name


@dataclass
class PackInstallOptions:
    force: bool = False
    skip_optional: bool = False
    dry_run: bool = False
    interactive: bool = False
    verbose: bool = False
    source: Optional[str] = None


def _empty_buckets() -> Dict[str, List[str]]:
    return {ctype: [] for ctype in COMPONENT_TYPES}


@dataclass
class PackInstallationResult:
    """Outcome of one top-level install or uninstall call."""

    success: bool
    installed: Dict[str, List[str]] = field(default_factory=_empty_buckets)
    skipped: Dict[str, List[str]] = field(default_factory=_empty_buckets)
    errors: List[str] = field(default_factory=list)
    post_install_message: Optional[str] = None

    @classmethod
    def failure(cls, *errors: str) -> PackInstallationResult:
        return cls(success=False, errors=list(errors))

    def total_installed(self) -> int:
        return sum(len(v) for v in self.installed.values())

    def total_skipped(self) -> int:
        return sum(len(v) for v in self.skipped.values())

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "installed": {k: list(v) for k, v in self.installed.items()},
            "skipped": {k: list(v) for k, v in self.skipped.items()},
            "errors": list(self.errors),
        }
        if self.post_install_message:
            data["postInstallMessage"] = self.post_install_message
        return data


@dataclass
class PackDependencyResult:
    resolved: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    circular: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.circular

    def to_dict(self) -> Dict[str, Any]:
        return {"resolved": list(self.resolved), "missing": list(self.missing), "circular": list(self.circular)}


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def error(self, message: str) -> None:
        self.valid = False
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def component_target_path(project_root: Path, component_type: str, name: str) -> Path:
    """Return where a component of ``component_type`` is installed in a project.

    Agents live under ``.claude/agents``; hooks become definitions under
    ``.zcc/hooks/definitions``; modes and workflows live under ``.zcc``.
    """
    if component_type == "agents":
        return project_root / ".claude" / "agents" / f"{name}.md"
    if component_type == "hooks":
        return project_root / ".zcc" / "hooks" / "definitions" / f"{name}.json"
    return project_root / ".zcc" / component_type / f"{name}.md"


__all__ = [
    "COMPONENT_TYPES",
    "ComponentRef",
    "PackDependencyResult",
    "PackHook",
    "PackInstallOptions",
    "PackInstallationResult",
    "PackManifest",
    "PackStructure",
    "ToolDependency",
    "ValidationResult",
    "component_extension",
    "component_target_path",
    "singular",
]
