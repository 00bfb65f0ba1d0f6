"""Hook data models.

Hook definitions are persisted as JSON with camelCase keys (``continueOnError``)
so they stay readable by other tools that consume ``.zcc/hooks``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class HookEvent(str, Enum):
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    SESSION_START = "SessionStart"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    PRE_COMPACT = "PreCompact"
    NOTIFICATION = "Notification"

    @classmethod
    def parse(cls, value: "HookEvent | str") -> "HookEvent":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            valid = ", ".join(e.value for e in cls)
            raise ValueError(f"Unknown hook event '{value}' (expected one of: {valid})") from None


MATCHER_TYPES = ("regex", "exact", "fuzzy", "tool", "keyword")


@dataclass(frozen=True, slots=True)
class HookMatcher:
    type: str
    pattern: str
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "pattern": self.pattern}
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HookMatcher:
        confidence = data.get("confidence")
        return cls(
            type=str(data.get("type", "")),
            pattern=str(data.get("pattern", "")),
            confidence=float(confidence) if confidence is not None else None,
        )


@dataclass
class HookConfig:
    """A single hook definition."""

    id: str
    name: str
    event: HookEvent
    command: str
    enabled: bool = True
    description: Optional[str] = None
    matcher: Optional[HookMatcher] = None
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    timeout: int = 30000
    priority: int = 0
    continue_on_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "event": self.event.value,
            "enabled": self.enabled,
            "command": self.command,
        }
        if self.description:
            data["description"] = self.description
        if self.matcher is not None:
            data["matcher"] = self.matcher.to_dict()
        if self.args:
            data["args"] = list(self.args)
        if self.env:
            data["env"] = dict(self.env)
        data["timeout"] = self.timeout
        if self.priority:
            data["priority"] = self.priority
        if self.continue_on_error:
            data["continueOnError"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, default_timeout: int = 30000) -> HookConfig:
        matcher = data.get("matcher")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or data.get("id") or ""),
            event=HookEvent.parse(data.get("event", "")),
            command=str(data.get("command", "")),
            enabled=data.get("enabled") is not False,
            description=data.get("description"),
            matcher=HookMatcher.from_dict(matcher) if isinstance(matcher, dict) else None,
            args=[str(a) for a in data.get("args") or []],
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
            timeout=int(data.get("timeout") or default_timeout),
            priority=int(data.get("priority") or 0),
            continue_on_error=bool(data.get("continueOnError", False)),
        )


@dataclass
class HookContext:
    """What a hook sees when it runs."""

    event: HookEvent
    project_root: Path
    prompt: Optional[str] = None
    tool: Optional[str] = None
    tool_args: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None
    timestamp: Optional[float] = None


@dataclass
class HookResult:
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    exit_code: Optional[int] = None
    duration: Optional[float] = None
    should_block: bool = False
    modified_prompt: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.output is not None:
            data["output"] = self.output
        if self.error is not None:
            data["error"] = self.error
        if self.exit_code is not None:
            data["exitCode"] = self.exit_code
        if self.duration is not None:
            data["duration"] = self.duration
        if self.should_block:
            data["shouldBlock"] = True
        if self.modified_prompt is not None:
            data["modifiedPrompt"] = self.modified_prompt
        return data


__all__ = [
    "HookConfig",
    "HookContext",
    "HookEvent",
    "HookMatcher",
    "HookResult",
    "MATCHER_TYPES",
]
