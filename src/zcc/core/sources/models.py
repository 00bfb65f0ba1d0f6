"""Pack source configuration records (``.zcc/sources.json``)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SOURCE_KINDS = ("local", "github", "http", "custom")
LOCAL_SOURCE_ID = "local"


@dataclass
class SourceConfig:
    id: str
    type: str
    enabled: bool = True
    priority: int = 10
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "enabled": self.enabled,
            "priority": self.priority,
            "config": dict(self.config),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SourceConfig:
        return cls(
            id=str(data["id"]),
            type=str(data.get("type", "local")),
            enabled=data.get("enabled") is not False,
            priority=int(data.get("priority", 10)),
            config=dict(data.get("config") or {}),
        )


def default_local_source() -> SourceConfig:
    return SourceConfig(id=LOCAL_SOURCE_ID, type="local", enabled=True, priority=1, config={})


@dataclass
class SourceRegistryConfig:
    sources: List[SourceConfig] = field(default_factory=list)
    default_source: Optional[str] = LOCAL_SOURCE_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sources": [s.to_dict() for s in self.sources],
            "defaultSource": self.default_source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SourceRegistryConfig:
        return cls(
            sources=[SourceConfig.from_dict(s) for s in data.get("sources") or []],
            default_source=data.get("defaultSource") or LOCAL_SOURCE_ID,
        )

    @classmethod
    def defaults(cls) -> SourceRegistryConfig:
        return cls(sources=[default_local_source()], default_source=LOCAL_SOURCE_ID)


__all__ = [
    "LOCAL_SOURCE_ID",
    "SOURCE_KINDS",
    "SourceConfig",
    "SourceRegistryConfig",
    "default_local_source",
]
