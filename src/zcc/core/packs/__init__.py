"""Starter packs: sources, validation, installation and ownership tracking."""
from __future__ import annotations

from .file_registry import FileRegistry
from .installer import PackInstaller
from .manager import MAX_RETRIES, StarterPackManager
from .models import (
    COMPONENT_TYPES,
    ComponentRef,
    PackDependencyResult,
    PackHook,
    PackInstallationResult,
    PackInstallOptions,
    PackManifest,
    PackStructure,
    ToolDependency,
    ValidationResult,
)
from .registry import PackRegistry
from .validator import PackValidator

__all__ = [
    "COMPONENT_TYPES",
    "ComponentRef",
    "FileRegistry",
    "MAX_RETRIES",
    "PackDependencyResult",
    "PackHook",
    "PackInstallOptions",
    "PackInstallationResult",
    "PackInstaller",
    "PackManifest",
    "PackRegistry",
    "PackStructure",
    "PackValidator",
    "StarterPackManager",
    "ToolDependency",
    "ValidationResult",
]
