"""Abstract pack source interface.

A pack source knows how to list starter packs, load their manifests and hand
back component content. Concrete kinds are ``local``, ``github`` and ``http``.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Union
from pathlib import Path

from zcc.core.exceptions import PackError
from zcc.core.packs.models import PackManifest, component_extension

REQUIRED_MANIFEST_FIELDS = ("name", "version", "description")


def parse_manifest(text: str, *, origin: str) -> PackManifest:
    """Parse manifest JSON text, enforcing the required fields."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PackError(
            f"Invalid JSON in manifest: {origin}",
            "INVALID_JSON",
            str(e),
        ) from e
    if not isinstance(data, dict) or not all(data.get(k) for k in REQUIRED_MANIFEST_FIELDS):
        raise PackError(
            f"Invalid manifest: {origin}",
            "INVALID_MANIFEST",
            "Manifest must contain name, version, and description",
        )
    return PackManifest.from_dict(data)


class PackSource(ABC):
    """Where starter packs come from."""

    source_type: ClassVar[str] = ""

    @abstractmethod
    def list_packs(self) -> List[str]:
        """Return the sorted names of packs this source provides."""

    @abstractmethod
    def load_pack(self, name: str):
        """Load ``name`` and return a :class:`PackStructure`."""

    @abstractmethod
    def has_pack(self, name: str) -> bool:
        """Return True when ``name`` can be loaded. Never raises."""

    @abstractmethod
    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> Union[Path, str]:
        """Return the location (path or URL) of a component file."""

    @abstractmethod
    def read_component(self, pack_name: str, component_type: str, component_name: str) -> str:
        """Return the text of a component file."""

    @abstractmethod
    def list_pack_files(self, pack_name: str) -> Dict[str, bytes]:
        """Return pack-provided script files keyed by file name."""

    @abstractmethod
    def get_source_info(self) -> Dict[str, Any]:
        """Return ``{name, type, path}`` describing this source."""

    @staticmethod
    def component_relpath(component_type: str, component_name: str) -> str:
        return f"components/{component_type}/{component_name}{component_extension(component_type)}"


__all__ = ["PackSource", "REQUIRED_MANIFEST_FIELDS", "parse_manifest"]
