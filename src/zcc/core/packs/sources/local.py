"""Starter packs read from a directory on disk."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from zcc.core.exceptions import PackError, ZccError
from zcc.core.packs.models import PackStructure
from zcc.core.packs.sources.base import PackSource, parse_manifest

logger = logging.getLogger(__name__)


def default_starter_packs_dir() -> Path:
    """Return the bundled ``zcc/data/starter-packs`` directory."""
    from zcc.data import get_data_path

    return Path(get_data_path("starter-packs"))


class LocalPackSource(PackSource):
    """Packs laid out as ``<base>/<name>/manifest.json`` plus ``components/``."""

    source_type = "local"

    def __init__(self, base_path: Optional[Path] = None) -> None:
        self.base_path = Path(base_path) if base_path else default_starter_packs_dir()

    def _pack_dir(self, name: str) -> Path:
        return self.base_path / name

    def list_packs(self) -> List[str]:
        if not self.base_path.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.base_path.iterdir()
            if entry.is_dir() and (entry / "manifest.json").is_file()
        )

    def load_pack(self, name: str) -> PackStructure:
        pack_dir = self._pack_dir(name)
        manifest_path = pack_dir / "manifest.json"
        components_path = pack_dir / "components"

        if not pack_dir.is_dir():
            raise PackError(
                f"Starter pack '{name}' not found",
                "PACK_NOT_FOUND",
                f"Expected path: {pack_dir}",
            )
        if not manifest_path.is_file():
            raise PackError(
                f"Manifest not found for pack '{name}'",
                "MANIFEST_NOT_FOUND",
                f"Expected path: {manifest_path}",
            )
        if not components_path.is_dir():
            raise PackError(
                f"Components directory not found for pack '{name}'",
                "COMPONENTS_NOT_FOUND",
                f"Expected path: {components_path}",
            )

        try:
            manifest = parse_manifest(manifest_path.read_text(encoding="utf-8"), origin=str(manifest_path))
        except ZccError:
            raise
        except Exception as e:
            raise PackError(f"Failed to load pack '{name}': {e}", "PACK_LOAD_ERROR") from e

        return PackStructure(manifest=manifest, path=str(pack_dir), components_path=str(components_path))

    def has_pack(self, name: str) -> bool:
        pack_dir = self._pack_dir(name)
        return pack_dir.is_dir() and (pack_dir / "manifest.json").is_file()

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> Path:
        return self._pack_dir(pack_name) / self.component_relpath(component_type, component_name)

    def read_component(self, pack_name: str, component_type: str, component_name: str) -> str:
        path = self.get_component_path(pack_name, component_type, component_name)
        return path.read_text(encoding="utf-8")

    def list_pack_files(self, pack_name: str) -> Dict[str, bytes]:
        scripts_dir = self._pack_dir(pack_name) / "scripts"
        if not scripts_dir.is_dir():
            return {}
        return {
            entry.name: entry.read_bytes()
            for entry in sorted(scripts_dir.iterdir())
            if entry.is_file()
        }

    def get_source_info(self) -> Dict[str, Any]:
        return {"name": "local", "type": self.source_type, "path": str(self.base_path)}


__all__ = ["LocalPackSource", "default_starter_packs_dir"]
