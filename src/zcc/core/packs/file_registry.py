"""Ownership tracking for files installed by starter packs.

The registry lives at ``.zcc/file-registry.json``::

    {
      "version": "1.0.0",
      "files": {"<path>": {"pack", "originalPath", "checksum", "installedAt", "modified"}},
      "packs": {"<name>": {"version", "files": ["<path>", ...]}}
    }

Paths are stored relative to the project root (POSIX separators) when they
live inside it. A copy of the previous file is kept at ``<path>.backup`` and
used to recover from a corrupt registry.
"""
from __future__ import annotations

import copy
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from zcc.core.exceptions import FileSystemError, RegistryNotLoadedError
from zcc.core.packs.models import component_extension, component_target_path
from zcc.core.utils.io import ensure_parent_dir, read_json, sha256_file, write_json_atomic
from zcc.core.utils.paths import is_within
from zcc.core.utils.time import utc_timestamp

logger = logging.getLogger(__name__)

REGISTRY_VERSION = "1.0.0"

PathArg = Union[str, Path]


def _empty() -> Dict[str, Any]:
    return {"version": REGISTRY_VERSION, "files": {}, "packs": {}}


class FileRegistry:
    """Records which pack owns which installed file, with a content checksum."""

    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root).resolve()
        self.registry_path = self.project_root / ".zcc" / "file-registry.json"
        self.backup_path = self.registry_path.with_name(self.registry_path.name + ".backup")
        self._data: Optional[Dict[str, Any]] = None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data

        if not self.registry_path.exists():
            self._data = _empty()
            return self._data

        try:
            self._data = self._normalize(read_json(self.registry_path))
            return self._data
        except (OSError, ValueError) as e:
            logger.warning("Failed to load file registry: %s", e)

        if self.backup_path.exists():
            logger.info("Attempting to restore file registry from backup")
            try:
                self._data = self._normalize(read_json(self.backup_path))
                self.save()
                return self._data
            except (OSError, ValueError) as e:
                logger.warning("File registry backup is unusable: %s", e)

        logger.warning("Starting with fresh file registry")
        self._data = _empty()
        return self._data

    @staticmethod
    def _normalize(data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ValueError("file registry must be a JSON object")
        out = _empty()
        out["version"] = str(data.get("version") or REGISTRY_VERSION)
        out["files"] = dict(data.get("files") or {})
        out["packs"] = dict(data.get("packs") or {})
        return out

    def refresh(self) -> Dict[str, Any]:
        """Drop the in-memory copy and reload from disk."""
        self._data = None
        return self.load()

    def save(self) -> None:
        if self._data is None:
            raise RegistryNotLoadedError(
                "No registry data to save",
                suggestion="Call load() before save()",
            )
        ensure_parent_dir(self.registry_path)
        if self.registry_path.exists():
            shutil.copyfile(self.registry_path, self.backup_path)
        write_json_atomic(self.registry_path, self._data)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def key_for(self, path: PathArg) -> str:
        """Return the registry key for ``path``."""
        p = Path(path)
        if not p.is_absolute():
            return p.as_posix()
        resolved = p.resolve()
        if is_within(resolved, self.project_root):
            return resolved.relative_to(self.project_root).as_posix()
        return str(resolved)

    def absolute(self, key: str) -> Path:
        p = Path(key)
        return p if p.is_absolute() else self.project_root / p

    def calculate_checksum(self, path: PathArg) -> str:
        target = self.absolute(self.key_for(path))
        if not target.is_file():
            raise FileSystemError(
                f"File not found: {target}",
                "FILE_NOT_FOUND",
                "Cannot calculate checksum of non-existent file",
            )
        return f"sha256:{sha256_file(target)}"

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def register_file(self, target_path: PathArg, pack_name: str, original_path: str) -> None:
        data = self.load()
        key = self.key_for(target_path)
        previous = data["files"].get(key)
        if previous and previous.get("pack") and previous["pack"] != pack_name:
            old = data["packs"].get(previous["pack"])
            if old is not None:
                old["files"] = [f for f in old["files"] if f != key]
        data["files"][key] = {
            "pack": pack_name,
            "originalPath": str(original_path),
            "checksum": self.calculate_checksum(key),
            "installedAt": utc_timestamp(),
            "modified": False,
        }
        pack = data["packs"].setdefault(pack_name, {"version": "1.0.0", "files": []})
        if key not in pack["files"]:
            pack["files"].append(key)
        self.save()

    def unregister_file(self, target_path: PathArg) -> None:
        data = self.load()
        key = self.key_for(target_path)
        info = data["files"].get(key)
        if info is None:
            return
        pack = data["packs"].get(info.get("pack", ""))
        if pack is not None:
            pack["files"] = [f for f in pack["files"] if f != key]
        del data["files"][key]
        self.save()

    def is_file_registered(self, target_path: PathArg) -> bool:
        return self.key_for(target_path) in self.load()["files"]

    def get_file_info(self, target_path: PathArg) -> Optional[Dict[str, Any]]:
        return self.load()["files"].get(self.key_for(target_path))

    def is_file_modified(self, target_path: PathArg) -> bool:
        """Return True when the file no longer matches its recorded checksum.

        A mismatch is remembered (``modified: true``) so later checks agree
        even if the file is restored. Unreadable files count as modified.
        """
        data = self.load()
        key = self.key_for(target_path)
        info = data["files"].get(key)
        if info is None:
            return False
        if info.get("modified"):
            return True
        try:
            current = self.calculate_checksum(key)
        except (OSError, FileSystemError) as e:
            logger.debug("Could not check modification status for %s: %s", key, e)
            return True
        if current != info.get("checksum"):
            info["modified"] = True
            self.save()
            return True
        return False

    def get_pack_files(self, pack_name: str) -> List[str]:
        pack = self.load()["packs"].get(pack_name)
        return list(pack["files"]) if pack else []

    def check_conflicts(self, paths: Iterable[PathArg], pack_name: Optional[str] = None) -> List[Dict[str, str]]:
        """Return ``[{path, existingPack}]`` for paths owned by another pack.

        Paths owned by ``pack_name`` itself, and orphaned paths whose pack was
        removed (``pack == ""``), are not conflicts.
        """
        files = self.load()["files"]
        conflicts: List[Dict[str, str]] = []
        for path in paths:
            key = self.key_for(path)
            info = files.get(key)
            if not info:
                continue
            owner = info.get("pack") or ""
            if owner and owner != pack_name:
                conflicts.append({"path": key, "existingPack": owner})
        return conflicts

    # ------------------------------------------------------------------
    # Packs
    # ------------------------------------------------------------------
    def register_pack(self, pack_name: str, version: str) -> None:
        data = self.load()
        pack = data["packs"].setdefault(pack_name, {"version": version, "files": []})
        pack["version"] = version
        self.save()

    def has_pack(self, pack_name: str) -> bool:
        return pack_name in self.load()["packs"]

    def unregister_pack(self, pack_name: str) -> None:
        data = self.load()
        for key in data["packs"].get(pack_name, {}).get("files", []):
            data["files"].pop(key, None)
        data["packs"].pop(pack_name, None)
        self.save()

    def unregister_pack_preserving_modified(self, pack_name: str) -> List[str]:
        """Drop ``pack_name``; modified files stay registered with ``pack == ""``."""
        data = self.load()
        preserved: List[str] = []
        for key in data["packs"].get(pack_name, {}).get("files", []):
            info = data["files"].get(key)
            if info is None:
                continue
            if info.get("modified"):
                info["pack"] = ""
                preserved.append(key)
            else:
                del data["files"][key]
        data["packs"].pop(pack_name, None)
        self.save()
        return preserved

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    def detect_modifications(self) -> List[str]:
        data = self.load()
        modified: List[str] = []
        for key, info in data["files"].items():
            try:
                current = self.calculate_checksum(key)
            except (OSError, FileSystemError) as e:
                logger.debug("Could not check %s: %s", key, e)
                continue
            if current != info.get("checksum"):
                info["modified"] = True
                modified.append(key)
        if modified:
            self.save()
        return modified

    def get_stats(self) -> Dict[str, int]:
        data = self.load()
        packs = data["packs"]
        files = data["files"].values()
        return {
            "totalFiles": len(data["files"]),
            "totalPacks": len(packs),
            "modifiedFiles": sum(1 for f in files if f.get("modified")),
            "orphanedFiles": sum(1 for f in files if f.get("pack", "") not in packs),
        }

    def rebuild(self, packs_manifest: Optional[Path] = None) -> Dict[str, Any]:
        """Recreate the registry from ``.zcc/packs.json`` and files on disk.

        For every installed pack with a manifest snapshot under
        ``.zcc/packs/<name>.manifest.json``, component files that still exist
        are re-registered with their current checksum.
        """
        logger.info("Rebuilding file registry from file system scan")
        self._data = _empty()
        packs_path = packs_manifest or (self.project_root / ".zcc" / "packs.json")

        installed: Dict[str, Any] = {}
        if packs_path.exists():
            try:
                installed = dict(read_json(packs_path).get("packs") or {})
            except (OSError, ValueError, AttributeError) as e:
                logger.warning("Could not read %s during rebuild: %s", packs_path, e)

        for pack_name, pack_info in installed.items():
            self._data["packs"][pack_name] = {
                "version": str((pack_info or {}).get("version") or "1.0.0"),
                "files": [],
            }
            snapshot = self.project_root / ".zcc" / "packs" / f"{pack_name}.manifest.json"
            if not snapshot.exists():
                continue
            try:
                manifest = read_json(snapshot)
            except (OSError, ValueError) as e:
                logger.warning("Could not read %s during rebuild: %s", snapshot, e)
                continue
            for ctype, refs in (manifest.get("components") or {}).items():
                for ref in refs or []:
                    name = ref.get("name") if isinstance(ref, dict) else ref
                    target = component_target_path(self.project_root, ctype, str(name))
                    if target.is_file():
                        self._register_unsaved(target, pack_name, f"{ctype}/{name}{component_extension(ctype)}")

        self.save()
        logger.info("File registry rebuilt")
        return self._data

    def _register_unsaved(self, target: Path, pack_name: str, original_path: str) -> None:
        data = self.load()
        key = self.key_for(target)
        data["files"][key] = {
            "pack": pack_name,
            "originalPath": original_path,
            "checksum": self.calculate_checksum(key),
            "installedAt": utc_timestamp(),
            "modified": False,
        }
        data["packs"][pack_name]["files"].append(key)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.load())


__all__ = ["FileRegistry", "REGISTRY_VERSION"]
