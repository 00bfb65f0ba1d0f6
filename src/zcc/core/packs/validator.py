"""Starter pack manifest and structure validation.

Manifests are first checked against the bundled JSON Schema
(``data/schemas/pack-manifest.schema.yaml``) and then against rules the
schema cannot express: size limits, duplicate names, path traversal and
suspicious post-install commands.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Mapping, Union

from jsonschema import Draft202012Validator

from zcc.core.exceptions import ValidationError, ZccError
from zcc.core.packs.models import COMPONENT_TYPES, PackManifest, PackStructure, ValidationResult
from zcc.core.utils.io import read_yaml
from zcc.data import get_data_path

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA = "pack-manifest.schema.yaml"

MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500
MAX_COMPONENTS_PER_TYPE = 20
MAX_FILE_SIZE = 1024 * 1024
ALLOWED_EXTENSIONS = frozenset({".md", ".json", ".sh"})
FORBIDDEN_PATH_FRAGMENTS = ("..", "~", "/etc", "/usr", "/var", "/root", "C:\\Windows", "C:\\Program Files")
PACK_NAME_RE = re.compile(r"^[a-z0-9-]+$")

SUSPICIOUS_COMMAND_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"rm\s+-rf\s*/",
        r"sudo\s+",
        r"chmod\s+777",
        r"curl\s+.*\|\s*sh",
        r"wget\s+.*\|\s*sh",
        r"eval\s+",
        r"exec\s+",
        r"system\s*\(",
        r"`.*`",
        r"\$\(.*\)",
        r">/dev/null.*2>&1.*&",
        r"nohup\s+",
        r"&\s*$",
    )
)


def is_command_suspicious(command: str) -> bool:
    return any(p.search(command) for p in SUSPICIOUS_COMMAND_PATTERNS)


@lru_cache(maxsize=1)
def _load_validator() -> Draft202012Validator:
    path = get_data_path("schemas", MANIFEST_SCHEMA)
    try:
        schema = read_yaml(path, default=None, raise_on_error=True)
    except FileNotFoundError as e:
        raise ValidationError(
            "Pack validation schema not found",
            "SCHEMA_MISSING",
            "Reinstall zcc to restore bundled data files",
        ) from e
    except Exception as e:
        raise ValidationError("Failed to load pack validation schema", "SCHEMA_LOAD_ERROR", f"Schema error: {e}") from e
    if not isinstance(schema, dict):
        raise ValidationError("Failed to load pack validation schema", "SCHEMA_LOAD_ERROR", "Schema must be a mapping")
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


class PackValidator:
    """Validate pack manifests and the files a pack ships."""

    def validate_manifest(self, manifest: Union[PackManifest, Mapping[str, Any]]) -> ValidationResult:
        data = manifest.to_dict() if isinstance(manifest, PackManifest) else dict(manifest)
        result = ValidationResult()
        self._validate_schema(data, result)
        self._validate_security(data, result)
        self._validate_business_rules(data, result)
        return result

    def validate_pack_structure(self, pack: PackStructure, source) -> ValidationResult:
        result = self.validate_manifest(pack.manifest)
        if not result.valid:
            return result
        self._validate_components(pack, source, result)
        self._validate_file_structure(pack, source, result)
        return result

    # ------------------------------------------------------------------
    def _validate_schema(self, data: Dict[str, Any], result: ValidationResult) -> None:
        validator = _load_validator()
        for error in sorted(validator.iter_errors(data), key=lambda e: str(list(e.path))):
            if error.path:
                path_str = ".".join(str(p) for p in error.path)
                result.error(f"{path_str}: {error.message}")
            else:
                result.error(error.message)

    def _validate_security(self, data: Dict[str, Any], result: ValidationResult) -> None:
        name = str(data.get("name") or "")
        if len(name) > MAX_NAME_LENGTH:
            result.error(f"Pack name too long (max {MAX_NAME_LENGTH} characters)")
        if name and not PACK_NAME_RE.match(name):
            result.error("Pack name must contain only lowercase letters, numbers, and hyphens")
        for fragment in FORBIDDEN_PATH_FRAGMENTS:
            if fragment in name:
                result.error(f"Pack name contains forbidden pattern: {fragment}")

        if len(str(data.get("description") or "")) > MAX_DESCRIPTION_LENGTH:
            result.error(f"Description too long (max {MAX_DESCRIPTION_LENGTH} characters)")

        post_install = data.get("postInstall") or {}
        for command in post_install.get("commands") or []:
            if is_command_suspicious(str(command)):
                result.warn(f"Suspicious post-install command detected: {command}")

        for ctype in COMPONENT_TYPES:
            for ref in (data.get("components") or {}).get(ctype) or []:
                cname = str(ref.get("name", "")) if isinstance(ref, dict) else str(ref)
                if "/" in cname or "\\" in cname or any(f in cname for f in FORBIDDEN_PATH_FRAGMENTS):
                    result.error(f"Component name '{cname}' contains a forbidden path pattern")

    def _validate_business_rules(self, data: Dict[str, Any], result: ValidationResult) -> None:
        components = data.get("components") or {}
        seen: set[str] = set()
        for ctype in COMPONENT_TYPES:
            refs = components.get(ctype) or []
            if len(refs) > MAX_COMPONENTS_PER_TYPE:
                result.error(f"Too many {ctype} (max {MAX_COMPONENTS_PER_TYPE})")
            for ref in refs:
                cname = ref.get("name") if isinstance(ref, dict) else ref
                if cname in seen:
                    result.error(f"Duplicate component name: {cname}")
                seen.add(cname)

        modes = [m for m in components.get("modes") or [] if isinstance(m, dict)]
        default_mode = (data.get("configuration") or {}).get("defaultMode")
        if default_mode and not any(m.get("name") == default_mode for m in modes):
            result.error(f"Default mode '{default_mode}' not found in pack modes")
        if modes and not any(m.get("required") is True for m in modes):
            result.warn("Pack has modes but none are marked as required")

        name = data.get("name")
        raw_deps = data.get("dependencies") or []
        deps = (raw_deps.get("packs") or []) if isinstance(raw_deps, dict) else raw_deps
        for dep in deps:
            if not isinstance(dep, str) or not PACK_NAME_RE.match(dep):
                result.error(f"Invalid dependency name: {dep}")
            elif dep == name:
                result.error(f"Pack cannot depend on itself: {dep}")

    def _validate_components(self, pack: PackStructure, source, result: ValidationResult) -> None:
        for ctype, ref in pack.manifest.iter_components():
            location = source.get_component_path(pack.name, ctype, ref.name)
            label = PurePosixPath(str(location)).name
            try:
                content = source.read_component(pack.name, ctype, ref.name)
            except (OSError, ZccError) as e:
                logger.debug("Component %s/%s unreadable: %s", ctype, ref.name, e)
                result.error(f"Component '{ref.name}' of type '{ctype}' not found in pack")
                continue

            ext = PurePosixPath(str(location)).suffix
            if ext not in ALLOWED_EXTENSIONS:
                result.error(f"Forbidden file extension: {ext} in {label}")
            size = len(content.encode("utf-8"))
            if size > MAX_FILE_SIZE:
                result.error(f"Component file too large: {label} ({size} bytes)")
            if ext == ".md" and ("<script>" in content or "javascript:" in content):
                result.error(f"Suspicious content detected in {label}")
            if not content:
                result.warn(f"Empty component file: {label}")

    def _validate_file_structure(self, pack: PackStructure, source, result: ValidationResult) -> None:
        if not pack.components_path:
            return
        if getattr(source, "source_type", "") == "local":
            pack_path = Path(pack.path).resolve()
            inside = Path(pack.components_path).resolve().is_relative_to(pack_path)
        else:
            inside = str(pack.components_path).startswith(str(pack.path).rstrip("/") + "/")
        if not inside:
            result.error("Components directory is outside pack directory")


__all__ = ["PackValidator", "is_command_suspicious"]
