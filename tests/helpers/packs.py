"""Build starter packs on disk for tests."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from helpers.io_utils import write_json, write_text


def make_manifest(name: str, **overrides: Any) -> Dict[str, Any]:
    """Return a manifest that passes validation, with ``overrides`` applied."""
    manifest: Dict[str, Any] = {
        "name": name,
        "version": "1.0.0",
        "description": f"Test starter pack {name}",
        "author": "tests",
        "components": {
            "modes": [{"name": f"{name}-mode", "required": True}],
        },
    }
    manifest.update(overrides)
    return manifest


def make_pack(
    base: Path,
    name: str,
    *,
    manifest: Optional[Dict[str, Any]] = None,
    contents: Optional[Mapping[str, str]] = None,
    scripts: Optional[Mapping[str, str]] = None,
) -> Path:
    """Write ``<base>/<name>/`` with a manifest and one file per listed component.

    ``contents`` maps ``"<type>/<name>"`` to file text; unlisted components
    get a small markdown body (or a hook definition for ``hooks``).
    """
    data = manifest if manifest is not None else make_manifest(name)
    pack_dir = base / name
    write_json(pack_dir / "manifest.json", data)
    (pack_dir / "components").mkdir(parents=True, exist_ok=True)

    overrides = dict(contents or {})
    for ctype, refs in (data.get("components") or {}).items():
        for ref in refs:
            cname = ref["name"] if isinstance(ref, dict) else ref
            key = f"{ctype}/{cname}"
            if ctype == "hooks":
                default = (
                    '{"version": "1.0.0", "hooks": [{"id": "%s", "name": "%s", '
                    '"event": "SessionStart", "command": "echo %s"}]}' % (cname, cname, cname)
                )
                write_text(pack_dir / "components" / ctype / f"{cname}.json", overrides.get(key, default))
            else:
                write_text(pack_dir / "components" / ctype / f"{cname}.md", overrides.get(key, f"# {cname}\n"))

    for file_name, body in (scripts or {}).items():
        write_text(pack_dir / "scripts" / file_name, body)
    return pack_dir
