"""Starter packs served over plain HTTP(S).

Layout mirrors the local source::

    <base>/index.json                                  (optional listing)
    <base>/<pack>/manifest.json
    <base>/<pack>/components/<type>/<name>.{md,json}
    <base>/<pack>/scripts/<file>                       (listed in manifest "scripts")
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from zcc.core.exceptions import NetworkError, PackError, ZccError
from zcc.core.packs.models import PackStructure
from zcc.core.packs.sources._http import HttpClient
from zcc.core.packs.sources.base import PackSource, parse_manifest

logger = logging.getLogger(__name__)


class HttpPackSource(PackSource):
    source_type = "http"

    def __init__(
        self,
        base_url: str,
        *,
        name: str = "http",
        token: Optional[str] = None,
        client: Optional[HttpClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.name = name
        self.token = token
        self.client = client or HttpClient.from_config()
        self._manifests: Dict[str, PackStructure] = {}

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *parts])

    def list_packs(self) -> List[str]:
        data = self.client.get_json(self._url("index.json"), self._headers())
        entries = data.get("packs", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise PackError(f"Invalid pack index at {self._url('index.json')}", "INVALID_RESPONSE")
        names = []
        for entry in entries:
            name = entry.get("name") if isinstance(entry, dict) else entry
            if name:
                names.append(str(name))
        return sorted(set(names))

    def load_pack(self, name: str) -> PackStructure:
        cached = self._manifests.get(name)
        if cached is not None:
            return cached

        url = self._url(name, "manifest.json")
        try:
            text = self.client.get_text(url, self._headers())
        except NetworkError as e:
            if e.status == 404:
                raise PackError(f"Starter pack '{name}' not found", "PACK_NOT_FOUND", f"Expected URL: {url}") from e
            raise PackError(f"Failed to load pack '{name}': {e}", "PACK_LOAD_ERROR") from e

        structure = PackStructure(
            manifest=parse_manifest(text, origin=url),
            path=self._url(name),
            components_path=self._url(name, "components"),
        )
        self._manifests[name] = structure
        return structure

    def has_pack(self, name: str) -> bool:
        try:
            self.load_pack(name)
        except ZccError as e:
            logger.debug("Pack '%s' unavailable from %s: %s", name, self.base_url, e)
            return False
        return True

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._url(pack_name, self.component_relpath(component_type, component_name))

    def read_component(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self.client.get_text(
            self.get_component_path(pack_name, component_type, component_name),
            self._headers(),
        )

    def list_pack_files(self, pack_name: str) -> Dict[str, bytes]:
        manifest = self.load_pack(pack_name).manifest
        files: Dict[str, bytes] = {}
        for file_name in manifest.raw.get("scripts") or []:
            files[str(file_name)] = self.client.get(self._url(pack_name, "scripts", str(file_name)), self._headers())
        return files

    def get_source_info(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.source_type, "path": self.base_url}


__all__ = ["HttpPackSource"]
