"""Starter packs stored in a GitHub repository.

Reads through the contents API (``/repos/<owner>/<repo>/contents/...``), where
file bodies arrive base64-encoded. Responses are cached for a short TTL.
"""
from __future__ import annotations

import base64
import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from zcc.core.exceptions import NetworkError, PackError, ZccError
from zcc.core.packs.models import PackStructure
from zcc.core.packs.sources._http import HttpClient
from zcc.core.packs.sources.base import PackSource, parse_manifest

logger = logging.getLogger(__name__)

_GITHUB_URL_PATTERNS = (
    re.compile(r"^https?://github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$"),
    re.compile(r"^github:([^/]+)/([^/]+)$"),
    re.compile(r"^git@github\.com:([^/]+)/([^/]+?)(?:\.git)?$"),
)


def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """Return ``(owner, repo)`` for a GitHub URL, or None if it is not one."""
    for pattern in _GITHUB_URL_PATTERNS:
        match = pattern.match(url.strip())
        if match:
            return match.group(1), match.group(2)
    return None


class GitHubPackSource(PackSource):
    source_type = "github"

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        name: str = "github",
        branch: Optional[str] = None,
        directory: Optional[str] = None,
        token: Optional[str] = None,
        api_base: Optional[str] = None,
        cache_ttl: Optional[float] = None,
        client: Optional[HttpClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        from zcc.core.config.domains import GitHubConfig

        cfg = GitHubConfig()
        self.owner = owner
        self.repo = repo
        self.name = name
        self.branch = branch or cfg.branch
        self.directory = (directory if directory is not None else cfg.directory).strip("/")
        self.token = token
        self.api_base = (api_base or cfg.api_base).rstrip("/")
        self.cache_ttl = cfg.cache_ttl_seconds if cache_ttl is None else cache_ttl
        self.client = client or HttpClient.from_config()
        self._clock = clock
        self._cache: Dict[str, Tuple[float, Any]] = {}

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _contents_url(self, path: str) -> str:
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/{path}?ref={self.branch}"

    def _pack_path(self, pack_name: str, *parts: str) -> str:
        return "/".join(p for p in (self.directory, pack_name, *parts) if p)

    def _contents(self, path: str) -> Any:
        url = self._contents_url(path)
        now = self._clock()
        hit = self._cache.get(url)
        if hit is not None and now - hit[0] < self.cache_ttl:
            return hit[1]
        data = self.client.get_json(url, self._headers())
        self._cache[url] = (now, data)
        return data

    def _file_bytes(self, path: str) -> bytes:
        data = self._contents(path)
        if not isinstance(data, dict) or data.get("type") != "file":
            raise PackError(f"Not a file in {self.owner}/{self.repo}: {path}", "INVALID_RESPONSE")
        return base64.b64decode(data.get("content") or "")

    def clear_cache(self) -> None:
        self._cache.clear()

    def list_packs(self) -> List[str]:
        try:
            contents = self._contents(self.directory)
        except NetworkError as e:
            raise PackError(f"Failed to list packs from GitHub: {e}", "PACK_LOAD_ERROR") from e
        if not isinstance(contents, list):
            raise PackError("Failed to list packs from GitHub: Invalid response from GitHub API", "INVALID_RESPONSE")
        return sorted(item["name"] for item in contents if isinstance(item, dict) and item.get("type") == "dir")

    def load_pack(self, name: str) -> PackStructure:
        path = self._pack_path(name, "manifest.json")
        try:
            raw = self._file_bytes(path)
        except NetworkError as e:
            if e.status == 404:
                raise PackError(
                    f"Starter pack '{name}' not found",
                    "PACK_NOT_FOUND",
                    f"Expected path: {self.owner}/{self.repo}/{path}",
                ) from e
            raise PackError(f"Failed to load pack '{name}': {e}", "PACK_LOAD_ERROR") from e

        return PackStructure(
            manifest=parse_manifest(raw.decode("utf-8"), origin=f"github:{self.owner}/{self.repo}/{path}"),
            path=f"github:{self.owner}/{self.repo}/{self._pack_path(name)}",
            components_path=f"github:{self.owner}/{self.repo}/{self._pack_path(name, 'components')}",
        )

    def has_pack(self, name: str) -> bool:
        try:
            self.load_pack(name)
        except ZccError as e:
            logger.debug("Pack '%s' unavailable from %s/%s: %s", name, self.owner, self.repo, e)
            return False
        return True

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._pack_path(pack_name, self.component_relpath(component_type, component_name))

    def read_component(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._file_bytes(self.get_component_path(pack_name, component_type, component_name)).decode("utf-8")

    def list_pack_files(self, pack_name: str) -> Dict[str, bytes]:
        try:
            listing = self._contents(self._pack_path(pack_name, "scripts"))
        except NetworkError as e:
            if e.status == 404:
                return {}
            raise
        files: Dict[str, bytes] = {}
        for item in listing if isinstance(listing, list) else []:
            if isinstance(item, dict) and item.get("type") == "file":
                files[item["name"]] = self._file_bytes(item.get("path") or self._pack_path(pack_name, "scripts", item["name"]))
        return files

    def get_source_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.source_type,
            "path": f"https://github.com/{self.owner}/{self.repo}/tree/{self.branch}/{self.directory}",
        }


__all__ = ["GitHubPackSource", "parse_github_url"]
