"""Pack source implementations."""
from __future__ import annotations

from .base import PackSource, parse_manifest
from .github import GitHubPackSource, parse_github_url
from .http import HttpPackSource
from .local import LocalPackSource, default_starter_packs_dir

SOURCE_TYPES = {
    LocalPackSource.source_type: LocalPackSource,
    GitHubPackSource.source_type: GitHubPackSource,
    HttpPackSource.source_type: HttpPackSource,
}

__all__ = [
    "GitHubPackSource",
    "HttpPackSource",
    "LocalPackSource",
    "PackSource",
    "SOURCE_TYPES",
    "default_starter_packs_dir",
    "parse_github_url",
    "parse_manifest",
]
