"""Test helper modules for the zcc test suite.

- io_utils: write YAML/JSON/text fixtures
- packs: build starter packs on disk
- cache_utils: cache reset utilities for test isolation
- cli: run one CLI command module with parsed arguments
- http: fake urlopen for remote pack sources
"""
from __future__ import annotations

from helpers.cache_utils import reset_zcc_caches
from helpers.io_utils import write_json, write_text, write_yaml
from helpers.packs import make_manifest, make_pack

__all__ = [
    "make_manifest",
    "make_pack",
    "reset_zcc_caches",
    "write_json",
    "write_text",
    "write_yaml",
]
