"""
zcc CLI package.

Each sub-package (``source/``, ``hook/``, ``command/``, ``pack/``) is a
command domain; each public module inside it is one command exposing
``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""
from ._args import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._output import OutputFormatter
from ._utils import get_pack_manager, get_repo_root, get_source_registry, resolve_pack_source

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_repo_root_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
    "get_repo_root",
    "get_source_registry",
    "get_pack_manager",
    "resolve_pack_source",
]
