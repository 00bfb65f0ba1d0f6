"""
zcc command-line entry point.

Commands are discovered, not listed: every public module in a domain
package (``zcc/cli/<domain>/<command>.py``) becomes ``zcc <domain>
<command>``. A module provides ``SUMMARY``, ``register_args(parser)`` and
``main(args) -> int``. Underscores in module names become dashes.
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

CLI_DIR = Path(__file__).parent


@dataclass(frozen=True)
class CommandInfo:
    name: str
    module: ModuleType

    @property
    def summary(self) -> str:
        return getattr(self.module, "SUMMARY", self.name)

    @property
    def cli_name(self) -> str:
        return self.name.replace("_", "-")

    @property
    def main(self) -> Optional[Callable[[argparse.Namespace], int]]:
        return getattr(self.module, "main", None)

    @property
    def register_args(self) -> Optional[Callable[[argparse.ArgumentParser], None]]:
        return getattr(self.module, "register_args", None)


def _is_command_file(path: Path) -> bool:
    return path.suffix == ".py" and not path.name.startswith("_")


@lru_cache(maxsize=1)
def discover_domains() -> Dict[str, Path]:
    """Domain name to directory, for packages holding at least one command."""
    return {
        entry.name: entry
        for entry in sorted(CLI_DIR.iterdir())
        if entry.is_dir() and not entry.name.startswith("_") and any(map(_is_command_file, entry.iterdir()))
    }


@lru_cache(maxsize=None)
def discover_commands(domain: str) -> Dict[str, CommandInfo]:
    """Import the command modules of ``domain``.

    A module that fails to import is reported on stderr and left out, so one
    broken command does not take the whole CLI down.
    """
    found: Dict[str, CommandInfo] = {}
    for path in sorted(filter(_is_command_file, (CLI_DIR / domain).iterdir())):
        module_name = f"zcc.cli.{domain}.{path.stem}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            print(f"Warning: skipping {domain} {path.stem}: {e}", file=sys.stderr)
            continue
        found[path.stem] = CommandInfo(path.stem, module)
    return found


def _version() -> str:
    from zcc import __version__

    return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zcc",
        description="Manage modes, workflows, agents, hooks and starter packs for Claude projects",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument(
        "--verbose",
        dest="global_verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    domains = parser.add_subparsers(dest="domain", metavar="<domain>")

    for domain, _ in discover_domains().items():
        commands = discover_commands(domain)
        if not commands:
            continue
        domain_parser = domains.add_parser(domain, help=f"{domain.title()} commands")
        domain_parser.set_defaults(_domain_parser=domain_parser)
        subcommands = domain_parser.add_subparsers(dest="command", metavar="<command>")
        for info in commands.values():
            aliases: List[str] = [info.name] if info.cli_name != info.name else []
            cmd_parser = subcommands.add_parser(info.cli_name, aliases=aliases, help=info.summary)
            if info.register_args is not None:
                info.register_args(cmd_parser)
            if info.main is not None:
                cmd_parser.set_defaults(_func=info.main)
    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    from zcc.core.config.domains import LoggingConfig
    from zcc.core.stdlib_logging import configure_logging, suppress_lastresort_in_json_mode

    if getattr(args, "json", False):
        suppress_lastresort_in_json_mode()
    if args.global_verbose:
        configure_logging(level="DEBUG")
        return
    repo_root = getattr(args, "repo_root", None)
    cfg = LoggingConfig(repo_root=Path(repo_root).resolve() if repo_root else None)
    configure_logging(level=cfg.level, log_path=cfg.file)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv`` (default ``sys.argv[1:]``), run the command, return its exit code."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    func: Optional[Callable[[argparse.Namespace], int]] = getattr(args, "_func", None)
    if func is None:
        getattr(args, "_domain_parser", parser).print_help()
        return 0

    _setup_logging(args)
    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
