"""
zcc source add command.

SUMMARY: Add a pack source
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root, get_source_registry
from zcc.core.exceptions import ConfigurationError
from zcc.core.sources import SourceConfig, TrustManager

SUMMARY = "Add a pack source"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Unique identifier for the source")
    parser.add_argument(
        "--type",
        "-t",
        dest="source_type",
        choices=["local", "github", "http"],
        default="github",
        help="Source type (default: github)",
    )
    parser.add_argument("--owner", "-o", help="GitHub repository owner")
    parser.add_argument("--repo", "-r", help="GitHub repository name")
    parser.add_argument("--branch", "-b", default="main", help="GitHub branch (default: main)")
    parser.add_argument("--directory", "-d", default="packs", help="Directory containing packs (default: packs)")
    parser.add_argument("--path", "-p", help="Directory of packs (local sources)")
    parser.add_argument("--url", help="Base URL serving index.json (http sources)")
    parser.add_argument("--token", help="Access token for private repositories")
    parser.add_argument("--trust", action="store_true", help="Mark this source as trusted")
    parser.add_argument("--priority", type=int, default=10, help="Lookup priority, lower first (default: 10)")
    add_standard_flags(parser)


def build_config(args: argparse.Namespace) -> SourceConfig:
    options: Dict[str, Any] = {}
    if args.source_type == "github":
        if not args.owner or not args.repo:
            raise ConfigurationError("GitHub sources require --owner and --repo options")
        options = {
            "owner": args.owner,
            "repo": args.repo,
            "branch": args.branch,
            "directory": args.directory,
            "trustLevel": "trusted" if args.trust else "untrusted",
        }
    elif args.source_type == "local":
        if not args.path:
            raise ConfigurationError("Local sources require --path option")
        options = {"path": str(Path(args.path).resolve())}
    elif args.source_type == "http":
        if not args.url:
            raise ConfigurationError("HTTP sources require --url option")
        options = {"url": args.url}
    if args.token:
        options["token"] = args.token
    return SourceConfig(id=args.id, type=args.source_type, enabled=True, priority=args.priority, config=options)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = build_config(args)
        registry = get_source_registry(args)
        registry.add_source(config)

        if args.trust:
            trust = TrustManager(get_repo_root(args))
            trust.initialize()
            trust.add_trusted_source(config.id, {"type": config.type, "description": "Added via CLI"})

        packs = []
        source = registry.get_source(config.id)
        if source is not None:
            packs = source.list_packs()

        shown = ", ".join(packs[:5]) + ("..." if len(packs) > 5 else "")
        message = f"✓ Source '{config.id}' added successfully"
        if packs:
            message += f"\n  Found {len(packs)} pack(s): {shown}"
        formatter.success(
            {"source": config.id, "type": config.type, "trusted": args.trust, "packs": packs},
            message,
        )
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_add_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
