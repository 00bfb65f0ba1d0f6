"""
zcc source remove command.

SUMMARY: Remove a pack source
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root, get_source_registry
from zcc.core.sources import TrustManager

SUMMARY = "Remove a pack source"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Source identifier to remove")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = get_source_registry(args)
        registry.remove_source(args.id)

        trust = TrustManager(get_repo_root(args))
        trust.initialize()
        trust.remove_trusted_source(args.id)

        formatter.success({"source": args.id}, f"✓ Source '{args.id}' removed successfully")
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_remove_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
