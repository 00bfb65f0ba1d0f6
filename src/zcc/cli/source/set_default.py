"""
zcc source set-default command.

SUMMARY: Set the default pack source
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_source_registry

SUMMARY = "Set the default pack source"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Source identifier to use first when looking up packs")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = get_source_registry(args)
        registry.set_default_source(args.id)
        formatter.success({"defaultSource": args.id}, f"✓ Default source set to '{args.id}'")
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_set_default_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
