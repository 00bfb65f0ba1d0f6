"""
zcc source disable command.

SUMMARY: Disable a pack source
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_source_registry

SUMMARY = "Disable a pack source"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Source identifier to disable")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = get_source_registry(args)
        config = registry.disable_source(args.id)
        formatter.success({"source": config.id, "enabled": config.enabled}, f"✓ Source '{args.id}' disabled")
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_disable_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
