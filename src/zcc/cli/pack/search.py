"""
zcc pack search command.

SUMMARY: Search starter packs by category, tag, compatibility or author
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_pack_manager

SUMMARY = "Search starter packs by category, tag, compatibility or author"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category", help="Exact category")
    parser.add_argument("--tag", action="append", dest="tags", default=[], help="Required tag (repeatable)")
    parser.add_argument(
        "--compatible-with",
        action="append",
        dest="compatible_with",
        default=[],
        help="Compatible target (repeatable; any may match)",
    )
    parser.add_argument("--author", help="Exact author")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_pack_manager(args)
        packs = manager.search_packs(
            category=args.category,
            tags=args.tags,
            compatible_with=args.compatible_with,
            author=args.author,
        )

        if formatter.json_mode:
            formatter.json_output({"packs": [p.manifest.to_dict() for p in packs]})
            return 0
        if not packs:
            formatter.text("No matching packs")
            return 0
        for pack in packs:
            m = pack.manifest
            formatter.text(f"  {m.name} v{m.version} [{m.category or 'general'}] - {m.description}")
        return 0

    except Exception as e:
        formatter.error(e, error_code="pack_search_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
