"""
zcc pack list command.

SUMMARY: List available or installed starter packs
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_pack_manager

SUMMARY = "List available or installed starter packs"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--installed", action="store_true", help="Only show packs installed in this project")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_pack_manager(args)

        if args.installed:
            installed = manager.list_installed_packs()
            if formatter.json_mode:
                formatter.json_output({"installed": installed})
                return 0
            if not installed:
                formatter.text("No packs installed")
                return 0
            formatter.text("Installed Packs:\n")
            for name, info in sorted(installed.items()):
                formatter.text(f"  {name} v{info.get('version', '?')} (from {info.get('source', 'unknown')})")
            return 0

        packs = manager.list_packs()
        if formatter.json_mode:
            formatter.json_output({"packs": [p.manifest.to_dict() for p in packs]})
            return 0
        if not packs:
            formatter.text("No starter packs available")
            return 0
        formatter.text("Available Starter Packs:\n")
        for pack in packs:
            m = pack.manifest
            formatter.text(f"  {m.name} v{m.version} - {m.description}")
        return 0

    except Exception as e:
        formatter.error(e, error_code="pack_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
