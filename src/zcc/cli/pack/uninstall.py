"""
zcc pack uninstall command.

SUMMARY: Uninstall a starter pack, keeping files you have modified
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_pack_manager

SUMMARY = "Uninstall a starter pack, keeping files you have modified"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        result = get_pack_manager(args).uninstall_pack(args.name)

        if formatter.json_mode:
            formatter.json_output({**result.to_dict(), "pack": args.name})
            return 0 if result.success else 1

        for ctype, names in result.skipped.items():
            for item in names:
                formatter.text(f"  = {ctype}/{item} (modified, kept)")
        if result.success:
            formatter.text(f"✓ Uninstalled pack '{args.name}' ({result.total_installed()} files removed)")
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 0 if result.success else 1

    except Exception as e:
        formatter.error(e, error_code="pack_uninstall_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
