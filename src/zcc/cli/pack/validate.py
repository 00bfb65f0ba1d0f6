"""
zcc pack validate command.

SUMMARY: Validate a starter pack's manifest and components
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_pack_manager, resolve_pack_source

SUMMARY = "Validate a starter pack's manifest and components"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    parser.add_argument("--source", help="Look the pack up in this source only")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_pack_manager(args)
        source_name, source = resolve_pack_source(manager, args.name, args.source)
        pack = manager.load_pack(args.name, source_name)
        result = manager.validate_pack(pack, source)
        deps = manager.registry.validate_dependencies(args.name)
        valid = result.valid and deps["valid"]

        if formatter.json_mode:
            formatter.json_output({**result.to_dict(), "valid": valid, "dependencyIssues": deps["issues"]})
            return 0 if valid else 1

        for error in result.errors + deps["issues"]:
            formatter.text(f"  ✗ {error}")
        for warning in result.warnings:
            formatter.text(f"  ! {warning}")
        formatter.text(f"✓ Pack '{args.name}' is valid" if valid else f"Pack '{args.name}' is invalid")
        return 0 if valid else 1

    except Exception as e:
        formatter.error(e, error_code="pack_validate_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
