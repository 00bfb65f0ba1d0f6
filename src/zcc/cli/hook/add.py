"""
zcc hook add command.

SUMMARY: Add a hook from a template
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.hooks import HookManager

SUMMARY = "Add a hook from a template"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("template", help="Template name (see 'zcc hook templates')")
    parser.add_argument("--id", dest="hook_id", help="Custom hook ID")
    parser.add_argument("--name", help="Custom hook name")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = HookManager(get_repo_root(args))
        manager.initialize()
        config = manager.create_hook_from_template(args.template, hook_id=args.hook_id, name=args.name)
        formatter.success(
            {"hook": config.to_dict(), "template": args.template},
            f"✓ Added hook '{config.id}' from template: {args.template}",
        )
        return 0

    except Exception as e:
        formatter.error(e, error_code="hook_add_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
