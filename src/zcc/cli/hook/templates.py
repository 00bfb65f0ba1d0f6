"""
zcc hook templates command.

SUMMARY: List available hook templates
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.hooks import HookManager

SUMMARY = "List available hook templates"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        templates = HookManager(get_repo_root(args)).list_templates()

        if formatter.json_mode:
            formatter.json_output({"templates": templates})
            return 0
        if not templates:
            formatter.text("No hook templates available")
            return 0

        formatter.text("Available Hook Templates:\n")
        for name in templates:
            formatter.text(f"  - {name}")
        formatter.text("\nUse 'zcc hook add <template>' to add a hook")
        return 0

    except Exception as e:
        formatter.error(e, error_code="hook_templates_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
