"""
zcc command cleanup command.

SUMMARY: Remove generated slash commands
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.commands import CommandGenerator

SUMMARY = "Remove generated slash commands"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        removed = CommandGenerator(get_repo_root(args)).cleanup()
        message = "✓ Removed .claude/commands" if removed else "No commands to remove"
        formatter.success({"removed": removed}, message)
        return 0

    except Exception as e:
        formatter.error(e, error_code="command_cleanup_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
