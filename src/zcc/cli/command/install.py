"""
zcc command install command.

SUMMARY: Generate Claude slash commands in .claude/commands
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_force_flag, add_standard_flags, get_repo_root
from zcc.core.commands import CommandGenerator

SUMMARY = "Generate Claude slash commands in .claude/commands"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_force_flag(parser, help_text="Generate even when required scripts are missing")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        generator = CommandGenerator(get_repo_root(args))
        written = generator.initialize(force=args.force)
        names = [p.stem for p in written]
        formatter.success(
            {"commands": names, "directory": str(generator.commands_dir)},
            f"✓ Generated {len(names)} commands: " + ", ".join(f"/{n}" for n in names),
        )
        return 0

    except Exception as e:
        formatter.error(e, error_code="command_install_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
