"""
zcc command status command.

SUMMARY: Show which slash commands are installed
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.commands import CommandGenerator

SUMMARY = "Show which slash commands are installed"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        generator = CommandGenerator(get_repo_root(args))
        installed = generator.installed_commands()
        missing_scripts = generator.missing_scripts()
        data = {
            "installed": generator.are_commands_installed(),
            "commands": installed,
            "missingScripts": missing_scripts,
        }

        if formatter.json_mode:
            formatter.json_output(data)
            return 0

        if data["installed"]:
            formatter.text("✓ All commands installed")
        else:
            formatter.text("Commands are not fully installed (run 'zcc command install')")
        for template in generator.templates:
            mark = "✓" if template.name in installed else "✗"
            formatter.text(f"  {mark} /{template.name} - {template.description}")
        if missing_scripts:
            formatter.text("\nMissing scripts:")
            for script in missing_scripts:
                formatter.text(f"  - {script}")
        return 0

    except Exception as e:
        formatter.error(e, error_code="command_status_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
