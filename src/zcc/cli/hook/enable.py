"""
zcc hook enable command.

SUMMARY: Enable a hook
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.hooks import HookManager

SUMMARY = "Enable a hook"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Hook ID")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = HookManager(get_repo_root(args))
        manager.initialize()
        manager.enable_hook(args.id)
        formatter.success({"hook": args.id, "enabled": True}, f"✓ Enabled hook: {args.id}")
        return 0

    except Exception as e:
        formatter.error(e, error_code="hook_enable_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
