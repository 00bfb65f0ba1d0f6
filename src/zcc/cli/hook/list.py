"""
zcc hook list command.

SUMMARY: List configured hooks
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.hooks import HookManager

SUMMARY = "List configured hooks"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = HookManager(get_repo_root(args))
        manager.initialize()
        grouped = manager.get_all_hooks()

        if formatter.json_mode:
            formatter.json_output({
                "hooks": {event.value: [h.config.to_dict() for h in hooks] for event, hooks in grouped if hooks},
            })
            return 0

        if not any(hooks for _, hooks in grouped):
            formatter.text("No hooks configured")
            return 0

        formatter.text("Configured Hooks:\n")
        for event, hooks in grouped:
            if not hooks:
                continue
            formatter.text(f"  {event.value}:")
            for hook in hooks:
                status = "✓" if hook.enabled else "✗"
                formatter.text(f"    {status} {hook.name} ({hook.id})")
                if hook.config.description:
                    formatter.text(f"       {hook.config.description}")
            formatter.text("")
        return 0

    except Exception as e:
        formatter.error(e, error_code="hook_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
