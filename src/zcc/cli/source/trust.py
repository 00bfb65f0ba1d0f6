"""
zcc source trust command.

SUMMARY: Manage source trust settings
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_repo_root
from zcc.core.sources import TrustManager

SUMMARY = "Manage source trust settings"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Source identifier")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--add", action="store_true", help="Add source to trusted list")
    action.add_argument("--remove", action="store_true", help="Remove source from trusted list")
    action.add_argument("--check", action="store_true", help="Check if source is trusted")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        trust = TrustManager(get_repo_root(args))
        trust.initialize()

        if args.check:
            trusted = trust.is_trusted_source(args.id)
            formatter.success(
                {"source": args.id, "trusted": trusted},
                f"Source '{args.id}' is {'trusted' if trusted else 'untrusted'}",
            )
        elif args.add:
            trust.add_trusted_source(args.id, {"type": "manual"})
            formatter.success({"source": args.id, "trusted": True}, f"✓ Source '{args.id}' added to trusted list")
        else:
            trust.remove_trusted_source(args.id)
            formatter.success({"source": args.id, "trusted": False}, f"✓ Source '{args.id}' removed from trusted list")
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_trust_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
