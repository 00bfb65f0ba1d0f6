"""
zcc pack install command.

SUMMARY: Install a starter pack and its dependencies
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_force_flag,
    add_standard_flags,
    get_pack_manager,
    get_repo_root,
    resolve_pack_source,
)
from zcc.core.exceptions import PackError
from zcc.core.packs import PackInstallOptions
from zcc.core.sources import TrustManager

SUMMARY = "Install a starter pack and its dependencies"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    add_force_flag(parser, help_text="Overwrite existing files and ignore ownership conflicts")
    parser.add_argument("--skip-optional", action="store_true", help="Skip components not marked required")
    add_dry_run_flag(parser)
    parser.add_argument("--source", help="Install from this source only")
    parser.add_argument("--yes", "-y", action="store_true", help="Consent to installing from an untrusted source")
    add_standard_flags(parser)


def _print_result(formatter: OutputFormatter, name: str, result, dry_run: bool) -> None:
    verb = "Would install" if dry_run else "Installed"
    for ctype, names in result.installed.items():
        for item in names:
            formatter.text(f"  + {ctype}/{item}")
    for ctype, names in result.skipped.items():
        for item in names:
            formatter.text(f"  = {ctype}/{item} (skipped)")
    formatter.text(f"✓ {verb} pack '{name}' ({result.total_installed()} components, {result.total_skipped()} skipped)")
    if result.post_install_message:
        formatter.text(f"\n{result.post_install_message}")


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_pack_manager(args)
        source_name, source = resolve_pack_source(manager, args.name, args.source)
        pack = manager.load_pack(args.name, source_name)

        trust = TrustManager(get_repo_root(args))
        trust.initialize()
        security = trust.validate_pack(pack, source)
        if not security.valid:
            raise PackError("; ".join(security.errors), "PACK_UNTRUSTED")
        if security.requires_consent and not args.yes and not args.dry_run:
            raise PackError(
                f"Pack '{args.name}' requires consent to install",
                "CONSENT_REQUIRED",
                "Review the warnings and re-run with --yes: " + "; ".join(security.warnings),
            )

        options = PackInstallOptions(
            force=args.force,
            skip_optional=args.skip_optional,
            dry_run=args.dry_run,
            source=args.source,
        )
        result = manager.install_pack(args.name, options)

        if result.success and not args.dry_run:
            trust.record_installation(source, pack, user_consent=bool(args.yes))

        if formatter.json_mode:
            formatter.json_output({**result.to_dict(), "pack": args.name, "warnings": security.warnings})
        elif result.success:
            _print_result(formatter, args.name, result, args.dry_run)
        else:
            for error in result.errors:
                print(f"Error: {error}", file=sys.stderr)
        return 0 if result.success else 1

    except Exception as e:
        formatter.error(e, error_code="pack_install_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
