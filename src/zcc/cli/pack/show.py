"""
zcc pack show command.

SUMMARY: Show details of a starter pack
"""
from __future__ import annotations

import argparse
import sys

from zcc.cli import OutputFormatter, add_standard_flags, get_pack_manager

SUMMARY = "Show details of a starter pack"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    parser.add_argument("--source", help="Look the pack up in this source only")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_pack_manager(args)
        pack = manager.load_pack(args.name, args.source)
        deps = manager.resolve_dependencies(args.name)
        m = pack.manifest

        if formatter.json_mode:
            formatter.json_output({
                "manifest": m.to_dict(),
                "path": pack.path,
                "dependencies": deps.to_dict(),
                "installed": m.name in manager.list_installed_packs(),
            })
            return 0

        formatter.text(f"{m.name} v{m.version}")
        formatter.text(f"  {m.description}")
        formatter.text_kv("Author", m.author)
        if m.category:
            formatter.text_kv("Category", m.category)
        if m.tags:
            formatter.text_kv("Tags", ", ".join(m.tags))
        if deps.resolved:
            formatter.text_kv("Dependencies", ", ".join(deps.resolved))
        for ctype, ref in m.iter_components():
            marker = "*" if ref.required else "-"
            formatter.text(f"    {marker} {ctype}/{ref.name}" + (f": {ref.description}" if ref.description else ""))
        if m.hooks:
            formatter.text_kv("Hooks", ", ".join(f"{h.name} ({h.event})" for h in m.hooks))
        formatter.text_kv("Location", pack.path)
        return 0

    except Exception as e:
        formatter.error(e, error_code="pack_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
