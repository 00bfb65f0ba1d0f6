"""
zcc source list command.

SUMMARY: List configured pack sources
"""
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

from zcc.cli import OutputFormatter, add_standard_flags, add_verbose_flag, get_source_registry

SUMMARY = "List configured pack sources"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_verbose_flag(parser)
    add_standard_flags(parser)


def _describe(cfg) -> List[str]:
    lines = [f"  Type: {cfg.type}", f"  Priority: {cfg.priority}"]
    if cfg.type == "github":
        lines.append(f"  Repository: {cfg.config.get('owner')}/{cfg.config.get('repo')}")
        lines.append(f"  Branch: {cfg.config.get('branch') or 'main'}")
    elif cfg.type == "http":
        lines.append(f"  URL: {cfg.config.get('url')}")
    elif cfg.type == "local":
        lines.append(f"  Path: {cfg.config.get('path') or '(bundled starter packs)'}")
    return lines


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = get_source_registry(args)
        default_id = registry.get_default_source()
        configs = registry.list_sources()

        entries: List[Dict[str, Any]] = []
        for cfg in configs:
            entry = cfg.to_dict()
            # Never echo credentials back.
            entry["config"].pop("token", None)
            entry["default"] = cfg.id == default_id
            if args.verbose and cfg.enabled:
                source = registry.get_source(cfg.id)
                if source is not None:
                    try:
                        entry["packs"] = source.list_packs()
                    except Exception as e:
                        entry["error"] = str(e)
            entries.append(entry)

        if formatter.json_mode:
            formatter.json_output({"sources": entries, "defaultSource": default_id})
            return 0

        if not entries:
            formatter.text("No pack sources configured")
            return 0

        formatter.text("Configured Pack Sources:\n")
        for cfg, entry in zip(configs, entries):
            status = "enabled" if cfg.enabled else "disabled"
            label = " (default)" if entry["default"] else ""
            formatter.text(f"{cfg.id}{label} - {status}")
            if args.verbose:
                for line in _describe(cfg):
                    formatter.text(line)
                if "packs" in entry:
                    formatter.text(f"  Available packs: {len(entry['packs'])}")
                    if 0 < len(entry["packs"]) <= 10:
                        formatter.text(f"    {', '.join(entry['packs'])}")
                elif "error" in entry:
                    formatter.text(f"  Error: {entry['error']}")
                formatter.text("")
        return 0

    except Exception as e:
        formatter.error(e, error_code="source_list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=SUMMARY)
    register_args(parser)
    sys.exit(main(parser.parse_args()))
