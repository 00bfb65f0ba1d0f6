"""Run single CLI command modules the way the dispatcher does."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from types import ModuleType
from typing import Any, Sequence


def run_command(module: ModuleType, argv: Sequence[str], repo_root: Path) -> int:
    """Parse ``argv`` with ``module``'s arguments and call its ``main``."""
    parser = argparse.ArgumentParser(prog=module.__name__)
    module.register_args(parser)
    args = parser.parse_args([*argv, "--repo-root", str(repo_root)])
    return module.main(args)


def run_json(module: ModuleType, argv: Sequence[str], repo_root: Path, capsys) -> tuple[int, Any]:
    """Run a command with ``--json`` and return ``(exit code, parsed payload)``.

    The payload comes from stdout on success and from stderr otherwise.
    """
    code = run_command(module, [*argv, "--json"], repo_root)
    captured = capsys.readouterr()
    stream = captured.out if captured.out.strip() else captured.err
    return code, json.loads(stream)
