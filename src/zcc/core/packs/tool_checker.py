"""Informational checks for external CLI tools a pack works best with.

Results never block an install; they only feed the guidance printed
alongside it.
"""
from __future__ import annotations

import logging
import re
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from zcc.core.packs.models import ToolDependency
from zcc.core.utils.subprocess import run_with_timeout

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"(\d+\.\d+\.\d+[^\s]*)")

# Commands tried in order; the first that succeeds reports the install method.
KNOWN_TOOLS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "ast-grep": (("ast-grep --version", "global"), ("npx --no-install @ast-grep/cli --version", "npx")),
    "@ast-grep/cli": (("ast-grep --version", "global"), ("npx --no-install @ast-grep/cli --version", "npx")),
    "ripgrep": (("rg --version", "system"),),
    "rg": (("rg --version", "system"),),
}


@dataclass(frozen=True, slots=True)
class ToolCheckResult:
    available: bool
    needs_installation: bool
    version: Optional[str] = None
    install_method: Optional[str] = None
    should_prompt: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "available": self.available,
            "needsInstallation": self.needs_installation,
            "shouldPrompt": self.should_prompt,
        }
        if self.version:
            data["version"] = self.version
        if self.install_method:
            data["installMethod"] = self.install_method
        return data


Runner = Callable[[Sequence[str], float], str]


def _default_runner(argv: Sequence[str], timeout: float) -> str:
    if shutil.which(argv[0]) is None:
        raise FileNotFoundError(argv[0])
    proc = run_with_timeout(list(argv), timeout=timeout)
    if proc.returncode != 0:
        raise subprocess.CalledProcessError(proc.returncode, list(argv), proc.stdout, proc.stderr)
    return proc.stdout or ""


class ToolDependencyChecker:
    def __init__(self, *, timeout: Optional[float] = None, runner: Optional[Runner] = None) -> None:
        if timeout is None:
            from zcc.core.config.domains import ToolsConfig

            timeout = ToolsConfig().check_timeout_seconds
        self.timeout = timeout
        self._run = runner or _default_runner

    def check_command(self, command: str) -> str:
        """Run ``command`` and return the version it reports."""
        output = self._run(shlex.split(command), self.timeout)
        match = VERSION_RE.search(output)
        if match:
            return match.group(1)
        lines = output.strip().splitlines()
        return lines[0] if lines else ""

    def check_tool(self, tool: ToolDependency, *, interactive: bool = False) -> ToolCheckResult:
        candidates = KNOWN_TOOLS.get(tool.name) or ((f"{tool.name} --version", "system"),)
        for command, method in candidates:
            try:
                version = self.check_command(command)
            except (OSError, subprocess.SubprocessError) as e:
                logger.debug("Tool check '%s' failed: %s", command, e)
                continue
            logger.debug("Tool %s is available (%s)", tool.name, version)
            return ToolCheckResult(available=True, needs_installation=False, version=version or None, install_method=method)

        if tool.required:
            logger.warning("Required tool %s is not available", tool.name)
        else:
            logger.debug("Optional tool %s is not available", tool.name)
        # Non-interactive runs show guidance for everything missing; interactive
        # runs only prompt for optional tools.
        should_prompt = (not tool.required) if interactive else True
        return ToolCheckResult(available=False, needs_installation=True, should_prompt=should_prompt)

    def check_tool_dependencies(
        self, tools: Sequence[ToolDependency], *, interactive: bool = False
    ) -> List[Tuple[ToolDependency, ToolCheckResult]]:
        return [(tool, self.check_tool(tool, interactive=interactive)) for tool in tools or ()]

    @staticmethod
    def generate_installation_guidance(
        results: Sequence[Tuple[ToolDependency, ToolCheckResult]],
    ) -> Dict[str, Any]:
        required = [(t, r) for t, r in results if t.required and not r.available]
        optional = [(t, r) for t, r in results if not t.required and r.should_prompt]

        steps: List[str] = []
        for label, group in (("required tool", required), ("optional tool", optional)):
            for tool, _ in group:
                if not tool.install_command:
                    continue
                suffix = " (recommended)" if label == "optional tool" else ""
                steps.append(f"# Install {label}: {tool.name}{suffix}")
                steps.append(tool.install_command)
                if tool.description:
                    steps.append(f"# {tool.description}")
                steps.append("")

        warning: Optional[str] = None
        if required:
            n = len(required)
            names = ", ".join(t.name for t, _ in required)
            warning = f"This pack requires {n} tool{'s' if n > 1 else ''} that {'are' if n > 1 else 'is'} not installed: {names}"
        elif optional:
            n = len(optional)
            names = ", ".join(t.name for t, _ in optional)
            warning = f"This pack can benefit from {n} optional tool{'s' if n > 1 else ''}: {names}"

        return {
            "required": [t.name for t, _ in required],
            "optional": [t.name for t, _ in optional],
            "installationSteps": steps,
            "warningMessage": warning,
        }


__all__ = ["ToolCheckResult", "ToolDependencyChecker", "VERSION_RE"]
