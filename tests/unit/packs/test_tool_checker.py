from __future__ import annotations

import subprocess
from typing import Dict, List, Sequence

from zcc.core.packs.models import ToolDependency
from zcc.core.packs.tool_checker import ToolCheckResult, ToolDependencyChecker


class FakeRunner:
    """Answers known argv[0] values with canned output; anything else is missing."""

    def __init__(self, outputs: Dict[str, str]) -> None:
        self.outputs = outputs
        self.calls: List[List[str]] = []

    def __call__(self, argv: Sequence[str], timeout: float) -> str:
        self.calls.append(list(argv))
        key = " ".join(argv)
        if key not in self.outputs:
            raise FileNotFoundError(argv[0])
        return self.outputs[key]


class TestCheckTool:
    def test_version_extracted(self) -> None:
        runner = FakeRunner({"rg --version": "ripgrep 14.1.0 (rev abc)\n"})
        checker = ToolDependencyChecker(timeout=1, runner=runner)

        result = checker.check_tool(ToolDependency(name="ripgrep"))

        assert result == ToolCheckResult(available=True, needs_installation=False, version="14.1.0", install_method="system")

    def test_falls_back_to_npx_for_ast_grep(self) -> None:
        runner = FakeRunner({"npx --no-install @ast-grep/cli --version": "0.20.1"})
        result = ToolDependencyChecker(timeout=1, runner=runner).check_tool(ToolDependency(name="ast-grep"))

        assert result.available
        assert result.install_method == "npx"
        assert runner.calls[0] == ["ast-grep", "--version"]

    def test_unknown_tool_uses_name_version(self) -> None:
        runner = FakeRunner({"jq --version": "jq-1.7"})
        result = ToolDependencyChecker(timeout=1, runner=runner).check_tool(ToolDependency(name="jq"))
        assert result.available
        assert result.version == "jq-1.7"

    def test_failed_command_means_missing(self) -> None:
        def runner(argv, timeout):
            raise subprocess.CalledProcessError(1, list(argv))

        result = ToolDependencyChecker(timeout=1, runner=runner).check_tool(ToolDependency(name="jq", required=True))
        assert result.available is False
        assert result.needs_installation is True
        assert result.should_prompt is True

    def test_interactive_only_prompts_for_optional(self) -> None:
        checker = ToolDependencyChecker(timeout=1, runner=FakeRunner({}))
        required = checker.check_tool(ToolDependency(name="a", required=True), interactive=True)
        optional = checker.check_tool(ToolDependency(name="b", required=False), interactive=True)
        assert required.should_prompt is False
        assert optional.should_prompt is True


class TestGuidance:
    def test_required_tools_produce_warning_and_steps(self) -> None:
        checker = ToolDependencyChecker(timeout=1, runner=FakeRunner({}))
        tools = [
            ToolDependency(name="jq", required=True, install_command="brew install jq", description="JSON CLI"),
            ToolDependency(name="fd", required=True),
        ]

        guidance = checker.generate_installation_guidance(checker.check_tool_dependencies(tools))

        assert guidance["required"] == ["jq", "fd"]
        assert guidance["warningMessage"] == "This pack requires 2 tools that are not installed: jq, fd"
        assert guidance["installationSteps"] == ["# Install required tool: jq", "brew install jq", "# JSON CLI", ""]

    def test_optional_only(self) -> None:
        checker = ToolDependencyChecker(timeout=1, runner=FakeRunner({}))
        tools = [ToolDependency(name="rg", required=False, install_command="brew install ripgrep")]

        guidance = checker.generate_installation_guidance(checker.check_tool_dependencies(tools))

        assert guidance["optional"] == ["rg"]
        assert guidance["warningMessage"] == "This pack can benefit from 1 optional tool: rg"
        assert guidance["installationSteps"][0] == "# Install optional tool: rg (recommended)"

    def test_everything_available(self) -> None:
        checker = ToolDependencyChecker(timeout=1, runner=FakeRunner({"rg --version": "ripgrep 14.0.0"}))
        guidance = checker.generate_installation_guidance(
            checker.check_tool_dependencies([ToolDependency(name="rg")])
        )
        assert guidance["warningMessage"] is None
        assert guidance["installationSteps"] == []
