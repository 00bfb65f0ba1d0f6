from __future__ import annotations

from pathlib import Path

from zcc.core.hooks.models import HookConfig, HookContext, HookEvent
from zcc.core.hooks.registry import HookRegistry


def _config(hook_id: str, command: str = "true", event=HookEvent.STOP, **kwargs) -> HookConfig:
    return HookConfig(id=hook_id, name=hook_id, event=event, command=command, **kwargs)


class TestOrdering:
    def test_descending_priority_and_stable(self) -> None:
        registry = HookRegistry()
        for hook_id, priority in (("low", 1), ("first-mid", 5), ("high", 10), ("second-mid", 5)):
            registry.add_hook(_config(hook_id, priority=priority))

        ids = [h.id for h in registry.get_hooks_for_event(HookEvent.STOP)]
        assert ids == ["high", "first-mid", "second-mid", "low"]

    def test_lookup_and_remove(self) -> None:
        registry = HookRegistry()
        registry.load_hooks([_config("a"), _config("b", event=HookEvent.SESSION_START)])

        assert len(registry) == 2
        assert registry.get_hook("b").event is HookEvent.SESSION_START
        assert registry.get_hooks_for_event("SessionStart")[0].id == "b"
        assert registry.remove_hook("a") is True
        assert registry.remove_hook("a") is False
        assert registry.get_hook("a") is None

        registry.clear()
        assert len(registry) == 0


class TestExecution:
    def test_blocking_hook_stops_the_chain(self, tmp_path: Path) -> None:
        marker = tmp_path / "second-ran"
        registry = HookRegistry()
        registry.add_hook(_config("later", f"touch {marker}", event=HookEvent.PRE_TOOL_USE, priority=1))
        registry.add_hook(_config("guard", "exit 2", event=HookEvent.PRE_TOOL_USE, priority=100))

        results = registry.execute_hooks(
            HookEvent.PRE_TOOL_USE,
            HookContext(event=HookEvent.PRE_TOOL_USE, project_root=tmp_path, tool="Bash"),
        )

        assert len(results) == 1
        assert results[0].should_block is True
        assert not marker.exists()

    def test_disabled_hooks_are_skipped(self, tmp_path: Path) -> None:
        registry = HookRegistry()
        registry.add_hook(_config("off", "exit 1", enabled=False))
        registry.add_hook(_config("on", "true"))

        results = registry.execute_hooks(HookEvent.STOP, HookContext(event=HookEvent.STOP, project_root=tmp_path))

        assert [r.exit_code for r in results] == [0]

    def test_modified_prompt_feeds_next_hook(self, tmp_path: Path) -> None:
        registry = HookRegistry()
        event = HookEvent.USER_PROMPT_SUBMIT
        registry.add_hook(_config("upper", "tr a-z A-Z", event=event, priority=2))
        registry.add_hook(_config("suffix", "cat; printf '!'", event=event, priority=1))
        context = HookContext(event=event, project_root=tmp_path, prompt="hi")

        results = registry.execute_hooks(event, context)

        assert [r.modified_prompt for r in results] == ["HI", "HI!"]
        assert context.prompt == "HI!"

    def test_start_errors_become_failed_results(self, tmp_path: Path) -> None:
        registry = HookRegistry()
        registry.add_hook(_config("broken", priority=2))
        registry.add_hook(_config("also", priority=1))

        results = registry.execute_hooks(
            HookEvent.STOP, HookContext(event=HookEvent.STOP, project_root=tmp_path / "missing")
        )

        assert len(results) == 2
        assert all(r.success is False for r in results)
        assert "failed to start" in results[0].error
