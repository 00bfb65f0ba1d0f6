"""In-memory registry of hooks grouped by event."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .hook import Hook
from .models import HookConfig, HookContext, HookEvent, HookResult

logger = logging.getLogger(__name__)


class HookRegistry:
    """Hooks per event, kept sorted by descending priority."""

    def __init__(self) -> None:
        self._hooks: Dict[HookEvent, List[Hook]] = {}

    def add_hook(self, config: HookConfig) -> Hook:
        hook = Hook(config)
        hooks = self._hooks.setdefault(config.event, [])
        hooks.append(hook)
        # sort() is stable, so equal priorities keep registration order
        hooks.sort(key=lambda h: h.priority, reverse=True)
        logger.debug("Registered hook %s for event %s", config.name, config.event.value)
        return hook

    def remove_hook(self, hook_id: str) -> bool:
        for hooks in self._hooks.values():
            for index, hook in enumerate(hooks):
                if hook.id == hook_id:
                    del hooks[index]
                    logger.debug("Removed hook %s", hook_id)
                    return True
        return False

    def get_hook(self, hook_id: str) -> Optional[Hook]:
        for hooks in self._hooks.values():
            for hook in hooks:
                if hook.id == hook_id:
                    return hook
        return None

    def get_hooks_for_event(self, event: HookEvent) -> List[Hook]:
        return list(self._hooks.get(HookEvent.parse(event), []))

    def execute_hooks(self, event: HookEvent, context: HookContext) -> List[HookResult]:
        """Run every enabled hook for ``event`` in priority order.

        A blocking result stops the chain. For ``UserPromptSubmit`` a hook's
        modified prompt becomes the prompt seen by the hooks after it.
        """
        event = HookEvent.parse(event)
        results: List[HookResult] = []
        for hook in self.get_hooks_for_event(event):
            if not hook.enabled:
                continue
            try:
                result = hook.execute(context)
            except Exception as e:
                logger.error("Hook %s failed: %s", hook.name, e)
                results.append(HookResult(success=False, error=str(e)))
                continue

            results.append(result)
            if result.should_block:
                logger.warning("Hook %s blocked execution", hook.name)
                break
            if event is HookEvent.USER_PROMPT_SUBMIT and result.modified_prompt:
                context.prompt = result.modified_prompt
        return results

    def load_hooks(self, configs: Iterable[HookConfig]) -> None:
        for config in configs:
            self.add_hook(config)

    def clear(self) -> None:
        self._hooks.clear()

    def get_all_hooks(self) -> List[Tuple[HookEvent, List[Hook]]]:
        return [(event, list(hooks)) for event, hooks in self._hooks.items()]

    def __len__(self) -> int:
        return sum(len(h) for h in self._hooks.values())


__all__ = ["HookRegistry"]
