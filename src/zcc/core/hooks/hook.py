"""Executable hooks.

A :class:`Hook` wraps a :class:`HookConfig` and decides from the event and
its matcher whether it applies to a given :class:`HookContext`. Matching
hooks run their command through the shell with the prompt on stdin.
"""
from __future__ import annotations

import json
import logging
import os
import re
import shlex
import subprocess
import time
from typing import Dict

from zcc.core.exceptions import HookError
from zcc.core.utils.subprocess import run_with_timeout

from .matchers import DEFAULT_FUZZY_CONFIDENCE, FuzzyMatcher, KeywordMatcher
from .models import HookConfig, HookContext, HookEvent, HookResult

logger = logging.getLogger(__name__)

# Exit status a hook uses to veto the action it was triggered by.
BLOCK_EXIT_CODE = 2

_TOOL_EVENTS = (HookEvent.PRE_TOOL_USE, HookEvent.POST_TOOL_USE)


class Hook:
    def __init__(self, config: HookConfig) -> None:
        self.config = config

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def event(self) -> HookEvent:
        return self.config.event

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def priority(self) -> int:
        return self.config.priority or 0

    def __repr__(self) -> str:
        return f"Hook(id={self.id!r}, event={self.event.value!r}, priority={self.priority})"

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def should_run(self, context: HookContext) -> bool:
        if self.event is HookEvent.USER_PROMPT_SUBMIT:
            return self._matches_prompt(context)
        if self.event in _TOOL_EVENTS:
            return self._matches_tool(context)
        return True

    def _matches_prompt(self, context: HookContext) -> bool:
        if not context.prompt:
            return False
        matcher = self.config.matcher
        if matcher is None:
            return True
        prompt = context.prompt
        if matcher.type == "regex":
            try:
                return re.search(matcher.pattern, prompt, re.IGNORECASE) is not None
            except re.error:
                logger.warning("Hook %s has an invalid regex: %s", self.id, matcher.pattern)
                return False
        if matcher.type == "exact":
            return prompt.strip().lower() == matcher.pattern.strip().lower()
        if matcher.type == "keyword":
            return KeywordMatcher(matcher.pattern).matches(prompt)
        if matcher.type == "fuzzy":
            confidence = matcher.confidence if matcher.confidence is not None else DEFAULT_FUZZY_CONFIDENCE
            return FuzzyMatcher(matcher.pattern, confidence).matches(prompt)
        return True

    def _matches_tool(self, context: HookContext) -> bool:
        if not context.tool:
            return False
        matcher = self.config.matcher
        if matcher is None:
            return True
        if matcher.type == "tool":
            tools = [t.strip() for t in matcher.pattern.split(",") if t.strip()]
            return context.tool in tools
        if matcher.type == "regex":
            try:
                return re.search(matcher.pattern, context.tool) is not None
            except re.error:
                logger.warning("Hook %s has an invalid regex: %s", self.id, matcher.pattern)
                return False
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def build_env(self, context: HookContext) -> Dict[str, str]:
        env = dict(os.environ)
        env.update(self.config.env)
        env["HOOK_EVENT"] = context.event.value
        env["HOOK_PROJECT_ROOT"] = str(context.project_root)
        env["HOOK_TIMESTAMP"] = str(int(context.timestamp if context.timestamp is not None else time.time() * 1000))
        if context.session_id:
            env["HOOK_SESSION_ID"] = context.session_id
        if context.tool:
            env["HOOK_TOOL"] = context.tool
        if context.tool_args:
            env["HOOK_TOOL_ARGS"] = json.dumps(context.tool_args)
        return env

    def command_line(self) -> str:
        if not self.config.args:
            return self.config.command
        return " ".join([self.config.command, *(shlex.quote(a) for a in self.config.args)])

    def execute(self, context: HookContext) -> HookResult:
        """Run the hook if it applies to ``context``.

        Raises:
            HookError: If the command cannot be started and the hook does
                not set ``continueOnError``.
        """
        if not self.should_run(context):
            return HookResult(success=True)

        logger.debug("Executing hook %s (%s)", self.name, self.id)
        started = time.monotonic()
        try:
            result = self._run(context)
        except OSError as e:
            duration = (time.monotonic() - started) * 1000
            logger.error("Hook %s failed: %s", self.name, e)
            if self.config.continue_on_error:
                return HookResult(success=False, error=str(e), duration=duration)
            raise HookError(f"Hook '{self.id}' failed to start: {e}", context={"hook": self.id}) from e

        result.duration = (time.monotonic() - started) * 1000
        result.success = result.exit_code == 0 or (result.exit_code == BLOCK_EXIT_CODE and result.should_block)
        logger.debug("Hook %s completed in %.0fms", self.name, result.duration)
        return result

    def _run(self, context: HookContext) -> HookResult:
        try:
            proc = run_with_timeout(
                self.command_line(),
                timeout=self.config.timeout / 1000.0,
                shell=True,
                input=context.prompt,
                cwd=context.project_root,
                env=self.build_env(context),
            )
        except subprocess.TimeoutExpired:
            logger.warning("Hook %s timed out after %sms", self.id, self.config.timeout)
            return HookResult(success=False, error="Hook timeout", exit_code=-1)

        result = HookResult(
            success=proc.returncode == 0,
            output=proc.stdout,
            error=proc.stderr,
            exit_code=proc.returncode,
        )
        if proc.returncode == BLOCK_EXIT_CODE:
            result.should_block = True
        if context.event is HookEvent.USER_PROMPT_SUBMIT and proc.stdout:
            result.modified_prompt = proc.stdout
        return result


__all__ = ["BLOCK_EXIT_CODE", "Hook"]
