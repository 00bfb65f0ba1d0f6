"""Hook subsystem: definitions, matching, execution and settings generation."""
from __future__ import annotations

from .hook import BLOCK_EXIT_CODE, Hook
from .loader import HookConfigLoader, HookFileManager
from .manager import HookManager
from .matchers import FuzzyMatcher, KeywordMatcher, levenshtein
from .models import HookConfig, HookContext, HookEvent, HookMatcher, HookResult
from .registry import HookRegistry

__all__ = [
    "BLOCK_EXIT_CODE",
    "FuzzyMatcher",
    "Hook",
    "HookConfig",
    "HookConfigLoader",
    "HookContext",
    "HookEvent",
    "HookFileManager",
    "HookManager",
    "HookMatcher",
    "HookRegistry",
    "HookResult",
    "KeywordMatcher",
    "levenshtein",
]
