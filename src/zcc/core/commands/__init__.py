"""Claude slash command generation."""
from __future__ import annotations

from .generator import CommandGenerator, CommandTemplate

__all__ = ["CommandGenerator", "CommandTemplate"]
