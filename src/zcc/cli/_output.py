"""Printing for CLI commands.

In ``--json`` mode results go to stdout and errors to stderr as single JSON
documents; in text mode both are human-readable lines.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from zcc.core.exceptions import ZccError


class OutputFormatter:
    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def _dump(self, payload: Any, *, stream=None) -> None:
        print(json.dumps(payload, indent=self.indent, default=str), file=stream or sys.stdout)

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        """``{"status": ..., **data}`` in JSON mode, ``message`` otherwise."""
        if self.json_mode:
            self._dump({"status": status, **data})
        else:
            print(message)

    def error(self, error: Exception, message: Optional[str] = None, *, error_code: str = "error") -> None:
        """Report ``error`` on stderr.

        ``error_code`` names the failing command; a :class:`ZccError` adds its
        own ``code`` and, when it has one, a ``suggestion``.
        """
        text = message or str(error)
        suggestion = getattr(error, "suggestion", None) if isinstance(error, ZccError) else None
        if not self.json_mode:
            print(f"Error: {text}", file=sys.stderr)
            if suggestion:
                print(f"  Suggestion: {suggestion}", file=sys.stderr)
            return

        payload: Dict[str, Any] = {"error": error_code, "message": text}
        if isinstance(error, ZccError):
            payload["code"] = error.code
            if suggestion:
                payload["suggestion"] = suggestion
        self._dump(payload, stream=sys.stderr)

    def json_output(self, data: Any) -> None:
        self._dump(data)

    def text(self, message: str) -> None:
        if not self.json_mode:
            print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        self.text(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
