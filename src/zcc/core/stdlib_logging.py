from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from zcc.core.utils.io import ensure_directory

_ZCC_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install the zcc handler on the ``zcc`` logger.

    Logs go to ``log_path`` when given, else to stderr. Calling again replaces
    the previously installed handler, so it is safe to call once per command.
    """
    global _ZCC_HANDLER

    logger = logging.getLogger("zcc")
    logger.setLevel(_level_from_name(level))

    if _ZCC_HANDLER is not None:
        logger.removeHandler(_ZCC_HANDLER)
        _ZCC_HANDLER.close()
        _ZCC_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        handler = logging.FileHandler(resolved, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handler.setLevel(_level_from_name(level))
    logger.addHandler(handler)
    _ZCC_HANDLER = handler


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib logging's lastResort handler from polluting JSON output.

    With no handlers configured Python prints WARNING+ records to stderr. In
    ``--json`` mode commands must stay machine-readable, so a NullHandler is
    installed on the ``zcc`` logger instead.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED
    if _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    logging.getLogger("zcc").addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: drop handlers installed by this module."""
    global _ZCC_HANDLER, _JSON_MODE_NULL_HANDLER_INSTALLED
    logger = logging.getLogger("zcc")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    _ZCC_HANDLER = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


__all__ = ["configure_logging", "suppress_lastresort_in_json_mode", "reset_logging_for_tests"]
