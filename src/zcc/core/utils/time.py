"""Timestamps written into registries and audit records."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_timestamp() -> str:
    """ISO 8601 UTC with milliseconds, e.g. ``2024-05-01T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


__all__ = ["utc_timestamp"]
