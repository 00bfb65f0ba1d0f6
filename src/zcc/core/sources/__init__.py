"""Configured pack sources and their trust state."""
from __future__ import annotations

from .models import LOCAL_SOURCE_ID, SourceConfig, SourceRegistryConfig
from .registry import SourceRegistry
from .trust import SecurityValidationResult, TrustManager, TrustPolicy

__all__ = [
    "LOCAL_SOURCE_ID",
    "SecurityValidationResult",
    "SourceConfig",
    "SourceRegistry",
    "SourceRegistryConfig",
    "TrustManager",
    "TrustPolicy",
]
