"""Cache reset utilities for test isolation."""
from __future__ import annotations


def reset_zcc_caches() -> None:
    """Clear config caches and drop logging handlers installed by the CLI."""
    from zcc.core.config import clear_all_caches
    from zcc.core.stdlib_logging import reset_logging_for_tests

    clear_all_caches()
    reset_logging_for_tests()
