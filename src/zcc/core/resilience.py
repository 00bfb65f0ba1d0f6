"""Retry policy for remote pack sources."""
from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int, initial_delay: float, backoff: str, backoff_factor: float, max_delay: float) -> float:
    """Delay to wait after failed ``attempt`` (1-based)."""
    if backoff == "exponential":
        delay = initial_delay * (backoff_factor ** (attempt - 1))
    else:
        delay = initial_delay * attempt
    return min(delay, max_delay)


def retry_with_backoff(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff: str = "linear",
    backoff_factor: float = 2.0,
    max_delay: float = 60.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    retry_if: Optional[Callable[[Exception], bool]] = None,
    sleep: Optional[Callable[[float], None]] = None,
):
    """Decorate a callable so it is retried on ``exceptions``.

    With the default linear backoff the waits are ``initial_delay``,
    ``2 * initial_delay`` and so on. ``retry_if`` returning False re-raises
    at once. The last failure propagates unchanged.

    Example:
        @retry_with_backoff(max_attempts=3, initial_delay=0.5)
        def fetch_index():
            ...
    """
    attempts = max(1, max_attempts)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:  # type: ignore[misc]
                    if attempt >= attempts or (retry_if is not None and not retry_if(e)):
                        raise
                    delay = backoff_delay(attempt, initial_delay, backoff, backoff_factor, max_delay)
                    logger.warning(
                        "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                        getattr(func, "__name__", "call"), attempt, attempts, e, delay,
                    )
                    (sleep or time.sleep)(delay)
                    attempt += 1

        return wrapper

    return decorator


__all__ = ["backoff_delay", "retry_with_backoff"]
