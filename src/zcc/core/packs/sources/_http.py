"""Minimal HTTP client shared by remote pack sources."""
from __future__ import annotations

import json
import logging
import socket
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from zcc import __version__
from zcc.core.exceptions import NetworkError
from zcc.core.resilience import retry_with_backoff

logger = logging.getLogger(__name__)


def _is_retryable(exc: Exception) -> bool:
    """Connection failures and 5xx responses are retried; 4xx are not."""
    status = getattr(exc, "status", None)
    return status is None or status >= 500


class HttpClient:
    """GET requests with a per-request timeout and linear-backoff retries."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        retries: int = 3,
        retry_delay: float = 1.0,
        user_agent: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.timeout = timeout
        self.retries = max(1, int(retries))
        self.retry_delay = retry_delay
        self.headers: Dict[str, str] = {
            "User-Agent": user_agent or f"zcc/{__version__}",
            "Accept": "application/json",
        }
        self.headers.update(headers or {})
        self._sleep = sleep

    @classmethod
    def from_config(cls, repo_root=None, *, headers: Optional[Mapping[str, str]] = None) -> HttpClient:
        from zcc.core.config.domains import HttpConfig

        cfg = HttpConfig(repo_root=repo_root)
        return cls(
            timeout=cfg.timeout_seconds,
            retries=cfg.retries,
            retry_delay=cfg.retry_delay_seconds,
            user_agent=cfg.user_agent,
            headers=headers,
        )

    def _request(self, url: str, headers: Mapping[str, str]) -> bytes:
        req = Request(url, headers=dict(headers), method="GET")
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                return resp.read()
        except HTTPError as e:
            raise NetworkError(
                f"HTTP {e.code}: {e.reason} ({url})",
                status=e.code,
                context={"url": url},
            ) from e
        except (URLError, socket.timeout, TimeoutError, ConnectionError) as e:
            reason = getattr(e, "reason", e)
            raise NetworkError(f"Request failed: {reason} ({url})", context={"url": url}) from e

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> bytes:
        merged = {**self.headers, **(headers or {})}
        logger.debug("GET %s", url)
        fetch = retry_with_backoff(
            max_attempts=self.retries,
            initial_delay=self.retry_delay,
            backoff="linear",
            exceptions=(NetworkError,),
            retry_if=_is_retryable,
            sleep=self._sleep,
        )(self._request)
        return fetch(url, merged)

    def get_text(self, url: str, headers: Optional[Mapping[str, str]] = None) -> str:
        return self.get(url, headers).decode("utf-8")

    def get_json(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Any:
        body = self.get_text(url, headers)
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise NetworkError(f"Invalid JSON response from {url}: {e}", "INVALID_RESPONSE") from e


__all__ = ["HttpClient"]
