from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, runtime_checkable

import httpx


logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


@runtime_checkable
class HttpExecutor(Protocol):
    """Anything that can send a prepared request and hand back the response."""

    def execute(self, request: httpx.Request) -> httpx.Response:
        ...

    def close(self) -> None:
        ...


class RetryingHttpExecutor:
    """
    httpx-backed executor with exponential backoff.

    Notes
    - Network errors, 429 and 5xx are retried up to `max_attempts` total tries.
    - When retries are exhausted on an HTTP status, the last response is
      returned unchanged so the caller can classify it. When they are
      exhausted on a transport error, that error is re-raised.
    - Retries that happen once `log_retry_after_seconds` have elapsed since
      the first attempt are logged at WARNING, earlier ones at DEBUG.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        initial_backoff: float = 0.1,
        max_backoff: float = 8.0,
        timeout: float = 15.0,
        log_retry_after_seconds: float = 10.0,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        self._max_attempts = max_attempts
        self._initial_backoff = initial_backoff
        self._max_backoff = max_backoff
        self._log_retry_after_seconds = log_retry_after_seconds
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._sleep = sleep
        self._clock = clock

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RetryingHttpExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def execute(self, request: httpx.Request) -> httpx.Response:
        started = self._clock()
        backoff = self._initial_backoff
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self._client.send(request)
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                if attempt >= self._max_attempts:
                    raise
                reason = f"{type(exc).__name__}: {exc}"
            else:
                if resp.status_code not in RETRYABLE_STATUSES or attempt >= self._max_attempts:
                    return resp
                reason = f"HTTP {resp.status_code}"
                # Release the connection before retrying
                resp.close()

            self._log_retry(request, attempt, reason, self._clock() - started)
            self._sleep(backoff)
            backoff = min(backoff * 2, self._max_backoff)

    def _log_retry(self, request: httpx.Request, attempt: int, reason: str, elapsed: float) -> None:
        level = logging.WARNING if elapsed >= self._log_retry_after_seconds else logging.DEBUG
        logger.log(
            level,
            "retrying %s %s after attempt %d/%d (%s, %.1fs elapsed)",
            request.method,
            request.url.path,
            attempt,
            self._max_attempts,
            reason,
            elapsed,
        )


__all__ = [
    "HttpExecutor",
    "RetryingHttpExecutor",
    "RETRYABLE_STATUSES",
]
