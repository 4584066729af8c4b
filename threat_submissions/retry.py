"""Transport-level retry for Graph requests, driven by RetryConfig.

Only failures below HTTP (refused connections, resets, timeouts) are
retried.  A response with an error status is never retried here, so a
failed page or mailbox lookup stays final for the caller.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import RetryConfig

logger = structlog.get_logger()


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "graph_transport_retry",
        attempt=state.attempt_number,
        error=str(exc),
    )


def transport_retry(
    config: RetryConfig,
    *,
    retryable_exceptions: tuple[type[BaseException], ...] = (httpx.TransportError,),
) -> Callable:
    """Return a tenacity retry decorator configured from *config*.

    Usage::

        @transport_retry(config.retry)
        def send() -> httpx.Response: ...
    """
    return retry(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.multiplier,
            min=config.initial_wait_seconds,
            max=config.max_wait_seconds,
        ),
        retry=retry_if_exception_type(retryable_exceptions),
        before_sleep=_log_retry,
        reraise=True,
    )
