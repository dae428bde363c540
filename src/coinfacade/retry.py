"""Retry helper for async exchange calls."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

T = TypeVar("T")

_logger = logging.getLogger(__name__)


async def retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    times: int = 1,
    logger: logging.Logger | None = None,
    **kwargs: Any,
) -> T:
    """Await `func(*args, **kwargs)` up to `times` times.

    Each failure is logged; the last one is re-raised once attempts run out.
    """
    if times < 1:
        raise ValueError(f"times must be positive, got {times}")

    log = logger or _logger
    name = getattr(func, "__name__", repr(func))

    def _log_failure(state: RetryCallState) -> None:
        log.error(
            "Attempt %d/%d of %s failed: %s",
            state.attempt_number,
            times,
            name,
            state.outcome.exception() if state.outcome else None,
        )

    async for attempt in AsyncRetrying(stop=stop_after_attempt(times), reraise=True, after=_log_failure):
        with attempt:
            return await func(*args, **kwargs)
    raise AssertionError("unreachable")
