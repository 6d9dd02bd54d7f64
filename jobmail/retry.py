"""Retry decorator with exponential backoff — stdlib only."""
from __future__ import annotations

import functools
import logging
import random
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def backoff_delay(
    attempt: int,
    *,
    base_delay: float,
    max_delay: float,
    backoff_factor: float,
    jitter: bool,
) -> float:
    delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    retry_if: Callable[[Any], bool] | None = None,
) -> Callable:
    """Retry on ``retryable`` exceptions, or while ``retry_if(result)`` holds.

    After the last attempt an exception is re-raised and an unwanted result
    is returned as-is, so callers still map it to their own errors.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    result = fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            fn.__qualname__, max_attempts, exc,
                        )
                        raise
                    reason = str(exc)
                else:
                    if retry_if is None or not retry_if(result) or attempt >= max_attempts:
                        return result
                    reason = f"retryable result {result!r}"

                delay = backoff_delay(
                    attempt,
                    base_delay=base_delay,
                    max_delay=max_delay,
                    backoff_factor=backoff_factor,
                    jitter=jitter,
                )
                logger.warning(
                    "%s attempt %d/%d failed (%s), retrying in %.1fs",
                    fn.__qualname__, attempt, max_attempts, reason, delay,
                )
                time.sleep(delay)
                attempt += 1

        return wrapper

    return decorator
