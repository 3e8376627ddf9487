from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Coroutine, ParamSpec, TypeVar, cast

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .errors import DiscordTransientError

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry_transient(
    max_attempts: int = 4,
    base_wait: float = 1.0,
    max_wait: float = 30.0,
) -> Callable[
    [Callable[P, Coroutine[Any, Any, T]]], Callable[P, Coroutine[Any, Any, T]]
]:
    """
    Decorator for retrying transient Discord errors with exponential backoff.

    Args:
        max_attempts: Total number of attempts, the first call included.
        base_wait: Multiplier for the exponential wait between attempts.
        max_wait: Upper bound for a single wait, in seconds.

    Returns:
        A decorator wrapping coroutine functions with the retry policy.

    Raises:
        DiscordTransientError: Re-raised once every attempt is exhausted.
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(max(max_attempts, 1)),
            wait=wait_exponential(multiplier=base_wait, max=max_wait, exp_base=2),
            retry=retry_if_exception_type(DiscordTransientError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return cast(T, await func(*args, **kwargs))

        return wrapper

    return decorator
