"""
Retry logic with exponential backoff.

Only idempotent reads against the spreadsheet go through here. Writes are
never retried: a repeated append would assign a second id.
"""

import asyncio
import functools
import logging
import random
from typing import Callable, Type, Tuple, Any

from ..database.exceptions import StoreError

logger = logging.getLogger(__name__)


class RetryExhausted(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


async def retry_with_backoff(
    func: Callable,
    *args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
    skip_on: Tuple[Type[Exception], ...] = (),
    **kwargs
) -> Any:
    """
    Execute an async function with exponential backoff retry logic.

    Args:
        func: Async function to execute
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential calculation
        jitter: Randomize delays between 50% and 150%
        retry_on: Exception types worth another attempt
        skip_on: Exception types raised immediately, checked first

    Raises:
        RetryExhausted: If all retries are exhausted
    """
    for attempt in range(max_retries + 1):
        try:
            result = await func(*args, **kwargs)
            if attempt > 0:
                logger.info(
                    f"Retry successful on attempt {attempt + 1}/{max_retries + 1} "
                    f"for {func.__name__}"
                )
            return result

        except skip_on:
            raise

        except retry_on as e:
            if attempt == max_retries:
                logger.error(
                    f"All {max_retries + 1} attempts exhausted for {func.__name__}"
                )
                raise RetryExhausted(
                    f"Failed after {max_retries + 1} attempts: {type(e).__name__}: {e}"
                ) from e

            delay = min(base_delay * (exponential_base ** attempt), max_delay)
            if jitter:
                delay = delay * (0.5 + random.random())

            logger.warning(
                f"Retry attempt {attempt + 1}/{max_retries + 1} for {func.__name__} "
                f"after {type(e).__name__}: {e}. Retrying in {delay:.2f}s..."
            )
            await asyncio.sleep(delay)


def with_retry(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
    skip_on: Tuple[Type[Exception], ...] = ()
):
    """
    Decorator adding retry_with_backoff() to an async function.

    Usage:
        @with_retry(max_retries=5, base_delay=2.0, retry_on=(ConnectionError,))
        async def fetch_rows(sheet: str):
            ...
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            return await retry_with_backoff(
                func,
                *args,
                max_retries=max_retries,
                base_delay=base_delay,
                max_delay=max_delay,
                exponential_base=exponential_base,
                jitter=jitter,
                retry_on=retry_on,
                skip_on=skip_on,
                **kwargs
            )
        return wrapper
    return decorator


GOOGLE_API_RETRY = {
    "max_retries": 4,
    "base_delay": 1.0,
    "max_delay": 30.0,
    "retry_on": (ConnectionError, TimeoutError, OSError),
    "skip_on": (StoreError,),
}


def with_google_api_retry(func: Callable):
    """Decorator with Google API retry configuration."""
    return with_retry(**GOOGLE_API_RETRY)(func)
