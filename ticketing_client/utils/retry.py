"""
Retry with exponential backoff for idempotent backend reads.
"""

import asyncio
import logging
import random
from typing import Any, Callable, Optional
from dataclasses import dataclass

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 5.0
    exponential_base: float = 2.0
    jitter: bool = True

    @classmethod
    def from_settings(cls) -> "RetryConfig":
        settings = get_settings()
        if not settings.enable_retry_mechanisms:
            return cls(max_attempts=1)
        return cls(
            max_attempts=settings.max_retry_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
        )


# Failures that never reached a response: safe to repeat for GET requests
TRANSIENT_ERRORS = (httpx.TransportError, asyncio.TimeoutError)


async def retry_async(
    func: Callable,
    config: RetryConfig,
    retryable_exceptions: tuple = TRANSIENT_ERRORS,
    *args,
    **kwargs
) -> Any:
    """
    Retry an async function with exponential backoff.

    Args:
        func: The async function to retry
        config: Retry configuration
        retryable_exceptions: Exceptions that should trigger retries
        *args, **kwargs: Arguments to pass to the function

    Returns:
        The result of the function call

    Raises:
        The last exception if all retries are exhausted
    """
    last_exception: Optional[BaseException] = None

    for attempt in range(max(config.max_attempts, 1)):
        try:
            result = await func(*args, **kwargs)

            if attempt > 0:
                logger.info(f"Function {func.__name__} succeeded on attempt {attempt + 1}")

            return result

        except retryable_exceptions as e:
            last_exception = e

            if attempt >= config.max_attempts - 1:
                break

            delay = min(
                config.base_delay * (config.exponential_base ** attempt),
                config.max_delay
            )
            if config.jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            logger.warning(
                f"Attempt {attempt + 1} failed for {func.__name__}: {e!r}. "
                f"Retrying in {delay:.2f}s..."
            )

            await asyncio.sleep(delay)

    logger.error(f"All {config.max_attempts} attempts failed for {func.__name__}")
    raise last_exception

