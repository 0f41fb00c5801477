"""
Retry logic - re-invokes a fallible async operation with linear backoff.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar('T')

Sleep = Callable[[float], Awaitable[None]]

_logger = logging.getLogger(__name__)


def backoff_delay(base_delay_ms: int, attempt: int) -> float:
    """Seconds to wait after failed attempt number `attempt` (1-based)."""
    return base_delay_ms * attempt / 1000.0


@dataclass
class RetryPolicy:
    """Configuration for retry behavior."""
    max_attempts: int = 3
    base_delay_ms: int = 1000
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)

    def delay_for(self, attempt: int) -> float:
        return backoff_delay(self.base_delay_ms, attempt)

    @classmethod
    def from_settings(cls, settings) -> RetryPolicy:
        return cls(max_attempts=settings.max_attempts, base_delay_ms=settings.base_delay_ms)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        sleep: Optional[Sleep] = None,
        logger: Optional[logging.Logger] = None
    ) -> T:
        return await retry_async(
            operation,
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            retry_on=self.retry_on,
            sleep=sleep,
            logger=logger,
        )


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Optional[Sleep] = None,
    logger: Optional[logging.Logger] = None
) -> T:
    """Invoke operation up to max_attempts times, waiting base_delay_ms * attempt between tries.

    The last error is re-raised unmodified. A non-positive max_attempts runs the
    operation once without retrying.
    """
    sleep = sleep or asyncio.sleep
    logger = logger or _logger
    attempts = max(1, max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt >= attempts:
                logger.error(f"Final attempt {attempt} failed: {e}")
                raise
            delay = backoff_delay(base_delay_ms, attempt)
            logger.debug(f"Attempt {attempt} failed: {e}; retrying in {delay:.2f}s")
            await sleep(delay)

    raise RuntimeError("Retry logic failed")  # pragma: no cover
