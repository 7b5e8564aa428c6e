"""Retry utilities for calls into the chat completion backend."""

import asyncio
import logging
import random
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from fibonacci_agents.domain.exceptions import (
    AgentConnectionError,
    AgentTimeoutError,
    AuthenticationError,
    ConfigurationError,
    RateLimitError,
    ToolError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryStrategy(str, Enum):
    """Available backoff strategies."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"
    LINEAR = "linear"


class RetryPolicy:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        strategy: RetryStrategy = RetryStrategy.EXPONENTIAL,
        backoff_multiplier: float = 2.0,
        jitter: bool = True,
        retryable_exceptions: set[type[Exception]] | None = None,
        non_retryable_exceptions: set[type[Exception]] | None = None,
    ):
        """
        Initialize retry policy.

        Args:
            max_attempts: Total number of attempts, including the first one
            base_delay: Base delay between attempts in seconds
            max_delay: Upper bound for a single delay in seconds
            strategy: Backoff strategy
            backoff_multiplier: Multiplier for exponential backoff
            jitter: Whether to randomise delays
            retryable_exceptions: Exception types that trigger another attempt
            non_retryable_exceptions: Exception types that are never retried
        """
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.strategy = strategy
        self.backoff_multiplier = backoff_multiplier
        self.jitter = jitter
        self.retryable_exceptions = retryable_exceptions or {
            AgentConnectionError,
            AgentTimeoutError,
            RateLimitError,
            asyncio.TimeoutError,
            OSError,
        }
        self.non_retryable_exceptions = non_retryable_exceptions or {
            AuthenticationError,
            ConfigurationError,
            ToolError,
            ValueError,
            TypeError,
        }

    def should_retry(self, exception: Exception, attempt: int) -> bool:
        """
        Decide whether a failed attempt should be retried.

        Args:
            exception: The exception raised by the attempt
            attempt: Zero-based number of the failed attempt

        Returns:
            True if another attempt should be made
        """
        if attempt + 1 >= self.max_attempts:
            return False

        if any(isinstance(exception, exc_type) for exc_type in self.non_retryable_exceptions):
            return False

        return any(isinstance(exception, exc_type) for exc_type in self.retryable_exceptions)

    def calculate_delay(self, attempt: int, exception: Exception | None = None) -> float:
        """
        Delay in seconds before the attempt following ``attempt``.

        A ``retry_after`` hint on the failure (e.g. from a rate limit) is a
        lower bound for the delay, even above ``max_delay``.
        """
        if self.strategy == RetryStrategy.FIXED:
            delay = self.base_delay
        elif self.strategy == RetryStrategy.LINEAR:
            delay = self.base_delay * (attempt + 1)
        else:
            delay = self.base_delay * (self.backoff_multiplier**attempt)

        delay = min(delay, self.max_delay)

        if self.jitter:
            delay *= 0.5 + random.random() * 0.5

        retry_after = getattr(exception, "retry_after", None)
        if retry_after:
            delay = max(delay, retry_after)

        return delay


class RetryContext:
    """Context object passed to retry callbacks."""

    def __init__(
        self,
        attempt: int,
        exception: Exception | None = None,
        elapsed_time: float = 0.0,
        next_delay: float | None = None,
    ):
        self.attempt = attempt
        self.exception = exception
        self.elapsed_time = elapsed_time
        self.next_delay = next_delay


class RetryCallbacks(ABC):
    """Hooks invoked while retrying."""

    @abstractmethod
    async def on_retry(self, context: RetryContext) -> None:
        """Called before each retry attempt."""
        pass

    @abstractmethod
    async def on_failure(self, context: RetryContext) -> None:
        """Called when the operation gives up."""
        pass


class LoggingRetryCallbacks(RetryCallbacks):
    """Default retry callbacks that log retry attempts."""

    def __init__(self, logger_name: str | None = None):
        self.logger = logging.getLogger(logger_name or __name__)

    async def on_retry(self, context: RetryContext) -> None:
        """Log retry attempt."""
        self.logger.warning(
            f"Retry attempt {context.attempt + 1} after {context.elapsed_time:.2f}s. "
            f"Exception: {context.exception}. Next delay: {context.next_delay:.2f}s"
        )

    async def on_failure(self, context: RetryContext) -> None:
        """Log final failure."""
        self.logger.error(
            f"Giving up after {context.attempt + 1} attempt(s) and {context.elapsed_time:.2f}s. "
            f"Final exception: {context.exception}"
        )


async def retry_async(
    func: Callable[..., Awaitable[T]],
    policy: RetryPolicy,
    callbacks: RetryCallbacks | None = None,
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Await ``func`` until it succeeds or the policy gives up.

    Args:
        func: Coroutine function to execute
        policy: Retry policy configuration
        callbacks: Optional callbacks for retry events
        *args: Positional arguments for ``func``
        **kwargs: Keyword arguments for ``func``

    Returns:
        The result of the first successful attempt

    Raises:
        The exception of the last failed attempt
    """
    callbacks = callbacks or LoggingRetryCallbacks()
    start_time = time.time()

    for attempt in range(policy.max_attempts):
        try:
            result = await func(*args, **kwargs)
            if attempt > 0:
                logger.info(f"Operation succeeded on attempt {attempt + 1} after {time.time() - start_time:.2f}s")
            return result
        except Exception as e:
            elapsed_time = time.time() - start_time
            if not policy.should_retry(e, attempt):
                await callbacks.on_failure(RetryContext(attempt, e, elapsed_time))
                raise

            delay = policy.calculate_delay(attempt, e)
            await callbacks.on_retry(RetryContext(attempt, e, elapsed_time, delay))
            await asyncio.sleep(delay)

    raise RuntimeError("retry_async exhausted without a result")  # pragma: no cover
