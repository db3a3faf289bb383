"""Retry policy injected into the REST client.

The client itself never retries; a caller that wants throttled or
temporarily unavailable calls retried hands a ``RetryPolicy`` to the
connection factory.
"""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from .exceptions import RateLimitError, ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Retry a callable on transient Partner Center errors.

    Usage:
        policy = RetryPolicy(max_attempts=4, base_delay=0.5)
        order = policy.execute(lambda: orders.get_by_id(customer_id, order_id))
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        retry_on: Tuple[Type[BaseException], ...] = (RateLimitError, ServiceUnavailableError),
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize retry policy.

        Args:
            max_attempts: Total attempts including the first call (>= 1)
            base_delay: Initial backoff in seconds, doubled on every attempt
            max_delay: Upper bound for a single wait
            retry_on: Exception types that trigger a retry
            sleep: Sleep function (replaced in tests)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0 or max_delay < 0:
            raise ValueError("Retry delays must not be negative")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.retry_on = retry_on
        self._sleep = sleep or time.sleep

    def compute_delay(self, attempt: int, exc: BaseException) -> float:
        """Seconds to wait after the given zero-based failed attempt."""
        retry_after = getattr(exc, "retry_after", None)
        if retry_after:
            return min(float(retry_after), self.max_delay)
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def execute(self, func: Callable[[], T]) -> T:
        """Call ``func`` until it succeeds or attempts are exhausted.

        Raises:
            The last exception raised by ``func`` once attempts are exhausted,
            or immediately for exception types not listed in ``retry_on``.
        """
        for attempt in range(self.max_attempts):
            try:
                return func()
            except self.retry_on as exc:
                if attempt + 1 >= self.max_attempts:
                    logger.error("[retry] Giving up after %d attempt(s): %s", attempt + 1, exc)
                    raise
                delay = self.compute_delay(attempt, exc)
                logger.warning(
                    "[retry] Attempt %d/%d failed (%s). Retrying in %.1fs...",
                    attempt + 1, self.max_attempts, exc, delay,
                )
                self._sleep(delay)
        # max_attempts >= 1 so the loop always returns or raises
        raise RuntimeError("unreachable")
