"""
Retry helper used to re-run a whole read-decide-write cycle.

Each attempt is expected to start from a fresh read, so retrying here never
replays a stale write; it repeats the decision against the newest snapshot.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type


@dataclass
class RetryPolicy:
    """Configuration for retry attempts."""

    max_attempts: int = 3
    base_delay: float = 0.0
    max_delay: float = 5.0
    jitter: float = 0.0
    retry_exceptions: Tuple[Type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.max_delay < self.base_delay:
            self.max_delay = self.base_delay
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be between 0 and 1")


class RetryError(RuntimeError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, last_exception: BaseException, attempts: int) -> None:
        super().__init__(f"Operation failed after {attempts} attempts: {last_exception}")
        self.last_exception = last_exception
        self.attempts = attempts


def _compute_delay(policy: RetryPolicy, attempt: int) -> float:
    """Exponential backoff with optional jitter; zero when ``base_delay`` is zero."""
    delay = min(policy.base_delay * (2 ** (attempt - 1)), policy.max_delay)
    if policy.jitter and delay:
        jitter_amount = delay * policy.jitter
        delay = delay - jitter_amount + random.uniform(0, jitter_amount * 2)
    return max(delay, 0.0)


def retry_call(
    func: Callable[..., Any],
    *args: Any,
    policy: RetryPolicy,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    **kwargs: Any,
) -> Any:
    """Execute ``func``, retrying on ``policy.retry_exceptions``.

    Exceptions outside ``retry_exceptions`` propagate unchanged. Exhaustion
    raises :class:`RetryError` chained to the last failure.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return func(*args, **kwargs)
        except policy.retry_exceptions as exc:
            if attempt >= policy.max_attempts:
                raise RetryError(exc, attempt) from exc
            delay = _compute_delay(policy, attempt)
            if on_retry:
                on_retry(attempt, exc, delay)
            if delay:
                time.sleep(delay)
