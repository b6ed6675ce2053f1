"""Explicit retry policy for fallible operations."""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def no_delay(attempt: int) -> float:
    return 0.0


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait between tries.

    ``delay`` receives the 1-based number of the attempt that just failed and
    returns the number of seconds to sleep before the next one.
    """

    max_attempts: int = 3
    delay: Callable[[int], float] = field(default=no_delay)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")


def perform_with_retry(
    operation: Callable[[int], T],
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``operation(attempt)`` until it succeeds or the policy is spent.

    Only exceptions listed in ``retry_on`` are retried; the last one is
    re-raised once ``policy.max_attempts`` calls have failed.
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return operation(attempt)
        except retry_on as e:
            if attempt == policy.max_attempts:
                raise
            logger.debug(f"Attempt {attempt}/{policy.max_attempts} failed: {e}")
            wait = policy.delay(attempt)
            if wait > 0:
                sleep(wait)
    raise RuntimeError("unreachable")
