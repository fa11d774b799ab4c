"""
Sequential polling with fixed or exponential delays.

Every wait in the provisioning workflow goes through ``retry_until`` so a
component only supplies the action that probes for readiness.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from sitesmith.logging import get_logger

T = TypeVar("T")

logger = get_logger("workflow")


class BackoffKind(str, Enum):
    """How the delay grows between attempts."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class PollStrategy:
    """Configuration for a polling loop."""

    interval: float
    max_attempts: int
    backoff: BackoffKind = BackoffKind.FIXED
    max_delay: float = 30.0

    def delay_after(self, attempt: int) -> float:
        """
        Delay to wait after a failed attempt.

        Args:
            attempt: The attempt that just failed (1-indexed)

        Returns:
            Seconds to sleep before the next attempt
        """
        if self.backoff is BackoffKind.EXPONENTIAL:
            return min(self.interval * (2 ** attempt), self.max_delay)
        return self.interval

    def total_delay(self) -> float:
        """Sum of all delays when every attempt fails."""
        return sum(self.delay_after(n) for n in range(1, self.max_attempts))


@dataclass
class PollResult(Generic[T]):
    """Outcome of a polling loop."""

    value: T | None
    attempts: int

    @property
    def succeeded(self) -> bool:
        return self.value is not None


def retry_until(
    strategy: PollStrategy,
    action: Callable[[int], T | None],
    sleep: Callable[[float], None] = time.sleep,
    retry_on: tuple[type[BaseException], ...] = (),
    label: str = "operation",
) -> PollResult[T]:
    """
    Run ``action`` until it returns a value or attempts run out.

    ``action`` receives the 1-indexed attempt number and returns ``None``
    when the resource is not ready yet. Exceptions listed in ``retry_on``
    count as a failed attempt; any other exception propagates.

    No delay follows the final attempt.

    Args:
        strategy: Interval, attempt cap and backoff kind
        action: Probe returning the value or None
        sleep: Sleep function (injectable for tests)
        retry_on: Exception types treated as "not ready"
        label: Name used in log messages

    Returns:
        PollResult with the value (None when exhausted) and attempts used
    """
    for attempt in range(1, strategy.max_attempts + 1):
        try:
            value = action(attempt)
        except retry_on as e:
            logger.debug("%s attempt %d/%d failed: %s", label, attempt, strategy.max_attempts, e)
            value = None

        if value is not None:
            return PollResult(value=value, attempts=attempt)

        if attempt < strategy.max_attempts:
            delay = strategy.delay_after(attempt)
            logger.info(
                "%s not ready (attempt %d/%d), waiting %.1fs",
                label,
                attempt,
                strategy.max_attempts,
                delay,
            )
            sleep(delay)

    return PollResult(value=None, attempts=strategy.max_attempts)
