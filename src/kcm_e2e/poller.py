"""
Poll a check until it passes or the timeout budget runs out.
"""
import logging
import time
from datetime import timedelta
from typing import Callable, Optional, Union

from kcm_e2e.errors import ConvergenceTimeout, ReadinessError

logger = logging.getLogger(__name__)

Duration = Union[int, float, timedelta]


def _seconds(value: Duration) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class Poller:
    """
    Runs a tick function repeatedly until it stops raising ReadinessError.

    A tick passes by returning, is not ready yet by raising ReadinessError,
    and fails hard by raising anything else. Hard failures propagate at once.
    The clock and sleep functions are injectable so tests run without delays.
    """

    def __init__(
        self,
        timeout: Duration,
        interval: Duration,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.timeout = _seconds(timeout)
        self.interval = _seconds(interval)
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout}")
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        self.clock = clock
        self.sleep = sleep

    def until_converged(self, tick: Callable[[], None], description: str = "check") -> int:
        """
        Run tick until it passes.

        Args:
            tick: Check to run; the first attempt runs immediately
            description: Name of the check used in progress lines

        Returns:
            Number of attempts it took to pass

        Raises:
            ConvergenceTimeout: The timeout elapsed without a passing attempt,
                carrying the most recent failure
        """
        deadline = self.clock() + self.timeout
        attempts = 0
        last_error: Optional[ReadinessError] = None

        while True:
            attempts += 1
            try:
                tick()
            except ReadinessError as e:
                last_error = e
                logger.warning(f"⏳ {description} failed (attempt {attempts}): {e}")
            else:
                logger.info(f"✅ {description} passed after {attempts} attempt(s)")
                return attempts

            remaining = deadline - self.clock()
            if remaining <= 0:
                logger.error(f"❌ {description} timed out after {attempts} attempt(s): {last_error}")
                raise ConvergenceTimeout(description, self.timeout, attempts, last_error)

            # The last attempt runs at the deadline.
            self.sleep(min(self.interval, remaining))
