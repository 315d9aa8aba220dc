"""
Delay policies used between retried attempts.
"""
import random
from abc import ABC, abstractmethod


class BackoffPolicy(ABC):
    """Base class for delay calculation between attempts."""

    def __init__(self, max_delay: float = 30.0):
        self.max_delay = max_delay

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay after a failed attempt.

        Args:
            attempt: Number of the attempt that just failed (1-indexed)

        Returns:
            Delay in seconds
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Policy name for logging."""
        pass


class ExponentialBackoff(BackoffPolicy):
    """
    Exponential backoff with optional jitter.

    delay = min(base_delay * backoff_factor ** (attempt - 1) + jitter, max_delay)

    Jitter is a random amount between zero and ``jitter_range`` of the
    exponential delay, so it only ever lengthens the wait.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        backoff_factor: float = 2.0,
        max_delay: float = 30.0,
        jitter: bool = True,
        jitter_range: float = 0.1
    ):
        super().__init__(max_delay)
        self.base_delay = base_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter
        self.jitter_range = jitter_range

    def calculate_delay(self, attempt: int) -> float:
        delay = self.base_delay * (self.backoff_factor ** max(attempt - 1, 0))

        if self.jitter and delay > 0:
            delay += random.uniform(0, self.jitter_range * delay)

        return min(delay, self.max_delay)

    @property
    def name(self) -> str:
        return f"ExponentialBackoff(base={self.base_delay}, factor={self.backoff_factor})"


class FixedDelay(BackoffPolicy):
    """Same delay between all attempts."""

    def __init__(self, delay: float = 1.0):
        super().__init__(delay)
        self.delay = delay

    def calculate_delay(self, attempt: int) -> float:
        return self.delay

    @property
    def name(self) -> str:
        return f"FixedDelay(delay={self.delay})"
