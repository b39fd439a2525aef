"""
Polling schedules for agent jobs.

A policy answers one question: how long to wait before poll number N.
Both policies are pure functions of the attempt number and both stop
after a fixed number of attempts.
"""

from typing import Iterator


class PollPolicy:
    """Base class. Attempts are numbered from 1."""

    def __init__(self, max_attempts: int):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts

    def delay(self, attempt: int) -> float:
        raise NotImplementedError

    def delays(self) -> Iterator[float]:
        """The full wait schedule, one entry per poll."""
        for attempt in range(1, self.max_attempts + 1):
            yield self.delay(attempt)

    @property
    def ceiling(self) -> float:
        """Worst-case total seconds spent waiting."""
        return sum(self.delays())


class ExponentialBackoff(PollPolicy):
    """
    Start fast, slow down, cap it.

    0.5s, 0.75s, 1.125s, ... up to 3s per wait. Quick jobs come back
    quickly, slow ones don't hammer the API.
    """

    def __init__(self, initial: float = 0.5, multiplier: float = 1.5,
                 max_delay: float = 3.0, max_attempts: int = 30):
        super().__init__(max_attempts)
        if initial <= 0 or max_delay <= 0:
            raise ValueError("delays must be positive")
        if multiplier < 1:
            raise ValueError("multiplier must be >= 1")
        self.initial = initial
        self.multiplier = multiplier
        self.max_delay = max_delay

    def delay(self, attempt: int) -> float:
        if attempt < 1:
            raise ValueError("attempt numbers start at 1")
        return min(self.initial * self.multiplier ** (attempt - 1), self.max_delay)

    def __repr__(self):
        return (f"ExponentialBackoff(initial={self.initial}, multiplier={self.multiplier}, "
                f"max_delay={self.max_delay}, max_attempts={self.max_attempts})")


class FixedInterval(PollPolicy):
    """Same wait every time. 1s x 30 by default."""

    def __init__(self, interval: float = 1.0, max_attempts: int = 30):
        super().__init__(max_attempts)
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval

    def delay(self, attempt: int) -> float:
        if attempt < 1:
            raise ValueError("attempt numbers start at 1")
        return self.interval

    def __repr__(self):
        return f"FixedInterval(interval={self.interval}, max_attempts={self.max_attempts})"
