import time
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator

from django.conf import settings


@dataclass
class RetryPolicy:
    """Exponential backoff schedule for polling a long-running job."""

    initial_delay: float = 3.0
    factor: float = 1.5
    max_delay: float = 30.0
    max_attempts: int = 20
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def delays(self) -> Iterator[float]:
        delay = self.initial_delay
        for _ in range(self.max_attempts):
            yield min(delay, self.max_delay)
            delay *= self.factor

    @property
    def budget(self) -> float:
        """Total time spent sleeping when every attempt is used."""
        return sum(self.delays())

    def capped(self, max_wait: float) -> "RetryPolicy":
        """Same schedule with attempts dropped until ``budget`` fits in ``max_wait``."""
        attempts, waited = 0, 0.0
        for delay in self.delays():
            if waited + delay > max_wait:
                break
            attempts += 1
            waited += delay
        return replace(self, max_attempts=max(attempts, 1))

    @classmethod
    def from_settings(cls, **overrides) -> "RetryPolicy":
        values = dict(
            initial_delay=settings.UPSCALE_POLL_INITIAL_DELAY,
            factor=settings.UPSCALE_POLL_FACTOR,
            max_delay=settings.UPSCALE_POLL_MAX_DELAY,
            max_attempts=settings.UPSCALE_POLL_MAX_ATTEMPTS,
        )
        values.update(overrides)
        return cls(**values)
