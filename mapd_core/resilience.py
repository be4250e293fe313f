import functools
import random
import time
from typing import Callable, Optional, Tuple, Type

from .errors import TransportError


class RetryWithBackoff:
    """
    Retry logic with exponential backoff and jitter.
    Only the listed exception types are retried; anything else propagates at once.
    """
    def __init__(
        self,
        max_retries: int = 3,
        initial_delay: float = 0.1,
        max_delay: float = 2.0,
        backoff_factor: float = 2.0,
        jitter: bool = True,
        exceptions: Tuple[Type[Exception], ...] = (TransportError,),
        on_retry: Optional[Callable[[int, Exception, float], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = max(0, max_retries)
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter
        self.exceptions = exceptions
        self.on_retry = on_retry
        self._sleep = sleep

    def next_wait(self, delay: float) -> float:
        wait = delay
        if self.jitter:
            wait *= (0.5 + random.random())
        return min(wait, self.max_delay)

    def call(self, func: Callable, *args, **kwargs):
        delay = self.initial_delay
        last_exception = None

        for attempt in range(self.max_retries + 1):
            try:
                return func(*args, **kwargs)
            except self.exceptions as e:
                last_exception = e
                if attempt == self.max_retries:
                    break

                wait = self.next_wait(delay)
                if self.on_retry is not None:
                    self.on_retry(attempt + 1, e, wait)
                self._sleep(wait)

                delay *= self.backoff_factor

        raise last_exception

    def __call__(self, func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return self.call(func, *args, **kwargs)
        return wrapper


def retry(
    max_retries: int = 3,
    initial_delay: float = 0.1,
    max_delay: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (TransportError,),
):
    """Decorator for retrying functions."""
    return RetryWithBackoff(
        max_retries=max_retries,
        initial_delay=initial_delay,
        max_delay=max_delay,
        exceptions=exceptions
    )
