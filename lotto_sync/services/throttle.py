"""Pacing between sync iterations."""

from __future__ import annotations

import time
from typing import Callable, Protocol


class Throttler(Protocol):
    def wait(self) -> None: ...


class FixedDelayThrottler:
    """Sleep a fixed number of seconds on every wait(). No backoff, no jitter."""

    def __init__(self, seconds: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self.seconds = max(0.0, float(seconds))
        self._sleep = sleep

    def wait(self) -> None:
        if self.seconds > 0:
            self._sleep(self.seconds)


class NoDelayThrottler:
    def wait(self) -> None:
        return None
