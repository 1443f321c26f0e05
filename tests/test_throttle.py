from __future__ import annotations

from lotto_sync.services.throttle import FixedDelayThrottler, NoDelayThrottler


def test_fixed_delay_sleeps_the_configured_seconds():
    slept: list[float] = []
    throttler = FixedDelayThrottler(1.5, sleep=slept.append)

    throttler.wait()
    throttler.wait()

    assert slept == [1.5, 1.5]


def test_zero_or_negative_delay_does_not_sleep():
    slept: list[float] = []

    FixedDelayThrottler(0, sleep=slept.append).wait()
    FixedDelayThrottler(-2, sleep=slept.append).wait()

    assert slept == []


def test_no_delay_throttler_returns_immediately():
    assert NoDelayThrottler().wait() is None
