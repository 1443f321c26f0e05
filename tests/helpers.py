"""Shared test doubles."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from lotto_sync.errors import StorageError
from lotto_sync.schemas.lotto_draw import DrawRecord
from lotto_sync.services.fetcher import FetchResult, FetchStatus

FIRST_DRAW_DATE = date(2002, 12, 7)


def make_payload(draw_no: int, **overrides: Any) -> dict[str, Any]:
    """Upstream-shaped payload for one published draw."""

    payload: dict[str, Any] = {
        "returnValue": "success",
        "drwNo": draw_no,
        "drwNoDate": (FIRST_DRAW_DATE + timedelta(weeks=draw_no - 1)).isoformat(),
        "drwtNo1": 10,
        "drwtNo2": 23,
        "drwtNo3": 29,
        "drwtNo4": 33,
        "drwtNo5": 37,
        "drwtNo6": 40,
        "bnusNo": 16,
        "totSellamnt": 3681782000,
        "firstWinamnt": 0,
        "firstPrzwnerCo": 0,
        "firstAccumamnt": 863604600,
    }
    payload.update(overrides)
    return payload


def make_record(draw_no: int, **overrides: Any) -> DrawRecord:
    values: dict[str, Any] = {
        "draw_no": draw_no,
        "draw_date": FIRST_DRAW_DATE + timedelta(weeks=draw_no - 1),
        "numbers": (10, 23, 29, 33, 37, 40),
        "bonus_number": 16,
        "total_sales": 3681782000,
        "first_prize_amount": 0,
        "first_prize_winner_count": 0,
        "first_prize_accumulated": 863604600,
    }
    values.update(overrides)
    return DrawRecord(**values)


class FakeFetcher:
    """Upstream with draws 1..published; `overrides` replace single draws.

    An override may be a FetchResult, a raw payload dict, or an exception to
    raise.
    """

    def __init__(self, published: int, overrides: dict[int, Any] | None = None) -> None:
        self.published = published
        self.overrides = dict(overrides or {})
        self.calls: list[int] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def fetch(self, draw_no: int) -> FetchResult:
        self.calls.append(draw_no)
        if draw_no in self.overrides:
            value = self.overrides[draw_no]
            if isinstance(value, BaseException):
                raise value
            if isinstance(value, dict):
                return FetchResult(draw_no, FetchStatus.OK, payload=value)
            return value
        if draw_no > self.published:
            return FetchResult(draw_no, FetchStatus.NOT_AVAILABLE, payload={"returnValue": "fail"})
        return FetchResult(draw_no, FetchStatus.OK, payload=make_payload(draw_no))


class CountingThrottler:
    def __init__(self) -> None:
        self.waits = 0

    def wait(self) -> None:
        self.waits += 1


class FlakyStore:
    """Wrap a store and fail on chosen operations."""

    def __init__(self, inner: Any, fail_upsert_on: set[int] | None = None, fail_reads: bool = False) -> None:
        self._inner = inner
        self.fail_upsert_on = set(fail_upsert_on or ())
        self.fail_reads = fail_reads

    def latest_key(self) -> int:
        if self.fail_reads:
            raise StorageError("database is down")
        return self._inner.latest_key()

    def upsert(self, record: DrawRecord) -> bool:
        if record.draw_no in self.fail_upsert_on:
            raise StorageError(f"disk full while writing {record.draw_no}")
        return self._inner.upsert(record)

    def count(self) -> int:
        if self.fail_reads:
            raise StorageError("database is down")
        return self._inner.count()

    def list_all(self) -> list[DrawRecord]:
        if self.fail_reads:
            raise StorageError("database is down")
        return self._inner.list_all()

    def get(self, draw_no: int) -> DrawRecord | None:
        if self.fail_reads:
            raise StorageError("database is down")
        return self._inner.get(draw_no)
