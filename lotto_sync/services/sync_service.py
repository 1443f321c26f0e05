"""Incremental catch-up of lotto draws from the upstream source.

One run walks draw numbers upward from the latest stored draw, one request at
a time, and stops at the first draw it cannot use:

    INIT     cursor = latest stored draw + 1
    RUNNING  fetch(cursor) -> validate -> upsert -> cursor += 1 -> wait
    STOPPED  not_yet_published | unexpected_format | transport_error
             | storage_error | batch_limit

Nothing is retried. The next scheduled run resumes from the store, so
re-running is always safe.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from lotto_sync.config import DEFAULT_SOURCE_URL, DEFAULT_USER_AGENT
from lotto_sync.errors import InitializationError, PayloadValidationError, StorageError, TransportError
from lotto_sync.repositories.base import DrawStore
from lotto_sync.schemas.lotto_draw import DrawRecord, SyncResultSchema
from lotto_sync.services.fetcher import FetchResult, FetchStatus, LottoFetcher, build_http_session
from lotto_sync.services.throttle import FixedDelayThrottler, NoDelayThrottler, Throttler
from lotto_sync.services.validator import DrawValidator


logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, draw_no: int) -> FetchResult: ...

    def close(self) -> None: ...


class SyncState(str, Enum):
    INIT = "init"
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason(str, Enum):
    NOT_YET_PUBLISHED = "not_yet_published"
    UNEXPECTED_FORMAT = "unexpected_format"
    TRANSPORT_ERROR = "transport_error"
    STORAGE_ERROR = "storage_error"
    BATCH_LIMIT = "batch_limit"


FATAL_REASONS = frozenset({StopReason.STORAGE_ERROR})

_result_schema = SyncResultSchema()


@dataclass(frozen=True)
class SyncResult:
    reason: StopReason
    start_cursor: int
    stopped_at: int
    inserted: tuple[int, ...]
    latest_draw_no: int
    total_count: int | None
    detail: str | None = None
    state: SyncState = SyncState.STOPPED

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def fatal(self) -> bool:
        return self.reason in FATAL_REASONS

    def as_dict(self) -> dict[str, Any]:
        return _result_schema.dump(self)


class LottoSyncService:
    """Drive fetch -> validate -> persist until a stop condition is reached."""

    def __init__(
        self,
        store: DrawStore,
        fetcher: Fetcher,
        validator: DrawValidator | None = None,
        throttler: Throttler | None = None,
        on_progress: Callable[[DrawRecord], None] | None = None,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._validator = validator or DrawValidator()
        self._throttler = throttler or NoDelayThrottler()
        self._on_progress = on_progress
        self.state = SyncState.INIT

    def close(self) -> None:
        self._fetcher.close()

    def __enter__(self) -> LottoSyncService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def run(self, max_records: int | None = None, start_at: int | None = None) -> SyncResult:
        """Run one catch-up pass.

        Args:
            max_records: stop with `batch_limit` after this many stored draws.
            start_at: start from this draw instead of latest stored + 1. Only
                draws up to latest stored + 1 may be re-checked, so the stored
                draw numbers stay contiguous.

        Raises:
            InitializationError: the store could not be read before any fetch.
            ValueError: invalid max_records or start_at.
        """

        if max_records is not None and max_records < 1:
            raise ValueError("max_records must be positive")
        if start_at is not None and start_at < 1:
            raise ValueError("start_at must be >= 1")

        self.state = SyncState.INIT
        try:
            latest_before = self._store.latest_key()
        except StorageError as exc:
            raise InitializationError("Draw store is not reachable") from exc

        if start_at is not None and start_at > latest_before + 1:
            raise ValueError(f"start_at must be <= {latest_before + 1} (latest stored draw is #{latest_before})")

        start_cursor = int(start_at) if start_at is not None else latest_before + 1
        cursor = start_cursor
        processed = 0
        inserted: list[int] = []
        detail: str | None = None

        self.state = SyncState.RUNNING
        logger.info("Sync starting at draw %s (latest stored #%s)", cursor, latest_before)

        while True:
            try:
                fetched = self._fetcher.fetch(cursor)
            except TransportError as exc:
                logger.warning("Draw %s: %s. Stopping.", cursor, exc)
                reason, detail = StopReason.TRANSPORT_ERROR, str(exc)
                break

            if fetched.status is FetchStatus.NOT_AVAILABLE:
                logger.info("Draw %s not available yet. Stopping.", cursor)
                reason = StopReason.NOT_YET_PUBLISHED
                break

            if fetched.status is FetchStatus.MALFORMED:
                logger.warning("Draw %s: invalid response (%s). Stopping.", cursor, fetched.detail)
                reason, detail = StopReason.UNEXPECTED_FORMAT, fetched.detail
                break

            try:
                record = self._validator.validate(fetched.payload, expected_draw_no=cursor)
            except PayloadValidationError as exc:
                logger.warning("Draw %s: payload rejected %s. Stopping.", cursor, exc.messages)
                reason, detail = StopReason.UNEXPECTED_FORMAT, str(exc)
                break

            try:
                created = self._store.upsert(record)
            except StorageError as exc:
                logger.exception("Draw %s could not be stored. Aborting run.", cursor)
                reason, detail = StopReason.STORAGE_ERROR, str(exc)
                break

            self._report(record, created)
            if created:
                inserted.append(record.draw_no)
            processed += 1
            cursor += 1

            if max_records is not None and processed >= max_records:
                reason = StopReason.BATCH_LIMIT
                break

            self._throttler.wait()

        self.state = SyncState.STOPPED
        result = self._summarize(reason, start_cursor, cursor, inserted, latest_before, detail)
        logger.info(
            "Sync stopped (%s): inserted %s draw(s), latest #%s, total %s",
            result.reason.value,
            result.inserted_count,
            result.latest_draw_no,
            result.total_count if result.total_count is not None else "?",
        )
        return result

    def _report(self, record: DrawRecord, created: bool) -> None:
        if not created:
            logger.info("Draw #%s already stored, left unchanged", record.draw_no)
            return

        logger.info(
            "Inserted #%s (%s): %s + %s",
            record.draw_no,
            record.draw_date.isoformat(),
            ",".join(str(n) for n in record.numbers),
            record.bonus_number,
        )
        if self._on_progress is not None:
            self._on_progress(record)

    def _summarize(
        self,
        reason: StopReason,
        start_cursor: int,
        cursor: int,
        inserted: list[int],
        latest_before: int,
        detail: str | None,
    ) -> SyncResult:
        latest = max([latest_before, *inserted])
        total: int | None = None
        if reason not in FATAL_REASONS:
            try:
                latest = self._store.latest_key()
                total = self._store.count()
            except StorageError:
                logger.warning("Could not read store totals for the run summary", exc_info=True)

        return SyncResult(
            reason=reason,
            start_cursor=start_cursor,
            stopped_at=cursor,
            inserted=tuple(inserted),
            latest_draw_no=latest,
            total_count=total,
            detail=detail,
        )


def build_sync_service(
    config: Mapping[str, Any],
    store: DrawStore,
    *,
    throttler: Throttler | None = None,
) -> LottoSyncService:
    """Wire a sync service against the configured upstream source."""

    http = build_http_session(user_agent=str(config.get("SOURCE_USER_AGENT") or DEFAULT_USER_AGENT))
    fetcher = LottoFetcher(
        http,
        url_template=str(config.get("SOURCE_URL_TEMPLATE") or DEFAULT_SOURCE_URL),
        timeout_seconds=float(config.get("SOURCE_TIMEOUT_SECONDS") or 10.0),
    )
    if throttler is None:
        throttler = FixedDelayThrottler(float(config.get("SYNC_DELAY_SECONDS", 1.5)))
    return LottoSyncService(store, fetcher, throttler=throttler)
