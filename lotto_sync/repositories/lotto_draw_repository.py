"""SQL persistence for lotto draws."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lotto_sync.errors import StorageError
from lotto_sync.models.lotto_draw import LottoDraw
from lotto_sync.schemas.lotto_draw import DrawRecord


def _to_row(record: DrawRecord) -> dict[str, Any]:
    n = record.numbers
    return {
        "draw_no": int(record.draw_no),
        "draw_date": record.draw_date,
        "number1": int(n[0]),
        "number2": int(n[1]),
        "number3": int(n[2]),
        "number4": int(n[3]),
        "number5": int(n[4]),
        "number6": int(n[5]),
        "bonus_number": int(record.bonus_number),
        "total_sales": int(record.total_sales),
        "first_prize_amount": int(record.first_prize_amount),
        "first_prize_winner_count": int(record.first_prize_winner_count),
        "first_prize_accumulated": int(record.first_prize_accumulated),
    }


def _to_record(row: LottoDraw) -> DrawRecord:
    return DrawRecord(
        draw_no=int(row.draw_no),
        draw_date=row.draw_date,
        numbers=(
            int(row.number1),
            int(row.number2),
            int(row.number3),
            int(row.number4),
            int(row.number5),
            int(row.number6),
        ),
        bonus_number=int(row.bonus_number),
        total_sales=int(row.total_sales or 0),
        first_prize_amount=int(row.first_prize_amount or 0),
        first_prize_winner_count=int(row.first_prize_winner_count or 0),
        first_prize_accumulated=int(row.first_prize_accumulated or 0),
    )


def insert_ignore(session: Session, values: dict[str, Any]) -> bool:
    """Insert one draw row unless its draw_no exists. Returns True if inserted."""

    table = LottoDraw.__table__
    dialect = session.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        build = sqlite_insert if dialect == "sqlite" else pg_insert
        stmt = build(table).values(**values).on_conflict_do_nothing(index_elements=["draw_no"])
        return session.execute(stmt).rowcount == 1

    if dialect in ("mysql", "mariadb"):
        stmt = insert(table).values(**values).prefix_with("IGNORE")
        return session.execute(stmt).rowcount == 1

    # Other dialects: check then insert. Safe with the single writer.
    if session.get(LottoDraw, values["draw_no"]) is not None:
        return False
    session.execute(insert(table).values(**values))
    return True


class SqlDrawStore:
    """Draw store on a SQLAlchemy engine, one short session per call."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def latest_key(self) -> int:
        try:
            with self._session_factory() as session:
                value = session.scalar(select(func.max(LottoDraw.draw_no)))
        except SQLAlchemyError as exc:
            raise StorageError("Failed to read the latest draw number") from exc
        return int(value or 0)

    def upsert(self, record: DrawRecord) -> bool:
        values = _to_row(record)
        try:
            with self._session_factory() as session:
                inserted = insert_ignore(session, values)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to write draw {record.draw_no}") from exc
        return inserted

    def count(self) -> int:
        try:
            with self._session_factory() as session:
                value = session.scalar(select(func.count()).select_from(LottoDraw))
        except SQLAlchemyError as exc:
            raise StorageError("Failed to count draws") from exc
        return int(value or 0)

    def list_all(self) -> list[DrawRecord]:
        stmt = select(LottoDraw).order_by(LottoDraw.draw_no.asc())
        try:
            with self._session_factory() as session:
                return [_to_record(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list draws") from exc

    def get(self, draw_no: int) -> DrawRecord | None:
        try:
            with self._session_factory() as session:
                row = session.get(LottoDraw, int(draw_no))
                return _to_record(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read draw {draw_no}") from exc
