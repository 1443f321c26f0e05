"""Lotto draws stored in one wide table.

One row per draw number. Rows are written once by the sync job and never
updated afterwards.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, Date, DateTime, Integer, SmallInteger, func
from sqlalchemy.orm import Mapped, mapped_column

from lotto_sync.models.base import Base


class LottoDraw(Base):
    """One historical draw: six numbers, bonus and first-prize summary."""

    __tablename__ = "lotto_draws"

    draw_no: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    draw_date: Mapped[date] = mapped_column(Date, nullable=False)

    number1: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number2: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number3: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number4: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number5: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    number6: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    bonus_number: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    # Amounts are in KRW and overflow 32-bit integers.
    total_sales: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    first_prize_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    first_prize_winner_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    first_prize_accumulated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
