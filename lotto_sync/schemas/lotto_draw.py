"""Schemas for lotto draws.

`DrawPayloadSchema` turns one upstream JSON payload into a `DrawRecord`;
`LottoDrawSchema` serializes records for the read API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates_schema


NUMBER_RANGE = validate.Range(min=1, max=45)


@dataclass(frozen=True)
class DrawRecord:
    draw_no: int
    draw_date: date
    numbers: tuple[int, int, int, int, int, int]
    bonus_number: int
    total_sales: int = 0
    first_prize_amount: int = 0
    first_prize_winner_count: int = 0
    first_prize_accumulated: int = 0


class ZeroDefaultInteger(fields.Integer):
    """Integer that loads as 0 when missing, null or not a whole number.

    Fractional values (1234.9) count as unusable and load as 0 rather than
    being truncated. Numeric strings ("12") are accepted. Negative values
    still fail the range check.
    """

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("validate", validate.Range(min=0))
        super().__init__(required=False, load_default=0, **kwargs)

    def deserialize(self, value, attr=None, data=None, **kwargs):  # type: ignore[no-untyped-def,override]
        if value is None:
            return 0
        return super().deserialize(value, attr, data, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, float) and not value.is_integer():
            return 0
        try:
            return super()._deserialize(value, attr, data, **kwargs)
        except ValidationError:
            return 0


def _number_field(key: str) -> fields.Integer:
    return fields.Integer(required=True, strict=True, data_key=key, validate=NUMBER_RANGE)


class DrawPayloadSchema(Schema):
    """Upstream payload (`common.do?method=getLottoNumber`) -> DrawRecord."""

    class Meta:
        unknown = EXCLUDE

    draw_no = fields.Integer(required=True, strict=True, data_key="drwNo", validate=validate.Range(min=1))
    draw_date = fields.Date(required=True, data_key="drwNoDate")

    number1 = _number_field("drwtNo1")
    number2 = _number_field("drwtNo2")
    number3 = _number_field("drwtNo3")
    number4 = _number_field("drwtNo4")
    number5 = _number_field("drwtNo5")
    number6 = _number_field("drwtNo6")
    bonus_number = _number_field("bnusNo")

    total_sales = ZeroDefaultInteger(data_key="totSellamnt")
    first_prize_amount = ZeroDefaultInteger(data_key="firstWinamnt")
    first_prize_winner_count = ZeroDefaultInteger(data_key="firstPrzwnerCo")
    first_prize_accumulated = ZeroDefaultInteger(data_key="firstAccumamnt")

    @validates_schema
    def _validate_numbers(self, data, **kwargs):  # type: ignore[no-untyped-def]
        nums = [data.get(f"number{i}") for i in range(1, 7)]
        if any(n is None for n in nums):
            return
        if len(set(nums)) != 6:
            raise ValidationError({"numbers": ["Numbers must be unique"]})
        bonus = data.get("bonus_number")
        if bonus is not None and bonus in nums:
            raise ValidationError({"bnusNo": ["Bonus number cannot be one of the six numbers"]})

    @post_load
    def _make_record(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return DrawRecord(
            draw_no=data["draw_no"],
            draw_date=data["draw_date"],
            numbers=tuple(data[f"number{i}"] for i in range(1, 7)),  # type: ignore[arg-type]
            bonus_number=data["bonus_number"],
            total_sales=data["total_sales"],
            first_prize_amount=data["first_prize_amount"],
            first_prize_winner_count=data["first_prize_winner_count"],
            first_prize_accumulated=data["first_prize_accumulated"],
        )


class LottoDrawSchema(Schema):
    """Serialize DrawRecord."""

    draw_no = fields.Int(required=True)
    draw_date = fields.Date(required=True)
    numbers = fields.List(fields.Int(), required=True)
    bonus_number = fields.Int(required=True)
    total_sales = fields.Int()
    first_prize_amount = fields.Int()
    first_prize_winner_count = fields.Int()
    first_prize_accumulated = fields.Int()


class SyncRequestSchema(Schema):
    """Query parameters of the update trigger."""

    class Meta:
        unknown = EXCLUDE

    count = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1, max=50))
    start = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))


class SyncResultSchema(Schema):
    """Serialize SyncResult for the update trigger."""

    state = fields.Function(lambda result: result.state.value)
    reason = fields.Function(lambda result: result.reason.value)
    fatal = fields.Bool()
    start_cursor = fields.Int()
    stopped_at = fields.Int()
    inserted_count = fields.Int()
    inserted = fields.List(fields.Int())
    latest_draw_no = fields.Int()
    total_count = fields.Int(allow_none=True)
    detail = fields.Str(allow_none=True)
