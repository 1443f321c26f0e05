"""MongoDB persistence for lotto draws (DB_BACKEND=mongo)."""

from __future__ import annotations

from datetime import date
from typing import Any

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from lotto_sync.errors import StorageError
from lotto_sync.schemas.lotto_draw import DrawRecord


def _to_doc(record: DrawRecord) -> dict[str, Any]:
    n = record.numbers
    return {
        "draw_no": int(record.draw_no),
        # BSON has no date-only type.
        "draw_date": record.draw_date.isoformat(),
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


def _to_record(doc: dict[str, Any]) -> DrawRecord:
    return DrawRecord(
        draw_no=int(doc["draw_no"]),
        draw_date=date.fromisoformat(str(doc["draw_date"])),
        numbers=tuple(int(doc[f"number{i}"]) for i in range(1, 7)),  # type: ignore[arg-type]
        bonus_number=int(doc["bonus_number"]),
        total_sales=int(doc.get("total_sales") or 0),
        first_prize_amount=int(doc.get("first_prize_amount") or 0),
        first_prize_winner_count=int(doc.get("first_prize_winner_count") or 0),
        first_prize_accumulated=int(doc.get("first_prize_accumulated") or 0),
    )


class MongoDrawStore:
    """Draw store on a single MongoDB collection keyed by draw_no."""

    def __init__(self, collection: Collection) -> None:
        self._col = collection

    def ensure_indexes(self) -> None:
        try:
            self._col.create_index("draw_no", unique=True)
        except PyMongoError as exc:
            raise StorageError("Failed to create draw_no index") from exc

    def latest_key(self) -> int:
        try:
            doc = self._col.find_one({}, {"_id": 0, "draw_no": 1}, sort=[("draw_no", -1)])
        except PyMongoError as exc:
            raise StorageError("Failed to read the latest draw number") from exc
        return int(doc["draw_no"]) if doc else 0

    def upsert(self, record: DrawRecord) -> bool:
        doc = _to_doc(record)
        try:
            # $setOnInsert leaves an existing document untouched.
            result = self._col.update_one(
                {"draw_no": doc["draw_no"]},
                {"$setOnInsert": doc},
                upsert=True,
            )
        except PyMongoError as exc:
            raise StorageError(f"Failed to write draw {record.draw_no}") from exc
        return result.upserted_id is not None

    def count(self) -> int:
        try:
            return int(self._col.count_documents({}))
        except PyMongoError as exc:
            raise StorageError("Failed to count draws") from exc

    def list_all(self) -> list[DrawRecord]:
        try:
            cur = self._col.find({}, {"_id": 0}).sort("draw_no", 1)
            return [_to_record(d) for d in cur]
        except PyMongoError as exc:
            raise StorageError("Failed to list draws") from exc

    def get(self, draw_no: int) -> DrawRecord | None:
        try:
            doc = self._col.find_one({"draw_no": int(draw_no)}, {"_id": 0})
        except PyMongoError as exc:
            raise StorageError(f"Failed to read draw {draw_no}") from exc
        return _to_record(doc) if doc else None
