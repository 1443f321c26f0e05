"""Draw store contract.

Every store satisfies the same small contract so the sync service can be
handed any of them (or a test double):

- ``latest_key() -> int``: highest persisted draw number, 0 when empty
- ``upsert(record) -> bool``: insert-if-absent; False when the draw exists
- ``count() -> int``
- ``list_all()`` / ``get(draw_no)`` for the read API

Failures surface as ``StorageError``.
"""

from __future__ import annotations

from typing import Protocol

from lotto_sync.schemas.lotto_draw import DrawRecord


class DrawStore(Protocol):
    def latest_key(self) -> int: ...

    def upsert(self, record: DrawRecord) -> bool: ...

    def count(self) -> int: ...

    def list_all(self) -> list[DrawRecord]: ...

    def get(self, draw_no: int) -> DrawRecord | None: ...
