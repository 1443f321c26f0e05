from __future__ import annotations

import pytest

from helpers import make_record
from lotto_sync.db import create_app_engine, create_session_factory
from lotto_sync.errors import StorageError
from lotto_sync.repositories.lotto_draw_repository import SqlDrawStore


def test_empty_store(store):
    assert store.latest_key() == 0
    assert store.count() == 0
    assert store.list_all() == []
    assert store.get(1) is None


def test_upsert_inserts_and_reports_latest(store):
    assert store.upsert(make_record(1)) is True
    assert store.upsert(make_record(2)) is True

    assert store.latest_key() == 2
    assert store.count() == 2
    assert store.get(2) == make_record(2)


def test_upsert_existing_draw_is_a_noop(store):
    original = make_record(1)
    store.upsert(original)

    assert store.upsert(make_record(1, bonus_number=44, total_sales=1)) is False

    assert store.count() == 1
    assert store.get(1) == original


def test_list_all_is_ordered_by_draw_number(store):
    for draw_no in (3, 1, 2):
        store.upsert(make_record(draw_no))

    assert [r.draw_no for r in store.list_all()] == [1, 2, 3]


def test_large_amounts_round_trip(store):
    record = make_record(1000, first_prize_accumulated=32263862630, total_sales=115000000000)
    store.upsert(record)

    assert store.get(1000) == record


def test_missing_table_surfaces_as_storage_error(database_url):
    engine = create_app_engine(database_url)
    store = SqlDrawStore(create_session_factory(engine))

    with pytest.raises(StorageError):
        store.latest_key()
    with pytest.raises(StorageError):
        store.upsert(make_record(1))
    engine.dispose()
