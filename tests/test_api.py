from __future__ import annotations

import pytest

from helpers import FakeFetcher, FlakyStore, make_record
from lotto_sync.routes import lotto_draws
from lotto_sync.services.sync_service import LottoSyncService


@pytest.fixture
def draw_store(app):
    return app.extensions["draw_store"]


@pytest.fixture
def fake_upstream(monkeypatch):
    fetcher = FakeFetcher(published=8)

    def _build(config, store, **kwargs):
        return LottoSyncService(store, fetcher)

    monkeypatch.setattr(lotto_draws, "build_sync_service", _build)
    return fetcher


def test_health(client, draw_store):
    draw_store.upsert(make_record(1))

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"status": "ok", "latest_draw_no": 1}


def test_list_draws_ascending(client, draw_store):
    for draw_no in (2, 1):
        draw_store.upsert(make_record(draw_no))

    resp = client.get("/api/lotto")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert [d["draw_no"] for d in body["data"]] == [1, 2]
    assert body["data"][0] == {
        "draw_no": 1,
        "draw_date": "2002-12-07",
        "numbers": [10, 23, 29, 33, 37, 40],
        "bonus_number": 16,
        "total_sales": 3681782000,
        "first_prize_amount": 0,
        "first_prize_winner_count": 0,
        "first_prize_accumulated": 863604600,
    }


def test_list_draws_fails_soft_on_storage_error(app, client, draw_store):
    app.extensions["draw_store"] = FlakyStore(draw_store, fail_reads=True)

    resp = client.get("/api/lotto")

    body = resp.get_json()
    assert resp.status_code == 503
    assert body["success"] is False
    assert body["data"] == []
    assert body["error"]["code"] == "storage_unavailable"


def test_health_reports_degraded_storage(app, client, draw_store):
    app.extensions["draw_store"] = FlakyStore(draw_store, fail_reads=True)

    resp = client.get("/health")

    assert resp.status_code == 503
    assert resp.get_json()["data"] == {"status": "degraded"}


def test_get_single_draw(client, draw_store):
    draw_store.upsert(make_record(3))

    assert client.get("/api/lotto/3").get_json()["data"]["draw_no"] == 3

    missing = client.get("/api/lotto/4")
    assert missing.status_code == 404
    assert missing.get_json()["error"]["code"] == "not_found"


def test_update_runs_a_bounded_sync(client, draw_store, fake_upstream):
    resp = client.post("/api/lotto/update?count=3")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["data"]["reason"] == "batch_limit"
    assert body["data"]["inserted"] == [1, 2, 3]
    assert draw_store.latest_key() == 3


def test_update_uses_default_batch_size_and_resumes(client, draw_store, fake_upstream):
    client.get("/api/lotto/update")
    resp = client.get("/api/lotto/update")

    data = resp.get_json()["data"]
    assert data["inserted"] == [6, 7, 8]
    assert data["reason"] == "not_yet_published"
    assert fake_upstream.calls == [1, 2, 3, 4, 5, 6, 7, 8, 9]


@pytest.mark.parametrize("query", ["count=0", "count=51", "count=abc", "start=0"])
def test_update_rejects_bad_parameters(client, fake_upstream, query):
    resp = client.get(f"/api/lotto/update?{query}")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"
    assert fake_upstream.calls == []


def test_update_rejects_start_that_would_leave_a_gap(client, draw_store, fake_upstream):
    draw_store.upsert(make_record(1))

    resp = client.get("/api/lotto/update?start=9&count=2")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "validation_error"
    assert fake_upstream.calls == []
    assert [d["draw_no"] for d in client.get("/api/lotto").get_json()["data"]] == [1]


def test_update_rechecks_from_an_earlier_start(client, draw_store, fake_upstream):
    for draw_no in (1, 2):
        draw_store.upsert(make_record(draw_no))

    resp = client.get("/api/lotto/update?start=2&count=2")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["inserted"] == [3]
    assert fake_upstream.calls == [2, 3]


def test_update_closes_upstream_session(client, fake_upstream):
    client.post("/api/lotto/update?count=1")

    assert fake_upstream.closed is True


def test_update_with_unreachable_store(app, client, draw_store, fake_upstream):
    app.extensions["draw_store"] = FlakyStore(draw_store, fail_reads=True)

    resp = client.post("/api/lotto/update")

    assert resp.status_code == 503
    assert resp.get_json()["error"]["code"] == "storage_unavailable"
    assert fake_upstream.calls == []


def test_update_reports_storage_abort(app, client, draw_store, fake_upstream):
    app.extensions["draw_store"] = FlakyStore(draw_store, fail_upsert_on={2})

    resp = client.post("/api/lotto/update")

    body = resp.get_json()
    assert resp.status_code == 503
    assert body["data"]["reason"] == "storage_error"
    assert body["data"]["inserted"] == [1]


def test_unknown_route_is_json_404(client):
    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "not_found"
