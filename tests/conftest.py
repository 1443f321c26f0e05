from __future__ import annotations

import pytest

from lotto_sync import create_app
from lotto_sync.db import create_app_engine, create_session_factory, create_tables
from lotto_sync.repositories.lotto_draw_repository import SqlDrawStore


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'lotto.db'}"


@pytest.fixture
def store(database_url) -> SqlDrawStore:
    engine = create_app_engine(database_url)
    create_tables(engine)
    yield SqlDrawStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture
def app(database_url):
    app = create_app(
        {
            "TESTING": True,
            "DB_BACKEND": "sql",
            "DATABASE_URL": database_url,
            "SYNC_DELAY_SECONDS": 0,
            "SYNC_BATCH_SIZE": 5,
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
