"""Storage wiring: SQLAlchemy engine, session factory and draw store.

The app and the CLI both build one explicit store handle and pass it on;
nothing reaches for a global connection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask, current_app
from pymongo import MongoClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lotto_sync.errors import StorageError
from lotto_sync.models.base import Base
from lotto_sync.repositories.base import DrawStore
from lotto_sync.repositories.lotto_draw_repository import SqlDrawStore
from lotto_sync.repositories.mongo_draw_repository import MongoDrawStore


def create_app_engine(database_url: str) -> Engine:
    return create_engine(database_url, pool_pre_ping=True, future=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_tables(engine: Engine, *, reset: bool = False) -> None:
    """Create the draw table (and drop it first when reset=True)."""

    # Import models so they register with Base.metadata
    from lotto_sync import models  # noqa: F401

    try:
        if reset:
            Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to create tables on {engine.url!r}") from exc


def build_store(config: Mapping[str, Any], *, create_schema: bool = False, reset: bool = False) -> DrawStore:
    """Build the draw store selected by DB_BACKEND.

    With create_schema=True the table (SQL) or unique index (Mongo) is created
    up front, which also proves the backend is reachable.
    """

    backend = str(config.get("DB_BACKEND") or "sql").lower().strip()

    if backend == "mongo":
        client: MongoClient = MongoClient(str(config["MONGODB_URI"]))
        col = client[str(config["MONGODB_DB"])]["lotto_draws"]
        if reset:
            col.drop()
        store = MongoDrawStore(col)
        if create_schema:
            store.ensure_indexes()
        return store

    engine = create_app_engine(str(config["DATABASE_URL"]))
    if create_schema:
        create_tables(engine, reset=reset)
    return SqlDrawStore(create_session_factory(engine))


def init_db(app: Flask) -> None:
    """Build the draw store for the app."""

    # Create tables up front (production would use migrations).
    app.extensions["draw_store"] = build_store(app.config, create_schema=True)


def get_store() -> DrawStore:
    """Get the current app's draw store."""

    store: DrawStore | None = current_app.extensions.get("draw_store")
    if store is None:
        raise RuntimeError("Draw store not initialized")
    return store
