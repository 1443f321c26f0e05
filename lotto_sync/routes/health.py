"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from lotto_sync.db import get_store
from lotto_sync.errors import StorageError
from lotto_sync.utils.responses import fail, ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint; also reports how far the store has synced."""

    store = get_store()
    try:
        latest = store.latest_key()
    except StorageError:
        return fail("storage_unavailable", "Storage unavailable", 503, data={"status": "degraded"})

    return ok({"status": "ok", "latest_draw_no": latest})
