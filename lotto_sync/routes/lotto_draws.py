"""Lotto draws API: read persisted draws and trigger a bounded sync."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, request

from lotto_sync.db import get_store
from lotto_sync.errors import (
    InitializationError,
    NotFoundError,
    ServiceUnavailableError,
    StorageError,
    ValidationError,
)
from lotto_sync.schemas.lotto_draw import LottoDrawSchema, SyncRequestSchema
from lotto_sync.services.sync_service import build_sync_service
from lotto_sync.utils.responses import fail, ok


logger = logging.getLogger(__name__)

lotto_draws_bp = Blueprint("lotto_draws", __name__)

_draw_schema = LottoDrawSchema()
_draws_schema = LottoDrawSchema(many=True)
_sync_request_schema = SyncRequestSchema()


@lotto_draws_bp.get("/lotto")
def list_draws():
    """All stored draws, ascending by draw number.

    Storage failures degrade to an empty list with an error status.
    """

    try:
        draws = get_store().list_all()
    except StorageError as exc:
        logger.error("Listing draws failed: %s", exc)
        return fail("storage_unavailable", "Storage unavailable", 503, data=[])

    return ok(_draws_schema.dump(draws))


@lotto_draws_bp.get("/lotto/<int:draw_no>")
def get_draw(draw_no: int):
    draw = get_store().get(draw_no)
    if draw is None:
        raise NotFoundError(message=f"Draw {draw_no} not found")
    return ok(_draw_schema.dump(draw))


@lotto_draws_bp.route("/lotto/update", methods=["GET", "POST"])
def update_draws():
    """Run one bounded catch-up pass.

    Query params:
    - count: max draws to store in this call (1..50, default SYNC_BATCH_SIZE)
    - start: draw number to start from (default: latest stored + 1, at most
      latest stored + 1)
    """

    params = _sync_request_schema.load(request.args.to_dict())
    count = params.get("count") or int(current_app.config.get("SYNC_BATCH_SIZE", 5))

    with build_sync_service(current_app.config, get_store()) as service:
        try:
            result = service.run(max_records=count, start_at=params.get("start"))
        except InitializationError as exc:
            raise ServiceUnavailableError(details=str(exc)) from exc
        except ValueError as exc:
            raise ValidationError(details={"start": [str(exc)]}) from exc

    if result.fatal:
        return fail("storage_unavailable", "Sync aborted on a storage failure", 503, data=result.as_dict())
    return ok(result.as_dict())
