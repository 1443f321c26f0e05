"""Turn fetched payloads into draw records."""

from __future__ import annotations

from typing import Any

from marshmallow import ValidationError as MarshmallowValidationError

from lotto_sync.errors import PayloadValidationError
from lotto_sync.schemas.lotto_draw import DrawPayloadSchema, DrawRecord


class DrawValidator:
    """Validate upstream payloads with `DrawPayloadSchema`.

    Summary amounts come back as 0 when absent, so every record that passes
    is fully populated.
    """

    def __init__(self, schema: DrawPayloadSchema | None = None) -> None:
        self._schema = schema or DrawPayloadSchema()

    def validate(self, payload: Any, expected_draw_no: int | None = None) -> DrawRecord:
        if not isinstance(payload, dict):
            raise PayloadValidationError(expected_draw_no, {"_schema": ["Payload must be an object"]})

        try:
            record: DrawRecord = self._schema.load(payload)
        except MarshmallowValidationError as exc:
            raise PayloadValidationError(expected_draw_no, exc.messages) from exc

        if expected_draw_no is not None and record.draw_no != int(expected_draw_no):
            raise PayloadValidationError(
                expected_draw_no,
                {"drwNo": [f"Expected draw {expected_draw_no}, got {record.draw_no}"]},
            )
        return record
