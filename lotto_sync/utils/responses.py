"""Helpers for consistent JSON response schema."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    """Success response."""

    return jsonify({"success": True, "data": data, "error": None}), status_code


def fail(
    code: str,
    message: str,
    status_code: int,
    details: Any | None = None,
    data: Any | None = None,
) -> tuple[Response, int]:
    """Error response. `data` carries a degraded result for fail-soft reads."""

    return (
        jsonify(
            {
                "success": False,
                "data": data,
                "error": {"code": code, "message": message, "details": details},
            }
        ),
        status_code,
    )
