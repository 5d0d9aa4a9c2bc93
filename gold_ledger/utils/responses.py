"""Helpers for consistent JSON response schema."""

from __future__ import annotations

import math
from typing import Any

from flask import Response, jsonify


def ok(data: Any, message: str = "Success", status_code: int = 200) -> Response:
    """Success response."""

    return (
        jsonify(
            {
                "statusCode": status_code,
                "data": data,
                "message": message,
                "success": True,
            }
        ),
        status_code,
    )


def fail(
    message: str,
    status_code: int,
    errors: list[Any] | None = None,
    stack: str | None = None,
) -> Response:
    """Error response. ``stack`` is omitted entirely when not given."""

    body: dict[str, Any] = {
        "success": False,
        "statusCode": status_code,
        "message": message,
        "errors": errors or [],
    }
    if stack is not None:
        body["stack"] = stack
    return jsonify(body), status_code


def pagination(page: int, limit: int, total_count: int) -> dict[str, int]:
    """Page metadata attached to every list response."""

    return {
        "page": page,
        "limit": limit,
        "totalCount": total_count,
        "totalPages": math.ceil(total_count / limit) if limit else 0,
    }
