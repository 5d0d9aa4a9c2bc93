"""Centralized error handlers.

Every handler discards the request's database work before answering, so a
failed request never commits a partial write.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from flask import Flask, current_app
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from gold_ledger.db import discard_session
from gold_ledger.errors import AppError, ConflictError, ValidationError
from gold_ledger.utils.responses import fail

logger = logging.getLogger(__name__)


def _stack(exc: BaseException) -> str | None:
    if not current_app.config.get("EXPOSE_STACK", False):
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _as_list(details: Any | None) -> list[Any]:
    if details is None:
        return []
    if isinstance(details, list):
        return details
    return [details]


def _first_message(messages: Any) -> str | None:
    """Pick the first human-readable string out of marshmallow's nested messages."""

    if isinstance(messages, str):
        return messages
    if isinstance(messages, dict):
        for value in messages.values():
            found = _first_message(value)
            if found:
                return found
    if isinstance(messages, list):
        for value in messages:
            found = _first_message(value)
            if found:
                return found
    return None


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        discard_session()
        return fail(exc.message, exc.status_code, _as_list(exc.details), _stack(exc))

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        discard_session()
        messages = exc.messages if isinstance(exc.messages, dict) else {"_schema": exc.messages}
        wrapped = ValidationError(message=_first_message(messages) or "Validation error")
        errors = [{"field": field, "messages": msgs} for field, msgs in messages.items()]
        return fail(wrapped.message, wrapped.status_code, errors, _stack(exc))

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        discard_session()
        logger.info("Integrity error", exc_info=exc)
        wrapped = ConflictError(message="Request conflicts with existing data")
        # Driver messages name tables and constraints.
        details = None
        if current_app.config.get("EXPOSE_STACK", False):
            details = str(exc.orig) if exc.orig else str(exc)
        return fail(wrapped.message, wrapped.status_code, _as_list(details), _stack(exc))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        discard_session()
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail("Not found", 404)
        return fail(getattr(exc, "description", None) or "HTTP error", status, [{"name": exc.name}])

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        discard_session()
        logger.exception("Unhandled exception")
        return fail("Internal Server Error", 500, stack=_stack(exc))
