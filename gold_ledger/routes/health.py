"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from gold_ledger.db import get_session, ping
from gold_ledger.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint; fails with 500 when the database is unreachable."""

    ping(get_session())
    return ok({"status": "ok", "database": "ok"}, "Service is healthy")
