"""SQLAlchemy engine + session management.

Uses a session-per-request pattern: the request is the unit of work. The
session commits in teardown when the request succeeded and rolls back when an
error handler discarded it or an exception escaped.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

from flask import Flask, g
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from gold_ledger.models.base import Base

logger = logging.getLogger(__name__)


def _vercel_oidc_credentials(region: str) -> dict[str, str] | None:
    """Exchange VERCEL_OIDC_TOKEN for temporary credentials of AWS_ROLE_ARN."""

    token = os.getenv("VERCEL_OIDC_TOKEN")
    role_arn = os.getenv("AWS_ROLE_ARN")
    if not token or not role_arn:
        return None

    import boto3

    sts = boto3.client("sts", region_name=region)
    resp = sts.assume_role_with_web_identity(
        RoleArn=role_arn,
        RoleSessionName="gold-ledger-rds",
        WebIdentityToken=token,
    )
    creds = resp["Credentials"]
    return {
        "aws_access_key_id": creds["AccessKeyId"],
        "aws_secret_access_key": creds["SecretAccessKey"],
        "aws_session_token": creds["SessionToken"],
    }


def _iam_connection_creator(url: URL, region: str) -> Callable[[], Any]:
    """Build a psycopg2 connection factory that authenticates with an RDS IAM token.

    A fresh token is generated per physical connection; tokens expire after
    15 minutes, pooled connections keep working once established.
    """

    import boto3
    import psycopg2

    host = str(url.host)
    username = str(url.username)
    database = str(url.database)
    port = int(url.port or 5432)
    sslmode = (url.query or {}).get("sslmode") or os.getenv("PGSSLMODE") or "require"

    def _connect() -> Any:
        creds = _vercel_oidc_credentials(region) or {}
        rds = boto3.client("rds", region_name=region, **creds)
        token = rds.generate_db_auth_token(
            DBHostname=host,
            Port=port,
            DBUsername=username,
            Region=region,
        )
        return psycopg2.connect(
            host=host,
            port=port,
            user=username,
            password=token,
            dbname=database,
            sslmode=sslmode,
        )

    return _connect


def create_app_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url``.

    Postgres URLs without a password use IAM auth when AWS_REGION is set.
    """

    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "postgresql" and not url.password:
        region = os.getenv("AWS_REGION")
        if region and url.host and url.username and url.database:
            logger.info("Using RDS IAM authentication for %s", url.host)
            return create_engine(
                "postgresql+psycopg2://",
                creator=_iam_connection_creator(url, region),
                pool_pre_ping=True,
            )

    engine = create_engine(database_url, pool_pre_ping=True)

    if backend == "sqlite":
        # SQLite ignores foreign keys and folds ASCII case in LIKE unless asked
        # per connection.
        @event.listens_for(engine, "connect")
        def _configure_sqlite(dbapi_connection: Any, _record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA case_sensitive_like=ON")
            cursor.close()

    return engine


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions."""

    from gold_ledger import models  # noqa: F401  (register tables)

    engine = create_app_engine(str(app.config["DATABASE_URL"]))
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    # Production deployments run scripts/create_tables.py instead.
    Base.metadata.create_all(bind=engine)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()
        g.db_discarded = False

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = g.pop("db", None)
        if session is None:
            return

        try:
            if exc is None and not g.pop("db_discarded", False):
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def discard_session() -> None:
    """Roll back the request's pending work; teardown will not commit it."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        return
    session.rollback()
    g.db_discarded = True


def ping(session: Session) -> None:
    """Round-trip to the database."""

    session.execute(text("SELECT 1"))
