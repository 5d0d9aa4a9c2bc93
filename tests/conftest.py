# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Fixtures shared by the API tests:
# - a fresh Flask app per test, backed by its own SQLite file
# - the test client and a standalone session for asserting on stored rows
# - small builders that drive the API to set up programs, cycles and lots
# =============================================================================

import os

# Must be set before gold_ledger.config is imported.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy import func, select

from gold_ledger import create_app

API = "/api"


@pytest.fixture
def app(tmp_path):
    """A fully wired app on a throwaway database."""
    app = create_app({"DATABASE_URL": f"sqlite:///{tmp_path / 'ledger.db'}", "TESTING": True})
    yield app
    app.extensions["engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    """Session outside any request, for inspecting committed state."""
    db = app.extensions["session_factory"]()
    yield db
    db.rollback()
    db.close()


@pytest.fixture
def count_rows(session):
    """Count committed rows of an ORM model."""

    def _count(model, *where):
        session.expire_all()
        return session.scalar(select(func.count()).select_from(model).where(*where))

    return _count


# =============================================================================
# API builders
# =============================================================================

@pytest.fixture
def create_user(client):
    counter = {"n": 0}

    def _create(name=None, member_id=None, phone_number=None):
        counter["n"] += 1
        n = counter["n"]
        resp = client.post(
            f"{API}/users",
            json={
                "name": name or f"Member {n}",
                "memberId": member_id or f"M-{n:04d}",
                "phoneNumber": phone_number,
            },
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _create


@pytest.fixture
def create_program(client):
    def _create(name="Gold Savers", description="Monthly gold pool"):
        resp = client.post(f"{API}/programs", json={"name": name, "description": description})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _create


@pytest.fixture
def start_cycle(client):
    def _start(program_id):
        resp = client.post(f"{API}/programs/{program_id}/start-cycle")
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _start


@pytest.fixture
def add_lot(client):
    def _add(program_id, user_id):
        resp = client.post(f"{API}/lots", json={"programId": program_id, "userId": user_id})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _add


@pytest.fixture
def create_month(client):
    def _create(cycle_id, month=6, year=2024):
        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle_id, "month": month, "year": year})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _create


@pytest.fixture
def record_payments(client):
    def _record(monthly_data_id, payments):
        resp = client.post(
            f"{API}/payments",
            json={
                "monthlyDataId": monthly_data_id,
                "payments": [{"lotId": lot_id, "isPaid": paid} for lot_id, paid in payments],
            },
        )
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]

    return _record


@pytest.fixture
def running_program(create_program, start_cycle):
    """A program with its first cycle started: returns (program, cycle)."""
    program = create_program()
    cycle = start_cycle(program["id"])
    return program, cycle
