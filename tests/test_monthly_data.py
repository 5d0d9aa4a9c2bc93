# =============================================================================
# tests/test_monthly_data.py - Monthly Buckets & Payment Tracking Tests
# =============================================================================

import pytest

from gold_ledger.models import MonthlyData, Payment
from gold_ledger.repositories.payment_repository import PaymentRepository
from tests.conftest import API


@pytest.fixture
def cycle_with_lots(running_program, create_user, add_lot):
    """Running program with three lots, the last one deactivated."""
    program, cycle = running_program
    lots = [add_lot(program["id"], create_user()["id"]) for _ in range(3)]
    return program, cycle, lots


class TestCreateMonthlyData:
    """Tests for POST /monthly-data."""

    def test_fans_out_unpaid_payments_for_active_lots(self, client, cycle_with_lots, session):
        _, cycle, lots = cycle_with_lots
        client.patch(f"{API}/lots/{lots[2]['id']}/status")

        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle["id"], "month": 6, "year": 2024})
        bucket = resp.get_json()["data"]

        assert resp.status_code == 201
        assert resp.get_json()["message"] == "Monthly data created with payment records"
        assert (bucket["cycleId"], bucket["month"], bucket["year"]) == (cycle["id"], 6, 2024)
        assert bucket["paymentCount"] == 2

        payments = session.query(Payment).filter_by(monthly_data_id=bucket["id"]).all()
        assert sorted(p.lot_id for p in payments) == [lots[0]["id"], lots[1]["id"]]
        assert all(p.is_paid is False and p.payment_date is None for p in payments)

    def test_duplicate_period_is_a_conflict(self, client, cycle_with_lots, create_month, count_rows):
        _, cycle, _ = cycle_with_lots
        create_month(cycle["id"], month=6, year=2024)

        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle["id"], "month": 6, "year": 2024})

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Monthly data already exists for this period"
        assert count_rows(MonthlyData) == 1
        assert count_rows(Payment) == 3

    def test_inactive_cycle(self, client, cycle_with_lots):
        program, cycle, _ = cycle_with_lots
        client.post(f"{API}/programs/{program['id']}/end-cycle")

        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle["id"], "month": 1, "year": 2025})

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Cycle is not active"

    def test_unknown_cycle(self, client):
        resp = client.post(f"{API}/monthly-data", json={"cycleId": 404, "month": 1, "year": 2025})

        assert resp.status_code == 404

    @pytest.mark.parametrize("cycle_id", [10**20, 2**31, 0, True])
    def test_cycle_id_outside_key_range(self, client, cycle_id):
        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle_id, "month": 1, "year": 2025})
        body = resp.get_json()

        assert resp.status_code == 400
        assert body["errors"][0]["field"] == "cycleId"

    def test_missing_fields(self, client):
        resp = client.post(f"{API}/monthly-data", json={"cycleId": 1})
        body = resp.get_json()

        assert resp.status_code == 400
        assert body["message"] == "Cycle ID, month, and year are required"
        assert {e["field"] for e in body["errors"]} == {"month", "year"}

    def test_month_out_of_range(self, client, running_program):
        _, cycle = running_program

        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle["id"], "month": 13, "year": 2025})

        assert resp.status_code == 400
        assert resp.get_json()["errors"][0]["field"] == "month"

    def test_failed_fan_out_persists_nothing(self, client, cycle_with_lots, monkeypatch, count_rows):
        _, cycle, _ = cycle_with_lots

        def _half_then_fail(self, session, monthly_data_id, lot_ids):
            first = list(lot_ids)[0]
            session.add(Payment(monthly_data_id=monthly_data_id, lot_id=first, is_paid=False))
            session.flush()
            raise RuntimeError("fan-out interrupted")

        monkeypatch.setattr(PaymentRepository, "create_placeholders", _half_then_fail)
        resp = client.post(f"{API}/monthly-data", json={"cycleId": cycle["id"], "month": 6, "year": 2024})

        assert resp.status_code == 500
        assert count_rows(MonthlyData) == 0
        assert count_rows(Payment) == 0


class TestRecordMonthlyPayments:
    """Tests for POST /payments."""

    def test_marks_paid_with_date(self, client, cycle_with_lots, create_month):
        _, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])

        resp = client.post(
            f"{API}/payments",
            json={"monthlyDataId": bucket["id"], "payments": [{"lotId": lots[0]["id"], "isPaid": True}]},
        )
        data = resp.get_json()["data"]

        assert resp.status_code == 200
        assert data[0]["lotId"] == lots[0]["id"]
        assert data[0]["isPaid"] is True
        assert data[0]["paymentDate"] is not None

    def test_repeated_recording_updates_instead_of_duplicating(
        self, cycle_with_lots, create_month, record_payments, count_rows
    ):
        _, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])

        record_payments(bucket["id"], [(lots[0]["id"], True)])
        data = record_payments(bucket["id"], [(lots[0]["id"], False)])

        assert data[0]["isPaid"] is False
        assert data[0]["paymentDate"] is None
        assert count_rows(Payment, Payment.monthly_data_id == bucket["id"], Payment.lot_id == lots[0]["id"]) == 1

    def test_creates_missing_payment_row(self, client, cycle_with_lots, create_month, add_lot, create_user, count_rows):
        program, cycle, _ = cycle_with_lots
        bucket = create_month(cycle["id"])
        late = add_lot(program["id"], create_user()["id"])

        resp = client.post(
            f"{API}/payments",
            json={"monthlyDataId": bucket["id"], "payments": [{"lotId": late["id"], "isPaid": True}]},
        )

        assert resp.status_code == 200
        assert count_rows(Payment, Payment.monthly_data_id == bucket["id"]) == 4

    def test_batch_is_all_or_nothing(self, client, cycle_with_lots, create_month, count_rows):
        _, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])

        resp = client.post(
            f"{API}/payments",
            json={
                "monthlyDataId": bucket["id"],
                "payments": [{"lotId": lots[0]["id"], "isPaid": True}, {"lotId": 9999, "isPaid": True}],
            },
        )

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "One or more lots do not belong to this cycle"
        assert count_rows(Payment, Payment.is_paid.is_(True)) == 0

    def test_duplicate_lot_in_batch(self, client, cycle_with_lots, create_month):
        _, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])
        entry = {"lotId": lots[0]["id"], "isPaid": True}

        resp = client.post(f"{API}/payments", json={"monthlyDataId": bucket["id"], "payments": [entry, entry]})

        assert resp.status_code == 400

    def test_closed_cycle_rejects_payments(self, client, cycle_with_lots, create_month):
        program, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])
        client.post(f"{API}/programs/{program['id']}/end-cycle")

        resp = client.post(
            f"{API}/payments",
            json={"monthlyDataId": bucket["id"], "payments": [{"lotId": lots[0]["id"], "isPaid": True}]},
        )

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Cycle is not active"

    def test_unknown_bucket(self, client):
        resp = client.post(f"{API}/payments", json={"monthlyDataId": 5, "payments": [{"lotId": 1, "isPaid": True}]})

        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Monthly data not found"

    def test_lot_id_outside_key_range(self, client, cycle_with_lots, create_month, count_rows):
        _, cycle, _ = cycle_with_lots
        bucket = create_month(cycle["id"])

        resp = client.post(
            f"{API}/payments",
            json={"monthlyDataId": bucket["id"], "payments": [{"lotId": 10**20, "isPaid": True}]},
        )

        assert resp.status_code == 400
        assert resp.get_json()["errors"][0]["field"] == "payments"
        assert count_rows(Payment, Payment.is_paid.is_(True)) == 0


class TestMonthlyDataReads:
    """Tests for the monthly bucket read endpoints."""

    def test_cycle_buckets_latest_period_first(self, client, running_program, create_month):
        _, cycle = running_program
        create_month(cycle["id"], month=11, year=2024)
        create_month(cycle["id"], month=2, year=2025)
        create_month(cycle["id"], month=12, year=2024)

        data = client.get(f"{API}/cycles/{cycle['id']}/monthly-data").get_json()["data"]

        assert [(m["year"], m["month"]) for m in data["monthlyData"]] == [(2025, 2), (2024, 12), (2024, 11)]
        assert all(m["winnerCount"] == 0 for m in data["monthlyData"])
        assert data["pagination"]["totalCount"] == 3

    def test_bucket_details(self, client, cycle_with_lots, create_month, record_payments):
        program, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])
        record_payments(bucket["id"], [(lots[0]["id"], True)])

        data = client.get(f"{API}/monthly-data/{bucket['id']}").get_json()["data"]

        assert data["cycle"]["id"] == cycle["id"]
        assert data["cycle"]["program"] == {"id": program["id"], "name": program["name"]}
        assert data["winnerCount"] == 0
        assert data["paymentCount"] == 3
        assert data["paidCount"] == 1

    def test_payment_roster(self, client, cycle_with_lots, create_month):
        _, cycle, lots = cycle_with_lots
        bucket = create_month(cycle["id"])

        data = client.get(f"{API}/monthly-data/{bucket['id']}/payments").get_json()["data"]

        assert [p["lotId"] for p in data] == [lot["id"] for lot in lots]
        assert data[0]["lot"]["user"]["id"] == lots[0]["userId"]

    def test_unknown_bucket(self, client):
        assert client.get(f"{API}/monthly-data/8").status_code == 404
        assert client.get(f"{API}/monthly-data/8/payments").status_code == 404
        assert client.get(f"{API}/monthly-data/99999999999999999999").status_code == 404

    def test_unknown_cycle(self, client):
        assert client.get(f"{API}/cycles/8/monthly-data").status_code == 404
