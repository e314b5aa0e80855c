"""Tests for the HTTP backend."""

import json
import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from momo_press.server import create_app


@pytest.fixture
def workdir(tmp_path: Path, transactions_file: Path) -> Path:
    """Return a directory holding a copy of the sample export."""
    shutil.copy(transactions_file, tmp_path / "transactions.json")
    return tmp_path


@pytest.fixture
def client(workdir: Path) -> TestClient:
    """Return a test client wired to the sample export."""
    config = {
        "source": str(workdir / "transactions.json"),
        "output": str(workdir / "database.json"),
    }
    return TestClient(create_app(config))


class TestUpdateTransactions:
    """Tests for GET /api/updateTransactions."""

    def test_success(self, client: TestClient, workdir: Path) -> None:
        """Test a valid month returns and writes the normalized records."""
        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [tx["id"] for tx in body["transactions"]] == [
            "MPR202511030007",
            "MPR202511040008",
            "MPR202511050009",
            "MPR202511060010",
            "MPR202511070011",
        ]

        written = json.loads((workdir / "database.json").read_text())
        assert written == body["transactions"]

    def test_empty_month(self, client: TestClient) -> None:
        """Test a month with no records."""
        response = client.get("/api/updateTransactions", params={"year": 2023, "month": 1})

        assert response.status_code == 200
        assert response.json() == {"success": True, "transactions": []}

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"year": 2025},
            {"month": 11},
            {"year": "abc", "month": 11},
            {"year": 2025, "month": 0},
            {"year": 2025, "month": 13},
            {"year": 0, "month": 5},
        ],
    )
    def test_invalid_period(self, client: TestClient, params: dict[str, object]) -> None:
        """Test bad filters are rejected with 400."""
        response = client.get("/api/updateTransactions", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid year or month"}

    def test_missing_source(self, tmp_path: Path) -> None:
        """Test an unreadable export gives a 500 with the error message."""
        client = TestClient(create_app({"source": str(tmp_path / "missing.json")}))

        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        assert response.status_code == 500
        assert "File not found" in response.json()["error"]

    def test_malformed_record(self, tmp_path: Path) -> None:
        """Test a record missing Amount fails the whole request."""
        source = tmp_path / "transactions.json"
        source.write_text(json.dumps([
            {"TransactionID": 1, "DateTime": "2025-11-01 09:00 AM",
             "TransactionType": "Deposit", "Status": "confirmed"},
        ]))
        client = TestClient(create_app({"source": str(source)}, write_output=False))

        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        assert response.status_code == 500
        assert "Amount" in response.json()["error"]

    def test_infinite_amount(self, tmp_path: Path) -> None:
        """Test an Infinity amount is reported as a malformed record."""
        source = tmp_path / "transactions.json"
        source.write_text(json.dumps([
            {"TransactionID": 1, "DateTime": "2025-11-01 09:00 AM", "Amount": float("inf"),
             "TransactionType": "Deposit", "Status": "confirmed"},
        ]))
        client = TestClient(create_app({"source": str(source)}, write_output=False))

        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        assert response.status_code == 500
        assert "non-finite" in response.json()["error"]

    def test_no_output_written(self, workdir: Path) -> None:
        """Test that write_output=False leaves no artifact behind."""
        client = TestClient(create_app(
            {"source": str(workdir / "transactions.json"), "output": str(workdir / "db.json")},
            write_output=False,
        ))

        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        assert response.status_code == 200
        assert not (workdir / "db.json").exists()

    def test_rules_from_config(self, workdir: Path) -> None:
        """Test that config rules change the inferred signs."""
        client = TestClient(create_app(
            {
                "source": str(workdir / "transactions.json"),
                "rules": {"name_rules": []},
            },
            write_output=False,
        ))

        response = client.get("/api/updateTransactions", params={"year": 2025, "month": 11})

        linda = response.json()["transactions"][3]
        assert linda["name"] == "Linda Uwase"
        assert linda["amount"] == 3000


class TestHealth:
    """Tests for the health endpoint and middleware."""

    def test_healthz(self, client: TestClient) -> None:
        """Test the health check."""
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_request_id_echoed(self, client: TestClient) -> None:
        """Test the request id header is passed back."""
        response = client.get("/healthz", headers={"x-request-id": "req-123"})

        assert response.headers["x-request-id"] == "req-123"
