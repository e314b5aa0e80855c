"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from any real config.json."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def transactions_file(fixtures_dir: Path) -> Path:
    """Return path to the sample MoMo export."""
    return fixtures_dir / "transactions.json"


@pytest.fixture
def raw_records(transactions_file: Path) -> list[dict[str, Any]]:
    """Return the sample export as a list of dicts."""
    return json.loads(transactions_file.read_text())  # type: ignore[no-any-return]


@pytest.fixture
def deposit_record() -> dict[str, Any]:
    """Return a confirmed incoming deposit."""
    return {
        "TransactionID": 7,
        "DateTime": "2025-11-03 10:15 AM",
        "Amount": 5000,
        "TransactionType": "Deposit",
        "MessageText": "You have received 5000 RWF",
        "Status": "confirmed",
        "Participants": [{"Name": "John", "PhoneNumber": "0788111222"}],
    }
