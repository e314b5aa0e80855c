"""Tests for the command-line interface."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from momo_press.cli import main


def run_cli(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["momo-press", *args])
    return main()


class TestCli:
    """Tests for the momo-press command."""

    def test_normalize_to_file(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        transactions_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test normalizing the sample export to a JSON file."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "out.json"

        code = run_cli(
            monkeypatch, str(transactions_file), "--year", "2025", "--month", "11",
            "-o", str(output), "--summary",
        )

        assert code == 0
        assert len(json.loads(output.read_text())) == 5
        err = capsys.readouterr().err
        assert "Found 5 transactions for 2025-11" in err
        assert "Balance:  5800" in err

    def test_search(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, transactions_file: Path
    ) -> None:
        """Test narrowing the output with --search."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "out.json"

        run_cli(
            monkeypatch, str(transactions_file), "--year", "2025", "--month", "11",
            "-o", str(output), "--search", "linda",
        )

        assert [tx["name"] for tx in json.loads(output.read_text())] == ["Linda Uwase"]

    def test_raw_categories(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, transactions_file: Path
    ) -> None:
        """Test --raw-categories keeps the TransactionType."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "out.json"

        run_cli(
            monkeypatch, str(transactions_file), "--year", "2025", "--month", "10",
            "-o", str(output), "--raw-categories",
        )

        (tx,) = json.loads(output.read_text())
        assert tx["category"] == "Bills"
        assert tx["icon"] is None

    @pytest.mark.parametrize("args", [[], ["--year", "2025"], ["--year", "2025", "--month", "13"]])
    def test_invalid_period(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        transactions_file: Path,
        capsys: pytest.CaptureFixture[str],
        args: list[str],
    ) -> None:
        """Test that a missing or bad period exits with an error."""
        monkeypatch.chdir(tmp_path)

        assert run_cli(monkeypatch, str(transactions_file), *args) == 1
        assert "Invalid year or month" in capsys.readouterr().err

    def test_missing_source(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test the default source path when it does not exist."""
        monkeypatch.chdir(tmp_path)

        assert run_cli(monkeypatch, "--year", "2025", "--month", "11") == 1
        assert "File not found" in capsys.readouterr().err

    def test_source_from_config(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, transactions_file: Path
    ) -> None:
        """Test source and output taken from config.json in the current directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.json").write_text(json.dumps({
            "source": str(transactions_file),
            "output": "generated.json",
        }))

        assert run_cli(monkeypatch, "--year", "2024", "--month", "7") == 0

        (tx,) = json.loads((tmp_path / "generated.json").read_text())
        assert tx["amount"] == -2500

    def test_init_and_show_config(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test writing a default config and printing it back."""
        monkeypatch.chdir(tmp_path)
        config_path = tmp_path / "config.json"

        assert run_cli(monkeypatch, "--init-config", "--config", str(config_path)) == 0
        capsys.readouterr()

        assert run_cli(monkeypatch, "--show-config") == 0
        shown = json.loads(capsys.readouterr().out)
        assert shown["server"]["port"] == 3000

    def test_remote(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test fetching from a running backend."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "remote.json"
        records = [{"id": "MPR202511030007", "amount": 5000}]

        with patch(
            "momo_press.client.MoMoPressClient.update_transactions", return_value=records
        ) as mock:
            code = run_cli(
                monkeypatch, "--remote", "http://localhost:3000",
                "--year", "2025", "--month", "11", "-o", str(output),
            )

        assert code == 0
        mock.assert_called_once_with(2025, 11)
        assert json.loads(output.read_text()) == records

    def test_remote_unwritable_output(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that a remote fetch into a missing directory reports an error."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "missing" / "remote.json"

        with patch(
            "momo_press.client.MoMoPressClient.update_transactions", return_value=[]
        ):
            code = run_cli(
                monkeypatch, "--remote", "http://localhost:3000",
                "--year", "2025", "--month", "11", "-o", str(output),
            )

        assert code == 1
        assert "Could not write" in capsys.readouterr().err
