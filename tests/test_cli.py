"""Tests for the offline CLI commands."""

import copy
import json
import logging

import pytest
from click.testing import CliRunner

from ledger_recon import cli
from ledger_recon.cli import _parse_indices, main
from ledger_recon.samples import SAMPLE_CLASSIFICATION
from ledger_recon.utils.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI attaches handlers to streams that the runner closes afterwards."""
    yield
    logging.getLogger(LOGGER_NAME).handlers = []


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def result_file(tmp_path):
    path = tmp_path / "result.json"
    path.write_text(json.dumps(SAMPLE_CLASSIFICATION), encoding="utf-8")
    return path


class TestReportCommand:
    """Tests for reviewing and exporting a saved classification."""

    def test_dashboard_and_exports(self, runner, result_file, tmp_path):
        # Arrange
        out = tmp_path / "out"

        # Act
        result = runner.invoke(
            main,
            [
                "report",
                str(result_file),
                "--company",
                "Acme Corp",
                "-o",
                str(out),
                "-f",
                "csv",
                "-f",
                "pdf",
                "-f",
                "xlsx",
                "--bank-items",
                "0",
                "--mark",
                "investigating",
                "--only-selected",
            ],
        )

        # Assert
        assert result.exit_code == 0, result.output
        assert "Reconciliation Summary" in result.output
        assert sorted(p.suffix for p in out.iterdir()) == [".csv", ".pdf", ".xlsx"]
        assert all(p.name.startswith("acme_corp_reconciliation_report_") for p in out.iterdir())

    def test_no_format_writes_nothing(self, runner, result_file, tmp_path):
        result = runner.invoke(main, ["report", str(result_file), "-o", str(tmp_path / "out")])

        assert result.exit_code == 0, result.output
        assert not (tmp_path / "out").exists()

    def test_bad_index_list(self, runner, result_file):
        result = runner.invoke(main, ["report", str(result_file), "--bank-items", "1,x"])

        assert result.exit_code == 2
        assert "Not an item index" in result.output

    def test_bracketed_text_is_shown_literally(self, runner, tmp_path, monkeypatch):
        # Arrange
        monkeypatch.setattr(cli.console, "width", 200)
        payload = copy.deepcopy(SAMPLE_CLASSIFICATION)
        payload["unmatchedBankTransactions"][0]["description"] = "TRF [/REF] 99"
        payload["unmatchedLedgerEntries"][0]["description"] = "Payment [bold]ACME"
        path = tmp_path / "result.json"
        path.write_text(json.dumps(payload), encoding="utf-8")

        # Act
        result = runner.invoke(main, ["report", str(path), "--company", "[red]Acme"])

        # Assert
        assert result.exit_code == 0, result.output
        assert "TRF [/REF] 99" in result.output
        assert "Payment [bold]ACME" in result.output
        assert "[red]Acme" in result.output

    def test_unreadable_result_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(main, ["report", str(path)])

        assert result.exit_code == 1


class TestUtilityCommands:
    def test_sample_data(self, runner, tmp_path):
        result = runner.invoke(main, ["sample-data", "-o", str(tmp_path / "samples")])

        assert result.exit_code == 0, result.output
        assert len(list((tmp_path / "samples").iterdir())) == 3

    def test_init_config(self, runner, tmp_path):
        path = tmp_path / "config.yaml"

        result = runner.invoke(main, ["init-config", "-o", str(path)])

        assert result.exit_code == 0, result.output
        assert "currency_label: GHS" in path.read_text()

    def test_reconcile_without_api_key_fails_cleanly(self, runner, tmp_path, monkeypatch):
        # Arrange
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        runner.invoke(main, ["sample-data", "-o", str(tmp_path)])

        # Act
        result = runner.invoke(
            main,
            [
                "reconcile",
                str(tmp_path / "Sample_Bank_Statement.pdf"),
                str(tmp_path / "Sample_General_Ledger.csv"),
                "--as-at",
                "2024-03-31",
            ],
        )

        # Assert
        assert result.exit_code == 1
        assert "GEMINI_API_KEY" in result.output


def test_parse_indices():
    assert _parse_indices("") == []
    assert _parse_indices("0, 2,,5") == [0, 2, 5]
