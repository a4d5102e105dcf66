from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from typer.testing import CliRunner

from spending_tracker.cli import app
from spending_tracker.store import TrackerStore
from tests.helpers.csv_files import BAD_AMOUNT_CSV, BANK_CSV, write_csv

runner = CliRunner()


def test_import_pending_resolve_flow(tmp_path, store: TrackerStore):
    csv_path = write_csv(tmp_path, "bank.csv", BANK_CSV)

    result = runner.invoke(app, ["import", "--csv-path", str(csv_path)])
    assert result.exit_code == 0, result.output
    assert "3 appended, 1 flagged for review, 2 ignored" in result.output

    result = runner.invoke(app, ["pending"])
    assert result.exit_code == 0
    assert "Pending review (1)" in result.output

    (pending,) = store.load_review_queue()
    result = runner.invoke(app, ["resolve", "--id", pending.id, "--category", "dates"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().endswith("Dates")
    assert store.load_review_queue() == []


def test_import_invalid_amount_reports_error_and_changes_nothing(tmp_path, store):
    csv_path = write_csv(tmp_path, "bad.csv", BAD_AMOUNT_CSV)

    result = runner.invoke(app, ["import", "--csv-path", str(csv_path)])

    assert result.exit_code == 1
    assert "Error: Import aborted" in result.output
    assert store.load_transactions() == []


def test_import_missing_file_is_an_error(tmp_path):
    result = runner.invoke(app, ["import", "--csv-path", str(tmp_path / "nope.csv")])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_resolve_unknown_id_fails():
    result = runner.invoke(app, ["resolve", "--id", "nope", "--category", "Dates"])

    assert result.exit_code == 1


def test_export_then_reimport_via_cli(tmp_path, store):
    runner.invoke(app, ["import", "--csv-path", str(write_csv(tmp_path, "bank.csv", BANK_CSV))])
    out_file = tmp_path / "exported-manual.csv"

    result = runner.invoke(app, ["export", "--output", str(out_file)])
    assert result.exit_code == 0, result.output
    assert "Exported 3 transaction(s)" in result.output

    result = runner.invoke(app, ["import", "--csv-path", str(out_file)])
    assert result.exit_code == 0, result.output
    assert "3 appended, 0 flagged for review, 0 ignored (re-export)" in result.output
    assert len(store.load_transactions()) == 6


def test_budget_income_and_report(tmp_path, store):
    runner.invoke(app, ["import", "--csv-path", str(write_csv(tmp_path, "bank.csv", BANK_CSV))])

    result = runner.invoke(app, ["budget", "set", "--category", "takeout", "--amount", "100"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["income", "set", "--amount", "3000"])
    assert result.exit_code == 0, result.output
    assert store.load_budgets() == {"Takeout": Decimal("100.00")}

    result = runner.invoke(app, ["report", "--month", "2024-03"])
    assert result.exit_code == 0, result.output
    assert "Summary for 2024-03" in result.output
    assert "52.50" in result.output
    assert "unallocated" in result.output


def test_report_rejects_bad_month():
    result = runner.invoke(app, ["report", "--month", "2024-13"])

    assert result.exit_code == 1


def test_clear_requires_confirmation(tmp_path, store):
    runner.invoke(app, ["import", "--csv-path", str(write_csv(tmp_path, "bank.csv", BANK_CSV))])

    assert runner.invoke(app, ["clear"]).exit_code == 1
    assert store.load_transactions() != []

    result = runner.invoke(app, ["clear", "--yes"])
    assert result.exit_code == 0
    assert store.keys() == []


def test_global_database_url_option(tmp_path):
    other = tmp_path / "other.db"
    url = f"sqlite+pysqlite:///{other}"
    csv_path = write_csv(tmp_path, "bank.csv", BANK_CSV)

    result = runner.invoke(app, ["--database-url", url, "import", "--csv-path", str(csv_path)])

    assert result.exit_code == 0, result.output
    assert Path(other).exists()
    assert len(TrackerStore(database_url=url).load_transactions()) == 3


def test_oversized_amounts_report_errors_instead_of_crashing(tmp_path, store):
    csv_path = write_csv(
        tmp_path,
        "bank.csv",
        "Authorized Date,Description,Amount\n2024-03-06,Lottery," + "9" * 29 + "\n",
    )

    result = runner.invoke(app, ["import", "--csv-path", str(csv_path)])
    assert result.exit_code == 1
    assert "Error: Import aborted" in result.output

    result = runner.invoke(app, ["budget", "set", "--category", "Dates", "--amount", "1e30"])
    assert result.exit_code == 0, result.output
    assert store.load_budgets() == {"Dates": Decimal("0")}
