from __future__ import annotations

import io
from datetime import date
from decimal import Decimal

from spending_tracker.export import export_filename, export_transactions, write_transactions
from spending_tracker.ingest import is_reexport_filename, read_rows
from spending_tracker.models import Transaction
from spending_tracker.pipeline import ingest_rows


def _txs() -> list[Transaction]:
    return [
        Transaction(
            id="1",
            date="2024-03-05",
            description="CHIPOTLE, DOWNTOWN",
            amount=Decimal("12.5"),
            type="expense",
            category="Takeout",
        ),
        Transaction(
            id="2",
            date="2024-03-09",
            description="Store credit refund",
            amount=Decimal("15.25"),
            type="income",
            category="Refunds",
        ),
    ]


def test_export_filename_is_recognized_as_reexport():
    name = export_filename(date(2024, 3, 5))

    assert name == "exported-transactions-2024-03-05.csv"
    assert is_reexport_filename(name)


def test_write_transactions_format():
    buf = io.StringIO()

    count = write_transactions(_txs(), buf)

    assert count == 2
    assert buf.getvalue() == (
        "Authorized Date,Description,Amount,Detailed Category\n"
        '2024-03-05,"CHIPOTLE, DOWNTOWN",-12.50,Takeout\n'
        "2024-03-09,Store credit refund,15.25,Refunds\n"
    )


def test_exported_file_reimports_with_same_categories_and_types(tmp_path):
    path = tmp_path / export_filename(date(2024, 3, 31))
    export_transactions(_txs(), path)

    result = ingest_rows(read_rows(path), is_reexport=is_reexport_filename(path))

    assert result.needs_review == ()
    assert [(tx.description, tx.type, tx.amount, tx.category) for tx in result.clean] == [
        ("CHIPOTLE, DOWNTOWN", "expense", Decimal("12.50"), "Takeout"),
        ("Store credit refund", "income", Decimal("15.25"), "Refunds"),
    ]
