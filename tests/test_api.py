from __future__ import annotations

import io
from decimal import Decimal
from pathlib import Path

import pytest

from spending_tracker import api
from spending_tracker.errors import EmptyOrUnreadableFile, InvalidAmount, ParseError
from spending_tracker.store import TrackerStore
from tests.helpers.csv_files import BAD_AMOUNT_CSV, BANK_CSV, HEADER, write_csv


def _import_bank(tmp_path: Path, store: TrackerStore, name: str = "bank.csv"):
    return api.import_file(write_csv(tmp_path, name, BANK_CSV), store=store)


def test_import_merges_transactions_and_review_queue(tmp_path, store):
    summary = _import_bank(tmp_path, store)

    assert (summary.appended, summary.flagged_for_review, summary.ignored) == (3, 1, 2)
    assert not summary.reexport

    txs = store.load_transactions()
    assert [tx.category for tx in txs] == ["Takeout", "Needs Review", "Refunds"]
    assert [tx.id for tx in txs] == list(summary.transaction_ids)

    (pending,) = api.pending_reviews(store=store)
    assert pending.id == txs[1].id
    assert pending.category == "Uncategorized"


def test_second_import_appends_after_the_first(tmp_path, store):
    _import_bank(tmp_path, store, "march.csv")
    _import_bank(tmp_path, store, "march-again.csv")

    assert len(store.load_transactions()) == 6
    assert len(store.load_review_queue()) == 2


def test_resolve_review_uses_catalog_spelling_and_updates_main_list(tmp_path, store):
    _import_bank(tmp_path, store)
    (pending,) = api.pending_reviews(store=store)

    resolved = api.resolve_review(pending.id, "  groceries ", store=store)

    assert resolved is not None and resolved.category == "Groceries"
    assert api.pending_reviews(store=store) == []
    by_id = {tx.id: tx for tx in store.load_transactions()}
    assert by_id[pending.id].category == "Groceries"
    assert api.resolve_review(pending.id, "Dates", store=store) is None


def test_skip_review_rotates_queue(tmp_path, store):
    _import_bank(tmp_path, store, "a.csv")
    _import_bank(tmp_path, store, "b.csv")
    first, second = api.pending_reviews(store=store)

    assert api.skip_review(first.id, store=store)
    assert [e.id for e in api.pending_reviews(store=store)] == [second.id, first.id]
    assert not api.skip_review("unknown", store=store)


def test_invalid_amount_leaves_state_untouched(tmp_path, store):
    _import_bank(tmp_path, store)
    before_txs = store.load_transactions()
    before_queue = store.load_review_queue()

    with pytest.raises(InvalidAmount):
        api.import_file(write_csv(tmp_path, "bad.csv", BAD_AMOUNT_CSV), store=store)

    assert store.load_transactions() == before_txs
    assert store.load_review_queue() == before_queue


@pytest.mark.parametrize(
    ("text", "error"),
    [
        ("Date,Description,Amount\n2024-03-01,x,-1\n", ParseError),
        (HEADER + "\n", EmptyOrUnreadableFile),
        ("", EmptyOrUnreadableFile),
    ],
)
def test_unparseable_files_raise_without_writing(tmp_path, store, text, error):
    with pytest.raises(error):
        api.import_file(write_csv(tmp_path, "bank.csv", text), store=store)

    assert store.keys() == []


def test_reimporting_an_export_flags_nothing_and_keeps_categories(tmp_path, store):
    _import_bank(tmp_path, store)
    (pending,) = api.pending_reviews(store=store)
    api.resolve_review(pending.id, "Life & Extras", store=store)

    out_dir = tmp_path / "exports"
    out_dir.mkdir()
    path, count = api.export_to(out_dir, store=store)
    assert count == 3
    assert Path(path).parent == out_dir
    assert Path(path).name.startswith("exported-transactions-")

    api.clear_all(store=store)
    summary = api.import_file(path, store=store)
    again = api.import_file(path, store=store)

    assert summary.reexport and again.reexport
    assert summary.flagged_for_review == again.flagged_for_review == 0
    cats = [tx.category for tx in store.load_transactions()]
    assert cats == ["Takeout", "Life & Extras", "Refunds"] * 2
    assert api.pending_reviews(store=store) == []


def test_provenance_from_stream_hint_and_explicit_override(store):
    text = HEADER + "\n2024-03-06,PAYPAL *SELLER,-40.00,Merchandise,\n"

    hinted = api.import_file(io.StringIO(text), "exported-mine.csv", store=store)
    forced = api.import_file(io.StringIO(text), "exported-mine.csv", store=store, reexport=False)

    assert hinted.reexport and hinted.flagged_for_review == 0
    assert not forced.reexport and forced.flagged_for_review == 1


def test_export_to_default_path_in_cwd(tmp_path, store):
    _import_bank(tmp_path, store)

    path, count = api.export_to(store=store)

    assert count == 3
    assert Path(path).parent == Path.cwd()
    assert Path(path).read_text(encoding="utf-8").startswith("Authorized Date,")


def test_budgets_income_and_clear(store):
    assert api.set_category_budget("groceries", "250", store=store) == Decimal("250.00")
    assert api.set_category_budget("Takeout", "lots", store=store) == 0
    api.set_monthly_income("4200", store=store)

    assert store.load_budgets() == {"Groceries": Decimal("250.00"), "Takeout": Decimal("0")}
    assert store.load_monthly_income() == "4200"

    api.clear_all(store=store)
    assert store.keys() == []


def test_ensure_catalog_mirrors_defaults_once(store):
    api.ensure_catalog(store=store)

    assert store.keys() == ["categories"]
    assert [c.name for c in store.load_categories()][0] == "Investments"


def test_monthly_totals_reads_store(tmp_path, store):
    _import_bank(tmp_path, store)

    totals = api.monthly_totals("2024-03", store=store)

    assert totals.income == Decimal("15.25")
    assert totals.expense == Decimal("52.50")


def test_update_transaction_replaces_by_id(tmp_path, store):
    _import_bank(tmp_path, store)
    first = store.load_transactions()[0]

    assert api.update_transaction(first.with_category("Dates"), store=store)
    assert store.load_transactions()[0].category == "Dates"
    assert not api.update_transaction(first.model_copy(update={"id": "nope"}), store=store)


def test_clearing_transactions_also_clears_review_queue(tmp_path, store):
    _import_bank(tmp_path, store)
    api.set_monthly_income("4200", store=store)

    api.clear_all(store=store, keys=["transactions"])

    assert store.load_transactions() == []
    assert api.pending_reviews(store=store) == []
    assert store.load_monthly_income() == "4200"


def test_import_with_oversized_amount_is_rejected_cleanly(tmp_path, store):
    text = HEADER + "\n2024-03-06,Lottery,1e30,,\n"

    with pytest.raises(InvalidAmount):
        api.import_file(write_csv(tmp_path, "bank.csv", text), store=store)

    assert store.keys() == []


def test_oversized_budget_is_stored_as_zero(store):
    assert api.set_category_budget("Groceries", "1e30", store=store) == 0
    assert store.load_budgets() == {"Groceries": Decimal("0")}
