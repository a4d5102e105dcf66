from __future__ import annotations

from decimal import Decimal

from spending_tracker.models import Transaction
from spending_tracker.review import ReviewQueue


def _tx(tx_id: str, category: str = "Uncategorized") -> Transaction:
    return Transaction(
        id=tx_id,
        date="2024-03-06",
        description=f"PAYPAL {tx_id}",
        amount=Decimal("10"),
        type="expense",
        category=category,
    )


def test_enqueue_preserves_order_and_skips_duplicate_ids():
    q = ReviewQueue([_tx("a"), _tx("b")])

    added = q.enqueue([_tx("b"), _tx("c")])

    assert added == 1
    assert [e.id for e in q] == ["a", "b", "c"]
    assert q.current().id == "a"
    assert "c" in q and "z" not in q


def test_resolve_updates_main_collection_in_place_by_id():
    main = [_tx("x", "Takeout"), _tx("a", "Needs Review"), _tx("b", "Needs Review")]
    q = ReviewQueue([_tx("a"), _tx("b")])

    resolved = q.resolve("b", "Groceries", main)

    assert resolved is not None and resolved.category == "Groceries"
    assert [tx.category for tx in main] == ["Takeout", "Needs Review", "Groceries"]
    assert [e.id for e in q] == ["a"]


def test_resolve_unknown_or_repeated_id_is_a_noop():
    main = [_tx("a", "Needs Review")]
    q = ReviewQueue([_tx("a")])

    assert q.resolve("missing", "Dates", main) is None
    assert q.resolve("a", "Dates", main) is not None
    assert q.resolve("a", "Family", main) is None
    assert main[0].category == "Dates"
    assert len(q) == 0


def test_resolve_appends_when_main_collection_lacks_the_id():
    main: list[Transaction] = []
    q = ReviewQueue([_tx("orphan")])

    q.resolve("orphan", "Hobbies", main)

    assert [(tx.id, tx.category) for tx in main] == [("orphan", "Hobbies")]


def test_skip_moves_entry_to_tail():
    q = ReviewQueue([_tx("a"), _tx("b"), _tx("c")])

    assert q.skip("a")
    assert not q.skip("nope")
    assert [e.id for e in q.entries()] == ["b", "c", "a"]


def test_current_on_empty_queue_is_none():
    assert ReviewQueue().current() is None
