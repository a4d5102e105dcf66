"""Review queue: transactions waiting for a manual category.

The queue and the main transaction collection are separate pieces of state.
They are reconciled only by :meth:`ReviewQueue.resolve`, which removes the
queue entry and finalizes the category of the main-collection transaction
with the same ``id`` in one step. Lookups are always by ``id``, never by
position.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableSequence

from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("spending_tracker.review")


class ReviewQueue:
    """FIFO-by-insertion queue of transactions pending categorization."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Transaction] = ()) -> None:
        self._entries: list[Transaction] = []
        self.enqueue(entries)

    # -- inspection ---------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._entries))

    def __contains__(self, tx_id: object) -> bool:
        return any(e.id == tx_id for e in self._entries)

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"ReviewQueue(pending={len(self._entries)})"

    def entries(self) -> list[Transaction]:
        """Return a snapshot of the pending entries in serving order."""

        return list(self._entries)

    def current(self) -> Transaction | None:
        """Return the entry to present next, or ``None`` when the queue is empty."""

        return self._entries[0] if self._entries else None

    def get(self, tx_id: str) -> Transaction | None:
        for e in self._entries:
            if e.id == tx_id:
                return e
        return None

    # -- mutation -----------------------------------------------------------

    def enqueue(self, transactions: Iterable[Transaction]) -> int:
        """Append entries at the tail, preserving order; returns how many were added.

        Ids already pending are not queued twice.
        """

        seen = {e.id for e in self._entries}
        added = 0
        for tx in transactions:
            if tx.id in seen:
                continue
            self._entries.append(tx)
            seen.add(tx.id)
            added += 1
        return added

    def skip(self, tx_id: str) -> bool:
        """Move an entry to the tail without finalizing it.

        Returns False (and does nothing) when ``tx_id`` is not pending.
        """

        for pos, e in enumerate(self._entries):
            if e.id == tx_id:
                self._entries.append(self._entries.pop(pos))
                return True
        return False

    def resolve(
        self,
        tx_id: str,
        category: str,
        transactions: MutableSequence[Transaction],
    ) -> Transaction | None:
        """Finalize ``tx_id`` with ``category`` and drop it from the queue.

        ``transactions`` is the main collection and is updated in place: the
        transaction with the same id gets ``category``. If the main collection
        has no such id, the resolved entry is appended to it.

        Returns the finalized transaction, or ``None`` when ``tx_id`` is not
        pending (resolving twice is a no-op).
        """

        entry = self.get(tx_id)
        if entry is None:
            _logger.debug("resolve ignored: %s is not pending review", tx_id)
            return None

        resolved: Transaction | None = None
        for pos, tx in enumerate(transactions):
            if tx.id == tx_id:
                resolved = tx.with_category(category)
                transactions[pos] = resolved
                break
        if resolved is None:
            _logger.warning("review entry %s missing from transactions; appending it", tx_id)
            resolved = entry.with_category(category)
            transactions.append(resolved)

        self._entries = [e for e in self._entries if e.id != tx_id]
        return resolved


__all__ = ["ReviewQueue"]
