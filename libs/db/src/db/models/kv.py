from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------
# Core: st_kv_entries
# ---------------------------


class KvEntry(Base):
    """One independently persisted state slice.

    ``value`` holds the slice serialized as text (JSON for structured slices,
    a bare string for scalar ones). The table carries no knowledge of slice
    shapes; typed access lives in ``spending_tracker.store``.
    """

    __tablename__ = "st_kv_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


__all__ = [
    "Base",
    "KvEntry",
]
