"""Shared SQLAlchemy models registry for the local tracker database.

Currently includes the key-value slice table used by ``spending_tracker``.
"""

from .kv import Base, KvEntry

__all__ = [
    "Base",
    "KvEntry",
]
