"""File ingestion helpers (CSV reading and provenance detection)."""

from .csv_reader import REEXPORT_PREFIX, is_reexport_filename, read_rows, read_rows_from_stream

__all__ = ["REEXPORT_PREFIX", "is_reexport_filename", "read_rows", "read_rows_from_stream"]
