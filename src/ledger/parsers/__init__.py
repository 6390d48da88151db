"""CSV readers for transaction imports."""

from ledger.parsers.csv_rows import iter_csv_rows, read_candidates

__all__ = ["iter_csv_rows", "read_candidates"]
