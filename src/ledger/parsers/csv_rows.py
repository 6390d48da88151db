"""Row producer for transaction CSV files.

The first line is a header and is always skipped. Every following line is
yielded as ``[title, type, value, category]`` with each cell trimmed. Short
rows are padded with empty strings; extra trailing cells are dropped.
"""

import csv
import logging
from os import PathLike
from typing import Iterator

from ledger.schemas.internal import CSVTransaction

logger = logging.getLogger(__name__)

ROW_WIDTH = 4


def iter_csv_rows(path: str | PathLike, encoding: str = "utf-8") -> Iterator[list[str]]:
    """Lazily yield trimmed rows from ``path`` in file order, header skipped.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, newline="", encoding=encoding) as handle:
        reader = csv.reader(handle)
        next(reader, None)
        for row in reader:
            cells = [cell.strip() for cell in row[:ROW_WIDTH]]
            cells.extend([""] * (ROW_WIDTH - len(cells)))
            yield cells


def read_candidates(path: str | PathLike, encoding: str = "utf-8") -> list[CSVTransaction]:
    """Read every row of ``path`` into transaction candidates.

    Rows whose title, type or value is empty are dropped without error.
    """
    candidates: list[CSVTransaction] = []
    dropped = 0

    for title, type_, value, category in iter_csv_rows(path, encoding=encoding):
        if not title or not type_ or not value:
            dropped += 1
            continue
        candidates.append(
            CSVTransaction(title=title, type=type_, value=value, category=category)
        )

    logger.debug(
        "CSV rows read", extra={"kept_rows": len(candidates), "dropped_rows": dropped}
    )
    return candidates
