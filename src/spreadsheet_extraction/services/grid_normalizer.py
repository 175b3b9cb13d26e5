"""Grid normalization and header inference."""

from __future__ import annotations

import re
from collections.abc import Sequence

from spreadsheet_extraction.workbook import Row, Sheet

ALPHA_PATTERN = re.compile(r"[A-Za-z]")
NUMERIC_PATTERN = re.compile(r"-?\d+(\.\d+)?")


def is_numeric_text(value: str) -> bool:
    """True for a pure integer or decimal, e.g. ``42``, ``-3.5``."""
    return NUMERIC_PATTERN.fullmatch(value) is not None


def pad_rows(rows: Sequence[Sequence[str]]) -> tuple[list[Row], int]:
    """Right-pad every row with "" to the widest row's length.

    Returns:
        The padded copies and the column count.
    """
    column_count = max((len(row) for row in rows), default=0)
    padded = [list(row) + [""] * (column_count - len(row)) for row in rows]
    return padded, column_count


def infer_headers(rows: Sequence[Sequence[str]]) -> list[str]:
    """Return row 0 as headers when it looks like a header row, else [].

    Row 0 counts as a header row only when there are at least two rows, some
    row-0 cell contains a letter, and some row-1 cell is a plain number. An
    all-numeric first row or an all-text second row never qualifies.
    """
    if len(rows) < 2:
        return []
    first, second = rows[0], rows[1]
    if not any(ALPHA_PATTERN.search(cell) for cell in first):
        return []
    if not any(is_numeric_text(cell) for cell in second):
        return []
    return list(first)


def normalize_sheet(name: str, rows: Sequence[Sequence[str]]) -> Sheet:
    """Build a rectangular Sheet from decoded rows."""
    grid, column_count = pad_rows(rows)
    headers = infer_headers(grid)
    return Sheet(
        name=name,
        grid=grid,
        column_count=column_count,
        headers=headers,
        has_headers=bool(headers),
    )
