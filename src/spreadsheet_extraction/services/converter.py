"""Format conversion for normalized grids.

Delimited text uses the :mod:`csv` module's quoting: fields holding the
delimiter, a quote, or a line break are wrapped in double quotes with inner
quotes doubled, so ``parse_delimited(to_delimited(grid, d), d) == grid``.
"""

from __future__ import annotations

import csv
import io
import json
import sys
from collections.abc import Iterable, Sequence
from typing import Any

import pandas as pd

from spreadsheet_extraction.utils.exceptions import (
    DelimitedParseError,
    SheetNotFoundError,
    UnsupportedConversionError,
)
from spreadsheet_extraction.workbook import Row, Sheet, Workbook

COMMA = ","
TAB = "\t"
SUPPORTED_DELIMITERS = (COMMA, TAB)

# The csv default of 131072 characters per field is below the upload limit
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))

Record = dict[str, str]


def _check_delimiter(delimiter: str) -> None:
    if delimiter not in SUPPORTED_DELIMITERS:
        raise UnsupportedConversionError(
            repr(delimiter), supported=[repr(d) for d in SUPPORTED_DELIMITERS]
        )


def _line_terminator(values: Iterable[str]) -> str:
    # A bare "\r" inside a field is only quoted when it is part of the terminator
    return "\r\n" if any("\r" in value for value in values) else "\n"


def parse_delimited(text: str, delimiter: str = COMMA) -> list[Row]:
    """Parse delimited text into rows of strings.

    Args:
        text: Delimited text.
        delimiter: Field delimiter (comma or tab).

    Returns:
        One list per record; a blank line gives an empty list.

    Raises:
        DelimitedParseError: If the csv module rejects the text.
    """
    _check_delimiter(delimiter)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        return [list(row) for row in reader]
    except csv.Error as e:
        raise DelimitedParseError(str(e), line=reader.line_num) from e


def to_delimited(source: Sheet | Sequence[Sequence[str]], delimiter: str = COMMA) -> str:
    """Serialize a sheet (or plain rows) as delimited text.

    Args:
        source: A Sheet or a sequence of rows.
        delimiter: Field delimiter (comma or tab).

    Returns:
        Delimited text, one line per row, each line terminated.
    """
    _check_delimiter(delimiter)
    rows = source.grid if isinstance(source, Sheet) else source
    terminator = _line_terminator(cell for row in rows for cell in row)

    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator=terminator)
    writer.writerows(rows)
    return buffer.getvalue()


def transcode(text: str, from_delimiter: str, to_delimiter: str) -> str:
    """Re-emit delimited text with a different delimiter.

    Quoting is re-applied for the target delimiter. The result ends with a
    line break only if the input did.
    """
    _check_delimiter(from_delimiter)
    _check_delimiter(to_delimiter)
    if not text:
        return ""

    rows = parse_delimited(text, from_delimiter)
    terminator = _line_terminator([text])
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, delimiter=to_delimiter, lineterminator=terminator)
    writer.writerows(rows)
    output = buffer.getvalue()

    if not text.endswith(("\n", "\r")) and output.endswith(terminator):
        output = output[: -len(terminator)]
    return output


def csv_to_tsv(text: str) -> str:
    return transcode(text, COMMA, TAB)


def tsv_to_csv(text: str) -> str:
    return transcode(text, TAB, COMMA)


def find_sheet(workbook: Workbook, sheet_name: str) -> Sheet:
    """Return the named sheet.

    Raises:
        SheetNotFoundError: If the workbook has no such sheet.
    """
    sheet = workbook.get_sheet(sheet_name)
    if sheet is None:
        raise SheetNotFoundError(sheet_name, available=workbook.sheet_names)
    return sheet


def column_keys(sheet: Sheet) -> list[str]:
    """Record keys for each column of a sheet.

    Header text when the sheet has headers; "Column <n>" for columns past the
    headers, blank headers, and sheets without headers.
    """
    keys = []
    for index in range(sheet.column_count):
        header = sheet.headers[index] if index < len(sheet.headers) else ""
        keys.append(header if header.strip() else f"Column {index + 1}")
    return keys


def sheet_records(sheet: Sheet) -> list[Record]:
    """Map a sheet's rows to records keyed by column."""
    keys = column_keys(sheet)
    data_rows = sheet.grid[1:] if sheet.has_headers else sheet.grid
    return [dict(zip(keys, row)) for row in data_rows]


def to_records(
    workbook: Workbook, sheet_name: str | None = None
) -> dict[str, list[Record]]:
    """Records per sheet, keyed by sheet name in workbook order.

    Args:
        workbook: The decoded workbook.
        sheet_name: Restrict the result to this sheet.

    Raises:
        SheetNotFoundError: If ``sheet_name`` is not in the workbook.
    """
    if sheet_name is not None:
        return {sheet_name: sheet_records(find_sheet(workbook, sheet_name))}
    return {sheet.name: sheet_records(sheet) for sheet in workbook.sheets}


def to_json(
    workbook: Workbook, sheet_name: str | None = None, indent: int | None = None
) -> str:
    return json.dumps(
        to_records(workbook, sheet_name), ensure_ascii=False, indent=indent
    )


def workbook_to_delimited(
    workbook: Workbook,
    delimiter: str = COMMA,
    sheet_name: str | None = None,
) -> str | dict[str, str]:
    """Delimited text for one named sheet, or a mapping for every sheet.

    Raises:
        SheetNotFoundError: If ``sheet_name`` is not in the workbook.
    """
    if sheet_name is not None:
        return to_delimited(find_sheet(workbook, sheet_name), delimiter)
    return {sheet.name: to_delimited(sheet, delimiter) for sheet in workbook.sheets}


def to_dataframe(sheet: Sheet) -> pd.DataFrame:
    """Build a string-typed DataFrame from a sheet.

    Header rows become column labels; otherwise columns get "Column <n>".
    """
    keys = column_keys(sheet)
    data_rows: list[Any] = sheet.grid[1:] if sheet.has_headers else sheet.grid
    if not keys:
        return pd.DataFrame()
    return pd.DataFrame([list(row) for row in data_rows], columns=keys, dtype=str)
