"""Worksheet cell decoder.

Turns one worksheet part into rows of text cells and a flat list of
formulas. Cell type codes are resolved here, once; nothing downstream sees
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from xml.etree import ElementTree as ET

from spreadsheet_extraction.services.ooxml import (
    children,
    column_letter,
    find_child,
    find_descendant,
    split_address,
)
from spreadsheet_extraction.services.shared_strings import (
    SharedStringTable,
    string_item_text,
)
from spreadsheet_extraction.utils.exceptions import WorksheetParseError
from spreadsheet_extraction.utils.logging import get_logger
from spreadsheet_extraction.workbook import Formula, Row

logger = get_logger(__name__)


class CellKind(str, Enum):
    """How a cell's stored value becomes text."""

    SHARED_STRING = "s"
    INLINE_STRING = "str"
    RICH_INLINE_STRING = "inlineStr"
    BOOLEAN = "b"
    RAW = "raw"

    @classmethod
    def from_type_attr(cls, type_attr: str | None) -> CellKind:
        """Map the ``t`` attribute; numbers, dates, errors and untyped are RAW."""
        if type_attr is None:
            return cls.RAW
        try:
            return cls(type_attr)
        except ValueError:
            return cls.RAW


@dataclass
class WorksheetContent:
    """Rows and formulas decoded from one worksheet part."""

    rows: list[Row] = field(default_factory=list)
    formulas: list[Formula] = field(default_factory=list)


def resolve_cell_value(
    kind: CellKind,
    cell: ET.Element,
    shared_strings: SharedStringTable | None,
) -> str:
    """Resolve a cell to text.

    Args:
        kind: The cell's type.
        cell: The ``c`` element.
        shared_strings: Table for ``s`` cells. None leaves the index text as
            is, which is how formula cached values are read.

    Returns:
        The cell text; "" when the cell has no value.
    """
    if kind is CellKind.RICH_INLINE_STRING:
        inline = find_child(cell, "is")
        return string_item_text(inline) if inline is not None else ""

    value_element = find_child(cell, "v")
    raw = value_element.text if value_element is not None else None
    if raw is None:
        return ""

    if kind is CellKind.SHARED_STRING and shared_strings is not None:
        return shared_strings.resolve(raw)
    if kind is CellKind.BOOLEAN:
        return "TRUE" if raw == "1" else "FALSE"
    return raw


def decode_worksheet(
    content: bytes,
    shared_strings: SharedStringTable,
    sheet_name: str,
    part_name: str | None = None,
) -> WorksheetContent:
    """Decode a worksheet part.

    Rows are emitted in document order, whatever their declared row numbers.
    A cell whose address lies to the right of the cells decoded so far is
    preceded by empty cells so it keeps its column.

    Args:
        content: Raw bytes of the worksheet part.
        shared_strings: Fully built shared-string table.
        sheet_name: Name recorded on harvested formulas.
        part_name: Archive member name, used in error reports.

    Returns:
        WorksheetContent with rows and formulas.

    Raises:
        WorksheetParseError: If the part is not well-formed XML.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise WorksheetParseError(part_name or sheet_name, str(e)) from e

    result = WorksheetContent()
    sheet_data = find_descendant(root, "sheetData")
    if sheet_data is None:
        return result

    for position, row_element in enumerate(children(sheet_data, "row"), start=1):
        row_number = _row_number(row_element, default=position)
        row: Row = []

        for cell in children(row_element, "c"):
            address = cell.get("r")
            location = split_address(address) if address else None
            if location is not None:
                cell_row, cell_column = location
                while len(row) < cell_column - 1:
                    row.append("")
            else:
                cell_row, cell_column = row_number, len(row) + 1
                address = f"{column_letter(cell_column)}{cell_row}"

            kind = CellKind.from_type_attr(cell.get("t"))
            row.append(resolve_cell_value(kind, cell, shared_strings))

            formula_element = find_child(cell, "f")
            if formula_element is not None:
                result.formulas.append(
                    Formula(
                        sheet=sheet_name,
                        address=address or "",
                        row=cell_row,
                        column=cell_column,
                        formula=formula_element.text or "",
                        value=resolve_cell_value(kind, cell, None),
                    )
                )

        result.rows.append(row)

    logger.debug(
        "Decoded worksheet",
        sheet=sheet_name,
        rows=len(result.rows),
        formulas=len(result.formulas),
    )
    return result


def _row_number(row_element: ET.Element, default: int) -> int:
    try:
        return int(row_element.get("r", ""))
    except ValueError:
        return default
