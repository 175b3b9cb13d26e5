"""Dataclasses representing a decoded spreadsheet workbook."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Row = list[str]


@dataclass(frozen=True)
class Sheet:
    """One worksheet's normalized grid.

    Every row in ``grid`` has exactly ``column_count`` cells.
    """

    name: str
    grid: list[Row]
    column_count: int
    headers: list[str] = field(default_factory=list)
    has_headers: bool = False

    @property
    def row_count(self) -> int:
        return len(self.grid)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "row_count": self.row_count,
            "column_count": self.column_count,
            "headers": list(self.headers),
            "has_headers": self.has_headers,
            "grid": [list(row) for row in self.grid],
        }


@dataclass(frozen=True)
class Workbook:
    """A decoded workbook: its sheets in part order."""

    sheets: list[Sheet] = field(default_factory=list)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> Sheet | None:
        """Return the sheet with the given name, or None."""
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None


@dataclass(frozen=True)
class Formula:
    """A formula found in a worksheet, bound to its cell address.

    ``row`` and ``column`` are 1-based and derived from ``address``.
    ``value`` is the cached result as raw text, empty when absent.
    """

    sheet: str
    address: str
    row: int
    column: int
    formula: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet": self.sheet,
            "address": self.address,
            "row": self.row,
            "column": self.column,
            "formula": self.formula,
            "value": self.value,
        }


class IssueKind(str, Enum):
    """Why a part was recovered as empty."""

    MALFORMED = "malformed"
    MISSING = "missing"


@dataclass(frozen=True)
class DecodeIssue:
    """A part that could not be decoded and was treated as empty."""

    part_name: str
    kind: IssueKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "part_name": self.part_name,
            "kind": self.kind.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class DecodeResult:
    """Everything one decode call produces."""

    workbook: Workbook
    formulas: list[Formula] = field(default_factory=list)
    issues: list[DecodeIssue] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def has_formulas(self) -> bool:
        return bool(self.formulas)
