"""Document-level view over one decoded spreadsheet source."""

from __future__ import annotations

from typing import Any

import pandas as pd

from spreadsheet_extraction.services import analytics, converter
from spreadsheet_extraction.workbook import (
    DecodeIssue,
    DecodeResult,
    Formula,
    Sheet,
    Workbook,
)


class SpreadsheetDocument:
    """A decoded spreadsheet with text, table, analytics and conversion views.

    Every method derives its result from the immutable decode result; nothing
    is cached and the workbook is never modified.
    """

    def __init__(self, result: DecodeResult, source: str | None = None) -> None:
        self._result = result
        self.source = source

    @property
    def workbook(self) -> Workbook:
        return self._result.workbook

    @property
    def formulas(self) -> list[Formula]:
        return self._result.formulas

    @property
    def issues(self) -> list[DecodeIssue]:
        return self._result.issues

    @property
    def sheets(self) -> list[Sheet]:
        return self._result.workbook.sheets

    def extract_text(self) -> str:
        """Render every sheet as plain text.

        Each sheet starts with ``=== Sheet: <name> ===``; rows list their
        non-blank cells joined by `` | ``; blank rows are skipped and sheets
        are separated by an empty line.
        """
        lines: list[str] = []
        for sheet in self.sheets:
            lines.append(f"=== Sheet: {sheet.name} ===")
            for row in sheet.grid:
                cells = [cell for cell in row if cell.strip()]
                if cells:
                    lines.append(" | ".join(cells))
            lines.append("")
        return "\n".join(lines)

    def extract_metadata(self) -> dict[str, Any]:
        sheet_info = {
            sheet.name: {
                "rows": sheet.row_count,
                "columns": sheet.column_count,
                "has_headers": sheet.has_headers,
            }
            for sheet in self.sheets
        }
        return {
            **self._result.metadata,
            "source": self.source,
            "sheet_count": len(self.sheets),
            "sheet_names": self.workbook.sheet_names,
            "sheet_info": sheet_info,
            "total_rows": sum(sheet.row_count for sheet in self.sheets),
            "total_columns": max(
                (sheet.column_count for sheet in self.sheets), default=0
            ),
            "has_formulas": self._result.has_formulas,
            "formula_count": len(self.formulas),
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def extract_tables(self) -> list[dict[str, Any]]:
        """One table per sheet with column keys and the full grid."""
        return [
            {
                "sheet_name": sheet.name,
                "rows": sheet.row_count,
                "columns": sheet.column_count,
                "headers": converter.column_keys(sheet),
                "has_headers": sheet.has_headers,
                "data": [list(row) for row in sheet.grid],
            }
            for sheet in self.sheets
        ]

    def extract_formulas(self) -> list[dict[str, Any]]:
        return [formula.to_dict() for formula in self.formulas]

    def extract_statistics(self) -> dict[str, dict[str, Any]]:
        return {
            name: stats.to_dict()
            for name, stats in analytics.workbook_statistics(self.workbook).items()
        }

    def validate_data(self) -> dict[str, dict[str, Any]]:
        return {
            name: report.to_dict()
            for name, report in analytics.validate_workbook(self.workbook).items()
        }

    def to_csv(self, sheet_name: str | None = None) -> str | dict[str, str]:
        """Comma-separated text for one sheet, or a mapping for all sheets."""
        return converter.workbook_to_delimited(
            self.workbook, converter.COMMA, sheet_name
        )

    def to_tsv(self, sheet_name: str | None = None) -> str | dict[str, str]:
        """Tab-separated text for one sheet, or a mapping for all sheets."""
        return converter.workbook_to_delimited(self.workbook, converter.TAB, sheet_name)

    def to_records(
        self, sheet_name: str | None = None
    ) -> dict[str, list[dict[str, str]]]:
        return converter.to_records(self.workbook, sheet_name)

    def to_json(self, sheet_name: str | None = None, indent: int | None = None) -> str:
        return converter.to_json(self.workbook, sheet_name, indent)

    def to_dataframe(self, sheet_name: str | None = None) -> pd.DataFrame:
        """DataFrame for the named sheet, or the first sheet when omitted."""
        if sheet_name is not None:
            return converter.to_dataframe(
                converter.find_sheet(self.workbook, sheet_name)
            )
        if not self.sheets:
            return pd.DataFrame()
        return converter.to_dataframe(self.sheets[0])

    def process(self) -> dict[str, Any]:
        """Everything the document offers, in one dictionary."""
        return {
            "text_content": self.extract_text(),
            "metadata": self.extract_metadata(),
            "tables": self.extract_tables(),
            "formulas": self.extract_formulas(),
            "statistics": self.extract_statistics(),
            "validation": self.validate_data(),
        }
