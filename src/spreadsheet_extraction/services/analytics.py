"""Per-sheet statistics and data-quality validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from spreadsheet_extraction.services.grid_normalizer import is_numeric_text
from spreadsheet_extraction.workbook import Sheet, Workbook

# Joins cells when comparing whole rows; cannot appear in XML 1.0 text
ROW_KEY_SEPARATOR = "\x1f"


@dataclass(frozen=True)
class SheetStatistics:
    """Cell counts and numeric aggregates for one sheet.

    The aggregates are None when the sheet has no numeric cells.
    """

    total_cells: int = 0
    empty_cells: int = 0
    numeric_cells: int = 0
    text_cells: int = 0
    min: float | None = None
    max: float | None = None
    average: float | None = None
    median: float | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "total_cells": self.total_cells,
            "empty_cells": self.empty_cells,
            "numeric_cells": self.numeric_cells,
            "text_cells": self.text_cells,
        }
        if self.numeric_cells:
            result.update(
                {
                    "min": self.min,
                    "max": self.max,
                    "average": self.average,
                    "median": self.median,
                }
            )
        return result


@dataclass(frozen=True)
class ValidationReport:
    """Empty and duplicate row counts with a 0-100 quality score."""

    total_rows: int = 0
    empty_rows: int = 0
    duplicate_rows: int = 0
    quality_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "empty_rows": self.empty_rows,
            "duplicate_rows": self.duplicate_rows,
            "quality_score": self.quality_score,
        }


def _median(values: list[float]) -> float:
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2


def statistics(sheet: Sheet) -> SheetStatistics:
    """Classify every cell as empty, numeric or text and aggregate numerics.

    A cell is empty when blank after trimming and numeric when the trimmed
    text is a plain integer or decimal. A sheet with no rows yields zero
    counts.
    """
    empty = 0
    text = 0
    numbers: list[float] = []

    for row in sheet.grid:
        for cell in row:
            value = cell.strip()
            if not value:
                empty += 1
            elif is_numeric_text(value):
                numbers.append(float(value))
            else:
                text += 1

    total = empty + text + len(numbers)
    if not numbers:
        return SheetStatistics(total_cells=total, empty_cells=empty, text_cells=text)

    return SheetStatistics(
        total_cells=total,
        empty_cells=empty,
        numeric_cells=len(numbers),
        text_cells=text,
        min=min(numbers),
        max=max(numbers),
        average=sum(numbers) / len(numbers),
        median=_median(numbers),
    )


def validate(sheet: Sheet) -> ValidationReport:
    """Count empty and duplicate rows and score the sheet.

    A row is a duplicate when its joined content equals an earlier row's;
    the first occurrence is not counted. The score is
    ``max(0, round(100 * (total - empty - duplicate) / total, 2))``.
    """
    total = sheet.row_count
    if total == 0:
        return ValidationReport()

    empty_rows = 0
    duplicate_rows = 0
    seen: set[str] = set()

    for row in sheet.grid:
        if all(not cell.strip() for cell in row):
            empty_rows += 1

        key = ROW_KEY_SEPARATOR.join(row)
        if key in seen:
            duplicate_rows += 1
        else:
            seen.add(key)

    score = round(100 * (total - empty_rows - duplicate_rows) / total, 2)
    return ValidationReport(
        total_rows=total,
        empty_rows=empty_rows,
        duplicate_rows=duplicate_rows,
        quality_score=max(0.0, score),
    )


def workbook_statistics(workbook: Workbook) -> dict[str, SheetStatistics]:
    return {sheet.name: statistics(sheet) for sheet in workbook.sheets}


def validate_workbook(workbook: Workbook) -> dict[str, ValidationReport]:
    return {sheet.name: validate(sheet) for sheet in workbook.sheets}
