"""Built-in OOXML (.xlsx) workbook decoder.

Reads the zip container with :mod:`zipfile` and the XML parts with
:mod:`xml.etree.ElementTree`; no spreadsheet library is involved.

Pipeline:
    1. Read the shared-strings part and every worksheet part, then close
       the archive.
    2. Build the shared-string table.
    3. Decode worksheets (optionally in a thread pool) and normalize grids.

Only a source that is not a zip container fails the decode. Missing or
malformed parts are recovered as empty and reported as DecodeIssue entries.
"""

from __future__ import annotations

import io
import zipfile
import zlib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from spreadsheet_extraction.config import settings
from spreadsheet_extraction.services.grid_normalizer import normalize_sheet
from spreadsheet_extraction.services.ooxml import SHARED_STRINGS_PART, worksheet_parts
from spreadsheet_extraction.services.shared_strings import (
    SharedStringTable,
    parse_shared_strings,
)
from spreadsheet_extraction.services.worksheet_decoder import decode_worksheet
from spreadsheet_extraction.utils.exceptions import ContainerError, WorksheetParseError
from spreadsheet_extraction.utils.logging import get_logger, timed_operation
from spreadsheet_extraction.workbook import (
    DecodeIssue,
    DecodeResult,
    Formula,
    IssueKind,
    Sheet,
    Workbook,
)

logger = get_logger(__name__)

XlsxSource = bytes | str | Path | BinaryIO


@dataclass
class ArchiveParts:
    """Raw bytes of the parts the decoder needs, read in one pass."""

    shared_strings: bytes | None = None
    worksheets: list[tuple[str, bytes | None]] = field(default_factory=list)
    issues: list[DecodeIssue] = field(default_factory=list)


@dataclass
class _SheetOutcome:
    sheet: Sheet
    formulas: list[Formula]
    issue: DecodeIssue | None = None


def read_archive_parts(source: XlsxSource) -> ArchiveParts:
    """Open the container, read the conventional parts, and close it.

    Args:
        source: Archive bytes, a path, or a binary file object.

    Returns:
        ArchiveParts with member bytes. A member whose compressed data is
        corrupt is recorded as None plus an issue.

    Raises:
        ContainerError: If the source is not a zip archive.
    """
    file_obj: str | Path | BinaryIO = (
        io.BytesIO(source) if isinstance(source, bytes) else source
    )
    parts = ArchiveParts()
    try:
        with zipfile.ZipFile(file_obj) as archive:
            names = archive.namelist()
            if SHARED_STRINGS_PART in names:
                parts.shared_strings = _read_member(archive, SHARED_STRINGS_PART, parts)
            for name in worksheet_parts(names):
                parts.worksheets.append((name, _read_member(archive, name, parts)))
    except zipfile.BadZipFile as e:
        raise ContainerError(
            f"Source is not a valid zip container: {e}",
            details={"reason": str(e)},
        ) from e

    return parts


def _read_member(
    archive: zipfile.ZipFile, name: str, parts: ArchiveParts
) -> bytes | None:
    try:
        return archive.read(name)
    except (
        zipfile.BadZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
        RuntimeError,
    ) as e:
        logger.warning("Unreadable archive member", part=name, error=str(e))
        parts.issues.append(
            DecodeIssue(part_name=name, kind=IssueKind.MALFORMED, message=str(e))
        )
        return None


class XlsxReader:
    """Decode OOXML workbooks into normalized sheets and formulas."""

    def __init__(self, max_workers: int | None = None) -> None:
        """Initialize the reader.

        Args:
            max_workers: Threads used for worksheet decoding. Defaults to the
                ``decode_max_workers`` setting; 1 decodes sequentially.
        """
        self._max_workers = max_workers or settings.decode_max_workers

    def decode(self, source: XlsxSource) -> DecodeResult:
        """Decode a workbook.

        Args:
            source: Archive bytes, a path, or a binary file object.

        Returns:
            DecodeResult with the workbook, formulas, and recovered issues.

        Raises:
            ContainerError: If the source is not a zip container.
        """
        with timed_operation(logger, "xlsx_decode") as metrics:
            parts = read_archive_parts(source)
            issues = list(parts.issues)

            table = parse_shared_strings(parts.shared_strings)
            if table.parse_error is not None:
                issues.append(
                    DecodeIssue(
                        part_name=SHARED_STRINGS_PART,
                        kind=IssueKind.MALFORMED,
                        message=table.parse_error,
                    )
                )

            jobs = [
                (f"Sheet{position}", part_name, content, table)
                for position, (part_name, content) in enumerate(
                    parts.worksheets, start=1
                )
            ]
            outcomes = self._decode_all(jobs)

            sheets = [outcome.sheet for outcome in outcomes]
            formulas = [f for outcome in outcomes for f in outcome.formulas]
            issues.extend(o.issue for o in outcomes if o.issue is not None)

            metrics.sheets_decoded = len(sheets)
            metrics.rows_decoded = sum(sheet.row_count for sheet in sheets)
            metrics.cells_decoded = sum(
                sheet.row_count * sheet.column_count for sheet in sheets
            )
            metrics.issues = len(issues)

        if not sheets:
            logger.warning("Workbook has no worksheet parts")

        return DecodeResult(
            workbook=Workbook(sheets=sheets),
            formulas=formulas,
            issues=issues,
            metadata={
                "source_format": "xlsx",
                "worksheet_parts": [part_name for _, part_name, _, _ in jobs],
                "shared_string_count": len(table),
            },
        )

    def _decode_all(
        self, jobs: list[tuple[str, str, bytes | None, SharedStringTable]]
    ) -> list[_SheetOutcome]:
        if self._max_workers > 1 and len(jobs) > 1:
            workers = min(self._max_workers, len(jobs))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(lambda job: self._decode_one(*job), jobs))
        return [self._decode_one(*job) for job in jobs]

    @staticmethod
    def _decode_one(
        sheet_name: str,
        part_name: str,
        content: bytes | None,
        table: SharedStringTable,
    ) -> _SheetOutcome:
        if content is None:
            return _SheetOutcome(normalize_sheet(sheet_name, []), [])

        try:
            decoded = decode_worksheet(content, table, sheet_name, part_name)
        except WorksheetParseError as e:
            logger.warning(
                "Worksheet recovered as empty",
                sheet=sheet_name,
                part=part_name,
                reason=e.reason,
            )
            return _SheetOutcome(
                normalize_sheet(sheet_name, []),
                [],
                DecodeIssue(
                    part_name=part_name, kind=IssueKind.MALFORMED, message=e.reason
                ),
            )

        return _SheetOutcome(normalize_sheet(sheet_name, decoded.rows), decoded.formulas)


def decode_xlsx(source: XlsxSource, max_workers: int | None = None) -> DecodeResult:
    """Decode an OOXML workbook. See :class:`XlsxReader`."""
    return XlsxReader(max_workers=max_workers).decode(source)
