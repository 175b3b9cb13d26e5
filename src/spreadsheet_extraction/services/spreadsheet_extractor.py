"""Extension-based entry point for spreadsheet sources."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from spreadsheet_extraction.config import settings
from spreadsheet_extraction.document import SpreadsheetDocument
from spreadsheet_extraction.services.converter import COMMA, TAB
from spreadsheet_extraction.services.delimited_reader import DelimitedReader
from spreadsheet_extraction.services.xlsx_reader import XlsxReader
from spreadsheet_extraction.utils.exceptions import (
    FileTooLargeError,
    SPXFileNotFoundError,
    UnsupportedFormatError,
)
from spreadsheet_extraction.utils.logging import LogContext, get_logger

logger = get_logger(__name__)


class SpreadsheetFormat(str, Enum):
    """Source formats with a built-in reader."""

    XLSX = "xlsx"
    CSV = "csv"
    TSV = "tsv"


EXTENSION_FORMATS: dict[str, SpreadsheetFormat] = {
    ".xlsx": SpreadsheetFormat.XLSX,
    ".xlsm": SpreadsheetFormat.XLSX,
    ".csv": SpreadsheetFormat.CSV,
    ".tsv": SpreadsheetFormat.TSV,
    ".tab": SpreadsheetFormat.TSV,
}


class SpreadsheetExtractor:
    """Decode spreadsheet files by extension.

    ``.xlsx``/``.xlsm`` go through the built-in OOXML decoder; ``.csv`` and
    ``.tsv`` through the delimited reader. Legacy ``.xls`` is not supported.
    """

    def __init__(
        self,
        max_file_size_bytes: int | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._max_file_size = max_file_size_bytes or settings.max_file_size_bytes
        self._xlsx_reader = XlsxReader(max_workers=max_workers)
        self._delimited_reader = DelimitedReader()

    def extract_from_path(self, file_path: str | Path) -> SpreadsheetDocument:
        """Decode a spreadsheet file.

        Raises:
            SPXFileNotFoundError: If the file does not exist.
            FileTooLargeError: If the file exceeds the size limit.
            UnsupportedFormatError: If the extension has no reader.
            ContainerError: If an ``.xlsx`` file is not a zip container.
        """
        path = Path(file_path)
        if not path.is_file():
            raise SPXFileNotFoundError(str(file_path))

        spreadsheet_format = self.format_for_extension(path.suffix)
        self._check_size(path.stat().st_size, str(file_path))

        return self._extract(path.read_bytes(), spreadsheet_format, str(file_path))

    def extract_from_content(
        self,
        content: bytes,
        extension: str,
        filename: str | None = None,
    ) -> SpreadsheetDocument:
        """Decode spreadsheet bytes.

        Args:
            content: File content.
            extension: File extension, with or without the leading dot.
            filename: Optional name for metadata and error messages.
        """
        spreadsheet_format = self.format_for_extension(extension)
        self._check_size(len(content), filename)
        return self._extract(content, spreadsheet_format, filename)

    def _extract(
        self,
        content: bytes,
        spreadsheet_format: SpreadsheetFormat,
        source: str | None,
    ) -> SpreadsheetDocument:
        with LogContext(source=source or "upload", format=spreadsheet_format.value):
            if spreadsheet_format is SpreadsheetFormat.XLSX:
                result = self._xlsx_reader.decode(content)
            else:
                delimiter = TAB if spreadsheet_format is SpreadsheetFormat.TSV else COMMA
                result = self._delimited_reader.read(content, delimiter, source)

            if result.issues:
                logger.warning(
                    "Spreadsheet decoded with recovered parts",
                    issues=len(result.issues),
                )
            logger.info(
                "Spreadsheet decoded",
                sheets=len(result.workbook.sheets),
                formulas=len(result.formulas),
            )

        return SpreadsheetDocument(result, source=source)

    def _check_size(self, size: int, source: str | None) -> None:
        if size > self._max_file_size:
            raise FileTooLargeError(size, self._max_file_size, file_path=source)

    @staticmethod
    def format_for_extension(extension: str) -> SpreadsheetFormat:
        """Map a file extension to its reader format.

        Raises:
            UnsupportedFormatError: If no reader handles the extension.
        """
        ext = extension.lower()
        if not ext.startswith("."):
            ext = f".{ext}"
        try:
            return EXTENSION_FORMATS[ext]
        except KeyError:
            raise UnsupportedFormatError(
                f"Unsupported spreadsheet extension: {ext or '(none)'}",
                extension=ext,
            ) from None

    @staticmethod
    def get_supported_extensions() -> list[str]:
        return list(EXTENSION_FORMATS)
