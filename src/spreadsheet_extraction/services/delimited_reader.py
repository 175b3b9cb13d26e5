"""Reader for comma- and tab-separated sources.

Decodes bytes with chardet-based encoding detection, repairs text that
fails the validity check, and parses it into the same single-sheet
Workbook model the OOXML decoder produces.
"""

import logging
from dataclasses import dataclass

import chardet

from spreadsheet_extraction.config import settings
from spreadsheet_extraction.services.converter import COMMA, TAB, parse_delimited
from spreadsheet_extraction.services.grid_normalizer import normalize_sheet
from spreadsheet_extraction.utils.exceptions import EncodingError
from spreadsheet_extraction.utils.text_cleaning import clean_text, has_invalid_characters
from spreadsheet_extraction.workbook import DecodeResult, Workbook

logger = logging.getLogger(__name__)


DELIMITER_NAMES = {COMMA: "comma", TAB: "tab"}


@dataclass
class DecodedText:
    """Text decoded from a delimited source."""

    text: str
    """The decoded (and possibly repaired) text."""

    encoding: str
    """Encoding used to decode the bytes."""

    encoding_confidence: float
    """Detection confidence (0.0-1.0)."""

    repaired: bool = False
    """Whether the text failed the validity check and was cleaned."""


class DelimitedReader:
    """Reads CSV and TSV sources into a Workbook."""

    # Common encodings to try if chardet fails
    FALLBACK_ENCODINGS = ["utf-8", "cp1252", "latin-1"]

    def __init__(self, min_encoding_confidence: float | None = None) -> None:
        self._min_confidence = (
            settings.min_encoding_confidence
            if min_encoding_confidence is None
            else min_encoding_confidence
        )

    def read(
        self,
        content: bytes,
        delimiter: str = COMMA,
        source: str | None = None,
    ) -> DecodeResult:
        """Decode delimited bytes into a one-sheet workbook named Sheet1.

        Args:
            content: Raw file content.
            delimiter: Field delimiter.
            source: Source identifier for error messages.

        Returns:
            DecodeResult with the workbook and decoding metadata.

        Raises:
            EncodingError: If no encoding can decode the content.
        """
        decoded = self.decode_bytes(content, source)
        rows = parse_delimited(decoded.text, delimiter)
        sheet = normalize_sheet("Sheet1", rows)

        delimiter_name = DELIMITER_NAMES.get(delimiter, delimiter)
        logger.info(
            f"Read delimited source: {sheet.row_count} rows, "
            f"{sheet.column_count} columns, delimiter={delimiter_name}, "
            f"encoding={decoded.encoding}, repaired={decoded.repaired}"
        )

        return DecodeResult(
            workbook=Workbook(sheets=[sheet]),
            metadata={
                "source_format": "tsv" if delimiter == TAB else "csv",
                "delimiter": delimiter_name,
                "encoding": decoded.encoding,
                "encoding_confidence": decoded.encoding_confidence,
                "repaired": decoded.repaired,
            },
        )

    def decode_bytes(self, content: bytes, source: str | None = None) -> DecodedText:
        """Decode bytes and repair the result if it fails the validity check.

        The check fails when the detected encoding cannot decode the bytes
        (a fallback encoding is then used) or when the text carries null
        bytes or control characters. Repair keeps tabs and line breaks.
        """
        if content.startswith(b"\xef\xbb\xbf"):
            content = content[3:]

        encoding, confidence = self._detect_encoding(content)
        valid = True
        try:
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            valid = False
            text, encoding = self._decode_with_fallback(content, source)

        if valid and has_invalid_characters(text):
            valid = False

        if not valid:
            logger.warning(
                f"Delimited content failed validity check, repairing "
                f"(source={source or 'unknown'}, encoding={encoding})"
            )
            text = clean_text(text, normalize_whitespace=False)

        return DecodedText(
            text=text,
            encoding=encoding,
            encoding_confidence=confidence,
            repaired=not valid,
        )

    def _detect_encoding(self, content: bytes) -> tuple[str, float]:
        if not content:
            return "utf-8", 1.0

        # Strict UTF-8 wins over a statistical guess on short samples
        try:
            content.decode("utf-8")
            return "utf-8", 1.0
        except UnicodeDecodeError:
            pass

        result = chardet.detect(content)
        encoding = result.get("encoding")
        confidence = result.get("confidence", 0.0) or 0.0

        if encoding and confidence >= self._min_confidence:
            logger.debug(f"Detected encoding: {encoding} (confidence: {confidence:.2f})")
            return encoding.lower(), confidence

        for fallback in self.FALLBACK_ENCODINGS:
            try:
                content.decode(fallback)
                logger.debug(f"Using fallback encoding: {fallback}")
                return fallback, 0.5
            except UnicodeDecodeError:
                continue

        return "latin-1", 0.3

    def _decode_with_fallback(
        self, content: bytes, source: str | None
    ) -> tuple[str, str]:
        for fallback in self.FALLBACK_ENCODINGS:
            try:
                return content.decode(fallback), fallback
            except UnicodeDecodeError:
                continue
        raise EncodingError(
            "Failed to decode delimited content with any known encoding",
            file_path=source,
        )
