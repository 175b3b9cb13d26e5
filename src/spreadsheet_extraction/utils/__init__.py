"""Utilities package for spreadsheet extraction.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
- Encoding repair for delimited text (text_cleaning.py)
"""

from spreadsheet_extraction.utils.exceptions import (
    ContainerError,
    ConversionError,
    DecodeError,
    EncodingError,
    ErrorCode,
    FileError,
    FileTooLargeError,
    HTTPStatusMixin,
    SheetNotFoundError,
    SPXError,
    SPXFileNotFoundError,
    UnsupportedConversionError,
    UnsupportedFormatError,
    WorksheetParseError,
)
from spreadsheet_extraction.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)
from spreadsheet_extraction.utils.text_cleaning import clean_text

__all__ = [
    # Exceptions
    "ContainerError",
    "ConversionError",
    "DecodeError",
    "EncodingError",
    "ErrorCode",
    "FileError",
    "FileTooLargeError",
    "HTTPStatusMixin",
    "SheetNotFoundError",
    "SPXError",
    "SPXFileNotFoundError",
    "UnsupportedConversionError",
    "UnsupportedFormatError",
    "WorksheetParseError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Text cleaning
    "clean_text",
]
