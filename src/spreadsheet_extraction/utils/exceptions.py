"""Centralized exception classes for spreadsheet extraction.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details for consistent
error handling throughout the application.

Exception Hierarchy:
    SPXError (base)
    ├── FileError
    │   ├── SPXFileNotFoundError
    │   ├── FileTooLargeError
    │   ├── UnsupportedFormatError
    │   └── EncodingError
    ├── DecodeError
    │   ├── ContainerError
    │   └── WorksheetParseError
    └── ConversionError
        ├── SheetNotFoundError
        └── UnsupportedConversionError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: File errors
    - E2xxx: Container and part decoding errors
    - E3xxx: Conversion errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    FILE_READ_ERROR = "E1004"
    ENCODING_ERROR = "E1005"

    # Decode errors (E2xxx)
    INVALID_CONTAINER = "E2001"
    MALFORMED_PART = "E2002"

    # Conversion errors (E3xxx)
    SHEET_NOT_FOUND = "E3001"
    UNSUPPORTED_CONVERSION = "E3002"
    MALFORMED_DELIMITED = "E3003"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses should set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class SPXError(Exception, HTTPStatusMixin):
    """Base exception for all spreadsheet extraction errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(SPXError):
    """Base class for file-related errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic file.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class SPXFileNotFoundError(FileError):
    """Raised when an input file does not exist.

    Note: Named SPXFileNotFoundError to avoid shadowing built-in FileNotFoundError.
    """

    http_status: int = 404

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"File not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when a file exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual file size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional file path.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(FileError):
    """Raised when a file extension has no spreadsheet reader."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        extension: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if extension:
            details["extension"] = extension
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_FORMAT,
            file_path=file_path,
            details=details,
        )
        self.extension = extension


class EncodingError(FileError):
    """Raised when delimited text cannot be decoded with any known encoding."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        encoding: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if encoding:
            details["encoding"] = encoding
        super().__init__(
            message=message,
            error_code=ErrorCode.ENCODING_ERROR,
            file_path=file_path,
            details=details,
        )
        self.encoding = encoding


# =============================================================================
# Decode Errors (E2xxx)
# =============================================================================


class DecodeError(SPXError):
    """Base class for spreadsheet container decoding errors."""

    http_status: int = 422

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.MALFORMED_PART,
        part_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the name of the archive part involved.

        Args:
            message: Error message.
            error_code: Error code.
            part_name: Archive member being decoded, if any.
            details: Additional details.
        """
        details = details or {}
        if part_name:
            details["part_name"] = part_name
        super().__init__(message, error_code, details)
        self.part_name = part_name


class ContainerError(DecodeError):
    """Raised when the byte source is not a readable zip container.

    This is the only decode failure that aborts a whole workbook.
    """

    def __init__(
        self,
        message: str = "Source is not a valid zip container",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_CONTAINER,
            details=details,
        )


class WorksheetParseError(DecodeError):
    """Raised when a worksheet part is not well-formed XML.

    The workbook decoder recovers this to a zero-row sheet.
    """

    def __init__(
        self,
        part_name: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Malformed worksheet part {part_name}: {reason}",
            error_code=ErrorCode.MALFORMED_PART,
            part_name=part_name,
            details=details,
        )
        self.reason = reason


# =============================================================================
# Conversion Errors (E3xxx)
# =============================================================================


class ConversionError(SPXError):
    """Base class for record and delimited conversion errors."""

    http_status: int = 400


class SheetNotFoundError(ConversionError):
    """Raised when a conversion names a sheet the workbook does not have."""

    http_status: int = 404

    def __init__(
        self,
        sheet_name: str,
        available: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the requested and available sheet names.

        Args:
            sheet_name: The sheet name that was requested.
            available: Sheet names present in the workbook.
            details: Additional details.
        """
        details = details or {}
        details["sheet_name"] = sheet_name
        if available is not None:
            details["available_sheets"] = available
        super().__init__(
            message=f"Sheet '{sheet_name}' not found in workbook",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            details=details,
        )
        self.sheet_name = sheet_name


class UnsupportedConversionError(ConversionError):
    """Raised for an unknown conversion target or delimiter."""

    def __init__(
        self,
        target: str,
        supported: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["target"] = target
        if supported:
            details["supported"] = supported
        super().__init__(
            message=f"Unsupported conversion target: {target}",
            error_code=ErrorCode.UNSUPPORTED_CONVERSION,
            details=details,
        )
        self.target = target


class DelimitedParseError(ConversionError):
    """Raised when delimited text cannot be split into records."""

    http_status: int = 422

    def __init__(
        self,
        reason: str,
        line: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["reason"] = reason
        if line is not None:
            details["line"] = line
        super().__init__(
            message=f"Malformed delimited text: {reason}",
            error_code=ErrorCode.MALFORMED_DELIMITED,
            details=details,
        )
        self.reason = reason
        self.line = line
