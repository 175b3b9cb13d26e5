"""Pydantic models for API requests and responses."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from spreadsheet_extraction.utils.exceptions import ErrorCode


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class ConversionFormat(str, Enum):
    """Target formats for spreadsheet conversion."""

    CSV = "csv"
    TSV = "tsv"
    JSON = "json"


class DelimitedFormat(str, Enum):
    """Delimited text formats accepted for transcoding."""

    CSV = "csv"
    TSV = "tsv"


class SheetSummary(BaseModel):
    """One normalized sheet."""

    name: str = Field(..., description="Synthesized sheet name (Sheet1, Sheet2, ...)")
    row_count: int = Field(..., description="Number of rows in the grid")
    column_count: int = Field(..., description="Width of every row in the grid")
    headers: list[str] = Field(
        default_factory=list, description="Header row when one was inferred"
    )
    has_headers: bool = Field(default=False, description="Whether row 0 is a header")
    grid: list[list[str]] = Field(
        default_factory=list, description="Rectangular grid of cell text"
    )


class FormulaInfo(BaseModel):
    """A formula bound to its cell."""

    sheet: str
    address: str = Field(..., description="Cell address (e.g., 'B2')")
    row: int = Field(..., description="1-based row number")
    column: int = Field(..., description="1-based column number")
    formula: str = Field(..., description="Formula text without evaluation")
    value: str = Field(default="", description="Cached value as raw text")


class DecodeIssueInfo(BaseModel):
    """A part recovered as empty during decoding."""

    part_name: str
    kind: str
    message: str


class ExtractionResponse(BaseModel):
    """Response model for spreadsheet extraction endpoint."""

    filename: str = Field(..., description="Original filename of uploaded file")
    sheets: list[SheetSummary] = Field(default_factory=list)
    formulas: list[FormulaInfo] = Field(default_factory=list)
    issues: list[DecodeIssueInfo] = Field(
        default_factory=list,
        description="Parts that were malformed or missing and decoded as empty",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Workbook and decoding metadata"
    )
    text_content: str = Field(default="", description="Plain-text rendering")


class AnalysisResponse(BaseModel):
    """Response model for spreadsheet analysis endpoint."""

    filename: str = Field(..., description="Original filename of uploaded file")
    statistics: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Cell statistics keyed by sheet name"
    )
    validation: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Validation reports keyed by sheet name"
    )


class ConversionResponse(BaseModel):
    """Response model for spreadsheet conversion endpoint."""

    filename: str = Field(..., description="Original filename of uploaded file")
    target_format: ConversionFormat
    sheet_name: str | None = Field(
        default=None, description="Converted sheet, or None for every sheet"
    )
    content: str | dict[str, str] = Field(
        ...,
        description="Converted text, or text per sheet name for delimited output "
        "of a whole workbook",
    )


class TranscodeResponse(BaseModel):
    """Response model for delimited transcoding endpoint."""

    filename: str
    from_format: DelimitedFormat
    to_format: DelimitedFormat
    encoding: str = Field(..., description="Encoding used to decode the upload")
    repaired: bool = Field(
        default=False, description="Whether the text was repaired before parsing"
    )
    content: str = Field(..., description="Transcoded text")


class ErrorDetail(BaseModel):
    """Error detail model for API error responses.

    This model provides structured error responses with:
    - Human-readable error message
    - Machine-readable error code
    - Optional additional details for debugging
    - Optional request ID for correlation
    """

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E1001')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        detail: str,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> "ErrorDetail":
        """Create an ErrorDetail from an ErrorCode enum value."""
        return cls(
            detail=detail,
            error_code=error_code.value,
            details=details,
            request_id=request_id,
        )
