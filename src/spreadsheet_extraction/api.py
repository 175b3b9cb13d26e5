"""FastAPI application for spreadsheet extraction."""

import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Any

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spreadsheet_extraction import __version__
from spreadsheet_extraction.config import settings, validate_settings_on_startup
from spreadsheet_extraction.document import SpreadsheetDocument
from spreadsheet_extraction.models import (
    AnalysisResponse,
    ConversionFormat,
    ConversionResponse,
    DelimitedFormat,
    ErrorDetail,
    ExtractionResponse,
    HealthResponse,
    TranscodeResponse,
)
from spreadsheet_extraction.services.converter import COMMA, TAB, transcode
from spreadsheet_extraction.services.delimited_reader import DelimitedReader
from spreadsheet_extraction.services.spreadsheet_extractor import SpreadsheetExtractor
from spreadsheet_extraction.utils.exceptions import (
    ErrorCode,
    FileTooLargeError,
    SPXError,
)
from spreadsheet_extraction.utils.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

# Configure structured logging using settings
configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)

DELIMITERS = {DelimitedFormat.CSV: COMMA, DelimitedFormat.TSV: TAB}


async def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    """Read an upload, enforcing the size limit before decoding."""
    content = await file.read()
    filename = file.filename or "upload"
    if len(content) > settings.max_file_size_bytes:
        logger.warning(
            "File too large",
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
        )
        raise FileTooLargeError(
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
            file_path=filename,
        )
    return filename, content


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        app.state.extractor = SpreadsheetExtractor()
        app.state.delimited_reader = DelimitedReader()
        try:
            yield
        finally:
            app.state.extractor = None
            app.state.delimited_reader = None

    app = FastAPI(
        title="Spreadsheet Extraction API",
        description=(
            "Decodes OOXML workbooks and delimited text into normalized grids, "
            "with formulas, statistics, validation and format conversion."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Configure CORS using settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Validate settings on startup
    validate_settings_on_startup(settings)

    async def _decode_upload(request: Request, file: UploadFile) -> SpreadsheetDocument:
        filename, content = await _read_upload(file)
        extractor: SpreadsheetExtractor = request.app.state.extractor
        return await run_in_threadpool(
            extractor.extract_from_content,
            content,
            Path(filename).suffix,
            filename,
        )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it in the response, clear context after."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(SPXError)
    async def spx_exception_handler(request: Request, exc: SPXError) -> JSONResponse:
        """Map application errors to structured error responses."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"SPX Error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler that hides internals unless debug is on."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail.from_error_code(
                ErrorCode.INTERNAL_ERROR,
                detail,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> dict[str, Any]:
        """Check the health status of the service."""
        request_id = getattr(request.state, "request_id", None)
        logger.debug("Health check requested", request_id=request_id)
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
        }

    @app.post(
        "/spreadsheets/extract",
        response_model=ExtractionResponse,
        tags=["Spreadsheets"],
        responses={
            400: {"model": ErrorDetail, "description": "Unsupported file type"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Not a valid container"},
        },
    )
    async def extract_spreadsheet(
        request: Request,
        file: Annotated[UploadFile, File(description="Spreadsheet to decode")],
    ) -> dict[str, Any]:
        """Decode a spreadsheet into sheets, formulas and decode issues.

        Accepts ``.xlsx``, ``.xlsm``, ``.csv``, ``.tsv`` and ``.tab`` uploads.
        Malformed worksheets are returned as empty sheets and listed under
        ``issues``.
        """
        document = await _decode_upload(request, file)
        logger.info(
            "Spreadsheet extracted",
            filename=document.source,
            sheets=len(document.sheets),
            issues=len(document.issues),
        )
        return {
            "filename": document.source,
            "sheets": [sheet.to_dict() for sheet in document.sheets],
            "formulas": document.extract_formulas(),
            "issues": [issue.to_dict() for issue in document.issues],
            "metadata": document.extract_metadata(),
            "text_content": document.extract_text(),
        }

    @app.post(
        "/spreadsheets/analyze",
        response_model=AnalysisResponse,
        tags=["Spreadsheets"],
        responses={
            400: {"model": ErrorDetail, "description": "Unsupported file type"},
            413: {"model": ErrorDetail, "description": "File too large"},
        },
    )
    async def analyze_spreadsheet(
        request: Request,
        file: Annotated[UploadFile, File(description="Spreadsheet to analyze")],
    ) -> dict[str, Any]:
        """Per-sheet cell statistics and data-quality validation."""
        document = await _decode_upload(request, file)
        return {
            "filename": document.source,
            "statistics": document.extract_statistics(),
            "validation": document.validate_data(),
        }

    @app.post(
        "/spreadsheets/convert",
        response_model=ConversionResponse,
        tags=["Spreadsheets"],
        responses={
            400: {"model": ErrorDetail, "description": "Unsupported file type"},
            404: {"model": ErrorDetail, "description": "Sheet not found"},
            413: {"model": ErrorDetail, "description": "File too large"},
        },
    )
    async def convert_spreadsheet(
        request: Request,
        file: Annotated[UploadFile, File(description="Spreadsheet to convert")],
        target_format: Annotated[
            ConversionFormat, Form(description="csv, tsv or json")
        ],
        sheet_name: Annotated[
            str | None, Form(description="Convert only this sheet")
        ] = None,
    ) -> dict[str, Any]:
        """Convert a spreadsheet to delimited text or JSON records.

        Without ``sheet_name``, delimited output is returned per sheet and
        JSON output covers every sheet.
        """
        document = await _decode_upload(request, file)
        sheet_name = sheet_name or None

        content: str | dict[str, str]
        if target_format == ConversionFormat.CSV:
            content = document.to_csv(sheet_name)
        elif target_format == ConversionFormat.TSV:
            content = document.to_tsv(sheet_name)
        else:
            content = document.to_json(sheet_name)

        logger.info(
            "Spreadsheet converted",
            filename=document.source,
            target_format=target_format.value,
            sheet_name=sheet_name,
        )
        return {
            "filename": document.source,
            "target_format": target_format,
            "sheet_name": sheet_name,
            "content": content,
        }

    @app.post(
        "/delimited/transcode",
        response_model=TranscodeResponse,
        tags=["Delimited"],
        responses={
            400: {"model": ErrorDetail, "description": "Undecodable content"},
            413: {"model": ErrorDetail, "description": "File too large"},
        },
    )
    async def transcode_delimited(
        request: Request,
        file: Annotated[UploadFile, File(description="Delimited text file")],
        from_format: Annotated[DelimitedFormat, Form(description="csv or tsv")],
        to_format: Annotated[DelimitedFormat, Form(description="csv or tsv")],
    ) -> dict[str, Any]:
        """Re-emit delimited text with another delimiter, re-quoting fields."""
        filename, content = await _read_upload(file)
        reader: DelimitedReader = request.app.state.delimited_reader
        decoded = await run_in_threadpool(reader.decode_bytes, content, filename)
        output = await run_in_threadpool(
            transcode, decoded.text, DELIMITERS[from_format], DELIMITERS[to_format]
        )
        logger.info(
            "Delimited text transcoded",
            filename=filename,
            from_format=from_format.value,
            to_format=to_format.value,
            encoding=decoded.encoding,
        )
        return {
            "filename": filename,
            "from_format": from_format,
            "to_format": to_format,
            "encoding": decoded.encoding,
            "repaired": decoded.repaired,
            "content": output,
        }

    logger.info("FastAPI application created successfully")
    return app


# Create the application instance
app = create_app()
