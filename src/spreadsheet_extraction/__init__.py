"""Spreadsheet Extraction - OOXML and delimited spreadsheet decoding and analytics."""

__version__ = "0.1.0"

from spreadsheet_extraction.api import app, create_app  # noqa: E402

__all__ = ["app", "create_app"]


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from spreadsheet_extraction.config import settings

    uvicorn.run(
        "spreadsheet_extraction.api:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
