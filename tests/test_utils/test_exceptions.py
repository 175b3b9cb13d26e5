"""Tests for the centralized exception classes."""

import pytest

from spreadsheet_extraction.utils.exceptions import (
    ContainerError,
    ConversionError,
    DecodeError,
    DelimitedParseError,
    EncodingError,
    ErrorCode,
    FileError,
    FileTooLargeError,
    SheetNotFoundError,
    SPXError,
    SPXFileNotFoundError,
    UnsupportedConversionError,
    UnsupportedFormatError,
    WorksheetParseError,
)


class TestErrorCode:
    """Tests for ErrorCode enumeration."""

    def test_error_codes_are_unique(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    def test_error_code_format(self) -> None:
        for code in ErrorCode:
            assert code.value.startswith("E")
            assert len(code.value) == 5
            assert code.value[1:].isdigit()

    @pytest.mark.parametrize(
        ("codes", "prefix"),
        [
            (
                [
                    ErrorCode.FILE_NOT_FOUND,
                    ErrorCode.FILE_TOO_LARGE,
                    ErrorCode.UNSUPPORTED_FORMAT,
                    ErrorCode.ENCODING_ERROR,
                ],
                "E1",
            ),
            ([ErrorCode.INVALID_CONTAINER, ErrorCode.MALFORMED_PART], "E2"),
            (
                [
                    ErrorCode.SHEET_NOT_FOUND,
                    ErrorCode.UNSUPPORTED_CONVERSION,
                    ErrorCode.MALFORMED_DELIMITED,
                ],
                "E3",
            ),
            ([ErrorCode.INTERNAL_ERROR, ErrorCode.CONFIGURATION_ERROR], "E9"),
        ],
    )
    def test_categories(self, codes: list[ErrorCode], prefix: str) -> None:
        for code in codes:
            assert code.value.startswith(prefix)


class TestSPXError:
    """Tests for the base exception."""

    def test_defaults(self) -> None:
        error = SPXError("Something failed")
        assert error.message == "Something failed"
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert error.http_status == 500
        assert error.get_http_status() == 500

    def test_str_includes_code(self) -> None:
        assert str(SPXError("Boom")) == "[E9001] Boom"

    def test_to_dict(self) -> None:
        error = SPXError("Boom", details={"key": "value"})
        assert error.to_dict() == {
            "error_code": "E9001",
            "message": "Boom",
            "details": {"key": "value"},
        }

    def test_to_dict_without_details(self) -> None:
        assert "details" not in SPXError("Boom").to_dict()


class TestFileErrors:
    """Tests for file-related exceptions."""

    def test_file_not_found(self) -> None:
        error = SPXFileNotFoundError("/data/book.xlsx")
        assert isinstance(error, FileError)
        assert error.http_status == 404
        assert error.error_code == ErrorCode.FILE_NOT_FOUND
        assert error.details["file_path"] == "/data/book.xlsx"
        assert "book.xlsx" in error.message

    def test_file_too_large(self) -> None:
        error = FileTooLargeError(file_size=2048, max_size=1024, file_path="a.csv")
        assert error.http_status == 413
        assert error.file_size == 2048
        assert error.max_size == 1024
        assert error.details["file_size_bytes"] == 2048
        assert error.details["max_size_bytes"] == 1024

    def test_unsupported_format(self) -> None:
        error = UnsupportedFormatError("No reader", extension=".xls")
        assert error.http_status == 400
        assert error.extension == ".xls"
        assert error.details == {"extension": ".xls"}

    def test_encoding_error(self) -> None:
        error = EncodingError("Cannot decode", encoding="utf-16")
        assert error.error_code == ErrorCode.ENCODING_ERROR
        assert error.details["encoding"] == "utf-16"


class TestDecodeErrors:
    """Tests for container and part decoding exceptions."""

    def test_container_error(self) -> None:
        error = ContainerError()
        assert isinstance(error, DecodeError)
        assert error.http_status == 422
        assert error.error_code == ErrorCode.INVALID_CONTAINER
        assert error.message == "Source is not a valid zip container"

    def test_worksheet_parse_error(self) -> None:
        error = WorksheetParseError("xl/worksheets/sheet2.xml", "unclosed token")
        assert error.error_code == ErrorCode.MALFORMED_PART
        assert error.part_name == "xl/worksheets/sheet2.xml"
        assert error.reason == "unclosed token"
        assert error.details["part_name"] == "xl/worksheets/sheet2.xml"


class TestConversionErrors:
    """Tests for conversion exceptions."""

    def test_sheet_not_found(self) -> None:
        error = SheetNotFoundError("Summary", available=["Sheet1"])
        assert isinstance(error, ConversionError)
        assert error.http_status == 404
        assert error.sheet_name == "Summary"
        assert error.details == {
            "sheet_name": "Summary",
            "available_sheets": ["Sheet1"],
        }

    def test_unsupported_conversion(self) -> None:
        error = UnsupportedConversionError("xml", supported=["csv", "tsv"])
        assert error.http_status == 400
        assert error.target == "xml"
        assert error.details["supported"] == ["csv", "tsv"]

    def test_delimited_parse_error(self) -> None:
        error = DelimitedParseError("unexpected end of data", line=3)
        assert isinstance(error, ConversionError)
        assert error.http_status == 422
        assert error.error_code == ErrorCode.MALFORMED_DELIMITED
        assert error.details == {"reason": "unexpected end of data", "line": 3}

    def test_catchable_as_base(self) -> None:
        with pytest.raises(SPXError):
            raise SheetNotFoundError("Missing")
