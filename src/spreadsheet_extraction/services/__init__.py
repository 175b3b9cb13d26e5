"""Services for spreadsheet extraction."""

from spreadsheet_extraction.services.delimited_reader import DelimitedReader
from spreadsheet_extraction.services.xlsx_reader import XlsxReader, decode_xlsx

__all__ = ["DelimitedReader", "XlsxReader", "decode_xlsx"]
