"""Tests for the SpreadsheetDocument views."""

import json

import pytest

from spreadsheet_extraction.document import SpreadsheetDocument
from spreadsheet_extraction.services.xlsx_reader import decode_xlsx
from spreadsheet_extraction.utils.exceptions import SheetNotFoundError
from tests.fixtures import build_xlsx, shared_strings_xml, worksheet_xml


@pytest.fixture
def document() -> SpreadsheetDocument:
    """Two sheets, one formula, and one malformed part."""
    content = build_xlsx(
        [
            worksheet_xml(
                '<row r="1"><c r="A1" t="s"><v>0</v></c><c r="B1" t="s"><v>1</v></c></row>'
                '<row r="2"><c r="A2" t="s"><v>2</v></c><c r="B2"><v>25</v></c></row>'
                '<row r="3"><c r="A3" t="s"><v>3</v></c><c r="B3"><v>35</v></c></row>'
                '<row r="4"><c r="B4"><f>SUM(B2:B3)</f><v>60</v></c></row>'
            ),
            worksheet_xml(
                '<row r="1"><c r="A1" t="str"><v>x</v></c></row>'
                '<row r="2"/>'
                '<row r="3"><c r="A3" t="str"><v>x</v></c></row>'
            ),
            "<worksheet><sheetData>",
        ],
        shared_strings=shared_strings_xml(["Name", "Age", "John", "Jane"]),
    )
    return SpreadsheetDocument(decode_xlsx(content), source="people.xlsx")


class TestExtractText:
    def test_sheet_sections(self, document: SpreadsheetDocument) -> None:
        assert document.extract_text() == (
            "=== Sheet: Sheet1 ===\n"
            "Name | Age\n"
            "John | 25\n"
            "Jane | 35\n"
            "60\n"
            "\n"
            "=== Sheet: Sheet2 ===\n"
            "x\n"
            "x\n"
            "\n"
            "=== Sheet: Sheet3 ===\n"
        )


class TestExtractMetadata:
    def test_counts(self, document: SpreadsheetDocument) -> None:
        metadata = document.extract_metadata()

        assert metadata["source"] == "people.xlsx"
        assert metadata["source_format"] == "xlsx"
        assert metadata["sheet_count"] == 3
        assert metadata["sheet_names"] == ["Sheet1", "Sheet2", "Sheet3"]
        assert metadata["sheet_info"]["Sheet1"] == {
            "rows": 4,
            "columns": 2,
            "has_headers": True,
        }
        assert metadata["total_rows"] == 7
        assert metadata["total_columns"] == 2
        assert metadata["has_formulas"] is True
        assert metadata["formula_count"] == 1

    def test_issues_are_listed(self, document: SpreadsheetDocument) -> None:
        issues = document.extract_metadata()["issues"]
        assert issues == [
            {
                "part_name": "xl/worksheets/sheet3.xml",
                "kind": "malformed",
                "message": issues[0]["message"],
            }
        ]


class TestExtractTables:
    def test_tables(self, document: SpreadsheetDocument) -> None:
        tables = document.extract_tables()
        assert [t["sheet_name"] for t in tables] == ["Sheet1", "Sheet2", "Sheet3"]
        assert tables[0]["headers"] == ["Name", "Age"]
        assert tables[0]["data"][3] == ["", "60"]
        assert tables[1]["headers"] == ["Column 1"]
        assert tables[2]["rows"] == 0


class TestFormulasAndAnalytics:
    def test_extract_formulas(self, document: SpreadsheetDocument) -> None:
        assert document.extract_formulas() == [
            {
                "sheet": "Sheet1",
                "address": "B4",
                "row": 4,
                "column": 2,
                "formula": "SUM(B2:B3)",
                "value": "60",
            }
        ]

    def test_extract_statistics(self, document: SpreadsheetDocument) -> None:
        stats = document.extract_statistics()
        assert stats["Sheet1"]["numeric_cells"] == 3
        assert stats["Sheet1"]["max"] == 60
        assert stats["Sheet1"]["median"] == 35
        assert stats["Sheet3"]["total_cells"] == 0

    def test_validate_data(self, document: SpreadsheetDocument) -> None:
        reports = document.validate_data()
        assert reports["Sheet2"] == {
            "total_rows": 3,
            "empty_rows": 1,
            "duplicate_rows": 1,
            "quality_score": 33.33,
        }
        assert reports["Sheet3"]["quality_score"] == 0.0


class TestConversions:
    def test_to_csv_single_sheet(self, document: SpreadsheetDocument) -> None:
        assert document.to_csv("Sheet2") == "x\n\"\"\nx\n"

    def test_to_tsv_all_sheets(self, document: SpreadsheetDocument) -> None:
        result = document.to_tsv()
        assert isinstance(result, dict)
        assert result["Sheet1"].startswith("Name\tAge\n")
        assert result["Sheet3"] == ""

    def test_to_json(self, document: SpreadsheetDocument) -> None:
        data = json.loads(document.to_json("Sheet1"))
        assert data["Sheet1"][0] == {"Name": "John", "Age": "25"}
        assert data["Sheet1"][2] == {"Name": "", "Age": "60"}

    def test_to_records_all_sheets(self, document: SpreadsheetDocument) -> None:
        assert list(document.to_records()) == ["Sheet1", "Sheet2", "Sheet3"]

    def test_to_dataframe_defaults_to_first_sheet(
        self, document: SpreadsheetDocument
    ) -> None:
        df = document.to_dataframe()
        assert list(df.columns) == ["Name", "Age"]
        assert len(df) == 3

    def test_unknown_sheet(self, document: SpreadsheetDocument) -> None:
        with pytest.raises(SheetNotFoundError):
            document.to_csv("Summary")
        with pytest.raises(SheetNotFoundError):
            document.to_dataframe("Summary")


class TestProcess:
    def test_process_includes_every_view(self, document: SpreadsheetDocument) -> None:
        result = document.process()
        assert set(result) == {
            "text_content",
            "metadata",
            "tables",
            "formulas",
            "statistics",
            "validation",
        }
