"""Tests for grid normalization and header inference."""

from spreadsheet_extraction.services.grid_normalizer import (
    infer_headers,
    is_numeric_text,
    normalize_sheet,
    pad_rows,
)


class TestPadRows:
    def test_pads_to_widest_row(self) -> None:
        padded, column_count = pad_rows([["a"], ["b", "c", "d"], []])
        assert column_count == 3
        assert padded == [["a", "", ""], ["b", "c", "d"], ["", "", ""]]

    def test_no_rows(self) -> None:
        assert pad_rows([]) == ([], 0)

    def test_input_rows_are_not_modified(self) -> None:
        rows = [["a"], ["b", "c"]]
        pad_rows(rows)
        assert rows == [["a"], ["b", "c"]]


class TestIsNumericText:
    def test_integers_and_decimals(self) -> None:
        for value in ["0", "25", "-3", "2.5", "-0.75"]:
            assert is_numeric_text(value)

    def test_non_numeric(self) -> None:
        for value in ["", "abc", "1e5", "1,000", ".5", "5.", "+1", " 1", "25\n"]:
            assert not is_numeric_text(value)


class TestInferHeaders:
    """Tests for the header heuristic."""

    def test_text_row_over_numeric_row(self) -> None:
        assert infer_headers([["Name", "Age"], ["John", "25"]]) == ["Name", "Age"]

    def test_all_numeric_rows(self) -> None:
        assert infer_headers([["1", "2"], ["3", "4"]]) == []

    def test_single_row(self) -> None:
        assert infer_headers([["Name", "Age"]]) == []

    def test_second_row_without_numbers(self) -> None:
        assert infer_headers([["Name", "City"], ["John", "Paris"]]) == []

    def test_any_alpha_cell_is_enough(self) -> None:
        assert infer_headers([["1", "x2"], ["a", "3.5"]]) == ["1", "x2"]

    def test_trailing_newline_is_not_numeric(self) -> None:
        assert infer_headers([["Name", "Age"], ["John", "25\n"]]) == []


class TestNormalizeSheet:
    def test_header_sheet(self) -> None:
        sheet = normalize_sheet("Sheet1", [["Name", "Age"], ["John", "25", "extra"]])
        assert sheet.column_count == 3
        assert sheet.grid == [["Name", "Age", ""], ["John", "25", "extra"]]
        assert sheet.has_headers is True
        assert sheet.headers == ["Name", "Age", ""]

    def test_every_row_matches_column_count(self) -> None:
        sheet = normalize_sheet("Sheet1", [[], ["a", "b"], ["c"]])
        assert all(len(row) == sheet.column_count for row in sheet.grid)
        assert sheet.column_count == 2

    def test_empty_sheet(self) -> None:
        sheet = normalize_sheet("Sheet2", [])
        assert sheet.row_count == 0
        assert sheet.column_count == 0
        assert sheet.has_headers is False
        assert sheet.headers == []
