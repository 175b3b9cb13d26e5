from __future__ import annotations

import io
from datetime import datetime

import pytest
from openpyxl import Workbook

from tests.fixtures import people_workbook


@pytest.fixture
def people_xlsx() -> bytes:
    """Minimal archive: shared strings Name/Age/John and one worksheet."""
    return people_workbook()


@pytest.fixture
def openpyxl_xlsx() -> bytes:
    """Two-sheet workbook written by openpyxl."""
    wb = Workbook()
    ws1 = wb.active
    ws1.title = "Sales"
    ws1["A1"] = "Name"
    ws1["B1"] = "Amount"
    ws1["A2"] = "Alice"
    ws1["B2"] = 123.45
    ws1["C2"] = True
    ws1["D2"] = datetime(2024, 1, 15)
    ws1["E2"] = "=SUM(B2,B3)"
    ws1["A3"] = "Bob"
    ws1["B3"] = 10

    ws2 = wb.create_sheet("Notes")
    ws2["A1"] = "Secondary"
    ws2["C1"] = "Gap"

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def sample_csv() -> bytes:
    return b"Name,Age,City\nJohn,25,Paris\nJane,31,\"Lyon, FR\"\n"
