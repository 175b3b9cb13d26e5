"""Test helpers for building OOXML workbook archives.

Archives are assembled directly with zipfile so tests control every part,
including malformed and missing ones.

Example usage:
    from tests.fixtures import build_xlsx, shared_strings_xml, worksheet_xml

    content = build_xlsx(
        [worksheet_xml('<row r="1"><c r="A1" t="s"><v>0</v></c></row>')],
        shared_strings=shared_strings_xml(["Name"]),
    )
"""

import io
import struct
import zipfile
from xml.sax.saxutils import escape

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

CONTENT_TYPES = (
    f"{XML_DECLARATION}"
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "</Types>"
)


def shared_strings_xml(items: list[str]) -> str:
    """Build a sharedStrings part with one plain ``si`` per item."""
    entries = "".join(f"<si><t>{escape(item)}</t></si>" for item in items)
    return (
        f'{XML_DECLARATION}<sst xmlns="{SPREADSHEET_NS}" '
        f'count="{len(items)}" uniqueCount="{len(items)}">{entries}</sst>'
    )


def worksheet_xml(rows: str) -> str:
    """Wrap raw ``<row>`` markup in a worksheet part."""
    return (
        f'{XML_DECLARATION}<worksheet xmlns="{SPREADSHEET_NS}">'
        f"<sheetData>{rows}</sheetData></worksheet>"
    )


def build_xlsx(
    worksheets: list[str],
    shared_strings: str | None = None,
    extra_parts: dict[str, str] | None = None,
) -> bytes:
    """Zip worksheet parts (sheet1.xml, sheet2.xml, ...) into an archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        if shared_strings is not None:
            archive.writestr("xl/sharedStrings.xml", shared_strings)
        for position, worksheet in enumerate(worksheets, start=1):
            archive.writestr(f"xl/worksheets/sheet{position}.xml", worksheet)
        for name, data in (extra_parts or {}).items():
            archive.writestr(name, data)
    return buffer.getvalue()


def patch_member(
    content: bytes,
    name: str,
    compress_type: int | None = None,
    flag_bits: int | None = None,
    corrupt_payload: bool = False,
) -> bytes:
    """Rewrite one member's zip headers or payload in place.

    The compression method and flag bits are patched in both the local and
    the central directory header. A corrupt payload keeps its length but is
    filled with 0xFF, which is not a valid deflate block.
    """
    data = bytearray(content)
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        info = archive.getinfo(name)

    local = info.header_offset
    name_length, extra_length = struct.unpack_from("<HH", data, local + 26)
    if compress_type is not None:
        struct.pack_into("<H", data, local + 8, compress_type)
    if flag_bits is not None:
        struct.pack_into("<H", data, local + 6, flag_bits)
    if corrupt_payload:
        start = local + 30 + name_length + extra_length
        data[start : start + info.compress_size] = b"\xff" * info.compress_size

    end_record = data.rfind(b"PK\x05\x06")
    entries, _, directory = struct.unpack_from("<HII", data, end_record + 10)
    position = directory
    for _ in range(entries):
        name_length, extra_length, comment_length = struct.unpack_from(
            "<HHH", data, position + 28
        )
        if data[position + 46 : position + 46 + name_length] == name.encode():
            if compress_type is not None:
                struct.pack_into("<H", data, position + 10, compress_type)
            if flag_bits is not None:
                struct.pack_into("<H", data, position + 8, flag_bits)
            break
        position += 46 + name_length + extra_length + comment_length
    return bytes(data)


def people_workbook() -> bytes:
    """One sheet: header row of shared strings and one data row."""
    return build_xlsx(
        [
            worksheet_xml(
                '<row r="1"><c r="A1" t="s"><v>0</v></c><c r="B1" t="s"><v>1</v></c></row>'
                '<row r="2"><c r="A2" t="s"><v>2</v></c><c r="B2"><v>25</v></c></row>'
            )
        ],
        shared_strings=shared_strings_xml(["Name", "Age", "John"]),
    )
