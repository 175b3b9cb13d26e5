"""Element and cell-address helpers shared by the OOXML part parsers.

Elements are matched on local name so parts that bind the spreadsheetml
namespace to a prefix (``<x:row>``) decode the same as default-namespace parts.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from xml.etree import ElementTree as ET

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

SHARED_STRINGS_PART = "xl/sharedStrings.xml"
WORKSHEET_PART_PATTERN = re.compile(r"^xl/worksheets/sheet(\d+)\.xml$")

_ADDRESS_PATTERN = re.compile(r"^\$?([A-Za-z]{1,3})\$?(\d+)$")


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield direct children with the given local name, in document order."""
    for child in element:
        if local_name(child.tag) == name:
            yield child


def find_child(element: ET.Element, name: str) -> ET.Element | None:
    return next(children(element, name), None)


def find_descendant(element: ET.Element, name: str) -> ET.Element | None:
    for node in element.iter():
        if local_name(node.tag) == name:
            return node
    return None


def column_index(letters: str) -> int:
    """Convert column letters to a 1-based index. A=1, Z=26, AA=27."""
    result = 0
    for char in letters.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


def column_letter(index: int) -> str:
    """Convert a 1-based column index to letters. 1=A, 27=AA."""
    result = ""
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def split_address(address: str) -> tuple[int, int] | None:
    """Parse ``B12`` into ``(row, column)`` (both 1-based), or None."""
    match = _ADDRESS_PATTERN.match(address.strip())
    if not match:
        return None
    return int(match.group(2)), column_index(match.group(1))


def worksheet_parts(member_names: list[str]) -> list[str]:
    """Return worksheet part names sorted by their numeric suffix."""
    numbered: list[tuple[int, str]] = []
    for name in member_names:
        match = WORKSHEET_PART_PATTERN.match(name)
        if match:
            numbered.append((int(match.group(1)), name))
    return [name for _, name in sorted(numbered)]
