"""Shared-string table builder for OOXML workbooks."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from xml.etree import ElementTree as ET

from spreadsheet_extraction.services.ooxml import children, find_child

logger = logging.getLogger(__name__)


class SharedStringTable:
    """Index-addressed, read-only list of resolved shared strings.

    ``parse_error`` is set when the part existed but could not be parsed.
    """

    def __init__(
        self, values: list[str] | None = None, parse_error: str | None = None
    ) -> None:
        self._values: tuple[str, ...] = tuple(values or ())
        self.parse_error = parse_error

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def resolve(self, index_text: str | None) -> str:
        """Look up a cell's index text; anything unusable resolves to ""."""
        if index_text is None:
            return ""
        try:
            index = int(index_text.strip())
        except ValueError:
            return ""
        if 0 <= index < len(self._values):
            return self._values[index]
        return ""

    def to_list(self) -> list[str]:
        return list(self._values)


def string_item_text(item: ET.Element) -> str:
    """Resolve one ``si`` (or ``is``) element to its text.

    A direct ``t`` child is used verbatim. Otherwise the ``t`` text of every
    ``r`` run is concatenated in document order. Phonetic runs are ignored.
    """
    direct = find_child(item, "t")
    if direct is not None:
        return direct.text or ""

    parts: list[str] = []
    for run in children(item, "r"):
        run_text = find_child(run, "t")
        if run_text is not None and run_text.text:
            parts.append(run_text.text)
    return "".join(parts)


def parse_shared_strings(content: bytes | None) -> SharedStringTable:
    """Build the shared-string table from the raw part bytes.

    Args:
        content: Bytes of ``xl/sharedStrings.xml``, or None when the archive
            has no such part.

    Returns:
        The table. Missing or malformed parts give an empty table.
    """
    if content is None:
        logger.debug("Workbook has no shared-strings part")
        return SharedStringTable()

    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        logger.warning(f"Malformed shared-strings part, using empty table: {e}")
        return SharedStringTable(parse_error=str(e))

    values = [string_item_text(item) for item in children(root, "si")]
    logger.debug(f"Parsed {len(values)} shared strings")
    return SharedStringTable(values)
