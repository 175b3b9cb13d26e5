"""Encoding repair for delimited text that failed the validity check."""

import re

INVALID_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
NULL_BYTE = "\x00"
REPLACEMENT_CHAR = "\ufffd"


def has_invalid_characters(text: str) -> bool:
    """Return True if the text carries null bytes, control or replacement chars."""
    return (
        NULL_BYTE in text
        or REPLACEMENT_CHAR in text
        or INVALID_CONTROL_CHARS.search(text) is not None
    )


def clean_text(
    text: str,
    *,
    remove_null_bytes: bool = True,
    remove_control_chars: bool = True,
    control_char_replacement: str = " ",
    remove_replacement_chars: bool = False,
    normalize_whitespace: bool = True,
) -> str:
    """Strip null bytes and control characters from text.

    Tab, line feed and carriage return are not control characters for this
    purpose. With ``normalize_whitespace`` every whitespace run collapses to a
    single space and the result is trimmed, which also flattens line breaks.

    Args:
        text: Raw decoded text.
        remove_null_bytes: Drop NUL characters entirely.
        remove_control_chars: Replace other control characters.
        control_char_replacement: Replacement for control characters.
        remove_replacement_chars: Drop U+FFFD characters.
        normalize_whitespace: Collapse whitespace runs and trim.

    Returns:
        The cleaned text.
    """
    cleaned = text
    if remove_null_bytes:
        cleaned = cleaned.replace(NULL_BYTE, "")
    if remove_control_chars:
        cleaned = INVALID_CONTROL_CHARS.sub(control_char_replacement, cleaned)
    if remove_replacement_chars:
        cleaned = cleaned.replace(REPLACEMENT_CHAR, "")
    if normalize_whitespace:
        cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned
