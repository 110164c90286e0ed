"""Textual conventions shared by the TOON encoder and decoder.

Two escaping conventions exist and must never be mixed:

- generic escaping (backslash escapes) for standalone strings, mapping
  values, bullet items and keys
- CSV escaping (quote doubling) for cells of tabular rows
"""

from __future__ import annotations

import math
import re
from typing import Any

from toon_codec.errors import FormatError
from toon_codec.values import UNDEFINED

INDENT_CHAR = " "
LIST_ITEM_MARKER = "-"
LIST_ITEM_PREFIX = "- "
COMMENT_PREFIX = "#"
CELL_DELIMITER = ","
QUOTE = '"'

NULL_LITERAL = "null"
UNDEFINED_LITERAL = "undefined"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"
EMPTY_SEQUENCE = "[]"
EMPTY_MAPPING = "{}"

LITERALS: dict[str, Any] = {
    NULL_LITERAL: None,
    UNDEFINED_LITERAL: UNDEFINED,
    TRUE_LITERAL: True,
    FALSE_LITERAL: False,
}

INTEGER_PATTERN = re.compile(r"-?\d+")
FLOAT_PATTERN = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
# Anything that could be mistaken for a number gets quoted, even if
# FLOAT_PATTERN would not accept it.
NUMERIC_LIKE_PATTERN = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
BARE_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")
QUOTED_TOKEN = r'"(?:[^"\\]|\\.)*"'
KEY_TOKEN = rf"(?:[A-Za-z_][A-Za-z0-9_.\-]*|{QUOTED_TOKEN})"
ENTRY_PATTERN = re.compile(rf"(?P<key>{KEY_TOKEN}):(?: (?P<rest>.*))?")
HEADER_PATTERN = re.compile(r"\[(?P<count>\d+)\]\{(?P<fields>.*)\}:")
FIELD_PATTERN = re.compile(rf"({KEY_TOKEN})(,|$)")

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
_RESERVED_WORDS = frozenset([*LITERALS, EMPTY_SEQUENCE, EMPTY_MAPPING])


# ============================================================================
# Scalars
# ============================================================================


def format_number(value: int | float) -> str:
    """Format a number in its canonical decimal form."""
    if isinstance(value, int):
        return str(int(value))
    return repr(float(value))


def format_literal(value: Any) -> str | None:
    """Return the literal text for null/undefined/booleans, else None."""
    if value is None:
        return NULL_LITERAL
    if value is UNDEFINED:
        return UNDEFINED_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    return None


def parse_number(text: str, line: int | None = None) -> int | float | None:
    """Parse a numeral, or return None if the text is not one.

    Raises:
        FormatError: If the numeral is too large to represent
    """
    if INTEGER_PATTERN.fullmatch(text):
        try:
            return int(text)
        except ValueError as exc:
            raise FormatError(f"Integer with {len(text)} digits is too large", line) from exc
    if FLOAT_PATTERN.fullmatch(text):
        number = float(text)
        if not math.isfinite(number):
            raise FormatError(f"Number out of range: {text}", line)
        return number
    return None


def _is_ambiguous(value: str) -> bool:
    """Check if a bare string would read back as something else."""
    return (
        not value
        or value != value.strip()
        or value in _RESERVED_WORDS
        or NUMERIC_LIKE_PATTERN.fullmatch(value) is not None
    )


# ============================================================================
# Generic escaping
# ============================================================================


def needs_generic_quotes(value: str) -> bool:
    """Check if a string must be quoted under generic escaping."""
    if any(ch in value for ch in ("\n", '"', ",")):
        return True
    if _is_ambiguous(value):
        return True
    if any(ch in value for ch in (":", "\\", "\r", "\t")):
        return True
    return value[0] in (LIST_ITEM_MARKER, COMMENT_PREFIX, "[", "{")


def escape_generic(value: str) -> str:
    """Escape a string for standalone use.

    Examples:
        >>> escape_generic("plain")
        'plain'
        >>> escape_generic('say "hi", then go')
        '"say \\\\"hi\\\\", then go"'
    """
    if not needs_generic_quotes(value):
        return value
    body = "".join(_ESCAPES.get(ch, ch) for ch in value)
    return f"{QUOTE}{body}{QUOTE}"


def unescape_generic(token: str, line: int | None = None) -> str:
    """Decode a generic quoted string token, including its quotes."""
    if len(token) < 2 or token[0] != QUOTE or token[-1] != QUOTE:
        raise FormatError(f"Malformed quoted string: {token}", line)

    chars: list[str] = []
    body = token[1:-1]
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\":
            if i + 1 >= len(body):
                raise FormatError("Dangling escape in quoted string", line)
            escaped = body[i + 1]
            if escaped not in _UNESCAPES:
                raise FormatError(f"Unknown escape sequence \\{escaped}", line)
            chars.append(_UNESCAPES[escaped])
            i += 2
            continue
        if ch == QUOTE:
            raise FormatError("Unescaped quote inside quoted string", line)
        chars.append(ch)
        i += 1
    return "".join(chars)


# ============================================================================
# CSV escaping
# ============================================================================


def needs_csv_quotes(value: str) -> bool:
    """Check if a string cell must be quoted under CSV escaping."""
    if any(ch in value for ch in (CELL_DELIMITER, QUOTE, "\n")):
        return True
    if _is_ambiguous(value) or "\r" in value:
        return True
    return value.startswith(COMMENT_PREFIX)


def escape_csv(value: str) -> str:
    """Escape a string cell by doubling embedded quotes.

    Examples:
        >>> escape_csv("a,b")
        '"a,b"'
        >>> escape_csv('say "hi" now')
        '"say ""hi"" now"'
    """
    if not needs_csv_quotes(value):
        return value
    return f"{QUOTE}{value.replace(QUOTE, QUOTE * 2)}{QUOTE}"


def split_row(row: str, line: int | None = None) -> list[tuple[str, bool]]:
    """Split a tabular row on unquoted commas.

    Quoted cells are unescaped (doubled quotes collapse to one).

    Returns:
        List of (text, was_quoted) pairs, one per cell
    """
    cells: list[tuple[str, bool]] = []
    i = 0
    length = len(row)
    while True:
        if i < length and row[i] == QUOTE:
            chars: list[str] = []
            i += 1
            while True:
                if i >= length:
                    raise FormatError("Unterminated quoted cell", line)
                if row[i] == QUOTE:
                    if i + 1 < length and row[i + 1] == QUOTE:
                        chars.append(QUOTE)
                        i += 2
                        continue
                    i += 1
                    break
                chars.append(row[i])
                i += 1
            cells.append(("".join(chars), True))
            if i < length and row[i] != CELL_DELIMITER:
                raise FormatError("Unexpected text after quoted cell", line)
        else:
            end = row.find(CELL_DELIMITER, i)
            if end == -1:
                end = length
            cell = row[i:end]
            if QUOTE in cell:
                raise FormatError(f"Stray quote in unquoted cell: {cell}", line)
            cells.append((cell, False))
            i = end

        if i >= length:
            return cells
        # Skip the delimiter
        i += 1


def is_row_open(text: str) -> bool:
    """Check if a row still has an unclosed quoted cell.

    Doubled quotes and open/close pairs each add two quote characters, so
    an odd count means a quoted cell continues on the next line.
    """
    return text.count(QUOTE) % 2 == 1


# ============================================================================
# Keys
# ============================================================================


def encode_key(key: str) -> str:
    """Encode a mapping key or header field name."""
    if BARE_KEY_PATTERN.fullmatch(key):
        return key
    body = "".join(_ESCAPES.get(ch, ch) for ch in key)
    return f"{QUOTE}{body}{QUOTE}"


def decode_key(token: str, line: int | None = None) -> str:
    if token.startswith(QUOTE):
        return unescape_generic(token, line)
    return token


def split_fields(text: str, line: int | None = None) -> list[str]:
    """Split a header field list such as ``id,"full name",email``."""
    fields: list[str] = []
    pos = 0
    while pos < len(text):
        match = FIELD_PATTERN.match(text, pos)
        if match is None:
            raise FormatError(f"Malformed header field list: {{{text}}}", line)
        fields.append(decode_key(match.group(1), line))
        pos = match.end()
        if match.group(2) == "," and pos == len(text):
            raise FormatError("Trailing comma in header field list", line)
    if not fields:
        raise FormatError("Header declares no fields", line)
    if len(set(fields)) != len(fields):
        raise FormatError("Duplicate field in header", line)
    return fields


def format_header(count: int, fields: list[str]) -> str:
    """Format a tabular array header, e.g. ``[2]{id,name}:``."""
    return f"[{count}]{{{CELL_DELIMITER.join(encode_key(f) for f in fields)}}}:"


def is_comment(line: str) -> bool:
    return line.lstrip(INDENT_CHAR).startswith(COMMENT_PREFIX)
