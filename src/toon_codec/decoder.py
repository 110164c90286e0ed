"""Core TOON decoding functionality.

The decoder is a single forward scan over lines. Indentation gives the
nesting depth of each line and the line's shape decides what it holds:

- ``[N]{f1,f2}:`` starts a tabular array of N CSV rows
- ``- value`` or ``-`` is a list item (inline value or indented block)
- ``key: value`` or ``key:`` is a mapping entry (inline value or indented block)
- anything else is a scalar
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from toon_codec.errors import FormatError, NestingDepthError
from toon_codec.grammar import (
    EMPTY_MAPPING,
    EMPTY_SEQUENCE,
    ENTRY_PATTERN,
    HEADER_PATTERN,
    INDENT_CHAR,
    LIST_ITEM_MARKER,
    LIST_ITEM_PREFIX,
    LITERALS,
    QUOTE,
    decode_key,
    is_comment,
    is_row_open,
    parse_number,
    split_fields,
    split_row,
    unescape_generic,
)
from toon_codec.logging import get_logger
from toon_codec.models import DecodeOptions

logger = get_logger(__name__)


class _Line(NamedTuple):
    """A structural line: 1-based number, depth and text without indentation."""

    number: int
    depth: int
    content: str


def decode(text: str, options: DecodeOptions | None = None) -> Any:
    """Decode TOON text into a value.

    Comment lines (first non-space character ``#``) and blank lines are
    ignored, so a size banner produced by the encoder is skipped.

    Args:
        text: TOON-formatted string
        options: Optional decoding options

    Returns:
        The decoded value

    Raises:
        FormatError: If the text is malformed (carries the line number)
        NestingDepthError: If nesting exceeds ``options.max_depth``

    Examples:
        >>> decode("[2]{id,name}:\\n  1,Alice\\n  2,Bob")
        [{'id': 1, 'name': 'Alice'}, {'id': 2, 'name': 'Bob'}]
    """
    options = options or DecodeOptions()
    decoder = _Decoder(text, options)
    value = decoder.decode_document()
    logger.debug("Decoded text", lines=len(decoder.lines))
    return value


def parse_scalar(text: str, line: int | None = None) -> Any:
    """Parse a scalar or empty-container literal using generic escaping."""
    if text.startswith(QUOTE):
        return unescape_generic(text, line)
    if text in LITERALS:
        return LITERALS[text]
    if text == EMPTY_SEQUENCE:
        return []
    if text == EMPTY_MAPPING:
        return {}

    number = parse_number(text, line)
    if number is not None:
        return number
    if QUOTE in text:
        raise FormatError(f"Unexpected quote in unquoted string: {text}", line)
    return text


def parse_cell(text: str, quoted: bool, line: int | None = None) -> Any:
    """Parse one tabular cell that has already been CSV-unescaped."""
    if quoted:
        return text
    if not text:
        # Empty unquoted cells are null; empty strings are written as ""
        return None
    if text in LITERALS:
        return LITERALS[text]
    if text == EMPTY_SEQUENCE:
        return []
    if text == EMPTY_MAPPING:
        return {}

    number = parse_number(text, line)
    return text if number is None else number


class _Decoder:
    """Line cursor for a single ``decode`` call."""

    def __init__(self, text: str, options: DecodeOptions) -> None:
        self.lines = text.split("\n")
        self.indent = options.indent
        self.max_depth = options.max_depth
        self.pos = 0

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def peek(self) -> _Line | None:
        """Return the next structural line, skipping blanks and comments."""
        while self.pos < len(self.lines):
            raw = self.lines[self.pos]
            if raw.strip() and not is_comment(raw):
                return self._measure(raw, self.pos + 1)
            self.pos += 1
        return None

    def advance(self) -> None:
        self.pos += 1

    def _measure(self, raw: str, number: int) -> _Line:
        content = raw.lstrip(INDENT_CHAR)
        spaces = len(raw) - len(content)
        # CRLF line endings
        content = content.removesuffix("\r")
        if content.startswith("\t"):
            raise FormatError("Tabs are not allowed in indentation", number)
        if spaces % self.indent:
            raise FormatError(
                f"Indentation of {spaces} spaces is not a multiple of {self.indent}",
                number,
            )
        return _Line(number, spaces // self.indent, content)

    def _check_depth(self, depth: int, number: int) -> None:
        if depth > self.max_depth:
            raise NestingDepthError(depth, self.max_depth, number)

    def _expect_shallower(self, depth: int) -> None:
        """Fail if the next line sits at ``depth`` or deeper."""
        line = self.peek()
        if line is not None and line.depth >= depth:
            raise FormatError(f"Unexpected indentation or line: {line.content}", line.number)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def decode_document(self) -> Any:
        line = self.peek()
        if line is None:
            raise FormatError("Document is empty")
        if line.depth != 0:
            raise FormatError("Document must start at column 0", line.number)

        value = self.parse_block(0)
        self._expect_shallower(0)
        return value

    def parse_block(self, depth: int) -> Any:
        """Parse the node starting at the current line, which is at ``depth``."""
        line = self.peek()
        if line is None:
            raise FormatError("Unexpected end of document")
        if line.depth != depth:
            raise FormatError(f"Expected a line at depth {depth}, found {line.depth}", line.number)
        self._check_depth(depth, line.number)

        header = HEADER_PATTERN.fullmatch(line.content)
        if header is not None:
            return self._parse_tabular(depth, line, header)
        if line.content == LIST_ITEM_MARKER or line.content.startswith(LIST_ITEM_PREFIX):
            return self._parse_sequence(depth)
        if ENTRY_PATTERN.fullmatch(line.content):
            return self._parse_mapping(depth)

        self.advance()
        return parse_scalar(line.content, line.number)

    def _parse_child(self, depth: int, parent: _Line) -> Any:
        """Parse the indented block owned by a ``key:`` or ``-`` line."""
        line = self.peek()
        if line is None or line.depth <= depth:
            raise FormatError(f"Expected an indented block after '{parent.content}'", parent.number)
        if line.depth != depth + 1:
            raise FormatError(
                f"Indentation jumps from depth {depth} to {line.depth}", line.number
            )
        return self.parse_block(depth + 1)

    def _parse_mapping(self, depth: int) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while (line := self.peek()) is not None and line.depth == depth:
            match = ENTRY_PATTERN.fullmatch(line.content)
            if match is None:
                raise FormatError(f"Expected 'key: value', found: {line.content}", line.number)

            key = decode_key(match["key"], line.number)
            if key in result:
                raise FormatError(f"Duplicate key: {key}", line.number)

            self.advance()
            rest = match["rest"]
            if rest:
                result[key] = self.parse_inline(rest, depth + 1, line.number)
            else:
                result[key] = self._parse_child(depth, line)
            self._expect_shallower(depth + 1)
        return result

    def _parse_sequence(self, depth: int) -> list[Any]:
        items: list[Any] = []
        while (line := self.peek()) is not None and line.depth == depth:
            self.advance()
            if line.content == LIST_ITEM_MARKER:
                items.append(self._parse_child(depth, line))
            elif line.content.startswith(LIST_ITEM_PREFIX):
                rest = line.content[len(LIST_ITEM_PREFIX):]
                items.append(self.parse_inline(rest, depth + 1, line.number))
            else:
                raise FormatError(f"Expected list item, found: {line.content}", line.number)
            self._expect_shallower(depth + 1)
        return items

    def _parse_tabular(self, depth: int, header: _Line, match: re.Match[str]) -> list[dict[str, Any]]:
        count = parse_number(match["count"], header.number)
        fields = split_fields(match["fields"], header.number)
        self.advance()
        self._check_depth(depth + 1, header.number)

        rows: list[dict[str, Any]] = []
        while len(rows) < count:
            line = self.peek()
            if line is None or line.depth <= depth:
                raise FormatError(
                    f"Header [{count}] declares {count} rows but only {len(rows)} found",
                    header.number,
                )
            if line.depth != depth + 1:
                raise FormatError(
                    f"Indentation jumps from depth {depth} to {line.depth}", line.number
                )

            cells = split_row(self._read_row(line), line.number)
            if len(cells) != len(fields):
                raise FormatError(
                    f"Row has {len(cells)} values but header declares {len(fields)} fields",
                    line.number,
                )
            rows.append(
                {
                    field: parse_cell(text, quoted, line.number)
                    for field, (text, quoted) in zip(fields, cells)
                }
            )

        extra = self.peek()
        if extra is not None and extra.depth > depth:
            raise FormatError(
                f"Header [{count}] on line {header.number} declares {count} rows "
                "but more are present",
                extra.number,
            )
        return rows

    def _read_row(self, line: _Line) -> str:
        """Read a row, joining physical lines while a quoted cell is open.

        Rows are read from the raw lines since a quoted cell may end in a
        carriage return that belongs to its value.
        """
        text = self.lines[line.number - 1][line.depth * self.indent :]
        self.advance()
        while is_row_open(text):
            if self.pos >= len(self.lines):
                raise FormatError("Unterminated quoted cell", line.number)
            text = f"{text}\n{self.lines[self.pos]}"
            self.advance()
        return text.removesuffix("\r")

    # ------------------------------------------------------------------
    # Inline values
    # ------------------------------------------------------------------

    def parse_inline(self, text: str, depth: int, number: int) -> Any:
        """Parse the value written after ``- `` or ``key: `` on one line."""
        self._check_depth(depth, number)

        if text == LIST_ITEM_MARKER:
            raise FormatError("List item has no value", number)
        if text.startswith(LIST_ITEM_PREFIX):
            return [self.parse_inline(text[len(LIST_ITEM_PREFIX):], depth + 1, number)]
        if HEADER_PATTERN.fullmatch(text):
            raise FormatError("Tabular header must start its own line", number)

        match = ENTRY_PATTERN.fullmatch(text)
        if match is not None:
            if not match["rest"]:
                raise FormatError(f"Inline entry '{text}' has no value", number)
            key = decode_key(match["key"], number)
            return {key: self.parse_inline(match["rest"], depth + 1, number)}

        return parse_scalar(text, number)
