"""Core TOON encoding functionality."""

from __future__ import annotations

from typing import Any

from toon_codec.errors import CyclicValueError, NestingDepthError, UnsupportedTypeError
from toon_codec.estimator import estimate_size, savings_percent, to_generic_json
from toon_codec.grammar import (
    CELL_DELIMITER,
    EMPTY_MAPPING,
    EMPTY_SEQUENCE,
    INDENT_CHAR,
    LIST_ITEM_MARKER,
    encode_key,
    escape_csv,
    escape_generic,
    format_header,
    format_literal,
    format_number,
)
from toon_codec.logging import get_logger
from toon_codec.models import EncodeOptions
from toon_codec.values import is_mapping, is_sequence, tabular_fields

logger = get_logger(__name__)

BANNER_TEMPLATE = "# TOON Format - Estimated {tokens} tokens ({savings:.1f}% savings vs generic JSON)"

# (relative depth, text) pairs; a node encodes to one line iff it yields one pair
Lines = list[tuple[int, str]]


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """Encode a value into TOON format.

    Args:
        value: The value to encode (see ``toon_codec.values``)
        options: Optional encoding options

    Returns:
        TOON-formatted string

    Raises:
        CyclicValueError: If a container contains itself
        UnsupportedTypeError: If a value is outside the TOON value model
        NestingDepthError: If nesting exceeds ``options.max_depth``

    Examples:
        >>> encode([{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}])
        '[2]{id,name}:\\n  1,Alice\\n  2,Bob'
    """
    options = options or EncodeOptions()
    lines = _Encoder(options.max_depth).encode_value(value, 0, "$")
    body = render_lines(lines, options.indent)

    if options.include_size_banner:
        toon_size = estimate_size(body)
        generic_size = estimate_size(to_generic_json(value))
        banner = BANNER_TEMPLATE.format(
            tokens=toon_size,
            savings=savings_percent(generic_size, toon_size),
        )
        body = f"{banner}\n{body}"

    logger.debug("Encoded value", chars=len(body), lines=len(lines))
    return body


def render_lines(lines: Lines, indent: int) -> str:
    """Join encoded lines, indenting each by its depth."""
    return "\n".join(f"{INDENT_CHAR * (depth * indent)}{text}" for depth, text in lines)


def _attach(prefix: str, child: Lines) -> Lines:
    """Attach a child node to a ``key:`` or ``-`` prefix.

    Single-line children share the prefix line; others go one level deeper.
    """
    if len(child) == 1:
        return [(0, f"{prefix} {child[0][1]}")]
    return [(0, prefix), *((depth + 1, text) for depth, text in child)]


class _Encoder:
    """Depth-first encoder for a single ``encode`` call."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        # ids of containers on the current path
        self._active: set[int] = set()

    def encode_value(self, value: Any, depth: int, path: str) -> Lines:
        if depth > self.max_depth:
            raise NestingDepthError(depth, self.max_depth)

        literal = format_literal(value)
        if literal is not None:
            return [(0, literal)]
        if isinstance(value, str):
            return [(0, escape_generic(value))]
        if isinstance(value, (int, float)):
            return [(0, self._encode_number(value, path))]
        if is_mapping(value) or is_sequence(value):
            return self._encode_container(value, depth, path)

        raise UnsupportedTypeError(value, path)

    def _encode_number(self, value: int | float, path: str) -> str:
        try:
            text = format_number(value)
        except ValueError as exc:
            # int digit limit of str()
            raise UnsupportedTypeError(value, path, str(exc)) from exc
        if text in ("nan", "inf", "-inf"):
            raise UnsupportedTypeError(value, path, "non-finite numbers are not supported")
        return text

    def _encode_container(self, value: Any, depth: int, path: str) -> Lines:
        marker = id(value)
        if marker in self._active:
            raise CyclicValueError(path)

        self._active.add(marker)
        if is_mapping(value):
            lines = self._encode_mapping(value, depth, path)
        else:
            lines = self._encode_sequence(value, depth, path)
        self._active.discard(marker)
        return lines

    def _encode_mapping(self, mapping: dict[str, Any], depth: int, path: str) -> Lines:
        if not mapping:
            return [(0, EMPTY_MAPPING)]

        lines: Lines = []
        for key, item in mapping.items():
            if not isinstance(key, str):
                raise UnsupportedTypeError(key, path, "mapping keys must be strings")
            child = self.encode_value(item, depth + 1, f"{path}.{key}")
            lines.extend(_attach(f"{encode_key(key)}:", child))
        return lines

    def _encode_sequence(self, sequence: list[Any], depth: int, path: str) -> Lines:
        if not sequence:
            return [(0, EMPTY_SEQUENCE)]

        fields = tabular_fields(sequence)
        if fields is not None:
            return self._encode_tabular(sequence, fields, depth, path)

        lines: Lines = []
        for index, item in enumerate(sequence):
            child = self.encode_value(item, depth + 1, f"{path}[{index}]")
            lines.extend(_attach(LIST_ITEM_MARKER, child))
        return lines

    def _encode_tabular(
        self,
        rows: list[dict[str, Any]],
        fields: list[str],
        depth: int,
        path: str,
    ) -> Lines:
        """Encode a uniform object array as a header plus CSV rows."""
        if depth + 1 > self.max_depth:
            raise NestingDepthError(depth + 1, self.max_depth)
        for field in fields:
            if not isinstance(field, str):
                raise UnsupportedTypeError(field, path, "mapping keys must be strings")

        lines: Lines = [(0, format_header(len(rows), fields))]
        for index, row in enumerate(rows):
            cells = [
                self._encode_cell(row[field], f"{path}[{index}].{field}") for field in fields
            ]
            lines.append((1, CELL_DELIMITER.join(cells)))
        return lines

    def _encode_cell(self, value: Any, path: str) -> str:
        literal = format_literal(value)
        if literal is not None:
            return literal
        if isinstance(value, str):
            return escape_csv(value)
        if isinstance(value, (int, float)):
            return self._encode_number(value, path)
        # tabular_fields only admits empty containers besides scalars
        return EMPTY_MAPPING if is_mapping(value) else EMPTY_SEQUENCE
