"""Size estimation and JSON/TOON comparison.

Sizes are rough token estimates (about four characters per token), not
the output of a real tokenizer.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any

from toon_codec.models import SizeComparison
from toon_codec.values import UNDEFINED, is_mapping, is_sequence

if TYPE_CHECKING:
    from toon_codec.models import EncodeOptions

CHARS_PER_TOKEN = 4


def estimate_size(text: str) -> int:
    """Estimate the token count of a text.

    Examples:
        >>> estimate_size("")
        0
        >>> estimate_size("hello")
        2
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def savings_percent(generic_size: int, toon_size: int) -> float:
    """Percent saved by TOON relative to the generic size.

    Negative when TOON is larger. Never clamped.
    """
    if generic_size == 0:
        return 0.0
    return (generic_size - toon_size) / generic_size * 100


def _strip_undefined(value: Any) -> Any:
    """Map UNDEFINED onto what JSON can express.

    Mapping entries holding UNDEFINED are dropped and sequence items
    become null, matching how JavaScript's JSON.stringify treats undefined.
    """
    if value is UNDEFINED:
        return None
    if is_mapping(value):
        return {k: _strip_undefined(v) for k, v in value.items() if v is not UNDEFINED}
    if is_sequence(value):
        return [_strip_undefined(item) for item in value]
    return value


def to_generic_json(value: Any) -> str:
    """Serialize a value as compact JSON, the baseline for comparisons."""
    return json.dumps(_strip_undefined(value), separators=(",", ":"), ensure_ascii=False)


def compare(value: Any, options: EncodeOptions | None = None) -> SizeComparison:
    """Compare the estimated size of a value as generic JSON and as TOON.

    Args:
        value: Value to compare
        options: Optional encoding options (the size banner is never included)

    Returns:
        SizeComparison with both texts, their sizes and the savings percent

    Examples:
        >>> compare({}).savings_percent
        0.0
    """
    from toon_codec.encoder import encode

    if options is not None and options.include_size_banner:
        options = options.model_copy(update={"include_size_banner": False})

    # Encode first so invalid values fail with a ToonError
    toon_text = encode(value, options)
    generic_text = to_generic_json(value)
    generic_size = estimate_size(generic_text)
    toon_size = estimate_size(toon_text)

    return SizeComparison(
        generic_text=generic_text,
        generic_size=generic_size,
        toon_text=toon_text,
        toon_size=toon_size,
        savings_percent=savings_percent(generic_size, toon_size),
    )
