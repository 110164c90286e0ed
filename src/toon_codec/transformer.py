"""Content negotiation between JSON and TOON.

TOON gives the largest token reduction for uniform arrays of objects.
This module helps callers that hand payloads to a language model:

- Detection of data suitable for TOON conversion
- Conversion to JSON or TOON
- Graceful fallback to JSON when TOON conversion fails
"""

from __future__ import annotations

import json
from typing import Any

from toon_codec.encoder import encode
from toon_codec.errors import ToonError
from toon_codec.estimator import compare
from toon_codec.logging import get_logger
from toon_codec.models import EncodeOptions
from toon_codec.values import UNDEFINED, is_mapping, is_sequence, is_uniform_object_array

logger = get_logger(__name__)

TOON_CONTENT_TYPE = "text/toon"
JSON_CONTENT_TYPE = "application/json"


def should_use_toon(data: Any, min_array_size: int = 2) -> bool:
    """Determine if data would benefit from TOON format.

    TOON excels at uniform arrays of objects, at the top level or as
    values of a mapping. It is less effective for irregular objects,
    primitives and small arrays.

    Args:
        data: The data to evaluate
        min_array_size: Minimum array size to consider for TOON (default: 2)

    Returns:
        True if TOON would likely provide token savings

    Examples:
        >>> should_use_toon([{"id": 1}, {"id": 2}])
        True
        >>> should_use_toon({"users": [{"id": 1}, {"id": 2}]})
        True
        >>> should_use_toon({"temperature": 20})
        False
    """
    if is_sequence(data):
        return is_uniform_object_array(data, min_array_size)

    if is_mapping(data):
        return any(
            is_sequence(value) and is_uniform_object_array(value, min_array_size)
            for value in data.values()
        )

    return False


def to_toon(data: Any, options: EncodeOptions | None = None) -> str | None:
    """Convert data to TOON format.

    Returns:
        TOON-formatted string, or None if the data cannot be encoded
    """
    try:
        return encode(data, options)
    except ToonError as e:
        logger.warning("TOON encoding failed", error=str(e), error_type=type(e).__name__)
        return None


def _json_default(value: Any) -> Any:
    if value is UNDEFINED:
        return None
    return str(value)


def to_json(data: Any, indent: int | None = None) -> str:
    """Convert data to JSON format.

    Args:
        data: Data to serialize
        indent: Optional indentation for pretty printing

    Returns:
        JSON-formatted string
    """
    return json.dumps(data, indent=indent, default=_json_default, ensure_ascii=False)


def transform_result(
    data: Any,
    prefer_toon: bool = False,
    options: EncodeOptions | None = None,
) -> tuple[str, str]:
    """Transform data to the requested format.

    When prefer_toon=True, always attempts TOON conversion regardless of
    data shape. Falls back to JSON only if TOON conversion fails.

    Args:
        data: The data to transform
        prefer_toon: Whether the caller explicitly requests TOON format
        options: Optional TOON encoding options

    Returns:
        Tuple of (formatted_string, content_type)

    Examples:
        >>> data = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
        >>> transform_result(data, prefer_toon=True)[1]
        'text/toon'
    """
    if prefer_toon:
        toon_result = to_toon(data, options)
        if toon_result is not None:
            return toon_result, TOON_CONTENT_TYPE

    return to_json(data), JSON_CONTENT_TYPE


def get_size_comparison(data: Any, min_array_size: int = 2) -> dict[str, Any]:
    """Get size comparison between JSON and TOON for given data.

    Useful for debugging and metrics. Sizes are estimated tokens.

    Returns:
        Dict with json_size, toon_size, savings_percent, savings_bytes,
        recommendation and toon_beneficial
    """
    beneficial = should_use_toon(data, min_array_size)
    result: dict[str, Any] = {
        "json_size": None,
        "toon_size": None,
        "savings_percent": 0.0,
        "savings_bytes": 0,
        "recommendation": "json",
        "toon_beneficial": beneficial,
    }

    try:
        comparison = compare(data)
    except ToonError as e:
        logger.warning("Size comparison failed", error=str(e))
        return result

    result["json_size"] = comparison.generic_size
    result["toon_size"] = comparison.toon_size
    result["savings_percent"] = round(comparison.savings_percent, 1)
    result["savings_bytes"] = len(comparison.generic_text.encode()) - len(
        comparison.toon_text.encode()
    )
    if comparison.toon_size < comparison.generic_size and beneficial:
        result["recommendation"] = "toon"

    return result
