"""Value model shared by the encoder and decoder.

TOON values are plain Python objects: ``None``, ``bool``, ``int``, ``float``,
``str``, ``list``/``tuple`` and ``dict`` with string keys, plus the
``UNDEFINED`` marker for a present key whose value is absent.
"""

from __future__ import annotations

import math
from typing import Any


class Undefined:
    """Marker for a value that is present but undefined.

    Distinct from ``None``. There is exactly one instance, ``UNDEFINED``.
    """

    _instance: Undefined | None = None

    def __new__(cls) -> Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined()


def is_scalar(value: Any) -> bool:
    """Check if a value is a supported scalar."""
    if value is None or value is UNDEFINED:
        return True
    if isinstance(value, (bool, int, str)):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def is_cell_value(value: Any) -> bool:
    """Check if a value fits in a single tabular cell.

    Cells hold scalars and empty containers only.
    """
    if is_scalar(value):
        return True
    return (is_sequence(value) or is_mapping(value)) and len(value) == 0


def is_uniform_object_array(data: Any, min_size: int = 1) -> bool:
    """Check if a sequence is a uniform array of mappings with the same keys.

    Keys are compared as sets, so ``[{"a": 1, "b": 2}, {"b": 3, "a": 4}]``
    is uniform.

    Args:
        data: Value to check
        min_size: Minimum number of elements (default: 1)

    Returns:
        True if every element is a mapping sharing the first element's key set
    """
    if not is_sequence(data) or len(data) < min_size or not data:
        return False

    if not all(is_mapping(item) for item in data):
        return False

    first_keys = frozenset(data[0].keys())
    return all(frozenset(item.keys()) == first_keys for item in data)


def tabular_fields(data: Any) -> list[str] | None:
    """Return header fields if a sequence can be written as tabular rows.

    The sequence must be a uniform object array with at least one field,
    and every field value must fit in a cell. Field order follows the
    first element.

    Returns:
        The field names, or None if the tabular form does not apply
    """
    if not is_uniform_object_array(data):
        return None

    fields = list(data[0].keys())
    if not fields:
        return None

    for item in data:
        if not all(is_cell_value(item[field]) for field in fields):
            return None

    return fields
