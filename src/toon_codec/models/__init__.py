"""Pydantic models for toon-codec."""

from toon_codec.models.comparison import SizeComparison
from toon_codec.models.options import DecodeOptions, EncodeOptions

__all__ = [
    "DecodeOptions",
    "EncodeOptions",
    "SizeComparison",
]
