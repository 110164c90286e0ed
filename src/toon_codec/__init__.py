"""TOON (Token-Oriented Object Notation) codec.

A compact, indentation-based text form of JSON-like data that uses fewer
tokens than JSON, particularly for uniform arrays of objects, while
decoding back to the original value.
"""

from toon_codec.decoder import decode
from toon_codec.encoder import encode
from toon_codec.errors import (
    CyclicValueError,
    EncodeError,
    FormatError,
    NestingDepthError,
    ToonError,
    UnsupportedTypeError,
)
from toon_codec.estimator import compare, estimate_size, to_generic_json
from toon_codec.models import DecodeOptions, EncodeOptions, SizeComparison
from toon_codec.values import UNDEFINED, Undefined

__version__ = "0.1.0"
__all__ = [
    "UNDEFINED",
    "CyclicValueError",
    "DecodeOptions",
    "EncodeError",
    "EncodeOptions",
    "FormatError",
    "NestingDepthError",
    "SizeComparison",
    "ToonError",
    "Undefined",
    "UnsupportedTypeError",
    "compare",
    "decode",
    "encode",
    "estimate_size",
    "to_generic_json",
]
