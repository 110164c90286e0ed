"""Per-call formatting options for the encoder and decoder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_INDENT = 2
DEFAULT_MAX_DEPTH = 100
# Encoding and decoding recurse a few frames per level
MAX_DEPTH_LIMIT = 200


class EncodeOptions(BaseModel):
    """Options for TOON encoding.

    Instances are immutable so one can be shared between concurrent callers.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    indent: int = Field(default=DEFAULT_INDENT, ge=1, description="Spaces per nesting level")
    include_size_banner: bool = Field(
        default=False,
        description="Prepend a '#' comment with estimated tokens and savings",
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT, description="Maximum nesting depth"
    )


class DecodeOptions(BaseModel):
    """Options for TOON decoding."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    indent: int = Field(default=DEFAULT_INDENT, ge=1, description="Spaces per nesting level")
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT, description="Maximum nesting depth"
    )
