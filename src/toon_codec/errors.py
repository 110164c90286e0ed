"""Exceptions raised by the TOON encoder and decoder."""

from __future__ import annotations


class ToonError(Exception):
    """Base exception for all TOON codec failures."""


class EncodeError(ToonError):
    """A value could not be encoded."""


class CyclicValueError(EncodeError):
    """A container was reached again while it was still being encoded."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Cyclic reference detected at {path}")


class UnsupportedTypeError(EncodeError):
    """A value falls outside the TOON value model."""

    def __init__(self, value: object, path: str, reason: str | None = None) -> None:
        self.value_type = type(value).__name__
        self.path = path
        message = f"Cannot encode value of type {self.value_type} at {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FormatError(ToonError):
    """TOON text is malformed.

    Attributes:
        line: 1-based number of the offending line, if known.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.message = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class NestingDepthError(ToonError):
    """Nesting exceeded the configured maximum depth."""

    def __init__(self, depth: int, limit: int, line: int | None = None) -> None:
        self.depth = depth
        self.limit = limit
        self.line = line
        message = f"Nesting depth {depth} exceeds limit of {limit}"
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
