"""
Viewer Error Types

Exceptions raised by the viewing core. Degenerate display ranges and
viewport limits are not errors and never appear here.
"""

from typing import Any


class InvalidDatasetError(ValueError):
    """Dataset cannot be viewed (no addressable elements, bad plane axes)."""


class UnsupportedValueTypeError(TypeError):
    """Element value cannot be classified as a displayable scalar or color."""


class NumericParseError(ValueError):
    """
    Text fallback conversion failed for a single element value.

    Attributes:
        value: The offending element value
    """

    def __init__(self, value: Any, message: str = ""):
        self.value = value
        super().__init__(message or f"Cannot parse {value!r} as a decimal number")
