"""
Precision Normalizer

Converts element values of any supported numeric type to Decimal and
computes their position inside a display range as a ratio in [0, 1].

All arithmetic runs under one fixed decimal context, so the same value,
min and max always produce the same ratio regardless of the element
encoding they came from.
"""

from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_EVEN,
)
from typing import Any, Optional

from config import DECIMAL_PRECISION
from core.element_types import ElementType
from core.errors import NumericParseError


ZERO = Decimal(0)
ONE = Decimal(1)


def make_context(precision: int = DECIMAL_PRECISION) -> Context:
    """Decimal context shared by all normalization arithmetic."""
    return Context(
        prec=precision,
        rounding=ROUND_HALF_EVEN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )


class PrecisionNormalizer:
    """
    Arbitrary-precision value normalization.

    Example:
        normalizer = PrecisionNormalizer()
        uint8 = ElementTypes.get("uint8")
        normalizer.ratio(np.uint8(128), np.uint8(0), np.uint8(255), uint8)
        # Decimal('0.5019607843137254901960784313725490')
    """

    def __init__(self, precision: int = DECIMAL_PRECISION):
        """
        Initialize normalizer.

        Args:
            precision: Significant digits of the decimal context
        """
        self._context = make_context(precision)

    @property
    def context(self) -> Context:
        return self._context

    def to_high_precision(self, value: Any, element_type: Optional[ElementType] = None) -> Decimal:
        """
        Convert a value to Decimal.

        Uses the element type's exact structural conversion when it
        declares one. Otherwise the value's text form is parsed, which is
        slower and rounds to the context precision.

        Args:
            value: Element value
            element_type: Descriptor of the value's type, if known

        Returns:
            Decimal representation of value

        Raises:
            NumericParseError: If the text fallback cannot parse the value
        """
        if element_type is not None and element_type.to_decimal is not None:
            return element_type.to_decimal(value)
        if isinstance(value, Decimal):
            return value
        if isinstance(value, int):
            return Decimal(value)

        text = str(value).strip()
        try:
            return self._context.create_decimal(text)
        except (InvalidOperation, ValueError) as e:
            raise NumericParseError(value) from e

    def ratio(
        self,
        value: Any,
        minimum: Any,
        maximum: Any,
        element_type: Optional[ElementType] = None
    ) -> Decimal:
        """
        Position of value inside [minimum, maximum], clamped to [0, 1].

        Args:
            value: Element value
            minimum: Display range minimum (same type as value)
            maximum: Display range maximum (same type as value)
            element_type: Descriptor of the values' type

        Returns:
            Decimal ratio in [0, 1]
        """
        return self.ratio_of_decimals(
            self.to_high_precision(value, element_type),
            self.to_high_precision(minimum, element_type),
            self.to_high_precision(maximum, element_type),
        )

    def ratio_of_decimals(self, hp_value: Decimal, hp_min: Decimal, hp_max: Decimal) -> Decimal:
        """
        Ratio of already converted decimals.

        When max equals min the denominator is taken as 1, so the result
        is ``value - min`` clamped to [0, 1].

        Raises:
            ValueError: If hp_value is NaN
        """
        if hp_value.is_nan():
            raise ValueError("NaN has no display ratio")
        if hp_value.is_infinite():
            return ZERO if hp_value.is_signed() else ONE

        ctx = self._context
        numerator = ctx.subtract(hp_value, hp_min)
        denominator = ctx.subtract(hp_max, hp_min)
        if denominator == ZERO:
            denominator = ONE
        result = ctx.divide(numerator, denominator)

        if result < ZERO:
            return ZERO
        if result > ONE:
            return ONE
        return result
