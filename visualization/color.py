"""
Color Synthesis

Turns a display ratio, a native color element or a special value into a
packed 0xAARRGGBB pixel.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from config import RenderConfig
from core.element_types import Capability, ElementType, SpecialValue
from core.errors import UnsupportedValueTypeError
from .normalizer import PrecisionNormalizer


def argb(a: int, r: int, g: int, b: int) -> int:
    """Pack four 8-bit channels into one 32-bit ARGB value."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def unpack_argb(value: int) -> Tuple[int, int, int, int]:
    """Split a packed ARGB value into (a, r, g, b)."""
    value = int(value)
    return (value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


class Palette:
    """
    Ordered color lookup table.

    Index 0 is used for the lowest ratio, the last entry for the highest.
    """

    def __init__(self, entries: Sequence[int], name: str = "custom"):
        if len(entries) < 2:
            raise ValueError(f"A palette needs at least 2 entries, got {len(entries)}")
        self._entries = np.asarray([int(e) & 0xFFFFFFFF for e in entries], dtype=np.uint32)
        self.name = name

    @classmethod
    def grayscale(cls, size: int = 256) -> "Palette":
        """Opaque black-to-white ramp."""
        if size < 2:
            raise ValueError("Grayscale palette needs at least 2 entries")
        levels = [round(i * 255 / (size - 1)) for i in range(size)]
        return cls([argb(255, v, v, v) for v in levels], name="grayscale")

    @property
    def entries(self) -> np.ndarray:
        return self._entries.copy()

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> int:
        return int(self._entries[index])


class ColorMode(Enum):
    """How a type's elements are turned into colors."""
    PALETTE = "palette"
    NATIVE = "native"
    UNSUPPORTED = "unsupported"


def color_mode_for(element_type: ElementType) -> ColorMode:
    if element_type.supports(Capability.ORDERED):
        return ColorMode.PALETTE
    if element_type.supports(Capability.COLOR):
        return ColorMode.NATIVE
    return ColorMode.UNSUPPORTED


class ColorSynthesizer:
    """
    Per-viewer color stage.

    Scalar types go through the normalizer and a palette; color types are
    read channel by channel. Types with neither trait are rejected when a
    value is colorized, never guessed.
    """

    def __init__(
        self,
        element_type: ElementType,
        palette: Optional[Palette] = None,
        config: Optional[RenderConfig] = None,
        normalizer: Optional[PrecisionNormalizer] = None
    ):
        self._element_type = element_type
        self._config = config or RenderConfig()
        self._normalizer = normalizer or PrecisionNormalizer()
        self._palette = palette or Palette.grayscale()
        self._mode = color_mode_for(element_type)

    @property
    def mode(self) -> ColorMode:
        return self._mode

    @property
    def element_type(self) -> ElementType:
        return self._element_type

    @property
    def palette(self) -> Palette:
        return self._palette

    def set_palette(self, palette: Optional[Palette] = None) -> None:
        """Replace the palette; None restores the default grayscale ramp."""
        self._palette = palette or Palette.grayscale()

    def palette_color(self, ratio: Decimal) -> int:
        """
        Palette entry for a ratio.

        Args:
            ratio: Display ratio, expected in [0, 1]

        Returns:
            Packed ARGB color
        """
        last = len(self._palette) - 1
        scaled = self._normalizer.context.multiply(ratio, Decimal(last))
        index = int(scaled.to_integral_value(rounding=ROUND_HALF_UP))
        index = max(0, min(index, last))
        return self._palette[index]

    def native_color(self, value: Any) -> int:
        """
        Packed color of an RGB or ARGB element.

        Raises:
            UnsupportedValueTypeError: If the type has no color layout
        """
        layout = self._element_type.color_layout
        if layout is None:
            raise UnsupportedValueTypeError(
                f"Element type '{self._element_type.name}' has no color channels"
            )
        alpha = int(value["a"]) if layout.has_alpha else 255
        return argb(alpha, int(value["r"]), int(value["g"]), int(value["b"]))

    def special_color(self, special: SpecialValue) -> int:
        if special is SpecialValue.NAN:
            return self._config.nan_color
        if special is SpecialValue.POS_INF:
            return self._config.pos_inf_color
        return self._config.neg_inf_color

    def colorize(self, value: Any, hp_min: Decimal, hp_max: Decimal) -> int:
        """
        Color of one element.

        Args:
            value: Element value
            hp_min: Effective display minimum
            hp_max: Effective display maximum

        Returns:
            Packed ARGB color

        Raises:
            UnsupportedValueTypeError: If the type is neither scalar nor color
            NumericParseError: If the value cannot be converted to Decimal
        """
        if self._mode is ColorMode.NATIVE:
            return self.native_color(value)
        if self._mode is ColorMode.UNSUPPORTED:
            raise UnsupportedValueTypeError(
                f"Cannot display elements of type '{self._element_type.name}'"
            )

        special = self._element_type.special_value(value)
        if special is not None:
            return self.special_color(special)

        hp_value = self._normalizer.to_high_precision(value, self._element_type)
        if hp_value.is_nan():
            return self._config.nan_color
        return self.palette_color(self._normalizer.ratio_of_decimals(hp_value, hp_min, hp_max))
