"""
Value Range Resolver

Determines the display min/max of a dataset. Data-driven bounds and the
element type's declared bounds are tried in a configurable order, with a
fixed default range as the terminal fallback.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from config import RangeConfig
from core.base import Dataset
from core.element_types import Capability, ElementType
from core.errors import InvalidDatasetError
from .normalizer import PrecisionNormalizer


class RangeSource(Enum):
    """Where a display range came from."""
    DATA = "data"
    TYPE = "type"
    DEFAULT = "default"


@dataclass(frozen=True)
class DisplayRange:
    """
    Display min/max with cached high-precision equivalents.

    Attributes:
        min: Minimum in the dataset's element type (int for the default range)
        max: Maximum in the dataset's element type (int for the default range)
        hp_min: Decimal value of min
        hp_max: Decimal value of max
        source: Which fallback stage produced the range
    """
    min: Any
    max: Any
    hp_min: Decimal
    hp_max: Decimal
    source: RangeSource

    def window(
        self,
        low: Optional[Decimal] = None,
        high: Optional[Decimal] = None
    ) -> Tuple[Decimal, Decimal]:
        """
        Effective normalization bounds after applying a user display window.

        A window only narrows the range: a low bound below hp_min or a
        high bound above hp_max is ignored.
        """
        hp_min = self.hp_min
        hp_max = self.hp_max
        if low is not None and low > hp_min:
            hp_min = low
        if high is not None and high < hp_max:
            hp_max = high
        return hp_min, hp_max


class ValueRangeResolver:
    """
    Resolves display ranges with a data / type / default fallback chain.
    """

    def __init__(
        self,
        normalizer: Optional[PrecisionNormalizer] = None,
        config: Optional[RangeConfig] = None
    ):
        self._config = config or RangeConfig()
        self._normalizer = normalizer or PrecisionNormalizer(self._config.decimal_precision)

    def compute(self, dataset: Dataset, prefer_data_bounds: Optional[bool] = None) -> DisplayRange:
        """
        Compute the display range of a dataset.

        Args:
            dataset: Dataset to scan
            prefer_data_bounds: Try the data scan before the type bounds
                (defaults to RangeConfig.prefer_data_range)

        Returns:
            DisplayRange with min < max unless the default range applies

        Raises:
            InvalidDatasetError: If the dataset has no elements
        """
        if dataset.size == 0:
            raise InvalidDatasetError(
                f"Dataset '{dataset.display_name}' has no elements {dataset.dimensions}"
            )

        if prefer_data_bounds is None:
            prefer_data_bounds = self._config.prefer_data_range

        element_type = dataset.element_type
        stages: List[Tuple[RangeSource, Callable[[], Optional[Tuple[Any, Any]]]]] = [
            (RangeSource.DATA, lambda: self.data_bounds(dataset)),
            (RangeSource.TYPE, lambda: self.type_bounds(element_type)),
        ]
        if not prefer_data_bounds:
            stages.reverse()

        for source, stage in stages:
            bounds = stage()
            if bounds is None:
                logging.debug(f"Range: no {source.value} bounds for '{element_type.name}'")
                continue
            low, high = bounds
            hp_low = self._normalizer.to_high_precision(low, element_type)
            hp_high = self._normalizer.to_high_precision(high, element_type)
            if hp_low == hp_high:
                logging.debug(f"Range: {source.value} bounds degenerate at {hp_low}")
                continue
            return DisplayRange(low, high, hp_low, hp_high, source)

        low, high = self._config.default_min, self._config.default_max
        logging.debug(f"Range: using default [{low}, {high}] for '{dataset.display_name}'")
        return DisplayRange(low, high, Decimal(low), Decimal(high), RangeSource.DEFAULT)

    @staticmethod
    def type_bounds(element_type: ElementType) -> Optional[Tuple[Any, Any]]:
        """Declared representable bounds, or None if the type is unbounded."""
        if not element_type.supports(Capability.BOUNDED):
            return None
        return element_type.bounds

    @staticmethod
    def data_bounds(dataset: Dataset) -> Optional[Tuple[Any, Any]]:
        """
        Min and max over every ordinary element.

        NaNs and infinities are skipped. Returns None if the type has no
        ordering or no element is finite.
        """
        element_type = dataset.element_type
        if not element_type.supports(Capability.ORDERED):
            return None

        values = dataset.raw
        if values.dtype.kind in "iu":
            return values.min(), values.max()
        if values.dtype.kind == "f":
            finite = values[np.isfinite(values)]
            if finite.size == 0:
                return None
            return finite.min(), finite.max()

        low = high = None
        for value in values:
            if element_type.special_value(value) is not None:
                continue
            if low is None:
                low = high = value
            elif value < low:
                low = value
            elif value > high:
                high = value
        if low is None:
            return None
        return low, high
