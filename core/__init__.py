"""
Core Package

Contains the dataset structure, element capability descriptors, coordinate
spaces and plane selection shared by the viewing core.
"""

from .base import (
    Axis,
    Dataset,
    BaseLoader,
)
from .coordinates import (
    CoordinateSpace,
    LinearCoordinateSpace,
    AffineCoordinateSpace,
)
from .element_types import (
    Capability,
    ColorLayout,
    ElementType,
    ElementTypes,
    SpecialValue,
)
from .errors import (
    InvalidDatasetError,
    NumericParseError,
    UnsupportedValueTypeError,
)
from .plane import PlaneSelection, PlaneView

__all__ = [
    'Axis',
    'Dataset',
    'BaseLoader',
    'CoordinateSpace',
    'LinearCoordinateSpace',
    'AffineCoordinateSpace',
    'Capability',
    'ColorLayout',
    'ElementType',
    'ElementTypes',
    'SpecialValue',
    'InvalidDatasetError',
    'NumericParseError',
    'UnsupportedValueTypeError',
    'PlaneSelection',
    'PlaneView',
]
