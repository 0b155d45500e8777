"""
Processing Package

Operations deriving new datasets from existing ones.
"""

from .plane_extractor import PlaneExtractor
from .conversions import to_float, to_color, to_magnitude, FLOAT_TARGETS

__all__ = [
    'PlaneExtractor',
    'to_float',
    'to_color',
    'to_magnitude',
    'FLOAT_TARGETS',
]
