"""
Visualization Package

Framework-agnostic viewing core: range resolution, normalization, color
synthesis, the pan/zoom viewport and the per-viewer state object.
"""

from .normalizer import PrecisionNormalizer
from .value_range import DisplayRange, RangeSource, ValueRangeResolver
from .color import ColorMode, ColorSynthesizer, Palette, argb, unpack_argb
from .viewport import Magnify, Minify, ViewportEngine
from .animation import AnimationState, CancellationToken, PlaneAnimator
from .slice_viewer import PixelReadout, SliceViewer

__all__ = [
    'PrecisionNormalizer',
    'DisplayRange',
    'RangeSource',
    'ValueRangeResolver',
    'ColorMode',
    'ColorSynthesizer',
    'Palette',
    'argb',
    'unpack_argb',
    'Magnify',
    'Minify',
    'ViewportEngine',
    'AnimationState',
    'CancellationToken',
    'PlaneAnimator',
    'PixelReadout',
    'SliceViewer',
]
