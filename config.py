"""
Slice Viewer Configuration

Contains constants and default settings for the viewing core and GUI.
"""

from dataclasses import dataclass, field
from typing import Tuple


# Significant digits used for every high-precision normalization.
# Far more than needed to resolve a 16-bit channel, and shared by all
# viewers so identical inputs always give identical ratios.
DECIMAL_PRECISION = 34

# Packed 0xAARRGGBB colors
OPAQUE_BLACK = 0xFF000000
OPAQUE_WHITE = 0xFFFFFFFF


@dataclass
class ViewportConfig:
    """Configuration for the pan/zoom viewport."""
    pane_width: int = 512  # Raster width in pixels
    pane_height: int = 512  # Raster height in pixels
    pan_step_pixels: int = 75  # Pixels moved per pan button press


@dataclass
class RenderConfig:
    """Colors used when rasterizing a plane."""
    background_color: int = OPAQUE_BLACK  # Outside the dataset
    border_color: int = 0xB4FFFF00  # Translucent yellow edge of the data
    nan_color: int = OPAQUE_BLACK
    pos_inf_color: int = OPAQUE_WHITE
    neg_inf_color: int = OPAQUE_BLACK
    flag_color: int = 0xFFFF00FF  # Values that failed numeric parsing


@dataclass
class RangeConfig:
    """Configuration for display range resolution."""
    prefer_data_range: bool = True  # Scan data before using type bounds
    default_min: int = 0  # Terminal fallback when everything is degenerate
    default_max: int = 255
    decimal_precision: int = DECIMAL_PRECISION


@dataclass
class AnimationConfig:
    """Configuration for plane position animation."""
    frame_interval_s: float = 0.1  # Delay between frames


@dataclass
class GUIConfig:
    """Configuration for GUI appearance."""
    window_title: str = "Slice Viewer"
    window_size: Tuple[int, int] = (1200, 800)

    font_family: str = "Segoe UI"
    font_size: int = 10
    header_font_size: int = 12

    readout_decimals: int = 3  # Digits shown for values and coordinates
    label_char_limit: int = 15  # Min/max labels are truncated past this


@dataclass
class ViewerConfig:
    """All settings for one viewer instance."""
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    range: RangeConfig = field(default_factory=RangeConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)


# Default configurations
DEFAULT_VIEWER = ViewerConfig()
DEFAULT_GUI = GUIConfig()
