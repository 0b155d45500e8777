"""
Viewport Engine

Rational-scale pan/zoom over one plane of a dataset. Pixel and model
coordinates are related by an integer scale factor, so the mapping is
exact and never drifts no matter how far the user pans or zooms.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np

from config import ViewerConfig
from core.base import Axis, Dataset
from core.element_types import ARGB_DTYPE, ElementTypes
from core.errors import NumericParseError
from core.plane import PlaneView


@dataclass(frozen=True)
class Magnify:
    """One model unit covers ``factor`` pixels on each axis."""
    factor: int = 1

    def __post_init__(self):
        if self.factor < 1:
            raise ValueError(f"Scale factor must be >= 1, got {self.factor}")


@dataclass(frozen=True)
class Minify:
    """``factor`` model units share one pixel on each axis."""
    factor: int = 1

    def __post_init__(self):
        if self.factor < 1:
            raise ValueError(f"Scale factor must be >= 1, got {self.factor}")


Scale = Union[Magnify, Minify]
UNITY = Magnify(1)

# Maps an element value to a packed ARGB pixel
Colorizer = Callable[[Any], int]


def _normalize_scale(scale: Scale) -> Scale:
    return UNITY if scale.factor == 1 else scale


class ViewportEngine:
    """
    Pan/zoom state machine and rasterizer for one plane.

    State is the scale, the model coordinate shown at pixel (0, 0) and the
    fixed pane size. Every mutating operation returns whether it changed
    anything; reaching a limit is not an error.

    Example:
        engine = ViewportEngine(plane, synthesizer_callable)
        engine.increase_zoom()
        raster = engine.render()   # (pane_height, pane_width) uint32 ARGB
    """

    def __init__(
        self,
        plane: PlaneView,
        colorizer: Colorizer,
        config: Optional[ViewerConfig] = None
    ):
        self._config = config or ViewerConfig()
        self._plane = plane
        self._colorizer = colorizer
        self._pane_width = self._config.viewport.pane_width
        self._pane_height = self._config.viewport.pane_height
        if self._pane_width < 1 or self._pane_height < 1:
            raise ValueError("Pane extents must be positive")

        self._scale: Scale = UNITY
        self._origin_x = 0
        self._origin_y = 0
        self._last_raster: Optional[np.ndarray] = None
        self._last_parse_errors: List[NumericParseError] = []
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def plane(self) -> PlaneView:
        return self._plane

    @property
    def scale(self) -> Scale:
        return self._scale

    @property
    def origin_x(self) -> int:
        return self._origin_x

    @property
    def origin_y(self) -> int:
        return self._origin_y

    @property
    def pane_width(self) -> int:
        return self._pane_width

    @property
    def pane_height(self) -> int:
        return self._pane_height

    @property
    def last_raster(self) -> Optional[np.ndarray]:
        return self._last_raster

    @property
    def last_parse_errors(self) -> List[NumericParseError]:
        """Parse failures of the most recent render, one per model coordinate."""
        return list(self._last_parse_errors)

    @property
    def max_factor(self) -> int:
        return min(self._pane_width, self._pane_height)

    def effective_scale(self) -> str:
        """Scale as text, e.g. "3X" or "1/3X"."""
        if isinstance(self._scale, Minify):
            return f"1/{self._scale.factor}X"
        return f"{self._scale.factor}X"

    def _extent(self, pane: int, scale: Scale) -> int:
        if isinstance(scale, Minify):
            return pane * scale.factor
        return pane // scale.factor

    @property
    def virtual_width(self) -> int:
        """Number of model columns covered by the pane."""
        return self._extent(self._pane_width, self._scale)

    @property
    def virtual_height(self) -> int:
        """Number of model rows covered by the pane."""
        return self._extent(self._pane_height, self._scale)

    def reset(self) -> None:
        """Return to unity scale with the plane centred in the pane."""
        self._scale = UNITY
        self._origin_x = self._plane.d0 // 2 - self._pane_width // 2
        self._origin_y = self._plane.d1 // 2 - self._pane_height // 2

    # ------------------------------------------------------------------
    # Coordinate mapping
    # ------------------------------------------------------------------

    def pixel_to_model(self, pixel: int, origin: int) -> int:
        """
        Model coordinate shown at a pixel coordinate.

        Args:
            pixel: Pixel coordinate along one axis
            origin: Model origin along the same axis

        Returns:
            Model coordinate
        """
        k = self._scale.factor
        if isinstance(self._scale, Minify):
            return pixel * k + origin
        return pixel // k + origin

    def model_to_pixel(self, model: int, origin: int) -> int:
        """
        Pixel coordinate of a model coordinate.

        At Minify(k) this is many-to-one: k consecutive model coordinates
        land on the same pixel.
        """
        k = self._scale.factor
        if isinstance(self._scale, Minify):
            return (int(model) - int(origin)) // k
        return (int(model) - int(origin)) * k

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def _zoomed_in(self) -> Optional[Scale]:
        if isinstance(self._scale, Minify) and self._scale.factor > 1:
            return _normalize_scale(Minify(self._scale.factor - 2))
        factor = self._scale.factor + 2
        if factor > self.max_factor:
            return None
        return Magnify(factor)

    def _zoomed_out(self) -> Optional[Scale]:
        if isinstance(self._scale, Magnify) and self._scale.factor > 1:
            return _normalize_scale(Magnify(self._scale.factor - 2))
        factor = self._scale.factor + 2
        if factor > self.max_factor:
            return None
        return Minify(factor)

    def _apply_scale(self, new_scale: Scale) -> None:
        old_w, old_h = self.virtual_width, self.virtual_height
        new_w = self._extent(self._pane_width, new_scale)
        new_h = self._extent(self._pane_height, new_scale)
        # Keep the centre of the visible window in place
        shift_x = abs(old_w - new_w) // 2
        shift_y = abs(old_h - new_h) // 2
        if new_w < old_w:
            self._origin_x += shift_x
        else:
            self._origin_x -= shift_x
        if new_h < old_h:
            self._origin_y += shift_y
        else:
            self._origin_y -= shift_y
        self._scale = new_scale

    def increase_zoom(self) -> bool:
        """Step one rung toward magnification. False at the limit."""
        new_scale = self._zoomed_in()
        if new_scale is None:
            return False
        self._apply_scale(new_scale)
        logging.debug(f"Viewport: zoom in to {self.effective_scale()}")
        return True

    def decrease_zoom(self) -> bool:
        """Step one rung toward minification. False at the limit."""
        new_scale = self._zoomed_out()
        if new_scale is None:
            return False
        self._apply_scale(new_scale)
        logging.debug(f"Viewport: zoom out to {self.effective_scale()}")
        return True

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def _pan_step(self, pixels: Optional[int]) -> int:
        if pixels is None:
            pixels = self._config.viewport.pan_step_pixels
        return self.pixel_to_model(int(pixels), 0)

    @staticmethod
    def _overlaps(origin: int, extent: int, size: int) -> bool:
        return origin + extent - 1 >= 0 and origin <= size - 1

    def _pan_x(self, delta: int) -> bool:
        if delta == 0:
            return False
        origin = self._origin_x + delta
        if not self._overlaps(origin, self.virtual_width, self._plane.d0):
            return False
        self._origin_x = origin
        return True

    def _pan_y(self, delta: int) -> bool:
        if delta == 0:
            return False
        origin = self._origin_y + delta
        if not self._overlaps(origin, self.virtual_height, self._plane.d1):
            return False
        self._origin_y = origin
        return True

    def pan_left(self, pixels: Optional[int] = None) -> bool:
        """
        Move the view toward lower x.

        Refused when no column of the plane would remain visible.

        Args:
            pixels: Distance in pixels (defaults to the configured pan step)

        Returns:
            True if the origin moved
        """
        return self._pan_x(-self._pan_step(pixels))

    def pan_right(self, pixels: Optional[int] = None) -> bool:
        """Move the view toward higher x. Refused past the last column."""
        return self._pan_x(self._pan_step(pixels))

    def pan_up(self, pixels: Optional[int] = None) -> bool:
        """Move the view toward lower y. Refused past the first row."""
        return self._pan_y(-self._pan_step(pixels))

    def pan_down(self, pixels: Optional[int] = None) -> bool:
        """Move the view toward higher y. Refused past the last row."""
        return self._pan_y(self._pan_step(pixels))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _model_columns(self, pane: int, origin: int) -> np.ndarray:
        pixels = np.arange(pane, dtype=np.int64)
        k = self._scale.factor
        if isinstance(self._scale, Minify):
            return pixels * k + origin
        return pixels // k + origin

    def render(self) -> np.ndarray:
        """
        Rasterize the visible window.

        Each in-bounds model coordinate is colored once and painted onto
        every pixel that maps to it, which yields k x k blocks when
        magnified. Pixels outside the plane get the background color and
        the plane's edges are outlined with the border color.

        Returns:
            (pane_height, pane_width) uint32 array of packed ARGB pixels

        Raises:
            UnsupportedValueTypeError: If the elements cannot be colored
        """
        render_cfg = self._config.render
        width, height = self._pane_width, self._pane_height
        raster = np.full((height, width), render_cfg.background_color, dtype=np.uint32)

        xs = self._model_columns(width, self._origin_x)
        ys = self._model_columns(height, self._origin_y)
        valid_x = (xs >= 0) & (xs < self._plane.d0)
        valid_y = (ys >= 0) & (ys < self._plane.d1)

        errors: List[NumericParseError] = []
        if valid_x.any() and valid_y.any():
            unique_x = np.unique(xs[valid_x])
            unique_y = np.unique(ys[valid_y])
            colors = self._color_grid(unique_x, unique_y, errors)
            rows = np.searchsorted(unique_y, ys[valid_y])
            cols = np.searchsorted(unique_x, xs[valid_x])
            raster[np.ix_(np.nonzero(valid_y)[0], np.nonzero(valid_x)[0])] = colors[np.ix_(rows, cols)]

        self._draw_border(raster)

        if errors:
            logging.warning(f"Render: {len(errors)} value(s) could not be parsed")
        self._last_parse_errors = errors
        self._last_raster = raster
        return raster

    def _color_grid(
        self,
        unique_x: np.ndarray,
        unique_y: np.ndarray,
        errors: List[NumericParseError]
    ) -> np.ndarray:
        flag = self._config.render.flag_color
        colors = np.empty((len(unique_y), len(unique_x)), dtype=np.uint32)
        element_type = self._plane.dataset.element_type
        cache: Dict[Any, int] = {}
        for row, y in enumerate(unique_y):
            for col, x in enumerate(unique_x):
                value = self._plane.get(int(x), int(y))
                # NaNs never compare equal and signaling ones cannot be hashed
                if element_type.special_value(value) is not None:
                    key = None
                else:
                    key = value.tobytes() if isinstance(value, np.void) else value
                color = None if key is None else cache.get(key)
                if color is None:
                    try:
                        color = self._colorizer(value)
                    except NumericParseError as e:
                        errors.append(e)
                        color = flag
                    else:
                        if key is not None:
                            cache[key] = color
                colors[row, col] = color
        return colors

    def _draw_border(self, raster: np.ndarray) -> None:
        max_x = self._plane.d0 - 1
        max_y = self._plane.d1 - 1
        left = self.model_to_pixel(0, self._origin_x)
        right = self.model_to_pixel(max_x, self._origin_x)
        top = self.model_to_pixel(0, self._origin_y)
        bottom = self.model_to_pixel(max_y, self._origin_y)

        color = self._config.render.border_color
        self._draw_segment(raster, left, top, left, bottom, color)
        self._draw_segment(raster, left, bottom, right, bottom, color)
        self._draw_segment(raster, right, bottom, right, top, color)
        self._draw_segment(raster, right, top, left, top, color)

    @staticmethod
    def _draw_segment(raster: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        """Draw an axis-aligned segment clipped to the raster."""
        height, width = raster.shape
        if x0 == x1:
            if not 0 <= x0 < width:
                return
            lo, hi = sorted((y0, y1))
            lo, hi = max(lo, 0), min(hi, height - 1)
            if lo > hi:
                return
            raster[lo:hi + 1, x0] = color
        else:
            if not 0 <= y0 < height:
                return
            lo, hi = sorted((x0, x1))
            lo, hi = max(lo, 0), min(hi, width - 1)
            if lo > hi:
                return
            raster[y0, lo:hi + 1] = color

    def take_snapshot(self, name: Optional[str] = None) -> Dataset:
        """
        Capture the rendered pane as a new ARGB dataset.

        The capture keeps the current framing, including magnified blocks,
        background and border. Renders first if nothing was rendered yet.

        Returns:
            Dataset of pane_width x pane_height ARGB elements
        """
        raster = self._last_raster if self._last_raster is not None else self.render()
        pixels = raster.T
        data = np.empty(pixels.shape, dtype=ARGB_DTYPE)
        data["a"] = (pixels >> 24) & 0xFF
        data["r"] = (pixels >> 16) & 0xFF
        data["g"] = (pixels >> 8) & 0xFF
        data["b"] = pixels & 0xFF

        source = self._plane.dataset
        if name is None:
            name = f"{self.effective_scale()} snapshot of {source.display_name}"
        logging.info(f"Snapshot: {data.shape[0]}x{data.shape[1]} from '{source.display_name}'")
        return Dataset(
            data=data,
            element_type=ElementTypes.get("argb"),
            axes=[Axis("x", "pixel"), Axis("y", "pixel")],
            name=name,
            source=source.source,
        )
