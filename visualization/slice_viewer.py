"""
Slice Viewer

Framework-agnostic viewer state for one plane of an N-dimensional dataset.
Composes range resolution, normalization, color synthesis and the
pan/zoom viewport, and spawns new viewers for derived data.
"""

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple, Union

import numpy as np

from config import ViewerConfig
from core.base import Dataset
from core.element_types import SpecialValue
from core.errors import InvalidDatasetError, NumericParseError
from core.plane import PlaneSelection, PlaneView
from processing.conversions import to_color, to_float, to_magnitude
from processing.plane_extractor import PlaneExtractor
from .animation import AnimationState, PlaneAnimator
from .color import ColorMode, ColorSynthesizer, Palette
from .normalizer import PrecisionNormalizer
from .value_range import DisplayRange, ValueRangeResolver
from .viewport import Scale, ViewportEngine


SPECIAL_TEXT = {
    SpecialValue.NAN: "nan",
    SpecialValue.POS_INF: "+Inf",
    SpecialValue.NEG_INF: "-Inf",
}

# Calibrated coordinates closer than this to the index are not shown
CALIBRATION_TOLERANCE = Decimal("0.000001")


@dataclass
class PixelReadout:
    """
    Everything known about the element under one pixel.

    Attributes:
        i0: Model coordinate along the first plane axis
        i1: Model coordinate along the second plane axis
        index: Full dataset index vector
        coordinates: Real-world coordinates of index, one per dataset axis
        value: Raw element
        hp_value: Decimal value of the element, None if not numeric
        text: Display text for non-numeric or special elements
    """
    i0: int
    i1: int
    index: Tuple[int, ...]
    coordinates: List[Decimal]
    value: Any
    hp_value: Optional[Decimal] = None
    text: Optional[str] = None


class SliceViewer:
    """
    State of one viewer: dataset, plane selection, display range and viewport.

    Every operation that reads or mutates the viewport or the plane
    positions holds the viewer's lock, so the background animation and
    interactive calls never interleave.

    Example:
        viewer = SliceViewer(dataset)
        viewer.zoom_in()
        raster = viewer.render()
        plane_viewer = viewer.open_plane()
    """

    def __init__(
        self,
        dataset: Dataset,
        axis0: int = 0,
        axis1: int = 1,
        config: Optional[ViewerConfig] = None,
        palette: Optional[Palette] = None
    ):
        """
        Initialize viewer.

        Args:
            dataset: Dataset to view
            axis0: Axis shown horizontally
            axis1: Axis shown vertically
            config: Viewer configuration
            palette: Palette for scalar data (grayscale if omitted)

        Raises:
            InvalidDatasetError: If the dataset is empty or the axes are invalid
        """
        self._config = config or ViewerConfig()
        self._lock = threading.RLock()
        self._dataset = dataset

        if dataset.size == 0:
            raise InvalidDatasetError(f"Dataset '{dataset.display_name}' has no elements")
        self._selection = PlaneSelection(dataset.dimensions, axis0, axis1)

        self._normalizer = PrecisionNormalizer(self._config.range.decimal_precision)
        self._resolver = ValueRangeResolver(self._normalizer, self._config.range)
        self._prefer_data_range = self._config.range.prefer_data_range
        self._window_low: Optional[Decimal] = None
        self._window_high: Optional[Decimal] = None
        self._range = self._resolver.compute(dataset, self._prefer_data_range)
        self._hp_window = self._range.window()

        self._synthesizer = ColorSynthesizer(
            dataset.element_type, palette, self._config.render, self._normalizer
        )
        self._engine = ViewportEngine(
            PlaneView(dataset, self._selection), self._colorize, self._config
        )
        self._animator = PlaneAnimator(self._config.animation)

        logging.info(
            f"Viewer: '{dataset.display_name}' {dataset.dimensions} {dataset.element_type.name}, "
            f"range [{self._range.min}, {self._range.max}] from {self._range.source.value}"
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def config(self) -> ViewerConfig:
        return self._config

    @property
    def selection(self) -> PlaneSelection:
        return self._selection

    @property
    def engine(self) -> ViewportEngine:
        return self._engine

    @property
    def display_range(self) -> DisplayRange:
        return self._range

    @property
    def effective_range(self) -> Tuple[Decimal, Decimal]:
        """Normalization bounds after the display window is applied."""
        return self._hp_window

    @property
    def display_window(self) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        return self._window_low, self._window_high

    @property
    def prefer_data_range(self) -> bool:
        return self._prefer_data_range

    @property
    def color_mode(self) -> ColorMode:
        return self._synthesizer.mode

    @property
    def palette(self) -> Palette:
        return self._synthesizer.palette

    @property
    def scale(self) -> Scale:
        return self._engine.scale

    def effective_scale(self) -> str:
        return self._engine.effective_scale()

    @property
    def last_parse_errors(self) -> List[NumericParseError]:
        return self._engine.last_parse_errors

    def set_palette(self, palette: Optional[Palette] = None) -> None:
        """Replace the palette; None restores the default grayscale."""
        with self._lock:
            self._synthesizer.set_palette(palette)

    def _colorize(self, value: Any) -> int:
        low, high = self._hp_window
        return self._synthesizer.colorize(value, low, high)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def zoom_in(self) -> bool:
        with self._lock:
            return self._engine.increase_zoom()

    def zoom_out(self) -> bool:
        with self._lock:
            return self._engine.decrease_zoom()

    def pan_left(self, pixels: Optional[int] = None) -> bool:
        with self._lock:
            return self._engine.pan_left(pixels)

    def pan_right(self, pixels: Optional[int] = None) -> bool:
        with self._lock:
            return self._engine.pan_right(pixels)

    def pan_up(self, pixels: Optional[int] = None) -> bool:
        with self._lock:
            return self._engine.pan_up(pixels)

    def pan_down(self, pixels: Optional[int] = None) -> bool:
        with self._lock:
            return self._engine.pan_down(pixels)

    def reset_view(self) -> None:
        with self._lock:
            self._engine.reset()

    # ------------------------------------------------------------------
    # Plane positions
    # ------------------------------------------------------------------

    @property
    def positions_count(self) -> int:
        return self._selection.positions_count

    def position(self, extra: int) -> int:
        return self._selection.position(extra)

    def axis_size(self, extra: int) -> int:
        return self._selection.axis_size(extra)

    def position_label(self, extra: int) -> str:
        """One-based position text, e.g. "3 / 20"."""
        return f"{self._selection.position(extra) + 1} / {self._selection.axis_size(extra)}"

    def set_position(self, extra: int, value: int) -> bool:
        """
        Fix one non-plane axis at a position.

        Returns:
            False if value is out of range or already current
        """
        with self._lock:
            if not 0 <= value < self._selection.axis_size(extra):
                return False
            if value == self._selection.position(extra):
                return False
            self._selection.set_position(extra, value)
            return True

    def increment_position(self, extra: int) -> bool:
        with self._lock:
            return self.set_position(extra, self._selection.position(extra) + 1)

    def decrement_position(self, extra: int) -> bool:
        with self._lock:
            return self.set_position(extra, self._selection.position(extra) - 1)

    def first_position(self, extra: int) -> bool:
        with self._lock:
            self._selection.set_position(extra, 0)
            return True

    def last_position(self, extra: int) -> bool:
        with self._lock:
            self._selection.set_position(extra, self._selection.axis_size(extra) - 1)
            return True

    # ------------------------------------------------------------------
    # Display range
    # ------------------------------------------------------------------

    def set_prefer_data_range(self, prefer: bool) -> DisplayRange:
        """
        Choose between data-driven and type-declared display bounds.

        Returns:
            The recomputed display range
        """
        with self._lock:
            self._prefer_data_range = bool(prefer)
            self._range = self._resolver.compute(self._dataset, self._prefer_data_range)
            self._update_window()
            return self._range

    def set_display_window(
        self,
        low: Union[None, int, float, str, Decimal] = None,
        high: Union[None, int, float, str, Decimal] = None
    ) -> Tuple[Decimal, Decimal]:
        """
        Narrow the normalization window inside the display range.

        Args:
            low: Lower bound (None clears it)
            high: Upper bound (None clears it)

        Returns:
            The effective (low, high) bounds

        Raises:
            NumericParseError: If a bound is not a number
            ValueError: If the effective window would be inverted
        """
        hp_low = self._parse_bound(low)
        hp_high = self._parse_bound(high)
        with self._lock:
            effective = self._range.window(hp_low, hp_high)
            if effective[0] > effective[1]:
                raise ValueError(f"Display window [{effective[0]}, {effective[1]}] is inverted")
            self._window_low, self._window_high = hp_low, hp_high
            self._hp_window = effective
            logging.info(f"Viewer: display window set to [{effective[0]}, {effective[1]}]")
            return effective

    def _parse_bound(self, bound: Any) -> Optional[Decimal]:
        if bound is None or (isinstance(bound, str) and not bound.strip()):
            return None
        if isinstance(bound, float):
            bound = repr(bound)
        return self._normalizer.to_high_precision(bound)

    def _update_window(self) -> None:
        effective = self._range.window(self._window_low, self._window_high)
        if effective[0] > effective[1]:
            logging.warning("Viewer: display window no longer fits the range, cleared")
            self._window_low = self._window_high = None
            effective = self._range.window()
        self._hp_window = effective

    # ------------------------------------------------------------------
    # Rendering and readout
    # ------------------------------------------------------------------

    def render(self) -> np.ndarray:
        """Render the current view as a (pane_height, pane_width) ARGB array."""
        with self._lock:
            return self._engine.render()

    def readout(self, px: int, py: int) -> Optional[PixelReadout]:
        """
        Describe the element under a pane pixel.

        Returns:
            PixelReadout, or None if the pixel shows no element
        """
        with self._lock:
            engine = self._engine
            if not (0 <= px < engine.pane_width and 0 <= py < engine.pane_height):
                return None
            i0 = engine.pixel_to_model(px, engine.origin_x)
            i1 = engine.pixel_to_model(py, engine.origin_y)
            plane = engine.plane
            if not plane.in_bounds(i0, i1):
                return None
            index = plane.index_vector(i0, i1)
            value = plane.get(i0, i1)

        element_type = self._dataset.element_type
        readout = PixelReadout(i0, i1, index, self._dataset.project(index), value)
        special = element_type.special_value(value)
        if special is not None:
            readout.text = SPECIAL_TEXT[special]
        elif element_type.color_layout is not None:
            channels = ",".join(str(int(value[c])) for c in element_type.color_layout.channels)
            readout.text = f"{element_type.name}({channels})"
        elif self.color_mode is ColorMode.PALETTE:
            try:
                readout.hp_value = self._normalizer.to_high_precision(value, element_type)
            except NumericParseError:
                readout.text = str(value)
        else:
            readout.text = str(value)
        return readout

    def format_readout(self, readout: PixelReadout, decimals: int = 3) -> str:
        """
        Status line text, e.g. ``"x = 4 (0.400 mm), y = 2, value = 17.000 K"``.

        Calibrated coordinates are only shown where they differ from the index.
        """
        dataset = self._dataset
        parts = []
        for name, axis, i in (("d0", self._selection.axis0, readout.i0),
                              ("d1", self._selection.axis1, readout.i1)):
            label = dataset.axis_label(axis) or name
            text = f"{label} = {i}"
            if axis < dataset.num_dimensions:
                real = readout.coordinates[axis]
                if abs(real - Decimal(i)) > CALIBRATION_TOLERANCE:
                    unit = dataset.axis_unit(axis)
                    unit_text = f" {unit}" if unit else ""
                    text += f" ({real:.{decimals}f}{unit_text})"
            parts.append(text)

        if readout.text is not None:
            value = readout.text
        else:
            value = f"{readout.hp_value:.{decimals}f}"
        unit = f" {dataset.value_unit}" if dataset.value_unit else ""
        parts.append(f"value = {value}{unit}")
        return ", ".join(parts)

    def zoom_center(self) -> Tuple[Decimal, Decimal]:
        """Real-world coordinates of the model point at the pane centre."""
        with self._lock:
            engine = self._engine
            i0 = engine.pixel_to_model(engine.pane_width // 2, engine.origin_x)
            i1 = engine.pixel_to_model(engine.pane_height // 2, engine.origin_y)
            index = self._selection.index_vector(i0, i1)
        coords = self._dataset.project(index)
        c0 = coords[self._selection.axis0]
        c1 = coords[self._selection.axis1] if self._selection.axis1 < len(coords) else Decimal(i1)
        return c0, c1

    # ------------------------------------------------------------------
    # Derived data
    # ------------------------------------------------------------------

    def _spawn(self, dataset: Dataset, axis0: int = 0, axis1: int = 1) -> "SliceViewer":
        return SliceViewer(dataset, axis0, axis1, config=self._config)

    def take_snapshot(self) -> Dataset:
        """Capture the rendered pane as an ARGB dataset."""
        with self._lock:
            return self._engine.take_snapshot()

    def open_snapshot(self) -> "SliceViewer":
        return self._spawn(self.take_snapshot())

    def grab_plane(self) -> Dataset:
        """Copy the current plane into a new 2-D dataset."""
        with self._lock:
            selection = self._selection.copy()
        return PlaneExtractor.grab_plane(self._dataset, selection)

    def open_plane(self) -> "SliceViewer":
        return self._spawn(self.grab_plane())

    def explode(self, axis: int) -> List[Dataset]:
        """Split the dataset into one dataset per index along ``axis``."""
        return PlaneExtractor.explode_along_axis(self._dataset, axis)

    def open_exploded(self, axis: int) -> List["SliceViewer"]:
        return [self._spawn(ds) for ds in self.explode(axis)]

    def swap_axes(self, axis0: int, axis1: int) -> "SliceViewer":
        """New viewer of the same dataset with different plane axes."""
        return self._spawn(self._dataset, axis0, axis1)

    def open_as_float(self, type_name: str = "float64") -> "SliceViewer":
        return self._spawn(to_float(self._dataset, type_name))

    def open_as_color(self) -> "SliceViewer":
        return self._spawn(to_color(self._dataset))

    def open_magnitude(self) -> "SliceViewer":
        return self._spawn(to_magnitude(self._dataset))

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    @property
    def animation_state(self) -> AnimationState:
        return self._animator.state

    def animate(
        self,
        extra: int,
        on_frame: Optional[Callable[[int, np.ndarray], None]] = None,
        on_finished: Optional[Callable[[bool], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None
    ) -> bool:
        """
        Step one non-plane axis through all positions in the background.

        Args:
            extra: Index of the non-plane axis to animate
            on_frame: Receives (position, raster) after each frame
            on_finished: Receives True if the animation stopped early
            on_error: Receives the exception if rendering a frame failed

        Returns:
            False if an animation is already running
        """
        if not 0 <= extra < self._selection.positions_count:
            raise ValueError(f"No non-plane axis {extra} (viewer has {self._selection.positions_count})")

        def step(position: int) -> np.ndarray:
            with self._lock:
                self._selection.set_position(extra, position)
                return self._engine.render()

        return self._animator.start(
            self._selection.axis_size(extra), step, on_frame, on_finished, on_error
        )

    def stop_animation(self) -> bool:
        return self._animator.stop()

    def wait_animation(self, timeout: Optional[float] = None) -> None:
        self._animator.wait(timeout)

    def close(self) -> None:
        """Stop any animation and release the animation thread."""
        self._animator.shutdown()
