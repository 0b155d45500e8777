import threading
from decimal import Decimal

import numpy as np
import pytest

from core.base import Dataset
from core.errors import InvalidDatasetError, NumericParseError, UnsupportedValueTypeError
from visualization.animation import AnimationState
from visualization.color import ColorMode
from visualization.slice_viewer import SliceViewer
from visualization.value_range import RangeSource
from visualization.viewport import Magnify


@pytest.fixture
def ramp_viewer(ramp, small_config):
    viewer = SliceViewer(ramp, config=small_config)
    yield viewer
    viewer.close()


@pytest.fixture
def volume_viewer(volume, small_config):
    viewer = SliceViewer(volume, config=small_config)
    yield viewer
    viewer.close()


def test_range_uses_data_by_default(ramp_viewer: SliceViewer) -> None:
    assert ramp_viewer.display_range.source is RangeSource.DATA
    assert ramp_viewer.effective_range == (Decimal(0), Decimal(255))
    assert ramp_viewer.color_mode is ColorMode.PALETTE


def test_prefer_type_range(volume_viewer: SliceViewer) -> None:
    assert volume_viewer.effective_range == (Decimal(0), Decimal(23))
    result = volume_viewer.set_prefer_data_range(False)
    assert result.source is RangeSource.TYPE
    assert volume_viewer.effective_range == (Decimal(-32768), Decimal(32767))
    assert not volume_viewer.prefer_data_range


def test_positions(volume_viewer: SliceViewer) -> None:
    assert volume_viewer.positions_count == 1
    assert volume_viewer.axis_size(0) == 2
    assert volume_viewer.position_label(0) == "1 / 2"
    assert volume_viewer.set_position(0, 1)
    assert not volume_viewer.set_position(0, 1)
    assert not volume_viewer.set_position(0, 2)
    assert not volume_viewer.increment_position(0)
    assert volume_viewer.decrement_position(0)
    assert not volume_viewer.decrement_position(0)
    assert volume_viewer.last_position(0)
    assert volume_viewer.position(0) == 1
    assert volume_viewer.first_position(0)
    assert volume_viewer.position(0) == 0


def test_position_changes_rendered_plane(volume_viewer: SliceViewer) -> None:
    before = volume_viewer.render().copy()
    volume_viewer.set_position(0, 1)
    assert not np.array_equal(before, volume_viewer.render())


def test_display_window_is_clamped(ramp_viewer: SliceViewer) -> None:
    assert ramp_viewer.set_display_window(100, 300) == (Decimal(100), Decimal(255))
    assert ramp_viewer.display_window == (Decimal(100), Decimal(300))


def test_display_window_from_text(ramp_viewer: SliceViewer) -> None:
    assert ramp_viewer.set_display_window("10", "20.5") == (Decimal(10), Decimal("20.5"))
    assert ramp_viewer.set_display_window("", None) == (Decimal(0), Decimal(255))


def test_inverted_display_window_is_rejected(ramp_viewer: SliceViewer) -> None:
    with pytest.raises(ValueError):
        ramp_viewer.set_display_window(200, 100)
    assert ramp_viewer.effective_range == (Decimal(0), Decimal(255))


def test_unparseable_display_window(ramp_viewer: SliceViewer) -> None:
    with pytest.raises(NumericParseError):
        ramp_viewer.set_display_window("abc", None)


def test_display_window_changes_colors(ramp_viewer: SliceViewer) -> None:
    full = ramp_viewer.render().copy()
    ramp_viewer.set_display_window(0, 64)
    narrowed = ramp_viewer.render()
    # model (10, 7) holds 167, above the window
    assert narrowed[5, 10] == 0xFFFFFFFF
    assert full[5, 10] != 0xFFFFFFFF


def test_readout_on_ramp(ramp_viewer: SliceViewer) -> None:
    assert (ramp_viewer.engine.origin_x, ramp_viewer.engine.origin_y) == (0, 2)
    readout = ramp_viewer.readout(3, 4)
    assert (readout.i0, readout.i1) == (3, 6)
    assert readout.value == 54
    assert readout.hp_value == Decimal(54)
    assert ramp_viewer.format_readout(readout) == "d0 = 3, d1 = 6, value = 54.000"
    assert ramp_viewer.readout(16, 0) is None


def test_readout_with_calibration(volume_viewer: SliceViewer) -> None:
    assert volume_viewer.readout(0, 0) is None
    readout = volume_viewer.readout(7, 6)
    assert (readout.i0, readout.i1) == (1, 1)
    assert readout.index == (1, 1, 0)
    assert readout.value == 8
    assert volume_viewer.format_readout(readout) == "x = 1 (1.500 mm), y = 1, value = 8.000 HU"


def test_readout_of_special_values(small_config) -> None:
    ds = Dataset(np.array([[np.nan, np.inf], [-np.inf, 1.0]], dtype=np.float32))
    viewer = SliceViewer(ds, config=small_config)
    try:
        origin_x, origin_y = viewer.engine.origin_x, viewer.engine.origin_y
        readout = viewer.readout(-origin_x, -origin_y)
        assert readout.text == "nan"
        assert viewer.format_readout(readout).endswith("value = nan")
        assert viewer.readout(-origin_x, 1 - origin_y).text == "+Inf"
        assert viewer.readout(1 - origin_x, -origin_y).text == "-Inf"
    finally:
        viewer.close()


def test_zoom_center(volume_viewer: SliceViewer) -> None:
    assert volume_viewer.zoom_center() == (Decimal(2), Decimal(1))


def test_zoom_and_reset(ramp_viewer: SliceViewer) -> None:
    assert ramp_viewer.zoom_in()
    assert ramp_viewer.scale == Magnify(3)
    assert ramp_viewer.effective_scale() == "3X"
    ramp_viewer.reset_view()
    assert ramp_viewer.effective_scale() == "1X"
    assert (ramp_viewer.engine.origin_x, ramp_viewer.engine.origin_y) == (0, 2)


def test_open_plane_names_and_shape(volume_viewer: SliceViewer) -> None:
    volume_viewer.set_position(0, 1)
    plane_viewer = volume_viewer.open_plane()
    try:
        assert plane_viewer.dataset.dimensions == (4, 3)
        assert plane_viewer.dataset.name == "[x:y] slice at z(1) of vol"
        assert plane_viewer.positions_count == 0
    finally:
        plane_viewer.close()


def test_swap_axes(volume_viewer: SliceViewer) -> None:
    swapped = volume_viewer.swap_axes(2, 0)
    try:
        assert (swapped.selection.d0, swapped.selection.d1) == (2, 4)
        assert swapped.dataset is volume_viewer.dataset
    finally:
        swapped.close()


def test_open_exploded(volume_viewer: SliceViewer) -> None:
    viewers = volume_viewer.open_exploded(2)
    try:
        assert [v.dataset.name for v in viewers] == ["z(0) of vol", "z(1) of vol"]
    finally:
        for v in viewers:
            v.close()


def test_open_snapshot(ramp_viewer: SliceViewer) -> None:
    ramp_viewer.render()
    snap_viewer = ramp_viewer.open_snapshot()
    try:
        assert snap_viewer.dataset.dimensions == (16, 12)
        assert snap_viewer.color_mode is ColorMode.NATIVE
    finally:
        snap_viewer.close()


def test_open_as_float(volume_viewer: SliceViewer) -> None:
    converted = volume_viewer.open_as_float("float32")
    try:
        assert converted.dataset.element_type.name == "float32"
        assert converted.dataset.value_unit == "HU"
    finally:
        converted.close()


def test_complex_data_needs_magnitude(small_config) -> None:
    ds = Dataset(np.array([[3 + 4j, 1j], [0, 2]], dtype=np.complex64))
    viewer = SliceViewer(ds, config=small_config)
    try:
        assert viewer.color_mode is ColorMode.UNSUPPORTED
        with pytest.raises(UnsupportedValueTypeError):
            viewer.render()
        magnitude = viewer.open_magnitude()
        assert magnitude.color_mode is ColorMode.PALETTE
        assert magnitude.dataset.data[0, 0] == 5.0
        magnitude.render()
        magnitude.close()
    finally:
        viewer.close()


def test_one_dimensional_dataset(small_config) -> None:
    viewer = SliceViewer(Dataset(np.arange(5, dtype=np.uint8)), config=small_config)
    try:
        assert viewer.positions_count == 0
        assert viewer.render().shape == (12, 16)
    finally:
        viewer.close()


def test_empty_dataset_is_rejected(small_config) -> None:
    with pytest.raises(InvalidDatasetError):
        SliceViewer(Dataset(np.zeros((0, 4), dtype=np.uint8)), config=small_config)


def test_animate_visits_every_position(volume_viewer: SliceViewer) -> None:
    frames = []
    finished = threading.Event()
    outcome = []

    def on_finished(cancelled: bool) -> None:
        outcome.append(cancelled)
        finished.set()

    assert volume_viewer.animate(0, lambda i, raster: frames.append(i), on_finished)
    assert finished.wait(5)
    volume_viewer.wait_animation(5)
    assert frames == [0, 1]
    assert outcome == [False]
    assert volume_viewer.position(0) == 1
    assert volume_viewer.animation_state is AnimationState.IDLE


def test_animate_rejects_bad_axis(volume_viewer: SliceViewer) -> None:
    with pytest.raises(ValueError):
        volume_viewer.animate(1)


def test_signaling_nan_in_decimal_data(small_config) -> None:
    data = np.empty((3, 3), dtype=object)
    data[:] = [[Decimal(v) for v in row] for row in ([1, 2, 3], [2, "sNaN", 2], [3, 2, 1])]
    viewer = SliceViewer(Dataset(data), config=small_config)
    try:
        assert viewer.effective_range == (Decimal(1), Decimal(3))
        viewer.render()
        centre = viewer.readout(-viewer.engine.origin_x + 1, -viewer.engine.origin_y + 1)
        assert centre.text == "nan"
    finally:
        viewer.close()


def test_failed_animation_reports_error(small_config) -> None:
    ds = Dataset(np.ones((2, 2, 3), dtype=np.complex64))
    viewer = SliceViewer(ds, config=small_config)
    errors = []
    outcome = []
    try:
        assert viewer.animate(0, on_finished=outcome.append, on_error=errors.append)
        viewer.wait_animation(5)
        assert len(errors) == 1
        assert isinstance(errors[0], UnsupportedValueTypeError)
        assert outcome == [True]
        assert viewer.animation_state is AnimationState.IDLE
    finally:
        viewer.close()
