from decimal import Decimal

import numpy as np
import pytest

from core.base import Dataset
from core.errors import UnsupportedValueTypeError
from processing.conversions import find_channel_axis, to_color, to_float, to_magnitude


def test_to_float_keeps_values_and_metadata(volume: Dataset) -> None:
    result = to_float(volume, "float32")
    assert result.element_type.name == "float32"
    assert result.data.dtype == np.float32
    np.testing.assert_array_equal(result.data, volume.data.astype(np.float32))
    assert result.name == "float32 of vol"
    assert result.coordinate_space is volume.coordinate_space
    assert [a.unit for a in result.axes] == ["mm", "mm", "mm"]


def test_to_high_precision(ramp: Dataset) -> None:
    result = to_float(ramp, "highprec")
    assert result.data.dtype == object
    assert result.data[2, 3] == Decimal(35)


def test_decimals_to_float() -> None:
    data = np.empty(2, dtype=object)
    data[:] = [Decimal("1.25"), Decimal("-3")]
    result = to_float(Dataset(data))
    np.testing.assert_array_equal(result.data, np.array([1.25, -3.0]))


def test_to_float_rejects_unknown_target(ramp: Dataset) -> None:
    with pytest.raises(ValueError):
        to_float(ramp, "int32")


def test_to_float_rejects_complex() -> None:
    with pytest.raises(UnsupportedValueTypeError):
        to_float(Dataset(np.array([1j], dtype=np.complex128)))


def test_channel_axis_is_last_of_size_three_or_four() -> None:
    assert find_channel_axis(Dataset(np.zeros((3, 5, 4), dtype=np.uint8))) == 2
    assert find_channel_axis(Dataset(np.zeros((3, 5, 6), dtype=np.uint8))) == 0
    with pytest.raises(UnsupportedValueTypeError):
        find_channel_axis(Dataset(np.zeros((5, 6), dtype=np.uint8)))


def test_to_color_rgb() -> None:
    data = np.zeros((2, 5, 3), dtype=np.uint8)
    data[1, 4] = (10, 20, 30)
    result = to_color(Dataset(data, name="img"))
    assert result.element_type.name == "rgb"
    assert result.dimensions == (2, 5)
    pixel = result.data[1, 4]
    assert (pixel["r"], pixel["g"], pixel["b"]) == (10, 20, 30)
    assert result.name == "rgb of img"


def test_to_color_argb_from_leading_channel_axis() -> None:
    data = np.zeros((4, 2, 2), dtype=np.uint8)
    data[:, 0, 1] = (1, 2, 3, 200)
    result = to_color(Dataset(data))
    assert result.element_type.name == "argb"
    assert result.dimensions == (2, 2)
    pixel = result.data[0, 1]
    assert (pixel["a"], pixel["r"], pixel["g"], pixel["b"]) == (200, 1, 2, 3)


def test_to_color_needs_bytes(volume: Dataset) -> None:
    with pytest.raises(UnsupportedValueTypeError):
        to_color(volume)


def test_to_magnitude() -> None:
    ds = Dataset(np.array([[3 + 4j, -2j]], dtype=np.complex64), value_unit="V")
    result = to_magnitude(ds)
    assert result.element_type.name == "float64"
    np.testing.assert_allclose(result.data, [[5.0, 2.0]])
    assert result.value_unit == "V"
    assert result.name == "magnitude of <unknown name>"


def test_color_has_no_magnitude() -> None:
    data = np.zeros((2, 3), dtype=np.uint8)
    rgb = to_color(Dataset(data))
    with pytest.raises(UnsupportedValueTypeError):
        to_magnitude(rgb)
