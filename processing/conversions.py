"""
Dataset Conversions

Element type conversions producing new datasets: to a floating point or
decimal type, from a channel axis to native color, and from complex
values to magnitudes.
"""

import logging
from decimal import Decimal
from typing import Optional

import numpy as np

from core.base import Axis, Dataset
from core.element_types import ARGB_DTYPE, RGB_DTYPE, Capability, ElementType, ElementTypes
from core.errors import UnsupportedValueTypeError


FLOAT_TARGETS = ("float16", "float32", "float64", "float128", "highprec")


def _derived(
    source: Dataset,
    data: np.ndarray,
    element_type: ElementType,
    name: str,
    axes: Optional[list] = None,
    coordinate_space=None,
    keep_space: bool = True
) -> Dataset:
    return Dataset(
        data=data,
        element_type=element_type,
        axes=axes if axes is not None else [Axis(a.label, a.unit) for a in source.axes],
        name=name,
        source=source.source,
        value_type=source.value_type,
        value_unit=source.value_unit,
        coordinate_space=source.coordinate_space if keep_space else coordinate_space,
    )


def _to_decimal_array(source: Dataset) -> np.ndarray:
    element_type = source.element_type
    out = np.empty(source.data.shape, dtype=object)
    flat_in = source.raw
    flat_out = out.reshape(-1)
    for i, value in enumerate(flat_in):
        if element_type.to_decimal is not None:
            flat_out[i] = element_type.to_decimal(value)
        else:
            flat_out[i] = Decimal(str(value))
    return out


def to_float(dataset: Dataset, type_name: str = "float64") -> Dataset:
    """
    Convert a scalar dataset to a floating point or decimal type.

    Args:
        dataset: Dataset with ordered scalar elements
        type_name: One of float16, float32, float64, float128, highprec

    Returns:
        New dataset of the target type with all metadata carried

    Raises:
        ValueError: If type_name is not a floating target
        UnsupportedValueTypeError: If the elements are not scalars
    """
    if type_name not in FLOAT_TARGETS:
        raise ValueError(f"Unknown float type '{type_name}', expected one of {FLOAT_TARGETS}")
    source_type = dataset.element_type
    if not source_type.supports(Capability.ORDERED):
        raise UnsupportedValueTypeError(
            f"Cannot convert '{source_type.name}' elements to {type_name}"
        )

    target = ElementTypes.get(type_name)
    if type_name == "highprec":
        data = _to_decimal_array(dataset)
    elif dataset.data.dtype == object:
        # Decimals go through their text so long doubles keep their extra digits
        data = np.array([target.from_text(str(v)) for v in dataset.raw], dtype=target.dtype)
        data = data.reshape(dataset.data.shape)
    else:
        data = dataset.data.astype(target.dtype)

    logging.info(f"Converted '{dataset.display_name}' from {source_type.name} to {type_name}")
    return _derived(dataset, data, target, f"{type_name} of {dataset.display_name}")


def find_channel_axis(dataset: Dataset) -> int:
    """
    Axis holding color channels: the last axis of size 3 or 4.

    Raises:
        UnsupportedValueTypeError: If no axis qualifies
    """
    for axis in range(dataset.num_dimensions - 1, -1, -1):
        if dataset.dimension(axis) in (3, 4):
            return axis
    raise UnsupportedValueTypeError(
        f"No channel axis of size 3 or 4 in dimensions {dataset.dimensions}"
    )


def to_color(dataset: Dataset) -> Dataset:
    """
    Fold a channel axis of a uint8 dataset into RGB or ARGB elements.

    Channels are read in r, g, b[, a] order. The channel axis is removed.

    Raises:
        UnsupportedValueTypeError: If the dataset is not uint8 or has no
            channel axis
    """
    if dataset.element_type.name != "uint8":
        raise UnsupportedValueTypeError(
            f"Color conversion needs uint8 channels, got '{dataset.element_type.name}'"
        )
    if dataset.num_dimensions < 2:
        raise UnsupportedValueTypeError("Color conversion needs a channel axis and a data axis")

    axis = find_channel_axis(dataset)
    channels = dataset.dimension(axis)
    planes = np.moveaxis(dataset.data, axis, -1)

    if channels == 4:
        data = np.empty(planes.shape[:-1], dtype=ARGB_DTYPE)
        data["a"] = planes[..., 3]
        element_type = ElementTypes.get("argb")
    else:
        data = np.empty(planes.shape[:-1], dtype=RGB_DTYPE)
        element_type = ElementTypes.get("rgb")
    data["r"] = planes[..., 0]
    data["g"] = planes[..., 1]
    data["b"] = planes[..., 2]

    remaining = [a for a in range(dataset.num_dimensions) if a != axis]
    axes = [Axis(dataset.axes[a].label, dataset.axes[a].unit) for a in remaining]
    space = None
    if dataset.coordinate_space is not None:
        space = dataset.coordinate_space.sub_space(remaining, [0] * dataset.num_dimensions)

    logging.info(f"Converted '{dataset.display_name}' to {element_type.name} along axis {axis}")
    return _derived(
        dataset, data, element_type, f"{element_type.name} of {dataset.display_name}",
        axes=axes, coordinate_space=space, keep_space=False,
    )


def to_magnitude(dataset: Dataset) -> Dataset:
    """
    Replace unordered values with their magnitudes as float64.

    Raises:
        UnsupportedValueTypeError: If the type has no absolute value
    """
    element_type = dataset.element_type
    if not element_type.supports(Capability.ABSOLUTE):
        raise UnsupportedValueTypeError(f"'{element_type.name}' has no magnitude")

    data = np.asarray(element_type.absolute(dataset.data), dtype=np.float64)
    logging.info(f"Computed magnitudes of '{dataset.display_name}'")
    return _derived(
        dataset, data, ElementTypes.get("float64"), f"magnitude of {dataset.display_name}"
    )
