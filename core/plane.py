"""
Plane Selection

Defines which 2-D slice of an N-dimensional dataset is addressable:
two free axes plus a fixed position on every other axis.
"""

from typing import Any, List, Sequence, Tuple

from .base import Dataset
from .errors import InvalidDatasetError


class PlaneSelection:
    """
    Two free axes and fixed positions for all remaining axes.

    A 1-D dataset can be viewed with ``axis1 == 1``; the missing axis
    then has extent 1.
    """

    def __init__(self, dimensions: Sequence[int], axis0: int = 0, axis1: int = 1):
        ndim = len(dimensions)
        if ndim < 1:
            raise InvalidDatasetError("Cannot select a plane of a 0-dimensional dataset")
        if axis0 == axis1:
            raise InvalidDatasetError(f"Plane axes must differ (both are {axis0})")
        if not 0 <= axis0 < ndim:
            raise InvalidDatasetError(f"Axis {axis0} out of range for {ndim} dimensions")
        if not 0 <= axis1 < max(ndim, 2):
            raise InvalidDatasetError(f"Axis {axis1} out of range for {ndim} dimensions")

        self._dims: Tuple[int, ...] = tuple(int(d) for d in dimensions)
        self._axis0 = axis0
        self._axis1 = axis1
        self._extra_axes: List[int] = [a for a in range(ndim) if a not in (axis0, axis1)]
        self._positions: List[int] = [0] * len(self._extra_axes)

    @property
    def axis0(self) -> int:
        return self._axis0

    @property
    def axis1(self) -> int:
        return self._axis1

    @property
    def num_dimensions(self) -> int:
        return len(self._dims)

    @property
    def d0(self) -> int:
        """Extent of the first free axis."""
        return self._dims[self._axis0]

    @property
    def d1(self) -> int:
        """Extent of the second free axis (1 if the dataset is 1-D)."""
        return self._dims[self._axis1] if self._axis1 < len(self._dims) else 1

    @property
    def extra_axes(self) -> List[int]:
        return list(self._extra_axes)

    @property
    def positions_count(self) -> int:
        return len(self._extra_axes)

    @property
    def positions(self) -> Tuple[int, ...]:
        return tuple(self._positions)

    def axis_number(self, extra: int) -> int:
        """Dataset axis number of the ``extra``-th fixed axis."""
        return self._extra_axes[extra]

    def axis_size(self, extra: int) -> int:
        return self._dims[self._extra_axes[extra]]

    def position(self, extra: int) -> int:
        return self._positions[extra]

    def set_position(self, extra: int, value: int) -> None:
        """
        Fix the ``extra``-th non-plane axis at ``value``.

        Raises:
            ValueError: If value is outside the axis extent
        """
        size = self.axis_size(extra)
        if not 0 <= value < size:
            raise ValueError(f"Position {value} out of range [0, {size}) for axis {self._extra_axes[extra]}")
        self._positions[extra] = int(value)

    def index_vector(self, i0: int, i1: int) -> Tuple[int, ...]:
        """Full dataset index of plane coordinate (i0, i1)."""
        index = [0] * len(self._dims)
        index[self._axis0] = i0
        if self._axis1 < len(self._dims):
            index[self._axis1] = i1
        for axis, pos in zip(self._extra_axes, self._positions):
            index[axis] = pos
        return tuple(index)

    def copy(self) -> "PlaneSelection":
        other = PlaneSelection(self._dims, self._axis0, self._axis1)
        other._positions = list(self._positions)
        return other


class PlaneView:
    """A dataset seen through a plane selection."""

    def __init__(self, dataset: Dataset, selection: PlaneSelection):
        if selection.num_dimensions != dataset.num_dimensions:
            raise InvalidDatasetError("Plane selection does not match dataset dimensionality")
        self._dataset = dataset
        self._selection = selection

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def selection(self) -> PlaneSelection:
        return self._selection

    @property
    def d0(self) -> int:
        return self._selection.d0

    @property
    def d1(self) -> int:
        return self._selection.d1

    def in_bounds(self, i0: int, i1: int) -> bool:
        return 0 <= i0 < self.d0 and 0 <= i1 < self.d1

    def get(self, i0: int, i1: int) -> Any:
        return self._dataset.data[self._selection.index_vector(i0, i1)]

    def index_vector(self, i0: int, i1: int) -> Tuple[int, ...]:
        return self._selection.index_vector(i0, i1)
