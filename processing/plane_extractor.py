"""
Plane Extraction

Materializes parts of a dataset as new standalone datasets: a full 2-D
slice at the current plane positions, or one dataset per index along an
axis.
"""

import logging
from typing import List, Optional

import numpy as np

from core.base import Axis, Dataset
from core.coordinates import CoordinateSpace
from core.plane import PlaneSelection


def _axis_name(dataset: Dataset, axis: int) -> str:
    label = dataset.axis_label(axis)
    return label if label else f"dim {axis}"


def _copy_axis(dataset: Dataset, axis: int) -> Axis:
    if axis < dataset.num_dimensions:
        return Axis(dataset.axes[axis].label, dataset.axes[axis].unit)
    return Axis()


class PlaneExtractor:
    """
    Slice and split operations producing new datasets.

    Results share no storage with their source and carry its metadata
    for the axes they retain.
    """

    @staticmethod
    def plane_name(dataset: Dataset, selection: PlaneSelection) -> str:
        """
        Descriptive name of a slice, e.g. ``"[x:y] slice at z(4) of scan"``.
        """
        a0, a1 = selection.axis0, selection.axis1
        name = f"[{_axis_name(dataset, a0)}:{_axis_name(dataset, a1)}] slice"
        if selection.positions_count > 0:
            fixed = " ".join(
                f"{_axis_name(dataset, selection.axis_number(i))}({selection.position(i)})"
                for i in range(selection.positions_count)
            )
            name = f"{name} at {fixed}"
        if dataset.name:
            name = f"{name} of {dataset.name}"
        return name

    @classmethod
    def grab_plane(cls, dataset: Dataset, selection: PlaneSelection) -> Dataset:
        """
        Copy the selected plane into a new 2-D dataset.

        Args:
            dataset: Source dataset
            selection: Free axes and fixed positions

        Returns:
            Dataset of shape (d0, d1)
        """
        a0, a1 = selection.axis0, selection.axis1
        ndim = dataset.num_dimensions

        index = list(selection.index_vector(0, 0))
        index[a0] = slice(None)
        if a1 < ndim:
            index[a1] = slice(None)
        plane = dataset.data[tuple(index)]
        if a1 >= ndim:
            plane = plane.reshape(selection.d0, 1)
        elif a0 > a1:
            plane = plane.T
        data = np.array(plane, copy=True)

        space: Optional[CoordinateSpace] = None
        if dataset.coordinate_space is not None and a1 < ndim:
            space = dataset.coordinate_space.sub_space([a0, a1], selection.index_vector(0, 0))

        result = Dataset(
            data=data,
            element_type=dataset.element_type,
            axes=[_copy_axis(dataset, a0), _copy_axis(dataset, a1)],
            name=cls.plane_name(dataset, selection),
            source=dataset.source,
            value_type=dataset.value_type,
            value_unit=dataset.value_unit,
            coordinate_space=space,
        )
        logging.info(f"Grabbed plane {result.dimensions}: {result.name}")
        return result

    @staticmethod
    def explode_along_axis(dataset: Dataset, axis: int) -> List[Dataset]:
        """
        Split a dataset into one dataset per index along an axis.

        Args:
            dataset: Source dataset (at least 2-D)
            axis: Axis to split along; it is removed from the results

        Returns:
            Datasets in index order

        Raises:
            ValueError: If the dataset is 1-D or axis is out of range
        """
        ndim = dataset.num_dimensions
        if ndim < 2:
            raise ValueError("Cannot explode a 1-dimensional dataset")
        if not 0 <= axis < ndim:
            raise ValueError(f"Axis {axis} out of range [0, {ndim})")

        remaining = [a for a in range(ndim) if a != axis]
        axes = [_copy_axis(dataset, a) for a in remaining]
        label = _axis_name(dataset, axis)

        results = []
        for i in range(dataset.dimension(axis)):
            space = None
            if dataset.coordinate_space is not None:
                base = [0] * ndim
                base[axis] = i
                space = dataset.coordinate_space.sub_space(remaining, base)

            name = f"{label}({i})"
            if dataset.name:
                name = f"{name} of {dataset.name}"
            results.append(Dataset(
                data=np.take(dataset.data, i, axis=axis).copy(),
                element_type=dataset.element_type,
                axes=[Axis(a.label, a.unit) for a in axes],
                name=name,
                source=dataset.source,
                value_type=dataset.value_type,
                value_unit=dataset.value_unit,
                coordinate_space=space,
            ))

        logging.info(f"Exploded '{dataset.display_name}' along axis {axis} into {len(results)} dataset(s)")
        return results
