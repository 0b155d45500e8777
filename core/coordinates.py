"""
Coordinate Spaces

Mappings from integer model indices to real-world coordinates.
All arithmetic is done in Decimal so calibrated positions of very
large datasets do not drift.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Sequence, Union

Number = Union[int, float, str, Decimal]


def _dec(value: Number) -> Decimal:
    if isinstance(value, float):
        # Go through repr so 0.1 means 0.1 and not its binary expansion
        return Decimal(repr(value))
    return Decimal(value)


class CoordinateSpace(ABC):
    """Abstract mapping from model index vectors to real-world coordinates."""

    @property
    @abstractmethod
    def num_dimensions(self) -> int:
        pass

    @abstractmethod
    def project_axis(self, index: Sequence[int], axis: int) -> Decimal:
        """Real-world coordinate of ``index`` along one axis."""
        pass

    def project(self, index: Sequence[int]) -> List[Decimal]:
        """Real-world coordinates of ``index`` along every axis."""
        return [self.project_axis(index, axis) for axis in range(self.num_dimensions)]

    @abstractmethod
    def sub_space(self, axes: Sequence[int], base_index: Sequence[int]) -> "CoordinateSpace":
        """
        Restrict the space to a subset of axes.

        Args:
            axes: Axes retained, in their new order
            base_index: Full index vector supplying the dropped axes' positions

        Returns:
            A space of ``len(axes)`` dimensions
        """
        pass


class LinearCoordinateSpace(CoordinateSpace):
    """
    Per-axis linear calibration: ``real[i] = scales[i] * index[i] + offsets[i]``.
    """

    def __init__(self, scales: Sequence[Number], offsets: Sequence[Number]):
        if len(scales) != len(offsets):
            raise ValueError("scales and offsets must have the same length")
        self._scales = [_dec(s) for s in scales]
        self._offsets = [_dec(o) for o in offsets]

    @property
    def num_dimensions(self) -> int:
        return len(self._scales)

    def scale(self, axis: int) -> Decimal:
        return self._scales[axis]

    def offset(self, axis: int) -> Decimal:
        return self._offsets[axis]

    def project_axis(self, index: Sequence[int], axis: int) -> Decimal:
        return self._scales[axis] * Decimal(int(index[axis])) + self._offsets[axis]

    def sub_space(self, axes: Sequence[int], base_index: Sequence[int]) -> "LinearCoordinateSpace":
        base = list(base_index)
        for a in axes:
            base[a] = 0
        scales = [self._scales[a] for a in axes]
        offsets = [self.project_axis(base, a) for a in axes]
        return LinearCoordinateSpace(scales, offsets)

    def __repr__(self) -> str:
        return f"LinearCoordinateSpace(scales={self._scales}, offsets={self._offsets})"


class AffineCoordinateSpace(CoordinateSpace):
    """
    General affine calibration: ``real = matrix @ index + translation``.

    ``matrix`` is an N x N row-major sequence of rows.
    """

    def __init__(self, matrix: Sequence[Sequence[Number]], translation: Sequence[Number]):
        n = len(translation)
        if len(matrix) != n or any(len(row) != n for row in matrix):
            raise ValueError("matrix must be square and match the translation length")
        self._matrix = [[_dec(v) for v in row] for row in matrix]
        self._translation = [_dec(t) for t in translation]

    @property
    def num_dimensions(self) -> int:
        return len(self._translation)

    def project_axis(self, index: Sequence[int], axis: int) -> Decimal:
        total = self._translation[axis]
        for coefficient, i in zip(self._matrix[axis], index):
            total += coefficient * Decimal(int(i))
        return total

    def sub_space(self, axes: Sequence[int], base_index: Sequence[int]) -> "AffineCoordinateSpace":
        base = list(base_index)
        for a in axes:
            base[a] = 0
        matrix = [[self._matrix[r][c] for c in axes] for r in axes]
        translation = [self.project_axis(base, a) for a in axes]
        return AffineCoordinateSpace(matrix, translation)


def project_index(space: Optional[CoordinateSpace], index: Sequence[int]) -> List[Decimal]:
    """Project with an optional space; an unspecified space is the identity."""
    if space is None:
        return [Decimal(int(i)) for i in index]
    return space.project(index)
