"""
Core Base Classes

Provides the dataset structure shared by loaders, the viewing core and
the extraction operations, plus the loader interface.
"""

from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple
import numpy as np

from .coordinates import CoordinateSpace, project_index
from .element_types import ElementType, ElementTypes


@dataclass
class Axis:
    """Label and unit of one dataset axis (e.g. "x", "mm")."""
    label: Optional[str] = None
    unit: Optional[str] = None


@dataclass
class Dataset:
    """
    N-dimensional array of uniformly typed elements with metadata.

    The array is indexed in axis order (``data[i0, i1, ...]``), so
    ``data.shape`` is the list of dimension sizes. Datasets are read-only
    to the viewing core: the stored array is a non-writeable view and
    derived data is always produced as a new Dataset.

    Attributes:
        data: Element storage
        element_type: Capability descriptor (inferred from dtype if omitted)
        axes: Per-axis label and unit
        name: Free-text dataset name
        source: Where the data came from (path, URI, generator)
        value_type: Value family (temperature, pressure, ...)
        value_unit: Unit of the element values
        coordinate_space: Model index -> real-world mapping, None if unspecified
    """
    data: np.ndarray
    element_type: Optional[ElementType] = None
    axes: List[Axis] = field(default_factory=list)
    name: Optional[str] = None
    source: Optional[str] = None
    value_type: Optional[str] = None
    value_unit: Optional[str] = None
    coordinate_space: Optional[CoordinateSpace] = None

    def __post_init__(self):
        data = np.asarray(self.data)
        if self.element_type is None:
            self.element_type = ElementTypes.for_dtype(data.dtype)
        elif data.dtype.newbyteorder("=") != self.element_type.dtype:
            raise ValueError(
                f"Storage dtype {data.dtype} does not match element type "
                f"'{self.element_type.name}' ({self.element_type.dtype})"
            )

        if not self.axes:
            self.axes = [Axis() for _ in range(data.ndim)]
        elif len(self.axes) != data.ndim:
            raise ValueError(f"Expected {data.ndim} axes, got {len(self.axes)}")

        if self.coordinate_space is not None and self.coordinate_space.num_dimensions != data.ndim:
            raise ValueError("Coordinate space dimensionality does not match data")

        view = data.view()
        view.flags.writeable = False
        self.data = view

    @property
    def num_dimensions(self) -> int:
        return self.data.ndim

    @property
    def dimensions(self) -> Tuple[int, ...]:
        return tuple(int(d) for d in self.data.shape)

    def dimension(self, axis: int) -> int:
        """Size of one axis; axes past the last dimension have size 1."""
        if axis < self.data.ndim:
            return int(self.data.shape[axis])
        return 1

    @property
    def size(self) -> int:
        return int(self.data.size)

    @property
    def raw(self) -> np.ndarray:
        """Flat linear view of the element storage."""
        return self.data.reshape(-1)

    def get(self, index: Sequence[int]) -> Any:
        """Element at a full index vector."""
        return self.data[tuple(index)]

    def axis_label(self, axis: int) -> Optional[str]:
        if axis < len(self.axes):
            return self.axes[axis].label
        return None

    def axis_unit(self, axis: int) -> Optional[str]:
        if axis < len(self.axes):
            return self.axes[axis].unit
        return None

    def project(self, index: Sequence[int]) -> list:
        """Real-world coordinates of a full index vector."""
        return project_index(self.coordinate_space, index)

    @property
    def display_name(self) -> str:
        return self.name if self.name else "<unknown name>"


class BaseLoader(ABC):
    """Abstract base class for dataset loaders."""

    @abstractmethod
    def load(self, source: str) -> Dataset:
        """
        Load data from a source.

        Args:
            source: Path or URI to the data source

        Returns:
            Dataset containing the loaded data
        """
        pass

    def can_load(self, source: str) -> bool:
        """
        Check if this loader can handle the given source.

        Args:
            source: Path or URI to check

        Returns:
            True if this loader can handle the source
        """
        return True
