"""
NumPy Array Loader

Loads .npy and .npz files as datasets. An .npz archive may carry
metadata next to the array:

    data          the element array (otherwise the first array is used)
    name          dataset name
    axis_labels   one label per axis
    axis_units    one unit per axis
    scales        linear calibration scale per axis
    offsets       linear calibration offset per axis
    value_type    value family (e.g. "temperature")
    value_unit    unit of the values
"""

from pathlib import Path
from typing import Optional
import logging

import numpy as np

from core.base import Axis, BaseLoader, Dataset
from core.coordinates import LinearCoordinateSpace


SUPPORTED_EXTENSIONS = {'.npy', '.npz'}

METADATA_KEYS = {
    'name', 'axis_labels', 'axis_units', 'scales', 'offsets', 'value_type', 'value_unit',
}


def _text(archive, key: str) -> Optional[str]:
    if key not in archive.files:
        return None
    value = archive[key]
    return str(value.item() if value.ndim == 0 else value)


class ArrayLoader(BaseLoader):
    """
    Loader for NumPy array files.

    Plain .npy files are memory mapped read-only so large volumes are
    paged in on demand.
    """

    @staticmethod
    def get_supported_extensions() -> set:
        """Get set of supported file extensions (with leading dot)."""
        return SUPPORTED_EXTENSIONS.copy()

    @staticmethod
    def get_file_filter() -> str:
        """Get file filter string for file dialogs."""
        extensions = " ".join(f"*{ext}" for ext in sorted(SUPPORTED_EXTENSIONS))
        return f"NumPy Arrays ({extensions})"

    def can_load(self, source: str) -> bool:
        return Path(source).suffix.lower() in SUPPORTED_EXTENSIONS

    def load(self, source: str) -> Dataset:
        """
        Load an array file.

        Args:
            source: Path to a .npy or .npz file

        Returns:
            Dataset with the array and any stored metadata

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file format is not supported or the archive is empty
        """
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Array file not found: {path}")
        if not self.can_load(source):
            raise ValueError(
                f"Unsupported file format: {path.suffix}. "
                f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
            )

        if path.suffix.lower() == '.npy':
            data = np.load(path, mmap_mode='r')
            dataset = Dataset(data=data, name=path.stem, source=str(path))
        else:
            dataset = self._load_archive(path)

        logging.info(
            f"Loaded '{dataset.display_name}' {dataset.dimensions} "
            f"{dataset.element_type.name} from {path}"
        )
        return dataset

    def _load_archive(self, path: Path) -> Dataset:
        with np.load(path, allow_pickle=False) as archive:
            arrays = [k for k in archive.files if k not in METADATA_KEYS]
            if 'data' in archive.files:
                key = 'data'
            elif arrays:
                key = arrays[0]
            else:
                raise ValueError(f"No array found in {path}")
            data = archive[key]

            axes = [Axis() for _ in range(data.ndim)]
            if 'axis_labels' in archive.files:
                for axis, label in zip(axes, archive['axis_labels']):
                    axis.label = str(label) or None
            if 'axis_units' in archive.files:
                for axis, unit in zip(axes, archive['axis_units']):
                    axis.unit = str(unit) or None

            space = None
            if 'scales' in archive.files or 'offsets' in archive.files:
                scales = archive['scales'] if 'scales' in archive.files else np.ones(data.ndim)
                offsets = archive['offsets'] if 'offsets' in archive.files else np.zeros(data.ndim)
                space = LinearCoordinateSpace([float(s) for s in scales], [float(o) for o in offsets])

            return Dataset(
                data=data,
                axes=axes,
                name=_text(archive, 'name') or path.stem,
                source=str(path),
                value_type=_text(archive, 'value_type'),
                value_unit=_text(archive, 'value_unit'),
                coordinate_space=space,
            )

