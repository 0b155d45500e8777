"""
Synthetic Dataset Loader

Generates demo datasets for sources of the form ``demo:<name>``, so the
viewer can be tried without any data files.
"""

from typing import Callable, Dict
import logging

import numpy as np

from core.base import Axis, BaseLoader, Dataset
from core.coordinates import LinearCoordinateSpace
from core.element_types import RGB_DTYPE


DEMO_PREFIX = "demo:"


def make_gradient(shape=(256, 192, 16)) -> Dataset:
    """uint16 volume ramping along x and y, offset per z slice."""
    x, y, z = np.meshgrid(*(np.arange(n) for n in shape), indexing='ij')
    data = ((x * 97 + y * 131 + z * 2048) % 65536).astype(np.uint16)
    return Dataset(
        data=data,
        axes=[Axis("x", "mm"), Axis("y", "mm"), Axis("z", "mm")],
        name="gradient",
        value_type="intensity",
        coordinate_space=LinearCoordinateSpace([0.5, 0.5, 2.0], [-64.0, -48.0, 0.0]),
    )


def make_waves(shape=(200, 200, 24)) -> Dataset:
    """
    float32 interference pattern over time.

    A few elements are NaN and +/-Inf to show special-value coloring.
    """
    nx, ny, nt = shape
    x = np.linspace(-np.pi, np.pi, nx)[:, None, None]
    y = np.linspace(-np.pi, np.pi, ny)[None, :, None]
    t = np.linspace(0, 2 * np.pi, nt, endpoint=False)[None, None, :]
    data = (np.sin(3 * x + t) * np.cos(2 * y - t) * 40.0 + 20.0).astype(np.float32)
    data[:4, :4, :] = np.nan
    data[-4:, :4, :] = np.inf
    data[:4, -4:, :] = -np.inf
    return Dataset(
        data=data,
        axes=[Axis("x", "cm"), Axis("y", "cm"), Axis("t", "s")],
        name="waves",
        value_type="temperature",
        value_unit="K",
        coordinate_space=LinearCoordinateSpace([0.1, 0.1, 0.25], [0, 0, 0]),
    )


def make_color(shape=(160, 120)) -> Dataset:
    """Native rgb plane with hue bands."""
    data = np.zeros(shape, dtype=RGB_DTYPE)
    x = np.arange(shape[0])[:, None]
    y = np.arange(shape[1])[None, :]
    data["r"] = (x * 255 // max(shape[0] - 1, 1)).astype(np.uint8)
    data["g"] = (y * 255 // max(shape[1] - 1, 1)).astype(np.uint8)
    data["b"] = ((x + y) % 256).astype(np.uint8)
    return Dataset(data=data, axes=[Axis("x"), Axis("y")], name="color bands")


def make_complex(shape=(128, 128)) -> Dataset:
    """complex64 field; view it through its magnitudes."""
    x = np.linspace(-2, 2, shape[0])[:, None]
    y = np.linspace(-2, 2, shape[1])[None, :]
    data = (np.exp(1j * (x * x + y * y) * 3) * np.hypot(x, y)).astype(np.complex64)
    return Dataset(data=data, axes=[Axis("re"), Axis("im")], name="complex field")


DEMOS: Dict[str, Callable[[], Dataset]] = {
    "gradient": make_gradient,
    "waves": make_waves,
    "color": make_color,
    "complex": make_complex,
}


class SyntheticLoader(BaseLoader):
    """Loader for generated demo datasets."""

    def can_load(self, source: str) -> bool:
        return source.startswith(DEMO_PREFIX) and source[len(DEMO_PREFIX):] in DEMOS

    def load(self, source: str) -> Dataset:
        """
        Generate a demo dataset.

        Args:
            source: ``demo:gradient``, ``demo:waves``, ``demo:color`` or ``demo:complex``

        Raises:
            ValueError: If the demo name is unknown
        """
        if not self.can_load(source):
            raise ValueError(
                f"Unknown demo source '{source}'. "
                f"Available: {', '.join(DEMO_PREFIX + n for n in DEMOS)}"
            )
        dataset = DEMOS[source[len(DEMO_PREFIX):]]()
        dataset.source = source
        logging.info(f"Generated demo dataset '{dataset.name}' {dataset.dimensions}")
        return dataset
