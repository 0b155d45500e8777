import numpy as np
import pytest

from config import AnimationConfig, ViewerConfig, ViewportConfig
from core.base import Axis, Dataset
from core.coordinates import LinearCoordinateSpace


@pytest.fixture
def small_config() -> ViewerConfig:
    """16 x 12 pane, 4 pixel pan step, no delay between animation frames."""
    return ViewerConfig(
        viewport=ViewportConfig(pane_width=16, pane_height=12, pan_step_pixels=4),
        animation=AnimationConfig(frame_interval_s=0.0),
    )


@pytest.fixture
def ramp() -> Dataset:
    """16 x 16 uint8 plane holding 0..255, value = x * 16 + y."""
    x, y = np.meshgrid(np.arange(16), np.arange(16), indexing="ij")
    return Dataset(data=(x * 16 + y).astype(np.uint8), name="ramp")


@pytest.fixture
def volume() -> Dataset:
    """4 x 3 x 2 int16 volume with labels, units and a linear calibration."""
    return Dataset(
        data=np.arange(24, dtype=np.int16).reshape(4, 3, 2),
        axes=[Axis("x", "mm"), Axis("y", "mm"), Axis("z", "mm")],
        name="vol",
        source="memory",
        value_type="density",
        value_unit="HU",
        coordinate_space=LinearCoordinateSpace([0.5, 2, 10], [1, -1, 100]),
    )
