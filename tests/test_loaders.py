from decimal import Decimal

import numpy as np
import pytest

from core.plane import PlaneSelection
from loaders import DEMOS, load_dataset
from loaders.array_loader import ArrayLoader
from loaders.synthetic_loader import SyntheticLoader
from processing.plane_extractor import PlaneExtractor


def test_npy_is_loaded_read_only(tmp_path) -> None:
    path = tmp_path / "scan.npy"
    np.save(path, np.arange(12, dtype=np.int16).reshape(3, 4))
    ds = ArrayLoader().load(str(path))
    assert ds.dimensions == (3, 4)
    assert ds.element_type.name == "int16"
    assert ds.name == "scan"
    assert ds.source == str(path)
    assert not ds.data.flags.writeable


def test_npz_metadata(tmp_path) -> None:
    path = tmp_path / "volume.npz"
    np.savez(
        path,
        data=np.zeros((4, 3, 2), dtype=np.float32),
        name=np.array("phantom"),
        axis_labels=np.array(["x", "y", "z"]),
        axis_units=np.array(["mm", "mm", ""]),
        scales=np.array([0.5, 0.5, 2.0]),
        value_unit=np.array("K"),
    )
    ds = load_dataset(str(path))
    assert ds.name == "phantom"
    assert [a.label for a in ds.axes] == ["x", "y", "z"]
    assert [a.unit for a in ds.axes] == ["mm", "mm", None]
    assert ds.value_unit == "K"
    assert ds.value_type is None
    assert ds.coordinate_space.scale(2) == Decimal("2.0")
    assert ds.coordinate_space.offset(0) == 0


def test_npz_without_data_key_uses_first_array(tmp_path) -> None:
    path = tmp_path / "plain.npz"
    np.savez(path, np.ones((2, 2), dtype=np.uint8))
    ds = ArrayLoader().load(str(path))
    assert ds.dimensions == (2, 2)
    assert ds.name == "plain"
    assert ds.coordinate_space is None


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ArrayLoader().load(str(tmp_path / "absent.npy"))


def test_unsupported_extension(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("1 2 3")
    with pytest.raises(ValueError):
        ArrayLoader().load(str(path))
    with pytest.raises(ValueError):
        load_dataset(str(path))


def test_file_filter_lists_extensions() -> None:
    assert ArrayLoader.get_file_filter() == "NumPy Arrays (*.npy *.npz)"


@pytest.mark.parametrize("name", sorted(DEMOS))
def test_demo_sources(name: str) -> None:
    ds = load_dataset(f"demo:{name}")
    assert ds.source == f"demo:{name}"
    assert ds.size > 0


def test_waves_demo_has_special_values() -> None:
    ds = SyntheticLoader().load("demo:waves")
    assert np.isnan(ds.data[0, 0, 0])
    assert np.isposinf(ds.data[-1, 0, 0])
    assert np.isneginf(ds.data[0, -1, 0])


def test_unknown_demo() -> None:
    loader = SyntheticLoader()
    assert not loader.can_load("demo:nothing")
    with pytest.raises(ValueError):
        loader.load("demo:nothing")


def test_big_endian_npy(tmp_path) -> None:
    path = tmp_path / "be.npy"
    np.save(path, np.arange(6, dtype=">u2").reshape(2, 3))
    ds = ArrayLoader().load(str(path))
    assert ds.element_type.name == "uint16"
    assert ds.get((1, 2)) == 5
    plane = PlaneExtractor.grab_plane(ds, PlaneSelection(ds.dimensions))
    assert plane.element_type.name == "uint16"
    np.testing.assert_array_equal(plane.data, np.arange(6).reshape(2, 3))
