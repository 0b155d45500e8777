from decimal import Decimal

import numpy as np
import pytest

from config import RangeConfig
from core.base import Dataset
from core.errors import InvalidDatasetError
from visualization.value_range import RangeSource, ValueRangeResolver


@pytest.fixture
def resolver() -> ValueRangeResolver:
    return ValueRangeResolver()


def test_data_bounds_preferred(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.array([[10, 200], [50, 60]], dtype=np.uint8))
    result = resolver.compute(ds, prefer_data_bounds=True)
    assert (result.min, result.max) == (10, 200)
    assert (result.hp_min, result.hp_max) == (Decimal(10), Decimal(200))
    assert result.source is RangeSource.DATA


def test_type_bounds_first_when_not_preferring_data(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.array([10, 200], dtype=np.uint8))
    result = resolver.compute(ds, prefer_data_bounds=False)
    assert (result.hp_min, result.hp_max) == (Decimal(0), Decimal(255))
    assert result.source is RangeSource.TYPE


def test_default_follows_range_config() -> None:
    resolver = ValueRangeResolver(config=RangeConfig(prefer_data_range=False))
    ds = Dataset(np.array([10, 200], dtype=np.uint8))
    assert resolver.compute(ds).source is RangeSource.TYPE


def test_constant_data_falls_back_to_type_bounds(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.full((3, 3), 7, dtype=np.uint8))
    result = resolver.compute(ds, prefer_data_bounds=True)
    assert (result.hp_min, result.hp_max) == (Decimal(0), Decimal(255))
    assert result.source is RangeSource.TYPE


@pytest.mark.parametrize("prefer", [True, False])
def test_constant_unbounded_data_falls_back_to_default(resolver: ValueRangeResolver, prefer: bool) -> None:
    data = np.empty(4, dtype=object)
    data[:] = [Decimal("1.5")] * 4
    result = resolver.compute(Dataset(data), prefer_data_bounds=prefer)
    assert (result.min, result.max) == (0, 255)
    assert result.source is RangeSource.DEFAULT


def test_special_values_are_skipped(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.array([np.nan, 1.0, np.inf, 5.0, -np.inf], dtype=np.float32))
    result = resolver.compute(ds, prefer_data_bounds=True)
    assert (result.hp_min, result.hp_max) == (Decimal(1), Decimal(5))


def test_all_nan_data_uses_type_bounds(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.full(3, np.nan, dtype=np.float32))
    result = resolver.compute(ds, prefer_data_bounds=True)
    assert result.source is RangeSource.TYPE
    assert result.hp_min < 0 < result.hp_max


def test_decimal_data_range(resolver: ValueRangeResolver) -> None:
    data = np.empty(3, dtype=object)
    data[:] = [Decimal("2.5"), Decimal("NaN"), Decimal("-0.125")]
    result = resolver.compute(Dataset(data), prefer_data_bounds=True)
    assert (result.hp_min, result.hp_max) == (Decimal("-0.125"), Decimal("2.5"))


def test_unordered_type_uses_default(resolver: ValueRangeResolver) -> None:
    ds = Dataset(np.array([1 + 2j, 3 - 1j], dtype=np.complex64))
    assert resolver.compute(ds).source is RangeSource.DEFAULT


def test_empty_dataset_is_invalid(resolver: ValueRangeResolver) -> None:
    with pytest.raises(InvalidDatasetError):
        resolver.compute(Dataset(np.zeros((0, 3), dtype=np.uint8)))


def test_window_only_narrows(resolver: ValueRangeResolver) -> None:
    result = resolver.compute(Dataset(np.array([0, 255], dtype=np.uint8)))
    assert result.window(Decimal(10), Decimal(300)) == (Decimal(10), Decimal(255))
    assert result.window(Decimal(-5), None) == (Decimal(0), Decimal(255))
