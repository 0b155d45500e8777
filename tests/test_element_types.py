from decimal import Decimal

import numpy as np
import pytest

from core.element_types import Capability, ElementTypes, SpecialValue, RGB_DTYPE
from core.errors import UnsupportedValueTypeError


def test_standard_types_are_registered() -> None:
    names = ElementTypes.names()
    for name in ("int8", "uint8", "uint64", "float16", "float32", "float64",
                 "float128", "highprec", "rgb", "argb", "complex64", "complex128"):
        assert name in names


def test_unknown_name_raises_key_error() -> None:
    with pytest.raises(KeyError):
        ElementTypes.get("quaternion")


def test_for_dtype_finds_registered_types() -> None:
    assert ElementTypes.for_dtype(np.uint16).name == "uint16"
    assert ElementTypes.for_dtype(np.float32).name == "float32"
    assert ElementTypes.for_dtype(RGB_DTYPE).name == "rgb"
    assert ElementTypes.for_dtype(object).name == "highprec"


def test_for_dtype_rejects_unknown_dtype() -> None:
    with pytest.raises(UnsupportedValueTypeError):
        ElementTypes.for_dtype(np.bool_)


def test_integer_capabilities_and_bounds() -> None:
    uint8 = ElementTypes.get("uint8")
    assert uint8.supports(Capability.ORDERED)
    assert uint8.supports(Capability.BOUNDED)
    assert uint8.supports(Capability.HIGH_PRECISION)
    assert not uint8.supports(Capability.COLOR)
    assert uint8.bounds == (0, 255)
    assert uint8.to_decimal(np.uint8(200)) == Decimal(200)


def test_long_double_has_no_exact_conversion() -> None:
    float128 = ElementTypes.get("float128")
    assert not float128.supports(Capability.HIGH_PRECISION)
    assert float128.supports(Capability.SPECIAL_VALUES)
    assert float128.supports(Capability.FROM_TEXT)


def test_complex_only_has_absolute_value() -> None:
    assert ElementTypes.get("complex64").capabilities == [Capability.ABSOLUTE]


def test_color_types_have_layouts() -> None:
    rgb = ElementTypes.get("rgb")
    argb = ElementTypes.get("argb")
    assert rgb.supports(Capability.COLOR)
    assert not rgb.color_layout.has_alpha
    assert argb.color_layout.has_alpha
    assert argb.color_layout.channels == ("a", "r", "g", "b")


@pytest.mark.parametrize(
    "value, expected",
    [
        (np.float32("nan"), SpecialValue.NAN),
        (np.float32("inf"), SpecialValue.POS_INF),
        (np.float32("-inf"), SpecialValue.NEG_INF),
        (np.float32(1.5), None),
    ],
)
def test_float_special_values(value, expected) -> None:
    assert ElementTypes.get("float32").special_value(value) is expected


def test_decimal_special_values() -> None:
    highprec = ElementTypes.get("highprec")
    assert highprec.special_value(Decimal("-Infinity")) is SpecialValue.NEG_INF
    assert highprec.special_value(Decimal("NaN")) is SpecialValue.NAN
    assert highprec.special_value(Decimal("3.25")) is None


def test_integers_have_no_special_values() -> None:
    assert ElementTypes.get("int32").special_value(np.int32(7)) is None


def test_for_dtype_ignores_byte_order() -> None:
    assert ElementTypes.for_dtype(np.dtype(">u2")).name == "uint16"
    assert ElementTypes.for_dtype(np.dtype(">f8")).name == "float64"
