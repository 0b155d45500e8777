"""
Element Types

Numeric capability descriptors for dataset elements.

Each element type carries a closed set of optional traits (ordering,
boundedness, exact high-precision conversion, construction from text,
absolute value, native color layout, special-value classification).
Consumers ask ``supports(Capability.X)`` and degrade through their
documented fallbacks instead of probing the values themselves.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .errors import UnsupportedValueTypeError


class Capability(Enum):
    """Optional traits an element type may declare."""
    ORDERED = "ordered"
    BOUNDED = "bounded"
    HIGH_PRECISION = "high_precision"
    FROM_TEXT = "from_text"
    ABSOLUTE = "absolute"
    COLOR = "color"
    SPECIAL_VALUES = "special_values"


class SpecialValue(Enum):
    """Values with no decimal representation."""
    NAN = "nan"
    POS_INF = "+inf"
    NEG_INF = "-inf"


class ColorLayout(Enum):
    """Native color channel layouts (field names in storage order)."""
    RGB = ("r", "g", "b")
    ARGB = ("a", "r", "g", "b")

    @property
    def channels(self) -> Tuple[str, ...]:
        return self.value

    @property
    def has_alpha(self) -> bool:
        return "a" in self.value


RGB_DTYPE = np.dtype([("r", "u1"), ("g", "u1"), ("b", "u1")])
ARGB_DTYPE = np.dtype([("a", "u1"), ("r", "u1"), ("g", "u1"), ("b", "u1")])


@dataclass(frozen=True)
class ElementType:
    """
    Capability descriptor for one element encoding.

    Attributes:
        name: Registry key (e.g. "uint8", "float32", "argb")
        dtype: numpy storage dtype
        description: Human-readable type description
        ordered: Whether values support a total order (min/max folds)
        bounds: Declared representable (min, max), if bounded
        to_decimal: Exact structural conversion to Decimal, if any
        from_text: Constructor from canonical text, if any
        absolute: Absolute value / magnitude function, if any
        color_layout: Native color layout, if the type is a color
        classify: Returns the SpecialValue of a value, or None
    """
    name: str
    dtype: np.dtype
    description: str = ""
    ordered: bool = False
    bounds: Optional[Tuple[Any, Any]] = None
    to_decimal: Optional[Callable[[Any], Decimal]] = None
    from_text: Optional[Callable[[str], Any]] = None
    absolute: Optional[Callable[[Any], Any]] = None
    color_layout: Optional[ColorLayout] = None
    classify: Optional[Callable[[Any], Optional[SpecialValue]]] = None

    def supports(self, capability: Capability) -> bool:
        """Check whether this type declares a capability."""
        if capability is Capability.ORDERED:
            return self.ordered
        if capability is Capability.BOUNDED:
            return self.bounds is not None
        if capability is Capability.HIGH_PRECISION:
            return self.to_decimal is not None
        if capability is Capability.FROM_TEXT:
            return self.from_text is not None
        if capability is Capability.ABSOLUTE:
            return self.absolute is not None
        if capability is Capability.COLOR:
            return self.color_layout is not None
        if capability is Capability.SPECIAL_VALUES:
            return self.classify is not None
        return False

    @property
    def capabilities(self) -> List[Capability]:
        return [c for c in Capability if self.supports(c)]

    def special_value(self, value: Any) -> Optional[SpecialValue]:
        """Classify NaN / infinities; None for ordinary values."""
        if self.classify is None:
            return None
        return self.classify(value)


def _classify_float(value: Any) -> Optional[SpecialValue]:
    if np.isnan(value):
        return SpecialValue.NAN
    if np.isinf(value):
        return SpecialValue.POS_INF if value > 0 else SpecialValue.NEG_INF
    return None


def _classify_decimal(value: Decimal) -> Optional[SpecialValue]:
    if value.is_nan():
        return SpecialValue.NAN
    if value.is_infinite():
        return SpecialValue.NEG_INF if value.is_signed() else SpecialValue.POS_INF
    return None


def _integer_type(dtype: np.dtype) -> ElementType:
    info = np.iinfo(dtype)
    scalar = dtype.type
    signed = "signed" if info.min < 0 else "unsigned"
    return ElementType(
        name=dtype.name,
        dtype=dtype,
        description=f"{info.bits} bit {signed} integer",
        ordered=True,
        bounds=(scalar(info.min), scalar(info.max)),
        to_decimal=lambda v: Decimal(int(v)),
        from_text=lambda s, t=scalar: t(int(s)),
        absolute=abs,
    )


def _float_type(name: str, dtype: np.dtype, exact: bool) -> ElementType:
    info = np.finfo(dtype)
    scalar = dtype.type
    # Long doubles have no exact route through Python floats
    to_decimal = (lambda v: Decimal(float(v))) if exact else None
    return ElementType(
        name=name,
        dtype=dtype,
        description=f"{name} floating point",
        ordered=True,
        bounds=(scalar(info.min), scalar(info.max)),
        to_decimal=to_decimal,
        from_text=lambda s, t=scalar: t(s),
        absolute=abs,
        classify=_classify_float,
    )


def _build_standard_types() -> Dict[str, ElementType]:
    types: Dict[str, ElementType] = {}

    for code in ("int8", "uint8", "int16", "uint16", "int32", "uint32", "int64", "uint64"):
        et = _integer_type(np.dtype(code))
        types[et.name] = et

    types["float16"] = _float_type("float16", np.dtype(np.float16), exact=True)
    types["float32"] = _float_type("float32", np.dtype(np.float32), exact=True)
    types["float64"] = _float_type("float64", np.dtype(np.float64), exact=True)
    types["float128"] = _float_type("float128", np.dtype(np.longdouble), exact=False)

    types["highprec"] = ElementType(
        name="highprec",
        dtype=np.dtype(object),
        description="unbounded decimal",
        ordered=True,
        to_decimal=Decimal,
        from_text=Decimal,
        absolute=abs,
        classify=_classify_decimal,
    )

    types["rgb"] = ElementType(
        name="rgb",
        dtype=RGB_DTYPE,
        description="8 bit rgb color",
        color_layout=ColorLayout.RGB,
    )
    types["argb"] = ElementType(
        name="argb",
        dtype=ARGB_DTYPE,
        description="8 bit argb color",
        color_layout=ColorLayout.ARGB,
    )

    for code in ("complex64", "complex128"):
        dtype = np.dtype(code)
        types[code] = ElementType(
            name=code,
            dtype=dtype,
            description=f"{dtype.itemsize * 4} bit complex",
            absolute=np.abs,
        )

    return types


class ElementTypes:
    """
    Registry of element types.

    Provides the standard numeric and color encodings and lookup from
    numpy dtypes.
    """

    _TYPES: Dict[str, ElementType] = _build_standard_types()

    @classmethod
    def get(cls, name: str) -> ElementType:
        """
        Get an element type by registry name.

        Raises:
            KeyError: If no type with that name is registered
        """
        if name not in cls._TYPES:
            raise KeyError(f"Unknown element type '{name}'")
        return cls._TYPES[name]

    @classmethod
    def for_dtype(cls, dtype: Any) -> ElementType:
        """
        Find the registered element type stored as ``dtype``.

        Object arrays map to the unbounded decimal type. Byte order is
        ignored, so big-endian storage matches the native type.

        Raises:
            UnsupportedValueTypeError: If no registered type matches
        """
        dtype = np.dtype(dtype).newbyteorder("=")
        for element_type in cls._TYPES.values():
            if element_type.dtype == dtype:
                return element_type
        raise UnsupportedValueTypeError(f"No element type for dtype {dtype}")

    @classmethod
    def names(cls) -> List[str]:
        return list(cls._TYPES.keys())
