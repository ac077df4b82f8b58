"""Dispatch from ValueType to its converter.

Every ValueType has exactly one converter; ``CONVERTERS`` is checked for
completeness at import time.
"""
from __future__ import annotations

from types import MappingProxyType

from ..errors import UnknownFormat
from .base import Converter, ValueType
from .datasize import DataSizeConverter
from .scalars import BoolConverter, FloatConverter, IntConverter, StringConverter, UintConverter
from .temporal import DurationConverter, TimeConverter

CONVERTERS: MappingProxyType[ValueType, Converter] = MappingProxyType({
    ValueType.INT: IntConverter(),
    ValueType.UINT: UintConverter(),
    ValueType.FLOAT: FloatConverter(ValueType.FLOAT),
    ValueType.NUMBER: FloatConverter(ValueType.NUMBER),
    ValueType.STRING: StringConverter(),
    ValueType.BOOL: BoolConverter(),
    ValueType.TIME: TimeConverter(),
    ValueType.DURATION: DurationConverter(),
    ValueType.DATASIZE: DataSizeConverter(),
})

assert set(CONVERTERS) == set(ValueType), "every ValueType needs a converter"


def value_type(name: str) -> ValueType:
    """Resolve a type name such as ``"int"`` to its ValueType."""
    try:
        return ValueType(name)
    except ValueError:
        raise UnknownFormat(f"invalid value type {name!r}") from None


def convert(text: str, type_: ValueType | str, from_: str = "", to: str = "") -> bytes:
    """Convert non-empty extracted text into JSON scalar bytes.

    Raises:
        ConversionError: The text or the From/To parameters are not usable
                         for this type.
    """
    if not isinstance(type_, ValueType):
        type_ = value_type(type_)
    return CONVERTERS[type_].convert(text, from_, to)
