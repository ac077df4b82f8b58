"""Data size converter: decimal (kb, mb, ...) and binary (kib, mib, ...) units."""
from __future__ import annotations

import re

from ..errors import InvalidNumber, UnknownUnit
from ..units import DATA_UNITS
from .base import ValueType, format_float

# Leading number and an optional unit token: "1.5 GiB", "512k", "42"
_SIZE_RE = re.compile(r"([-+]?\d*\.?\d+)\s*([a-zA-Z]*)")


def unit_multiplier(name: str) -> float:
    """Bytes per unit for a unit name, case-insensitive."""
    try:
        return DATA_UNITS[name.lower()]
    except KeyError:
        raise UnknownUnit(f"unknown data unit {name!r}") from None


class DataSizeConverter:
    """Convert a size in ``from_`` units (or the text's own unit) into ``to`` units.

    The source unit is ``from_`` when set, else the unit written after the
    number, else bytes. An empty ``to`` means bytes.
    """

    @property
    def name(self) -> str:
        return ValueType.DATASIZE.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        m = _SIZE_RE.search(text)
        if m is None:
            raise InvalidNumber(f"no size found in {text!r}")
        value = float(m.group(1))
        size = value * unit_multiplier(from_ or m.group(2))
        return format_float(size / unit_multiplier(to))
