"""Value types and the converter Protocol every type implements."""
from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Protocol, runtime_checkable

from ..errors import InvalidNumber


class ValueType(str, Enum):
    """JSON scalar types a rule can convert extracted text into."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    NUMBER = "number"
    STRING = "string"
    BOOL = "bool"
    TIME = "time"
    DURATION = "duration"
    DATASIZE = "datasize"


@runtime_checkable
class Converter(Protocol):
    """Protocol for value converters, one per ValueType."""

    @property
    def name(self) -> str:
        """ValueType value this converter serves."""
        ...

    def convert(self, text: str, from_: str, to: str) -> bytes:
        """Convert non-empty extracted text into encoded JSON scalar bytes.

        Raises a ConversionError subclass when the text or the From/To
        parameters cannot be handled.
        """
        ...


def format_float(value: float) -> bytes:
    """Encode a float with the shortest round-trip digits, never in exponent form.

    ``2.0`` → ``2``, ``0.1`` → ``0.1``, ``1e21`` → ``1000000000000000000000``.
    """
    if not math.isfinite(value):
        raise InvalidNumber(f"{value} has no JSON representation")
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.encode("ascii")
