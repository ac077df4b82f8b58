"""Converters for the plain scalar types: int, uint, float, number, bool, string."""
from __future__ import annotations

import re

from ..errors import InvalidBool, InvalidNumber
from .base import ValueType, format_float

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Control characters get \u00XX unless they have a short escape
_STRING_ESCAPES = {c: f"\\u{c:04x}" for c in range(0x20)}
_STRING_ESCAPES.update({
    ord('"'): '\\"',
    ord("\\"): "\\\\",
    ord("\n"): "\\n",
    ord("\f"): "\\f",
    ord("\b"): "\\b",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
})


def quote(text: str) -> bytes:
    """Encode text as a quoted JSON string.

    Only quotes, backslashes and control characters below 0x20 are escaped;
    everything else is passed through as UTF-8.
    """
    return ('"' + text.translate(_STRING_ESCAPES) + '"').encode("utf-8", "replace")


def parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise InvalidNumber(f"invalid syntax: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidNumber(f"value out of range: {text!r}")
    return value


class IntConverter:
    @property
    def name(self) -> str:
        return ValueType.INT.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        return str(parse_int(text)).encode("ascii")


class UintConverter:
    @property
    def name(self) -> str:
        return ValueType.UINT.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        if not _UINT_RE.fullmatch(text):
            raise InvalidNumber(f"invalid syntax: {text!r}")
        value = int(text)
        if value > _UINT64_MAX:
            raise InvalidNumber(f"value out of range: {text!r}")
        return str(value).encode("ascii")


class FloatConverter:
    """Parse a decimal float; also serves the ``number`` type."""

    def __init__(self, value_type: ValueType = ValueType.FLOAT) -> None:
        self._type = value_type

    @property
    def name(self) -> str:
        return self._type.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        if not _FLOAT_RE.fullmatch(text):
            raise InvalidNumber(f"invalid syntax: {text!r}")
        return format_float(float(text))


class BoolConverter:
    @property
    def name(self) -> str:
        return ValueType.BOOL.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        if text in _TRUE:
            return b"true"
        if text in _FALSE:
            return b"false"
        raise InvalidBool(f"invalid syntax: {text!r}")


class StringConverter:
    @property
    def name(self) -> str:
        return ValueType.STRING.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        return quote(text)
