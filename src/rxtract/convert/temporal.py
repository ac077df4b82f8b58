"""Time and duration converters.

Durations are handled as integer nanoseconds. Literals use the compact
``<number><unit>`` grammar (``1h30m``, ``1.5s``, ``250ms``) and are rendered
back in the same canonical form (``2h4m32.7s``).

Times are carried as an aware ``datetime`` plus the full nanosecond-of-second,
so ``unix_nano`` and ``rfc3339nano`` round-trip without losing precision.
Epoch inputs are rendered in the process-local timezone.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from ..errors import InvalidDuration, InvalidNumber, InvalidTime, UnknownFormat, UnknownUnit
from ..units import (
    DURATION_ALIASES,
    DURATION_UNITS,
    EPOCH_FORMATS,
    HOUR,
    ISO8601,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    RFC3339,
    RFC3339_NANO,
    SECOND,
    TIME_FORMAT_ALIASES,
    UNIX,
    UNIX_MILLI,
    UNIX_NANO,
)
from .base import ValueType, format_float
from .scalars import parse_int, quote

_INT64_MAX = 2**63 - 1

# One "<digits>[.<digits>]<unit>" component of a duration literal
_DURATION_PART_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)
# 2006-01-02T15:04:05.000 followed by Z or +hhmm
_ISO8601_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"\.(\d{3})"
    r"(Z|[+-]\d{4})"
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------


def parse_duration(text: str) -> int:
    """Parse a duration literal such as ``-1h2m3.5s`` into nanoseconds."""
    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return 0
    if not rest:
        raise InvalidDuration(f"invalid duration {text!r}")

    total = 0
    pos = 0
    while pos < len(rest):
        m = _DURATION_PART_RE.match(rest, pos)
        if m is None or not (m.group(1) or m.group(2)):
            raise InvalidDuration(f"invalid duration {text!r}")
        whole, frac, unit_name = m.groups()
        unit = DURATION_UNITS.get(unit_name)
        if unit is None:
            raise InvalidDuration(f"unknown unit {unit_name!r} in duration {text!r}")
        total += int(whole or 0) * unit
        if frac:
            total += int(frac) * unit // 10 ** len(frac)
        pos = m.end()

    limit = _INT64_MAX + 1 if negative else _INT64_MAX
    if total > limit:
        raise InvalidDuration(f"invalid duration {text!r}")
    return -total if negative else total


def _fmt_frac(value: int, prec: int) -> str:
    """Render value / 10**prec, dropping trailing zeros and a bare decimal point."""
    whole, frac = divmod(value, 10**prec)
    if not frac:
        return str(whole)
    return f"{whole}." + f"{frac:0{prec}d}".rstrip("0")


def format_duration(ns: int) -> str:
    """Canonical text for a nanosecond duration: ``2h4m32.7s``, ``1.5ms``, ``0s``."""
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)

    if u < SECOND:
        if u < MICROSECOND:
            return f"{sign}{u}ns"
        if u < MILLISECOND:
            return f"{sign}{_fmt_frac(u, 3)}µs"
        return f"{sign}{_fmt_frac(u, 6)}ms"

    seconds, frac = divmod(u, SECOND)
    text = f"{_fmt_frac((seconds % 60) * SECOND + frac, 9)}s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


def _trunc_div(value: int, unit: int) -> tuple[int, int]:
    """Quotient truncated toward zero, and the matching remainder."""
    q = abs(value) // unit
    if value < 0:
        q = -q
    return q, value - q * unit


def _in_units(ns: int, unit: int) -> float:
    whole, rest = _trunc_div(ns, unit)
    return whole + rest / unit


def _literal_unit(name: str) -> str:
    if name in DURATION_UNITS:
        return name
    unit = DURATION_ALIASES.get(name.lower())
    if unit is None:
        raise UnknownUnit(f"unknown duration unit {name!r}")
    return unit


class DurationConverter:
    """Convert elapsed-time text into a number of ``to`` units or a duration string.

    Text without a trailing unit letter takes the ``from_`` unit, seconds by
    default.
    """

    @property
    def name(self) -> str:
        return ValueType.DURATION.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        text = text.lower()
        if not text[-1].isalpha():
            text += _literal_unit(from_) if from_ else "s"
        ns = parse_duration(text)

        if to == "string":
            return quote(format_duration(ns))

        unit = DURATION_ALIASES.get(to)
        if unit is None:
            raise UnknownFormat(f"invalid destination format {to!r}")
        if unit in ("ns", "us", "ms"):
            return str(_trunc_div(ns, DURATION_UNITS[unit])[0]).encode("ascii")
        return format_float(_in_units(ns, {"s": SECOND, "m": MINUTE, "h": HOUR}[unit]))


# ---------------------------------------------------------------------------
# Times
# ---------------------------------------------------------------------------


class Instant(NamedTuple):
    """An aware datetime plus its full nanosecond-of-second."""

    moment: datetime
    nanosecond: int

    @classmethod
    def from_epoch_ns(cls, ns: int) -> "Instant":
        seconds, nanos = divmod(ns, SECOND)
        try:
            moment = (_EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)).astimezone()
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidTime(f"time out of range: {exc}") from exc
        return cls(moment, nanos)

    def epoch_ns(self) -> int:
        micros = (self.moment - _EPOCH) // timedelta(microseconds=1)
        return micros * 1000 + self.nanosecond % 1000


def _zone(text: str) -> timezone:
    if text in ("Z", "z"):
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:4]))
    return timezone(sign * offset)


def _build(groups: tuple[str, ...], fraction: str | None, zone: str, text: str) -> Instant:
    year, month, day, hour, minute, second = (int(g) for g in groups)
    nanos = int(fraction[:9].ljust(9, "0")) if fraction else 0
    try:
        moment = datetime(year, month, day, hour, minute, second, nanos // 1000, tzinfo=_zone(zone))
    except ValueError as exc:
        raise InvalidTime(f"cannot parse {text!r}: {exc}") from exc
    return Instant(moment, nanos)


def parse_time(text: str, from_: str) -> Instant:
    """Parse text using a named representation or a ``strptime`` template."""
    if from_ in EPOCH_FORMATS:
        value = parse_int(text)
        if from_ == UNIX:
            return Instant.from_epoch_ns(value * SECOND)
        if from_ == UNIX_MILLI:
            return Instant.from_epoch_ns(value * MILLISECOND)
        return Instant.from_epoch_ns(value)

    if from_ in (RFC3339, RFC3339_NANO):
        m = _RFC3339_RE.fullmatch(text)
        if m is None:
            raise InvalidTime(f"cannot parse {text!r} as {from_}")
        return _build(m.groups()[:6], m.group(7), m.group(8), text)

    if from_ == ISO8601:
        m = _ISO8601_RE.fullmatch(text)
        if m is None:
            raise InvalidTime(f"cannot parse {text!r} as {from_}")
        return _build(m.groups()[:6], m.group(7), m.group(8), text)

    if not from_:
        raise UnknownFormat("invalid source format ''")
    try:
        moment = datetime.strptime(text, from_)
    except ValueError as exc:
        raise InvalidTime(f"cannot parse {text!r} as {from_!r}: {exc}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return Instant(moment, moment.microsecond * 1000)


def _offset(moment: datetime, colon: bool) -> str:
    offset = moment.utcoffset()
    if not offset:
        return "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hh, mm = divmod(abs(minutes), 60)
    return f"{sign}{hh:02d}:{mm:02d}" if colon else f"{sign}{hh:02d}{mm:02d}"


def _date_time(moment: datetime) -> str:
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def format_time(instant: Instant, to: str) -> bytes:
    """Encode an Instant in a named representation or a ``strftime`` template."""
    to = TIME_FORMAT_ALIASES.get(to, to)
    moment, nanos = instant

    if to == UNIX:
        return str(instant.epoch_ns() // SECOND).encode("ascii")
    if to == UNIX_MILLI:
        return str(instant.epoch_ns() // MILLISECOND).encode("ascii")
    if to == UNIX_NANO:
        return str(instant.epoch_ns()).encode("ascii")
    if to == RFC3339:
        return quote(_date_time(moment) + _offset(moment, colon=True))
    if to == RFC3339_NANO:
        frac = f".{nanos:09d}".rstrip("0") if nanos else ""
        return quote(_date_time(moment) + frac + _offset(moment, colon=True))
    if to == ISO8601:
        return quote(f"{_date_time(moment)}.{nanos // 1_000_000:03d}{_offset(moment, colon=False)}")
    if not to:
        raise UnknownFormat("invalid destination format ''")
    try:
        return quote(moment.strftime(to))
    except ValueError as exc:
        raise UnknownFormat(f"invalid destination format {to!r}: {exc}") from exc


class TimeConverter:
    @property
    def name(self) -> str:
        return ValueType.TIME.value

    def convert(self, text: str, from_: str, to: str) -> bytes:
        return format_time(parse_time(text, from_), to)
