"""Static unit and format tables shared by the converters.

All tables are read-only mappings built once at import time.
"""
from __future__ import annotations

from types import MappingProxyType

# Decimal data units (bytes)
BYTE = 1.0
KB = BYTE * 1000
MB = KB * 1000
GB = MB * 1000
TB = GB * 1000
PB = TB * 1000

# Binary data units (bytes)
KIB = BYTE * 1024
MIB = KIB * 1024
GIB = MIB * 1024
TIB = GIB * 1024
PIB = TIB * 1024

# Unit name → byte multiplier. Lookups are done on lowercased names.
DATA_UNITS = MappingProxyType({
    "": BYTE, "b": BYTE, "byte": BYTE, "bytes": BYTE,
    "k": KB, "kb": KB, "kilo": KB, "kilobyte": KB, "kilobytes": KB,
    "m": MB, "mb": MB, "mega": MB, "megabyte": MB, "megabytes": MB,
    "g": GB, "gb": GB, "giga": GB, "gigabyte": GB, "gigabytes": GB,
    "t": TB, "tb": TB, "tera": TB, "terabyte": TB, "terabytes": TB,
    "p": PB, "pb": PB, "peta": PB, "petabyte": PB, "petabytes": PB,
    "ki": KIB, "kib": KIB, "kibibyte": KIB, "kibibytes": KIB,
    "mi": MIB, "mib": MIB, "mebibyte": MIB, "mebibytes": MIB,
    "gi": GIB, "gib": GIB, "gibibyte": GIB, "gibibytes": GIB,
    "ti": TIB, "tib": TIB, "tebibyte": TIB, "tebibytes": TIB,
    "pi": PIB, "pib": PIB, "pebibyte": PIB, "pebibytes": PIB,
})

# Durations, in nanoseconds
NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

# Units accepted inside a duration literal such as "1h30m" or "250ms"
DURATION_UNITS = MappingProxyType({
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
})

# Spelled-out duration unit names → canonical literal unit
DURATION_ALIASES = MappingProxyType({
    "nanoseconds": "ns", "nanosecond": "ns", "nano": "ns", "ns": "ns",
    "microseconds": "us", "microsecond": "us", "micro": "us", "us": "us",
    "milliseconds": "ms", "millisecond": "ms", "milli": "ms", "ms": "ms",
    "seconds": "s", "second": "s", "sec": "s", "s": "s",
    "minutes": "m", "minute": "m", "min": "m", "m": "m",
    "hours": "h", "hour": "h", "h": "h",
})

# Named time representations understood as From/To values
UNIX = "unix"
UNIX_MILLI = "unix_milli"
UNIX_NANO = "unix_nano"
RFC3339 = "rfc3339"
RFC3339_NANO = "rfc3339nano"
ISO8601 = "iso8601"

EPOCH_FORMATS = frozenset({UNIX, UNIX_MILLI, UNIX_NANO})
TIME_FORMATS = frozenset({UNIX, UNIX_MILLI, UNIX_NANO, RFC3339, RFC3339_NANO, ISO8601})

# Output aliases resolved before formatting
TIME_FORMAT_ALIASES = MappingProxyType({"string": RFC3339_NANO})
