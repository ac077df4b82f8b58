"""Exception types raised while building parsers and extracting records.

Construction problems raise ``ConfigError`` before any scanning begins.
Everything that goes wrong during a scan is collected on the Record being
built (``FieldError``, ``MismatchedCaptureCount``, ``ReadError``) so sibling
fields and later records are unaffected.

All exceptions keep their constructor arguments in ``args`` so they survive
pickling across worker processes.
"""
from __future__ import annotations


class ExtractionError(Exception):
    """Base exception for all rxtract errors."""


class ConfigError(ExtractionError, ValueError):
    """Parser or rule configuration is invalid; the parser cannot be built."""


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------


class ConversionError(ExtractionError, ValueError):
    """Extracted text could not be converted into a JSON scalar."""


class InvalidNumber(ConversionError):
    """Text is not a number, or does not fit the target width."""


class InvalidBool(ConversionError):
    """Text is not a recognised boolean literal."""


class InvalidTime(ConversionError):
    """Text does not match the source time representation."""


class InvalidDuration(ConversionError):
    """Text is not a valid duration literal."""


class UnknownUnit(ConversionError):
    """Source or destination data unit is not in the unit table."""


class UnknownFormat(ConversionError):
    """Source or destination format is missing or unsupported."""


# ---------------------------------------------------------------------------
# Scan-time errors stored on records
# ---------------------------------------------------------------------------


class FieldError(ExtractionError):
    """A single field failed to convert.

    Attributes:
        field: Rule name the value was extracted for.
        raw:   The extracted text that failed to convert.
        cause: The underlying ``ConversionError``.
    """

    def __init__(self, field: str, raw: str, cause: Exception) -> None:
        super().__init__(field, raw, cause)
        self.field = field
        self.raw = raw
        self.cause = cause

    def __str__(self) -> str:
        return f"rule {self.field}, input: {self.raw}, error: {self.cause}"


class MismatchedCaptureCount(ExtractionError):
    """The line pattern captured a different number of groups than there are rules."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return (
            f"invalid number of matches and rules: "
            f"{self.actual} captured, {self.expected} rules"
        )


class ReadError(ExtractionError):
    """Reading the next input line failed; the scan was aborted."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"input read failed: {self.cause}"
