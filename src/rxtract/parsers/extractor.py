"""Regex-driven record extractor for line-oriented text.

A Parser runs in one of two modes, fixed when it is built:

  * line mode:     ``regex`` is set. Every line the pattern matches becomes
                   one record; capture group N feeds rule N. With
                   ``find_all`` every occurrence on a line is its own record.
  * document mode: ``regex`` is empty. A line matching ``start_match``
                   opens a new record; each rule searches every following
                   line with its own pattern and the first successful value
                   per field is kept.

In both modes ``stop_match`` ends the scan (dropping any unfinished record)
and, when both are set, ``skip_match``/``resume_match`` suppress a section of
lines. A resume match on the same line as a skip match wins.

Usage::

    parser = Parser.from_file("parsers/iostat.json")
    parser.parse_file("iostat.log", lambda record: print(record.data) or True)

A Parser holds no scan state and may be shared between threads.
"""
from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Any, Iterator, Mapping

from pydantic import BaseModel, ValidationError

from ..errors import ConfigError, FieldError, MismatchedCaptureCount, ReadError
from ..rules.rule import CompiledRule, RuleConfig
from .base import LineSource, Processor, Record
from .stream import RecordStream

logger = logging.getLogger(__name__)

# Yielded by _surviving_lines when the stop pattern matches
_STOP = object()


class ParserConfig(BaseModel):
    """Serializable parser definition. Empty patterns are unset."""

    find_all: bool = False
    start_match: str = ""
    stop_match: str = ""
    skip_match: str = ""
    resume_match: str = ""
    regex: str = ""
    rules: tuple[RuleConfig, ...] = ()

    class Config:
        frozen = True


def _compile(option: str, pattern: str) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid {option} pattern {pattern!r}: {exc}") from exc


def _read(lines: LineSource) -> Iterator[str | ReadError]:
    """Decode and de-terminate lines; a failing source yields one ReadError."""
    try:
        for raw in lines:
            line = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
            if line.endswith("\n"):
                line = line[:-1]
                if line.endswith("\r"):
                    line = line[:-1]
            yield line
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Input read failed, aborting scan: %s", exc)
        yield ReadError(exc)


class Parser:
    """Compiled, immutable form of a ParserConfig.

    Raises:
        ConfigError: The configuration cannot produce a working parser.
    """

    def __init__(self, config: ParserConfig) -> None:
        self._config = config
        self._start = _compile("start_match", config.start_match)
        self._stop = _compile("stop_match", config.stop_match)
        self._skip = _compile("skip_match", config.skip_match)
        self._resume = _compile("resume_match", config.resume_match)
        self._regex = _compile("regex", config.regex)

        if not config.rules:
            raise ConfigError("empty rules")

        # Records are flat objects, so names must not collide
        seen: set[str] = set()
        rules: list[CompiledRule] = []
        for rule_config in config.rules:
            if rule_config.name in seen:
                raise ConfigError(f"repeated rule name {rule_config.name!r}")
            seen.add(rule_config.name)
            rules.append(CompiledRule.from_config(rule_config))
        self._rules = tuple(rules)

        if self._regex is None and self._start is None:
            raise ConfigError("both start_match and regex are empty")

        logger.debug("Compiled %s-mode parser with %d rules", self.mode, len(self._rules))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Parser":
        try:
            config = ParserConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"invalid parser config: {exc}") from exc
        return cls(config)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Parser":
        """Build a parser from its JSON configuration document."""
        try:
            config = ParserConfig.model_validate_json(data)
        except ValidationError as exc:
            raise ConfigError(f"invalid parser config: {exc}") from exc
        return cls(config)

    @classmethod
    def from_file(cls, path: str | Path) -> "Parser":
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    def to_json(self) -> str:
        """JSON configuration document; ``Parser.from_json`` accepts it back."""
        return self._config.model_dump_json(by_alias=True)

    @property
    def config(self) -> ParserConfig:
        return self._config

    @property
    def rules(self) -> tuple[CompiledRule, ...]:
        return self._rules

    @property
    def mode(self) -> str:
        """``"line"`` when a combined regex is configured, else ``"document"``."""
        return "document" if self._regex is None else "line"

    def __repr__(self) -> str:
        return f"Parser(mode={self.mode!r}, rules={len(self._rules)})"

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def parse_with(self, lines: LineSource, callback: Processor) -> None:
        """Scan lines, handing every finished Record to callback.

        The scan ends at end of input, on a stop-pattern match, on a read
        failure (reported as one error-only Record) or as soon as callback
        returns False.
        """
        if self._regex is None:
            self._scan_documents(lines, callback)
        else:
            self._scan_lines(lines, callback)

    def parse_file(self, path: str | Path, callback: Processor) -> None:
        """Stream-scan a text file. Memory usage: one line at a time."""
        with open(path, encoding="utf-8", errors="replace") as f:
            self.parse_with(f, callback)

    def collect(self, lines: LineSource, limit: int = 0) -> list[Record]:
        """Scan lines and return the Records (at most limit, 0 = all)."""
        records: list[Record] = []

        def _append(record: Record) -> bool:
            records.append(record)
            return not limit or len(records) < limit

        self.parse_with(lines, _append)
        return records

    def parse(
        self,
        lines: LineSource,
        cancel: threading.Event | None = None,
        maxsize: int | None = None,
    ) -> RecordStream:
        """Scan lines on a background thread; iterate the result for Records.

        Args:
            lines:   Line source, consumed by the background thread.
            cancel:  Optional ``threading.Event``; setting it stops the scan.
            maxsize: Records buffered ahead of the reader.
        """
        return RecordStream(self, lines, cancel=cancel, maxsize=maxsize)

    def _surviving_lines(self, lines: LineSource, drop_blank: bool) -> Iterator[Any]:
        """Yield lines that pass stop/skip/resume filtering.

        Yields ``_STOP`` when the stop pattern matches and a ReadError when the
        source fails; nothing follows either.
        """
        skip = False
        for line in _read(lines):
            if isinstance(line, ReadError):
                yield line
                return
            if drop_blank and not line:
                continue

            if self._stop is not None and self._stop.search(line):
                logger.debug("Stop pattern matched, ending scan")
                yield _STOP
                return

            # Sections are only skipped when both patterns are set
            if self._skip is not None and self._resume is not None:
                if self._skip.search(line):
                    skip = True
                if self._resume.search(line):
                    skip = False
                if skip:
                    continue

            yield line

    def _scan_lines(self, lines: LineSource, callback: Processor) -> None:
        assert self._regex is not None
        for line in self._surviving_lines(lines, drop_blank=False):
            if line is _STOP:
                return
            if isinstance(line, ReadError):
                callback(Record(errors=[line]))
                return

            if self._config.find_all:
                matches: Any = self._regex.finditer(line)
            else:
                m = self._regex.search(line)
                matches = () if m is None else (m,)

            for m in matches:
                if not callback(self._line_record(m.groups())):
                    return

    def _line_record(self, groups: tuple[str | None, ...]) -> Record:
        if len(groups) != len(self._rules):
            return Record(errors=[MismatchedCaptureCount(len(self._rules), len(groups))])

        record = Record()
        for rule, text in zip(self._rules, groups):
            try:
                value, _ = rule.parse(text or "")
            except FieldError as exc:
                record.errors.append(exc)
                continue
            if value is not None:
                record.add(rule.name, value)
        return record

    def _scan_documents(self, lines: LineSource, callback: Processor) -> None:
        assert self._start is not None
        record = Record()
        for line in self._surviving_lines(lines, drop_blank=True):
            if line is _STOP:
                return
            if isinstance(line, ReadError):
                callback(Record(errors=[line]))
                return

            if self._start.search(line):
                if not record.empty and not callback(record):
                    return
                record = Record()

            for rule in self._rules:
                if record.has(rule.name):
                    continue
                try:
                    value, _ = rule.parse(line)
                except FieldError as exc:
                    record.errors.append(exc)
                    continue
                if value is not None:
                    record.add(rule.name, value)

        if not record.empty:
            callback(record)
