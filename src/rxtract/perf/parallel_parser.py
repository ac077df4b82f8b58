"""Multiprocessing-based scans over many input files.

Strategy:
    1. Ship the ParserConfig (not the compiled Parser) to each worker.
    2. Each worker rebuilds the Parser once per file and scans that file
       sequentially, returning its Records.
    3. Results are returned in input order.

A single scan cannot be split across lines (skip state and open documents
depend on earlier lines), so files are the unit of parallelism.

Usage::

    from rxtract.perf.parallel_parser import parse_files_parallel

    for result in parse_files_parallel(parser.config, paths, workers=8):
        print(result.path, len(result.records))
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from multiprocessing import Pool
from typing import Sequence

from ..config import settings
from ..parsers.base import Record
from ..parsers.extractor import Parser, ParserConfig

logger = logging.getLogger(__name__)

# (config, path, limit)
_Job = tuple[ParserConfig, str, int]


@dataclass
class FileResult:
    """Records scanned from one file."""

    path: str
    records: list[Record] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(r.errors) for r in self.records)


def _scan_file(job: _Job) -> FileResult:
    """Worker function: scan one file with a freshly built parser."""
    config, path, limit = job
    parser = Parser(config)
    result = FileResult(path=path)

    def _append(record: Record) -> bool:
        result.records.append(record)
        return not limit or len(result.records) < limit

    parser.parse_file(path, _append)
    return result


def parse_files_parallel(
    config: ParserConfig,
    paths: Sequence[str],
    workers: int | None = None,
    limit: int = 0,
) -> list[FileResult]:
    """Scan several files concurrently, one worker process per file.

    Args:
        config:  Parser definition; validated here before any worker starts.
        paths:   Files to scan.
        workers: Number of worker processes. Defaults to
                 ``settings.max_workers`` capped at the CPU count.
        limit:   Max Records per file (0 = all).

    Returns:
        One FileResult per path, in input order.
    """
    Parser(config)  # surface ConfigError in the caller's process
    jobs: list[_Job] = [(config, str(p), limit) for p in paths]
    if not jobs:
        return []

    n = min(workers or settings.max_workers, os.cpu_count() or 1, len(jobs))
    if n <= 1:
        return [_scan_file(job) for job in jobs]

    logger.debug("Scanning %d files with %d workers", len(jobs), n)
    with Pool(processes=n) as pool:
        return pool.map(_scan_file, jobs)
