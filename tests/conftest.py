"""Shared pytest fixtures for rxtract tests."""
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "test.log") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def tmp_config_file(tmp_path: Path):
    """Return a factory that writes a parser config dict as JSON."""

    def _make(config: dict[str, Any], name: str = "parser.json") -> Path:
        p = tmp_path / name
        p.write_text(json.dumps(config), encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def utc_plus_one(monkeypatch):
    """Pin the process-local timezone to a fixed UTC+1 for the test."""
    monkeypatch.setenv("TZ", "UTC-1")  # POSIX sign convention: UTC-1 is one hour east
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def document_config() -> dict[str, Any]:
    """Document-mode parser: a record per "start" line, three typed fields."""
    return {
        "find_all": False,
        "start_match": "start",
        "stop_match": "",
        "skip_match": "",
        "resume_match": "",
        "regex": "",
        "rules": [
            {"name": "float", "type": "float", "regex": r"([-+]?\d*\.?\d+)"},
            {"name": "bool", "type": "bool", "regex": r"\sbool(\w+)$"},
            {"name": "duration", "type": "duration", "to": "string", "regex": r"([-+]?\d*\.?\d+) ffff"},
        ],
    }


@pytest.fixture()
def document_lines() -> list[str]:
    return [
        "\tstart",
        "\t9.57889",
        "\tboolfalse",
        "\taaaa124.545 ffff",
        "",
        "\tstart",
        "\t2245.6",
        "\tbooltrue",
        "\taaaa66.545 ffff",
    ]


@pytest.fixture()
def line_config() -> dict[str, Any]:
    """Line-mode parser for "<host> load=<float> up=<duration>" lines."""
    return {
        "regex": r"^(\S+) load=(\S*) up=(\S+)",
        "rules": [
            {"name": "host", "type": "string"},
            {"name": "load", "type": "float"},
            {"name": "uptime", "type": "duration", "to": "s"},
        ],
    }
