"""Tests for environment-driven runtime settings."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from rxtract.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("STREAM_BUFFER", "POLL_INTERVAL", "MAX_WORKERS", "DEFAULT_OUTPUT", "LOG_LEVEL"):
            monkeypatch.delenv(f"RXTRACT_{name}", raising=False)
        s = Settings(_env_file=None)
        assert s.stream_buffer == 1
        assert s.poll_interval == 0.05
        assert s.max_workers == 4
        assert s.default_output == "json"
        assert s.log_level == "WARNING"

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("RXTRACT_STREAM_BUFFER", "32")
        monkeypatch.setenv("RXTRACT_MAX_WORKERS", "2")
        monkeypatch.setenv("RXTRACT_LOG_LEVEL", "DEBUG")
        s = Settings(_env_file=None)
        assert s.stream_buffer == 32
        assert s.max_workers == 2
        assert s.log_level == "DEBUG"

    def test_unprefixed_env_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("MAX_WORKERS", "9")
        monkeypatch.delenv("RXTRACT_MAX_WORKERS", raising=False)
        assert Settings(_env_file=None).max_workers == 4

    def test_buffer_must_be_positive(self, monkeypatch) -> None:
        monkeypatch.setenv("RXTRACT_STREAM_BUFFER", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
