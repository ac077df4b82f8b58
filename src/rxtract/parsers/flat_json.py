"""Minimal appender for flat (single-level) JSON objects.

Keys are written as-is, without escaping, and values must already be encoded
JSON. No validation is done on either.
"""
from __future__ import annotations


def append_json(data: bytes | None, key: str, value: bytes) -> bytes:
    """Return ``data`` with ``"key":value`` inserted before the closing brace."""
    if not data:
        data = b"{}"
    sep = b"," if len(data) > 2 else b""
    return data[:-1] + sep + b'"' + key.encode("utf-8") + b'":' + value + b"}"
