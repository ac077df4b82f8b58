"""Record type and the callback signature shared by all scan interfaces."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from .flat_json import append_json

# Lines may come from text or binary sources
LineSource = Iterable[str | bytes]


@dataclass
class Record:
    """One flat JSON object produced by a scan, plus the errors met building it.

    ``data`` stays ``None`` until the first field is written. A Record may
    carry errors alongside partial data, or errors only.
    """

    data: bytes | None = None
    errors: list[Exception] = field(default_factory=list)
    _fields: set[str] = field(default_factory=set, repr=False, compare=False)

    @property
    def empty(self) -> bool:
        """True when neither data nor errors have been collected."""
        return self.data is None and not self.errors

    @property
    def fields(self) -> frozenset[str]:
        """Names of the fields written so far."""
        return frozenset(self._fields)

    def has(self, key: str) -> bool:
        return key in self._fields

    def add(self, key: str, value: bytes) -> None:
        """Append one encoded field to the JSON body."""
        self.data = append_json(self.data, key, value)
        self._fields.add(key)

    def as_dict(self) -> dict[str, Any]:
        """Decode the JSON body; an error-only Record decodes to ``{}``."""
        if self.data is None:
            return {}
        return json.loads(self.data)


# Receives each Record; return False to stop the scan.
Processor = Callable[[Record], bool]
