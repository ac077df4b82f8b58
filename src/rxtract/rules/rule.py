"""Field rules: extract one value from text and convert it to a JSON scalar.

A rule binds a field name to an optional single-group pattern, a value type
and the From/To conversion parameters::

    rule = CompiledRule.from_config(
        RuleConfig(name="latency", type="duration", to="ms", regex=r"took (\\S+)")
    )
    rule.parse("request took 1.5s")  # → (b"1500", True)

Compiled rules hold no state and may be shared between threads.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pydantic import BaseModel, Field

from ..convert.base import ValueType
from ..convert.engine import convert
from ..errors import ConfigError, ConversionError, FieldError

logger = logging.getLogger(__name__)


class RuleConfig(BaseModel):
    """Serializable rule definition. Empty strings mean "not set"."""

    name: str = ""
    type: str = ""
    from_: str = Field(default="", alias="from", description="Source format or unit")
    to: str = Field(default="", description="Destination format or unit")
    regex: str = Field(default="", description="Pattern with exactly one capture group")

    class Config:
        populate_by_name = True
        frozen = True


@dataclass(frozen=True)
class CompiledRule:
    """Validated, regex-compiled form of a RuleConfig."""

    config: RuleConfig
    type: ValueType
    pattern: re.Pattern[str] | None = None

    @classmethod
    def from_config(cls, config: RuleConfig) -> "CompiledRule":
        """Validate and compile a rule. Raises ConfigError on any problem."""
        pattern = None
        if config.regex:
            try:
                pattern = re.compile(config.regex)
            except re.error as exc:
                raise ConfigError(f"rule {config.name!r}: invalid regex: {exc}") from exc
            if pattern.groups != 1:
                raise ConfigError(
                    f"rule {config.name!r}: regex must have exactly one capture group, "
                    f"found {pattern.groups}"
                )

        if not config.name:
            raise ConfigError("rule name must not be empty")

        try:
            value_type = ValueType(config.type)
        except ValueError:
            raise ConfigError(f"rule {config.name!r}: invalid value type {config.type!r}") from None

        logger.debug("Compiled rule %s (%s)", config.name, value_type.value)
        return cls(config=config, type=value_type, pattern=pattern)

    @property
    def name(self) -> str:
        return self.config.name

    def parse(self, text: str) -> tuple[bytes | None, bool]:
        """Extract and convert this rule's value from text.

        Returns ``(value, matched)``:

        * ``(None, False)``: the rule pattern did not match.
        * ``(None, True)``: matched, but the extracted text is empty.
        * ``(bytes, True)``: the encoded JSON scalar.

        Raises:
            FieldError: The extracted text could not be converted.
        """
        if self.pattern is not None:
            m = self.pattern.search(text)
            if m is None:
                return None, False
            text = m.group(1)

        if not text:
            return None, True

        try:
            return convert(text, self.type, self.config.from_, self.config.to), True
        except ConversionError as exc:
            raise FieldError(self.name, text, exc) from exc
