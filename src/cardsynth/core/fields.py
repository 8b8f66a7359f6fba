"""Field-by-field reading of raw card configuration with diagnostics.

Each normalizer wraps its raw card in a :class:`ConfigReader`. Readers
never raise: every accessor returns a usable value and, when the author
wrote something the engine had to replace or clamp, records a warning.
Absent fields fall back silently.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from cardsynth.core.parsing import (
    clamp,
    clean_text,
    is_present,
    optional_number,
    parse_duration,
)

T = TypeVar("T", bound=str)


class ConfigReader:
    """Reads typed values out of an untrusted configuration mapping."""

    def __init__(self, raw: Any, card: str, logger: logging.Logger) -> None:
        self.raw: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
        self.card = card
        self.warnings: list[str] = []
        self._logger = logger

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self._logger.debug("%s normalization: %s", self.card, message)

    def get(self, key: str, source: Mapping[str, Any] | None = None) -> Any:
        return (self.raw if source is None else source).get(key)

    def section(self, key: str, source: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
        value = self.get(key, source)
        return value if isinstance(value, Mapping) else {}

    def number(
        self,
        key: str,
        fallback: float,
        source: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> float:
        """Numeric field; a present but non-numeric value warns."""
        value = self.get(key, source)
        parsed = optional_number(value)
        if parsed is None:
            if is_present(value):
                self.warn(f"{name or key} must be a number, got {value!r}; using {fallback:g}.")
            return fallback
        return parsed

    def clamped(
        self,
        key: str,
        fallback: float,
        minimum: float,
        maximum: float,
        source: Mapping[str, Any] | None = None,
        name: str | None = None,
        integer: bool = False,
    ) -> float:
        """Numeric field limited to [minimum, maximum]; clamping warns."""
        value = self.number(key, fallback, source, name)
        if integer:
            value = int(value // 1)
        bounded = clamp(value, minimum, maximum)
        if bounded != value:
            self.warn(f"{name or key} {value:g} is outside {minimum:g}-{maximum:g}; clamped to {bounded:g}.")
        return int(bounded) if integer else bounded

    def boolean(self, key: str, fallback: bool, source: Mapping[str, Any] | None = None) -> bool:
        """Only literal true/false count; anything else is replaced with a warning."""
        value = self.get(key, source)
        if isinstance(value, bool):
            return value
        if value is not None:
            self.warn(f"{key} must be true or false, got {value!r}; using {str(fallback).lower()}.")
        return fallback

    def text(self, key: str, source: Mapping[str, Any] | None = None) -> str | None:
        return clean_text(self.get(key, source))

    def choice(
        self,
        key: str,
        options: Iterable[T],
        fallback: T,
        source: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> T:
        """Closed-set enum field; unsupported values warn and use ``fallback``."""
        value = self.get(key, source)
        for option in options:
            if value == option:
                return option
        if is_present(value):
            self.warn(f'Unsupported {name or key} "{value}"; using "{fallback}".')
        return fallback

    def duration(
        self,
        key: str,
        fallback_seconds: int,
        fallback_text: str,
        source: Mapping[str, Any] | None = None,
    ) -> int:
        """Duration field; present but unparsable text warns."""
        value = self.get(key, source)
        seconds = parse_duration(value, fallback_seconds)
        if is_present(value) and parse_duration(value, -1) == -1:
            self.warn(f'Unsupported {key} "{value}"; using {fallback_text}.')
        return seconds
