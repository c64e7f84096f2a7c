"""Threat-pattern scanning for values that may carry markup or code."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from style_engine.extensions.points import THREAT_PATTERNS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from style_engine.extensions.registry import ExtensionRegistry

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: int) -> re.Pattern[str]:
    return re.compile(pattern, flags)


@dataclass(frozen=True)
class ThreatPattern:
    """Named regular expression that flags a value as hostile."""

    name: str
    pattern: str
    flags: int = re.IGNORECASE

    def search(self, text: str) -> bool:
        """Whether the pattern occurs anywhere in ``text``."""
        return _compile(self.pattern, self.flags).search(text) is not None


DEFAULT_THREAT_PATTERNS: tuple[ThreatPattern, ...] = (
    ThreatPattern("script-tag", r"<\s*script\b"),
    ThreatPattern("style-breakout", r"<\s*/\s*style"),
    ThreatPattern("javascript-uri", r"javascript\s*:"),
    ThreatPattern("vbscript-uri", r"vbscript\s*:"),
    ThreatPattern("event-handler", r"\bon[a-z]+\s*="),
    ThreatPattern("css-expression", r"expression\s*\("),
    ThreatPattern("css-behavior", r"\bbehavior\s*:"),
    ThreatPattern("css-binding", r"-moz-binding\s*:"),
    ThreatPattern("css-import", r"@import\b"),
    ThreatPattern("url-javascript", r"url\s*\(\s*[\"']?\s*javascript\s*:"),
    ThreatPattern("data-uri-script", r"data:[^,;]*script"),
    ThreatPattern("php-open-tag", r"<\?php"),
    ThreatPattern("php-short-echo", r"<\?="),
    ThreatPattern("asp-tag", r"<%"),
)


class ThreatScanner:
    """Match text against the default patterns plus any added through the filter."""

    def __init__(
        self,
        extensions: ExtensionRegistry,
        patterns: Iterable[ThreatPattern] = DEFAULT_THREAT_PATTERNS,
    ) -> None:
        self._extensions = extensions
        self._patterns = tuple(patterns)

    def active_patterns(self) -> list[ThreatPattern]:
        """Resolve the pattern list through ``security.threatPatterns``."""
        filtered = self._extensions.apply_filter(THREAT_PATTERNS, list(self._patterns))
        if not isinstance(filtered, list | tuple):
            logger.warning("Ignoring threat pattern filter result of type %s", type(filtered))
            return list(self._patterns)
        patterns: list[ThreatPattern] = []
        for item in filtered:
            if not isinstance(item, ThreatPattern):
                logger.warning("Ignoring non-pattern entry from threat filter: %r", item)
                continue
            try:
                _compile(item.pattern, item.flags)
            except re.error:
                logger.warning("Ignoring invalid threat pattern %s", item.name)
                continue
            patterns.append(item)
        return patterns

    def scan(self, text: str, patterns: Iterable[ThreatPattern] | None = None) -> ThreatPattern | None:
        """Return the first matching pattern, or None."""
        for pattern in patterns if patterns is not None else self.active_patterns():
            if pattern.search(text):
                return pattern
        return None
