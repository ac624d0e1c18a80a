"""Heuristic detection of automated (bot) comment authors."""

import re
from collections.abc import Iterable

# Matched case-insensitively against the author's display name.
DEFAULT_BOT_PATTERNS: tuple[str, ...] = ("coderabbit", r"bot$", r"\[bot\]")


def invalid_patterns(patterns: Iterable[str]) -> list[str]:
    """Return the patterns that are not valid regular expressions."""
    invalid = []
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error:
            invalid.append(pattern)
    return invalid


class BotDetector:
    """Classify author names as bot or human from an ordered list of regexes.

    Any pattern matching anywhere in the name marks the author as a bot.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_BOT_PATTERNS) -> None:
        self.patterns = tuple(patterns)
        self._compiled = [re.compile(p, re.IGNORECASE) for p in self.patterns]

    def is_bot(self, name: str | None) -> bool:
        if not name:
            return False
        return any(pattern.search(name) for pattern in self._compiled)

    def __call__(self, name: str | None) -> bool:
        return self.is_bot(name)

    def __repr__(self) -> str:
        return f"BotDetector(patterns={list(self.patterns)!r})"
