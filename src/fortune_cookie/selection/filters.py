"""Fortune eligibility filters."""

from __future__ import annotations

import re
from dataclasses import dataclass

from fortune_cookie.cookies import CookieFile

DEFAULT_SHORT_LENGTH = 160


@dataclass(slots=True, frozen=True)
class SelectionFilter:
    """Options deciding which fortunes may be shown."""

    offensive_only: bool = False
    short_only: bool = False
    long_only: bool = False
    length_threshold: int = DEFAULT_SHORT_LENGTH
    pattern: re.Pattern[str] | None = None
    case_insensitive: bool = False
    equalize_sizes: bool = False

    @classmethod
    def from_options(
        cls,
        offensive_only: bool = False,
        short_only: bool = False,
        long_only: bool = False,
        length_threshold: int = DEFAULT_SHORT_LENGTH,
        pattern: str | None = None,
        case_insensitive: bool = False,
        equalize_sizes: bool = False,
    ) -> SelectionFilter:
        """Validate raw options and compile the match pattern."""
        if short_only and long_only:
            raise ValueError("Short-only and long-only filters cannot be combined.")
        if length_threshold < 0:
            raise ValueError("Length threshold must not be negative.")
        compiled: re.Pattern[str] | None = None
        if pattern is not None:
            flags = re.IGNORECASE if case_insensitive else 0
            try:
                compiled = re.compile(pattern, flags)
            except re.error as exc:
                raise ValueError(f"Invalid pattern {pattern!r}: {exc}") from exc
        return cls(
            offensive_only=offensive_only,
            short_only=short_only,
            long_only=long_only,
            length_threshold=length_threshold,
            pattern=compiled,
            case_insensitive=case_insensitive,
            equalize_sizes=equalize_sizes,
        )

    def accepts_file(self, cookie: CookieFile) -> bool:
        """Return False when the whole file is excluded by offensiveness."""
        return cookie.is_offensive() if self.offensive_only else True

    def accepts_text(self, text: str) -> bool:
        """Apply length and pattern rules to one fortune."""
        length = len(text)
        if self.short_only and length >= self.length_threshold:
            return False
        if self.long_only and length < self.length_threshold:
            return False
        if self.pattern is not None and self.pattern.search(text) is None:
            return False
        return True


def eligible_indices(cookie: CookieFile, fortune_filter: SelectionFilter) -> tuple[int, ...]:
    """Indices of fortunes in ``cookie`` that pass ``fortune_filter``."""
    if not fortune_filter.accepts_file(cookie):
        return ()
    return tuple(
        position
        for position, text in enumerate(cookie.fortunes())
        if fortune_filter.accepts_text(text)
    )
