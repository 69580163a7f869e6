"""Weighted fortune selection and match enumeration."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from fortune_cookie.cookies import CookieFile, SourceSet
from fortune_cookie.selection.filters import SelectionFilter, eligible_indices

logger = logging.getLogger(__name__)


class NoMatchError(Exception):
    """Raised when no fortune survives the active filter."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(slots=True, frozen=True)
class Selection:
    """A chosen fortune and where it came from."""

    path: Path
    text: str
    fortune_index: int


@dataclass(slots=True, frozen=True)
class EligibleCookie:
    """A cookie file with at least one eligible fortune."""

    cookie: CookieFile
    weight: float
    indices: tuple[int, ...]


@dataclass(slots=True, frozen=True)
class FortuneMatches:
    """Restartable sequence of (cookie, fortune) pairs passing a filter."""

    sources: SourceSet
    fortune_filter: SelectionFilter

    def __iter__(self) -> Iterator[tuple[CookieFile, str]]:
        for entry in self.sources:
            cookie = entry.cookie
            for position in eligible_indices(cookie, self.fortune_filter):
                yield cookie, cookie.fortune_at(position)


def eligible_cookies(sources: SourceSet, fortune_filter: SelectionFilter) -> list[EligibleCookie]:
    """Drop files without eligible fortunes, preserving source order."""
    output: list[EligibleCookie] = []
    for entry in sources:
        indices = eligible_indices(entry.cookie, fortune_filter)
        if not indices:
            continue
        output.append(EligibleCookie(cookie=entry.cookie, weight=entry.weight, indices=indices))
    return output


def choose_by_cumulative_weight(weights: Sequence[float], draw: float) -> int:
    """Return the first position whose cumulative boundary is >= ``draw``.

    Weights are normalized first; zero-weight positions are never chosen.
    """
    total = sum(weights)
    if total <= 0:
        raise ValueError("At least one weight must be positive.")
    boundary = 0.0
    last_positive = -1
    for position, weight in enumerate(weights):
        if weight <= 0:
            continue
        boundary += weight / total
        last_positive = position
        if draw <= boundary:
            return position
    return last_positive


class SelectionEngine:
    """Pick fortunes from a source set with an injected generator."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def select(self, sources: SourceSet, fortune_filter: SelectionFilter) -> Selection:
        """Weighted draw of one file, then a uniform draw among its eligible fortunes."""
        candidates = [item for item in eligible_cookies(sources, fortune_filter) if item.weight > 0]
        if not candidates:
            raise NoMatchError("No fortunes match the requested filters.")
        draw = self._rng.random()
        chosen = candidates[choose_by_cumulative_weight([item.weight for item in candidates], draw)]
        position = chosen.indices[self._rng.randrange(len(chosen.indices))]
        logger.debug(
            "Draw %.6f chose %s fortune %d of %d eligible",
            draw,
            chosen.cookie.path,
            position,
            len(chosen.indices),
        )
        return Selection(
            path=chosen.cookie.path,
            text=chosen.cookie.fortune_at(position),
            fortune_index=position,
        )

    @staticmethod
    def matches(sources: SourceSet, fortune_filter: SelectionFilter) -> FortuneMatches:
        """Every eligible fortune, in source order then index order."""
        return FortuneMatches(sources=sources, fortune_filter=fortune_filter)
