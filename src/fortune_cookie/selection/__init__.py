"""Fortune filtering and weighted selection."""

from .engine import (
    EligibleCookie,
    FortuneMatches,
    NoMatchError,
    Selection,
    SelectionEngine,
    choose_by_cumulative_weight,
    eligible_cookies,
)
from .filters import DEFAULT_SHORT_LENGTH, SelectionFilter, eligible_indices
from .timing import DEFAULT_CHARS_PER_SECOND, DEFAULT_MIN_WAIT_SECONDS, wait_seconds

__all__ = [
    "DEFAULT_CHARS_PER_SECOND",
    "DEFAULT_MIN_WAIT_SECONDS",
    "DEFAULT_SHORT_LENGTH",
    "EligibleCookie",
    "FortuneMatches",
    "NoMatchError",
    "Selection",
    "SelectionEngine",
    "SelectionFilter",
    "choose_by_cumulative_weight",
    "eligible_cookies",
    "eligible_indices",
    "wait_seconds",
]
