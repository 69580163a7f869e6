"""Reading-time computation for the wait-before-exit option."""

from __future__ import annotations

DEFAULT_MIN_WAIT_SECONDS = 6
DEFAULT_CHARS_PER_SECOND = 20


def wait_seconds(
    length: int,
    min_wait_seconds: int = DEFAULT_MIN_WAIT_SECONDS,
    chars_per_second: int = DEFAULT_CHARS_PER_SECOND,
) -> int:
    """Seconds to pause after showing a fortune of ``length`` characters."""
    if length < 0:
        raise ValueError("Fortune length must not be negative.")
    if chars_per_second < 1:
        raise ValueError("Reading rate must be a positive number of characters per second.")
    return max((length + 1) // chars_per_second, max(0, min_wait_seconds))
