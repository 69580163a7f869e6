"""Typed models for strfile index data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

STR_RANDOM = 0x1
STR_ORDERED = 0x2
STR_ROTATED = 0x4

DEFAULT_DELIMITER = b"%"


class IndexLayout(Enum):
    """On-disk index layouts written by the common strfile builds."""

    LINUX = "linux"
    FREEBSD = "freebsd"
    HOMEBREW = "homebrew"


class BuildMode(Enum):
    """Entry ordering chosen when an index is built."""

    FILE_ORDER = "file_order"
    ORDERED = "ordered"
    RANDOM = "random"


@dataclass(slots=True, frozen=True)
class IndexHeader:
    """Fixed-size strfile header."""

    version: int
    count: int
    longest: int
    shortest: int
    flags: int
    delimiter: bytes = DEFAULT_DELIMITER

    @property
    def is_random(self) -> bool:
        return bool(self.flags & STR_RANDOM)

    @property
    def is_ordered(self) -> bool:
        return bool(self.flags & STR_ORDERED)

    @property
    def is_rotated(self) -> bool:
        return bool(self.flags & STR_ROTATED)

    def flag_names(self) -> list[str]:
        """Return set flag names in bit order."""
        names: list[str] = []
        if self.is_random:
            names.append("RANDOM")
        if self.is_ordered:
            names.append("ORDERED")
        if self.is_rotated:
            names.append("ROTATED")
        return names


@dataclass(slots=True, frozen=True)
class StrfileIndex:
    """Header plus the offset table, end-of-file sentinel included."""

    header: IndexHeader
    offsets: tuple[int, ...]
    layout: IndexLayout = IndexLayout.LINUX

    @property
    def entry_offsets(self) -> tuple[int, ...]:
        """Per-fortune start offsets in stored order, without the sentinel."""
        return self.offsets[:-1]

    @property
    def end_offset(self) -> int:
        return self.offsets[-1]


@dataclass(slots=True, frozen=True)
class Segment:
    """Byte range of one fortune inside a cookie file, delimiter excluded."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start
