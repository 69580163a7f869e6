"""Cookie file scanning and index construction (the strfile indexer)."""

from __future__ import annotations

import codecs
import random

from fortune_cookie.index.codec import layout_version
from fortune_cookie.index.models import (
    DEFAULT_DELIMITER,
    STR_ORDERED,
    STR_RANDOM,
    STR_ROTATED,
    BuildMode,
    IndexHeader,
    IndexLayout,
    Segment,
    StrfileIndex,
)


def scan_segments(content: bytes, delimiter: bytes = DEFAULT_DELIMITER) -> list[Segment]:
    """Split cookie content on delimiter lines, in file order.

    A delimiter line holds only the delimiter byte and its line ending. Empty or
    whitespace-only segments are not fortunes and are skipped.
    """
    segments: list[Segment] = []
    start = 0
    position = 0
    for line in content.splitlines(keepends=True):
        if line.rstrip(b"\r\n") == delimiter:
            _append_segment(segments, content, start, position)
            start = position + len(line)
        position += len(line)
    _append_segment(segments, content, start, len(content))
    return segments


def _append_segment(segments: list[Segment], content: bytes, start: int, end: int) -> None:
    if content[start:end].strip():
        segments.append(Segment(start=start, end=end))


def strip_line_end(raw: bytes) -> bytes:
    """Drop the single line ending that precedes a delimiter line."""
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n") or raw.endswith(b"\r"):
        return raw[:-1]
    return raw


def rot13(text: str) -> str:
    """Rotate Latin letters by 13 positions."""
    return codecs.encode(text, "rot_13")


def build_index(
    content: bytes,
    delimiter: bytes = DEFAULT_DELIMITER,
    mode: BuildMode = BuildMode.FILE_ORDER,
    ignore_case: bool = False,
    rotated: bool = False,
    seed: int | None = None,
    layout: IndexLayout = IndexLayout.LINUX,
) -> StrfileIndex:
    """Index a cookie file's raw bytes.

    ``ORDERED`` sorts entries by fortune bytes (case-folded with ``ignore_case``),
    ``RANDOM`` shuffles them with a generator seeded by ``seed``. The offset table
    always ends with the end-of-file sentinel; ``layout`` picks the on-disk
    format and its version number.
    """
    if len(delimiter) != 1:
        raise ValueError("Delimiter must be exactly one byte.")
    segments = scan_segments(content, delimiter)
    flags = STR_ROTATED if rotated else 0
    if mode is BuildMode.ORDERED:

        def sort_key(segment: Segment) -> bytes:
            text = strip_line_end(content[segment.start : segment.end])
            return text.lower() if ignore_case else text

        segments.sort(key=sort_key)
        flags |= STR_ORDERED
    elif mode is BuildMode.RANDOM:
        random.Random(seed).shuffle(segments)
        flags |= STR_RANDOM

    lengths = [segment.length for segment in segments]
    header = IndexHeader(
        version=layout_version(layout),
        count=len(segments),
        longest=max(lengths, default=0),
        shortest=min(lengths, default=0),
        flags=flags,
        delimiter=delimiter,
    )
    offsets = tuple(segment.start for segment in segments) + (len(content),)
    return StrfileIndex(header=header, offsets=offsets, layout=layout)
