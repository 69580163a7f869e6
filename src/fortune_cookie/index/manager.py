"""On-disk index lookup, validation and in-memory rebuild."""

from __future__ import annotations

import logging
from pathlib import Path

from fortune_cookie.index.builder import build_index, scan_segments
from fortune_cookie.index.codec import decode_index, encode_index
from fortune_cookie.index.models import DEFAULT_DELIMITER, Segment, StrfileIndex

DEFAULT_INDEX_SUFFIX = ".dat"

logger = logging.getLogger(__name__)


def index_path_for(cookie_path: Path, suffix: str = DEFAULT_INDEX_SUFFIX) -> Path:
    """Return the companion index path for a cookie file."""
    return cookie_path.with_name(cookie_path.name + suffix)


def read_index_file(path: Path) -> StrfileIndex | None:
    """Decode an index file, or return None when it does not exist."""
    if not path.is_file():
        return None
    return decode_index(path.read_bytes())


def write_index_file(path: Path, index: StrfileIndex) -> None:
    """Write an index atomically through a temporary sibling file."""
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("wb") as handle:
        handle.write(encode_index(index))
    tmp.replace(path)


def index_matches(index: StrfileIndex, segments: list[Segment], content_length: int) -> bool:
    """Return True when stored offsets describe exactly the scanned fortunes."""
    if index.header.count != len(segments):
        return False
    if index.end_offset != content_length:
        return False
    return sorted(index.entry_offsets) == [segment.start for segment in segments]


def ensure_index(
    cookie_path: Path,
    content: bytes,
    delimiter: bytes = DEFAULT_DELIMITER,
    suffix: str = DEFAULT_INDEX_SUFFIX,
) -> tuple[StrfileIndex, list[Segment]]:
    """Return a usable index for ``content`` plus its file-order segments.

    The on-disk index is trusted only when it is not older than the cookie file
    and agrees with a fresh scan; otherwise an index is built in memory. A
    stored index that fails to decode propagates its error.
    """
    index_path = index_path_for(cookie_path, suffix)
    stored = read_index_file(index_path)
    if stored is None:
        logger.debug("No index for %s; building in memory", cookie_path)
        segments = scan_segments(content, delimiter)
        return build_index(content, delimiter=delimiter), segments

    stored_delimiter = stored.header.delimiter
    segments = scan_segments(content, stored_delimiter)
    if index_path.stat().st_mtime_ns < cookie_path.stat().st_mtime_ns:
        logger.warning("Index %s is older than %s; rebuilding in memory", index_path, cookie_path)
    elif not index_matches(stored, segments, len(content)):
        logger.warning(
            "Index %s does not match a fresh scan of %s; rebuilding in memory",
            index_path,
            cookie_path,
        )
    else:
        return stored, segments
    rebuilt = build_index(
        content,
        delimiter=stored_delimiter,
        rotated=stored.header.is_rotated,
        layout=stored.layout,
    )
    return rebuilt, segments
