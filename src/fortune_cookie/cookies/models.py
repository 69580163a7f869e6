"""Cookie file model: one cookie file plus its index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fortune_cookie.index import (
    DEFAULT_DELIMITER,
    DEFAULT_INDEX_SUFFIX,
    IndexHeader,
    Segment,
    StrfileIndex,
    build_index,
    ensure_index,
    rot13,
    scan_segments,
    strip_line_end,
)

OFFENSIVE_SUFFIX = "-o"
OFFENSIVE_DIR_NAME = "off"


class IndexOutOfRangeError(Exception):
    """Raised when a fortune index is outside a cookie file's entries."""

    def __init__(self, path: Path, index: int, count: int) -> None:
        super().__init__(f"Fortune {index} is out of range for {path} ({count} fortunes).")
        self.path = path
        self.index = index
        self.count = count


@dataclass(slots=True, frozen=True)
class CookieFormat:
    """How cookie files are read and where their indexes live."""

    delimiter: bytes = DEFAULT_DELIMITER
    encoding: str = "utf-8"
    index_suffix: str = DEFAULT_INDEX_SUFFIX
    use_index: bool = True


def is_offensive_path(path: Path, root: Path | None = None) -> bool:
    """Return True when naming marks the file as offensive.

    An ``off`` directory counts only below ``root``, the directory the file was
    discovered under; without a root only the ``-o`` name suffix applies.
    """
    if path.name.endswith(OFFENSIVE_SUFFIX):
        return True
    if root is None:
        return False
    return OFFENSIVE_DIR_NAME in path.relative_to(root).parent.parts


class CookieFile:
    """Immutable view of a cookie file's fortunes in index order."""

    def __init__(
        self,
        path: Path,
        content: bytes,
        index: StrfileIndex,
        segments: list[Segment] | None = None,
        encoding: str = "utf-8",
        offensive: bool | None = None,
    ) -> None:
        self._path = path
        self._index = index
        self._offensive = is_offensive_path(path) if offensive is None else offensive
        if segments is None:
            segments = scan_segments(content, index.header.delimiter)
        segment_ends = {segment.start: segment.end for segment in segments}
        missing = [start for start in index.entry_offsets if start not in segment_ends]
        if missing:
            raise ValueError(f"Index offset {missing[0]} does not begin a fortune in {path}.")
        texts: list[str] = []
        for start in index.entry_offsets:
            raw = strip_line_end(content[start : segment_ends[start]])
            text = raw.decode(encoding, errors="replace")
            if index.header.is_rotated:
                text = rot13(text)
            texts.append(text)
        self._texts = tuple(texts)
        self._total_bytes = sum(segment_ends[start] - start for start in index.entry_offsets)

    @classmethod
    def load(
        cls,
        path: Path,
        cookie_format: CookieFormat | None = None,
        offensive: bool | None = None,
    ) -> CookieFile:
        """Read a cookie file and obtain a trustworthy index for it.

        With ``use_index`` off the on-disk index is ignored and the text is
        indexed in memory.
        """
        fmt = cookie_format or CookieFormat()
        content = path.read_bytes()
        if fmt.use_index:
            index, segments = ensure_index(
                path,
                content,
                delimiter=fmt.delimiter,
                suffix=fmt.index_suffix,
            )
        else:
            index = build_index(content, delimiter=fmt.delimiter)
            segments = scan_segments(content, fmt.delimiter)
        return cls(
            path=path,
            content=content,
            index=index,
            segments=segments,
            encoding=fmt.encoding,
            offensive=offensive,
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def header(self) -> IndexHeader:
        return self._index.header

    @property
    def index(self) -> StrfileIndex:
        return self._index

    def fortune_count(self) -> int:
        return len(self._texts)

    def fortune_at(self, index: int) -> str:
        """Return the fortune stored at ``index`` in index order."""
        if index < 0 or index >= len(self._texts):
            raise IndexOutOfRangeError(self._path, index, len(self._texts))
        return self._texts[index]

    def fortunes(self) -> tuple[str, ...]:
        return self._texts

    def total_bytes(self) -> int:
        """Total byte size of all fortunes, line endings included."""
        return self._total_bytes

    def total_weight_unit(self, equalize_sizes: bool = False) -> int:
        """Fortune count in equalize mode, total fortune bytes otherwise."""
        if equalize_sizes:
            return self.fortune_count()
        return self._total_bytes

    def is_offensive(self) -> bool:
        return self._offensive

    def __repr__(self) -> str:
        return f"CookieFile(path={str(self._path)!r}, fortunes={len(self._texts)})"
