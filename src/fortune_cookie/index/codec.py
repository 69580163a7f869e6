"""Binary strfile header and offset table codec."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Final

from fortune_cookie.index.models import (
    STR_ORDERED,
    STR_RANDOM,
    IndexHeader,
    IndexLayout,
    StrfileIndex,
)

STRFILE_VERSION: Final[int] = 2
SUPPORTED_VERSIONS: Final[frozenset[int]] = frozenset({1, 2})


@dataclass(slots=True, frozen=True)
class _LayoutCodec:
    header: struct.Struct
    offset: struct.Struct
    version: int
    max_offset: int


# Homebrew's strfile stores every 32-bit big-endian value in an 8-byte slot
# padded with four zero bytes.
_LAYOUTS: Final[dict[IndexLayout, _LayoutCodec]] = {
    IndexLayout.LINUX: _LayoutCodec(
        header=struct.Struct(">IIIIIc3x"),
        offset=struct.Struct(">I"),
        version=STRFILE_VERSION,
        max_offset=0xFFFFFFFF,
    ),
    IndexLayout.FREEBSD: _LayoutCodec(
        header=struct.Struct(">IIIIIc3x"),
        offset=struct.Struct(">Q"),
        version=1,
        max_offset=0xFFFFFFFFFFFFFFFF,
    ),
    IndexLayout.HOMEBREW: _LayoutCodec(
        header=struct.Struct(">I4xI4xI4xI4xI4xc7x"),
        offset=struct.Struct(">I4x"),
        version=1,
        max_offset=0xFFFFFFFF,
    ),
}

HEADER_SIZE: Final[int] = _LAYOUTS[IndexLayout.LINUX].header.size
OFFSET_SIZE: Final[int] = _LAYOUTS[IndexLayout.LINUX].offset.size
MAX_OFFSET: Final[int] = _LAYOUTS[IndexLayout.LINUX].max_offset


class FormatError(Exception):
    """Raised when an index header is malformed or unsupported."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TruncatedError(Exception):
    """Raised when the offset table is shorter than the header declares."""

    def __init__(self, expected: int, found: int) -> None:
        super().__init__(
            f"Index declares {expected} offset entries but only {found} are present."
        )
        self.expected = expected
        self.found = found


def layout_version(layout: IndexLayout) -> int:
    """Version number the given layout's strfile writes."""
    return _LAYOUTS[layout].version


def detect_layout(data: bytes) -> IndexLayout:
    """Pick the layout whose declared count explains the exact data size.

    Falls back to the Linux layout so malformed data is reported against it.
    """
    for layout, codec in _LAYOUTS.items():
        if len(data) < codec.header.size:
            continue
        count = codec.header.unpack_from(data, 0)[1]
        if len(data) == codec.header.size + (count + 1) * codec.offset.size:
            return layout
    return IndexLayout.LINUX


def decode_header(data: bytes, layout: IndexLayout = IndexLayout.LINUX) -> IndexHeader:
    """Decode and validate the fixed-size header."""
    codec = _LAYOUTS[layout]
    if len(data) < codec.header.size:
        raise FormatError(
            f"Index is {len(data)} bytes, shorter than the {codec.header.size}-byte header."
        )
    version, count, longest, shortest, flags, delimiter = codec.header.unpack_from(data, 0)
    if version not in SUPPORTED_VERSIONS:
        raise FormatError(f"Unsupported index version {version}.")
    if flags & STR_RANDOM and flags & STR_ORDERED:
        raise FormatError("Index flags RANDOM and ORDERED are mutually exclusive.")
    if count and shortest > longest:
        raise FormatError(f"Shortest length {shortest} exceeds longest length {longest}.")
    return IndexHeader(
        version=version,
        count=count,
        longest=longest,
        shortest=shortest,
        flags=flags,
        delimiter=delimiter,
    )


def decode_index(data: bytes, layout: IndexLayout | None = None) -> StrfileIndex:
    """Decode a complete index: header plus count + 1 big-endian offsets.

    Without an explicit ``layout`` the layout is detected from the data.
    """
    active = detect_layout(data) if layout is None else layout
    codec = _LAYOUTS[active]
    header = decode_header(data, active)
    expected = header.count + 1
    available = (len(data) - codec.header.size) // codec.offset.size
    if available < expected:
        raise TruncatedError(expected=expected, found=available)
    end = codec.header.size + expected * codec.offset.size
    offsets = tuple(value for (value,) in codec.offset.iter_unpack(data[codec.header.size : end]))
    return StrfileIndex(header=header, offsets=offsets, layout=active)


def encode_index(index: StrfileIndex) -> bytes:
    """Encode header then the offset table, sentinel last, in the index's layout."""
    header = index.header
    codec = _LAYOUTS[index.layout]
    if len(index.offsets) != header.count + 1:
        raise ValueError(
            f"Offset table has {len(index.offsets)} entries; expected {header.count + 1}."
        )
    if len(header.delimiter) != 1:
        raise ValueError("Index delimiter must be exactly one byte.")
    if any(offset > codec.max_offset for offset in index.offsets):
        raise ValueError(
            f"Cookie file is too large for the {index.layout.value} index offset table."
        )
    payload = bytearray(
        codec.header.pack(
            header.version,
            header.count,
            header.longest,
            header.shortest,
            header.flags,
            header.delimiter,
        )
    )
    payload += b"".join(codec.offset.pack(offset) for offset in index.offsets)
    return bytes(payload)
