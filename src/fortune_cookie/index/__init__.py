"""Strfile index codec and index lifecycle."""

from .builder import build_index, rot13, scan_segments, strip_line_end
from .codec import (
    HEADER_SIZE,
    STRFILE_VERSION,
    FormatError,
    TruncatedError,
    decode_header,
    detect_layout,
    layout_version,
    decode_index,
    encode_index,
)
from .manager import (
    DEFAULT_INDEX_SUFFIX,
    ensure_index,
    index_matches,
    index_path_for,
    read_index_file,
    write_index_file,
)
from .models import (
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

__all__ = [
    "BuildMode",
    "DEFAULT_DELIMITER",
    "DEFAULT_INDEX_SUFFIX",
    "FormatError",
    "HEADER_SIZE",
    "IndexHeader",
    "IndexLayout",
    "STRFILE_VERSION",
    "STR_ORDERED",
    "STR_RANDOM",
    "STR_ROTATED",
    "Segment",
    "StrfileIndex",
    "TruncatedError",
    "build_index",
    "decode_header",
    "detect_layout",
    "layout_version",
    "decode_index",
    "encode_index",
    "ensure_index",
    "index_matches",
    "index_path_for",
    "read_index_file",
    "rot13",
    "scan_segments",
    "strip_line_end",
    "write_index_file",
]
