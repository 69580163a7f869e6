"""Cookie files, discovery and source resolution."""

from .discovery import DiscoveryRules, discover_cookie_files, is_binary_file, is_cookie_candidate
from .models import CookieFile, CookieFormat, IndexOutOfRangeError, is_offensive_path
from .sources import (
    ALL_SOURCES,
    SourceGroup,
    SourceNotFoundError,
    SourceResolver,
    SourceSet,
    SourceSpec,
    WeightedCookie,
    WeightOverflowError,
    parse_source_args,
)

__all__ = [
    "ALL_SOURCES",
    "CookieFile",
    "CookieFormat",
    "DiscoveryRules",
    "IndexOutOfRangeError",
    "SourceGroup",
    "SourceNotFoundError",
    "SourceResolver",
    "SourceSet",
    "SourceSpec",
    "WeightOverflowError",
    "WeightedCookie",
    "discover_cookie_files",
    "is_binary_file",
    "is_cookie_candidate",
    "is_offensive_path",
    "parse_source_args",
]
