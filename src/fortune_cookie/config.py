"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import codecs
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fortune_cookie.cookies import CookieFormat
from fortune_cookie.index import DEFAULT_INDEX_SUFFIX
from fortune_cookie.selection import (
    DEFAULT_CHARS_PER_SECOND,
    DEFAULT_MIN_WAIT_SECONDS,
    DEFAULT_SHORT_LENGTH,
)

DEFAULT_SEARCH_DIRS = (
    Path("/usr/share/games/fortunes"),
    Path("/usr/share/fortune"),
    Path("/usr/local/share/games/fortunes"),
    Path("/opt/homebrew/share/games/fortunes"),
)
DEFAULT_DELIMITER = "%"
DEFAULT_ENCODING = "utf-8"

PATH_ENV_VAR = "FORTUNE_PATH"
ENCODING_ENV_VAR = "FORTUNE_ENCODING"


@dataclass(slots=True, frozen=True)
class FortuneConfig:
    """Fully merged configuration."""

    search_dirs: tuple[Path, ...]
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = DEFAULT_ENCODING
    index_suffix: str = DEFAULT_INDEX_SUFFIX
    short_length: int = DEFAULT_SHORT_LENGTH
    min_wait_seconds: int = DEFAULT_MIN_WAIT_SECONDS
    chars_per_second: int = DEFAULT_CHARS_PER_SECOND

    def cookie_format(self, use_index: bool = True) -> CookieFormat:
        """Return the read settings shared by every cookie file."""
        return CookieFormat(
            delimiter=self.delimiter.encode("ascii"),
            encoding=self.encoding,
            index_suffix=self.index_suffix,
            use_index=use_index,
        )

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot for debug output."""
        return {
            "search_dirs": [str(path) for path in self.search_dirs],
            "delimiter": self.delimiter,
            "encoding": self.encoding,
            "index_suffix": self.index_suffix,
            "short_length": self.short_length,
            "min_wait_seconds": self.min_wait_seconds,
            "chars_per_second": self.chars_per_second,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    search_dirs: tuple[Path, ...] | None = None
    delimiter: str | None = None
    encoding: str | None = None
    short_length: int | None = None


def default_config() -> FortuneConfig:
    """Build the built-in configuration."""
    return FortuneConfig(search_dirs=DEFAULT_SEARCH_DIRS)


def merge_environment(base: FortuneConfig, environ: Mapping[str, str]) -> FortuneConfig:
    """Apply ``FORTUNE_PATH`` and ``FORTUNE_ENCODING`` when set."""
    search_dirs = base.search_dirs
    raw_path = environ.get(PATH_ENV_VAR, "").strip()
    if raw_path:
        search_dirs = tuple(Path(item) for item in raw_path.split(os.pathsep) if item)
    encoding = base.encoding
    raw_encoding = environ.get(ENCODING_ENV_VAR, "").strip()
    if raw_encoding:
        encoding = _validated_encoding(raw_encoding, "env.FORTUNE_ENCODING")
    return FortuneConfig(
        search_dirs=search_dirs,
        delimiter=base.delimiter,
        encoding=encoding,
        index_suffix=base.index_suffix,
        short_length=base.short_length,
        min_wait_seconds=base.min_wait_seconds,
        chars_per_second=base.chars_per_second,
    )


def apply_cli_overrides(config: FortuneConfig, overrides: CliOverrides) -> FortuneConfig:
    """Apply startup overrides at highest precedence."""
    delimiter = config.delimiter
    if overrides.delimiter is not None:
        delimiter = _validated_delimiter(overrides.delimiter, "overrides.delimiter")
    encoding = config.encoding
    if overrides.encoding is not None:
        encoding = _validated_encoding(overrides.encoding, "overrides.encoding")
    short_length = _optional_positive_int(
        overrides.short_length, "overrides.short_length", config.short_length
    )
    return FortuneConfig(
        search_dirs=overrides.search_dirs or config.search_dirs,
        delimiter=delimiter,
        encoding=encoding,
        index_suffix=config.index_suffix,
        short_length=short_length,
        min_wait_seconds=config.min_wait_seconds,
        chars_per_second=config.chars_per_second,
    )


def load_effective_config(
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
) -> FortuneConfig:
    """Load config using merge order defaults -> environment -> overrides."""
    merged = merge_environment(default_config(), os.environ if environ is None else environ)
    return apply_cli_overrides(merged, overrides or CliOverrides())


def _validated_delimiter(value: str, name: str) -> str:
    if len(value) != 1 or not value.isascii():
        raise ValueError(f"Config field '{name}' must be a single ASCII character.")
    return value


def _validated_encoding(value: str, name: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError as exc:
        raise ValueError(f"Config field '{name}' names an unknown encoding.") from exc
    return value


def _optional_positive_int(value: object, name: str, default: int) -> int:
    if value is None:
        return default
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    return value
