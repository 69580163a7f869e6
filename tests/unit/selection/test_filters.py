from __future__ import annotations

import random
from pathlib import Path

import pytest

from fortune_cookie.cookies import CookieFile, SourceResolver, SourceSpec
from fortune_cookie.selection import (
    NoMatchError,
    SelectionEngine,
    SelectionFilter,
    eligible_cookies,
    eligible_indices,
)

EXAMPLE = b"A\n%\nBB\n%\nCCC\n"


def _load(tmp_path: Path, name: str = "sample", content: bytes = EXAMPLE) -> CookieFile:
    path = tmp_path / name
    path.write_bytes(content)
    return CookieFile.load(path)


def test_short_threshold_keeps_only_shorter_fortunes(tmp_path: Path) -> None:
    cookie = _load(tmp_path)
    fortune_filter = SelectionFilter.from_options(short_only=True, length_threshold=2)

    assert eligible_indices(cookie, fortune_filter) == (0,)


def test_long_threshold_is_inclusive(tmp_path: Path) -> None:
    cookie = _load(tmp_path)
    fortune_filter = SelectionFilter.from_options(long_only=True, length_threshold=2)

    assert eligible_indices(cookie, fortune_filter) == (1, 2)


def test_nothing_is_shorter_than_zero(tmp_path: Path) -> None:
    cookie = _load(tmp_path)
    sources = SourceResolver(search_dirs=()).resolve([SourceSpec(str(cookie.path))])
    fortune_filter = SelectionFilter.from_options(short_only=True, length_threshold=0)

    with pytest.raises(NoMatchError):
        SelectionEngine(random.Random(1)).select(sources, fortune_filter)


def test_short_and_long_together_are_rejected() -> None:
    with pytest.raises(ValueError, match="cannot be combined"):
        SelectionFilter.from_options(short_only=True, long_only=True)


def test_negative_threshold_is_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        SelectionFilter.from_options(length_threshold=-1)


def test_invalid_pattern_is_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid pattern"):
        SelectionFilter.from_options(pattern="(unclosed")


def test_pattern_honors_case_insensitivity(tmp_path: Path) -> None:
    cookie = _load(tmp_path, content=b"The Cat sat\n%\nno felines\n%\nconcatenate\n")

    sensitive = SelectionFilter.from_options(pattern="cat")
    insensitive = SelectionFilter.from_options(pattern="cat", case_insensitive=True)

    assert eligible_indices(cookie, sensitive) == (2,)
    assert eligible_indices(cookie, insensitive) == (0, 2)


def test_offensive_only_excludes_whole_normal_files(tmp_path: Path) -> None:
    clean = _load(tmp_path, name="clean")
    rude = _load(tmp_path, name="rude-o")
    fortune_filter = SelectionFilter.from_options(offensive_only=True)

    assert eligible_indices(clean, fortune_filter) == ()
    assert eligible_indices(rude, fortune_filter) == (0, 1, 2)


def test_filtering_twice_gives_the_same_result(tmp_path: Path) -> None:
    (tmp_path / "a").write_bytes(EXAMPLE)
    (tmp_path / "b").write_bytes(b"long enough to pass\n%\nx\n")
    sources = SourceResolver(search_dirs=()).resolve(
        [SourceSpec(str(tmp_path / "a")), SourceSpec(str(tmp_path / "b"))]
    )
    fortune_filter = SelectionFilter.from_options(long_only=True, length_threshold=3)

    first = eligible_cookies(sources, fortune_filter)
    second = eligible_cookies(sources, fortune_filter)

    assert [(item.cookie.path, item.indices) for item in first] == [
        (item.cookie.path, item.indices) for item in second
    ]
    assert [item.indices for item in first] == [(2,), (0,)]


def test_length_counts_characters_not_bytes(tmp_path: Path) -> None:
    cookie = _load(tmp_path, content="ééé\n%\nabcd\n".encode("utf-8"))
    fortune_filter = SelectionFilter.from_options(short_only=True, length_threshold=4)

    assert eligible_indices(cookie, fortune_filter) == (0,)
