from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fortune_cookie.cookies import (
    ALL_SOURCES,
    SourceNotFoundError,
    SourceResolver,
    SourceSpec,
    WeightOverflowError,
    parse_source_args,
)

EXAMPLE = b"A\n%\nBB\n%\nCCC\n"


def _cookie(path: Path, content: bytes = EXAMPLE) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def _weights(source_set) -> dict[str, float]:
    return {entry.cookie.path.name: entry.weight for entry in source_set}


def test_parse_percentages_attach_to_next_source() -> None:
    specs = parse_source_args(["30%", "a", "b", "70.5%", "c"])

    assert specs == [
        SourceSpec(path="a", weight=30.0),
        SourceSpec(path="b"),
        SourceSpec(path="c", weight=70.5),
    ]
    assert specs[0].explicit
    assert not specs[1].explicit


@pytest.mark.parametrize(
    ("tokens", "message"),
    [
        (["a", "50%"], "precede"),
        (["10%", "20%", "a"], "follows another percentage"),
        (["150%", "a"], "outside"),
    ],
)
def test_parse_rejects_misplaced_percentages(tokens: list[str], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_source_args(tokens)


def test_unweighted_files_share_by_bytes(tmp_path: Path) -> None:
    big = _cookie(tmp_path / "big")
    small = _cookie(tmp_path / "small", b"x\n")

    resolved = SourceResolver(search_dirs=()).resolve(
        [SourceSpec(str(big)), SourceSpec(str(small))]
    )

    weights = _weights(resolved)
    assert weights["big"] == pytest.approx(9 / 11)
    assert weights["small"] == pytest.approx(2 / 11)
    assert resolved.total_weight() == pytest.approx(1.0)


def test_equalize_shares_by_fortune_count(tmp_path: Path) -> None:
    big = _cookie(tmp_path / "big")
    small = _cookie(tmp_path / "small", b"x\n")

    resolved = SourceResolver(search_dirs=(), equalize_sizes=True).resolve(
        [SourceSpec(str(big)), SourceSpec(str(small))]
    )

    assert _weights(resolved) == pytest.approx({"big": 0.75, "small": 0.25})


def test_explicit_percentages_are_honored(tmp_path: Path) -> None:
    first = _cookie(tmp_path / "first")
    second = _cookie(tmp_path / "second", b"tiny\n")

    resolved = SourceResolver(search_dirs=()).resolve(
        parse_source_args(["30%", str(first), "70%", str(second)])
    )

    assert _weights(resolved) == pytest.approx({"first": 0.3, "second": 0.7})


def test_remainder_goes_to_unweighted_sources(tmp_path: Path) -> None:
    a = _cookie(tmp_path / "a")
    b = _cookie(tmp_path / "b", b"one\n")
    c = _cookie(tmp_path / "c", b"two\n")

    resolved = SourceResolver(search_dirs=()).resolve(
        parse_source_args(["50%", str(a), str(b), str(c)])
    )

    assert _weights(resolved) == pytest.approx({"a": 0.5, "b": 0.25, "c": 0.25})


def test_explicit_sum_below_hundred_is_normalized(tmp_path: Path) -> None:
    a = _cookie(tmp_path / "a")
    b = _cookie(tmp_path / "b")

    resolved = SourceResolver(search_dirs=()).resolve(
        parse_source_args(["20%", str(a), "30%", str(b)])
    )

    assert _weights(resolved) == pytest.approx({"a": 0.4, "b": 0.6})


def test_directory_percentage_is_split_among_its_files(tmp_path: Path) -> None:
    _cookie(tmp_path / "dir" / "one", b"1234\n")
    _cookie(tmp_path / "dir" / "two", b"12345678901234\n")
    other = _cookie(tmp_path / "other")

    resolved = SourceResolver(search_dirs=()).resolve(
        parse_source_args(["40%", str(tmp_path / "dir"), str(other)])
    )

    assert _weights(resolved) == pytest.approx({"one": 0.1, "two": 0.3, "other": 0.6})
    assert resolved.groups[0].weight == pytest.approx(0.4)


def test_explicit_percentages_over_hundred_fail(tmp_path: Path) -> None:
    with pytest.raises(WeightOverflowError) as excinfo:
        SourceResolver(search_dirs=()).resolve(
            parse_source_args(["60%", str(tmp_path / "a"), "50%", str(tmp_path / "b")])
        )

    assert excinfo.value.total == pytest.approx(110.0)


def test_every_missing_source_is_reported(tmp_path: Path) -> None:
    present = _cookie(tmp_path / "present")
    missing_a = str(tmp_path / "missing-a")
    missing_b = str(tmp_path / "missing-b")

    with pytest.raises(SourceNotFoundError) as excinfo:
        SourceResolver(search_dirs=()).resolve(
            [SourceSpec(missing_a), SourceSpec(str(present)), SourceSpec(missing_b)]
        )

    assert excinfo.value.paths == (missing_a, missing_b)
    assert "missing-a" in str(excinfo.value)
    assert "missing-b" in str(excinfo.value)


def test_duplicate_file_keeps_last_weight(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    shared = _cookie(tmp_path / "dir" / "shared")
    _cookie(tmp_path / "dir" / "alone", b"alone\n")

    with caplog.at_level(logging.WARNING, logger="fortune_cookie"):
        resolved = SourceResolver(search_dirs=()).resolve(
            parse_source_args(["30%", str(tmp_path / "dir"), "70%", str(shared)])
        )

    assert [entry.cookie.path.name for entry in resolved] == ["alone", "shared"]
    assert _weights(resolved) == pytest.approx({"alone": 0.3, "shared": 0.7})
    assert "named by both" in caplog.text


def test_no_sources_means_all_search_dirs(tmp_path: Path) -> None:
    _cookie(tmp_path / "first" / "zen")
    _cookie(tmp_path / "first" / "rude-o")
    _cookie(tmp_path / "second" / "art")
    resolver = SourceResolver(
        search_dirs=(tmp_path / "first", tmp_path / "absent", tmp_path / "second")
    )

    resolved = resolver.resolve([])

    assert [entry.cookie.path.name for entry in resolved] == ["zen", "art"]
    assert resolved.groups[0].source == ALL_SOURCES
    assert resolved.total_weight() == pytest.approx(1.0)


def test_offensive_rules_apply_to_all(tmp_path: Path) -> None:
    _cookie(tmp_path / "fortunes" / "zen")
    _cookie(tmp_path / "fortunes" / "rude-o")
    resolver = SourceResolver(
        search_dirs=(tmp_path / "fortunes",), include_normal=False, include_offensive=True
    )

    resolved = resolver.resolve([SourceSpec(ALL_SOURCES)])

    assert [entry.cookie.path.name for entry in resolved] == ["rude-o"]


def test_explicit_offensive_file_is_always_included(tmp_path: Path) -> None:
    rude = _cookie(tmp_path / "rude-o")

    resolved = SourceResolver(search_dirs=()).resolve([SourceSpec(str(rude))])

    assert len(resolved) == 1
    assert resolved.entries[0].cookie.is_offensive()


def test_bare_name_is_found_in_search_dirs(tmp_path: Path) -> None:
    _cookie(tmp_path / "fortunes" / "zen-of-fortune-testing")

    resolved = SourceResolver(search_dirs=(tmp_path / "fortunes",)).resolve(
        [SourceSpec("zen-of-fortune-testing")]
    )

    assert resolved.entries[0].cookie.path == tmp_path / "fortunes" / "zen-of-fortune-testing"


def test_search_root_below_an_off_directory_is_not_offensive(tmp_path: Path) -> None:
    root = tmp_path / "off" / "share" / "fortunes"
    _cookie(root / "zen", b"calm\n%\nquiet\n")

    resolved = SourceResolver(search_dirs=(root,)).resolve([])

    assert len(resolved) == 1
    assert not resolved.entries[0].cookie.is_offensive()


def test_off_subdirectory_of_search_root_is_offensive(tmp_path: Path) -> None:
    root = tmp_path / "fortunes"
    _cookie(root / "zen")
    _cookie(root / "off" / "zen")
    resolver = SourceResolver(search_dirs=(root,), include_offensive=True)

    resolved = resolver.resolve([])

    flags = {
        entry.cookie.path.relative_to(root).as_posix(): entry.cookie.is_offensive()
        for entry in resolved
    }
    assert flags == {"off/zen": True, "zen": False}
