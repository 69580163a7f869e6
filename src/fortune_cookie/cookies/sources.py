"""Source specifications, resolution and weight normalization."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from fortune_cookie.cookies.discovery import DiscoveryRules, discover_cookie_files
from fortune_cookie.cookies.models import CookieFile, CookieFormat, is_offensive_path

ALL_SOURCES = "all"
PERCENT_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)%$")
_WEIGHT_TOLERANCE = 1e-9

logger = logging.getLogger(__name__)


class SourceNotFoundError(Exception):
    """Raised once with every source path that could not be found."""

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths = tuple(paths)
        joined = ", ".join(self.paths)
        super().__init__(f"Not a fortune file or directory: {joined}")


class WeightOverflowError(Exception):
    """Raised when explicit percentages add up to more than 100."""

    def __init__(self, total: float) -> None:
        super().__init__(f"Probabilities sum to {total:g}%, more than 100%.")
        self.total = total


@dataclass(slots=True, frozen=True)
class SourceSpec:
    """One user-supplied source: a path or ``all``, optionally weighted."""

    path: str
    weight: float | None = None

    @property
    def explicit(self) -> bool:
        return self.weight is not None


@dataclass(slots=True, frozen=True)
class WeightedCookie:
    """A resolved cookie file and its normalized selection weight."""

    cookie: CookieFile
    weight: float
    source: str
    explicit: bool


@dataclass(slots=True, frozen=True)
class SourceGroup:
    """Files resolved from one source spec, in discovery order."""

    source: str
    explicit: bool
    entries: tuple[WeightedCookie, ...]

    @property
    def weight(self) -> float:
        return sum(entry.weight for entry in self.entries)


@dataclass(slots=True, frozen=True)
class SourceSet:
    """Ordered, weighted cookie files; weights sum to 1.0 when any are positive."""

    groups: tuple[SourceGroup, ...] = field(default_factory=tuple)

    @property
    def entries(self) -> tuple[WeightedCookie, ...]:
        return tuple(entry for group in self.groups for entry in group.entries)

    def total_weight(self) -> float:
        return sum(entry.weight for entry in self.entries)

    def __iter__(self) -> Iterator[WeightedCookie]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def parse_source_args(args: Sequence[str]) -> list[SourceSpec]:
    """Turn ``[N%] path`` tokens into source specs."""
    specs: list[SourceSpec] = []
    pending: float | None = None
    for token in args:
        match = PERCENT_PATTERN.match(token)
        if match is not None:
            if pending is not None:
                raise ValueError(f"Percentage {token} follows another percentage without a file.")
            pending = float(match.group(1))
            if pending > 100:
                raise ValueError(f"Percentage {token} is outside 0..100.")
            continue
        specs.append(SourceSpec(path=token, weight=pending))
        pending = None
    if pending is not None:
        raise ValueError("Percentages must precede files.")
    return specs


@dataclass(slots=True, frozen=True)
class _Candidate:
    path: Path
    offensive: bool


@dataclass(slots=True)
class _PendingGroup:
    source: str
    weight: float | None
    candidates: list[_Candidate]


class SourceResolver:
    """Expand source specs into a weighted, de-duplicated source set."""

    def __init__(
        self,
        search_dirs: Sequence[Path],
        cookie_format: CookieFormat | None = None,
        include_normal: bool = True,
        include_offensive: bool = False,
        equalize_sizes: bool = False,
    ) -> None:
        self._search_dirs = tuple(search_dirs)
        self._format = cookie_format or CookieFormat()
        self._rules = DiscoveryRules(
            include_normal=include_normal,
            include_offensive=include_offensive,
            index_suffix=self._format.index_suffix,
        )
        self._equalize_sizes = equalize_sizes

    def resolve(self, specs: Sequence[SourceSpec]) -> SourceSet:
        """Resolve specs in order; an empty sequence means ``all``."""
        active = list(specs) or [SourceSpec(path=ALL_SOURCES)]
        explicit_total = sum(spec.weight for spec in active if spec.weight is not None)
        if explicit_total > 100 + _WEIGHT_TOLERANCE:
            raise WeightOverflowError(explicit_total)

        pending: list[_PendingGroup] = []
        missing: list[str] = []
        for spec in active:
            candidates = self._expand(spec)
            if candidates is None:
                missing.append(spec.path)
                continue
            pending.append(
                _PendingGroup(source=spec.path, weight=spec.weight, candidates=candidates)
            )
        if missing:
            raise SourceNotFoundError(missing)

        _drop_duplicates(pending)
        loaded = [
            (
                group,
                [
                    CookieFile.load(item.path, self._format, offensive=item.offensive)
                    for item in group.candidates
                ],
            )
            for group in pending
        ]
        return self._weigh(loaded)

    def _expand(self, spec: SourceSpec) -> list[_Candidate] | None:
        if spec.path == ALL_SOURCES:
            candidates: list[_Candidate] = []
            for directory in self._search_dirs:
                if not directory.is_dir():
                    logger.debug("Default fortune directory %s does not exist", directory)
                    continue
                candidates.extend(self._discover(directory))
            return candidates
        located = self._locate(spec.path)
        if located is None:
            return None
        if located.is_dir():
            candidates = self._discover(located)
            if not candidates and spec.explicit:
                logger.warning("No acceptable fortune files in directory %s", located)
            return candidates
        return [_Candidate(path=located, offensive=is_offensive_path(located))]

    def _discover(self, root: Path) -> list[_Candidate]:
        return [
            _Candidate(path=path, offensive=is_offensive_path(path, root))
            for path in discover_cookie_files(root, self._rules)
        ]

    def _locate(self, name: str) -> Path | None:
        candidate = Path(name)
        if candidate.exists():
            return candidate
        if candidate.is_absolute():
            return None
        for directory in self._search_dirs:
            nested = directory / candidate
            if nested.exists():
                return nested
        return None

    def _weigh(self, loaded: list[tuple[_PendingGroup, list[CookieFile]]]) -> SourceSet:
        raw_weights: list[list[float]] = []
        unweighted_units = sum(
            cookie.total_weight_unit(self._equalize_sizes)
            for group, cookies in loaded
            if group.weight is None
            for cookie in cookies
        )
        explicit_total = sum(group.weight for group, _ in loaded if group.weight is not None)
        remaining = max(0.0, 100.0 - explicit_total)

        for group, cookies in loaded:
            units = [cookie.total_weight_unit(self._equalize_sizes) for cookie in cookies]
            if group.weight is not None:
                raw_weights.append(_proportional(group.weight, units))
            else:
                raw_weights.append(_proportional(remaining, units, unweighted_units))

        grand_total = sum(sum(raw) for raw in raw_weights)
        groups: list[SourceGroup] = []
        for (group, cookies), raw in zip(loaded, raw_weights):
            entries = tuple(
                WeightedCookie(
                    cookie=cookie,
                    weight=(value / grand_total) if grand_total > 0 else 0.0,
                    source=group.source,
                    explicit=group.weight is not None,
                )
                for cookie, value in zip(cookies, raw)
            )
            groups.append(
                SourceGroup(source=group.source, explicit=group.weight is not None, entries=entries)
            )
        return SourceSet(groups=tuple(groups))


def _proportional(share: float, units: list[int], denominator: int | None = None) -> list[float]:
    total = sum(units) if denominator is None else denominator
    if total <= 0:
        return [0.0 for _ in units]
    return [share * unit / total for unit in units]


def _drop_duplicates(groups: list[_PendingGroup]) -> None:
    """Keep each canonical path only in the last group that names it."""
    owner: dict[Path, int] = {}
    for position, group in enumerate(groups):
        for item in group.candidates:
            canonical = item.path.resolve()
            previous = owner.get(canonical)
            if previous is not None and previous != position:
                logger.warning(
                    "%s is named by both %s and %s; using the weight of %s",
                    item.path,
                    groups[previous].source,
                    group.source,
                    group.source,
                )
            owner[canonical] = position
    for position, group in enumerate(groups):
        kept: list[_Candidate] = []
        seen: set[Path] = set()
        for item in group.candidates:
            canonical = item.path.resolve()
            if owner[canonical] != position or canonical in seen:
                continue
            seen.add(canonical)
            kept.append(item)
        group.candidates = kept
