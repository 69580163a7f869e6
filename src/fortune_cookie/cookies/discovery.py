"""Deterministic cookie file discovery under fortune directories."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from fortune_cookie.cookies.models import is_offensive_path
from fortune_cookie.index import DEFAULT_INDEX_SUFFIX

_BINARY_SNIFF_BYTES = 4096

NON_COOKIE_SUFFIXES = (
    ".pos",
    ".c",
    ".h",
    ".p",
    ".i",
    ".f",
    ".pas",
    ".ftn",
    ".ins.c",
    ".ins.pas",
    ".ins.ftn",
    ".sml",
    ".u8",
    ".md",
    ".tmp",
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DiscoveryRules:
    """Which files a directory walk accepts as cookie files."""

    include_normal: bool = True
    include_offensive: bool = False
    index_suffix: str = DEFAULT_INDEX_SUFFIX


def discover_cookie_files(root: Path, rules: DiscoveryRules | None = None) -> list[Path]:
    """Walk ``root`` with an explicit stack and return cookie files sorted by path."""
    active = rules or DiscoveryRules()
    found: list[Path] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", current, exc)
            continue
        for entry in reversed(ordered_entries):
            if entry.name.startswith("."):
                continue
            full_path = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                stack.append(full_path)
                continue
            if not entry.is_file():
                continue
            if not is_cookie_candidate(full_path, active, root):
                continue
            found.append(full_path)
    found.sort(key=lambda item: item.relative_to(root).as_posix())
    logger.debug("Discovered %d cookie files under %s", len(found), root)
    return found


def is_cookie_candidate(path: Path, rules: DiscoveryRules, root: Path | None = None) -> bool:
    """Apply naming, offensiveness and content rules to one file found under ``root``."""
    name = path.name
    if name.endswith(rules.index_suffix):
        return False
    if name.endswith(NON_COOKIE_SUFFIXES):
        return False
    offensive = is_offensive_path(path, root)
    if offensive and not rules.include_offensive:
        return False
    if not offensive and not rules.include_normal:
        return False
    try:
        return not is_binary_file(path)
    except OSError:
        return False


def is_binary_file(path: Path) -> bool:
    """Use content sniffing to exclude binary files."""
    with path.open("rb") as handle:
        sample = handle.read(_BINARY_SNIFF_BYTES)
    return b"\x00" in sample
