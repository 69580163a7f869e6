"""The ``fortune`` command: print a random, hopefully interesting, adage."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from collections.abc import Callable
from typing import TextIO

from fortune_cookie.config import CliOverrides, FortuneConfig, load_effective_config
from fortune_cookie.cookies import (
    CookieFile,
    SourceNotFoundError,
    SourceResolver,
    SourceSet,
    WeightOverflowError,
    parse_source_args,
)
from fortune_cookie.index import FormatError, TruncatedError
from fortune_cookie.logging import configure_logging
from fortune_cookie.selection import (
    NoMatchError,
    SelectionEngine,
    SelectionFilter,
    eligible_cookies,
    wait_seconds,
)

VERSION = "1.0.0"

logger = logging.getLogger(__name__)

FORTUNE_ERRORS = (
    FormatError,
    TruncatedError,
    SourceNotFoundError,
    WeightOverflowError,
    NoMatchError,
    ValueError,
    OSError,
)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the fortune command."""
    parser = argparse.ArgumentParser(
        prog="fortune",
        description="Print a random, hopefully interesting, adage.",
    )
    parser.add_argument(
        "-a", dest="all_lists", action="store_true", help="choose from all lists of maxims"
    )
    parser.add_argument(
        "-c", dest="show_file", action="store_true", help="show the cookie file of the fortune"
    )
    parser.add_argument("-D", "--debug", action="store_true", help="enable debug messages")
    parser.add_argument(
        "-e", dest="equalize", action="store_true", help="consider all files of equal size"
    )
    parser.add_argument(
        "-f", dest="list_files", action="store_true", help="print the files that would be searched"
    )
    parser.add_argument(
        "-i", dest="ignore_case", action="store_true", help="ignore case for -m patterns"
    )
    length_group = parser.add_mutually_exclusive_group()
    length_group.add_argument(
        "-l", dest="long_only", action="store_true", help="long dictums only"
    )
    length_group.add_argument(
        "-s", dest="short_only", action="store_true", help="short apothegms only"
    )
    parser.add_argument(
        "-m", dest="pattern", default=None, help="print all fortunes matching the pattern"
    )
    parser.add_argument(
        "-n", dest="length", type=int, default=None, help="longest fortune length considered short"
    )
    parser.add_argument(
        "-o", dest="offensive", action="store_true", help="choose only from offensive aphorisms"
    )
    parser.add_argument(
        "-t",
        "--text",
        dest="text_only",
        action="store_true",
        help="ignore index files and read cookie files as plain text",
    )
    parser.add_argument(
        "-w", dest="wait", action="store_true", help="wait before exiting, based on length"
    )
    parser.add_argument("--seed", type=int, default=None, help="seed the random generator")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "sources", nargs="*", metavar="SOURCE", help="[N%%] cookie file, directory or all"
    )
    return parser


def build_filter(args: argparse.Namespace, config: FortuneConfig) -> SelectionFilter:
    """Translate parsed flags into a selection filter."""
    return SelectionFilter.from_options(
        offensive_only=args.offensive,
        short_only=args.short_only,
        long_only=args.long_only,
        length_threshold=config.short_length,
        pattern=args.pattern,
        case_insensitive=args.ignore_case,
        equalize_sizes=args.equalize,
    )


def resolve_sources(
    args: argparse.Namespace, config: FortuneConfig, fortune_filter: SelectionFilter
) -> SourceSet:
    """Resolve positional sources with the configured search directories."""
    resolver = SourceResolver(
        search_dirs=config.search_dirs,
        cookie_format=config.cookie_format(use_index=not args.text_only),
        include_normal=args.all_lists or not args.offensive,
        include_offensive=args.all_lists or args.offensive,
        equalize_sizes=fortune_filter.equalize_sizes,
    )
    return resolver.resolve(parse_source_args(args.sources))


def print_file_list(sources: SourceSet, fortune_filter: SelectionFilter, out: TextIO) -> None:
    """Print each source group and its files with selection percentages.

    Only files that can still be chosen under the filter are listed, with
    percentages renormalized over them.
    """
    weights = {
        item.cookie: item.weight
        for item in eligible_cookies(sources, fortune_filter)
        if item.weight > 0
    }
    total = sum(weights.values())
    if total <= 0:
        raise NoMatchError("No fortunes match the requested filters.")
    for group in sources.groups:
        shares = [
            (entry.cookie, weights[entry.cookie] / total)
            for entry in group.entries
            if entry.cookie in weights
        ]
        if not shares:
            continue
        group_share = sum(share for _, share in shares)
        out.write(f"{group_share * 100:5.2f}% {group.source}\n")
        for cookie, share in shares:
            out.write(f"    {share * 100:5.2f}% {cookie.path}\n")


def print_matches(
    sources: SourceSet,
    fortune_filter: SelectionFilter,
    out: TextIO,
    err: TextIO,
) -> None:
    """Print every matching fortune, grouped under its cookie file."""
    grouped: list[tuple[CookieFile, list[str]]] = []
    for cookie, text in SelectionEngine.matches(sources, fortune_filter):
        if not grouped or grouped[-1][0] is not cookie:
            grouped.append((cookie, []))
        grouped[-1][1].append(text)
    if not grouped:
        raise NoMatchError(f"No fortunes match pattern {fortune_filter.pattern.pattern!r}.")
    for cookie, texts in grouped:
        err.write(f"({cookie.path})\n%\n")
        err.flush()
        for text in texts:
            out.write(f"{text}\n%\n")
        out.flush()


def run(
    args: argparse.Namespace,
    config: FortuneConfig,
    out: TextIO,
    err: TextIO,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Execute one fortune invocation against an effective config."""
    fortune_filter = build_filter(args, config)
    sources = resolve_sources(args, config, fortune_filter)
    logger.debug("Resolved %d cookie files", len(sources))

    if args.list_files:
        print_file_list(sources, fortune_filter, err)
        return
    if fortune_filter.pattern is not None:
        print_matches(sources, fortune_filter, out, err)
        return

    engine = SelectionEngine(random.Random(args.seed))
    selection = engine.select(sources, fortune_filter)
    if args.show_file:
        out.write(f"({selection.path})\n%\n")
    out.write(f"{selection.text}\n")
    out.flush()
    if args.wait:
        delay = wait_seconds(
            len(selection.text),
            min_wait_seconds=config.min_wait_seconds,
            chars_per_second=config.chars_per_second,
        )
        logger.debug("Waiting %d seconds", delay)
        sleep(delay)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the fortune command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(debug=args.debug)
    try:
        config = load_effective_config(CliOverrides(short_length=args.length))
        logger.debug("Effective config: %s", config.to_public_dict())
        run(args, config, out=sys.stdout, err=sys.stderr)
    except FORTUNE_ERRORS as exc:
        print(f"fortune: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
