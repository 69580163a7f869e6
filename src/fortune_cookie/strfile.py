"""The ``strfile`` command: build or inspect a cookie file's index."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from fortune_cookie.config import DEFAULT_DELIMITER
from fortune_cookie.index import (
    DEFAULT_INDEX_SUFFIX,
    BuildMode,
    FormatError,
    IndexLayout,
    StrfileIndex,
    TruncatedError,
    build_index,
    decode_index,
    write_index_file,
)
from fortune_cookie.logging import configure_logging


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the strfile command."""
    parser = argparse.ArgumentParser(
        prog="strfile",
        description="Create a random access index for a fortune cookie file.",
    )
    parser.add_argument("infile", help="cookie file with delimiter-separated strings")
    parser.add_argument(
        "outfile",
        nargs="?",
        default=None,
        help=f"index file (default: infile{DEFAULT_INDEX_SUFFIX})",
    )
    parser.add_argument(
        "-c", dest="delimiter", default=DEFAULT_DELIMITER, help="delimiting character"
    )
    parser.add_argument(
        "-s", dest="silent", action="store_true", help="do not show a summary of the data"
    )
    order_group = parser.add_mutually_exclusive_group()
    order_group.add_argument(
        "-o", dest="ordered", action="store_true", help="order the strings alphabetically"
    )
    order_group.add_argument(
        "-r", dest="randomized", action="store_true", help="randomize the order of the strings"
    )
    parser.add_argument(
        "-i", dest="ignore_case", action="store_true", help="ignore case when ordering strings"
    )
    parser.add_argument("-x", dest="rotated", action="store_true", help="set the rotated bit")
    parser.add_argument(
        "-l", dest="show", action="store_true", help="load an index file and display its header"
    )
    parser.add_argument(
        "--platform",
        choices=[layout.value for layout in IndexLayout],
        default=IndexLayout.LINUX.value,
        help="index layout to write (default: linux)",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for -r shuffling")
    parser.add_argument("-D", "--debug", action="store_true", help="enable debug messages")
    return parser


def resolve_paths(infile: str, outfile: str | None) -> tuple[Path, Path]:
    """Return the cookie path and the index path for the given arguments."""
    cookie_path = Path(infile.removesuffix(DEFAULT_INDEX_SUFFIX))
    if outfile is not None:
        return cookie_path, Path(outfile)
    return cookie_path, cookie_path.with_name(cookie_path.name + DEFAULT_INDEX_SUFFIX)


def build_mode(args: argparse.Namespace) -> BuildMode:
    if args.ordered:
        return BuildMode.ORDERED
    if args.randomized:
        return BuildMode.RANDOM
    return BuildMode.FILE_ORDER


def describe_index(path: Path, index: StrfileIndex, out: TextIO) -> None:
    """Print header fields of a decoded index."""
    header = index.header
    out.write(f"File: {path}\n")
    out.write(f"  layout: {index.layout.value}\n")
    out.write(f"  version: {header.version}\n")
    out.write(f"  count: {header.count}\n")
    out.write(f"  longest: {header.longest}\n")
    out.write(f"  shortest: {header.shortest}\n")
    out.write(f"  flags: [{', '.join(header.flag_names())}]\n")
    out.write(f"  delimiter: {header.delimiter.decode('ascii', errors='replace')!r}\n")
    out.write(f"  end offset: {index.end_offset}\n")


def summarize(path: Path, index: StrfileIndex, out: TextIO) -> None:
    """Print the build summary."""
    header = index.header
    out.write(f"'{path}' created\n")
    if header.count == 1:
        out.write("There was 1 string\n")
    else:
        out.write(f"There were {header.count} strings\n")
    out.write(f"Longest string: {header.longest} byte{'' if header.longest == 1 else 's'}\n")
    out.write(f"Shortest string: {header.shortest} byte{'' if header.shortest == 1 else 's'}\n")


def run(args: argparse.Namespace, out: TextIO) -> None:
    cookie_path, index_path = resolve_paths(args.infile, args.outfile)
    if args.show:
        describe_index(index_path, decode_index(index_path.read_bytes()), out)
        return
    if len(args.delimiter) != 1 or not args.delimiter.isascii():
        raise ValueError("Delimiter must be a single ASCII character.")
    index = build_index(
        cookie_path.read_bytes(),
        delimiter=args.delimiter.encode("ascii"),
        mode=build_mode(args),
        ignore_case=args.ignore_case,
        rotated=args.rotated,
        seed=args.seed,
        layout=IndexLayout(args.platform),
    )
    write_index_file(index_path, index)
    if not args.silent:
        summarize(index_path, index, out)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the strfile command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(debug=args.debug)
    try:
        run(args, out=sys.stdout)
    except (FormatError, TruncatedError, ValueError, OSError) as exc:
        print(f"strfile: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
