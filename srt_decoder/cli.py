"""Command-line interface for the SubRip decoder.

WHY: The most common uses of the decoder are from the terminal: dump the
dialogue of a subtitle file, or check a folder of files for broken
records. The CLI wires file discovery, decoding and output formatting
behind one command.

HOW: Uses argparse to accept paths (files, directories, or "-" for
stdin), the output format, and decoding options. Directories are walked
recursively for SubRip files. Each source is decoded with
srt_decoder.open(); records go through the selected formatter to stdout,
record errors go to stderr and the pass continues.

RULES:
- Positional paths default to "-" (standard input)
- Directories: recursive, sorted, only files with SUBRIP_EXTENSIONS
- Explicit file paths are decoded whatever their extension
- When more than one file is decoded, each file's output starts with its stem
- Record errors: "Error: <source>: <error>" on stderr, never fatal
- Exit codes: 0 = success, 1 = invalid configuration, missing path or
  unreadable source
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

import srt_decoder
from srt_decoder.config import (
    DEFAULT_STRICT,
    SUBRIP_EXTENSIONS,
    decode_errors_policy,
    log_level,
)
from srt_decoder.core.encoding import DECODE_ERROR_POLICIES
from srt_decoder.core.errors import SubRipError
from srt_decoder.formatters import DEFAULT_FORMAT, FORMATTERS
from srt_decoder.formatters.base import BaseFormatter

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _iter_sources(paths: List[str]) -> Iterator[str]:
    """Expand the command-line paths into the sources to decode.

    RULES:
    - "-" is passed through unchanged (standard input)
    - Files are passed through regardless of extension
    - Directories are walked recursively, sorted, filtered by extension
    - A path that does not exist raises FileNotFoundError
    """
    for raw in paths:
        if raw == STDIN_PATH:
            yield raw
            continue

        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix.lower() in SUBRIP_EXTENSIONS:
                    yield str(child)
        elif path.is_file():
            yield raw
        else:
            raise FileNotFoundError("No such file or directory: {}".format(raw))


def _decode_source(
    source: str,
    formatter: BaseFormatter,
    strict: bool,
    errors: str,
    out: TextIO,
) -> tuple:
    """Decode one source and write its records to ``out``.

    Returns:
        Tuple of (records written, record errors reported).
    """
    label = "<stdin>" if source == STDIN_PATH else source
    counts = {"records": 0, "errors": 0}

    def report(error: SubRipError) -> None:
        counts["errors"] += 1
        _status("Error: {}: {}".format(label, error))

    stream = sys.stdin.buffer if source == STDIN_PATH else source
    with srt_decoder.open(stream, strict=strict, errors=errors) as parser:
        for record in parser.records(on_error=report):
            if counts["records"]:
                out.write(formatter.separator)
            out.write(formatter.format(record))
            counts["records"] += 1

    if counts["records"]:
        out.write("\n")
    out.flush()

    logger.info(
        "%s: %d record(s), %d error(s), encoding %s",
        label, counts["records"], counts["errors"],
        parser.encoding.value if parser.encoding else "n/a",
    )
    return counts["records"], counts["errors"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separating parser construction from main() makes the CLI testable:
    tests can inspect the parser without decoding anything.
    """
    parser = argparse.ArgumentParser(
        prog="srt_decoder",
        description="Decode SubRip (.srt) subtitle files and print their captions. "
                    "Malformed records are reported on stderr and skipped.",
    )

    parser.add_argument(
        "paths",
        nargs="*",
        default=[STDIN_PATH],
        metavar="PATH",
        help="Subtitle files or directories (standard input by default).",
    )

    parser.add_argument(
        "--format",
        dest="format_key",
        choices=sorted(FORMATTERS.keys()),
        default=DEFAULT_FORMAT,
        help="Output format (default: %(default)s).",
    )

    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_STRICT,
        help="Reject signed timecode fields and require '-->' (default: %(default)s).",
    )

    parser.add_argument(
        "--decode-errors",
        choices=DECODE_ERROR_POLICIES,
        default=None,
        help="How to handle bytes invalid in the file's encoding: 'replace' them, "
             "or report the record as 'strict' errors (default: replace).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log decoding details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = logging.DEBUG if args.verbose else log_level()
        errors = args.decode_errors or decode_errors_policy()
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    formatter = FORMATTERS[args.format_key]()

    try:
        sources = list(_iter_sources(args.paths))
    except FileNotFoundError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    total_records = 0
    total_errors = 0
    for source in sources:
        if len(sources) > 1:
            print(Path(source).stem if source != STDIN_PATH else "<stdin>", flush=True)
        try:
            records, record_errors = _decode_source(
                source, formatter, args.strict, errors, sys.stdout
            )
        except OSError as e:
            print("Error: {}".format(e), file=sys.stderr)
            sys.exit(1)
        total_records += records
        total_errors += record_errors

    if args.verbose:
        _status("Decoded {} record(s) from {} source(s), {} error(s)".format(
            total_records, len(sources), total_errors
        ))


if __name__ == "__main__":
    main()
