"""SubRip (.srt) subtitle decoder.

WHY: Subtitle files come from many tools and are rarely clean: mixed
encodings, byte-order-marks, CRLF line endings, broken blocks. Tools that
dump, search or re-render captions need a decoder that hands them records
one at a time and keeps going past malformed ones.

HOW: open() wraps a binary stream (or bytes, or a path) in a
SubRipParser. Iterating the parser yields SubRip records and SubRipError
values in stream order:

    with srt_decoder.open("movie.srt") as parser:
        for entry in parser:
            if isinstance(entry, srt_decoder.SubRipError):
                print(entry, file=sys.stderr)
            else:
                print(entry)

RULES:
- open() never reads anything; the first byte is read on the first next()
- Malformed records are yielded as SubRipError, never raised
- I/O errors are raised
"""

from __future__ import annotations

import builtins
import io
import os
from typing import BinaryIO, Optional, Union

from srt_decoder import config
from srt_decoder.core.encoding import TextEncoding
from srt_decoder.core.errors import ErrorKind, SubRipError
from srt_decoder.core.ir import SubRip, Timecode
from srt_decoder.core.parser import ParserState, SubRipParser

__version__ = "0.1.0"

__all__ = [
    "open",
    "ErrorKind",
    "ParserState",
    "SubRip",
    "SubRipError",
    "SubRipParser",
    "TextEncoding",
    "Timecode",
]

Source = Union[BinaryIO, bytes, bytearray, str, "os.PathLike[str]"]


def open(
    source: Source,
    strict: Optional[bool] = None,
    errors: Optional[str] = None,
) -> SubRipParser:
    """Create a parser for a SubRip byte source.

    Args:
        source: A binary readable stream, raw bytes, or a filesystem path.
            Streams passed in stay owned by the caller; bytes and paths are
            wrapped/opened here and closed once the parser is exhausted or
            closed.
        strict: Reject signed timing fields and require "-->". Defaults to
            SRT_DECODER_STRICT.
        errors: Decode error policy, "replace" or "strict". Defaults to
            SRT_DECODER_DECODE_ERRORS.

    Returns:
        A SubRipParser positioned before the first record.

    Raises:
        OSError: If a path cannot be opened.
        ValueError: If the decode error policy is unknown.
    """
    if strict is None:
        strict = config.DEFAULT_STRICT
    if errors is None:
        errors = config.decode_errors_policy()

    if isinstance(source, (bytes, bytearray)):
        return SubRipParser(io.BytesIO(source), strict=strict, errors=errors, owns_source=True)
    if isinstance(source, (str, os.PathLike)):
        stream = builtins.open(source, "rb")
        try:
            return SubRipParser(stream, strict=strict, errors=errors, owns_source=True)
        except ValueError:
            stream.close()
            raise
    return SubRipParser(source, strict=strict, errors=errors)
