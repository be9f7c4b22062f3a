"""Field parsers for the three kinds of SubRip line.

WHY: Each line of a caption block has exactly one meaning (position,
timing, or text). Keeping the conversions pure makes every edge case
testable without building a stream.

HOW: Each parser takes one decoded line. An empty line returns None,
which the Record Parser reads as "end of this part". Anything that
cannot be converted raises ValueError.

RULES:
- Position: ASCII decimal digits with an optional leading '+'
- Timing: split on ':', ',' and ' '; tokens 0-3 are the start, token 4 the
  arrow, tokens 5-8 the end; later tokens (display coordinates) are ignored
- Timing fields accept an optional sign and have no upper bound unless
  strict=True, which rejects signs and requires the "-->" arrow
- Text: any non-empty line
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from srt_decoder.core.ir import Timecode

_POSITION_RE = re.compile(r"\+?[0-9]+")
_FIELD_RE = re.compile(r"[+-]?[0-9]+")
_STRICT_FIELD_RE = re.compile(r"[0-9]+")
_DELIMITERS_RE = re.compile(r"[:, ]")

ARROW = "-->"
_WRONG_FORMAT = "wrong timecode format"


def parse_position(line: str) -> Optional[int]:
    """Parse the position line of a caption block.

    Returns:
        The position, or None for an empty line (no more records).

    Raises:
        ValueError: If the line is not a non-negative decimal integer.
    """
    if not line:
        return None
    if not _POSITION_RE.fullmatch(line):
        raise ValueError("invalid digit found in string: {!r}".format(line))
    return int(line)


def _parse_field(token: str, strict: bool) -> int:
    pattern = _STRICT_FIELD_RE if strict else _FIELD_RE
    if not pattern.fullmatch(token):
        if not token:
            raise ValueError("cannot parse integer from empty string")
        raise ValueError("invalid digit found in string: {!r}".format(token))
    return int(token)


def _parse_timestamp(tokens, offset: int, strict: bool) -> Timecode:
    try:
        hours, minutes, seconds, milliseconds = tokens[offset:offset + 4]
    except ValueError:
        raise ValueError(_WRONG_FORMAT) from None
    return Timecode(
        hours=_parse_field(hours, strict),
        minutes=_parse_field(minutes, strict),
        seconds=_parse_field(seconds, strict),
        milliseconds=_parse_field(milliseconds, strict),
    )


def parse_timecode(line: str, strict: bool = False) -> Optional[Tuple[Timecode, Timecode]]:
    """Parse a ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` timing line.

    Args:
        line: The decoded timing line.
        strict: Reject signed fields and require the "-->" arrow.

    Returns:
        (start, end) Timecodes, or None for an empty line.

    Raises:
        ValueError: If a field is missing or not numeric.
    """
    if not line:
        return None

    tokens = _DELIMITERS_RE.split(line)
    start = _parse_timestamp(tokens, 0, strict)
    if len(tokens) < 9:
        raise ValueError(_WRONG_FORMAT)
    if strict and tokens[4] != ARROW:
        raise ValueError("expected {!r}, found {!r}".format(ARROW, tokens[4]))
    end = _parse_timestamp(tokens, 5, strict)
    return start, end


def parse_text(line: str) -> Optional[str]:
    """Return the line, or None when it is empty (end of the text block)."""
    return line if line else None
