"""Caption record dataclasses produced by the SubRip parser.

WHY: Every consumer (text dumps, pattern search, re-rendering) needs the
same three things from a caption: its position, its display interval and
its text lines. A small immutable representation decouples those
consumers from parsing.

HOW: Two frozen dataclasses:
  Timecode: hours, minutes, seconds, milliseconds of one timestamp
  SubRip:   one caption record (position, start, end, raw text lines)

RULES:
- Records are immutable; text is a tuple of raw bytes in the source encoding
- Text lines never contain the byte-order-mark or line terminators
- start <= end is not checked; negative fields are representable
- str(record) renders the SubRip block without a trailing blank line
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from srt_decoder.core.encoding import LossyDecoder, TextEncoding


@dataclass(frozen=True)
class Timecode:
    """A playback timestamp as written in a SubRip timing line."""

    hours: int
    minutes: int
    seconds: int
    milliseconds: int

    def total_milliseconds(self) -> int:
        """Collapse the four fields into a single millisecond offset."""
        return ((self.hours * 60 + self.minutes) * 60 + self.seconds) * 1000 + self.milliseconds

    def __str__(self) -> str:
        return "{:02}:{:02}:{:02},{:03}".format(
            self.hours, self.minutes, self.seconds, self.milliseconds
        )


@dataclass(frozen=True)
class SubRip:
    """One caption record from a SubRip (.srt) file.

    WHY: Text is kept as raw bytes because caption files routinely contain
    bytes that are invalid in their own encoding. Consumers that only need
    readable text use ``lines``; consumers that need the exact input keep
    working with ``text``.

    HOW: Built once by the Record Parser from a position line, a timing
    line and one or more text lines.

    RULES:
    - position: the number from the first line; not unique, not contiguous
    - start / end: the two halves of the timing line
    - text: at least one line, raw bytes without terminators
    - encoding: the stream's detected encoding, used to decode ``text``
    """

    position: int
    start: Timecode
    end: Timecode
    text: Tuple[bytes, ...]
    encoding: TextEncoding = field(default=TextEncoding.UTF8)

    @property
    def lines(self) -> Tuple[str, ...]:
        """Text lines decoded with replacement of invalid sequences."""
        decoder = LossyDecoder(self.encoding)
        return tuple(decoder.decode(line) for line in self.text)

    def __str__(self) -> str:
        return "{}\n{} --> {}\n{}".format(
            self.position, self.start, self.end, "\n".join(self.lines)
        )
