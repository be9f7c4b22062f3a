"""Record Parser state machine and the streaming iterator around it.

WHY: Real caption files contain broken blocks: a position with a stray
letter, a truncated timing line, a block with no text. A parser that stops
at the first problem loses the rest of the file. Every record is parsed
independently, and a failure costs only the block it occurred in.

HOW: SubRipParser walks an explicit ParserState machine:

    AWAIT_POSITION -> AWAIT_TIMECODE -> ACCUMULATE_TEXT -> DONE
          ^                 |                 |              |
          |                 +--> RESYNC <-----+              |
          +-----------------------+--------------------------+

Each next() call runs transitions until it has one record or one error to
hand back, or the stream is exhausted. A failure returns a SubRipError and
moves to RESYNC; the next call first discards lines up to the blank
separator and then starts over at AWAIT_POSITION.

RULES:
- Blank lines before a position are skipped; end of stream there is a
  clean end, not an error
- A blank or missing timing line is an INVALID_TIMECODE error
- A block with zero text lines is dropped silently
- Exactly one SubRipError per failed record; iteration continues after it
- OSError from the source propagates and ends the iteration
- Nothing is read ahead of the record being returned
"""

from __future__ import annotations

import enum
import logging
from typing import BinaryIO, Callable, Iterator, List, Optional, Union

from srt_decoder.core.encoding import DEFAULT_DECODE_ERRORS, TextEncoding
from srt_decoder.core.errors import ErrorKind, SubRipError
from srt_decoder.core.fields import parse_position, parse_text, parse_timecode
from srt_decoder.core.ir import SubRip, Timecode
from srt_decoder.core.lines import LineReader

logger = logging.getLogger(__name__)

Entry = Union[SubRip, SubRipError]


class ParserState(enum.Enum):
    """Where the Record Parser is within the current caption block."""

    AWAIT_POSITION = "await_position"
    AWAIT_TIMECODE = "await_timecode"
    ACCUMULATE_TEXT = "accumulate_text"
    DONE = "done"
    RESYNC = "resync"
    EXHAUSTED = "exhausted"


class SubRipParser:
    """Lazy, single-pass iterator over the caption records of a stream.

    WHY: Collaborators (text dumps, search tools) process files of any
    size from files, pipes or memory. They need records one at a time and
    need malformed records reported without losing the rest.

    HOW: Iterating yields SubRip records and SubRipError values in stream
    order. records() is a convenience that yields only records and passes
    errors to a callback.

    RULES:
    - Not restartable: the byte source is consumed
    - Single owner; not safe to share between threads
    - Reaching the end of the stream, an I/O error, close() or leaving a
      ``with`` block releases the source
    - The source is only closed when the parser owns it
    """

    def __init__(
        self,
        source: BinaryIO,
        strict: bool = False,
        errors: str = DEFAULT_DECODE_ERRORS,
        owns_source: bool = False,
    ) -> None:
        self._source: Optional[BinaryIO] = source
        self._reader: Optional[LineReader] = LineReader(source, errors=errors)
        self._owns_source = owns_source
        self._encoding: Optional[TextEncoding] = None
        self.strict = strict

        self._state = ParserState.AWAIT_POSITION
        self._position: Optional[int] = None
        self._start: Optional[Timecode] = None
        self._end: Optional[Timecode] = None
        self._record: Optional[SubRip] = None

        self._handlers = {
            ParserState.AWAIT_POSITION: self._await_position,
            ParserState.AWAIT_TIMECODE: self._await_timecode,
            ParserState.ACCUMULATE_TEXT: self._accumulate_text,
            ParserState.DONE: self._done,
            ParserState.RESYNC: self._resync,
        }

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def encoding(self) -> Optional[TextEncoding]:
        """The detected encoding, or None before the first byte was read."""
        if self._reader is not None:
            self._encoding = self._reader.encoding
        return self._encoding

    def parse_next(self) -> Optional[Entry]:
        """Advance by exactly one record or error.

        Returns:
            The next SubRip or SubRipError, or None at end of stream.

        Raises:
            OSError: If reading the source fails. The parser is exhausted
                afterwards.
        """
        try:
            while self._state is not ParserState.EXHAUSTED:
                entry = self._handlers[self._state]()
                if entry is not None:
                    return entry
        except OSError:
            self.close()
            raise
        self.close()
        return None

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        entry = self.parse_next()
        if entry is None:
            raise StopIteration
        return entry

    def records(self, on_error: Optional[Callable[[SubRipError], None]] = None) -> Iterator[SubRip]:
        """Yield only well-formed records.

        Args:
            on_error: Optional callback, called with each SubRipError in
                stream order. Errors are dropped when no callback is given.
        """
        for entry in self:
            if isinstance(entry, SubRipError):
                if on_error is not None:
                    on_error(entry)
            else:
                yield entry

    def close(self) -> None:
        self._state = ParserState.EXHAUSTED
        if self._owns_source and self._source is not None:
            self._source.close()
        if self._reader is not None:
            self._encoding = self._reader.encoding
        self._source = None
        self._reader = None

    def __enter__(self) -> SubRipParser:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State handlers: each returns an entry to hand back, or None to keep
    # running the machine.
    # ------------------------------------------------------------------

    def _await_position(self) -> Optional[Entry]:
        line = self._reader.read_line()
        while line == b"":
            line = self._reader.read_line()
        if line is None:
            self._state = ParserState.EXHAUSTED
            return None

        try:
            self._position = parse_position(self._reader.decode(line))
        except ValueError as exc:
            return self._fail(ErrorKind.INVALID_POSITION, exc)

        self._state = ParserState.AWAIT_TIMECODE
        return None

    def _await_timecode(self) -> Optional[Entry]:
        line = self._reader.read_line()
        if line is None:
            return self._fail(ErrorKind.INVALID_TIMECODE, ValueError("unexpected end of stream"))

        try:
            timecode = parse_timecode(self._reader.decode(line), strict=self.strict)
        except ValueError as exc:
            return self._fail(ErrorKind.INVALID_TIMECODE, exc)

        if timecode is None:
            # The blank line already is the separator, nothing to skip
            return self._fail(
                ErrorKind.INVALID_TIMECODE,
                ValueError("wrong timecode format"),
                resync=False,
            )

        self._start, self._end = timecode
        self._state = ParserState.ACCUMULATE_TEXT
        return None

    def _accumulate_text(self) -> Optional[Entry]:
        text: List[bytes] = []
        while True:
            line = self._reader.read_line()
            if not line:
                break
            try:
                parse_text(self._reader.decode(line))
            except ValueError as exc:
                return self._fail(ErrorKind.INVALID_TEXT, exc)
            text.append(line)

        if not text:
            # Not an end of stream: later blocks are still decoded
            logger.debug("Dropping record %d: no text lines", self._position)
            self._state = ParserState.AWAIT_POSITION
            return None

        self._record = SubRip(
            position=self._position,
            start=self._start,
            end=self._end,
            text=tuple(text),
            encoding=self._reader.encoding,
        )
        self._state = ParserState.DONE
        return None

    def _done(self) -> Entry:
        record, self._record = self._record, None
        self._state = ParserState.AWAIT_POSITION
        return record

    def _resync(self) -> None:
        skipped = 0
        line = self._reader.read_line()
        while line:
            skipped += 1
            line = self._reader.read_line()

        logger.debug("Discarded %d line(s) of a malformed record", skipped)
        self._state = ParserState.AWAIT_POSITION if line is not None else ParserState.EXHAUSTED
        return None

    def _fail(self, kind: ErrorKind, exc: Exception, resync: bool = True) -> SubRipError:
        logger.debug("Malformed record (position %s): %s: %s", self._position, kind.value, exc)
        self._position = self._start = self._end = None
        self._state = ParserState.RESYNC if resync else ParserState.AWAIT_POSITION
        return SubRipError(kind, exc)
