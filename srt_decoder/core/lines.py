"""Line Reader: raw byte lines from a SubRip byte stream.

WHY: SubRip is line oriented, but the parser cannot just call readline()
and decode. The encoding is only known after looking at the first bytes,
UTF-16 terminators are two bytes wide, and files mix LF and CRLF line
endings.

HOW: LineReader detects the encoding lazily on the first read_line() call,
keeps the bytes that followed the mark in a small pending buffer, and then
reads up to each linefeed byte. For UTF-16 it keeps reading until the
linefeed byte forms a complete, aligned terminator unit. trim_newline()
strips one LF and then one CR unit.

RULES:
- read_line() returns None at end of stream and b"" for an empty line
- Detection happens once; an empty stream never runs it
- Never trims more than one LF and one CR
- Errors raised by the source (OSError) propagate unchanged
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from srt_decoder.core.encoding import (
    DEFAULT_DECODE_ERRORS,
    MAX_BOM_LENGTH,
    LossyDecoder,
    TextEncoding,
    check_decode_errors,
    detect_encoding,
)

logger = logging.getLogger(__name__)

_LINEFEED = b"\n"


def trim_newline(line: bytes, newline: bytes = b"\n", carriage_return: bytes = b"\r") -> bytes:
    """Strip one trailing newline unit and then, if present, one CR unit.

    A carriage return is only removed when it precedes a newline, so a
    stray CR at the end of an unterminated last line is kept. Lines whose
    length is not a whole number of code units are returned untouched.
    """
    width = len(newline)
    if len(line) % width:
        return line
    if line.endswith(newline):
        line = line[:-width]
        if line.endswith(carriage_return):
            line = line[:-width]
    return line


class LineReader:
    """Pull one line at a time from a binary stream.

    WHY: The Record Parser needs an explicit distinction between "no more
    input" and "blank separator line", plus access to the detected
    encoding for decoding.

    HOW: Wraps any object with read() and readline() returning bytes.
    The first read_line() call reads up to three bytes to look for a
    byte-order-mark; bytes that are not part of a mark are replayed
    before anything else is read from the source.

    RULES:
    - An unknown decode error policy is rejected on construction
    - encoding is None until the first non-empty read
    - decode() is only valid after a line has been read
    """

    def __init__(self, source: BinaryIO, errors: str = DEFAULT_DECODE_ERRORS) -> None:
        self._source = source
        self._errors = check_decode_errors(errors)
        self._pending = b""
        self._decoder: Optional[LossyDecoder] = None

    @property
    def encoding(self) -> Optional[TextEncoding]:
        return self._decoder.encoding if self._decoder is not None else None

    def read_line(self) -> Optional[bytes]:
        """Read the next line without its terminator.

        Returns:
            The raw line bytes, or None once the stream is exhausted.
        """
        if self._decoder is None and not self._detect():
            return None

        raw = self._read_raw_line()
        if not raw:
            return None

        encoding = self._decoder.encoding
        return trim_newline(raw, encoding.newline, encoding.carriage_return)

    def decode(self, raw: bytes) -> str:
        """Decode a line returned by read_line() with the stream's decoder."""
        if self._decoder is None:
            raise RuntimeError("decode() called before any line was read")
        return self._decoder.decode(raw)

    def _detect(self) -> bool:
        head = self._source.read(MAX_BOM_LENGTH)
        if not head:
            return False

        encoding, skip = detect_encoding(head)
        self._pending = head[skip:]
        self._decoder = LossyDecoder(encoding, self._errors)
        logger.debug("Detected %s (skipping %d mark bytes)", encoding.value, skip)
        return True

    def _read_raw_line(self) -> bytes:
        width = self._decoder.encoding.unit_width
        buffer = bytearray()

        while True:
            chunk = self._read_chunk()
            if not chunk:
                return bytes(buffer)
            buffer += chunk
            if not buffer.endswith(_LINEFEED):
                # Unterminated last line
                return bytes(buffer)
            if width == 1 or self._completes_terminator(buffer):
                return bytes(buffer)

    def _completes_terminator(self, buffer: bytearray) -> bool:
        """Check whether the linefeed byte just read ends a UTF-16 line.

        Little-endian: the linefeed must be the low byte of a unit, and
        its paired 0x00 byte is consumed here. Big-endian: the linefeed
        must be the second byte of a unit whose first byte is 0x00.
        """
        if self._decoder.encoding is TextEncoding.UTF16_LE:
            if len(buffer) % 2 == 0:
                return False
            pad = self._read_byte()
            buffer += pad
            return pad == b"\x00" or not pad
        return len(buffer) % 2 == 0 and buffer[-2] == 0

    def _read_chunk(self) -> bytes:
        if self._pending:
            index = self._pending.find(_LINEFEED)
            if index >= 0:
                chunk = self._pending[: index + 1]
                self._pending = self._pending[index + 1:]
                return chunk
            chunk, self._pending = self._pending, b""
            return chunk + self._source.readline()
        return self._source.readline()

    def _read_byte(self) -> bytes:
        if self._pending:
            byte, self._pending = self._pending[:1], self._pending[1:]
            return byte
        return self._source.read(1)
