"""Byte-order-mark detection and the lossy line decoder.

WHY: SubRip files in the wild arrive as UTF-8 with or without a BOM, and
as UTF-16 from Windows editors. The parser must pick the right codec from
the first bytes of the stream and then decode every line without ever
failing on a stray invalid byte.

HOW: detect_encoding() matches the leading bytes against the three known
marks and returns the encoding plus how many bytes to skip. LossyDecoder
wraps the codec's incremental decoder and decodes one complete line per
call.

RULES:
- Recognized marks: UTF-8 (EF BB BF), UTF-16BE (FE FF), UTF-16LE (FF FE)
- No mark means UTF-8 with nothing skipped; the bytes are ordinary content
- Detection runs once per stream and is never repeated mid-stream
- Default decode policy is "replace": invalid sequences become U+FFFD
"""

from __future__ import annotations

import codecs
import enum
from typing import Tuple

DEFAULT_DECODE_ERRORS = "replace"
DECODE_ERROR_POLICIES = ("replace", "strict")

# Longest mark we recognize; the Line Reader reads this many bytes up front.
MAX_BOM_LENGTH = len(codecs.BOM_UTF8)


class TextEncoding(str, enum.Enum):
    """Text encodings the decoder can select from a byte-order-mark.

    Values are Python codec names, so members can be passed to codecs
    functions directly.
    """

    UTF8 = "utf-8"
    UTF16_BE = "utf-16-be"
    UTF16_LE = "utf-16-le"

    @property
    def unit_width(self) -> int:
        """Width in bytes of one code unit (1 for UTF-8, 2 for UTF-16)."""
        return 1 if self is TextEncoding.UTF8 else 2

    @property
    def newline(self) -> bytes:
        return "\n".encode(self.value)

    @property
    def carriage_return(self) -> bytes:
        return "\r".encode(self.value)


_MARKS = (
    (codecs.BOM_UTF8, TextEncoding.UTF8),
    (codecs.BOM_UTF16_BE, TextEncoding.UTF16_BE),
    (codecs.BOM_UTF16_LE, TextEncoding.UTF16_LE),
)


def detect_encoding(head: bytes) -> Tuple[TextEncoding, int]:
    """Select an encoding from the leading bytes of a stream.

    Args:
        head: The first bytes of the stream (up to MAX_BOM_LENGTH).

    Returns:
        Tuple of (encoding, number of leading bytes that form the mark).
    """
    for mark, encoding in _MARKS:
        if head.startswith(mark):
            return encoding, len(mark)
    return TextEncoding.UTF8, 0


def check_decode_errors(errors: str) -> str:
    """Return ``errors`` unchanged, or raise ValueError if it is not a known policy."""
    if errors not in DECODE_ERROR_POLICIES:
        raise ValueError(
            "Unknown decode error policy '{}'. Available: {}".format(
                errors, ", ".join(DECODE_ERROR_POLICIES)
            )
        )
    return errors


class LossyDecoder:
    """Decode complete lines in one encoding, best effort by default.

    WHY: Caption text is frequently mis-encoded (Latin-1 saved as UTF-8,
    truncated multibyte sequences). One bad byte must not cost the caller
    the whole record, so decoding replaces rather than fails.

    HOW: Wraps ``codecs.getincrementaldecoder(encoding)``. Each call feeds
    one complete line with ``final=True`` and resets the decoder, so no
    partial sequence leaks from one line into the next.

    RULES:
    - errors="replace" (default): never raises; invalid input becomes U+FFFD
    - errors="strict": raises UnicodeDecodeError on invalid input
    - A dangling half code unit at the end of a UTF-16 line is invalid input
    """

    def __init__(self, encoding: TextEncoding, errors: str = DEFAULT_DECODE_ERRORS) -> None:
        self.encoding = encoding
        self.errors = check_decode_errors(errors)
        self._decoder = codecs.getincrementaldecoder(encoding.value)(errors=errors)

    def decode(self, raw: bytes) -> str:
        try:
            return self._decoder.decode(raw, final=True)
        finally:
            self._decoder.reset()

    def __repr__(self) -> str:
        return "LossyDecoder({!r}, errors={!r})".format(self.encoding.value, self.errors)
