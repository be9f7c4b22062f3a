"""Per-record error type for the SubRip parser.

WHY: A malformed caption must not end the stream. The parser hands the
failure back to the caller as a value, so the caller needs one exception
type that says which field broke and why.

HOW: ErrorKind names the failing field. SubRipError carries the kind and
the underlying field-parse exception (also chained as __cause__).

RULES:
- str(error) is "<kind description>: <underlying message>"
- All SubRipErrors are recoverable; I/O failures are never wrapped
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Which field of a caption record failed to parse."""

    INVALID_POSITION = "invalid position"
    INVALID_TIMECODE = "invalid timecode"
    INVALID_TEXT = "invalid text"


class SubRipError(ValueError):
    """Raised (or yielded) when one caption record cannot be parsed.

    WHY: Callers filter and report record errors without caring about the
    many ways int() or a codec can fail.

    HOW: Wraps the original exception. The parser yields instances of this
    class from its iterator instead of raising them.

    RULES:
    - kind is always an ErrorKind
    - error is the underlying exception, also set as __cause__
    """

    def __init__(self, kind: ErrorKind, error: BaseException) -> None:
        self.kind = kind
        self.error = error
        super().__init__("{}: {}".format(kind.value, error))
        self.__cause__ = error
