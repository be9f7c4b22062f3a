"""Plain text formatter: caption text only.

WHY: The most common use of a decoded subtitle file is its dialogue as
plain text, for reading, grepping or feeding other tools. Positions and
timecodes are noise there.

HOW: Emits the record's decoded text lines, one per output line. Records
follow each other directly with no blank line in between.

RULES:
- Text lines are decoded with replacement of invalid bytes
- No position, no timing line, no blank separator
"""

from __future__ import annotations

from srt_decoder.core.ir import SubRip
from srt_decoder.formatters.base import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """Formatter that prints only the caption text lines."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, record: SubRip) -> str:
        return "\n".join(record.lines)
