"""SubRip rendering formatter for inspecting decoded records.

WHY: When a file decodes unexpectedly it helps to see each record the
way the parser understood it, in the same grammar the file uses.

HOW: Uses ``str(record)``: the position, the timing line re-rendered from
the parsed Timecodes, then the text lines. Records are separated by a
blank line, as in a SubRip file.

RULES:
- Timecodes are zero-padded (02:02:02,003), whatever the input padding was
- For well-formed ASCII input, the output matches the input block exactly
- Not a writer: output is not guaranteed to round-trip arbitrary bytes
"""

from __future__ import annotations

from srt_decoder.core.ir import SubRip
from srt_decoder.formatters.base import BaseFormatter


class SubRipFormatter(BaseFormatter):
    """Formatter that renders complete SubRip blocks."""

    separator = "\n\n"

    @property
    def name(self) -> str:
        return "SubRip"

    def format(self, record: SubRip) -> str:
        return str(record)
