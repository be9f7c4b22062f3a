"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used as --format values)
- Values are BaseFormatter subclasses (not instances)
- DEFAULT_FORMAT must be a key of FORMATTERS
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from srt_decoder.formatters.plain_text import PlainTextFormatter
from srt_decoder.formatters.subrip import SubRipFormatter

if TYPE_CHECKING:
    from srt_decoder.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "subrip": SubRipFormatter,
}

DEFAULT_FORMAT = "plain_text"
