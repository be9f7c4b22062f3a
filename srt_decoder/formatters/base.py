"""Abstract base formatter for rendering caption records.

WHY: The CLI prints decoded records in more than one shape (bare text
lines, full SubRip blocks). A common interface lets it pick a formatter by
name and stream records through it without knowing the shape.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method that renders one record. ``separator`` is what
the caller writes between two consecutive records.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns text without a trailing newline
- Formatters never modify the record
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from srt_decoder.core.ir import SubRip


class BaseFormatter(ABC):
    """Abstract base for all record formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    separator: str = "\n"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, record: SubRip) -> str:
        """Render one caption record.

        Args:
            record: A well-formed record produced by the parser.

        Returns:
            The rendered text, without a trailing newline.
        """
