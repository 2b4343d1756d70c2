"""
Line corpus: the input text split into trimmed, non-empty lines.

Every classifier rule and synthesizer reads from a LineCorpus instead of
re-splitting the raw text, so indentation and blank-line adjacency are
computed once.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from mindtree.patterns import indent_width


@dataclass(frozen=True)
class Line:
    """One non-empty input line."""

    text: str  # Stripped content
    position: int  # 0-based index among non-empty lines
    line_number: int  # 0-based index in the raw text
    indent: int  # Leading whitespace width, tab = 4
    blank_before: bool = False
    blank_after: bool = False

    @property
    def adjacent_to_blank(self) -> bool:
        return self.blank_before or self.blank_after


@dataclass(frozen=True)
class LineCorpus:
    """
    Immutable view of the input as lines.

    Example:
        >>> corpus = LineCorpus.from_text("Title\\n\\n  item")
        >>> [line.indent for line in corpus]
        [0, 2]
        >>> corpus[0].blank_after
        True
    """

    raw: str
    lines: tuple[Line, ...]

    @classmethod
    def from_text(cls, text: str) -> LineCorpus:
        raw_lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        blank = [not raw.strip() for raw in raw_lines]

        lines = []
        for number, raw in enumerate(raw_lines):
            if blank[number]:
                continue
            lines.append(
                Line(
                    text=raw.strip(),
                    position=len(lines),
                    line_number=number,
                    indent=indent_width(raw),
                    blank_before=number > 0 and blank[number - 1],
                    blank_after=number + 1 < len(raw_lines) and blank[number + 1],
                )
            )
        return cls(raw=text, lines=tuple(lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def texts(self) -> list[str]:
        """Stripped text of every line, in order."""
        return [line.text for line in self.lines]

    def first_text(self, default: str = "") -> str:
        return self.lines[0].text if self.lines else default

    def indent_levels(self) -> list[int]:
        """Distinct non-zero indent widths, ascending."""
        return sorted({line.indent for line in self.lines if line.indent > 0})
