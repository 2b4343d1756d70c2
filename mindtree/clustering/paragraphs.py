"""Paragraph segmentation for semantic clustering."""

from __future__ import annotations

import re

BLANK_LINE_RE = re.compile(r"\n\s*\n")


def split_paragraphs(
    text: str,
    min_length: int = 30,
    max_paragraphs: int = 200,
) -> list[str]:
    """
    Split text into paragraphs worth embedding.

    Paragraphs are blank-line delimited. When that yields fewer than two
    (text extracted from PDFs often has no blank lines) each line is a
    paragraph instead. Paragraphs shorter than ``min_length`` are dropped
    and at most ``max_paragraphs`` are kept.

    Args:
        text: Raw input text.
        min_length: Minimum paragraph length in characters.
        max_paragraphs: Cap on the number of paragraphs returned.

    Returns:
        Paragraphs in document order, inner whitespace collapsed.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    blocks = [block.strip() for block in BLANK_LINE_RE.split(normalized)]
    blocks = [block for block in blocks if block]
    if len(blocks) < 2:
        blocks = [line.strip() for line in normalized.split("\n") if line.strip()]

    paragraphs = [" ".join(block.split()) for block in blocks]
    paragraphs = [p for p in paragraphs if len(p) >= min_length]
    return paragraphs[:max_paragraphs]
