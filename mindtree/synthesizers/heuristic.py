"""
Document-heuristic synthesizer.

For text recovered from PDF/DOCX/PPTX extraction, where headings survive
only as short lines between longer ones. Each line is scored as a title
candidate:

    length 5-50 chars                    +2
    no sentence punctuation              +2
    leading chapter/numeral token        +3
    ALL-CAPS or Title-Case run           +2
    structural keyword (any locale)      +2
    blank line before or after           +1

Lines scoring at least ``min_title_score`` are candidates; the best
``max_sections`` of them, kept in document order, become the top-level
nodes. Text between two titles becomes the first title's children, with a
short line followed by a longer one forming a (title, description)
subtopic. If no line qualifies, the body is cut into even chunks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from mindtree import patterns
from mindtree.classifier import is_title_description_pair
from mindtree.config import HeuristicConfig
from mindtree.corpus import Line
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode, NodeFactory
from mindtree.synthesizers.base import SynthesisContext, Synthesizer

logger = logging.getLogger(__name__)

TITLE_SHORTEST = 5
TITLE_LONGEST = 50


@dataclass
class TitleCandidate:
    """A line that may be a section title."""

    line: Line
    score: int
    keyword: str | None = None


def score_title(line: Line, keywords: tuple[str, ...]) -> TitleCandidate:
    """Score one line with the title rubric."""
    text = line.text
    score = 0
    if TITLE_SHORTEST <= len(text) <= TITLE_LONGEST:
        score += 2
    if not patterns.has_sentence_punctuation(text):
        score += 2
    if patterns.has_leading_numeral(text):
        score += 3
    if patterns.is_caps_or_title_case(text):
        score += 2
    keyword = patterns.find_keyword(text, keywords)
    if keyword is not None:
        score += 2
    if line.adjacent_to_blank:
        score += 1
    return TitleCandidate(line=line, score=score, keyword=keyword)


def select_titles(lines: list[Line], config: HeuristicConfig) -> list[TitleCandidate]:
    """Best-scoring candidates, capped at ``max_sections``, in document order."""
    keywords = config.all_keywords()
    candidates = [score_title(line, keywords) for line in lines]
    qualified = [c for c in candidates if c.score >= config.min_title_score]
    # Unpunctuated wrapped prose can clear the threshold; only numbered long lines stay
    qualified = [
        c
        for c in qualified
        if len(c.line.text) <= TITLE_LONGEST or patterns.has_leading_numeral(c.line.text)
    ]
    best = sorted(qualified, key=lambda c: (-c.score, c.line.position))[: config.max_sections]
    return sorted(best, key=lambda c: c.line.position)


class DocumentHeuristicSynthesizer(Synthesizer):
    name = "document_heuristic"
    kinds = (FormatKind.DOCUMENT_HEURISTIC,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        config = ctx.config.heuristic
        lines = list(ctx.corpus)
        body = lines if ctx.has_title else lines[1:]
        if not body:
            raise SynthesisError("document_heuristic: no body lines")

        root = ctx.factory.root(ctx.root_topic())
        titles = select_titles(body, config)

        if not titles:
            logger.debug("document_heuristic: no title candidates, chunking evenly")
            root.children.extend(self._even_chunks(body, ctx.factory, config))
            return [root]

        logger.debug(
            "document_heuristic: %d titles (%s)",
            len(titles),
            ", ".join(repr(t.line.text) for t in titles),
        )

        title_positions = [t.line.position for t in titles]
        by_position = {line.position: line for line in body}

        # Lines before the first title belong to the root
        leading = [line for line in body if line.position < title_positions[0]]
        root.children.extend(self._children([line.text for line in leading], ctx.factory, config))

        for i, title in enumerate(titles):
            end = title_positions[i + 1] if i + 1 < len(titles) else body[-1].position + 1
            segment = [
                by_position[p].text for p in range(title.line.position + 1, end) if p in by_position
            ]
            section = ctx.factory.create(title.line.text)
            section.children.extend(self._children(segment, ctx.factory, config))
            root.children.append(section)

        return [root]

    def _children(
        self, texts: list[str], factory: NodeFactory, config: HeuristicConfig
    ) -> list[MindMapNode]:
        """Subtopics from (title, description) pairs, points from everything else."""
        children: list[MindMapNode] = []
        i = 0
        while i < len(texts) and len(children) < config.max_children_per_section:
            text = texts[i]
            following = texts[i + 1] if i + 1 < len(texts) else None
            if following is not None and is_title_description_pair(text, following):
                subtopic = factory.create(text)
                subtopic.children.extend(
                    factory.create(point) for point in self._points(following, config)
                )
                children.append(subtopic)
                i += 2
                continue
            for point in self._points(text, config):
                if len(children) >= config.max_children_per_section:
                    break
                children.append(factory.create(point))
            i += 1
        return children

    @staticmethod
    def _points(text: str, config: HeuristicConfig) -> list[str]:
        sentences = patterns.split_sentences(text)
        return sentences[: config.max_points] or [text]

    @staticmethod
    def _even_chunks(
        lines: list[Line], factory: NodeFactory, config: HeuristicConfig
    ) -> list[MindMapNode]:
        """Split into ``min_chunks``-``max_chunks`` groups titled by their first line."""
        count = max(config.min_chunks, min(config.max_chunks, math.ceil(len(lines) / 4)))
        count = min(count, len(lines))
        size = math.ceil(len(lines) / count)

        chunks = []
        for start in range(0, len(lines), size):
            group = lines[start : start + size]
            chunk = factory.create(group[0].text)
            chunk.children.extend(factory.create(line.text) for line in group[1:])
            chunks.append(chunk)
        return chunks
