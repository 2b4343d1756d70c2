"""
Chapter + section synthesizer ("smart outline").

For documents numbered like::

    Project Report
    第一章 Introduction
    1.1 Background
    - scope
    第二章 Design
    2.1 Architecture

Chapters hang off the first line, sections find their chapter by numeral
(``第二章``, ``Chapter 2`` and ``Chapter II`` all match ``2.x``), list items
attach to the deepest node open under the current chapter. Sections whose
chapter never appears attach to the root instead of failing, which is also
where a first line like ``第一章 总览`` collects its ``1.x`` sections.
"""

from __future__ import annotations

import logging

from mindtree import patterns
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode
from mindtree.synthesizers.base import SynthesisContext, Synthesizer

logger = logging.getLogger(__name__)


class ChapterSectionSynthesizer(Synthesizer):
    """
    Smart-outline builder.

    Args:
        permissive: Mixed-format variant. ``N.M.P`` nests under the open
            ``N.M`` section.
            When None, follows ``ctx.score.mixed_chapters``.
    """

    name = "chapter_section"
    kinds = (FormatKind.CHAPTER_SECTION,)

    def __init__(self, permissive: bool | None = None):
        self.permissive = permissive

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        lines = ctx.corpus.texts
        if len(lines) < 2:
            raise SynthesisError("chapter_section: need a title line and content")

        permissive = self.permissive
        if permissive is None:
            permissive = bool(ctx.score and ctx.score.mixed_chapters)

        root = ctx.factory.root(lines[0])

        chapters: list[tuple[int | None, MindMapNode]] = []
        sections: list[tuple[tuple[int, ...], MindMapNode]] = []
        current_chapter: MindMapNode | None = None
        current_section: MindMapNode | None = None
        current_subsection: MindMapNode | None = None

        for text in lines[1:]:
            chapter = patterns.parse_chapter(text)
            if chapter is not None:
                current_chapter = ctx.factory.create(text)
                root.children.append(current_chapter)
                chapters.append((chapter[0], current_chapter))
                current_section = None
                current_subsection = None
                continue

            section = patterns.parse_section(text)
            if section is not None:
                numbers, _title = section
                node = ctx.factory.create(text)
                if permissive and len(numbers) >= 3 and current_section is not None:
                    parent = self._find_section(sections, numbers[:-1]) or current_section
                    parent.children.append(node)
                    current_subsection = node
                else:
                    parent = self._chapter_for(numbers[0], chapters, root)
                    parent.children.append(node)
                    current_section = node
                    current_subsection = None
                sections.append((numbers, node))
                continue

            # Sections of an earlier chapter are closed once a chapter opens
            deepest = current_subsection or current_section or current_chapter or root
            item = self._list_item(text)
            deepest.children.append(ctx.factory.create(text if item is None else item))

        logger.debug(
            "chapter_section: %d chapters, %d sections (permissive=%s)",
            len(chapters),
            len(sections),
            permissive,
        )
        return [root]

    @staticmethod
    def _chapter_for(
        number: int,
        chapters: list[tuple[int | None, MindMapNode]],
        root: MindMapNode,
    ) -> MindMapNode:
        """Most recent chapter numbered ``number``, else the root."""
        for chapter_number, node in reversed(chapters):
            if chapter_number == number:
                return node
        return root

    @staticmethod
    def _find_section(
        sections: list[tuple[tuple[int, ...], MindMapNode]], numbers: tuple[int, ...]
    ) -> MindMapNode | None:
        for section_numbers, node in reversed(sections):
            if section_numbers == numbers:
                return node
        return None

    @staticmethod
    def _list_item(text: str) -> str | None:
        bullet = patterns.parse_bullet(text)
        if bullet is not None:
            return bullet
        numbered = patterns.parse_numbered(text)
        if numbered is not None:
            return numbered[1]
        return None
