"""
Markdown-heading synthesizer.

Headings open levels, everything else hangs off the nearest heading:
list items nest one level below it (deeper with indentation), prose lines
become leaves. Fenced code blocks are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mindtree import patterns
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode
from mindtree.synthesizers.base import SynthesisContext, Synthesizer

HORIZONTAL_RULE_RE = re.compile(r"^([-*_])(\s*\1){2,}$")


@dataclass
class _Open:
    node: MindMapNode
    level: int
    is_heading: bool


class MarkdownSynthesizer(Synthesizer):
    """
    Stack of ``(node, level)``.

    On a heading of level L, pop open list items, then pop while the top
    level is >= L, attach to the new top (or as a root), push. A list item sits at
    ``heading_level + 1 + indent // 2``.
    """

    name = "markdown"
    kinds = (FormatKind.MARKDOWN_HEADING,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        roots: list[MindMapNode] = []
        stack: list[_Open] = []
        in_fence = False
        max_nesting = ctx.config.max_depth - 1

        for line in ctx.corpus:
            text = line.text
            if patterns.is_fence(text):
                in_fence = not in_fence
                continue
            if in_fence or HORIZONTAL_RULE_RE.match(text):
                continue

            heading = patterns.parse_heading(text)
            if heading is not None:
                level, title = heading
                node = ctx.factory.create(patterns.strip_inline_markup(title))
                # A heading closes any open list before levels are compared
                while stack and not stack[-1].is_heading:
                    stack.pop()
                while stack and stack[-1].level >= level:
                    stack.pop()
                self._attach(node, stack, roots)
                stack.append(_Open(node, level, is_heading=True))
                continue

            heading_level = self._heading_level(stack)
            content = self._leaf_text(text)
            if not content:
                continue
            node = ctx.factory.create(content)

            if patterns.is_bullet(text) or patterns.is_numbered(text):
                level = heading_level + 1 + min(line.indent // 2, max_nesting)
                while stack and not stack[-1].is_heading and stack[-1].level >= level:
                    stack.pop()
                self._attach(node, stack, roots)
                stack.append(_Open(node, level, is_heading=False))
            else:
                # Prose ends any open list
                while stack and not stack[-1].is_heading:
                    stack.pop()
                self._attach(node, stack, roots)

        if not roots:
            raise SynthesisError("markdown: no headings or content lines")
        return roots

    @staticmethod
    def _attach(node: MindMapNode, stack: list[_Open], roots: list[MindMapNode]) -> None:
        if stack:
            stack[-1].node.children.append(node)
        else:
            roots.append(node)

    @staticmethod
    def _heading_level(stack: list[_Open]) -> int:
        for entry in reversed(stack):
            if entry.is_heading:
                return entry.level
        return 0

    @staticmethod
    def _leaf_text(text: str) -> str:
        if text.startswith(">"):
            text = text.lstrip("> ")
        return patterns.strip_inline_markup(patterns.strip_list_marker(text))
