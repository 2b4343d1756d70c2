"""
Stack-by-depth synthesizers.

build_by_depth() is the shared primitive: given ``(depth, topic)`` items in
document order, each item becomes a child of the nearest preceding item
with a smaller depth. Indented text, bullet and numbered lists, outlines
and org-mode files differ only in how they compute depth.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mindtree import patterns
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode, NodeFactory
from mindtree.synthesizers.base import SynthesisContext, Synthesizer

logger = logging.getLogger(__name__)

OUTLINE_DEPTHS = {"roman": 0, "upper": 1, "arabic": 2, "lower": 3}


def build_by_depth(
    items: Iterable[tuple[int, str]],
    factory: NodeFactory,
    max_depth: int = 6,
) -> list[MindMapNode]:
    """
    Build a forest from ``(depth, topic)`` items.

    Pops the stack while the top is at the same depth or deeper, then
    attaches the new node to the new top (or as a root). Depths are capped
    at ``max_depth - 1`` so malformed input cannot produce a pathological
    tree.

    Example:
        >>> roots = build_by_depth([(0, "A"), (1, "B"), (2, "C"), (1, "D")], NodeFactory())
        >>> [child.topic for child in roots[0].children]
        ['B', 'D']
    """
    roots: list[MindMapNode] = []
    stack: list[tuple[MindMapNode, int]] = []

    for depth, topic in items:
        depth = max(0, min(depth, max_depth - 1))
        node = factory.create(topic)
        while stack and stack[-1][1] >= depth:
            stack.pop()
        if stack:
            stack[-1][0].children.append(node)
        else:
            roots.append(node)
        stack.append((node, depth))

    return roots


def _require(roots: list[MindMapNode], name: str) -> list[MindMapNode]:
    if not roots:
        raise SynthesisError(f"{name}: no lines to build from")
    return roots


class IndentedSynthesizer(Synthesizer):
    """
    Depth from indentation.

    Each distinct indent width is one level, so two-space and four-space
    indentation produce the same shape.
    """

    name = "indented"
    kinds = (FormatKind.INDENTED,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        levels = sorted({line.indent for line in ctx.corpus})
        rank = {width: i for i, width in enumerate(levels)}
        items = [(rank[line.indent], line.text) for line in ctx.corpus]
        return _require(build_by_depth(items, ctx.factory, ctx.config.max_depth), self.name)


class ListSynthesizer(Synthesizer):
    """Bullet and numbered lists: strip the marker, depth is ``indent // 2``."""

    name = "list"
    kinds = (FormatKind.BULLET_LIST, FormatKind.NUMBERED_LIST)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        items = [
            (line.indent // 2, patterns.strip_list_marker(line.text)) for line in ctx.corpus
        ]
        return _require(build_by_depth(items, ctx.factory, ctx.config.max_depth), self.name)


class OutlineSynthesizer(Synthesizer):
    """
    Classic outlines: ``I.`` / ``A.`` / ``1.`` / ``a)`` / ``1.2.3``.

    Depth comes from the marker kind, not from indentation. Lines without a
    marker are body text of the last marker line.
    """

    name = "outline"
    kinds = (FormatKind.OUTLINE,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        items = []
        last_depth = -1
        for line in ctx.corpus:
            depth = self._marker_depth(line.text)
            if depth is None:
                items.append((last_depth + 1, line.text))
                continue
            items.append((depth, line.text))
            last_depth = depth
        return _require(build_by_depth(items, ctx.factory, ctx.config.max_depth), self.name)

    @staticmethod
    def _marker_depth(text: str) -> int | None:
        marker = patterns.parse_outline_marker(text)
        if marker is not None:
            kind, depth, _rest = marker
            return depth if kind == "dotted" else OUTLINE_DEPTHS[kind]
        if patterns.is_numbered(text):
            return OUTLINE_DEPTHS["arabic"]
        return None


class OrgModeSynthesizer(Synthesizer):
    """Org-mode: star count is depth, body lines are leaves of the current heading."""

    name = "org_mode"
    kinds = (FormatKind.ORG_MODE,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        items = []
        current = -1
        for line in ctx.corpus:
            if line.text.startswith("#+"):
                # In-buffer settings such as #+TITLE are not content
                continue
            heading = patterns.parse_org(line.text)
            if heading is None:
                items.append((current + 1, patterns.strip_list_marker(line.text)))
                continue
            level, title = heading
            current = level - 1
            items.append((current, title))
        return _require(build_by_depth(items, ctx.factory, ctx.config.max_depth), self.name)
