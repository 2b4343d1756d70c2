"""
Path-list synthesizer.

Lines like ``src/app/main.py`` are inserted into a trie keyed by cumulative
prefix, so ``a/b/c`` and ``a/b/d`` share the ``a`` and ``a/b`` nodes.
"""

from __future__ import annotations

from mindtree import patterns
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode
from mindtree.synthesizers.base import SynthesisContext, Synthesizer


class PathListSynthesizer(Synthesizer):
    name = "path_list"
    kinds = (FormatKind.PATH_LIST,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        roots: list[MindMapNode] = []
        by_prefix: dict[tuple[str, ...], MindMapNode] = {}
        max_depth = ctx.config.max_depth

        for line in ctx.corpus:
            segments = patterns.split_path(line.text) or [line.text]
            # Deeper segments fold into the last allowed level
            if len(segments) > max_depth:
                segments = segments[: max_depth - 1] + ["/".join(segments[max_depth - 1 :])]

            parent: MindMapNode | None = None
            for i in range(len(segments)):
                prefix = tuple(segments[: i + 1])
                node = by_prefix.get(prefix)
                if node is None:
                    node = ctx.factory.create(segments[i])
                    by_prefix[prefix] = node
                    if parent is None:
                        roots.append(node)
                    else:
                        parent.children.append(node)
                parent = node

        if not roots:
            raise SynthesisError("path_list: no paths")
        return roots
