"""Plain chunking: consecutive lines grouped under synthetic ``Part N`` nodes."""

from __future__ import annotations

from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode
from mindtree.synthesizers.base import SynthesisContext, Synthesizer


class PlainSynthesizer(Synthesizer):
    name = "plain"
    kinds = (FormatKind.PLAIN,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        lines = ctx.corpus.texts
        # Without a title hint the first line is the title
        body = lines if ctx.has_title else lines[1:]
        if not body:
            raise SynthesisError("plain: nothing to chunk")

        root = ctx.factory.root(ctx.root_topic())
        size = ctx.config.plain_group_size
        for part, start in enumerate(range(0, len(body), size), start=1):
            group = body[start : start + size]
            part_node = ctx.factory.create(f"Part {part}")
            part_node.children.extend(ctx.factory.create(text) for text in group)
            root.children.append(part_node)
        return [root]
