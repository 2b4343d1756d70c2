"""
Cascading synthesis.

Runs an explicit, ordered list of strategies and returns the first tree the
validator accepts:

1. Every classifier candidate, most specific first
2. If the text looked like an extracted document: indented, then bullet list
3. Semantic clustering (when an embedding provider is configured and
   ``prefer_semantic`` is set)
4. Plain chunking into ``Part N`` groups
5. Semantic clustering (if not tried in step 3)
6. A single-node tree, which cannot fail

A strategy that raises is logged and treated as a rejection, so one
malformed input never stops the cascade.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from mindtree import patterns
from mindtree.classifier import classify_with_score
from mindtree.clustering.pipeline import SemanticClusterer
from mindtree.clustering.providers import EmbeddingProvider, Summarizer
from mindtree.config import SynthesisConfig
from mindtree.corpus import LineCorpus
from mindtree.models import FormatKind, MindMap, MindMapNode, NodeFactory
from mindtree.synthesizers import Synthesizer, default_synthesizers
from mindtree.synthesizers.base import SynthesisContext
from mindtree.validators import TreeValidator, ValidationIssue, default_rules

logger = logging.getLogger(__name__)

EMPTY_TOPIC = "empty"
SEMANTIC = "semantic"
MINIMAL = "minimal"


@dataclass
class Strategy:
    """One step of the cascade."""

    name: str
    kind: FormatKind  # Kind the validator judges the tree as
    run: Callable[[SynthesisContext], list[MindMapNode]]


class CascadingSynthesizer:
    """Orchestrates tree synthesis with cascading fallback.

    Usage:
        synthesizer = CascadingSynthesizer()
        mindmap = synthesizer.synthesize(text, title="Notes")
        print(mindmap.strategy, mindmap.root.node_count())

    With semantic clustering:
        synthesizer = CascadingSynthesizer(embedder=OpenAIEmbeddingProvider())
    """

    def __init__(
        self,
        *,
        config: SynthesisConfig | None = None,
        synthesizers: dict[FormatKind, Synthesizer] | None = None,
        validator: TreeValidator | None = None,
        embedder: EmbeddingProvider | None = None,
        summarizer: Summarizer | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Synthesis configuration (defaults if omitted).
            synthesizers: Synthesizer per FormatKind (default creates one per family).
            validator: Tree validator (default creates standard rule set).
            embedder: Embedding provider; enables semantic clustering.
            summarizer: Cluster summarizer; titles fall back to first sentences.
        """
        self.config = config or SynthesisConfig()
        self.synthesizers = synthesizers or default_synthesizers()
        self.validator = validator or TreeValidator(default_rules(self.config.max_depth))
        self.embedder = embedder
        self.clusterer = (
            SemanticClusterer(embedder, summarizer, self.config.clustering)
            if embedder is not None
            else None
        )

    def synthesize(
        self,
        text: str,
        title: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> MindMap:
        """Build a mind map from text.

        Args:
            text: Input text (already extracted from its source format).
            title: Optional document title hint.
            cancel_event: When set, the cascade stops before the next strategy.

        Returns:
            MindMap with the accepted tree and a processing log. Never raises.
        """
        log: list[str] = []
        warnings: list[str] = []

        if not text or not text.strip():
            log.append("Empty input")
            return MindMap(
                root=MindMapNode(id="root", topic=EMPTY_TOPIC),
                format_kind=FormatKind.PLAIN,
                strategy=EMPTY_TOPIC,
                processing_log=log,
            )

        deadline = None
        if self.config.time_budget_s is not None:
            deadline = time.monotonic() + self.config.time_budget_s

        corpus = LineCorpus.from_text(text)
        candidates, score = classify_with_score(corpus, self.config.heuristic)
        log.append(
            f"Classified {len(corpus)} lines as {candidates[0].value} "
            f"(candidates: {', '.join(kind.value for kind in candidates)})"
        )

        base = SynthesisContext(
            text=text,
            corpus=corpus,
            factory=NodeFactory(max_topic_length=self.config.max_topic_length),
            config=self.config,
            title=title,
            score=score,
        )

        for strategy in self._plan(candidates):
            if self._cancelled(cancel_event, deadline):
                log.append(f"Cancelled before {strategy.name}")
                warnings.append("Synthesis cancelled; returning minimal tree")
                break

            ctx = base.fresh()
            root = self._run_safely(strategy, ctx, log, warnings)
            if root is None:
                continue

            issues = self.validator.validate(root, strategy.kind)
            errors = [issue for issue in issues if issue.is_error]
            if errors:
                log.append(
                    f"Rejected {strategy.name}: {'; '.join(issue.message for issue in errors)}"
                )
                continue

            log.append(f"Accepted {strategy.name} ({root.node_count()} nodes)")
            return MindMap(
                root=root,
                format_kind=strategy.kind,
                strategy=strategy.name,
                validation_issues=issues,
                processing_log=log,
                warnings=warnings,
            )

        return self._minimal(base.fresh(), log, warnings)

    def _plan(self, candidates: list[FormatKind]) -> list[Strategy]:
        """Ordered strategy list for one input."""
        kinds = [kind for kind in candidates if kind is not FormatKind.PLAIN]
        if candidates[0] is FormatKind.DOCUMENT_HEURISTIC:
            for extra in (FormatKind.INDENTED, FormatKind.BULLET_LIST):
                if extra not in kinds:
                    kinds.append(extra)

        plan = [self._syntactic(kind) for kind in kinds if kind in self.synthesizers]
        semantic = self._semantic() if self.clusterer is not None else None

        if semantic is not None and self.config.prefer_semantic:
            plan.append(semantic)
        if FormatKind.PLAIN in self.synthesizers:
            plan.append(self._syntactic(FormatKind.PLAIN))
        if semantic is not None and not self.config.prefer_semantic:
            plan.append(semantic)
        return plan

    def _syntactic(self, kind: FormatKind) -> Strategy:
        synthesizer = self.synthesizers[kind]
        return Strategy(name=kind.value, kind=kind, run=synthesizer.synthesize)

    def _semantic(self) -> Strategy:
        clusterer = self.clusterer

        def run(ctx: SynthesisContext) -> list[MindMapNode]:
            log: list[str] = []
            root = clusterer.cluster(ctx.text, ctx.title, ctx.factory, log)
            for entry in log:
                logger.debug(entry)
            return [root]

        return Strategy(name=SEMANTIC, kind=FormatKind.PLAIN, run=run)

    def _run_safely(
        self,
        strategy: Strategy,
        ctx: SynthesisContext,
        log: list[str],
        warnings: list[str],
    ) -> MindMapNode | None:
        """Run one strategy with error handling."""
        try:
            roots = strategy.run(ctx)
        except Exception as e:
            log.append(f"Strategy {strategy.name} failed: {e}")
            logger.warning(f"Strategy {strategy.name} failed: {e}")
            if strategy.name == SEMANTIC:
                warnings.append(f"Semantic clustering failed: {e}")
            return None

        if not roots:
            log.append(f"Strategy {strategy.name} produced no nodes")
            return None
        return self._single_root(roots, ctx, log)

    def _single_root(
        self, roots: list[MindMapNode], ctx: SynthesisContext, log: list[str]
    ) -> MindMapNode:
        """
        Wrap several roots under one.

        A childless first root that came from a plain title line becomes the
        root itself; otherwise a synthetic root repeats the first root's topic
        (or uses the title hint).
        """
        if len(roots) == 1:
            return ctx.factory.promote(roots[0])

        first = roots[0]
        if first.is_leaf and not ctx.has_title and _is_title_line(ctx.corpus.first_text()):
            first.children.extend(roots[1:])
            log.append(f"Promoted title line '{first.topic}' to root")
            return ctx.factory.promote(first)

        topic = ctx.title if ctx.has_title else first.topic
        return ctx.factory.root(topic, roots)

    def _minimal(
        self, ctx: SynthesisContext, log: list[str], warnings: list[str]
    ) -> MindMap:
        root = ctx.factory.root(ctx.corpus.first_text(EMPTY_TOPIC))
        log.append("No strategy accepted; returning single-node tree")
        warnings.append("No structure detected")
        issue = ValidationIssue(
            type="minimal",
            message="Fell back to a single-node tree",
            severity="warning",
            node_ids=[root.id],
        )
        return MindMap(
            root=root,
            format_kind=FormatKind.PLAIN,
            strategy=MINIMAL,
            validation_issues=[issue],
            processing_log=log,
            warnings=warnings,
        )

    @staticmethod
    def _cancelled(cancel_event: threading.Event | None, deadline: float | None) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and time.monotonic() >= deadline


def _is_title_line(text: str) -> bool:
    """A first line with no list, heading or org marker."""
    return (
        bool(text)
        and patterns.strip_list_marker(text) == text
        and not patterns.is_heading(text)
        and patterns.parse_org(text) is None
    )
