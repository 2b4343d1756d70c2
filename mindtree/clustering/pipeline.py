"""
Semantic clustering fallback.

Used when no syntactic strategy produced an acceptable tree:

1. split text into paragraphs
2. embed them (external provider, batched, one retry)
3. k-means with a rule-of-thumb k, silhouette check, small-cluster merge
4. title each cluster (external summarizer, one retry)
5. root -> clusters by descending size -> member paragraphs

Provider failures never escape: embedding failure switches to length-based
local clustering and summarizer failure to a first-sentence title.
"""

from __future__ import annotations

import logging

from mindtree import patterns
from mindtree.clustering.kmeans import (
    ClusterGroup,
    ClusteringResult,
    cluster_embeddings,
    local_clusters,
)
from mindtree.clustering.paragraphs import split_paragraphs
from mindtree.clustering.providers import (
    EmbeddingProvider,
    Summarizer,
    TopicSummary,
    detect_language,
    embed_batched,
)
from mindtree.config import ClusteringConfig
from mindtree.exceptions import ProviderError, SynthesisError
from mindtree.models import MindMapNode, NodeFactory, truncate_topic

logger = logging.getLogger(__name__)


class SemanticClusterer:
    """
    Builds a mind map by clustering paragraphs.

    Usage:
        clusterer = SemanticClusterer(embedder=HashingEmbeddingProvider())
        root = clusterer.cluster(text, title="Notes")
    """

    def __init__(
        self,
        embedder: EmbeddingProvider | None = None,
        summarizer: Summarizer | None = None,
        config: ClusteringConfig | None = None,
    ):
        self.embedder = embedder
        self.summarizer = summarizer
        self.config = config or ClusteringConfig()

    def cluster(
        self,
        text: str,
        title: str | None = None,
        factory: NodeFactory | None = None,
        log: list[str] | None = None,
    ) -> MindMapNode:
        """
        Cluster ``text`` into a tree.

        Raises:
            SynthesisError: If there are fewer than two paragraphs to group.
        """
        log = log if log is not None else []
        factory = factory or NodeFactory()
        config = self.config

        paragraphs = split_paragraphs(text, config.min_paragraph_length, config.max_paragraphs)
        if len(paragraphs) < 2:
            raise SynthesisError(f"semantic: {len(paragraphs)} paragraph(s), need at least 2")
        log.append(f"Clustering {len(paragraphs)} paragraphs")

        result = self.group(paragraphs, log)
        language = detect_language(" ".join(paragraphs[:5]))
        self.label(result.groups, paragraphs, language, log)
        return self.assemble(result.groups, paragraphs, self._root_topic(text, title), factory)

    def group(self, paragraphs: list[str], log: list[str]) -> ClusteringResult:
        """Embed and k-means the paragraphs, or fall back to local clustering."""
        if self.embedder is None:
            log.append("No embedding provider, using local clustering")
            return self._local(paragraphs)

        try:
            vectors = embed_batched(
                self.embedder,
                paragraphs,
                batch_size=self.config.embedding_batch_size,
                max_retries=self.config.max_retries,
            )
        except ProviderError as e:
            log.append(f"Embedding failed, using local clustering: {e}")
            logger.warning(f"Embedding failed, using local clustering: {e}")
            return self._local(paragraphs)

        result = cluster_embeddings(vectors, self.config)
        log.extend(result.log)
        log.append(f"Formed {len(result.groups)} clusters")
        return result

    def label(
        self,
        groups: list[ClusterGroup],
        paragraphs: list[str],
        language: str,
        log: list[str],
    ) -> None:
        """Fill in each group's title and summary."""
        for group in groups:
            members = [paragraphs[i] for i in group.member_indices]
            summary = self._summarize(members, language, log)
            if summary is None:
                summary = TopicSummary(title=self.fallback_title(members[0]))
            group.title = summary.title
            group.summary = summary.summary

    def assemble(
        self,
        groups: list[ClusterGroup],
        paragraphs: list[str],
        root_topic: str,
        factory: NodeFactory,
    ) -> MindMapNode:
        """Root, then clusters by descending size, then member paragraphs."""
        root = factory.root(root_topic)
        for group in sorted(groups, key=lambda g: (-g.size, g.cluster_id)):
            node = factory.create(group.title or self.fallback_title(paragraphs[group.member_indices[0]]))
            node.children.extend(
                factory.create(truncate_topic(paragraphs[i], self.config.paragraph_topic_length))
                for i in group.member_indices
            )
            root.children.append(node)
        return root

    def fallback_title(self, paragraph: str) -> str:
        """First sentence of the paragraph, shortened."""
        sentences = patterns.split_sentences(paragraph)
        first = sentences[0] if sentences else paragraph
        return truncate_topic(first, self.config.local_title_length)

    def _summarize(self, members: list[str], language: str, log: list[str]) -> TopicSummary | None:
        if self.summarizer is None:
            return None
        attempt = 0
        while True:
            try:
                return self.summarizer.summarize(members, language)
            except Exception as e:
                if attempt >= self.config.max_retries:
                    log.append(f"Summarizer {self.summarizer.name} failed: {e}")
                    logger.warning(f"Summarizer {self.summarizer.name} failed: {e}")
                    return None
                attempt += 1

    def _local(self, paragraphs: list[str]) -> ClusteringResult:
        groups = local_clusters(paragraphs)
        return ClusteringResult(groups=groups, k=len(groups), method="local")

    @staticmethod
    def _root_topic(text: str, title: str | None) -> str:
        if title and title.strip():
            return title
        for line in text.splitlines():
            if line.strip():
                return line.strip()
        return "untitled"
