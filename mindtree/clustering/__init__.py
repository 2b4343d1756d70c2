"""
Semantic clustering fallback.

Groups paragraphs by embedding similarity when the text has no syntactic
structure. Providers are injected; HashingEmbeddingProvider works offline.
"""

from mindtree.clustering.kmeans import (
    ClusterGroup,
    ClusteringResult,
    choose_k,
    cluster_embeddings,
    local_clusters,
    merge_small_clusters,
    silhouette_score,
)
from mindtree.clustering.paragraphs import split_paragraphs
from mindtree.clustering.pipeline import SemanticClusterer
from mindtree.clustering.providers import (
    EmbeddingProvider,
    HashingEmbeddingProvider,
    OpenAIEmbeddingProvider,
    OpenAISummarizer,
    Summarizer,
    TopicSummary,
    detect_language,
    embed_batched,
)

__all__ = [
    # Pipeline
    "SemanticClusterer",
    "split_paragraphs",
    # k-means
    "ClusterGroup",
    "ClusteringResult",
    "choose_k",
    "cluster_embeddings",
    "local_clusters",
    "merge_small_clusters",
    "silhouette_score",
    # Providers
    "EmbeddingProvider",
    "HashingEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "OpenAISummarizer",
    "Summarizer",
    "TopicSummary",
    "detect_language",
    "embed_batched",
]
