"""
K-means grouping and cluster quality.

Vectors are L2-normalized before clustering so Euclidean k-means on the
unit sphere orders points the same way cosine distance does. Cluster ids
are always dense (0..k-1) and centroids always match current membership.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from sklearn.cluster import KMeans
from sklearn.metrics.pairwise import cosine_distances, cosine_similarity

from mindtree.config import ClusteringConfig

logger = logging.getLogger(__name__)

SHORT_PARAGRAPH = 100
MEDIUM_PARAGRAPH = 300


@dataclass
class ClusterGroup:
    """One cluster of paragraphs."""

    cluster_id: int
    member_indices: list[int]
    centroid: np.ndarray
    title: str = ""
    summary: str = ""

    @property
    def size(self) -> int:
        return len(self.member_indices)


@dataclass
class ClusteringResult:
    """Groups plus how they were obtained."""

    groups: list[ClusterGroup]
    k: int
    silhouette: float = 0.0
    method: str = "kmeans"  # "kmeans" or "local"
    log: list[str] = field(default_factory=list)


def choose_k(n: int, min_clusters: int = 2, max_clusters: int = 8) -> int:
    """
    Rule-of-thumb cluster count for ``n`` paragraphs.

    ``<= 5``: ``max(2, ceil(n/2))``; ``<= 10``: ``min(4, ceil(n/3))``;
    otherwise ``round(sqrt(n))`` clamped to ``[min_clusters, max_clusters]``.
    Never more than ``n``.
    """
    if n <= 1:
        return max(n, 0)
    if n <= 5:
        k = max(2, math.ceil(n / 2))
    elif n <= 10:
        k = min(4, math.ceil(n / 3))
    else:
        k = min(max(round(math.sqrt(n)), min_clusters), max_clusters)
    return min(k, n)


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """L2-normalize each row; zero rows stay zero."""
    vectors = np.asarray(vectors, dtype=float)
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return vectors / norms


def run_kmeans(vectors: np.ndarray, k: int, config: ClusteringConfig) -> np.ndarray:
    """Cluster normalized ``vectors`` into ``k`` groups; returns one label per row."""
    model = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=config.n_init,
        max_iter=config.max_iterations,
        tol=config.tolerance,
        random_state=config.random_state,
    )
    return model.fit_predict(vectors)


def silhouette_score(vectors: np.ndarray, labels: np.ndarray) -> float:
    """
    Mean silhouette over all points, using cosine distance.

    For point i: ``a`` is the mean distance to the other members of its
    cluster, ``b`` the smallest mean distance to any other cluster, and
    ``s = (b - a) / max(a, b)`` (0 when both are 0). A point alone in its
    cluster has ``a = 0``. Fewer than two clusters score 0.
    """
    labels = np.asarray(labels)
    unique = np.unique(labels)
    if len(unique) < 2 or len(labels) < 2:
        return 0.0

    distances = np.clip(cosine_distances(vectors), 0.0, None)
    scores = np.zeros(len(labels))

    for i, label in enumerate(labels):
        same = labels == label
        same[i] = False
        a = distances[i, same].mean() if same.any() else 0.0
        b = min(distances[i, labels == other].mean() for other in unique if other != label)
        denominator = max(a, b)
        scores[i] = 0.0 if denominator == 0 else (b - a) / denominator

    return float(scores.mean())


def build_groups(vectors: np.ndarray, labels: np.ndarray) -> list[ClusterGroup]:
    """Groups from labels, ids renumbered densely in label order."""
    groups = []
    for label in sorted(set(int(x) for x in labels)):
        members = [i for i, x in enumerate(labels) if int(x) == label]
        groups.append(
            ClusterGroup(
                cluster_id=len(groups),
                member_indices=members,
                centroid=vectors[members].mean(axis=0),
            )
        )
    return groups


def merge_small_clusters(
    groups: list[ClusterGroup],
    vectors: np.ndarray,
    min_size: int = 1,
) -> list[ClusterGroup]:
    """
    Fold clusters smaller than ``min_size`` into their most similar neighbour.

    Similarity is cosine similarity between centroids. Empty clusters are
    dropped. Centroids are recomputed after every merge and ids are
    renumbered densely at the end.
    """
    groups = [g for g in groups if g.size > 0]

    while len(groups) > 1:
        small = [g for g in groups if g.size < min_size]
        if not small:
            break
        victim = min(small, key=lambda g: (g.size, g.cluster_id))
        others = [g for g in groups if g is not victim]
        similarities = cosine_similarity(
            victim.centroid.reshape(1, -1), np.vstack([g.centroid for g in others])
        )[0]
        target = others[int(np.argmax(similarities))]

        logger.debug(
            "Merging cluster %d (size %d) into cluster %d",
            victim.cluster_id,
            victim.size,
            target.cluster_id,
        )
        target.member_indices = sorted(target.member_indices + victim.member_indices)
        target.centroid = vectors[target.member_indices].mean(axis=0)
        groups = others

    for new_id, group in enumerate(groups):
        group.cluster_id = new_id
    return groups


def cluster_embeddings(vectors: np.ndarray, config: ClusteringConfig) -> ClusteringResult:
    """
    Full k-means pass: choose k, cluster, score, maybe retry with k-1, merge.

    Args:
        vectors: One embedding per paragraph.
        config: Cluster bounds, k-means parameters and quality thresholds.

    Returns:
        ClusteringResult with dense, non-empty groups.
    """
    normalized = normalize_rows(vectors)
    n = len(normalized)
    log = []

    if n < 2:
        groups = build_groups(normalized, np.zeros(n, dtype=int)) if n else []
        return ClusteringResult(groups=groups, k=len(groups), log=["Too few paragraphs to cluster"])

    k = choose_k(n, config.min_clusters, config.max_clusters)
    labels = run_kmeans(normalized, k, config)
    score = silhouette_score(normalized, labels)
    log.append(f"k-means with k={k}: silhouette {score:.3f}")

    if score < config.silhouette_threshold and k > 2:
        retry_labels = run_kmeans(normalized, k - 1, config)
        retry_score = silhouette_score(normalized, retry_labels)
        log.append(f"k-means with k={k - 1}: silhouette {retry_score:.3f}")
        if retry_score > score:
            k, labels, score = k - 1, retry_labels, retry_score

    groups = build_groups(normalized, labels)
    groups = merge_small_clusters(groups, normalized, config.min_cluster_size)
    if len(groups) != k:
        log.append(f"{k - len(groups)} clusters merged or empty, {len(groups)} remain")

    return ClusteringResult(groups=groups, k=k, silhouette=score, method="kmeans", log=log)


def local_clusters(paragraphs: list[str]) -> list[ClusterGroup]:
    """
    Provider-free grouping by paragraph length.

    Buckets: short (< 100 chars), medium (< 300), long. When everything
    lands in one bucket it is bisected by position instead.
    """
    buckets: list[list[int]] = [[], [], []]
    for i, paragraph in enumerate(paragraphs):
        if len(paragraph) < SHORT_PARAGRAPH:
            buckets[0].append(i)
        elif len(paragraph) < MEDIUM_PARAGRAPH:
            buckets[1].append(i)
        else:
            buckets[2].append(i)
    members = [bucket for bucket in buckets if bucket]

    if len(members) == 1 and len(members[0]) >= 2:
        only = members[0]
        half = math.ceil(len(only) / 2)
        members = [only[:half], only[half:]]

    return [
        ClusterGroup(cluster_id=i, member_indices=indices, centroid=np.zeros(0))
        for i, indices in enumerate(members)
    ]
