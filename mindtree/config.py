"""
Configuration for MindTree synthesis.

All options have sensible defaults; create a config only when a caller
needs to tune thresholds, caps or the fallback order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mindtree.exceptions import ConfigurationError

# Structural keywords per locale. Title-like lines containing one of these
# score higher in the document heuristic. Add a locale here (or pass a custom
# mapping to HeuristicConfig) without touching the scoring code.
DEFAULT_STRUCTURE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": (
        "overview",
        "introduction",
        "background",
        "summary",
        "conclusion",
        "objectives",
        "goals",
        "methods",
        "approach",
        "requirements",
        "design",
        "implementation",
        "module",
        "results",
        "recommendations",
        "appendix",
        "chapter",
        "section",
        "part",
        "step",
        "phase",
    ),
    "zh": (
        "概述",
        "介绍",
        "背景",
        "目标",
        "方法",
        "步骤",
        "结论",
        "总结",
        "建议",
        "需求分析",
        "系统设计",
        "实现方案",
        "模块",
        "功能",
        "附录",
        "章",
        "节",
        "部分",
        "阶段",
    ),
}


@dataclass
class HeuristicConfig:
    """
    Tuning for the document-heuristic synthesizer and its detector.

    Example:
        >>> config = HeuristicConfig(
        ...     keywords={**DEFAULT_STRUCTURE_KEYWORDS, "de": ("Überblick", "Zusammenfassung")}
        ... )
    """

    keywords: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_STRUCTURE_KEYWORDS)
    )

    # Title candidate scoring
    min_title_score: int = 3
    max_sections: int = 6
    max_children_per_section: int = 6
    max_points: int = 3

    # Detector thresholds (classifier rule for DOCUMENT_HEURISTIC)
    min_keyword_titles: int = 2
    min_pairs_with_keywords: int = 3
    min_pairs: int = 4

    # Even-chunk fallback when no candidate clears the threshold
    min_chunks: int = 3
    max_chunks: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.max_sections < 1:
            raise ConfigurationError(f"max_sections must be >= 1, got {self.max_sections}")
        if self.max_points < 1:
            raise ConfigurationError(f"max_points must be >= 1, got {self.max_points}")
        if self.min_chunks < 1 or self.min_chunks > self.max_chunks:
            raise ConfigurationError(
                f"min_chunks ({self.min_chunks}) must be between 1 and "
                f"max_chunks ({self.max_chunks})"
            )

    def all_keywords(self) -> tuple[str, ...]:
        """Keywords from every configured locale, lowercased, in stable order."""
        seen: dict[str, None] = {}
        for words in self.keywords.values():
            for word in words:
                seen.setdefault(word.lower(), None)
        return tuple(seen)


@dataclass
class ClusteringConfig:
    """
    Configuration for the semantic clustering fallback.

    Defaults follow the values the clustering was tuned with:
    2-8 clusters, paragraphs of at least 30 characters, at most 200 of them.
    """

    min_clusters: int = 2
    max_clusters: int = 8
    min_paragraph_length: int = 30
    max_paragraphs: int = 200

    # Quality
    silhouette_threshold: float = 0.1
    min_cluster_size: int = 1

    # k-means
    max_iterations: int = 100
    tolerance: float = 1e-4
    n_init: int = 10
    random_state: int = 42

    # Providers
    embedding_batch_size: int = 64
    max_retries: int = 1

    # Output
    paragraph_topic_length: int = 80
    local_title_length: int = 30

    def __post_init__(self):
        """Validate configuration."""
        if self.min_clusters < 2:
            raise ConfigurationError(f"min_clusters must be >= 2, got {self.min_clusters}")
        if self.min_clusters > self.max_clusters:
            raise ConfigurationError(
                f"min_clusters ({self.min_clusters}) must be <= "
                f"max_clusters ({self.max_clusters})"
            )
        if not 0 <= self.max_retries <= 1:
            raise ConfigurationError(f"max_retries must be 0 or 1, got {self.max_retries}")
        if self.embedding_batch_size < 1:
            raise ConfigurationError(
                f"embedding_batch_size must be >= 1, got {self.embedding_batch_size}"
            )
        if self.min_cluster_size < 1:
            raise ConfigurationError(
                f"min_cluster_size must be >= 1, got {self.min_cluster_size}"
            )


@dataclass
class SynthesisConfig:
    """
    Configuration for text-to-mind-map synthesis.

    Example:
        >>> config = SynthesisConfig(max_depth=4, time_budget_s=2.0)
        >>> mindmap = mindtree.convert(text, config=config)
    """

    # Tree shape
    max_depth: int = 6
    max_topic_length: int = 100
    plain_group_size: int = 3

    # Structured data
    xml_include_text: bool = False

    # Fallback order: try semantic clustering before plain chunking when
    # providers are available
    prefer_semantic: bool = True

    # Cancellation: checked between strategies
    time_budget_s: float | None = None

    heuristic: HeuristicConfig = field(default_factory=HeuristicConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)

    def __post_init__(self):
        """Validate configuration."""
        if self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.max_topic_length < 4:
            raise ConfigurationError(
                f"max_topic_length must be >= 4, got {self.max_topic_length}"
            )
        if self.plain_group_size < 1:
            raise ConfigurationError(
                f"plain_group_size must be >= 1, got {self.plain_group_size}"
            )
        if self.time_budget_s is not None and self.time_budget_s <= 0:
            raise ConfigurationError(
                f"time_budget_s must be positive, got {self.time_budget_s}"
            )
