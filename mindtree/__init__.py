"""
MindTree: Turn free-form text into mind-map trees.

This library infers structure from text that carries no explicit schema
(Markdown, numbered outlines, indented or bulleted lists, JSON/YAML/XML,
path lists, org-mode, or plain prose extracted from PDF/DOCX/PPTX) and
produces one single-rooted, ordered tree ready for a mind-map renderer.

Example:
    >>> import mindtree
    >>> mindmap = mindtree.convert("Report\\n第一章 Intro\\n1.1 Background\\n1.2 Goals")
    >>> mindmap.format_kind
    <FormatKind.CHAPTER_SECTION: 'chapter_section'>
    >>> mindmap.root.to_dict()["topic"]
    'Report'

    >>> # Unstructured prose, grouped by embedding similarity
    >>> from mindtree.clustering import HashingEmbeddingProvider
    >>> mindmap = mindtree.convert(essay, embedder=HashingEmbeddingProvider())
"""

from mindtree.cascading import CascadingSynthesizer
from mindtree.classifier import ClassificationScore, candidate_formats, classify, score_text
from mindtree.config import (
    DEFAULT_STRUCTURE_KEYWORDS,
    ClusteringConfig,
    HeuristicConfig,
    SynthesisConfig,
)
from mindtree.convert import convert, convert_batch, supported_formats
from mindtree.corpus import Line, LineCorpus
from mindtree.exceptions import (
    ConfigurationError,
    MindTreeError,
    ProviderError,
    SynthesisError,
)
from mindtree.models import FormatKind, MindMap, MindMapNode, NodeFactory
from mindtree.validators import TreeValidator, ValidationIssue

__version__ = "0.1.0"
__all__ = [
    # Main API
    "convert",
    "convert_batch",
    "supported_formats",
    "CascadingSynthesizer",
    # Classification
    "classify",
    "candidate_formats",
    "score_text",
    "ClassificationScore",
    # Configuration
    "SynthesisConfig",
    "HeuristicConfig",
    "ClusteringConfig",
    "DEFAULT_STRUCTURE_KEYWORDS",
    # Models
    "FormatKind",
    "MindMap",
    "MindMapNode",
    "NodeFactory",
    "Line",
    "LineCorpus",
    # Validation
    "TreeValidator",
    "ValidationIssue",
    # Exceptions
    "MindTreeError",
    "ConfigurationError",
    "SynthesisError",
    "ProviderError",
]
