"""
Exception classes for MindTree.

All MindTree exceptions inherit from MindTreeError,
making it easy to catch all library errors.

Most of these never reach callers of ``convert()``: the orchestrator
treats them as a rejected strategy and moves on to the next one.

Example:
    >>> try:
    ...     MarkdownSynthesizer().synthesize(ctx)
    ... except mindtree.SynthesisError as e:
    ...     print(f"Strategy not applicable: {e}")
"""


class MindTreeError(Exception):
    """
    Base exception for all MindTree errors.

    Catch this to handle any MindTree-specific error.
    """

    pass


class ConfigurationError(MindTreeError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> ClusteringConfig(min_clusters=5, max_clusters=2)
        ConfigurationError: min_clusters (5) must be <= max_clusters (2)
    """

    pass


class SynthesisError(MindTreeError):
    """
    Raised when a synthesizer cannot build a tree from the input.

    The orchestrator catches this and tries the next strategy.
    """

    pass


class ProviderError(MindTreeError):
    """
    Raised when an embedding or summarization provider fails.

    The semantic clustering fallback catches this and degrades to
    local heuristic clustering.
    """

    pass
