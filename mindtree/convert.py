"""
Text-to-mind-map conversion entry points.

This module provides the main `convert()` function that turns a block of
already-extracted text into a MindMap by wiring together:
- the format classifier
- the family synthesizers
- the tree validator
- the semantic clustering fallback (when an embedding provider is given)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from mindtree.cascading import CascadingSynthesizer
from mindtree.clustering.providers import EmbeddingProvider, Summarizer
from mindtree.config import SynthesisConfig
from mindtree.models import FormatKind, MindMap

logger = logging.getLogger(__name__)


def convert(
    text: str,
    title: str | None = None,
    config: SynthesisConfig | None = None,
    *,
    embedder: EmbeddingProvider | None = None,
    summarizer: Summarizer | None = None,
    cancel_event: threading.Event | None = None,
) -> MindMap:
    """
    Convert text to a mind map.

    Args:
        text: Input text (Markdown, outline, JSON, extracted PDF text, ...)
        title: Optional document title used for the root when no better one exists
        config: Synthesis configuration (uses defaults if None)
        embedder: Embedding provider for the semantic clustering fallback
        summarizer: Summarizer that titles clusters
        cancel_event: Set it from another thread to stop between strategies

    Returns:
        A MindMap. Never raises for any input text; empty input gives a
        single ``"empty"`` node.

    Example:
        >>> mindmap = convert("# Plan\\n## Goals\\n## Risks")
        >>> [child.topic for child in mindmap.root.children]
        ['Goals', 'Risks']
    """
    synthesizer = CascadingSynthesizer(config=config, embedder=embedder, summarizer=summarizer)
    mindmap = synthesizer.synthesize(text, title=title, cancel_event=cancel_event)
    logger.debug(
        "Converted %d chars via %s (%d nodes)",
        len(text or ""),
        mindmap.strategy,
        mindmap.root.node_count(),
    )
    return mindmap


def convert_batch(
    texts: Iterable[str],
    config: SynthesisConfig | None = None,
    *,
    embedder: EmbeddingProvider | None = None,
    summarizer: Summarizer | None = None,
    parallel: bool = False,
    max_workers: int = 4,
) -> Iterator[MindMap]:
    """
    Convert multiple texts, yielding results in input order.

    Synthesis shares no mutable state between calls, so ``parallel=True``
    simply fans the texts out over a thread pool.

    Args:
        texts: Input texts
        config: Synthesis configuration
        embedder: Embedding provider shared by all conversions
        summarizer: Summarizer shared by all conversions
        parallel: Whether to convert in a thread pool
        max_workers: Pool size (if parallel=True)

    Yields:
        One MindMap per input text
    """
    synthesizer = CascadingSynthesizer(config=config, embedder=embedder, summarizer=summarizer)

    if not parallel:
        for text in texts:
            yield synthesizer.synthesize(text)
        return

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        yield from pool.map(synthesizer.synthesize, texts)


def supported_formats() -> list[str]:
    """Return the structural families the classifier can recognize."""
    return [kind.value for kind in FormatKind]
