"""
Pytest configuration and fixtures for MindTree tests.

The stub providers are deterministic so clustering results are stable
across runs.
"""

import hashlib

import numpy as np
import pytest

from mindtree.clustering.providers import EmbeddingProvider, Summarizer, TopicSummary

TOPIC_AXES = {"astronomy": 0, "cooking": 1, "finance": 2}

TWELVE_PARAGRAPHS = [
    "The astronomy club watched the comet drift slowly across the northern sky last night.",
    "Good cooking starts with fresh vegetables, sharp knives and a patient hand at the stove.",
    "Personal finance advice usually begins with building an emergency fund of several months.",
    "Modern astronomy relies on large telescopes that collect faint light from distant galaxies.",
    "Slow cooking turns tough cuts of meat into tender stews over several quiet hours.",
    "Corporate finance teams forecast cash flow to decide when the company can invest.",
    "Students of astronomy learn how planets trace elliptical orbits around their stars.",
    "Home cooking saves money when meals are planned around what the market has in season.",
    "Public finance covers how governments raise taxes and spend them on public services.",
    "Amateur astronomy has grown thanks to cheap cameras and clear online star charts.",
    "The cooking class practiced folding dumplings until every pleat looked the same.",
    "Learning finance early helps young people understand interest, debt and saving.",
]


class KeywordEmbedder(EmbeddingProvider):
    """One axis per topic keyword plus a small hash-derived offset."""

    name = "keyword_stub"

    def __init__(self):
        self.calls: list[list[str]] = []

    def embed(self, texts):
        self.calls.append(list(texts))
        vectors = []
        for text in texts:
            vector = np.zeros(6)
            lowered = text.lower()
            for word, axis in TOPIC_AXES.items():
                if word in lowered:
                    vector[axis] = 1.0
            digest = hashlib.md5(text.encode("utf-8")).digest()
            vector[3:] = [byte / 2550 for byte in digest[:3]]
            vectors.append(vector)
        return vectors


class KeywordSummarizer(Summarizer):
    """Titles a cluster with the topic keyword its paragraphs share."""

    name = "keyword_stub"

    def __init__(self):
        self.languages: list[str] = []

    def summarize(self, paragraphs, language):
        self.languages.append(language)
        joined = " ".join(paragraphs).lower()
        for word in TOPIC_AXES:
            if word in joined:
                return TopicSummary(title=word.title(), summary=f"{len(paragraphs)} paragraphs")
        return TopicSummary(title="Other")


class FailingEmbedder(EmbeddingProvider):
    """Always raises, counting attempts."""

    name = "failing_stub"

    def __init__(self):
        self.attempts = 0

    def embed(self, texts):
        self.attempts += 1
        raise RuntimeError("embedding service unavailable")


class FailingSummarizer(Summarizer):
    name = "failing_stub"

    def __init__(self):
        self.attempts = 0

    def summarize(self, paragraphs, language):
        self.attempts += 1
        raise RuntimeError("summarizer timed out")


@pytest.fixture
def embedder() -> KeywordEmbedder:
    """Deterministic topic-axis embedder."""
    return KeywordEmbedder()


@pytest.fixture
def summarizer() -> KeywordSummarizer:
    """Deterministic keyword summarizer."""
    return KeywordSummarizer()


@pytest.fixture
def failing_embedder() -> FailingEmbedder:
    return FailingEmbedder()


@pytest.fixture
def failing_summarizer() -> FailingSummarizer:
    return FailingSummarizer()


@pytest.fixture
def twelve_paragraphs() -> list[str]:
    """Twelve unstructured paragraphs on three topics."""
    return list(TWELVE_PARAGRAPHS)


@pytest.fixture
def essay(twelve_paragraphs) -> str:
    """The twelve paragraphs as one blank-line separated text."""
    return "\n\n".join(twelve_paragraphs)


@pytest.fixture
def chapter_text() -> str:
    """Chapter + section outline with CJK chapter numerals."""
    return "Report\n第一章 Intro\n1.1 Background\n1.2 Goals\n第二章 Design\n2.1 Architecture"


@pytest.fixture
def document_text() -> str:
    """Extracted-document text: short titles followed by longer descriptions."""
    return (
        "Project Proposal\n"
        "\n"
        "Overview\n"
        "This project builds a shared platform for tracking equipment across all regional offices.\n"
        "\n"
        "Background\n"
        "Teams currently rely on spreadsheets that drift out of date within weeks of being created.\n"
        "\n"
        "Implementation\n"
        "The system will be rolled out in three stages, starting with the headquarters warehouse.\n"
        "\n"
        "Summary\n"
        "We expect the platform to cut time spent on audits by roughly half in the first year.\n"
    )
