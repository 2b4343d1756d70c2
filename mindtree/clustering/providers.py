"""
External providers for semantic clustering.

The clustering pipeline needs two black-box calls:
- EmbeddingProvider.embed(texts) -> one vector per text
- Summarizer.summarize(paragraphs, language) -> TopicSummary(title, summary)

Concrete adapters:
- HashingEmbeddingProvider: deterministic bag-of-words hashing, offline
- OpenAIEmbeddingProvider / OpenAISummarizer: the OpenAI SDK
  (pip install mindtree[openai])
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import numpy as np
from langdetect import DetectorFactory, LangDetectException
from langdetect import detect as langdetect_detect

from mindtree.exceptions import ProviderError

logger = logging.getLogger(__name__)

# Make language detection deterministic
DetectorFactory.seed = 0

PLACEHOLDER_TEXT = "(empty)"
TOKEN_RE = re.compile(r"[一-鿿]|[^\W_]+", re.UNICODE)


@dataclass
class TopicSummary:
    """Short label for one cluster."""

    title: str
    summary: str = ""


def detect_language(text: str) -> str:
    """Dominant language of ``text`` as ``"zh"`` or ``"en"``."""
    try:
        # Need sufficient text for reliable detection
        if len(text.strip()) < 20:
            return "en"
        lang = langdetect_detect(text)
    except LangDetectException:
        return "en"
    return "zh" if lang.startswith("zh") else "en"


# =============================================================================
# INTERFACES
# =============================================================================


class EmbeddingProvider(ABC):
    """Abstract base for embedding providers."""

    name: str = "base"

    @abstractmethod
    def embed(self, texts: list[str]) -> list[np.ndarray]:
        """Return one vector per text, in order.

        Implementations must accept empty strings.
        """
        pass


class Summarizer(ABC):
    """Abstract base for cluster summarizers."""

    name: str = "base"

    @abstractmethod
    def summarize(self, paragraphs: list[str], language: str) -> TopicSummary:
        """Return a short title and summary for a group of paragraphs."""
        pass


def embed_batched(
    provider: EmbeddingProvider,
    texts: list[str],
    batch_size: int = 64,
    max_retries: int = 1,
) -> np.ndarray:
    """
    Embed ``texts`` in batches, retrying each failed batch at most ``max_retries`` times.

    Empty texts are replaced with a placeholder before the call.

    Returns:
        Float matrix of shape ``(len(texts), dimensions)``.

    Raises:
        ProviderError: If a batch still fails after retrying, or the provider
            returns the wrong number of vectors.
    """
    prepared = [text if text.strip() else PLACEHOLDER_TEXT for text in texts]
    vectors: list[np.ndarray] = []

    for start in range(0, len(prepared), batch_size):
        batch = prepared[start : start + batch_size]
        attempt = 0
        while True:
            try:
                result = provider.embed(batch)
                break
            except Exception as e:
                if attempt >= max_retries:
                    raise ProviderError(f"Embedding provider {provider.name} failed: {e}") from e
                attempt += 1
                logger.warning(f"Embedding batch failed, retrying ({attempt}/{max_retries}): {e}")

        if len(result) != len(batch):
            raise ProviderError(
                f"Embedding provider {provider.name} returned {len(result)} vectors "
                f"for {len(batch)} texts"
            )
        vectors.extend(np.asarray(vector, dtype=float) for vector in result)

    if not vectors:
        return np.zeros((0, 0))
    try:
        return np.vstack(vectors)
    except ValueError as e:
        raise ProviderError(f"Embedding provider {provider.name} returned ragged vectors") from e


# =============================================================================
# ADAPTERS
# =============================================================================


class HashingEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic bag-of-words embeddings.

    Each word (or CJK character) is hashed into one of ``dimensions``
    buckets with a signed count; vectors are L2-normalized. Good enough to
    group paragraphs that share vocabulary, and needs no network.
    """

    name = "hashing"

    def __init__(self, dimensions: int = 256):
        self.dimensions = dimensions

    def embed(self, texts: list[str]) -> list[np.ndarray]:
        return [self._vector(text or PLACEHOLDER_TEXT) for text in texts]

    def _vector(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimensions)
        for token in TOKEN_RE.findall(text.lower()):
            digest = hashlib.md5(token.encode("utf-8")).digest()
            index = int.from_bytes(digest[:4], "little") % self.dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[index] += sign
        norm = np.linalg.norm(vector)
        return vector / norm if norm > 0 else vector


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from the OpenAI API (or any compatible endpoint)."""

    name = "openai"

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        client: Any | None = None,
        dimensions: int | None = None,
    ):
        """Initialize the provider.

        Args:
            model: Embedding model name.
            client: An ``openai.OpenAI`` client. Created from the environment
                (OPENAI_API_KEY, OPENAI_BASE_URL) when omitted.
            dimensions: Optional output dimensionality.
        """
        if client is None:
            from openai import OpenAI

            client = OpenAI()
        self.client = client
        self.model = model
        self.dimensions = dimensions

    def embed(self, texts: list[str]) -> list[np.ndarray]:
        kwargs: dict[str, Any] = {"model": self.model, "input": texts}
        if self.dimensions is not None:
            kwargs["dimensions"] = self.dimensions
        response = self.client.embeddings.create(**kwargs)
        return [np.asarray(item.embedding, dtype=float) for item in response.data]


SUMMARY_PROMPTS = {
    "zh": "用中文为以下段落生成一个不超过15个字的主题标题和一句话摘要。"
    '只返回JSON：{"title": "...", "summary": "..."}',
    "en": "Write a topic title of at most 8 words and a one-sentence summary "
    'for the following paragraphs. Return only JSON: {"title": "...", "summary": "..."}',
}


class OpenAISummarizer(Summarizer):
    """Cluster titles from an OpenAI chat model."""

    name = "openai"

    def __init__(self, model: str = "gpt-4o-mini", client: Any | None = None):
        if client is None:
            from openai import OpenAI

            client = OpenAI()
        self.client = client
        self.model = model

    def summarize(self, paragraphs: list[str], language: str) -> TopicSummary:
        prompt = SUMMARY_PROMPTS.get(language, SUMMARY_PROMPTS["en"])
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": prompt},
                {"role": "user", "content": "\n\n".join(paragraphs)},
            ],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""
        try:
            data = json.loads(content)
        except ValueError as e:
            raise ProviderError(f"Summarizer returned invalid JSON: {content[:80]!r}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"Summarizer returned {type(data).__name__}, expected an object")
        title = str(data.get("title", "")).strip()
        if not title:
            raise ProviderError("Summarizer returned no title")
        return TopicSummary(title=title, summary=str(data.get("summary", "")).strip())
