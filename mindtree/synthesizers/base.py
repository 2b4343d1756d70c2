"""
Synthesizer interface.

A synthesizer turns classified text into one or more root nodes. It raises
SynthesisError (or lets a parser error escape) when the text does not fit
its family; the orchestrator treats both as a rejection and moves on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mindtree.config import SynthesisConfig
from mindtree.corpus import LineCorpus
from mindtree.models import FormatKind, MindMapNode, NodeFactory

if TYPE_CHECKING:
    from mindtree.classifier import ClassificationScore


@dataclass
class SynthesisContext:
    """Everything one synthesis attempt needs."""

    text: str
    corpus: LineCorpus
    factory: NodeFactory
    config: SynthesisConfig = field(default_factory=SynthesisConfig)
    title: str | None = None  # Caller-supplied document title hint
    score: ClassificationScore | None = None

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        config: SynthesisConfig | None = None,
        title: str | None = None,
        score: ClassificationScore | None = None,
    ) -> SynthesisContext:
        config = config or SynthesisConfig()
        return cls(
            text=text,
            corpus=LineCorpus.from_text(text),
            factory=NodeFactory(max_topic_length=config.max_topic_length),
            config=config,
            title=title,
            score=score,
        )

    def fresh(self) -> SynthesisContext:
        """Same input with a new id counter, for the next attempt."""
        return SynthesisContext(
            text=self.text,
            corpus=self.corpus,
            factory=NodeFactory(max_topic_length=self.config.max_topic_length),
            config=self.config,
            title=self.title,
            score=self.score,
        )

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())

    def root_topic(self) -> str:
        """Title hint if given, else the first line."""
        if self.has_title:
            return self.title
        return self.corpus.first_text("untitled")


class Synthesizer(ABC):
    """Abstract base for family synthesizers."""

    name: str = "base"
    kinds: tuple[FormatKind, ...] = ()

    @abstractmethod
    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        """Build root node(s) for ``ctx``.

        Raises SynthesisError if the text does not fit this family.
        """
        pass
