"""
Family synthesizers.

Each synthesizer handles one or more FormatKinds. ``default_synthesizers()``
returns one instance per family, keyed by the kinds it handles.
"""

from mindtree.models import FormatKind
from mindtree.synthesizers.base import SynthesisContext, Synthesizer
from mindtree.synthesizers.chapters import ChapterSectionSynthesizer
from mindtree.synthesizers.heuristic import DocumentHeuristicSynthesizer
from mindtree.synthesizers.markdown import MarkdownSynthesizer
from mindtree.synthesizers.paths import PathListSynthesizer
from mindtree.synthesizers.plain import PlainSynthesizer
from mindtree.synthesizers.stack import (
    IndentedSynthesizer,
    ListSynthesizer,
    OrgModeSynthesizer,
    OutlineSynthesizer,
    build_by_depth,
)
from mindtree.synthesizers.structured import (
    JsonSynthesizer,
    XmlSynthesizer,
    YamlSynthesizer,
)

__all__ = [
    "SynthesisContext",
    "Synthesizer",
    "build_by_depth",
    "default_synthesizers",
    # Families
    "ChapterSectionSynthesizer",
    "DocumentHeuristicSynthesizer",
    "IndentedSynthesizer",
    "JsonSynthesizer",
    "ListSynthesizer",
    "MarkdownSynthesizer",
    "OrgModeSynthesizer",
    "OutlineSynthesizer",
    "PathListSynthesizer",
    "PlainSynthesizer",
    "XmlSynthesizer",
    "YamlSynthesizer",
]


def default_synthesizers() -> dict[FormatKind, Synthesizer]:
    """One synthesizer per FormatKind."""
    families: list[Synthesizer] = [
        JsonSynthesizer(),
        YamlSynthesizer(),
        XmlSynthesizer(),
        MarkdownSynthesizer(),
        ChapterSectionSynthesizer(),
        PathListSynthesizer(),
        DocumentHeuristicSynthesizer(),
        OrgModeSynthesizer(),
        OutlineSynthesizer(),
        ListSynthesizer(),
        IndentedSynthesizer(),
        PlainSynthesizer(),
    ]
    registry: dict[FormatKind, Synthesizer] = {}
    for synthesizer in families:
        for kind in synthesizer.kinds:
            registry[kind] = synthesizer
    return registry
