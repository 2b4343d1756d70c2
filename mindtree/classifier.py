"""
Format classifier.

Scores the whole input against every structural family and picks one
FormatKind with ordered rules, first match wins. More specific signals
(brackets, numbering, headings) are checked before generic ones
(indentation, bullets), because documents often mix a few bullets into
otherwise numbered prose.

Thresholds are module constants so they can be tuned in one place.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

import yaml

from mindtree import patterns
from mindtree.config import HeuristicConfig
from mindtree.corpus import LineCorpus
from mindtree.models import FormatKind

logger = logging.getLogger(__name__)

# Rule thresholds
YAML_KEY_VALUE_RATIO = 0.5
MARKDOWN_BULLET_RATIO = 0.3
MARKDOWN_LINK_LINES = 2
MARKDOWN_EMPHASIS_LINES = 2
PATH_RATIO = 0.6
ORG_RATIO = 0.3
OUTLINE_RATIO = 0.3
NUMBERED_RATIO = 0.3
BULLET_RATIO = 0.3
INDENTED_RATIO = 0.3
MIN_INDENT_MAGNITUDE = 2

# Document-heuristic detector
TITLE_MIN_LENGTH = 4
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 20
DESCRIPTION_LENGTH_FACTOR = 1.5
DOCUMENT_MAX_MARKER_RATIO = 0.5


@dataclass
class ClassificationScore:
    """
    Evidence collected over the whole corpus.

    Counts are numbers of lines; ratios are against the non-empty line count.
    """

    total_lines: int = 0
    headings: int = 0
    chapters: int = 0
    sections: int = 0
    bullets: int = 0
    numbered: int = 0
    outline_markers: int = 0
    org_lines: int = 0
    org_multi_star: bool = False
    path_lines: int = 0
    key_value_lines: int = 0
    link_lines: int = 0
    emphasis_lines: int = 0
    has_fenced_code: bool = False
    indent_magnitudes: list[int] = field(default_factory=list)
    indented_lines: int = 0

    # Structured data
    is_json: bool = False
    is_xml: bool = False
    is_yaml: bool = False

    # Document-heuristic evidence
    keyword_titles: int = 0
    has_keywords: bool = False
    title_description_pairs: int = 0
    document_content: bool = False

    # Whether the permissive chapter rule fired without the strict one
    mixed_chapters: bool = False

    def ratio(self, count: int) -> float:
        if self.total_lines == 0:
            return 0.0
        return count / self.total_lines

    @property
    def bullet_ratio(self) -> float:
        return self.ratio(self.bullets)

    @property
    def numbered_ratio(self) -> float:
        return self.ratio(self.numbered)

    @property
    def outline_ratio(self) -> float:
        return self.ratio(self.outline_markers)

    @property
    def org_ratio(self) -> float:
        return self.ratio(self.org_lines)

    @property
    def path_ratio(self) -> float:
        return self.ratio(self.path_lines)

    @property
    def key_value_ratio(self) -> float:
        return self.ratio(self.key_value_lines)

    @property
    def indented_ratio(self) -> float:
        return self.ratio(self.indented_lines)


def score_text(text: str, config: HeuristicConfig | None = None) -> ClassificationScore:
    """Collect classification evidence for ``text``."""
    corpus = LineCorpus.from_text(text)
    return _score_corpus(corpus, config or HeuristicConfig())


def classify(text: str, config: HeuristicConfig | None = None) -> FormatKind:
    """
    Pick the structural family of ``text``.

    Never raises; returns FormatKind.PLAIN when nothing else fits.
    """
    return candidate_formats(text, config)[0]


def candidate_formats(text: str, config: HeuristicConfig | None = None) -> list[FormatKind]:
    """
    Every family whose rule fires, in priority order, ending with PLAIN.

    The first entry is the classification; the rest are what the
    orchestrator tries next when a synthesized tree is rejected.
    """
    score = score_text(text, config)
    return _candidates_from_score(score)


def classify_with_score(
    corpus: LineCorpus, config: HeuristicConfig | None = None
) -> tuple[list[FormatKind], ClassificationScore]:
    """Candidates plus the score they came from, for an already-built corpus."""
    score = _score_corpus(corpus, config or HeuristicConfig())
    return _candidates_from_score(score), score


def _candidates_from_score(score: ClassificationScore) -> list[FormatKind]:
    if score.total_lines == 0:
        return [FormatKind.PLAIN]

    rules = [
        (FormatKind.JSON, score.is_json),
        (FormatKind.XML, score.is_xml),
        (FormatKind.YAML, score.is_yaml),
        (FormatKind.CHAPTER_SECTION, _is_strict_chapter_section(score)),
        (FormatKind.MARKDOWN_HEADING, _is_markdown(score)),
        (FormatKind.PATH_LIST, score.path_ratio > PATH_RATIO),
        (FormatKind.DOCUMENT_HEURISTIC, score.document_content),
        (FormatKind.CHAPTER_SECTION, score.mixed_chapters),
        (FormatKind.ORG_MODE, score.org_ratio > ORG_RATIO and score.org_multi_star),
        (FormatKind.OUTLINE, score.outline_ratio > OUTLINE_RATIO),
        (FormatKind.NUMBERED_LIST, score.numbered_ratio > NUMBERED_RATIO),
        (FormatKind.BULLET_LIST, score.bullet_ratio > BULLET_RATIO),
        (FormatKind.INDENTED, _is_indented(score)),
    ]

    candidates: list[FormatKind] = []
    for kind, fired in rules:
        if fired and kind not in candidates:
            candidates.append(kind)
    candidates.append(FormatKind.PLAIN)

    logger.debug(
        "Classified %d lines as %s (candidates: %s)",
        score.total_lines,
        candidates[0].value,
        ", ".join(kind.value for kind in candidates),
    )
    return candidates


# =============================================================================
# EVIDENCE
# =============================================================================


def _score_corpus(corpus: LineCorpus, config: HeuristicConfig) -> ClassificationScore:
    score = ClassificationScore(total_lines=len(corpus))
    if corpus.is_empty:
        return score

    stripped = corpus.raw.strip()
    score.is_json = stripped[:1] in ("{", "[") and _loads_json(stripped)
    score.is_xml = stripped.startswith("<")

    magnitudes: set[int] = set()
    for line in corpus:
        text = line.text
        magnitudes.add(line.indent)
        if line.indent > 0:
            score.indented_lines += 1
        if patterns.is_heading(text):
            score.headings += 1
        if patterns.is_chapter(text):
            score.chapters += 1
        if patterns.is_section(text):
            score.sections += 1
        if patterns.is_bullet(text):
            score.bullets += 1
        if patterns.is_numbered(text):
            score.numbered += 1
        if patterns.is_outline_marker(text):
            score.outline_markers += 1
        org = patterns.parse_org(text)
        if org is not None:
            score.org_lines += 1
            if org[0] > 1:
                score.org_multi_star = True
        if patterns.is_path(text):
            score.path_lines += 1
        if patterns.is_key_value(text):
            score.key_value_lines += 1
        if patterns.has_link(text):
            score.link_lines += 1
        if patterns.has_emphasis(text):
            score.emphasis_lines += 1
        if patterns.is_fence(text):
            score.has_fenced_code = True

    score.indent_magnitudes = sorted(magnitudes)

    if score.key_value_ratio > YAML_KEY_VALUE_RATIO and score.headings == 0:
        score.is_yaml = _loads_yaml_collection(corpus.raw)

    _score_document_evidence(corpus, config, score)

    strict = _is_strict_chapter_section(score)
    permissive = (
        (score.chapters > 0 and score.sections == 0)
        or (score.chapters > 0 and score.bullets > 0)
        or 0 < score.sections < 2
    )
    score.mixed_chapters = permissive and not strict
    return score


def _score_document_evidence(
    corpus: LineCorpus, config: HeuristicConfig, score: ClassificationScore
) -> None:
    """Count keyword titles and (short title, longer description) pairs."""
    keywords = config.all_keywords()
    keyword_lines = 0
    texts = corpus.texts

    for text in texts:
        if not _is_title_like(text):
            continue
        if patterns.find_keyword(text, keywords) is not None:
            keyword_lines += 1

    pairs = 0
    for current, following in zip(texts, texts[1:]):
        if is_title_description_pair(current, following):
            pairs += 1

    score.keyword_titles = keyword_lines
    score.has_keywords = keyword_lines > 0
    score.title_description_pairs = pairs
    score.document_content = _is_document_content(score, config)


def is_title_description_pair(title: str, description: str) -> bool:
    """A short title line followed by a markedly longer description line."""
    if patterns.is_bullet(title) or patterns.is_path(title):
        return False
    return (
        TITLE_MIN_LENGTH <= len(title) < TITLE_MAX_LENGTH
        and len(description) > DESCRIPTION_MIN_LENGTH
        and len(description) > len(title) * DESCRIPTION_LENGTH_FACTOR
    )


def _is_title_like(text: str) -> bool:
    return (
        TITLE_MIN_LENGTH <= len(text) < TITLE_MAX_LENGTH
        and not patterns.has_sentence_punctuation(text)
        and not patterns.is_bullet(text)
    )


def _is_strict_chapter_section(score: ClassificationScore) -> bool:
    return score.chapters > 0 and score.sections > 0 and score.headings == 0


def _is_markdown(score: ClassificationScore) -> bool:
    if score.headings > 0:
        return True
    signals = [
        score.bullet_ratio > MARKDOWN_BULLET_RATIO,
        score.link_lines > MARKDOWN_LINK_LINES,
        score.emphasis_lines > MARKDOWN_EMPHASIS_LINES,
        score.has_fenced_code,
    ]
    return sum(signals) >= 2


def _is_document_content(score: ClassificationScore, config: HeuristicConfig) -> bool:
    """Text with no syntactic markup that still reads like a titled document."""
    markers = score.bullets + score.numbered + score.outline_markers
    if score.ratio(markers) > DOCUMENT_MAX_MARKER_RATIO:
        return False
    if score.indented_ratio > INDENTED_RATIO:
        return False
    pairs = score.title_description_pairs
    return (
        score.keyword_titles >= config.min_keyword_titles
        or (score.has_keywords and pairs >= config.min_pairs_with_keywords)
        or pairs >= config.min_pairs
    )


def _is_indented(score: ClassificationScore) -> bool:
    magnitudes = score.indent_magnitudes
    deep = any(m >= MIN_INDENT_MAGNITUDE for m in magnitudes)
    if len(magnitudes) >= 2 and deep:
        return True
    return score.indented_ratio > INDENTED_RATIO and deep


def _loads_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _loads_yaml_collection(text: str) -> bool:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return False
    return isinstance(data, (dict, list))
