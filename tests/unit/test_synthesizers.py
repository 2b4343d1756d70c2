"""
Tests for the family synthesizers.

Each synthesizer is exercised directly through a SynthesisContext, without
the classifier or validator in the way.
"""

import pytest

from mindtree.config import HeuristicConfig, SynthesisConfig
from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, NodeFactory
from mindtree.synthesizers import (
    ChapterSectionSynthesizer,
    DocumentHeuristicSynthesizer,
    IndentedSynthesizer,
    JsonSynthesizer,
    ListSynthesizer,
    MarkdownSynthesizer,
    OrgModeSynthesizer,
    OutlineSynthesizer,
    PathListSynthesizer,
    PlainSynthesizer,
    XmlSynthesizer,
    YamlSynthesizer,
    build_by_depth,
    default_synthesizers,
)
from mindtree.synthesizers.base import SynthesisContext
from mindtree.synthesizers.heuristic import score_title, select_titles


def _topics(node):
    return [child.topic for child in node.children]


def _run(synthesizer, text, **kwargs):
    return synthesizer.synthesize(SynthesisContext.from_text(text, **kwargs))


class TestBuildByDepth:
    def test_stack_rule(self):
        roots = build_by_depth([(0, "A"), (1, "B"), (2, "C"), (1, "D"), (0, "E")], NodeFactory())
        assert [root.topic for root in roots] == ["A", "E"]
        assert _topics(roots[0]) == ["B", "D"]
        assert _topics(roots[0].children[0]) == ["C"]

    def test_depth_jump_attaches_to_nearest_shallower(self):
        roots = build_by_depth([(0, "A"), (3, "B")], NodeFactory())
        assert _topics(roots[0]) == ["B"]

    def test_depth_capped(self):
        items = [(depth, f"level {depth}") for depth in range(10)]
        roots = build_by_depth(items, NodeFactory(), max_depth=3)
        assert roots[0].depth() == 3


class TestDefaultSynthesizers:
    def test_every_kind_registered(self):
        registry = default_synthesizers()
        assert set(registry) == set(FormatKind)

    def test_list_kinds_share_instance(self):
        registry = default_synthesizers()
        assert registry[FormatKind.BULLET_LIST] is registry[FormatKind.NUMBERED_LIST]


class TestStackSynthesizers:
    def test_indented_by_rank(self):
        roots = _run(IndentedSynthesizer(), "Root\n    Child\n        Grand\n    Child2")
        assert len(roots) == 1
        assert _topics(roots[0]) == ["Child", "Child2"]
        assert _topics(roots[0].children[0]) == ["Grand"]

    def test_two_and_four_space_same_shape(self):
        two = _run(IndentedSynthesizer(), "A\n  B\n    C")[0].shape()
        four = _run(IndentedSynthesizer(), "A\n    B\n        C")[0].shape()
        assert two == four

    def test_bullet_list(self):
        roots = _run(ListSynthesizer(), "- a\n  - b\n- c")
        assert [root.topic for root in roots] == ["a", "c"]
        assert _topics(roots[0]) == ["b"]

    def test_numbered_list_strips_markers(self):
        roots = _run(ListSynthesizer(), "1. Install\n2. Run\n   a. detail")
        assert [root.topic for root in roots] == ["Install", "Run"]
        assert _topics(roots[1]) == ["a. detail"]

    def test_outline(self):
        roots = _run(OutlineSynthesizer(), "I. Intro\nA. Scope\n1. Detail\nII. Methods")
        assert [root.topic for root in roots] == ["I. Intro", "II. Methods"]
        assert _topics(roots[0]) == ["A. Scope"]
        assert _topics(roots[0].children[0]) == ["1. Detail"]

    def test_outline_body_text_under_last_marker(self):
        roots = _run(OutlineSynthesizer(), "I. Intro\nSome notes\nA. Scope")
        assert _topics(roots[0]) == ["Some notes", "A. Scope"]

    def test_org_mode(self):
        roots = _run(OrgModeSynthesizer(), "#+TITLE: Notes\n* Top\nbody text\n** Child\n* Other")
        assert [root.topic for root in roots] == ["Top", "Other"]
        assert _topics(roots[0]) == ["body text", "Child"]

    def test_empty_raises(self):
        with pytest.raises(SynthesisError):
            _run(OrgModeSynthesizer(), "#+TITLE: only settings")


class TestMarkdownSynthesizer:
    def test_heading_levels(self):
        roots = _run(MarkdownSynthesizer(), "# A\n## B\n## C\n### D\n# E")
        assert [root.topic for root in roots] == ["A", "E"]
        assert _topics(roots[0]) == ["B", "C"]
        assert _topics(roots[0].children[1]) == ["D"]

    def test_lists_and_prose(self):
        text = "# Title\n- one\n  - nested\n- two\nSome **bold** text"
        roots = _run(MarkdownSynthesizer(), text)
        assert _topics(roots[0]) == ["one", "two", "Some bold text"]
        assert _topics(roots[0].children[0]) == ["nested"]

    def test_heading_after_list_attaches_to_heading(self):
        roots = _run(MarkdownSynthesizer(), "# A\n- item\n### Deep\ntext")
        assert _topics(roots[0]) == ["item", "Deep"]
        assert roots[0].children[0].is_leaf
        assert _topics(roots[0].children[1]) == ["text"]

    def test_fenced_code_dropped(self):
        roots = _run(MarkdownSynthesizer(), "# A\n```\ncode line\n# not a heading\n```\ntext")
        assert _topics(roots[0]) == ["text"]

    def test_rules_and_quotes(self):
        roots = _run(MarkdownSynthesizer(), "# A\n---\n> quoted line")
        assert _topics(roots[0]) == ["quoted line"]

    def test_heading_markup_stripped(self):
        roots = _run(MarkdownSynthesizer(), "# The [Plan](http://x.org)\n## **Goals**")
        assert roots[0].topic == "The Plan"
        assert _topics(roots[0]) == ["Goals"]


class TestChapterSectionSynthesizer:
    def test_chapters_and_sections(self, chapter_text):
        roots = _run(ChapterSectionSynthesizer(), chapter_text)
        root = roots[0]
        assert root.topic == "Report"
        assert _topics(root) == ["第一章 Intro", "第二章 Design"]
        assert _topics(root.children[0]) == ["1.1 Background", "1.2 Goals"]
        assert _topics(root.children[1]) == ["2.1 Architecture"]

    def test_orphan_section_attaches_to_root(self):
        root = _run(ChapterSectionSynthesizer(), "Report\n3.1 Orphan\n第一章 Intro\n1.1 Background")[0]
        assert _topics(root) == ["3.1 Orphan", "第一章 Intro"]

    def test_orphan_after_open_chapter_attaches_to_root(self):
        root = _run(ChapterSectionSynthesizer(), "Report\n第一章 Intro\n1.1 Background\n3.1 Orphan")[0]
        assert _topics(root) == ["第一章 Intro", "3.1 Orphan"]
        assert _topics(root.children[0]) == ["1.1 Background"]

    def test_list_item_after_new_chapter_stays_in_it(self):
        text = "Report\n第一章 Intro\n1.1 Background\n第二章 Design\n- new design note"
        root = _run(ChapterSectionSynthesizer(), text)[0]
        assert _topics(root.children[1]) == ["new design note"]
        assert root.children[0].children[0].is_leaf

    def test_list_item_follows_latest_section_of_chapter(self):
        text = "Report\n第一章 Intro\n第二章 Design\n2.1 Layout\n1.3 Late note\n- about it"
        root = _run(ChapterSectionSynthesizer(), text)[0]
        late = root.children[0].children[0]
        assert late.topic == "1.3 Late note"
        assert _topics(late) == ["about it"]

    def test_section_found_by_numeral(self):
        root = _run(ChapterSectionSynthesizer(), "Book\n第一章 A\n第二章 B\n1.1 Back to one")[0]
        assert _topics(root.children[0]) == ["1.1 Back to one"]
        assert root.children[1].is_leaf

    def test_roman_chapters(self):
        root = _run(ChapterSectionSynthesizer(), "Book\nChapter I Start\nChapter II Next\n2.1 Detail")[0]
        assert _topics(root.children[1]) == ["2.1 Detail"]

    def test_first_line_chapter_adopts_sections(self):
        root = _run(ChapterSectionSynthesizer(), "第一章 总览\n1.1 背景\n1.2 目标")[0]
        assert root.topic == "第一章 总览"
        assert _topics(root) == ["1.1 背景", "1.2 目标"]

    def test_list_items_go_to_latest_section(self):
        root = _run(ChapterSectionSynthesizer(), "Report\n第一章 Intro\n1.1 Background\n- detail")[0]
        assert _topics(root.children[0].children[0]) == ["detail"]

    def test_permissive_nests_subsections(self):
        text = "Report\n第一章 Intro\n1.1 Background\n1.1.1 History\n- note"
        root = _run(ChapterSectionSynthesizer(permissive=True), text)[0]
        section = root.children[0].children[0]
        assert _topics(section) == ["1.1.1 History"]
        assert _topics(section.children[0]) == ["note"]

    def test_strict_keeps_subsections_flat(self):
        text = "Report\n第一章 Intro\n1.1 Background\n1.1.1 History"
        root = _run(ChapterSectionSynthesizer(permissive=False), text)[0]
        assert _topics(root.children[0]) == ["1.1 Background", "1.1.1 History"]

    def test_single_line_raises(self):
        with pytest.raises(SynthesisError):
            _run(ChapterSectionSynthesizer(), "第一章 Alone")


class TestStructuredSynthesizers:
    def test_json_children_spliced(self):
        roots = _run(JsonSynthesizer(), '{"name": "root", "children": [{"name": "a"}, {"name": "b"}]}')
        assert roots[0].topic == "root"
        assert _topics(roots[0]) == ["a", "b"]
        assert all(child.is_leaf for child in roots[0].children)

    def test_json_scalars_and_nesting(self):
        text = '{"name": "Plan", "owner": "Ann", "done": false, "tags": ["a", "b"], "meta": {"id": 7}}'
        root = _run(JsonSynthesizer(), text)[0]
        assert root.topic == "Plan"
        assert _topics(root) == ["owner: Ann", "done: false", "tags", "meta: 7"]
        assert _topics(root.children[2]) == ["a", "b"]

    def test_json_array_root(self):
        root = _run(JsonSynthesizer(), '[{"topic": "x"}, {"value": null}]', title="List")[0]
        assert root.topic == "List"
        assert _topics(root) == ["x", "Item 2"]
        assert _topics(root.children[1]) == ["value: null"]

    def test_json_root_without_label(self):
        root = _run(JsonSynthesizer(), '{"a": 1}')[0]
        assert root.topic == "root"

    def test_malformed_json_raises(self):
        with pytest.raises(SynthesisError):
            _run(JsonSynthesizer(), '{"name": ')

    def test_top_level_scalar_raises(self):
        with pytest.raises(SynthesisError):
            _run(JsonSynthesizer(), "42")

    def test_depth_capped(self):
        text = '{"a": {"b": {"c": {"d": {"e": 1}}}}}'
        config = SynthesisConfig(max_depth=3)
        root = _run(JsonSynthesizer(), text, config=config)[0]
        assert root.depth() <= 3

    def test_yaml(self):
        root = _run(YamlSynthesizer(), "name: Project\nsteps:\n  - plan\n  - build")[0]
        assert root.topic == "Project"
        assert _topics(root) == ["steps"]
        assert _topics(root.children[0]) == ["plan", "build"]

    def test_xml_tags(self):
        root = _run(XmlSynthesizer(), "<plan><goal>Ship</goal><!-- note --><risk/></plan>")[0]
        assert root.id == "root"
        assert root.topic == "plan"
        assert _topics(root) == ["goal", "risk"]

    def test_xml_include_text(self):
        config = SynthesisConfig(xml_include_text=True)
        root = _run(XmlSynthesizer(), "<plan>Intro<goal>Ship</goal><risk/></plan>", config=config)[0]
        assert _topics(root) == ["Intro", "goal: Ship", "risk"]

    def test_xml_namespaces_stripped(self):
        root = _run(XmlSynthesizer(), "<a:root xmlns:a='urn:x'><a:child/></a:root>")[0]
        assert root.topic == "root"
        assert _topics(root) == ["child"]

    def test_malformed_xml_raises(self):
        with pytest.raises(SynthesisError):
            _run(XmlSynthesizer(), "<plan><goal></plan>")


class TestPathListSynthesizer:
    def test_shared_prefixes(self):
        roots = _run(PathListSynthesizer(), "a/b/c\na/b/d")
        assert len(roots) == 1
        assert roots[0].topic == "a"
        assert _topics(roots[0]) == ["b"]
        assert _topics(roots[0].children[0]) == ["c", "d"]
        assert roots[0].node_count() == 4

    def test_same_name_different_prefix(self):
        roots = _run(PathListSynthesizer(), "a/x\nb/x")
        assert [root.topic for root in roots] == ["a", "b"]

    def test_deep_paths_folded(self):
        config = SynthesisConfig(max_depth=3)
        root = _run(PathListSynthesizer(), "a/b/c/d/e", config=config)[0]
        assert root.depth() == 3
        assert _topics(root.children[0]) == ["c/d/e"]


class TestPlainSynthesizer:
    def test_parts(self):
        root = _run(PlainSynthesizer(), "Title\nl1\nl2\nl3\nl4")[0]
        assert root.topic == "Title"
        assert _topics(root) == ["Part 1", "Part 2"]
        assert _topics(root.children[0]) == ["l1", "l2", "l3"]
        assert _topics(root.children[1]) == ["l4"]

    def test_title_hint_keeps_first_line(self):
        root = _run(PlainSynthesizer(), "l1\nl2", title="Notes")[0]
        assert root.topic == "Notes"
        assert _topics(root.children[0]) == ["l1", "l2"]

    def test_single_line_raises(self):
        with pytest.raises(SynthesisError):
            _run(PlainSynthesizer(), "only line")


class TestDocumentHeuristicSynthesizer:
    def test_sections_from_titles(self, document_text):
        root = _run(DocumentHeuristicSynthesizer(), document_text)[0]
        assert root.topic == "Project Proposal"
        assert _topics(root) == ["Overview", "Background", "Implementation", "Summary"]
        assert all(len(section.children) == 1 for section in root.children)

    def test_title_description_subtopic(self):
        text = (
            "Report\n"
            "OVERVIEW\n"
            "Scope notes\n"
            "The scope covers the warehouse, the two regional depots and every delivery van. "
            "Vans are tracked hourly."
        )
        config = SynthesisConfig(heuristic=HeuristicConfig(max_sections=1))
        root = _run(DocumentHeuristicSynthesizer(), text, config=config)[0]
        assert _topics(root) == ["OVERVIEW"]
        subtopic = root.children[0].children[0]
        assert subtopic.topic == "Scope notes"
        assert len(subtopic.children) == 2

    def test_even_chunks_without_titles(self):
        body = "\n".join(f"line number {i} of the body text." for i in range(9))
        config = SynthesisConfig(heuristic=HeuristicConfig(min_title_score=100))
        root = _run(DocumentHeuristicSynthesizer(), "Doc\n" + body, config=config)[0]
        assert len(root.children) == 3
        assert all(len(chunk.children) == 2 for chunk in root.children)

    def test_score_title_rubric(self, document_text):
        ctx = SynthesisContext.from_text(document_text)
        keywords = HeuristicConfig().all_keywords()
        overview = score_title(ctx.corpus[1], keywords)
        description = score_title(ctx.corpus[2], keywords)
        assert overview.score == 7
        assert overview.keyword == "overview"
        assert description.score < 3

    def test_numbered_title_scores_high(self):
        ctx = SynthesisContext.from_text("1. Introduction")
        assert score_title(ctx.corpus[0], ()).score == 7

    def test_select_titles_capped_in_document_order(self):
        text = "\n".join(["ALPHA OVERVIEW", "beta", "GAMMA SUMMARY", "delta", "Epsilon"])
        ctx = SynthesisContext.from_text(text)
        titles = select_titles(list(ctx.corpus), HeuristicConfig(max_sections=2))
        assert [t.line.text for t in titles] == ["ALPHA OVERVIEW", "GAMMA SUMMARY"]

    def test_no_body_raises(self):
        with pytest.raises(SynthesisError):
            _run(DocumentHeuristicSynthesizer(), "Only a title")
