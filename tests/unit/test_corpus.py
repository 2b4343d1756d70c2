"""Tests for LineCorpus construction."""

from mindtree.corpus import LineCorpus


class TestLineCorpus:
    def test_skips_blank_lines(self):
        corpus = LineCorpus.from_text("Title\n\n\nBody\n")
        assert corpus.texts == ["Title", "Body"]
        assert [line.position for line in corpus] == [0, 1]
        assert [line.line_number for line in corpus] == [0, 3]

    def test_indent_widths(self):
        corpus = LineCorpus.from_text("root\n  two\n\tfour\n\t  six")
        assert [line.indent for line in corpus] == [0, 2, 4, 6]
        assert corpus.indent_levels() == [2, 4, 6]

    def test_blank_adjacency(self):
        corpus = LineCorpus.from_text("Title\n\nSection\nBody")
        assert corpus[0].blank_after
        assert not corpus[0].blank_before
        assert corpus[1].blank_before
        assert corpus[1].adjacent_to_blank
        assert not corpus[2].adjacent_to_blank

    def test_crlf_normalized(self):
        corpus = LineCorpus.from_text("a\r\nb\rc")
        assert corpus.texts == ["a", "b", "c"]

    def test_empty(self):
        corpus = LineCorpus.from_text("  \n\t\n")
        assert corpus.is_empty
        assert len(corpus) == 0
        assert corpus.first_text("empty") == "empty"

    def test_raw_preserved(self):
        text = "  Title\n- item"
        corpus = LineCorpus.from_text(text)
        assert corpus.raw == text
        assert corpus.first_text() == "Title"
