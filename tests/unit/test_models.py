"""
Tests for core data models.

Covers MindMapNode traversal and serialization, NodeFactory id
allocation and topic capping, and MindMap serialization.
"""

from mindtree.models import FormatKind, MindMap, MindMapNode, NodeFactory, truncate_topic


def _sample_tree() -> MindMapNode:
    return MindMapNode(
        id="root",
        topic="A",
        children=[
            MindMapNode(
                id="node-1",
                topic="B",
                children=[MindMapNode(id="node-2", topic="C")],
            ),
            MindMapNode(id="node-3", topic="D"),
        ],
    )


class TestMindMapNode:
    """Tests for MindMapNode."""

    def test_leaf(self):
        node = MindMapNode(id="x", topic="Leaf")
        assert node.is_leaf
        assert node.depth() == 1
        assert node.node_count() == 1

    def test_walk_is_preorder(self):
        assert [node.topic for node in _sample_tree().walk()] == ["A", "B", "C", "D"]

    def test_counts_and_depth(self):
        tree = _sample_tree()
        assert tree.node_count() == 4
        assert tree.depth() == 3

    def test_find(self):
        tree = _sample_tree()
        assert tree.find("C").id == "node-2"
        assert tree.find("missing") is None

    def test_shape_ignores_ids(self):
        tree = _sample_tree()
        other = _sample_tree()
        for node in other.walk():
            node.id = f"other-{node.id}"
        assert tree.shape() == other.shape()
        assert tree.shape() == ("A", (("B", (("C", ()),)), ("D", ())))

    def test_to_dict(self):
        data = _sample_tree().to_dict()
        assert data["id"] == "root"
        assert data["topic"] == "A"
        assert [child["topic"] for child in data["children"]] == ["B", "D"]
        assert data["children"][1]["children"] == []


class TestTruncateTopic:
    def test_short_text_unchanged(self):
        assert truncate_topic("Goals", 10) == "Goals"

    def test_whitespace_collapsed(self):
        assert truncate_topic("  many   spaces\there ", 50) == "many spaces here"

    def test_long_text_cut_with_ellipsis(self):
        result = truncate_topic("abcdefghijklmnop", 10)
        assert result == "abcdefg..."
        assert len(result) == 10

    def test_exact_length_unchanged(self):
        assert truncate_topic("abcdefghij", 10) == "abcdefghij"


class TestNodeFactory:
    """Tests for NodeFactory id allocation."""

    def test_sequential_ids(self):
        factory = NodeFactory()
        assert [factory.create(t).id for t in "abc"] == ["node-1", "node-2", "node-3"]

    def test_root_issued_once(self):
        factory = NodeFactory()
        first = factory.root("Report")
        second = factory.root("Another")
        assert first.id == "root"
        assert second.id == "node-1"

    def test_promote_takes_free_root_id(self):
        factory = NodeFactory()
        top = factory.create("Top")
        assert factory.promote(top).id == "root"
        assert factory.root("Later").id == "node-2"

    def test_promote_keeps_id_once_root_issued(self):
        factory = NodeFactory()
        factory.root("Report")
        node = factory.create("Child")
        assert factory.promote(node).id == "node-1"

    def test_empty_topic_becomes_untitled(self):
        assert NodeFactory().create("   ").topic == "untitled"

    def test_topic_capped(self):
        node = NodeFactory(max_topic_length=20).create("A rather long topic that will be cut")
        assert node.topic == "A rather long top..."

    def test_children_copied(self):
        factory = NodeFactory()
        children = [factory.create("child")]
        parent = factory.create("parent", children)
        children.append(factory.create("later"))
        assert len(parent.children) == 1

    def test_factories_do_not_share_counters(self):
        assert NodeFactory().create("a").id == NodeFactory().create("b").id


class TestMindMap:
    def test_to_dict(self):
        mindmap = MindMap(
            root=_sample_tree(),
            format_kind=FormatKind.OUTLINE,
            strategy="outline",
            warnings=["No structure detected"],
        )
        data = mindmap.to_dict()
        assert data["format"] == "outline"
        assert data["strategy"] == "outline"
        assert data["root"]["topic"] == "A"
        assert data["warnings"] == ["No structure detected"]

    def test_diagnostics_default_empty(self):
        mindmap = MindMap(root=_sample_tree(), format_kind=FormatKind.PLAIN, strategy="plain")
        assert mindmap.validation_issues == []
        assert mindmap.processing_log == []
        assert mindmap.warnings == []
