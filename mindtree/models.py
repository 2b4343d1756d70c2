"""
Data models for MindTree.

These models represent the output of synthesis: a single-rooted, ordered
tree of MindMapNode objects wrapped in a MindMap result.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mindtree.validators import ValidationIssue


class FormatKind(Enum):
    """Structural family of an input text, as chosen by the classifier."""

    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    MARKDOWN_HEADING = "markdown_heading"
    BULLET_LIST = "bullet_list"
    NUMBERED_LIST = "numbered_list"
    OUTLINE = "outline"
    ORG_MODE = "org_mode"
    PATH_LIST = "path_list"
    CHAPTER_SECTION = "chapter_section"
    DOCUMENT_HEURISTIC = "document_heuristic"
    INDENTED = "indented"
    PLAIN = "plain"


@dataclass
class MindMapNode:
    """
    One node of a mind map.

    ``children`` order is display order. A node with no children is a leaf.
    ``id`` must be unique across the whole tree.
    """

    id: str
    topic: str
    children: list[MindMapNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator[MindMapNode]:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def depth(self) -> int:
        """Number of levels in the tree (a lone leaf has depth 1)."""
        if not self.children:
            return 1
        return 1 + max(child.depth() for child in self.children)

    def find(self, topic: str) -> MindMapNode | None:
        """Return the first node (pre-order) whose topic equals ``topic``."""
        for node in self.walk():
            if node.topic == topic:
                return node
        return None

    def shape(self) -> tuple:
        """Id-free structure, for comparing trees from separate runs."""
        return (self.topic, tuple(child.shape() for child in self.children))

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            ``{"id", "topic", "children"}`` with children converted recursively
        """
        return {
            "id": self.id,
            "topic": self.topic,
            "children": [child.to_dict() for child in self.children],
        }


def truncate_topic(text: str, max_length: int) -> str:
    """Collapse whitespace and cap display text at ``max_length`` characters."""
    collapsed = " ".join(text.split())
    if len(collapsed) <= max_length:
        return collapsed
    return collapsed[: max_length - 3].rstrip() + "..."


@dataclass
class NodeFactory:
    """
    Creates nodes with unique ids and length-capped topics.

    One factory is created per synthesis attempt, so ids are deterministic
    for a given input and no counter is shared between concurrent calls.

    Example:
        >>> ids = NodeFactory(max_topic_length=20)
        >>> ids.root("Report").id
        'root'
        >>> ids.create("A rather long topic that will be cut").topic
        'A rather long top...'
    """

    max_topic_length: int = 100
    _counter: int = field(default=0, init=False, repr=False)
    _root_issued: bool = field(default=False, init=False, repr=False)

    def create(self, topic: str, children: list[MindMapNode] | None = None) -> MindMapNode:
        self._counter += 1
        return MindMapNode(
            id=f"node-{self._counter}",
            topic=self._topic(topic),
            children=list(children or []),
        )

    def root(self, topic: str, children: list[MindMapNode] | None = None) -> MindMapNode:
        """Create the tree root; ``root`` is issued once, later calls get a counter id."""
        if self._root_issued:
            return self.create(topic, children)
        self._root_issued = True
        return MindMapNode(id="root", topic=self._topic(topic), children=list(children or []))

    def promote(self, node: MindMapNode) -> MindMapNode:
        """Give an already-created top node the ``root`` id if it is still free."""
        if not self._root_issued:
            self._root_issued = True
            node.id = "root"
        return node

    def _topic(self, topic: str) -> str:
        return truncate_topic(topic, self.max_topic_length) or "untitled"


@dataclass
class MindMap:
    """
    The main output type for users.

    Holds the accepted tree plus diagnostics about how it was produced.

    Example:
        >>> mindmap = mindtree.convert("# A\\n## B\\n## C")
        >>> mindmap.root.topic
        'A'
        >>> mindmap.format_kind
        <FormatKind.MARKDOWN_HEADING: 'markdown_heading'>
    """

    root: MindMapNode
    format_kind: FormatKind
    strategy: str

    # Diagnostics
    validation_issues: list[ValidationIssue] = field(default_factory=list)
    processing_log: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with the tree under ``"root"`` and run metadata
        """
        return {
            "root": self.root.to_dict(),
            "format": self.format_kind.value,
            "strategy": self.strategy,
            "warnings": self.warnings,
        }
