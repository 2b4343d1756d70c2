"""
Validation rules for synthesized trees.

Validators decide whether a candidate tree is good enough to return.
Issues with severity "error" reject the tree and the orchestrator moves on
to the next strategy; "warning" and "info" issues are reported only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field

from mindtree.models import FormatKind, MindMapNode

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"


@dataclass
class ValidationIssue:
    """A problem found in a candidate tree."""

    type: str  # "too_small", "no_children", "narrow", "duplicate_id", "deep"
    message: str
    severity: str  # "error", "warning", "info"
    node_ids: list[str] = field(default_factory=list)  # Affected node ids

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR


class ValidationRule(ABC):
    """Abstract base for validation rules."""

    name: str = "base"

    @abstractmethod
    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        """Check a tree for issues.

        Returns list of issues found (empty if all good).
        """
        pass


class MinimumNodeCountRule(ValidationRule):
    """A useful mind map has a root and at least a couple of topics."""

    name = "minimum_node_count"

    def __init__(self, min_nodes: int = 3):
        """Initialize rule.

        Args:
            min_nodes: Smallest acceptable total node count.
        """
        self.min_nodes = min_nodes

    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        count = root.node_count()
        if count >= self.min_nodes:
            return []
        return [
            ValidationIssue(
                type="too_small",
                message=f"Tree has {count} nodes (< {self.min_nodes})",
                severity=SEVERITY_ERROR,
                node_ids=[root.id],
            )
        ]


class RootHasChildrenRule(ValidationRule):
    name = "root_has_children"

    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        if root.children:
            return []
        return [
            ValidationIssue(
                type="no_children",
                message=f"Root '{root.topic}' has no children",
                severity=SEVERITY_ERROR,
                node_ids=[root.id],
            )
        ]


class TopLevelBreadthRule(ValidationRule):
    """
    Heuristic trees need at least two top-level topics.

    A document-heuristic tree with a single section usually means the title
    scoring latched onto one line; a different strategy does better.
    """

    name = "top_level_breadth"

    def __init__(
        self,
        min_breadth: int = 2,
        kinds: tuple[FormatKind, ...] = (FormatKind.DOCUMENT_HEURISTIC,),
    ):
        self.min_breadth = min_breadth
        self.kinds = kinds

    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        if kind not in self.kinds or len(root.children) >= self.min_breadth:
            return []
        return [
            ValidationIssue(
                type="narrow",
                message=f"{kind.value} tree has {len(root.children)} top-level "
                f"topics (< {self.min_breadth})",
                severity=SEVERITY_ERROR,
                node_ids=[root.id],
            )
        ]


class UniqueIdRule(ValidationRule):
    """Node ids must be unique across the whole tree."""

    name = "unique_id"

    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        counts = Counter(node.id for node in root.walk())
        duplicates = sorted(node_id for node_id, n in counts.items() if n > 1)
        if not duplicates:
            return []
        return [
            ValidationIssue(
                type="duplicate_id",
                message=f"Duplicate node ids: {', '.join(duplicates[:5])}",
                severity=SEVERITY_ERROR,
                node_ids=duplicates,
            )
        ]


class DepthRule(ValidationRule):
    """Flags very deep trees. Informational only."""

    name = "depth"

    def __init__(self, max_depth: int = 6):
        self.max_depth = max_depth

    def check(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        depth = root.depth()
        if depth <= self.max_depth + 1:
            return []
        return [
            ValidationIssue(
                type="deep",
                message=f"Tree is {depth} levels deep (> {self.max_depth + 1})",
                severity=SEVERITY_INFO,
                node_ids=[root.id],
            )
        ]


def default_rules(max_depth: int = 6) -> list[ValidationRule]:
    return [
        MinimumNodeCountRule(),
        RootHasChildrenRule(),
        TopLevelBreadthRule(),
        UniqueIdRule(),
        DepthRule(max_depth=max_depth),
    ]


class TreeValidator:
    """
    Runs a list of rules over a candidate tree.

    Usage:
        validator = TreeValidator()
        issues = validator.validate(root, FormatKind.MARKDOWN_HEADING)
        if validator.accepts(root, FormatKind.MARKDOWN_HEADING):
            ...
    """

    def __init__(self, rules: list[ValidationRule] | None = None):
        self.rules = rules if rules is not None else default_rules()

    def validate(self, root: MindMapNode, kind: FormatKind) -> list[ValidationIssue]:
        issues = []
        for rule in self.rules:
            issues.extend(rule.check(root, kind))
        return issues

    def accepts(self, root: MindMapNode, kind: FormatKind) -> bool:
        """True unless any rule reports an error."""
        return not any(issue.is_error for issue in self.validate(root, kind))
