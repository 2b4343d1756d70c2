"""
Structured-data synthesizers: JSON, YAML and XML.

Deserialized JSON/YAML is first converted to a small tagged variant
(Scalar | Array | Object) and then walked with ``match``, so every shape
is handled in one place instead of scattered isinstance checks.

Walk rules:
- ``name`` / ``topic`` / ``id`` (in that priority) label an object's node
  and the chosen key is not emitted again as a child.
- ``children`` / ``items`` / ``nodes`` / ``subtopics`` arrays are spliced
  directly under the labelled node.
- Other complex values become a node named after their key.
- Scalars become ``"key: value"`` leaves.
- Array elements are labelled by their identifying field, else ``Item N``.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Union

import yaml

from mindtree.exceptions import SynthesisError
from mindtree.models import FormatKind, MindMapNode, NodeFactory
from mindtree.synthesizers.base import SynthesisContext, Synthesizer

logger = logging.getLogger(__name__)

LABEL_KEYS = ("name", "topic", "id")
CHILD_KEYS = frozenset({"children", "items", "nodes", "subtopics"})
DEFAULT_ROOT_TOPIC = "root"


# =============================================================================
# TAGGED VALUES
# =============================================================================


@dataclass(frozen=True)
class Scalar:
    value: Any


@dataclass(frozen=True)
class Array:
    items: tuple[Value, ...]


@dataclass(frozen=True)
class Object:
    entries: tuple[tuple[str, Value], ...]

    def get(self, key: str) -> Value | None:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return None


Value = Union[Scalar, Array, Object]


def to_value(data: Any) -> Value:
    """Convert deserialized JSON/YAML data into the tagged variant."""
    if isinstance(data, dict):
        return Object(tuple((str(key), to_value(value)) for key, value in data.items()))
    if isinstance(data, (list, tuple)):
        return Array(tuple(to_value(item) for item in data))
    return Scalar(data)


def format_scalar(value: Any) -> str:
    """Render a scalar the way JSON would spell it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# WALK
# =============================================================================


class _Walker:
    def __init__(self, factory: NodeFactory, max_depth: int):
        self.factory = factory
        self.max_depth = max_depth

    def root(self, value: Value, title: str | None) -> MindMapNode:
        match value:
            case Object():
                label_key, label = self._label(value)
                node = self.factory.root(label or title or DEFAULT_ROOT_TOPIC)
                node.children.extend(self._object_children(value, label_key, depth=1))
                return node
            case Array(items):
                node = self.factory.root(title or DEFAULT_ROOT_TOPIC)
                node.children.extend(self._elements(items, depth=1))
                return node
            case Scalar(raw):
                raise SynthesisError(f"structured: top-level scalar {format_scalar(raw)!r}")

    def _object_children(
        self, obj: Object, label_key: str | None, depth: int
    ) -> list[MindMapNode]:
        if depth >= self.max_depth:
            return []
        children = []
        for key, value in obj.entries:
            if key == label_key:
                continue
            match value:
                case Scalar(raw):
                    children.append(self.factory.create(f"{key}: {format_scalar(raw)}"))
                case Array(items) if key in CHILD_KEYS:
                    children.extend(self._elements(items, depth))
                case Array(items):
                    node = self.factory.create(key)
                    node.children.extend(self._elements(items, depth + 1))
                    children.append(node)
                case Object():
                    nested_key, label = self._label(value)
                    node = self.factory.create(f"{key}: {label}" if label else key)
                    node.children.extend(self._object_children(value, nested_key, depth + 1))
                    children.append(node)
        return children

    def _elements(self, items: tuple[Value, ...], depth: int) -> list[MindMapNode]:
        if depth >= self.max_depth:
            return []
        nodes = []
        for index, item in enumerate(items, start=1):
            match item:
                case Scalar(raw):
                    nodes.append(self.factory.create(format_scalar(raw)))
                case Object():
                    label_key, label = self._label(item)
                    node = self.factory.create(label or f"Item {index}")
                    node.children.extend(self._object_children(item, label_key, depth + 1))
                    nodes.append(node)
                case Array(nested):
                    node = self.factory.create(f"Item {index}")
                    node.children.extend(self._elements(nested, depth + 1))
                    nodes.append(node)
        return nodes

    @staticmethod
    def _label(obj: Object) -> tuple[str | None, str | None]:
        """First identifying scalar field, as ``(key, text)``."""
        for key in LABEL_KEYS:
            value = obj.get(key)
            if isinstance(value, Scalar) and value.value is not None:
                text = format_scalar(value.value).strip()
                if text:
                    return key, text
        return None, None


# =============================================================================
# SYNTHESIZERS
# =============================================================================


class JsonSynthesizer(Synthesizer):
    """JSON documents. Malformed JSON raises and the next candidate is tried."""

    name = "json"
    kinds = (FormatKind.JSON,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        try:
            data = json.loads(ctx.text)
        except ValueError as e:
            raise SynthesisError(f"json: {e}") from e
        walker = _Walker(ctx.factory, ctx.config.max_depth)
        return [walker.root(to_value(data), ctx.title)]


class YamlSynthesizer(Synthesizer):
    """YAML mappings and sequences, walked like JSON."""

    name = "yaml"
    kinds = (FormatKind.YAML,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        try:
            data = yaml.safe_load(ctx.text)
        except yaml.YAMLError as e:
            raise SynthesisError(f"yaml: {e}") from e
        walker = _Walker(ctx.factory, ctx.config.max_depth)
        return [walker.root(to_value(data), ctx.title)]


class XmlSynthesizer(Synthesizer):
    """
    XML: each element becomes a node named after its local tag.

    Element text and attributes are dropped unless
    ``SynthesisConfig.xml_include_text`` is set, in which case text becomes
    ``"tag: text"`` for leaf elements and a leading child otherwise.
    """

    name = "xml"
    kinds = (FormatKind.XML,)

    def synthesize(self, ctx: SynthesisContext) -> list[MindMapNode]:
        try:
            element = ET.fromstring(ctx.text.strip())
        except ET.ParseError as e:
            raise SynthesisError(f"xml: {e}") from e
        include_text = ctx.config.xml_include_text
        return [self._element_node(element, ctx, include_text, depth=0)]

    def _element_node(
        self, element: ET.Element, ctx: SynthesisContext, include_text: bool, depth: int
    ) -> MindMapNode:
        tag = _local_name(element.tag)
        text = (element.text or "").strip() if include_text else ""
        children = list(element) if depth + 1 < ctx.config.max_depth else []

        if text and not children:
            topic = f"{tag}: {text}"
        else:
            topic = tag
        node = ctx.factory.root(topic) if depth == 0 else ctx.factory.create(topic)

        if text and children:
            node.children.append(ctx.factory.create(text))
        for child in children:
            if not isinstance(child.tag, str):
                # Comments and processing instructions
                continue
            node.children.append(self._element_node(child, ctx, include_text, depth + 1))
        return node


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix."""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag
