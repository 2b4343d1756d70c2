#!/usr/bin/env python3
"""
Basic MindTree Usage Example

This example demonstrates the core workflow:
1. Convert structured text (Markdown, outlines, JSON) to a mind map
2. Inspect how the tree was produced
3. Tune synthesis with a custom configuration
4. Group unstructured prose with semantic clustering
5. Export to JSON for a mind-map renderer
"""

import json
from pathlib import Path

from mindtree import convert
from mindtree.config import ClusteringConfig, SynthesisConfig


def print_tree(node, indent=0):
    print("  " * indent + f"- {node.topic}")
    for child in node.children:
        print_tree(child, indent + 1)


def main():
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Conversion
    # ─────────────────────────────────────────────────────────────────────────

    report = """Project Report
第一章 Introduction
1.1 Background
1.2 Goals
- ship the first release
第二章 Design
2.1 Architecture
"""
    mindmap = convert(report)

    print(f"Format: {mindmap.format_kind.value}")
    print(f"  Strategy: {mindmap.strategy}")
    print(f"  Nodes: {mindmap.root.node_count()}")
    print_tree(mindmap.root)

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Inspect the Cascade
    # ─────────────────────────────────────────────────────────────────────────

    # Malformed JSON is rejected and the next candidate family is tried
    mindmap = convert('{"name": "Plan",\n"children": [')
    for entry in mindmap.processing_log:
        print(f"  {entry}")
    for issue in mindmap.validation_issues:
        print(f"  [{issue.severity}] {issue.type}: {issue.message}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Custom Configuration
    # ─────────────────────────────────────────────────────────────────────────

    config = SynthesisConfig(
        max_depth=4,  # Cap tree depth
        max_topic_length=60,  # Shorter node labels
        xml_include_text=True,  # Keep element text for XML input
        time_budget_s=2.0,  # Stop trying strategies after 2 seconds
    )

    mindmap = convert("<plan><goal>Ship</goal><risk>Scope creep</risk></plan>", config=config)
    print_tree(mindmap.root)

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Semantic Clustering
    # ─────────────────────────────────────────────────────────────────────────

    from mindtree.clustering import HashingEmbeddingProvider

    essay = "\n\n".join(
        [
            "The astronomy club watched the comet drift slowly across the northern sky.",
            "Good cooking starts with fresh vegetables and a patient hand at the stove.",
            "Modern astronomy relies on large telescopes that collect faint light.",
            "Slow cooking turns tough cuts of meat into tender stews over several hours.",
        ]
    )

    # Offline provider; OpenAIEmbeddingProvider/OpenAISummarizer need mindtree[openai]
    mindmap = convert(
        essay,
        title="Hobbies",
        config=SynthesisConfig(clustering=ClusteringConfig(max_clusters=4)),
        embedder=HashingEmbeddingProvider(),
    )
    print(f"Strategy: {mindmap.strategy}")
    print_tree(mindmap.root)

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Export
    # ─────────────────────────────────────────────────────────────────────────

    output = Path("output/mindmap.json")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(mindmap.to_dict(), ensure_ascii=False, indent=2))
    print(f"Saved to {output}")


def batch_conversion_example():
    """Convert every text file in a directory."""
    from mindtree import convert_batch

    paths = sorted(Path("notes/").glob("*.txt"))
    texts = [path.read_text(encoding="utf-8") for path in paths]

    for path, mindmap in zip(paths, convert_batch(texts, parallel=True)):
        print(f"{path.name}: {mindmap.format_kind.value}, {mindmap.root.node_count()} nodes")


def openai_example():
    """Semantic clustering with OpenAI embeddings and cluster titles."""
    from mindtree.clustering import OpenAIEmbeddingProvider, OpenAISummarizer

    text = Path("notes/meeting.txt").read_text(encoding="utf-8")
    mindmap = convert(
        text,
        embedder=OpenAIEmbeddingProvider(),  # Reads OPENAI_API_KEY
        summarizer=OpenAISummarizer(),
    )
    print_tree(mindmap.root)


if __name__ == "__main__":
    main()
