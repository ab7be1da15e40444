"""GraphViz DOT rendering of relationships."""

from __future__ import annotations

from dep_crawler.models import RelationshipGraph


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def export_dot(relationships: RelationshipGraph) -> str:
    lines = ["digraph Dependencies {"]
    for rel in relationships.relationships:
        lines.append(f"  {_quote(rel.from_)} -> {_quote(rel.to)} [label={_quote(rel.type)}];")
    lines.append("}")
    return "\n".join(lines) + "\n"
