"""Exporter layer: terminal tree, DOT and JSON renderings of a graph."""

from __future__ import annotations

import logging
from pathlib import Path

from dep_crawler.exporter.dot_exporter import export_dot
from dep_crawler.exporter.json_exporter import export_json
from dep_crawler.exporter.tree_printer import render_tree
from dep_crawler.graph import DependencyGraph

logger = logging.getLogger(__name__)

DOT_FORMATS = ("dot", "graphviz")
JSON_FORMATS = ("json",)


def export_graph(graph: DependencyGraph, fmt: str, **tree_options: bool) -> str:
    """Render *graph* as DOT, JSON or, for any other format, the terminal tree."""
    fmt = (fmt or "").lower()
    if fmt in DOT_FORMATS:
        return export_dot(graph.relationships())
    if fmt in JSON_FORMATS:
        return export_json(graph.relationships())
    return render_tree(graph, **tree_options)


def write_export(text: str, output_file: Path) -> Path:
    """Write rendered output to *output_file*, creating parent directories."""
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", output_file)
    return output_file


__all__ = ["DOT_FORMATS", "JSON_FORMATS", "export_dot", "export_graph", "export_json", "render_tree", "write_export"]
