"""Terminal tree view of the dependency graph, grouped by layer."""

from __future__ import annotations

from dep_crawler.graph import DependencyGraph
from dep_crawler.models import Layer, Method

BRANCH = "├──"
LAST = "└──"
PIPE = "│   "
SPACE = "    "

EMPTY_MESSAGE = "No dependencies found."


def render_tree(
    graph: DependencyGraph,
    modules: bool = True,
    structures: bool = True,
    methods: bool = True,
) -> str:
    """Render the graph as text. Sections for disabled layers are left out."""
    if not len(graph):
        return EMPTY_MESSAGE + "\n"

    counts = graph.counts()
    lines = ["Dependencies by Layer", "=" * 26, ""]

    if modules:
        lines += ["Module Dependencies:", "-" * 17]
        for source in graph.sources():
            targets = graph.module_targets(source)
            if not targets:
                continue
            lines.append(f"  {source}")
            for i, target in enumerate(targets):
                lines.append(f"    {_branch(i, len(targets))} {target}")
        lines += [f"Total Module Dependencies: {counts[Layer.MODULE]}", ""]

    if structures:
        lines += ["Structure Dependencies:", "-" * 20]
        for structure in graph.structures():
            lines.append(f"  {structure.kind} {structure.name} (defined in {structure.defined_in})")
            if structure.dependencies:
                lines.append(f"    depends on: {structure.dependencies}")
            refs = graph.structure_references(structure)
            if refs:
                lines.append("    Referenced in:")
                for i, ref in enumerate(refs):
                    lines.append(f"      {_branch(i, len(refs))} {ref}")
        lines += [f"Total Structure Dependencies: {counts[Layer.STRUCTURE]}", ""]

    if methods:
        lines += ["Method Dependencies:", "-" * 17]
        for source in graph.sources():
            nodes = graph.nodes_for(source, Layer.METHOD)
            if not nodes:
                continue
            lines += [f"Method Dependencies for {source}:", "-" * 29]
            for node in nodes:
                _render_methods(node.methods, "  ", lines)
            lines.append("")
        lines += [f"Total Method Dependencies: {counts[Layer.METHOD]}", ""]

    total = sum(counts.values())
    lines.append(f"Total Dependencies: {total}")
    return "\n".join(lines) + "\n"


def _render_methods(methods: list[Method], indent: str, lines: list[str]) -> None:
    for i, method in enumerate(methods):
        is_last = i == len(methods) - 1
        lines.append(f"{indent}{_branch(i, len(methods))} {method.signature}")
        child_indent = indent + (SPACE if is_last else PIPE)

        sections: list[tuple[str, list[str]]] = []
        if method.calls:
            sections.append(("calls:", method.calls))
        if method.references:
            sections.append(("called by:", method.references))
        has_children = bool(method.children)

        for j, (header, items) in enumerate(sections):
            last_section = j == len(sections) - 1 and not has_children
            lines.append(f"{child_indent}{LAST if last_section else BRANCH} {header}")
            item_indent = child_indent + (SPACE if last_section else PIPE)
            for k, item in enumerate(items):
                lines.append(f"{item_indent}{_branch(k, len(items))} {item}")

        if has_children:
            _render_methods(method.children, child_indent, lines)


def _branch(index: int, count: int) -> str:
    return LAST if index == count - 1 else BRANCH
