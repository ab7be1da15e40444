"""Dependency graph: owns every node merged from extracted records."""

from __future__ import annotations

import logging
import re
from typing import Iterator

from dep_crawler.errors import ConsumedRecordError
from dep_crawler.models import (
    Dependency,
    ExtractedDependency,
    Layer,
    Method,
    Relationship,
    RelationshipGraph,
    ReleaseStats,
    Structure,
)

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Insertion-ordered nodes plus an index keyed by (source, layer).

    Nodes iterate in merge order. ``newest_first()`` yields them the other
    way round. A graph-wide method index links calls across files as
    METHOD records arrive.
    """

    def __init__(self) -> None:
        self._nodes: list[Dependency] = []
        self._index: dict[tuple[str, Layer], list[Dependency]] = {}
        self._module_edges: set[tuple[str, str]] = set()
        self._methods_by_name: dict[str, list[Method]] = {}
        self._callers_by_callee: dict[str, list[Method]] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self._nodes)

    @property
    def nodes(self) -> list[Dependency]:
        return list(self._nodes)

    def newest_first(self) -> list[Dependency]:
        return list(reversed(self._nodes))

    # ── Merging ───────────────────────────────────────────────

    def merge(self, extracted: ExtractedDependency) -> Dependency | None:
        """Move *extracted* into the graph. Returns the node that received it.

        MODULE records become one node per (source, target); a repeat of an
        existing pair returns None. STRUCTURE and METHOD records extend the
        file's single node for that layer.
        """
        if extracted.consumed:
            raise ConsumedRecordError(
                f"{extracted.layer.name} record for {extracted.file_path} was already consumed"
            )
        self._check_layer(extracted)

        if extracted.layer is Layer.MODULE:
            return self._merge_module(extracted)
        if extracted.layer is Layer.STRUCTURE:
            structures = extracted.take_structures()
            node = self._node_for(extracted)
            node.adopt_structures(structures)
            return node

        methods = extracted.take_methods()
        node = self._node_for(extracted)
        node.adopt_methods(methods)
        self._link_calls(extracted.file_path, methods)
        return node

    def _merge_module(self, extracted: ExtractedDependency) -> Dependency | None:
        key = (extracted.file_path, extracted.target or "")
        extracted.consume()
        if key in self._module_edges:
            logger.debug("Duplicate import %s -> %s", *key)
            return None
        self._module_edges.add(key)
        node = Dependency(
            source=extracted.file_path,
            layer=Layer.MODULE,
            language=extracted.language,
            target=extracted.target,
        )
        self._append(node)
        return node

    def _node_for(self, extracted: ExtractedDependency) -> Dependency:
        existing = self._index.get((extracted.file_path, extracted.layer))
        if existing:
            return existing[0]
        node = Dependency(
            source=extracted.file_path,
            layer=extracted.layer,
            language=extracted.language,
        )
        self._append(node)
        return node

    def _append(self, node: Dependency) -> None:
        self._nodes.append(node)
        self._index.setdefault((node.source, node.layer), []).append(node)

    @staticmethod
    def _check_layer(extracted: ExtractedDependency) -> None:
        has_structures = bool(extracted.structures)
        has_methods = bool(extracted.methods)
        layer = extracted.layer
        if layer is Layer.MODULE and (has_structures or has_methods or not extracted.target):
            raise ValueError(f"MODULE record for {extracted.file_path} must carry only a target")
        if layer is Layer.STRUCTURE and has_methods:
            raise ValueError(f"STRUCTURE record for {extracted.file_path} holds methods")
        if layer is Layer.METHOD and has_structures:
            raise ValueError(f"METHOD record for {extracted.file_path} holds structures")

    def _link_calls(self, file_path: str, methods: list[Method]) -> None:
        """Add back-references for calls between this file and earlier ones."""
        new = [m for top in methods for m in top.walk()]

        for caller in new:
            for callee in caller.calls:
                for target in self._methods_by_name.get(callee, ()):
                    if target.defined_in != file_path:
                        target.add_reference(f"{file_path}:{caller.name}")

        for target in new:
            for caller in self._callers_by_callee.get(target.name, ()):
                if caller.defined_in != file_path:
                    target.add_reference(f"{caller.defined_in}:{caller.name}")

        for method in new:
            self._methods_by_name.setdefault(method.name, []).append(method)
            for callee in method.calls:
                self._callers_by_callee.setdefault(callee, []).append(method)

    # ── Queries ───────────────────────────────────────────────

    def sources(self) -> list[str]:
        """Distinct source files in first-seen order."""
        seen: dict[str, None] = {}
        for node in self._nodes:
            seen.setdefault(node.source, None)
        return list(seen)

    def nodes_for(self, source: str, layer: Layer) -> list[Dependency]:
        return list(self._index.get((source, layer), ()))

    def module_targets(self, source: str) -> list[str]:
        return [n.target for n in self.nodes_for(source, Layer.MODULE) if n.target]

    def structures(self) -> list[Structure]:
        return [s for n in self._nodes if n.layer is Layer.STRUCTURE for s in n.structures]

    def methods(self) -> list[Method]:
        """Every METHOD-layer method, nested ones included."""
        return [
            m
            for n in self._nodes
            if n.layer is Layer.METHOD
            for top in n.methods
            for m in top.walk()
        ]

    def find_methods(self, name: str) -> list[Method]:
        return list(self._methods_by_name.get(name, ()))

    def structure_references(self, structure: Structure) -> list[str]:
        """Files other than the defining one that mention the structure's name."""
        word = re.compile(r"(?<![\w$])" + re.escape(structure.name) + r"(?![\w$])")
        found: dict[str, None] = {}
        for node in self._nodes:
            if node.source == structure.defined_in or node.source in found:
                continue
            if node.layer is Layer.MODULE:
                hit = bool(node.target and word.search(node.target))
            elif node.layer is Layer.STRUCTURE:
                hit = any(s.dependencies and word.search(s.dependencies) for s in node.structures)
            else:
                hit = any(word.search(m.signature) for top in node.methods for m in top.walk())
            if hit:
                found[node.source] = None
        return list(found)

    def counts(self) -> dict[Layer, int]:
        """Modules: import edges. Structures and methods: declarations."""
        return {
            Layer.MODULE: sum(1 for n in self._nodes if n.layer is Layer.MODULE),
            Layer.STRUCTURE: len(self.structures()),
            Layer.METHOD: sum(n.method_count for n in self._nodes if n.layer is Layer.METHOD),
        }

    # ── Projection ────────────────────────────────────────────

    def relationships(self) -> RelationshipGraph:
        rels: list[Relationship] = []
        for node in self._nodes:
            if node.layer is Layer.MODULE and node.target:
                rels.append(_relationship(node.source, node.target, Layer.MODULE))
            elif node.layer is Layer.STRUCTURE:
                for structure in node.structures:
                    if structure.dependencies:
                        rels.append(_relationship(structure.name, structure.dependencies, Layer.STRUCTURE))
            elif node.layer is Layer.METHOD:
                for top in node.methods:
                    for method in top.walk():
                        for callee in method.calls:
                            rels.append(_relationship(method.name, callee, Layer.METHOD))
        return RelationshipGraph(relationships=rels)

    # ── Teardown ──────────────────────────────────────────────

    def release(self) -> ReleaseStats:
        """Drop every node and everything it owns in one pass."""
        stats = ReleaseStats()
        seen: set[int] = set()
        for node in self._nodes:
            node.release(stats, seen)
        self._nodes.clear()
        self._index.clear()
        self._module_edges.clear()
        self._methods_by_name.clear()
        self._callers_by_callee.clear()
        logger.debug(
            "Released %d nodes, %d structures, %d methods",
            stats.nodes, stats.structures, stats.methods,
        )
        return stats


def _relationship(source: str, target: str, layer: Layer) -> Relationship:
    return Relationship(
        from_=source,
        to=target,
        type=layer.relationship_type,
        layer=int(layer),
    )
