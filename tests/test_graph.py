"""Tests for graph assembly, queries and teardown."""

import pytest

from dep_crawler.errors import ConsumedRecordError, OwnershipError
from dep_crawler.extractor import get_analyzer
from dep_crawler.graph import DependencyGraph
from dep_crawler.models import ExtractedDependency, Language, Layer, Method, Parameter, Structure
from dep_crawler.patterns import PatternLibrary


def _module(source, target):
    return ExtractedDependency(source, Layer.MODULE, Language.PYTHON, target=target)


def _methods(source, *methods):
    return ExtractedDependency(source, Layer.METHOD, Language.PYTHON, methods=list(methods))


def _merge_file(graph, library, path, text, language=Language.PYTHON):
    analyzer = get_analyzer(language)
    for record in analyzer.extract_modules(path, text, library):
        graph.merge(record)
    structures = analyzer.extract_structures(path, text, library)
    if structures is not None:
        graph.merge(structures)
    methods = analyzer.extract_methods(path, text, library)
    if methods is not None:
        graph.merge(methods)


def test_one_node_per_module_record():
    graph = DependencyGraph()
    for target in ("os", "sys", "json"):
        graph.merge(_module("a.py", target))
    assert len(graph) == 3
    assert graph.module_targets("a.py") == ["os", "sys", "json"]


def test_duplicate_import_is_not_repeated():
    graph = DependencyGraph()
    assert graph.merge(_module("a.py", "os")) is not None
    assert graph.merge(_module("a.py", "os")) is None
    assert len(graph) == 1


def test_merge_consumes_record():
    graph = DependencyGraph()
    record = _methods("a.py", Method(name="run", defined_in="a.py"))
    graph.merge(record)
    assert record.consumed
    with pytest.raises(ConsumedRecordError):
        graph.merge(record)


def test_layer_mismatch_is_rejected():
    graph = DependencyGraph()
    record = ExtractedDependency("a.py", Layer.MODULE, Language.PYTHON, methods=[Method(name="x")])
    with pytest.raises(ValueError):
        graph.merge(record)


def test_nodes_iterate_in_merge_order():
    graph = DependencyGraph()
    graph.merge(_module("a.py", "os"))
    graph.merge(_methods("b.py", Method(name="run", defined_in="b.py")))
    assert [n.source for n in graph] == ["a.py", "b.py"]
    assert [n.source for n in graph.newest_first()] == ["b.py", "a.py"]
    assert graph.sources() == ["a.py", "b.py"]


def test_method_node_counts_nested_methods():
    graph = DependencyGraph()
    outer = Method(name="outer", defined_in="a.py")
    outer.add_child(Method(name="inner", defined_in="a.py"))
    node = graph.merge(_methods("a.py", outer, Method(name="other", defined_in="a.py")))
    assert node.method_count == 3
    assert outer.owner is node
    assert graph.counts()[Layer.METHOD] == 3


def test_structure_records_extend_one_node():
    graph = DependencyGraph()
    first = ExtractedDependency("a.py", Layer.STRUCTURE, Language.PYTHON, structures=[Structure(name="A")])
    second = ExtractedDependency("a.py", Layer.STRUCTURE, Language.PYTHON, structures=[Structure(name="B")])
    graph.merge(first)
    graph.merge(second)
    (node,) = graph.nodes_for("a.py", Layer.STRUCTURE)
    assert [s.name for s in node.structures] == ["A", "B"]


def test_cross_file_calls_link_both_directions():
    library = PatternLibrary()
    graph = DependencyGraph()
    _merge_file(graph, library, "util.py", "def tidy(rows):\n    return normalize(rows)\n")
    _merge_file(graph, library, "core.py", "def normalize(x):\n    return x\n\ndef main():\n    tidy([])\n")

    (normalize,) = graph.find_methods("normalize")
    (tidy,) = graph.find_methods("tidy")
    assert normalize.references == ["util.py:tidy"]
    assert tidy.references == ["core.py:main"]


def test_structure_references():
    library = PatternLibrary()
    graph = DependencyGraph()
    _merge_file(graph, library, "base.py", "class Base:\n    pass\n")
    _merge_file(graph, library, "child.py", "from base import Base\n\nclass Child(Base):\n    pass\n")
    _merge_file(graph, library, "use.py", "def build(item: Base) -> None:\n    pass\n")
    _merge_file(graph, library, "other.py", "import Basement\n")

    (base,) = [s for s in graph.structures() if s.name == "Base"]
    assert graph.structure_references(base) == ["child.py", "use.py"]


def test_relationships_cover_every_layer():
    library = PatternLibrary()
    graph = DependencyGraph()
    _merge_file(graph, library, "a.py", "import os\n\nclass A(B):\n    pass\n\ndef run():\n    go()\n")

    rels = [(r.from_, r.to, r.type, r.layer) for r in graph.relationships().relationships]
    assert rels == [
        ("a.py", "os", "imports", 0),
        ("A", "B", "inherits", 1),
        ("run", "go", "calls", 2),
    ]


def test_release_counts_every_record_once():
    graph = DependencyGraph()
    graph.merge(_module("a.py", "os"))
    structure = Structure(name="S")
    structure.add_method(Method(name="m", parameters=[Parameter("x")]))
    graph.merge(ExtractedDependency("a.py", Layer.STRUCTURE, Language.PYTHON, structures=[structure]))
    outer = Method(name="outer", parameters=[Parameter("a"), Parameter("b")], references=["b.py:f"])
    outer.add_child(Method(name="inner"))
    graph.merge(_methods("a.py", outer))

    stats = graph.release()
    assert stats.nodes == 3
    assert stats.structures == 1
    assert stats.methods == 3
    assert stats.parameters == 3
    assert stats.references == 1
    assert len(graph) == 0
    assert structure.owner is None

    assert graph.release().total == 0


def test_release_detects_shared_record():
    graph = DependencyGraph()
    method = Method(name="shared")
    graph.merge(_methods("a.py", method))
    # simulate corruption: the same record reachable from two nodes
    graph.nodes[0].methods.append(method)
    with pytest.raises(OwnershipError):
        graph.release()
