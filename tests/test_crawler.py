"""Tests for the filesystem crawler."""

import os
from pathlib import Path

import pytest

from dep_crawler.crawler import Crawler
from dep_crawler.errors import ExtractionError
from dep_crawler.extractor.base import BaseAnalyzer
from dep_crawler.graph import DependencyGraph
from dep_crawler.models import CrawlConfig, Language, Layer
from dep_crawler.patterns import PatternLibrary

FIXTURES = Path(__file__).parent / "fixtures" / "project"


@pytest.fixture
def library():
    return PatternLibrary().initialize()


def _crawler(library, **config):
    return Crawler(CrawlConfig(**config), library, DependencyGraph())


def test_crawl_fixture_project(library):
    crawler = _crawler(library, roots=[FIXTURES])
    stats = crawler.crawl()

    sources = {Path(s).name for s in crawler.graph.sources()}
    assert sources == {
        "util.py", "sample.cpp", "sample.go", "sample.java", "sample.js",
        "sample.php", "sample.py", "sample.rb", "sample.rs",
    }
    assert stats.files_processed == 9
    assert stats.files_skipped == 3  # Makefile, config.json, notes.txt
    assert stats.directories_visited == 2
    assert stats.paths_failed == 0


def test_crawl_order_is_sorted(library):
    crawler = _crawler(library, roots=[FIXTURES])
    crawler.crawl()
    names = [Path(s).name for s in crawler.graph.sources()]
    assert names[0] == "util.py"
    assert names[1:] == sorted(names[1:])


def test_cross_file_reference_from_nested_directory(library):
    crawler = _crawler(library, roots=[FIXTURES])
    crawler.crawl()
    (normalize,) = crawler.graph.find_methods("normalize")
    util = str(FIXTURES / "lib" / "util.py")
    assert f"{util}:tidy" in normalize.references


def test_structure_dependencies_are_resolved(tmp_path, library):
    (tmp_path / "a.rs").write_text("use Base;\n\ntrait Derived: Base {\n}\n")
    crawler = _crawler(library, roots=[tmp_path])
    crawler.crawl()
    (derived,) = crawler.graph.structures()
    path = str(tmp_path / "a.rs")
    assert derived.dependencies == f"{path}:Base"
    assert derived.provenance == path


def test_max_depth_limits_descent(library):
    crawler = _crawler(library, roots=[FIXTURES], max_depth=0)
    crawler.crawl()
    names = {Path(s).name for s in crawler.graph.sources()}
    assert "util.py" not in names
    assert "sample.py" in names


def test_hidden_and_skipped_directories(tmp_path, library):
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "secret.py").write_text("import os\n")
    (tmp_path / "vendor").mkdir()
    (tmp_path / "vendor" / "dep.py").write_text("import os\n")
    (tmp_path / "main.py").write_text("import sys\n")

    crawler = _crawler(library, roots=[tmp_path])
    crawler.crawl()
    assert [Path(s).name for s in crawler.graph.sources()] == ["main.py"]


def test_custom_skip_dirs(tmp_path, library):
    (tmp_path / "gen").mkdir()
    (tmp_path / "gen" / "out.py").write_text("import os\n")
    crawler = _crawler(library, roots=[tmp_path], skip_dirs=["gen"])
    crawler.crawl()
    assert len(crawler.graph) == 0


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlink_loop_terminates(tmp_path, library):
    pkg = tmp_path / "pkg"
    pkg.mkdir()
    (pkg / "mod.py").write_text("import os\n")
    try:
        os.symlink(tmp_path, pkg / "loop")
    except OSError:
        pytest.skip("cannot create symlink")

    crawler = _crawler(library, roots=[tmp_path])
    stats = crawler.crawl()
    assert stats.files_processed == 1
    assert len(crawler.graph) == 1


def test_explicit_file_root_uses_fallback_language(tmp_path, library):
    script = tmp_path / "build.gradle"
    script.write_text("use std::fs;\n")
    crawler = _crawler(library, roots=[script])
    crawler.crawl()
    assert crawler.graph.module_targets(str(script)) == ["std::fs"]


def test_explicit_json_root_is_skipped(library):
    crawler = _crawler(library, roots=[FIXTURES / "config.json"])
    stats = crawler.crawl()
    assert stats.files_skipped == 1
    assert len(crawler.graph) == 0


def test_missing_root_is_logged_and_skipped(tmp_path, library, caplog):
    crawler = _crawler(library, roots=[tmp_path / "nope", FIXTURES / "sample.go"])
    stats = crawler.crawl()
    assert stats.paths_failed == 1
    assert stats.files_processed == 1
    assert "Cannot access" in caplog.text


def test_disabled_layers(library):
    crawler = _crawler(
        library, roots=[FIXTURES / "sample.py"],
        analyze_structures=False, analyze_methods=False,
    )
    crawler.crawl()
    assert {n.layer for n in crawler.graph} == {Layer.MODULE}


def test_failed_file_contributes_nothing(tmp_path, library, monkeypatch):
    (tmp_path / "a.py").write_text("import os\n")
    (tmp_path / "b.py").write_text("import sys\n\ndef broken():\n    pass\n")

    original = BaseAnalyzer.extract_methods

    def failing(self, file_path, text, lib):
        if file_path.endswith("b.py"):
            raise ExtractionError("boom")
        return original(self, file_path, text, lib)

    monkeypatch.setattr(BaseAnalyzer, "extract_methods", failing)
    crawler = _crawler(library, roots=[tmp_path])
    stats = crawler.crawl()

    assert [Path(s).name for s in crawler.graph.sources()] == ["a.py"]
    assert stats.paths_failed == 1
    assert stats.files_processed == 1


def test_default_language_is_configurable(tmp_path, library):
    script = tmp_path / "tool.unknown"
    script.write_text("import os\n")
    crawler = _crawler(library, roots=[script], default_language=Language.PYTHON)
    crawler.crawl()
    assert crawler.graph.module_targets(str(script)) == ["os"]


def test_file_reached_twice_is_merged_once(tmp_path, library):
    (tmp_path / "a.py").write_text("class A:\n    def run(self):\n        pass\n")
    crawler = _crawler(library, roots=[tmp_path, tmp_path / "a.py"])
    stats = crawler.crawl()

    assert [s.name for s in crawler.graph.structures()] == ["A"]
    assert [m.name for m in crawler.graph.methods()] == ["run"]
    assert stats.files_processed == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_file_symlink_is_merged_once(tmp_path, library):
    (tmp_path / "a.py").write_text("def run():\n    pass\n")
    try:
        os.symlink(tmp_path / "a.py", tmp_path / "b.py")
    except OSError:
        pytest.skip("cannot create symlink")

    crawler = _crawler(library, roots=[tmp_path])
    stats = crawler.crawl()
    assert stats.files_processed == 1
    assert [m.name for m in crawler.graph.methods()] == ["run"]
