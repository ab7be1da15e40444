"""Tests for extension classification."""

from dep_crawler.language_map import DEFAULT_LANGUAGE, classify, extension_of
from dep_crawler.models import Language


def test_known_extensions():
    assert classify("src/main.rs") == Language.RUST
    assert classify("include/vec.hpp") == Language.C_FAMILY
    assert classify("web/App.tsx") == Language.JAVASCRIPT_FAMILY
    assert classify("cmd/server.go") == Language.GO
    assert classify("pkg/mod.py") == Language.PYTHON
    assert classify("Main.java") == Language.JAVA
    assert classify("index.php") == Language.PHP
    assert classify("app.rb") == Language.RUBY


def test_extension_is_case_insensitive():
    assert classify("LIB.RS") == Language.RUST
    assert classify("Widget.JSX") == Language.JAVASCRIPT_FAMILY


def test_unknown_extension_falls_back():
    assert DEFAULT_LANGUAGE == Language.RUST
    assert classify("notes.unknown") == Language.RUST
    assert classify("Makefile") == Language.RUST
    assert classify("build.gradle", default=Language.JAVA) == Language.JAVA


def test_extension_of():
    assert extension_of("a/b/c.Py") == ".py"
    assert extension_of("Makefile") == ""
    assert extension_of(".gitignore") == ".gitignore"
    assert extension_of("dir.v1/file") == ""
    assert extension_of("archive.tar.gz") == ".gz"


def test_display_names():
    assert Language.C_FAMILY.display_name == "C/C++"
    assert Language.PHP.display_name == "PHP"
