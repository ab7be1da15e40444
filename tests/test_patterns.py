"""Tests for the pattern library."""

import pytest

from dep_crawler.errors import PatternCompileError
from dep_crawler.models import Language, Layer
from dep_crawler.patterns import PatternLibrary, default_library
from dep_crawler.patterns.tables import PATTERNS, PatternRule


def test_initialize_compiles_every_table():
    library = PatternLibrary().initialize()
    assert library.initialized
    expected = sum(len(layers) for layers in PATTERNS.values())
    assert library.compile_count == expected


def test_compile_is_cached_per_language_and_layer():
    library = PatternLibrary()
    first = library.compile(Language.GO, Layer.MODULE)
    second = library.compile(Language.GO, Layer.MODULE)
    assert first is second
    assert library.compile_count == 1


def test_bad_pattern_is_fatal():
    tables = {Language.RUST: {Layer.MODULE: (PatternRule("import", r"(unclosed"),)}}
    with pytest.raises(PatternCompileError) as exc:
        PatternLibrary(tables).initialize()
    assert exc.value.language == "rust"
    assert exc.value.layer == "MODULE"


def test_teardown_drops_compiled_matchers():
    library = PatternLibrary().initialize()
    count = library.compile_count
    library.teardown()
    assert not library.initialized
    library.compile(Language.RUST, Layer.METHOD)
    assert library.compile_count == count + 1


def test_apply_first_rule_wins():
    library = PatternLibrary()
    matchers = library.compile(Language.RUST, Layer.STRUCTURE)
    match = library.apply(matchers, "impl Display for Point {")
    assert match is not None
    assert match.kind == "impl"
    assert match["name"] == "Point"
    assert match.get("traits") == "Display"


def test_apply_unmatched_line_is_none():
    library = PatternLibrary()
    matchers = library.compile(Language.PYTHON, Layer.MODULE)
    assert library.apply(matchers, "x = 1") is None


def test_apply_drops_empty_groups():
    library = PatternLibrary()
    matchers = library.compile(Language.PYTHON, Layer.STRUCTURE)
    match = library.apply(matchers, "class Plain:")
    assert match["name"] == "Plain"
    assert match.get("base") is None


def test_module_targets_per_language():
    library = PatternLibrary()
    cases = [
        (Language.RUST, "pub use crate::net::Socket;", "crate::net::Socket"),
        (Language.C_FAMILY, '#include "parser.h"', "parser.h"),
        (Language.JAVASCRIPT_FAMILY, "const fs = require('fs');", "fs"),
        (Language.GO, 'import log "github.com/x/log"', "github.com/x/log"),
        (Language.PYTHON, "from .models import User", ".models"),
        (Language.JAVA, "import static org.junit.Assert.*;", "org.junit.Assert.*"),
        (Language.PHP, "use App\\Models\\User;", "App\\Models\\User"),
        (Language.RUBY, "require_relative 'lib/store'", "lib/store"),
    ]
    for language, line, target in cases:
        match = library.apply(library.compile(language, Layer.MODULE), line)
        assert match is not None, line
        assert match["target"] == target


def test_find_calls_skips_keywords_and_strings():
    library = PatternLibrary()
    calls = library.find_calls('if (ready) { start(queue, "stop(now)"); }')
    assert calls == ["start"]


def test_find_calls_keeps_method_calls():
    library = PatternLibrary()
    assert library.find_calls("value = obj.compute(x) + helper(y)") == ["compute", "helper"]


def test_default_library_is_shared():
    assert default_library() is default_library()
    assert default_library().initialized
