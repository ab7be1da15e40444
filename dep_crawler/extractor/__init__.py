"""Analyzer registry: one line-oriented analyzer per supported language."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer
from dep_crawler.extractor.c_analyzer import CFamilyAnalyzer
from dep_crawler.extractor.go_analyzer import GoAnalyzer
from dep_crawler.extractor.java_analyzer import JavaAnalyzer
from dep_crawler.extractor.js_analyzer import JavaScriptAnalyzer
from dep_crawler.extractor.php_analyzer import PhpAnalyzer
from dep_crawler.extractor.python_analyzer import PythonAnalyzer
from dep_crawler.extractor.ruby_analyzer import RubyAnalyzer
from dep_crawler.extractor.rust_analyzer import RustAnalyzer
from dep_crawler.models import Language

_ANALYZERS: dict[Language, BaseAnalyzer] = {
    Language.RUST: RustAnalyzer(),
    Language.C_FAMILY: CFamilyAnalyzer(),
    Language.JAVASCRIPT_FAMILY: JavaScriptAnalyzer(),
    Language.GO: GoAnalyzer(),
    Language.PYTHON: PythonAnalyzer(),
    Language.JAVA: JavaAnalyzer(),
    Language.PHP: PhpAnalyzer(),
    Language.RUBY: RubyAnalyzer(),
}


def get_analyzer(language: Language) -> BaseAnalyzer:
    """Get the analyzer for a language."""
    return _ANALYZERS[language]


__all__ = [
    "BaseAnalyzer",
    "CFamilyAnalyzer",
    "GoAnalyzer",
    "JavaAnalyzer",
    "JavaScriptAnalyzer",
    "PhpAnalyzer",
    "PythonAnalyzer",
    "RubyAnalyzer",
    "RustAnalyzer",
    "get_analyzer",
]
