"""Pattern library: compiled, cached signature rules per (language, layer).

The library is read-only once built. Callers hold a handle and pass it
down to the extractors; nothing reaches for module state from deep call
sites. ``initialize()`` compiles every table up front so a bad pattern
fails at startup, and ``teardown()`` drops the compiled matchers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from dep_crawler.errors import PatternCompileError
from dep_crawler.models import Language, Layer
from dep_crawler.patterns.tables import (
    CALL_KEYWORDS,
    CALL_SITE_PATTERN,
    PATTERNS,
    STRING_LITERAL_PATTERN,
    PatternRule,
)

logger = logging.getLogger(__name__)

PatternTables = dict[Language, dict[Layer, tuple[PatternRule, ...]]]


@dataclass(frozen=True)
class CompiledRule:
    rule: PatternRule
    regex: re.Pattern[str]


@dataclass(frozen=True)
class MatcherSet:
    """Ordered compiled rules for one (language, layer) pair."""
    language: Language
    layer: Layer
    rules: tuple[CompiledRule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class PatternMatch:
    """Captures of the first rule that matched a line."""
    kind: str
    line: str
    groups: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.groups.get(name, default)

    def __getitem__(self, name: str) -> str:
        return self.groups[name]


class PatternLibrary:
    """Compiled matcher sets, built at most once per (language, layer)."""

    def __init__(self, tables: PatternTables | None = None):
        self._tables = PATTERNS if tables is None else tables
        self._compiled: dict[tuple[Language, Layer], MatcherSet] = {}
        self._call_site: re.Pattern[str] | None = None
        self._string_literal: re.Pattern[str] | None = None
        self._initialized = False
        self.compile_count = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> PatternLibrary:
        """Compile every table now. Raises PatternCompileError on a bad rule."""
        if self._initialized:
            return self
        for language, layers in self._tables.items():
            for layer in layers:
                self.compile(language, layer)
        self._compile_scanners()
        self._initialized = True
        logger.debug("Pattern library ready: %d matcher sets", len(self._compiled))
        return self

    def teardown(self) -> None:
        self._compiled.clear()
        self._call_site = None
        self._string_literal = None
        self._initialized = False

    def compile(self, language: Language, layer: Layer) -> MatcherSet:
        key = (language, layer)
        cached = self._compiled.get(key)
        if cached is not None:
            return cached

        compiled: list[CompiledRule] = []
        for rule in self._tables.get(language, {}).get(layer, ()):
            try:
                regex = re.compile(rule.pattern)
            except re.error as e:
                raise PatternCompileError(language.value, layer.name, rule.pattern, str(e)) from e
            compiled.append(CompiledRule(rule=rule, regex=regex))

        matcher_set = MatcherSet(language=language, layer=layer, rules=tuple(compiled))
        self._compiled[key] = matcher_set
        self.compile_count += 1
        return matcher_set

    @staticmethod
    def apply(matcher_set: MatcherSet, line: str) -> PatternMatch | None:
        """Return the captures of the first matching rule, or None."""
        for compiled in matcher_set.rules:
            m = compiled.regex.match(line)
            if m is None:
                continue
            groups = {
                name: value.strip()
                for name, value in m.groupdict().items()
                if value and value.strip()
            }
            return PatternMatch(kind=compiled.rule.kind, line=line, groups=groups)
        return None

    def find_calls(self, line: str) -> list[str]:
        """Callee names of every `name(` call site on *line*, in order."""
        if self._call_site is None:
            self._compile_scanners()
        text = self._string_literal.sub('""', line)
        return [
            m.group("name")
            for m in self._call_site.finditer(text)
            if m.group("name") not in CALL_KEYWORDS
        ]

    def _compile_scanners(self) -> None:
        try:
            self._call_site = re.compile(CALL_SITE_PATTERN)
            self._string_literal = re.compile(STRING_LITERAL_PATTERN)
        except re.error as e:
            raise PatternCompileError("*", "METHOD", CALL_SITE_PATTERN, str(e)) from e


_default_library: PatternLibrary | None = None


def default_library() -> PatternLibrary:
    """Process-wide library for outer layers (CLI, pipeline). Built on first use."""
    global _default_library
    if _default_library is None:
        _default_library = PatternLibrary().initialize()
    return _default_library


__all__ = [
    "CompiledRule",
    "MatcherSet",
    "PatternLibrary",
    "PatternMatch",
    "PatternRule",
    "default_library",
]
