"""Go analyzer: imports (single and grouped), struct/interface types, funcs."""

from __future__ import annotations

import re

from dep_crawler.extractor.base import BaseAnalyzer, split_top_level
from dep_crawler.models import ExtractedDependency, Layer, Language, Parameter
from dep_crawler.patterns import PatternLibrary

_IMPORT_BLOCK_START = re.compile(r"^\s*import\s*\(\s*$")
_IMPORT_BLOCK_LINE = re.compile(r"^\s*(?:[\w.]+\s+)?\"(?P<target>[^\"]+)\"")


class GoAnalyzer(BaseAnalyzer):
    language = Language.GO

    def extract_modules(
        self, file_path: str, text: str, library: PatternLibrary,
    ) -> list[ExtractedDependency]:
        matchers = library.compile(self.language, Layer.MODULE)
        records: list[ExtractedDependency] = []
        in_block = False

        for line in text.splitlines():
            if in_block:
                if line.strip().startswith(")"):
                    in_block = False
                    continue
                m = _IMPORT_BLOCK_LINE.match(line)
                if m:
                    records.append(self._module_record(file_path, m.group("target")))
                continue
            if _IMPORT_BLOCK_START.match(line):
                in_block = True
                continue
            match = library.apply(matchers, line)
            if match is not None and match.get("target"):
                records.append(self._module_record(file_path, match["target"]))

        return records

    def parse_parameters(self, text: str) -> list[Parameter]:
        """`a, b int, c string`: untyped names take the next declared type."""
        params: list[Parameter] = []
        pending: list[Parameter] = []
        for part in split_top_level(text):
            param = self.parse_parameter(part)
            params.append(param)
            if not param.type:
                pending.append(param)
                continue
            for earlier in pending:
                earlier.type = param.type
            pending.clear()
        return params

    def parse_parameter(self, text: str) -> Parameter:
        name, _, type_text = text.partition(" ")
        return Parameter(name=name.strip(), type=type_text.strip())

    def normalize_prefix(self, prefix: str | None) -> str | None:
        """The receiver `(s *Server)` is recorded as its type, `*Server`."""
        if not prefix:
            return None
        words = prefix.split()
        return words[-1] if words else None
