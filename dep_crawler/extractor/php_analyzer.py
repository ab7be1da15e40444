"""PHP analyzer: require/include/use/namespace, class/interface/trait, functions."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer, split_default
from dep_crawler.models import Language, Parameter


class PhpAnalyzer(BaseAnalyzer):
    language = Language.PHP

    def parse_parameter(self, text: str) -> Parameter | None:
        """`Type $name = default`; the `$` sigil is dropped from the name."""
        decl, default = split_default(text)
        dollar = decl.find("$")
        if dollar < 0:
            return Parameter(name=decl, default_value=default)
        type_text = decl[:dollar].rstrip("&. ").strip()
        # promoted constructor properties carry a visibility keyword
        words = [w for w in type_text.split() if w not in ("public", "private", "protected", "readonly")]
        return Parameter(
            name=decl[dollar + 1:].strip(),
            type=" ".join(words),
            default_value=default,
        )
