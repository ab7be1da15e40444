"""C and C++ analyzer: #include, struct/class/enum, free and Type:: functions."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer, split_default, split_type_and_name
from dep_crawler.models import Language, Parameter


class CFamilyAnalyzer(BaseAnalyzer):
    language = Language.C_FAMILY
    return_type_modifiers = frozenset({
        "static", "inline", "extern", "virtual", "explicit", "constexpr", "friend",
    })

    def parse_parameter(self, text: str) -> Parameter | None:
        decl, default = split_default(text)
        if decl in ("void", "..."):
            return None
        type_text, name = split_type_and_name(decl)
        return Parameter(name=name, type=type_text, default_value=default)
